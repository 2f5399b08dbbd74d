#!/usr/bin/env python3
"""
Door Board API Server
---------------------
Minimal HTTP service for the order-management system.

Usage:
    doorboard-server --port 3000
    python -m doorboard.server --config doorboard.yaml

API:
    GET /api/health  → JSON: { status, timestamp, uptime, environment }
    GET /api         → JSON: { name, version, description, endpoints }
"""

import logging
import sys
import time
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse

from flask import Flask, jsonify

from .config import Config, ConfigError

logger = logging.getLogger(__name__)

# Process start, for the uptime counter
START_TIME = time.monotonic()


def uptime_seconds() -> float:
    return round(time.monotonic() - START_TIME, 3)


LOCAL_HOSTS = {"localhost", "127.0.0.1", "0.0.0.0"}


def api_url_is_self(cfg: Config) -> bool:
    """True if the configured order API address is this service's own bind address."""
    url = urlparse(cfg.api_url)
    if url.hostname not in LOCAL_HOSTS | {cfg.host}:
        return False
    port = url.port or (443 if url.scheme == "https" else 80)
    return port == cfg.port


def create_app(config: Optional[Config] = None) -> Flask:
    cfg = config or Config()
    app = Flask(__name__)
    app.config["DOORBOARD"] = cfg

    # ── Routes ───────────────────────────────────────────────────────────

    @app.route("/api/health")
    def health():
        return jsonify({
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": uptime_seconds(),
            "environment": cfg.environment,
        })

    @app.route("/api")
    def info():
        return jsonify({
            "name": cfg.service_name,
            "version": cfg.version,
            "description": cfg.description,
            "endpoints": {
                "health": "/api/health",
                "info": "/api",
            },
        })

    # ── Errors ───────────────────────────────────────────────────────────

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def internal_error(e):
        logger.error(f"Unhandled server error: {e}")
        return jsonify({"error": "Internal server error"}), 500

    return app


# ── Main ─────────────────────────────────────────────────────────────────────

def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description="Door Board API Server")
    parser.add_argument("--host", default=None,
                        help="Bind address (use 0.0.0.0 to expose on network)")
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--config", help="Path to doorboard.yaml")
    args = parser.parse_args(argv)

    try:
        cfg = Config.load(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.host is not None:
        cfg.host = args.host
    if args.port is not None:
        cfg.port = args.port

    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s [doorboard] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    if api_url_is_self(cfg):
        logger.warning(f"api_url {cfg.api_url} points at this service; set api_url or --port")

    app = create_app(cfg)
    logger.info(f"Server is running on: http://{cfg.host}:{cfg.port}")
    logger.info(f"Health check: http://{cfg.host}:{cfg.port}/api/health")
    logger.info(f"API info: http://{cfg.host}:{cfg.port}/api")
    app.run(host=cfg.host, port=cfg.port, debug=False, threaded=True)


if __name__ == "__main__":
    main()
