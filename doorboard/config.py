# Door board configuration
# Defaults below; override via doorboard.yaml, --config, or environment.

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, fields
from typing import Optional

CONFIG_PATH = Path("doorboard.yaml")


class ConfigError(Exception):
    """Raised when configuration is invalid or unreadable."""
    pass


@dataclass
class Config:
    """Runtime configuration for the API clients and the HTTP service."""

    # Remote order-management API. The default matches the order backend's own
    # port; when the health service below runs on the same host, set one of them.
    api_url: str = "http://localhost:3000/api"
    request_timeout: float = 30.0
    board_page_size: int = 100

    # HTTP service
    host: str = "127.0.0.1"
    port: int = 3000
    environment: str = "development"
    log_level: str = "INFO"

    # Reported by GET /api
    service_name: str = "Door Manufacturing System API"
    version: str = "1.0.0"
    description: str = "Order tracking for metal door manufacturing"

    def apply_env(self, environ=None):
        """Environment variables win over file values."""
        env = os.environ if environ is None else environ
        if env.get("DOORBOARD_API_URL"):
            self.api_url = env["DOORBOARD_API_URL"]
        if env.get("PORT"):
            try:
                self.port = int(env["PORT"])
            except ValueError:
                raise ConfigError(f"PORT must be an integer, got: {env['PORT']!r}")
        if env.get("DOORBOARD_ENV"):
            self.environment = env["DOORBOARD_ENV"]
        if env.get("LOG_LEVEL"):
            self.log_level = env["LOG_LEVEL"].upper()

    @classmethod
    def load(cls, path: Optional[str] = None, environ=None) -> "Config":
        """Load config from YAML file, falling back to defaults if it is missing."""
        cfg_path = Path(path) if path else CONFIG_PATH
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Cannot read config {cfg_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"Config {cfg_path} must be a mapping")
            known = {f.name for f in fields(cls)}
            cfg = cls(**{k: v for k, v in data.items() if k in known})
        elif path:
            raise ConfigError(f"Config file not found: {cfg_path}")
        else:
            cfg = cls()
        cfg.apply_env(environ)
        return cfg
