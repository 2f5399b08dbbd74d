"""Tests for configuration loading."""
import textwrap

import pytest

from doorboard.config import Config, ConfigError
from doorboard.services import connect


def test_defaults_when_no_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = Config.load(environ={})
    assert cfg.port == 3000
    assert cfg.api_url == "http://localhost:3000/api"
    assert cfg.environment == "development"


def test_yaml_values_and_unknown_keys(tmp_path):
    path = tmp_path / "doorboard.yaml"
    path.write_text(textwrap.dedent("""
        api_url: http://orders.internal/api
        port: 8080
        board_page_size: 50
        something_else: ignored
    """))
    cfg = Config.load(str(path), environ={})
    assert cfg.api_url == "http://orders.internal/api"
    assert cfg.port == 8080
    assert cfg.board_page_size == 50
    assert not hasattr(cfg, "something_else")


def test_env_overrides_file(tmp_path):
    path = tmp_path / "doorboard.yaml"
    path.write_text("port: 8080\nenvironment: staging\n")
    cfg = Config.load(str(path), environ={
        "PORT": "9000",
        "DOORBOARD_ENV": "production",
        "DOORBOARD_API_URL": "http://prod/api",
        "LOG_LEVEL": "debug",
    })
    assert cfg.port == 9000
    assert cfg.environment == "production"
    assert cfg.api_url == "http://prod/api"
    assert cfg.log_level == "DEBUG"


def test_bad_port_env():
    with pytest.raises(ConfigError):
        Config().apply_env({"PORT": "http"})


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigError):
        Config.load(str(tmp_path / "nope.yaml"), environ={})


def test_non_mapping_file(tmp_path):
    path = tmp_path / "doorboard.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        Config.load(str(path), environ={})


def test_invalid_yaml(tmp_path):
    path = tmp_path / "doorboard.yaml"
    path.write_text("port: [unclosed\n")
    with pytest.raises(ConfigError):
        Config.load(str(path), environ={})


def test_connect_wires_session_and_page_size():
    cfg = Config(api_url="http://api.test/api/", board_page_size=40)
    services = connect(cfg)
    assert services.client.base_url == "http://api.test/api"
    assert services.client.session is services.auth
    assert services.orders.client is services.client
    assert services.board().page_size == 40
