"""Tests for config loading."""

import pytest
from pydantic import ValidationError

from geonames.config import ClientConfig, default_config, load_config
from geonames.exceptions import ConfigError


def test_defaults():
    config = load_config(environ={})
    assert config.host == "ws.geonames.org"
    assert config.username is None
    assert config.timezone == "UTC"
    assert config.time_format == "%Y-%m-%d %H:%M:%S %z"
    assert config.timeout is None
    assert ClientConfig().model_dump() == default_config()


def test_yaml_section(tmp_path):
    path = tmp_path / "geonames.yaml"
    path.write_text("geonames:\n  username: demo\n  timeout: 12.5\n")
    config = load_config(path, environ={})
    assert config.username == "demo"
    assert config.timeout == 12.5


def test_yaml_top_level(tmp_path):
    path = tmp_path / "geonames.yaml"
    path.write_text("host: api.geonames.org\ntimezone: Europe/Zurich\n")
    config = load_config(path, environ={})
    assert config.host == "api.geonames.org"
    assert config.timezone == "Europe/Zurich"


def test_precedence(tmp_path):
    path = tmp_path / "geonames.yaml"
    path.write_text("geonames:\n  username: from-file\n  host: file.example\n")
    environ = {"GEONAMES_USERNAME": "from-env", "GEONAMES_TIMEOUT": "3"}
    config = load_config(path, environ=environ, host=None, username="from-flag")
    assert config.username == "from-flag"
    assert config.host == "file.example"
    assert config.timeout == 3.0


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml", environ={})


def test_invalid_yaml(tmp_path):
    path = tmp_path / "geonames.yaml"
    path.write_text("geonames: [unclosed\n")
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_unknown_option(tmp_path):
    path = tmp_path / "geonames.yaml"
    path.write_text("geonames:\n  password: hunter2\n")
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_non_mapping_file(tmp_path):
    path = tmp_path / "geonames.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_host_normalization():
    assert ClientConfig(host="https://api.geonames.org/").host == "api.geonames.org"
    with pytest.raises(ValidationError):
        ClientConfig(host="http://")


def test_blank_username_is_none():
    assert ClientConfig(username="  ").username is None


def test_config_is_frozen():
    config = ClientConfig(username="demo")
    with pytest.raises(ValidationError):
        config.username = "other"
