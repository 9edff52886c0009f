"""
Client configuration.

Resolution order (later wins):
  1. built-in defaults (``default_config()``)
  2. YAML config file, either top level or under a ``geonames:`` key
  3. ``GEONAMES_*`` environment variables
  4. explicit keyword overrides
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from geonames.exceptions import ConfigError
from geonames.transport import USER_AGENT

DEFAULT_HOST = "ws.geonames.org"
DEFAULT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S %z"

_ENV_VARS = {
    "host": "GEONAMES_HOST",
    "username": "GEONAMES_USERNAME",
    "timezone": "GEONAMES_TIMEZONE",
    "time_format": "GEONAMES_TIME_FORMAT",
    "timeout": "GEONAMES_TIMEOUT",
}


def default_config() -> dict:
    """Return a fresh default config dict."""
    return {
        "host": DEFAULT_HOST,
        "username": None,
        "timezone": "UTC",
        "time_format": DEFAULT_TIME_FORMAT,
        "timeout": None,
        "user_agent": USER_AGENT,
    }


class ClientConfig(BaseModel):
    """Immutable options for one client instance.

    ``username`` is not checked locally; the service rejects calls that need
    it. ``timezone`` and ``time_format`` are only used to parse observation
    ``datetime`` fields.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    host: str = DEFAULT_HOST
    username: str | None = None
    timezone: str = "UTC"
    time_format: str = DEFAULT_TIME_FORMAT
    timeout: float | None = None
    user_agent: str = USER_AGENT

    @field_validator("host")
    @classmethod
    def _strip_scheme(cls, value: str) -> str:
        value = value.strip()
        for prefix in ("http://", "https://"):
            if value.startswith(prefix):
                value = value[len(prefix) :]
        value = value.rstrip("/")
        if not value:
            raise ValueError("host must not be empty")
        return value

    @field_validator("username")
    @classmethod
    def _blank_username(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value


def read_config_file(config_path: str | Path) -> dict:
    """Load a YAML config file and return the GeoNames section as a dict."""
    path = Path(config_path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    section = data.get("geonames", data)
    if not isinstance(section, dict):
        raise ConfigError(f"'geonames' section in {path} must be a mapping")
    return section


def _env_overrides(environ) -> dict:
    values = {}
    for key, var in _ENV_VARS.items():
        raw = environ.get(var)
        if raw:
            values[key] = raw
    return values


def load_config(config_path: str | Path | None = None, environ=None, **overrides) -> ClientConfig:
    """Build a ClientConfig from defaults, a YAML file, env vars and overrides.

    ``None`` overrides are ignored so CLI flags that were not given do not
    clobber file or env values.
    """
    environ = os.environ if environ is None else environ
    values = default_config()
    if config_path is not None:
        values.update(read_config_file(config_path))
    values.update(_env_overrides(environ))
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ClientConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid GeoNames config: {e}") from e
