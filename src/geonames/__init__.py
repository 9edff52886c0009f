"""Client for the GeoNames geographical web services."""

from geonames.client import GeoNamesClient
from geonames.config import ClientConfig, load_config
from geonames.exceptions import (
    ConfigError,
    DecodeError,
    GeoNamesError,
    InvalidOperation,
    NotImplementedOperation,
    RemoteError,
    TransportError,
)
from geonames.registry import OPERATIONS, Operation, Shape

__version__ = "1.0.0"

__all__ = [
    "OPERATIONS",
    "ClientConfig",
    "ConfigError",
    "DecodeError",
    "GeoNamesClient",
    "GeoNamesError",
    "InvalidOperation",
    "NotImplementedOperation",
    "Operation",
    "RemoteError",
    "Shape",
    "TransportError",
    "load_config",
]
