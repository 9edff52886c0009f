"""
Error types raised by the GeoNames client.

Every failure propagates to the caller of the operation method. Nothing is
retried, and nothing is swallowed on the way up.
"""


class GeoNamesError(Exception):
    """Base class for all client errors."""


class ConfigError(GeoNamesError):
    """Raised when a config file or value cannot be used."""


class InvalidOperation(GeoNamesError, KeyError):
    """Raised for an operation name that is not in the registry."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown GeoNames operation: {self.name!r}"


class NotImplementedOperation(GeoNamesError, NotImplementedError):
    """Raised for operations whose response format is not supported."""

    def __init__(self, name: str, reason: str = "XML queries haven't been implemented."):
        super().__init__(f"{name}: {reason}")
        self.name = name


class TransportError(GeoNamesError):
    """Raised when the HTTP request itself fails."""

    def __init__(self, message: str, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DecodeError(GeoNamesError, ValueError):
    """Raised when a response body is not the JSON we expected."""


class RemoteError(GeoNamesError):
    """Raised when the service answers with a ``status`` error envelope.

    ``value`` is the GeoNames error code (10 = invalid user, 18-20 = credit
    limits, ...) and ``status`` the raw envelope payload.
    """

    def __init__(self, status: dict):
        self.status = status
        self.message = str(status.get("message", "")) if isinstance(status, dict) else str(status)
        self.value = status.get("value") if isinstance(status, dict) else None
        super().__init__(f"GeoNames error {self.value}: {self.message}")
