"""
Response post-processing for GeoNames operations.

Every JSON response goes through the same steps, in order:

1. ``check_status``: a top-level ``status`` envelope means the call failed.
2. ``unwrap``: return the payload under the operation's envelope key.
3. ``coerce_datetimes``: turn observation ``datetime`` strings into aware
   ``datetime`` objects using the client's timezone label and format.
"""

import json
import re
from datetime import datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from geonames.exceptions import DecodeError, RemoteError
from geonames.registry import Operation, Shape

_UTC_LABELS = frozenset({"UTC", "GMT", "Z"})
_ZONE_DIRECTIVE = re.compile(r"\s*%[zZ]")


def decode_json(body: bytes | str):
    """Parse a response body, raising DecodeError on invalid JSON."""
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"Response is not valid JSON: {e}") from e


def check_status(document):
    """Raise RemoteError if the service returned a status envelope."""
    if isinstance(document, dict) and "status" in document:
        raise RemoteError(document["status"])
    return document


def unwrap(operation: Operation, document):
    """Return the payload the caller sees for ``operation``."""
    shape = operation.shape
    if shape in (Shape.DOCUMENT, Shape.TEXT) or operation.envelope is None:
        return document

    payload = document.get(operation.envelope) if isinstance(document, dict) else None
    if shape is Shape.RECORDS:
        if payload is None:
            return []
        # a lone record where a list was expected
        if isinstance(payload, dict):
            return [payload]
        return payload
    if shape is Shape.RECORD:
        if payload is None:
            raise DecodeError(
                f"{operation.name} response has no {operation.envelope!r} field"
            )
        return payload
    raise ValueError(f"Unhandled response shape: {shape}")


def _resolve_zone(label: str):
    if label.upper() in _UTC_LABELS:
        return dt_timezone.utc
    try:
        return ZoneInfo(label)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def parse_datetime(text: str, timezone: str = "UTC", time_format: str = "%Y-%m-%d %H:%M:%S %z") -> datetime:
    """Parse a service timestamp (local text without zone) into an aware datetime.

    Named zones (``UTC``, ``Europe/Zurich``) are attached directly; numeric
    offsets (``+0100``) are appended to the text and parsed with ``%z``.
    """
    time_format = time_format.replace("%T", "%H:%M:%S")
    zone = _resolve_zone(timezone)
    try:
        if zone is None:
            return datetime.strptime(f"{text} {timezone}", time_format)
        naive = datetime.strptime(text, _ZONE_DIRECTIVE.sub("", time_format))
    except ValueError as e:
        raise DecodeError(f"Cannot parse datetime {text!r} with {time_format!r}: {e}") from e
    return naive.replace(tzinfo=zone)


def coerce_datetime(record, timezone: str = "UTC", time_format: str = "%Y-%m-%d %H:%M:%S %z"):
    """Replace a string ``datetime`` field in place and return the record."""
    if isinstance(record, dict):
        value = record.get("datetime")
        if isinstance(value, str) and value:
            record["datetime"] = parse_datetime(value, timezone, time_format)
    return record


def coerce_datetimes(payload, timezone: str, time_format: str):
    if isinstance(payload, list):
        return [coerce_datetime(item, timezone, time_format) for item in payload]
    return coerce_datetime(payload, timezone, time_format)


def postprocess(operation: Operation, document, config):
    """Run status check, unwrapping and datetime coercion for one response."""
    check_status(document)
    payload = unwrap(operation, document)
    if operation.coerce_datetime:
        payload = coerce_datetimes(payload, config.timezone, config.time_format)
    return payload
