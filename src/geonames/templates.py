"""
URL templates for GeoNames operations.

A template is built once per operation and expanded per call. Expansion
follows optional query semantics: a parameter shows up in the query string
only when the caller gave it a value, and list values become repeated
``key=value`` pairs (``country=FR&country=GP``).
"""

import logging
from collections.abc import Iterable, Mapping
from urllib.parse import quote, urlencode

from geonames.registry import Operation

logger = logging.getLogger(__name__)


class QueryTemplate:
    """Reusable ``http://{host}/<op>JSON{?a,b,c}`` template."""

    def __init__(self, path: str, params: tuple[str, ...] = ()):
        self.path = path
        self.params = params
        self._allowed = frozenset(params)

    @property
    def text(self) -> str:
        base = f"http://{{host}}/{self.path}"
        if not self.params:
            return base
        return base + "{?" + ",".join(self.params) + "}"

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"QueryTemplate({self.text!r})"

    def expand(self, values: Mapping) -> str:
        """Substitute ``values`` into the template.

        ``host`` is required. Keys that are not template parameters are
        dropped; empty values (None, "", []) are omitted entirely.
        """
        host = values.get("host")
        if not host:
            raise ValueError("Cannot expand a GeoNames URL without a host")

        dropped = sorted(k for k in values if k != "host" and k not in self._allowed)
        if dropped:
            logger.debug("Dropping parameters not accepted by %s: %s", self.path, ", ".join(dropped))

        pairs = []
        for name in self.params:
            for item in _iter_values(values.get(name)):
                pairs.append((name, _format_value(item)))

        url = f"http://{host}/{self.path}"
        if pairs:
            url += "?" + urlencode(pairs, quote_via=quote)
        return url


def build_template(operation: Operation) -> QueryTemplate:
    return QueryTemplate(operation.path, operation.allowed_params())


def build_templates(operations: Mapping[str, Operation]) -> dict[str, QueryTemplate]:
    """Build one template per registered operation."""
    return {name: build_template(op) for name, op in operations.items()}


def merge_parameters(supplied: Mapping, host: str, username: str | None = None) -> dict:
    """Merge config defaults over caller-supplied parameters.

    Config ``host`` and ``username`` win over caller values for the same
    keys; every other caller value passes through untouched.
    """
    merged = dict(supplied)
    merged["host"] = host
    if username:
        merged["username"] = username
    return merged


def _iter_values(value) -> Iterable:
    if value is None or value == "":
        return ()
    if isinstance(value, Mapping):
        raise TypeError(f"Cannot send a mapping as a query value: {value!r}")
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return (value,)
    return [v for v in value if v is not None and v != ""]


def _format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
