"""
Operation registry for the GeoNames web service.

Each entry names one remote operation, the query parameters it accepts, and
how its JSON response is reshaped before it reaches the caller. The table is
the external contract with the service: parameter names are sent verbatim.

Service docs: https://www.geonames.org/export/ws-overview.html
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from geonames.exceptions import InvalidOperation


class Shape(Enum):
    """What the caller receives for an operation."""

    DOCUMENT = "document"  # full decoded JSON
    RECORD = "record"  # single value under the envelope key
    RECORDS = "records"  # list under the envelope key, [] when absent
    TEXT = "text"  # raw text on request, otherwise DOCUMENT


@dataclass(frozen=True)
class Operation:
    name: str
    params: tuple[str, ...] = ()
    envelope: str | None = None
    shape: Shape = Shape.DOCUMENT
    coerce_datetime: bool = False
    supported: bool = True

    @property
    def path(self) -> str:
        return f"{self.name}JSON"

    def allowed_params(self) -> tuple[str, ...]:
        """Declared params plus ``username``, deduplicated and sorted.

        Operations without declared params take no query string at all.
        """
        if not self.params:
            return ()
        return tuple(sorted(set(self.params) | {"username"}))


def _op(name: str, params: str = "", **kwargs) -> Operation:
    return Operation(name=name, params=tuple(params.split()), **kwargs)


_BBOX = "north south east west"

_TABLE = [
    # ── Bounding box ─────────────────────────────────────────────────────
    _op(
        "earthquakes",
        f"{_BBOX} date callback minMagnitude maxRows",
        envelope="earthquakes",
        shape=Shape.RECORDS,
        coerce_datetime=True,
    ),
    _op("cities", f"{_BBOX} callback lang maxRows", envelope="geonames", shape=Shape.RECORDS),
    _op(
        "weather",
        f"{_BBOX} callback maxRows",
        envelope="weatherObservations",
        shape=Shape.RECORDS,
        coerce_datetime=True,
    ),
    _op("wikipediaBoundingBox", "south north east west lang maxRows"),
    # ── Elevation ────────────────────────────────────────────────────────
    _op("astergdem", "lat lng"),
    _op("gtopo30", "lat lng"),
    _op("srtm3", "lat lng"),
    # ── Hierarchy ────────────────────────────────────────────────────────
    _op("children", "geonameId maxRows"),
    _op("hierarchy", "geonameId"),
    _op("neighbours", "geonameId"),
    _op("siblings", "geonameId", envelope="geonames", shape=Shape.RECORDS),
    # ── Weather ──────────────────────────────────────────────────────────
    _op(
        "weatherIcao",
        "ICAO callback",
        envelope="weatherObservation",
        shape=Shape.RECORD,
        coerce_datetime=True,
    ),
    _op("findNearByWeather", "lat lng"),
    # ── Countries ────────────────────────────────────────────────────────
    _op("countryInfo", "country lang", envelope="geonames", shape=Shape.RECORDS),
    _op("countryCode", "lat lng type lang radius", shape=Shape.TEXT),
    _op("countrySubdivision", "lat lng lang radius maxRows"),
    # ── Reverse geocoding ────────────────────────────────────────────────
    _op("ocean", "lat lng", envelope="ocean", shape=Shape.RECORD),
    _op("neighbourhood", "lat lng", envelope="neighbourhood", shape=Shape.RECORD),
    _op("timezone", "lat lng radius"),
    _op("findNearby", "lat lng featureClass featureCode radius maxRows style"),
    _op("extendedFindNearby", "lat lng", supported=False),
    _op(
        "findNearbyPlaceName",
        "lat lng radius maxRows style",
        envelope="geonames",
        shape=Shape.RECORDS,
    ),
    _op(
        "findNearbyPostalCodes",
        "lat lng radius maxRows style country localCountry postalcode country radius",
        envelope="postalCodes",
        shape=Shape.RECORDS,
    ),
    _op("findNearbyStreets", "lat lng", envelope="streetSegment", shape=Shape.RECORDS),
    _op("findNearbyStreetsOSM", "lat lng", envelope="streetSegment", shape=Shape.RECORDS),
    _op("findNearbyWikipedia", "lang lat lng maxRows country postalcode country radius"),
    _op("findNearestAddress", "lat lng"),
    _op("findNearestIntersection", "lat lng"),
    _op("findNearestIntersectionOSM", "lat lng"),
    # ── Postal codes ─────────────────────────────────────────────────────
    _op("postalCodeCountryInfo"),
    _op("postalCodeLookup", "postalcode country maxRows callback charset"),
    _op(
        "postalCodeSearch",
        "postalcode postalcode_startsWith placename placename_startsWith country "
        "countryBias maxRows style operator charset isReduced",
    ),
    # ── Search ───────────────────────────────────────────────────────────
    _op(
        "search",
        "q name name_equals name_startsWith maxRows startRow country countryBias "
        "continentCode adminCode1 adminCode2 adminCode3 featureClass featureCode "
        "lang type style isNameRequired tag operator charset",
    ),
    _op("wikipediaSearch", "q title lang maxRows"),
]

OPERATIONS = MappingProxyType({op.name: op for op in _TABLE})


def get_operation(name: str, operations=OPERATIONS) -> Operation:
    """Look up an operation by its service name (e.g. ``findNearby``)."""
    try:
        return operations[name]
    except KeyError:
        raise InvalidOperation(name) from None
