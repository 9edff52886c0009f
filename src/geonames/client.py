"""
Client for the GeoNames web service.

One method per remote operation. Parameters are passed as keyword arguments
(or a mapping, for names that are not valid identifiers) using the service's
own parameter names; list values are sent as repeated parameters.

    client = GeoNamesClient(username="demo")
    client.search(q="london", maxRows=10, country=["GB", "CA"])
    client.ocean(lat=40.78343, lng=-43.96625)

Service docs: https://www.geonames.org/export/ws-overview.html
"""

from collections.abc import Mapping

from geonames.config import ClientConfig
from geonames.exceptions import NotImplementedOperation
from geonames.registry import OPERATIONS, Operation, get_operation
from geonames.responses import decode_json, postprocess
from geonames.templates import build_templates, merge_parameters
from geonames.transport import UrllibTransport


def _merge_args(parameters: Mapping | None, params: dict) -> dict:
    merged = dict(parameters or {})
    merged.update(params)
    return merged


class GeoNamesClient:
    """Client for the GeoNames JSON web services."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport=None,
        operations: Mapping[str, Operation] = OPERATIONS,
        **options,
    ):
        options = {k: v for k, v in options.items() if v is not None}
        if config is None:
            config = ClientConfig(**options)
        elif options:
            config = ClientConfig(**{**config.model_dump(), **options})
        self.config = config
        self.operations = operations
        self.templates = build_templates(operations)
        self.transport = transport or UrllibTransport(
            timeout=config.timeout, user_agent=config.user_agent
        )

    # ── Generic dispatch ─────────────────────────────────────────────────

    def operation(self, name: str) -> Operation:
        return get_operation(name, self.operations)

    def url_for(self, name: str, parameters: Mapping | None = None, /, **params) -> str:
        """Expand the request URL for ``name`` without sending it."""
        get_operation(name, self.operations)
        values = merge_parameters(
            _merge_args(parameters, params), self.config.host, self.config.username
        )
        return self.templates[name].expand(values)

    def query(self, name: str, parameters: Mapping | None = None, /, *, raw: bool = False, **params):
        """Run operation ``name`` and return its post-processed result.

        With ``raw=True`` the response text is returned as-is: no JSON
        decoding, no status check, no unwrapping.
        """
        operation = get_operation(name, self.operations)
        if not operation.supported:
            raise NotImplementedOperation(name)

        url = self.url_for(name, parameters, **params)
        if raw:
            return self.transport.fetch_text(url)

        document = decode_json(self.transport.fetch(url))
        return postprocess(operation, document, self.config)

    # ── Bounding box queries ─────────────────────────────────────────────

    def earthquakes(self, parameters: Mapping | None = None, /, **params) -> list[dict]:
        """Recent earthquakes in a bounding box, ordered by magnitude.

        north, south, east, west: bounding box
        date: 'yyyy-MM-dd' (optional)
        minMagnitude, maxRows (default 10), callback: optional

        Each record's ``datetime`` is returned as an aware datetime.

            client.earthquakes(north=44.1, south=-9.9, east=-22.4, west=55.2)
        """
        return self.query("earthquakes", parameters, **params)

    def cities(self, parameters: Mapping | None = None, /, **params) -> list[dict]:
        """Cities and placenames in a bounding box, ordered by relevancy.

        Placenames close together are filtered out and only the larger name
        is included. Params: north, south, east, west, lang, maxRows, callback.
        """
        return self.query("cities", parameters, **params)

    def weather(self, parameters: Mapping | None = None, /, **params) -> list[dict]:
        """Weather stations in a bounding box with their latest observation."""
        return self.query("weather", parameters, **params)

    def wikipedia_bounding_box(self, parameters: Mapping | None = None, /, **params):
        """Wikipedia entries within a bounding box (north, south, east, west, lang, maxRows)."""
        return self.query("wikipediaBoundingBox", parameters, **params)

    # ── Elevation ────────────────────────────────────────────────────────

    def astergdem(self, parameters: Mapping | None = None, /, **params):
        """Aster Global Digital Elevation Model, sample area ca 30m x 30m.

        Ocean areas are masked as "no data" with a value of -9999.
        """
        return self.query("astergdem", parameters, **params)

    def gtopo30(self, parameters: Mapping | None = None, /, **params):
        """GTOPO30 elevation, 30 arc second grid (ca 1km). Ocean is -9999."""
        return self.query("gtopo30", parameters, **params)

    def srtm3(self, parameters: Mapping | None = None, /, **params):
        """SRTM3 elevation, 3 arc second grid (ca 90m). Ocean is -32768."""
        return self.query("srtm3", parameters, **params)

    # ── Place hierarchy ──────────────────────────────────────────────────

    def children(self, parameters: Mapping | None = None, /, **params):
        """Administrative children of a geonameId (maxRows defaults to 200)."""
        return self.query("children", parameters, **params)

    def hierarchy(self, parameters: Mapping | None = None, /, **params):
        """All GeoNames higher up in the hierarchy, continent first."""
        return self.query("hierarchy", parameters, **params)

    def neighbours(self, parameters: Mapping | None = None, /, **params):
        """Neighbours of a toponym (currently countries only)."""
        return self.query("neighbours", parameters, **params)

    def siblings(self, parameters: Mapping | None = None, /, **params) -> list[dict]:
        """Toponyms with the same administrative level and the same parent."""
        return self.query("siblings", parameters, **params)

    # ── Weather ──────────────────────────────────────────────────────────

    def weather_icao(self, parameters: Mapping | None = None, /, **params) -> dict:
        """Latest weather observation for an ICAO station code.

            client.weather_icao(ICAO="LSZH")
        """
        return self.query("weatherIcao", parameters, **params)

    def find_near_by_weather(self, parameters: Mapping | None = None, /, **params):
        """Weather station closest to lat/lng with its latest observation."""
        return self.query("findNearByWeather", parameters, **params)

    # ── Countries ────────────────────────────────────────────────────────

    def country_info(self, parameters: Mapping | None = None, /, **params) -> list[dict]:
        """Capital, population, area and bounding box per country (country, lang)."""
        return self.query("countryInfo", parameters, **params)

    def country_code(self, parameters: Mapping | None = None, /, **params):
        """ISO country code of a point (lat, lng, lang, radius).

        With ``type="xml"`` the raw XML document is returned as text.
        Otherwise JSON is always requested and returned decoded.
        """
        values = _merge_args(parameters, params)
        if str(values.get("type") or "").lower() == "xml":
            return self.query("countryCode", values, raw=True)
        values["type"] = "JSON"
        return self.query("countryCode", values)

    def country_subdivision(self, parameters: Mapping | None = None, /, **params):
        """Country code and administrative subdivision of a point.

        With ``radius`` and ``maxRows`` the closest subdivisions are returned
        ordered by distance.
        """
        return self.query("countrySubdivision", parameters, **params)

    # ── Reverse geocoding ────────────────────────────────────────────────

    def ocean(self, parameters: Mapping | None = None, /, **params) -> dict:
        """Name of the ocean or sea at lat/lng."""
        return self.query("ocean", parameters, **params)

    def neighbourhood(self, parameters: Mapping | None = None, /, **params) -> dict:
        """Neighbourhood for US cities (lat, lng)."""
        return self.query("neighbourhood", parameters, **params)

    def timezone(self, parameters: Mapping | None = None, /, **params):
        """Timezone at lat/lng with gmt offset (1 January) and dst offset (1 July)."""
        return self.query("timezone", parameters, **params)

    def find_nearby(self, parameters: Mapping | None = None, /, **params):
        """Nearby toponyms (lat, lng, featureClass, featureCode, radius, maxRows, style)."""
        return self.query("findNearby", parameters, **params)

    def extended_find_nearby(self, parameters: Mapping | None = None, /, **params):
        """Not available: the service only answers this one in XML."""
        return self.query("extendedFindNearby", parameters, **params)

    def find_nearby_place_name(self, parameters: Mapping | None = None, /, **params) -> list[dict]:
        """Closest populated places; distances are in km."""
        return self.query("findNearbyPlaceName", parameters, **params)

    def find_nearby_postal_codes(self, parameters: Mapping | None = None, /, **params) -> list[dict]:
        """Nearby postal codes, sorted by distance.

        Either lat/lng or postalcode/country, plus radius (km), maxRows
        (default 5), style and localCountry.
        """
        return self.query("findNearbyPostalCodes", parameters, **params)

    def find_nearby_streets(self, parameters: Mapping | None = None, /, **params) -> list[dict]:
        """Nearest street segments (US only). Empty list when none are found."""
        return self.query("findNearbyStreets", parameters, **params)

    def find_nearby_streets_osm(self, parameters: Mapping | None = None, /, **params) -> list[dict]:
        """Nearest street segments from OpenStreetMap."""
        return self.query("findNearbyStreetsOSM", parameters, **params)

    def find_nearby_wikipedia(self, parameters: Mapping | None = None, /, **params):
        return self.query("findNearbyWikipedia", parameters, **params)

    def find_nearest_address(self, parameters: Mapping | None = None, /, **params):
        """Nearest address (US only); the street number is interpolated."""
        return self.query("findNearestAddress", parameters, **params)

    def find_nearest_intersection(self, parameters: Mapping | None = None, /, **params):
        return self.query("findNearestIntersection", parameters, **params)

    def find_nearest_intersection_osm(self, parameters: Mapping | None = None, /, **params):
        return self.query("findNearestIntersectionOSM", parameters, **params)

    # ── Postal codes ─────────────────────────────────────────────────────

    def postal_code_country_info(self, parameters: Mapping | None = None, /, **params):
        """Countries for which postal code geocoding is available."""
        return self.query("postalCodeCountryInfo", parameters, **params)

    def postal_code_lookup(self, parameters: Mapping | None = None, /, **params):
        """Places for a postal code (postalcode, country, maxRows, charset)."""
        return self.query("postalCodeLookup", parameters, **params)

    def postal_code_search(self, parameters: Mapping | None = None, /, **params):
        """Postal codes and places matching a placename or postal code."""
        return self.query("postalCodeSearch", parameters, **params)

    # ── Search ───────────────────────────────────────────────────────────

    def search(self, parameters: Mapping | None = None, /, **params):
        """Full text search over place names.

        ``country``, ``featureClass`` and ``featureCode`` may be lists:

            client.search(q="london", country=["GB", "CA"], featureClass=["P", "A"])
        """
        return self.query("search", parameters, **params)

    def wikipedia_search(self, parameters: Mapping | None = None, /, **params):
        """Wikipedia fulltext search (q, title, lang, maxRows)."""
        return self.query("wikipediaSearch", parameters, **params)
