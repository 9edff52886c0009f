"""Shared fixtures: a recording fake transport and a client wired to it."""

import json
from urllib.parse import parse_qs, urlsplit

import pytest

from geonames.client import GeoNamesClient


class FakeTransport:
    """Serves canned bodies keyed by request path (e.g. ``oceanJSON``)."""

    def __init__(self, responses: dict | None = None):
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, str]] = []

    def _body(self, url: str):
        path = urlsplit(url).path.lstrip("/")
        body = self.responses[path]
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        return body

    def fetch(self, url: str) -> bytes:
        self.calls.append(("fetch", url))
        body = self._body(url)
        return body.encode("utf-8") if isinstance(body, str) else body

    def fetch_text(self, url: str) -> str:
        self.calls.append(("fetch_text", url))
        body = self._body(url)
        return body.decode("utf-8") if isinstance(body, bytes) else body

    @property
    def urls(self) -> list[str]:
        return [url for _, url in self.calls]


def query_of(url: str) -> dict:
    return parse_qs(urlsplit(url).query, keep_blank_values=True)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return GeoNamesClient(transport=transport, username="demo")
