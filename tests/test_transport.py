"""Tests for the urllib transport against a local HTTP server."""

import json
import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from geonames.client import GeoNamesClient
from geonames.exceptions import RemoteError, TransportError
from geonames.transport import USER_AGENT, UrllibTransport

# path -> (status, content type, body)
_ROUTES = {
    "/oceanJSON": (200, "application/json", json.dumps({"ocean": {"name": "North Atlantic Ocean"}}).encode()),
    "/latin1": (200, "text/plain; charset=iso-8859-1", "Zürich".encode("latin-1")),
    "/envelope": (500, "application/json", json.dumps({"status": {"message": "boom", "value": 13}}).encode()),
    "/plain-error": (503, "text/html", b"<html>Service Unavailable</html>"),
}


class _Handler(BaseHTTPRequestHandler):
    seen: list = []

    def do_GET(self):
        self.seen.append((self.path, dict(self.headers)))
        path = self.path.split("?", 1)[0]
        if path == "/slow":
            time.sleep(0.5)
        status, content_type, body = _ROUTES.get(path, (404, "text/plain", b"not found"))
        try:
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
        except (BrokenPipeError, ConnectionResetError):
            pass

    def log_message(self, format, *args):
        pass


@pytest.fixture
def server(monkeypatch):
    monkeypatch.setenv("no_proxy", "*")
    monkeypatch.setenv("NO_PROXY", "*")
    _Handler.seen = []
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    httpd.daemon_threads = True
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield f"127.0.0.1:{httpd.server_address[1]}"
    httpd.shutdown()
    httpd.server_close()


def test_fetch_returns_body_and_sends_user_agent(server):
    body = UrllibTransport().fetch(f"http://{server}/oceanJSON")
    assert json.loads(body) == {"ocean": {"name": "North Atlantic Ocean"}}
    _, headers = _Handler.seen[0]
    assert headers["User-Agent"] == USER_AGENT


def test_fetch_text_uses_declared_charset(server):
    assert UrllibTransport().fetch_text(f"http://{server}/latin1") == "Zürich"


def test_http_error_with_status_envelope(server):
    with pytest.raises(RemoteError) as exc_info:
        UrllibTransport().fetch(f"http://{server}/envelope")
    assert exc_info.value.value == 13


def test_http_error_without_envelope(server):
    with pytest.raises(TransportError) as exc_info:
        UrllibTransport().fetch(f"http://{server}/plain-error")
    assert exc_info.value.status_code == 503
    assert exc_info.value.url.endswith("/plain-error")


def test_connection_refused():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    with pytest.raises(TransportError) as exc_info:
        UrllibTransport(timeout=2).fetch(f"http://127.0.0.1:{port}/oceanJSON")
    assert exc_info.value.status_code is None
    assert exc_info.value.__cause__ is not None


def test_timeout(server):
    with pytest.raises(TransportError):
        UrllibTransport(timeout=0.1).fetch(f"http://{server}/slow")


def test_single_attempt_on_failure(server):
    with pytest.raises(TransportError):
        UrllibTransport().fetch(f"http://{server}/plain-error")
    assert len(_Handler.seen) == 1


def test_client_end_to_end(server):
    client = GeoNamesClient(host=server, username="demo")
    assert client.ocean(lat=40.78343, lng=-43.96625) == {"name": "North Atlantic Ocean"}
    path, _ = _Handler.seen[0]
    assert path == "/oceanJSON?lat=40.78343&lng=-43.96625&username=demo"
