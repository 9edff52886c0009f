"""
HTTP transport for the GeoNames client.

Uses stdlib only (urllib.request). One blocking GET per call: no retries,
no connection reuse, and no timeout unless one is configured.
"""

import json
import logging
import ssl
import urllib.error
import urllib.request

from geonames.exceptions import RemoteError, TransportError

logger = logging.getLogger(__name__)

USER_AGENT = "geonames-client/1.0 (+https://www.geonames.org/export/)"


class UrllibTransport:
    """Fetches GeoNames URLs with urllib."""

    def __init__(self, timeout: float | None = None, user_agent: str = USER_AGENT):
        self.timeout = timeout
        self.user_agent = user_agent
        self._ctx = ssl.create_default_context()

    def fetch(self, url: str) -> bytes:
        """GET ``url`` and return the raw response body."""
        body, _ = self._get(url, accept="application/json")
        return body

    def fetch_text(self, url: str) -> str:
        """GET ``url`` and return the body decoded with its declared charset."""
        body, charset = self._get(url, accept="application/xml,text/xml,*/*")
        return body.decode(charset or "utf-8", errors="replace")

    def _get(self, url: str, accept: str) -> tuple[bytes, str | None]:
        req = urllib.request.Request(
            url,
            headers={"User-Agent": self.user_agent, "Accept": accept},
        )
        kwargs = {"context": self._ctx} if url.startswith("https:") else {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        logger.debug("GET %s", url)
        try:
            with urllib.request.urlopen(req, **kwargs) as resp:
                return resp.read(), resp.headers.get_content_charset()
        except urllib.error.HTTPError as e:
            _raise_for_http_error(e, url)
        except urllib.error.URLError as e:
            raise TransportError(f"Request to {url} failed: {e.reason}", url) from e
        except TimeoutError as e:
            raise TransportError(f"Request to {url} timed out", url) from e
        except OSError as e:
            raise TransportError(f"Request to {url} failed: {e}", url) from e


def _raise_for_http_error(error: urllib.error.HTTPError, url: str):
    """Turn an HTTP error status into RemoteError or TransportError.

    A ``status`` envelope in the body wins over the HTTP status code.
    """
    try:
        body = error.read()
    except OSError:
        body = b""
    try:
        document = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        document = None
    if isinstance(document, dict) and "status" in document:
        raise RemoteError(document["status"]) from error
    raise TransportError(
        f"Request to {url} failed with HTTP {error.code}: {error.reason}",
        url,
        status_code=error.code,
    ) from error
