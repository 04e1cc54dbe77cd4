"""HTTP helper utilities for the Discogs XML API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.parse import quote_plus, urlsplit, urlunsplit

import certifi
import requests

from .errors import TransportError

logger = logging.getLogger(__name__)


API_URL = "http://discogs.com"
API_PORT = 80

_DEFAULT_PORTS = {"http": 80, "https": 443}

# libcurl error numbers.
CURLE_COULDNT_CONNECT = 7
CURLE_OPERATION_TIMEDOUT = 28
CURLE_GENERIC = 1


@dataclass(slots=True)
class HttpResponse:
    """Lightweight HTTP response representation."""

    status_code: int
    content: bytes

    def ok(self) -> bool:
        return self.status_code in (0, 200)


def build_query_string(params: Mapping[str, Any]) -> str:
    """Join ``params`` as ``key=value`` pairs with every value percent-encoded."""

    query = ""
    for key, value in params.items():
        query += f"&{key}={quote_plus(str(value))}"
    return query.strip("&")


def build_url(
    base_url: str,
    path: str,
    params: Mapping[str, Any],
    *,
    port: Optional[int] = None,
) -> str:
    """Return ``<base_url>/<path>?<query>`` with ``port`` applied to the host."""

    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    query = build_query_string(params)
    if query:
        url = f"{url}?{query}"

    if port is None:
        return url

    parts = urlsplit(url)
    if parts.port is not None or _DEFAULT_PORTS.get(parts.scheme) == port:
        return url
    netloc = f"{parts.hostname}:{port}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


class DiscogsSession:
    """Requests session wrapper issuing a single GET per call."""

    def __init__(self, *, session: Optional[requests.Session] = None) -> None:
        if session is None:
            session = requests.Session()
            session.verify = certifi.where()
        self._session = session
        self._session.headers.update(
            {
                "Accept": "application/xml, text/xml;q=0.9, */*;q=0.8",
                "Accept-Encoding": "gzip",
            }
        )

    def get(self, url: str, *, timeout: int, user_agent: str) -> HttpResponse:
        """Fetch ``url`` once, following redirects.

        Raises:
            TransportError: If the request never produced an HTTP response.
        """

        try:
            response = self._session.get(
                url,
                headers={"User-Agent": user_agent},
                timeout=timeout if timeout > 0 else None,
                allow_redirects=True,
            )
        except requests.RequestException as exc:
            logger.warning(
                "Request to %s failed: %s", urlsplit(url).path, type(exc).__name__
            )
            raise TransportError(str(exc), _error_code(exc)) from exc

        return HttpResponse(
            status_code=response.status_code,
            content=response.content,
        )

    def close(self) -> None:
        self._session.close()


def _error_code(exc: requests.RequestException) -> int:
    if isinstance(exc, requests.Timeout):
        return CURLE_OPERATION_TIMEDOUT
    if isinstance(exc, requests.ConnectionError):
        return CURLE_COULDNT_CONNECT
    return CURLE_GENERIC


__all__ = [
    "API_PORT",
    "API_URL",
    "DiscogsSession",
    "HttpResponse",
    "build_query_string",
    "build_url",
]
