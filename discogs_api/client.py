"""Discogs API client returning releases, artists, labels and search results."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote_plus

import requests
from bs4 import BeautifulSoup
from bs4.element import Tag

import settings

from .errors import ApiError
from .http import API_PORT, API_URL, DiscogsSession, build_url
from .models import Artist, Label, Release, SearchResult
from .parsers import (
    extract_error_message,
    find_root,
    parse_artist,
    parse_document,
    parse_label,
    parse_release,
    parse_search_results,
)

logger = logging.getLogger(__name__)


CLIENT_NAME = "Python Discogs"
VERSION = "1.0.0"
DEFAULT_TIMEOUT = 60


@dataclass
class ClientConfig:
    """Mutable settings owned by a single :class:`DiscogsClient`."""

    api_key: str
    timeout: int = DEFAULT_TIMEOUT
    user_agent: str = ""
    base_url: str = API_URL
    port: int = API_PORT


class DiscogsClient:
    """Thin wrapper around the Discogs XML API.

    Every public method performs exactly one GET request. Failures surface as
    :class:`~discogs_api.errors.TransportError` or
    :class:`~discogs_api.errors.ApiError`; nothing is retried or cached.
    """

    def __init__(
        self,
        api_key: str,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        user_agent: str = "",
        base_url: str = API_URL,
        port: int = API_PORT,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key:
            raise ValueError("A Discogs API key is required")
        self.config = ClientConfig(
            api_key=str(api_key),
            timeout=int(timeout),
            user_agent=str(user_agent),
            base_url=base_url,
            port=int(port),
        )
        self._http = DiscogsSession(session=session)

    @classmethod
    def from_settings(
        cls, *, session: Optional[requests.Session] = None
    ) -> "DiscogsClient":
        """Build a client from the ``DISCOGS_*`` environment variables."""

        return cls(
            settings.get_discogs_api_key(),
            timeout=settings.get_timeout(),
            user_agent=settings.get_user_agent(),
            base_url=settings.get_base_url(),
            session=session,
        )

    def __enter__(self) -> "DiscogsClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # ------------------------------------------------------------------
    # Configuration helpers
    def set_api_key(self, api_key: str) -> None:
        self.config.api_key = str(api_key)

    def set_timeout(self, seconds: int) -> None:
        """Set the timeout in seconds; ``0`` waits indefinitely."""

        self.config.timeout = int(seconds)

    def set_user_agent(self, user_agent: str) -> None:
        """Set your own user-agent, ideally ``<app-name>/<app-version>``.

        It is appended to ours: ``Python Discogs/<version> <user_agent>``.
        """

        self.config.user_agent = str(user_agent)

    def get_timeout(self) -> int:
        return self.config.timeout

    def get_user_agent(self) -> str:
        return f"{CLIENT_NAME}/{VERSION} {self.config.user_agent}"

    # ------------------------------------------------------------------
    def call(
        self, path: str, params: Optional[Mapping[str, Any]] = None
    ) -> BeautifulSoup:
        """Perform a GET request against ``path`` and return the parsed XML.

        Args:
            path: Endpoint path relative to the API root, e.g. ``release/1``.
            params: Extra query string parameters.
        Returns:
            The parsed XML document.
        Raises:
            TransportError: If no HTTP response was received.
            ApiError: On an error status or a body that is not XML.
        """

        parameters: Dict[str, Any] = dict(params or {})
        parameters["f"] = "xml"
        parameters["api_key"] = self.config.api_key

        url = build_url(self.config.base_url, path, parameters, port=self.config.port)
        response = self._http.get(
            url,
            timeout=self.config.timeout,
            user_agent=self.get_user_agent(),
        )
        logger.debug("GET /%s -> %s", path, response.status_code)

        if not response.ok():
            message = extract_error_message(response.content)
            logger.warning(
                "Discogs returned status %s for /%s: %s",
                response.status_code,
                path,
                message or "no error message",
            )
            if message is not None:
                raise ApiError(message, response.status_code)
            raise ApiError(
                f"Invalid headers ({response.status_code})", response.status_code
            )

        document = parse_document(response.content)
        if document is None:
            logger.warning("Could not parse XML returned for /%s", path)
            raise ApiError("Invalid XML")
        return document

    # ------------------------------------------------------------------
    # Endpoints
    def get_release(self, release_id: str | int) -> Release:
        """Get more information about a release."""

        root = self._fetch_root(f"release/{quote_plus(str(release_id))}", "release")
        return parse_release(root)

    def get_artist(self, name: str) -> Artist:
        """Get more information about an artist."""

        root = self._fetch_root(f"artist/{quote_plus(str(name))}", "artist")
        return parse_artist(root)

    def get_label(self, name: str) -> Label:
        """Get more information about a label."""

        root = self._fetch_root(f"label/{quote_plus(str(name))}", "label")
        return parse_label(root)

    def search(self, term: str, type: str = "all", page: int = 1) -> SearchResult:
        """Search Discogs.

        Args:
            term: The search query.
            type: ``all``, ``artists``, ``labels`` or ``releases``.
            page: Result page; only sent when greater than 1.
        """

        params: Dict[str, Any] = {"type": str(type), "q": str(term)}
        page = int(page)
        if page > 1:
            params["page"] = page

        document = self.call("search", params)
        return parse_search_results(document)

    def _fetch_root(self, path: str, name: str) -> Tag:
        document = self.call(path)
        root = find_root(document, name)
        if root is None:
            logger.warning("Response for /%s has no <%s> element", path, name)
            raise ApiError("Invalid XML.")
        return root


__all__ = ["CLIENT_NAME", "ClientConfig", "DEFAULT_TIMEOUT", "DiscogsClient", "VERSION"]
