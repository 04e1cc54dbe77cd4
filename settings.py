"""Centralized configuration helpers for the Discogs API client."""

from __future__ import annotations

import os
from typing import Optional

DEFAULT_BASE_URL = "http://discogs.com"
DEFAULT_TIMEOUT = 60


def get_discogs_api_key(optional: bool = False) -> Optional[str]:
    """Return the Discogs API key.

    Args:
        optional: When True, allow a missing key (returns None).

    Raises:
        RuntimeError: If the key is required and not configured.
    """

    api_key = os.getenv("DISCOGS_API_KEY")
    if api_key:
        return api_key

    if optional:
        return None

    raise RuntimeError(
        "DISCOGS_API_KEY is not configured. Export it in your shell or virtualenv."
    )


def get_timeout(default: int = DEFAULT_TIMEOUT) -> int:
    """Return the request timeout in seconds."""

    env_value = os.getenv("DISCOGS_TIMEOUT")
    if not env_value:
        return default

    try:
        timeout = int(env_value)
        return timeout if timeout >= 0 else default
    except ValueError:
        return default


def get_user_agent(default: str = "") -> str:
    """Return the user-agent suffix appended to the client's own."""

    return os.getenv("DISCOGS_USER_AGENT", default)


def get_base_url(default: str = DEFAULT_BASE_URL) -> str:
    """Return the API root, overridable for proxies and test servers."""

    return os.getenv("DISCOGS_BASE_URL") or default


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "get_base_url",
    "get_discogs_api_key",
    "get_timeout",
    "get_user_agent",
]
