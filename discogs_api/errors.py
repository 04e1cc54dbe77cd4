"""Exceptions raised by the Discogs API client."""

from __future__ import annotations


class DiscogsError(Exception):
    """Base class for every error surfaced by :class:`DiscogsClient`."""

    def __init__(self, message: str, code: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code:
            return f"{self.message} (code {self.code})"
        return self.message


class TransportError(DiscogsError):
    """The HTTP request itself failed (DNS, connection refused, timeout...)."""


class ApiError(DiscogsError):
    """Discogs answered, but with an error status or an unusable payload."""


__all__ = ["ApiError", "DiscogsError", "TransportError"]
