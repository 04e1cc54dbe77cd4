"""Client for the Discogs XML API (releases, artists, labels and search)."""

from .client import CLIENT_NAME, VERSION, ClientConfig, DiscogsClient
from .errors import ApiError, DiscogsError, TransportError

__version__ = VERSION

__all__ = [
    "CLIENT_NAME",
    "ApiError",
    "ClientConfig",
    "DiscogsClient",
    "DiscogsError",
    "TransportError",
    "__version__",
]
