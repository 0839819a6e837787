"""Services package: remote fetching, refresh scheduling and service errors."""

from .base import FetchError, RefreshInProgressError, ServiceException, SynonymFileError
from .fetcher import FetchResult, RemoteFetcher
from .scheduler import RefreshScheduler, resolve_startup_delay

__all__ = [
    "FetchError",
    "FetchResult",
    "RefreshInProgressError",
    "RefreshScheduler",
    "RemoteFetcher",
    "ServiceException",
    "SynonymFileError",
    "resolve_startup_delay",
]
