"""
Content Search - Synonym-aware ranked search over a remote content tree

This package provides an embeddable search engine for content pulled from a remote
content-management backend. The remote tree is flattened into an in-memory cache that is
refreshed on a schedule (or on demand), and every query is scored against that cache using
weighted fields and a synonym dictionary.

Key Features:
- Flattening of arbitrarily nested remote trees into a flat record cache
- Multi-mirror fetching with ordered failover and response validation
- Synonym expansion of queries from a static synonym dictionary
- Tiered query resolution (whole query, per word, partial match)
- Additive per-field ranking with separate literal and synonym weights
- Scheduled and manual cache refresh with lifecycle hooks and callbacks
- Built-in metrics and refresh/search events

Integrators implement a ContentProvider (where to fetch from, how to flatten a node and
which fields matter) and hand it to a SearchService:

    from content_search import SearchService

    async with SearchService(MyProvider()) as service:
        await service.refresh()
        result = service.query("imprint page")

Author: Your Team
Version: 1.0.0
License: MIT
"""

import logging
from importlib.metadata import version

from .models import (
    ContentRecord,
    RankedField,
    RefreshOutcome,
    RequestConfig,
    SearchResult,
    Status,
)
from .provider import ContentProvider
from .service import SearchService
from .synonyms import SynonymTable

__version__ = version("content-search")

logger = logging.getLogger(__name__)

__all__ = [
    "__version__",
    "ContentProvider",
    "ContentRecord",
    "RankedField",
    "RefreshOutcome",
    "RequestConfig",
    "SearchResult",
    "SearchService",
    "Status",
    "SynonymTable",
]
