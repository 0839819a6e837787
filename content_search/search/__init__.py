"""
Search Package for Content Search

This package ranks cached records against user queries.

Key Components:
1. Engine Module:
   - Query normalization
   - Tiered resolution (whole query, per word, partial match)
   - Additive per-field ranking

2. Matching Module:
   - Whole-word and substring keyword matching
   - Literal versus synonym hit detection

Example Usage:
    from content_search.search import SearchEngine

    engine = SearchEngine(cache, synonyms, provider.ranked_fields)
    result = engine.query("imprint page")
    for record in result.results:
        print(record.search_rank, record.get("title"))
"""

from .engine import SearchEngine
from .matching import field_matches, match_keyword

__all__ = ["SearchEngine", "field_matches", "match_keyword"]
