"""Tiered, synonym-aware ranking of cached records."""

import logging
import time
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from ..indexing.cache import ContentCache
from ..models import ContentRecord, RankedField, SearchResult
from ..monitoring.events import Event, EventManager, EventType
from ..monitoring.metrics import MetricsManager
from ..synonyms import SynonymTable
from .matching import field_matches

logger = logging.getLogger(__name__)

RankedFields = Callable[[ContentRecord], List[RankedField]]

WHOLE_QUERY = 1
PER_WORD = 2
PARTIAL_MATCH = 3


class SearchEngine:
    """Scores cached records against a query.

    Queries are resolved in tiers:

    1. The whole query, expanded with its synonyms.
    2. If that finds nothing and the query has several words, each word on its own,
       longest first. The first word with results wins.
    3. If there are still no results, the whole query again with every comparison
       relaxed to substring containment. Its result is returned even when empty.
    """

    def __init__(
        self,
        cache: ContentCache,
        synonyms: SynonymTable,
        ranked_fields: RankedFields,
        metrics: Optional[MetricsManager] = None,
        events: Optional[EventManager] = None,
    ) -> None:
        """Initialize search engine.

        Args:
            cache: Record cache to search
            synonyms: Synonym table for query expansion
            ranked_fields: Lists the ranked fields of a record
            metrics: Metrics manager
            events: Event manager
        """
        self.cache = cache
        self.synonyms = synonyms
        self.ranked_fields = ranked_fields
        self.metrics = metrics
        self.events = events

    def query(self, search: Optional[str]) -> SearchResult:
        """Search for records matching a query.

        Args:
            search: Query with one or more words, e.g. ``imprint page``

        Returns:
            Ranked search result
        """
        if not search or not search.strip():
            return SearchResult.not_defined()

        start_time = time.perf_counter()
        search = search.strip().lower()
        records = self.cache.snapshot()

        result = self._search_term(search, False, records)
        result.tier = WHOLE_QUERY

        words = search.split()
        if result.found_items == 0 and len(words) > 1:
            for word in sorted(words, key=len, reverse=True):
                word_result = self._search_term(word, False, records)
                if word_result.found_items > 0:
                    logger.debug(f"Resolved '{search}' with single word '{word}'")
                    word_result.tier = PER_WORD
                    return self._finish(search, word_result, start_time)

        if not result.results:
            result = self._search_term(search, True, records)
            result.tier = PARTIAL_MATCH

        return self._finish(search, result, start_time)

    def search_term(self, search: str, partial_match: bool = False) -> SearchResult:
        """Run one scoring pass for a word or phrase.

        Args:
            search: Normalized word or phrase
            partial_match: Relax every comparison to substring containment

        Returns:
            Ranked search result
        """
        return self._search_term(search, partial_match, self.cache.snapshot())

    def _search_term(
        self,
        search: str,
        partial_match: bool,
        records: Sequence[ContentRecord],
    ) -> SearchResult:
        synonyms = self.synonyms.lookup(search)
        results = []
        for record in records:
            rank = self.score(record, synonyms, search, partial_match)
            if rank > 0:
                results.append(record.with_rank(rank))

        # stable, ties keep cache order
        results.sort(key=lambda record: record.search_rank, reverse=True)
        return SearchResult(",".join(synonyms), len(results), results)

    def score(
        self,
        record: ContentRecord,
        synonyms: Sequence[str],
        search_word: str,
        partial_match: bool = False,
    ) -> int:
        """Get the search rank of a record.

        Every matching ranked field adds its weight; hits via a synonym add the field's
        synonym weight instead. A record without matches ranks 0.

        Args:
            record: Record to score
            synonyms: Synonym set of the query word
            search_word: The query word
            partial_match: Relax every comparison to substring containment

        Returns:
            Search rank
        """
        try:
            fields = self.ranked_fields(record) or []
        except Exception as e:
            logger.warning(f"Failed to get ranked fields of record: {e}")
            return 0

        rank = 0
        for field in fields:
            try:
                match = field_matches(field, synonyms, search_word, partial_match)
                if match.found:
                    rank += field.synonym_weight if match.synonym else field.weight
            except Exception as e:
                logger.warning(f"Failed to score ranked field {field!r}: {e}")
                if self.metrics:
                    self.metrics.increment_counter("scoring_errors")
        return rank

    def _finish(self, search: str, result: SearchResult, start_time: float) -> SearchResult:
        duration = time.perf_counter() - start_time
        if self.metrics:
            self.metrics.increment_counter("queries", labels={"tier": str(result.tier)})
            self.metrics.observe_value("search_latency", duration)
        if self.events:
            self.events.emit(
                Event(
                    type=EventType.SEARCH_COMPLETED,
                    timestamp=datetime.now(),
                    component="search",
                    description=f"Found {result.found_items} results for '{search}'",
                    duration_ms=duration * 1000,
                    metadata={
                        "query": search,
                        "tier": result.tier,
                        "result_count": result.found_items,
                    },
                )
            )
        return result
