"""
Search Service for Content Search

This module wires the content provider, the record cache, the synonym table, the remote
fetcher, the search engine and the refresh scheduler into one service object. Each
service owns all of its state, so several services (e.g. one per content source, or one
per test) can run side by side in a process.

Refresh Cycle:
1. provider.before_refresh()
2. Fetch the first valid mirror, flatten it and swap it into the cache
3. Run every registered refresh callback in registration order
4. provider.after_refresh()

A failed fetch leaves the cache untouched and records an error outcome. A failing
callback is logged and the remaining callbacks still run.

Example Usage:
    from content_search import SearchService

    service = SearchService(MyProvider(), config)
    service.add_refresh_callback(rebuild_navigation)
    await service.setup()

    result = service.query("imprint")
    print(result.to_dict())

    await service.trigger_refresh()
    print(service.last_refresh_outcome())
"""

import inspect
import logging
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, List, Optional, Tuple, Union

import httpx

from .config.base import Config
from .indexing.cache import ContentCache
from .indexing.flattener import flatten
from .models import (
    ContentRecord,
    RefreshOutcome,
    RequestConfig,
    SearchResult,
    Status,
    SynonymsOfWord,
)
from .monitoring.events import Event, EventManager, EventType
from .monitoring.metrics import MetricsManager
from .provider import ContentProvider
from .search.engine import SearchEngine
from .services.base import FetchError, SynonymFileError
from .services.fetcher import RemoteFetcher
from .services.scheduler import RefreshScheduler, resolve_startup_delay
from .synonyms import SynonymTable

logger = logging.getLogger(__name__)

RefreshCallback = Callable[[], Union[None, Awaitable[None]]]


class SearchService:
    """Searchable, periodically refreshed snapshot of a remote content tree."""

    def __init__(
        self,
        provider: ContentProvider,
        config: Optional[Config] = None,
        synonyms: Optional[SynonymTable] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        metrics: Optional[MetricsManager] = None,
        events: Optional[EventManager] = None,
    ) -> None:
        """Initialize search service.

        Args:
            provider: Content provider
            config: Service configuration
            synonyms: Synonym table (loaded from the configured dictionary on setup if omitted)
            http_client: HTTP client for fetching (created and closed by the service if omitted)
            metrics: Metrics manager
            events: Event manager
        """
        self.provider = provider
        self.config = config or Config()
        self.config.validate()

        if metrics is None and self.config.monitoring.enable_metrics:
            metrics = MetricsManager()
        self.metrics = metrics
        self.events = events if events is not None else EventManager()

        self._synonyms_injected = synonyms is not None
        self.synonyms = synonyms if synonyms is not None else SynonymTable()
        self.cache = ContentCache()
        self._callbacks: List[RefreshCallback] = []
        self._last_refresh: Optional[RefreshOutcome] = None

        self.fetcher = RemoteFetcher(
            self.service_name,
            timeout=self.config.fetch.timeout,
            client=http_client,
            metrics=self.metrics,
            events=self.events,
        )
        self.engine = SearchEngine(
            self.cache,
            self.synonyms,
            provider.ranked_fields,
            metrics=self.metrics,
            events=self.events,
        )
        self.scheduler = RefreshScheduler(
            self._refresh_cycle,
            self.config.refresh_interval,
            service_name=self.service_name,
            startup_delay=resolve_startup_delay(self.config.refresh),
            events=self.events,
        )

    @property
    def service_name(self) -> str:
        return self.config.service_name

    @property
    def records(self) -> Tuple[ContentRecord, ...]:
        """Current cache snapshot."""
        return self.cache.snapshot()

    async def __aenter__(self) -> "SearchService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def setup(self, start_scheduler: bool = True) -> None:
        """Set up the service.

        Runs the provider's setup hooks around loading the synonym dictionary and
        starting the refresh scheduler.

        Args:
            start_scheduler: Start interval refreshing
        """
        await self.provider.before_setup()

        if not self._synonyms_injected:
            try:
                self.load_synonyms()
            except SynonymFileError as e:
                logger.error(f"{self.service_name} - continuing without synonyms: {e}")

        if start_scheduler:
            self.scheduler.start()

        await self.provider.after_setup()

    def load_synonyms(self, path: Optional[str] = None) -> SynonymTable:
        """Load the synonym dictionary and use it for all further queries.

        Args:
            path: Dictionary file (defaults to the configured or bundled dictionary)

        Returns:
            The loaded table

        Raises:
            SynonymFileError: If the dictionary cannot be read
        """
        table = SynonymTable.from_file(path or self.config.synonyms.path)
        self.synonyms = table
        self.engine.synonyms = table
        return table

    async def close(self) -> None:
        """Stop refreshing and release resources."""
        await self.scheduler.stop()
        await self.fetcher.close()
        self.events.shutdown()

    def add_refresh_callback(self, callback: RefreshCallback) -> None:
        """Register a function to run after every refresh.

        Callbacks run while the refresh lock is held and must not await
        ``refresh()`` or ``refresh_cycle()``.

        Args:
            callback: Plain or coroutine function without arguments
        """
        self._callbacks.append(callback)

    def query(self, search: Optional[str]) -> SearchResult:
        """Search the cache.

        Args:
            search: Query with one or more words

        Returns:
            Ranked search result
        """
        return self.engine.query(search)

    def synonyms_of(self, words: str) -> SynonymsOfWord:
        """Get the synonym groups of each word in a comma separated list."""
        return self.synonyms.synonyms_of(words)

    def last_refresh_outcome(self) -> Optional[RefreshOutcome]:
        """Get the outcome of the last completed refresh, None before the first one."""
        return self._last_refresh

    async def trigger_refresh(self) -> bool:
        """Run a refresh cycle on demand.

        Returns:
            Whether a cycle ran; False if manual refreshes are disabled or a cycle
            was already running
        """
        logger.info("Trying to trigger manual cache update")
        if not self.config.refresh.enable_manual_trigger:
            logger.info("Manual cache update disabled")
            return False
        triggered = await self.scheduler.trigger()
        if triggered:
            logger.info("Manual cache update triggered")
        return triggered

    async def refresh_cycle(self) -> None:
        """Run the provider hooks, one refresh and the refresh callbacks.

        Waits for any refresh already in flight.
        """
        async with self.scheduler.lock:
            await self._refresh_cycle()

    async def refresh(self, request_config: Optional[RequestConfig] = None) -> RefreshOutcome:
        """Fetch the content tree and update the cache.

        A full refresh replaces the cache; a partial refresh (with ``request_config``)
        merges into it. On failure the cache stays as it was. Refreshes never overlap:
        this waits for a cycle already in flight, and manual triggers are skipped
        while it runs.

        Args:
            request_config: Partial refresh selection

        Returns:
            Outcome of this attempt
        """
        async with self.scheduler.lock:
            return await self._refresh(request_config)

    async def _refresh_cycle(self) -> None:
        # Runs under the scheduler lock.
        await self.provider.before_refresh()
        await self._refresh()
        await self._run_callbacks()
        await self.provider.after_refresh()

    async def _refresh(self, request_config: Optional[RequestConfig] = None) -> RefreshOutcome:
        logger.info(f"Update Cache of {self.service_name}")
        start_time = time.perf_counter()
        self._emit(EventType.REFRESH_STARTED, "Refresh started")

        try:
            urls = self.provider.source_urls(request_config)
            fetched = await self.fetcher.fetch(urls, self.provider.request_options())
        except FetchError as e:
            return self._record_outcome(Status.ERROR, start_time, str(e))
        except Exception as e:
            logger.exception(f"{self.service_name} - refresh failed")
            return self._record_outcome(Status.ERROR, start_time, str(e))

        try:
            type_tag = request_config.type if request_config else None
            records = flatten(
                fetched.path_list,
                self.provider.flatten,
                type_tag,
                max_depth=self.config.fetch.max_depth,
            )
            if request_config is None:
                self.cache.replace(records)
            else:
                self.cache.merge(records, request_config, self.provider.record_key)
        except Exception as e:
            logger.exception(f"{self.service_name} - updating the cache failed")
            return self._record_outcome(Status.ERROR, start_time, str(e))

        logger.info(f"Finish loading cache with {len(self.cache)} records")
        return self._record_outcome(Status.SUCCESS, start_time)

    async def _run_callbacks(self) -> None:
        for callback in list(self._callbacks):
            try:
                result = callback()
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.exception(f"{self.service_name} - refresh callback failed")
                if self.metrics:
                    self.metrics.increment_counter("callback_failures")
                self._emit(
                    EventType.CALLBACK_FAILED,
                    f"Refresh callback {getattr(callback, '__name__', callback)!r} failed",
                    error=str(e),
                )
        logger.info("Finish refresh callbacks")

    def _record_outcome(
        self, status: Status, start_time: float, error: Optional[str] = None
    ) -> RefreshOutcome:
        duration = time.perf_counter() - start_time
        outcome = RefreshOutcome(time=datetime.now(timezone.utc), status=status)
        self._last_refresh = outcome

        if self.metrics:
            self.metrics.increment_counter("refreshes", labels={"status": status.value})
            self.metrics.observe_value("refresh_latency", duration)
            self.metrics.set_gauge("cached_records", len(self.cache))

        if status is Status.SUCCESS:
            self._emit(
                EventType.REFRESH_COMPLETED,
                f"Cache holds {len(self.cache)} records",
                duration_ms=duration * 1000,
            )
        else:
            self._emit(
                EventType.REFRESH_FAILED,
                "Cache left unchanged",
                duration_ms=duration * 1000,
                error=error,
            )
        return outcome

    def _emit(
        self,
        event_type: EventType,
        description: str,
        duration_ms: Optional[float] = None,
        error: Optional[str] = None,
    ) -> None:
        self.events.emit(
            Event(
                type=event_type,
                timestamp=datetime.now(),
                component=self.service_name,
                description=description,
                duration_ms=duration_ms,
                success=error is None,
                error=error,
            )
        )
