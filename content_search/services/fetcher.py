"""Remote content fetching with ordered mirror failover."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import httpx

from ..monitoring.events import Event, EventManager, EventType
from ..monitoring.metrics import MetricsManager
from .base import FetchError

logger = logging.getLogger(__name__)

ROOT_LIST = "pathList"


@dataclass
class FetchResult:
    """A valid response of one mirror."""

    url: str
    path_list: List[Any]


def is_valid_response(data: Any) -> bool:
    """Check whether a parsed body carries a non-empty root list."""
    return (
        isinstance(data, dict)
        and isinstance(data.get(ROOT_LIST), list)
        and len(data[ROOT_LIST]) > 0
    )


class RemoteFetcher:
    """Fetches the content tree from the first mirror with a valid response.

    Mirrors are tried strictly one after another. A mirror that times out, fails on the
    transport, answers with a non-2xx status or a body without a non-empty ``pathList``
    is logged and skipped.
    """

    def __init__(
        self,
        service_name: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        metrics: Optional[MetricsManager] = None,
        events: Optional[EventManager] = None,
    ) -> None:
        """Initialize remote fetcher.

        Args:
            service_name: Service name used in logs
            timeout: Request timeout in seconds
            client: HTTP client to use (closed by its owner, not by the fetcher)
            metrics: Metrics manager
            events: Event manager
        """
        self.service_name = service_name
        self.timeout = timeout
        self.metrics = metrics
        self.events = events
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if the fetcher created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(
        self,
        urls: Union[str, Sequence[str]],
        options: Optional[Mapping[str, Any]] = None,
    ) -> FetchResult:
        """Fetch the content tree.

        Args:
            urls: One URL or mirrors in the order they should be tried
            options: Request options (``headers``, ``method``, ``params``)

        Returns:
            Root list of the first valid response

        Raises:
            FetchError: If no mirror produced a valid response
        """
        mirrors = [urls] if isinstance(urls, str) else list(urls)
        options = dict(options or {})

        for index, url in enumerate(mirrors):
            path_list = await self._fetch_mirror(index, url, options)
            if path_list is not None:
                logger.info(f"fetching {self.service_name} - {url} data done")
                return FetchResult(url=url, path_list=path_list)

        logger.warning(f"fetching {self.service_name} - {mirrors} data failed!")
        raise FetchError(
            f"No valid response from {len(mirrors)} mirror(s)",
            self.service_name,
            {"urls": mirrors},
        )

    async def _fetch_mirror(
        self, index: int, url: str, options: Dict[str, Any]
    ) -> Optional[List[Any]]:
        """Fetch one mirror.

        Returns:
            The root list, or None if the mirror failed
        """
        logger.info(f"Start fetching URL nr. {index} with {url}")
        try:
            response = await self.client.request(
                options.get("method", "GET"),
                url,
                headers=options.get("headers"),
                params=options.get("params"),
                timeout=options.get("timeout", self.timeout),
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            self._mirror_failed(index, url, f"{type(e).__name__}: {e}")
            return None

        if not is_valid_response(data):
            self._mirror_failed(index, url, f"response without a non-empty {ROOT_LIST}")
            return None

        logger.info(f"Done fetching URL nr. {index} with {url}")
        return data[ROOT_LIST]

    def _mirror_failed(self, index: int, url: str, reason: str) -> None:
        logger.warning(f"Error while fetching URL nr. {index} with {url}: {reason}")
        if self.metrics:
            self.metrics.increment_counter("mirror_failures")
        if self.events:
            self.events.emit(
                Event(
                    type=EventType.MIRROR_FAILED,
                    timestamp=datetime.now(),
                    component="fetcher",
                    description=f"Mirror {index} failed",
                    success=False,
                    error=reason,
                    metadata={"url": url},
                )
            )
