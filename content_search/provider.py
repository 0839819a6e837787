"""Content provider interface implemented by integrators."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Hashable, List, Mapping, Optional, Sequence, Union

from .models import ContentRecord, RankedField, RequestConfig


class ContentProvider(ABC):
    """Tells the search service where content lives and how to rank it.

    The service holds exactly one provider. Only ``flatten``, ``ranked_fields`` and
    ``source_urls`` are required; the lifecycle hooks default to no-ops.
    """

    @abstractmethod
    def flatten(self, node: Mapping[str, Any], type_tag: Optional[str]) -> ContentRecord:
        """Transform a raw remote node into a record.

        Args:
            node: Raw node from the remote tree
            type_tag: Type requested by a partial refresh, if any

        Returns:
            Content record
        """

    @abstractmethod
    def ranked_fields(self, record: ContentRecord) -> List[RankedField]:
        """List the fields of a record that take part in ranking.

        Args:
            record: Content record

        Returns:
            Ranked fields in evaluation order
        """

    @abstractmethod
    def source_urls(
        self, request_config: Optional[RequestConfig] = None
    ) -> Union[str, Sequence[str]]:
        """Get the mirror URLs to fetch content from.

        Args:
            request_config: Partial refresh selection, if any

        Returns:
            One URL or mirrors in the order they should be tried
        """

    def request_options(self) -> Dict[str, Any]:
        """Get request options (``headers``, ``method``, ``params``) for fetching."""
        return {}

    def record_key(self, record: ContentRecord) -> Optional[Hashable]:
        """Get an identity used to replace records during a partial refresh."""
        return None

    async def before_setup(self) -> None:
        """Run before the service loads synonyms and starts refreshing."""

    async def after_setup(self) -> None:
        """Run after the service loaded synonyms and started refreshing."""

    async def before_refresh(self) -> None:
        """Run before every refresh cycle."""

    async def after_refresh(self) -> None:
        """Run after every refresh cycle."""
