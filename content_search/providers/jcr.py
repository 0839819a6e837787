"""Content provider for JCR/AEM style content trees.

Nodes of such trees keep their searchable metadata below a content attribute
(``_jcrContent`` by default):

    {"pathList": [{"path": "/content/site/en",
                   "_jcrContent": {"jcr:title": "Home", "keywords": ["start"]},
                   "children": [...]}]}

The provider keeps the configured content keys, ranks the configured fields and takes
its mirror URLs from the ``source`` configuration section.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional, Sequence

from ..config.base import SourceConfig
from ..models import ContentRecord, RankedField, RequestConfig
from ..provider import ContentProvider

logger = logging.getLogger(__name__)

NODE_FIELDS = ("path", "name")


@dataclass
class ContentKey:
    """A key to keep from a node's content, with an optional value manipulation."""

    key: str
    manipulation: Optional[Callable[[Any], Any]] = None


def extract_content(obj: Any, content_keys: Sequence[ContentKey]) -> Dict[str, Any]:
    """Reduce a content object to the configured keys.

    Nested objects are reduced with the same keys. Manipulations apply to plain values
    and to every element of a list. Empty values are dropped.

    Args:
        obj: Content object of a node
        content_keys: Keys to keep

    Returns:
        Reduced content
    """
    mapped: Dict[str, Any] = {}
    if not isinstance(obj, Mapping):
        return mapped

    for content_key in content_keys:
        value = obj.get(content_key.key)
        if not value:
            continue
        manipulate = content_key.manipulation
        if isinstance(value, list):
            mapped[content_key.key] = [manipulate(el) for el in value] if manipulate else value
        elif isinstance(value, Mapping):
            mapped[content_key.key] = extract_content(value, content_keys)
        else:
            mapped[content_key.key] = manipulate(value) if manipulate else value
    return mapped


def get_field(fields: Mapping[str, Any], name: str) -> Any:
    """Get a possibly dotted field, e.g. ``metadata.keywords``."""
    value: Any = fields
    for part in name.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


class JcrContentProvider(ContentProvider):
    """Configuration driven provider for JCR content trees."""

    def __init__(
        self,
        source: SourceConfig,
        manipulations: Optional[Mapping[str, Callable[[Any], Any]]] = None,
    ) -> None:
        """Initialize provider.

        Args:
            source: Content source configuration
            manipulations: Value manipulations by content key
        """
        self.source = source
        manipulations = manipulations or {}
        self.content_keys = [
            ContentKey(key, manipulations.get(key)) for key in source.content_keys
        ]

    def flatten(self, node: Mapping[str, Any], type_tag: Optional[str]) -> ContentRecord:
        fields = extract_content(node.get(self.source.content_attr), self.content_keys)
        for name in NODE_FIELDS:
            if node.get(name):
                fields[name] = node[name]
        return ContentRecord(fields, type_tag=type_tag or node.get("type") or self.source.type)

    def ranked_fields(self, record: ContentRecord) -> List[RankedField]:
        return [
            RankedField(
                value=get_field(record.fields, ranked.field),
                weight=ranked.weight,
                synonym_weight=ranked.synonym_weight,
                full_match=ranked.full_match,
            )
            for ranked in self.source.ranked_fields
        ]

    def source_urls(self, request_config: Optional[RequestConfig] = None) -> List[str]:
        if request_config is not None and self.source.partial_urls:
            return [
                url.format(type=request_config.type or "", path=request_config.path or "")
                for url in self.source.partial_urls
            ]
        if not self.source.urls:
            logger.warning("No source URLs configured")
        return list(self.source.urls)

    def request_options(self) -> Dict[str, Any]:
        return {"headers": dict(self.source.headers)}

    def record_key(self, record: ContentRecord) -> Optional[Hashable]:
        if not self.source.key_field:
            return None
        key = get_field(record.fields, self.source.key_field)
        return key if isinstance(key, Hashable) else None
