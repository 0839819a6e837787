"""Data structures shared by the cache, the search engine and the refresh service."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

NOT_DEFINED = "not-defined"

SynonymsOfWord = Dict[str, List[List[str]]]


class Status(str, Enum):
    """Outcome of a refresh attempt."""

    SUCCESS = "success"
    ERROR = "error"


class NodeType(str, Enum):
    """Node categories known to the bundled providers."""

    PAGE = "cq:Page"
    ASSET = "dam:Asset"


class ValueKind(Enum):
    """Shape of a ranked field value."""

    SCALAR = "scalar"
    LIST = "list"


@dataclass
class RefreshOutcome:
    """Time and status of the most recently completed refresh attempt."""

    time: datetime
    status: Status

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary format for serialization."""
        return {"time": self.time.isoformat(), "status": self.status.value}

    def __str__(self) -> str:
        return f"Last cache update at: {self.time.isoformat()} - Status: {self.status.value}"


@dataclass(frozen=True)
class RequestConfig:
    """Selects a partial refresh of a single node type and/or path."""

    type: Optional[str] = None
    path: Optional[str] = None


class ContentRecord:
    """A flattened remote node.

    Records carry whatever fields the provider chose to keep, an optional type tag and
    the search rank assigned by the last query that returned them.
    """

    def __init__(
        self,
        fields: Optional[Mapping[str, Any]] = None,
        type_tag: Optional[str] = None,
        search_rank: int = 0,
    ) -> None:
        self.fields: Dict[str, Any] = dict(fields or {})
        self.type_tag = type_tag
        self.search_rank = search_rank

    def __getitem__(self, key: str) -> Any:
        return self.fields[key]

    def __contains__(self, key: object) -> bool:
        return key in self.fields

    def get(self, key: str, default: Any = None) -> Any:
        """Get a field value."""
        return self.fields.get(key, default)

    def with_rank(self, rank: int) -> "ContentRecord":
        """Return a copy of this record carrying the given rank."""
        return ContentRecord(self.fields, self.type_tag, rank)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for serialization."""
        data = dict(self.fields)
        if self.type_tag is not None:
            data["type"] = self.type_tag
        data["searchRank"] = self.search_rank
        return data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentRecord):
            return NotImplemented
        return (
            self.fields == other.fields
            and self.type_tag == other.type_tag
            and self.search_rank == other.search_rank
        )

    def __repr__(self) -> str:
        return (
            f"ContentRecord(fields={self.fields!r}, type_tag={self.type_tag!r}, "
            f"search_rank={self.search_rank})"
        )


@dataclass(frozen=True)
class FieldValue:
    """Tagged value of a ranked field: a single string or a list of strings."""

    kind: ValueKind
    items: Tuple[str, ...]

    @classmethod
    def of(cls, raw: Any) -> "FieldValue":
        """Build a field value from raw provider data.

        Args:
            raw: A string, a (possibly nested) list of strings, or None

        Returns:
            Tagged field value

        Raises:
            TypeError: If the value is neither a string nor a list of strings
        """
        if raw is None:
            return cls(ValueKind.SCALAR, ())
        if isinstance(raw, str):
            return cls(ValueKind.SCALAR, (raw,) if raw else ())
        if isinstance(raw, (list, tuple)):
            return cls(ValueKind.LIST, tuple(_flatten_strings(raw)))
        raise TypeError(
            f"Ranked field value must be a string or a list of strings, got {type(raw).__name__}"
        )

    @property
    def is_empty(self) -> bool:
        return not self.items


def _flatten_strings(values: Any) -> List[str]:
    items = []
    for value in values:
        if value is None:
            continue
        if isinstance(value, str):
            items.append(value)
        elif isinstance(value, (list, tuple)):
            items.extend(_flatten_strings(value))
        else:
            raise TypeError(
                f"Ranked field list may only hold strings, got {type(value).__name__}"
            )
    return items


@dataclass
class RankedField:
    """Weight binding for one field of a record.

    Literal hits add ``weight``, synonym hits add ``synonym_weight``. With
    ``full_match`` set, a hit requires the query word as a whole token.
    """

    value: Any
    weight: int
    synonym_weight: Optional[int] = None
    full_match: bool = False

    def __post_init__(self) -> None:
        if self.synonym_weight is None:
            self.synonym_weight = self.weight


@dataclass(frozen=True)
class KeywordMatch:
    """Result of matching a synonym set against one ranked field."""

    found: bool
    synonym: bool = False


@dataclass
class SearchResult:
    """Result of a query."""

    search: str
    found_items: int
    results: List[ContentRecord] = field(default_factory=list)
    tier: Optional[int] = None

    @classmethod
    def not_defined(cls) -> "SearchResult":
        """Result for an empty query."""
        return cls(NOT_DEFINED, 0, [])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the response shape consumed by route adapters."""
        return {
            "search": self.search,
            "foundItems": self.found_items,
            "results": [record.to_dict() for record in self.results],
        }
