"""In-memory record cache with atomic snapshot swaps."""

import logging
import threading
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Set, Tuple

from ..models import ContentRecord, RequestConfig

logger = logging.getLogger(__name__)

RecordKey = Callable[[ContentRecord], Optional[Hashable]]


class ContentCache:
    """Holds the flattened records of the last successful refresh.

    The records live in an immutable tuple. Writers build a complete new tuple and swap
    it in under a lock, so readers only ever see a whole snapshot.
    """

    def __init__(self, records: Iterable[ContentRecord] = ()) -> None:
        self._records: Tuple[ContentRecord, ...] = tuple(records)
        self._lock = threading.Lock()

    def snapshot(self) -> Tuple[ContentRecord, ...]:
        """Get the current records."""
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def replace(self, records: Iterable[ContentRecord]) -> None:
        """Replace every record.

        Args:
            records: Records of a full refresh
        """
        new_records = tuple(records)
        with self._lock:
            self._records = new_records
        logger.debug(f"Cache replaced with {len(new_records)} records")

    def merge(
        self,
        records: Iterable[ContentRecord],
        request_config: RequestConfig,
        key: Optional[RecordKey] = None,
    ) -> None:
        """Merge the records of a partial refresh.

        A selection by type alone (no ``path``) covers every node of that type, so
        existing records of the requested type are dropped. A selection with a ``path``
        covers only part of the tree and drops nothing by type.

        Existing records sharing a key with a new record are replaced in place; new
        records without a counterpart are appended.

        Args:
            records: Records of a partial refresh
            request_config: Selection that produced the records
            key: Record identity
        """
        new_records = tuple(records)
        by_key: Dict[Hashable, ContentRecord] = {}
        if key is not None:
            for record in new_records:
                record_key = key(record)
                if record_key is not None:
                    by_key.setdefault(record_key, record)
        drop_type = request_config.type if request_config.path is None else None

        with self._lock:
            merged: List[ContentRecord] = []
            placed: Set[int] = set()
            for record in self._records:
                if drop_type is not None and record.type_tag == drop_type:
                    continue
                replacement = by_key.get(key(record)) if by_key else None
                if replacement is None:
                    merged.append(record)
                elif id(replacement) not in placed:
                    merged.append(replacement)
                    placed.add(id(replacement))
            kept = len(merged) - len(placed)
            merged.extend(record for record in new_records if id(record) not in placed)
            self._records = tuple(merged)
        logger.debug(f"Cache merged {len(new_records)} records, kept {kept} existing records")
