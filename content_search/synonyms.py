"""
Synonym Dictionary for Content Search

This module holds the synonym table used to expand queries. The table is built once at
startup from a static dictionary and is read-only afterwards; a new dictionary only takes
effect when a new table is built.

Dictionary Format:
    One synonym group per line, variants separated by ``;``. Parenthesised annotations are
    dropped and every variant is lower-cased:

        Auto;Kraftfahrzeug;Wagen (umgangssprachlich);Pkw
        Impressum;Anbieterkennzeichnung

Example Usage:
    from content_search.synonyms import SynonymTable

    table = SynonymTable.from_file()
    table.lookup("Pkw")        # ["pkw", "auto", "kraftfahrzeug", "wagen"]
    table.synonyms_of("auto")  # {"auto": [["auto", "kraftfahrzeug", "wagen", "pkw"]]}
"""

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .models import SynonymsOfWord
from .services.base import SynonymFileError

logger = logging.getLogger(__name__)

DEFAULT_SYNONYMS_FILE = Path(__file__).parent / "data" / "synonyms.txt"

_ANNOTATION = re.compile(r"\([^)]*\)")
_WHITESPACE = re.compile(r"\s+")


def normalize_word(word: str) -> str:
    """Normalize a dictionary entry or query word."""
    word = _ANNOTATION.sub("", word or "")
    return _WHITESPACE.sub(" ", word).strip().lower()


def parse_synonyms(lines: Iterable[str]) -> List[List[str]]:
    """Parse synonym groups from dictionary lines.

    Args:
        lines: Dictionary lines

    Returns:
        List of synonym groups
    """
    groups = []
    for line in lines:
        group = [normalize_word(entry) for entry in line.split(";")]
        group = [entry for entry in group if entry]
        if group:
            groups.append(group)
    return groups


def load_synonyms(path: Optional[Union[str, Path]] = None) -> List[List[str]]:
    """Load synonym groups from a dictionary file.

    Args:
        path: Dictionary file (defaults to the bundled dictionary)

    Returns:
        List of synonym groups

    Raises:
        SynonymFileError: If the file cannot be read
    """
    path = Path(path) if path else DEFAULT_SYNONYMS_FILE
    try:
        with open(path, encoding="utf-8") as f:
            groups = parse_synonyms(f)
    except OSError as e:
        raise SynonymFileError(
            f"Failed to load synonyms from {path}: {e}", {"path": str(path)}
        ) from e

    logger.info(f"Loaded synonym list with {len(groups)} synonyms")
    return groups


class SynonymTable:
    """Immutable mapping from a word to its synonym groups."""

    def __init__(self, groups: Iterable[Sequence[str]] = ()) -> None:
        """Initialize synonym table.

        Args:
            groups: Synonym groups; entries are normalized and de-duplicated
        """
        normalized = []
        for group in groups:
            words = tuple(dict.fromkeys(w for w in map(normalize_word, group) if w))
            if words:
                normalized.append(words)
        self._groups: Tuple[Tuple[str, ...], ...] = tuple(normalized)

        self._index: Dict[str, List[int]] = {}
        for position, words in enumerate(self._groups):
            for word in words:
                self._index.setdefault(word, []).append(position)

    @classmethod
    def from_file(cls, path: Optional[Union[str, Path]] = None) -> "SynonymTable":
        """Build a table from a dictionary file."""
        return cls(load_synonyms(path))

    @property
    def groups(self) -> Tuple[Tuple[str, ...], ...]:
        return self._groups

    def __len__(self) -> int:
        return len(self._groups)

    def groups_of(self, word: str) -> List[Tuple[str, ...]]:
        """Get every group containing a word (case-insensitive)."""
        positions = self._index.get((word or "").strip().lower(), [])
        return [self._groups[position] for position in positions]

    def lookup(self, word: str) -> List[str]:
        """Expand a word into its synonym set.

        The lower-cased word always comes first, followed by the members of every group
        containing it. Unknown words expand to themselves.

        Args:
            word: Query word or phrase

        Returns:
            Ordered, de-duplicated synonym list
        """
        word = (word or "").lower()
        synonyms = {word: None}
        for group in self.groups_of(word):
            synonyms.update(dict.fromkeys(group))
        return list(synonyms)

    def synonyms_of(self, words: str) -> SynonymsOfWord:
        """Get the synonym groups of each word in a comma separated list.

        Args:
            words: Words separated by ``,``

        Returns:
            Mapping of each word to the groups containing it
        """
        results: SynonymsOfWord = {}
        for word in words.split(","):
            word = word.strip()
            if not word:
                continue
            results[word] = [list(group) for group in self.groups_of(word)]
        return results
