"""Keyword matching of synonym sets against ranked fields."""

from typing import Sequence

from ..models import FieldValue, KeywordMatch, RankedField


def match_keyword(synonym: str, value: str, full_match: bool) -> bool:
    """Check whether a synonym occurs in a value.

    Args:
        synonym: Query word or one of its synonyms
        value: Field value
        full_match: Require the synonym as a whole space-separated token

    Returns:
        Whether the value matches
    """
    synonym = (synonym or "").lower()
    value = (value or "").lower()
    if full_match:
        return synonym in value.split(" ")
    return synonym in value


def field_matches(
    field: RankedField,
    synonyms: Sequence[str],
    search_word: str,
    partial_match: bool,
) -> KeywordMatch:
    """Check whether a query word or any of its synonyms matches a ranked field.

    A hit counts as a synonym hit when the matching synonym is not the query word itself
    and the field does not demand whole-word matches. Synonym hits always need a whole
    word, unless ``partial_match`` relaxes every comparison to substring containment.

    Args:
        field: Ranked field
        synonyms: Synonym set of the query word
        search_word: The query word
        partial_match: Relax every comparison to substring containment

    Returns:
        Whether the field matched and whether the hit came from a synonym

    Raises:
        TypeError: If the field value is malformed
    """
    value = FieldValue.of(field.value)
    if value.is_empty:
        return KeywordMatch(found=False)

    for synonym in synonyms:
        # keyword mappings set full_match because an injected path is no synonym,
        # but it doesn't equal the search word either
        is_synonym = synonym != search_word and not field.full_match
        if partial_match:
            full_match = False
        else:
            full_match = is_synonym or field.full_match

        if any(match_keyword(synonym, item, full_match) for item in value.items):
            return KeywordMatch(found=True, synonym=is_synonym)

    return KeywordMatch(found=False)
