"""Tests for keyword matching."""

import pytest

from content_search.models import FieldValue, KeywordMatch, RankedField, ValueKind
from content_search.search.matching import field_matches, match_keyword


@pytest.mark.parametrize(
    "synonym,value,full_match,expected",
    [
        ("auto", "Autoversicherung", False, True),
        ("auto", "Autoversicherung", True, False),
        ("auto", "Auto Versicherung", True, True),
        ("car", "Cartography", True, False),
        ("car", "cartography", False, True),
        ("imprint page", "Imprint page of the company", False, True),
        ("auto", "", False, False),
    ],
)
def test_match_keyword(synonym, value, full_match, expected):
    assert match_keyword(synonym, value, full_match) is expected


def test_whole_word_splits_on_single_space():
    assert match_keyword("car", "car,insurance", True) is False
    assert match_keyword("car", "car insurance", True) is True


def test_literal_hit():
    field = RankedField("Autoversicherung", weight=3)

    assert field_matches(field, ["auto", "car"], "auto", False) == KeywordMatch(True, False)


def test_synonym_hit_needs_whole_word():
    assert field_matches(
        RankedField("car insurance", weight=3), ["auto", "car"], "auto", False
    ) == KeywordMatch(True, True)
    assert field_matches(
        RankedField("Cartography", weight=3), ["auto", "car"], "auto", False
    ) == KeywordMatch(False)


def test_partial_match_relaxes_synonyms():
    field = RankedField("Cartography", weight=3)

    assert field_matches(field, ["auto", "car"], "auto", True) == KeywordMatch(True, True)


def test_full_match_field_counts_as_literal():
    field = RankedField(["Kfz", "car"], weight=2, synonym_weight=1, full_match=True)

    assert field_matches(field, ["auto", "car"], "auto", False) == KeywordMatch(True, False)


def test_full_match_field_rejects_substrings():
    field = RankedField("autoversicherung", weight=2, full_match=True)

    assert field_matches(field, ["auto"], "auto", False) == KeywordMatch(False)
    assert field_matches(field, ["auto"], "auto", True) == KeywordMatch(True, False)


def test_list_values_match_any_element():
    field = RankedField(["Haus", "Wohnung"], weight=1)

    assert field_matches(field, ["wohnung"], "wohnung", False).found


def test_empty_values_never_match():
    assert not field_matches(RankedField(None, 3), ["auto"], "auto", False).found
    assert not field_matches(RankedField("", 3), ["auto"], "auto", False).found
    assert not field_matches(RankedField([], 3), ["auto"], "auto", False).found


def test_malformed_value_raises():
    with pytest.raises(TypeError):
        field_matches(RankedField(42, 3), ["auto"], "auto", False)


def test_field_value_of():
    assert FieldValue.of("auto") == FieldValue(ValueKind.SCALAR, ("auto",))
    assert FieldValue.of(None).is_empty
    assert FieldValue.of(["a", None, ["b", "c"]]) == FieldValue(
        ValueKind.LIST, ("a", "b", "c")
    )
    with pytest.raises(TypeError):
        FieldValue.of({"a": 1})
    with pytest.raises(TypeError):
        FieldValue.of(["a", 1])


def test_synonym_weight_defaults_to_weight():
    assert RankedField("x", 3).synonym_weight == 3
    assert RankedField("x", 3, 1).synonym_weight == 1
