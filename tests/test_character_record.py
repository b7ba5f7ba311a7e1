from __future__ import annotations

from unicode_atlas.domain.character_record import normalize_alternative_names, parse_record


def test_alternative_names_accepts_json_string_and_list() -> None:
    assert normalize_alternative_names('["foo","bar"]') == ("foo", "bar")
    assert normalize_alternative_names(["foo", "bar"]) == ("foo", "bar")


def test_alternative_names_malformed_or_missing_is_empty() -> None:
    assert normalize_alternative_names(None) == ()
    assert normalize_alternative_names("") == ()
    assert normalize_alternative_names("not json") == ()
    assert normalize_alternative_names('{"a": 1}') == ()
    assert normalize_alternative_names(42) == ()


def test_parse_record_maps_source_keys() -> None:
    rec = parse_record(
        {
            "Codepoint": "U+0041",
            "Character": "A",
            "Name": "LATIN CAPITAL LETTER A",
            "Category": "Lu",
            "Category_long": "Letter, Uppercase",
            "Unicode Block": "Basic Latin",
            "Character Description": "First letter.",
            "Wikipedia Link": "https://en.wikipedia.org/wiki/A",
            "Decimal Entity": "&#65;",
            "Hex Entity": "&#x41;",
        }
    )
    assert rec is not None
    assert rec.codepoint == "U+0041"
    assert rec.category_long == "Letter, Uppercase"
    assert rec.unicode_block == "Basic Latin"
    assert rec.description == "First letter."
    assert rec.named_entity is None
    assert rec.alternative_names == ()


def test_parse_record_without_codepoint_is_skipped() -> None:
    assert parse_record({"Character": "A"}) is None
    assert parse_record({"Codepoint": "  "}) is None
    assert parse_record(["U+0041"]) is None


def test_placeholder_named_entity_is_dropped() -> None:
    rec = parse_record({"Codepoint": "U+0020", "Character": " ", "Named Entity": "&;"})
    assert rec is not None
    assert rec.named_entity is None


def test_display_category_falls_back_to_short_code() -> None:
    rec = parse_record({"Codepoint": "U+0041", "Category": "Lu"})
    assert rec is not None
    assert rec.display_category == "Lu"
