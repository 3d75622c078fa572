import json

import pytest

from miacasa_site.normalize import (
    parse_json_field,
    parse_pg_array,
    sanitize_record,
    slugify,
    to_string_list,
)


class _Unprintable:
    def __str__(self):
        raise RuntimeError("boom")


@pytest.mark.parametrize(
    "value",
    [
        '["a","b"]',
        '{"x":"a","y":"b"}',
        "{a,b}",
        "a, b",
        "a",
        ["a", "b"],
        {"x": "a"},
        None,
        "",
        "   ",
        42,
        3.5,
        True,
        False,
        b'["a"]',
        "[not json",
        "{",
        '"quoted"',
        "null",
        object(),
        _Unprintable(),
    ],
)
def test_always_returns_list_of_strings(value):
    out = to_string_list(value)
    assert isinstance(out, list)
    assert all(isinstance(x, str) for x in out)


def test_json_array_text():
    assert to_string_list('["Pool", "Garden"]') == ["Pool", "Garden"]


def test_json_array_drops_non_strings():
    assert to_string_list('["Pool", 3, null, "Gym"]') == ["Pool", "Gym"]


def test_json_object_text_yields_values():
    assert to_string_list('{"en": "English", "es": "Spanish"}') == ["English", "Spanish"]


def test_quoted_bare_string_is_kept_verbatim():
    assert to_string_list('"solo"') == ['"solo"']


def test_json_containers_keep_only_strings():
    assert to_string_list("[\"solo\"]") == ["solo"]
    assert to_string_list("{\"a\": 1}") == []


def test_json_number_is_empty():
    assert to_string_list("[1, 2]") == []


def test_postgres_array_literal():
    assert to_string_list('{Beach,"Fine dining",Golf}') == ["Beach", "Fine dining", "Golf"]


def test_postgres_empty_literal():
    assert to_string_list("{}") == []


def test_comma_separated_text():
    assert to_string_list("Terrace, Pool ,, Gym") == ["Terrace", "Pool", "Gym"]


def test_bare_string():
    assert to_string_list("  Garden ") == ["Garden"]


def test_broken_json_with_commas_falls_back_to_split():
    assert to_string_list("[a, b") == ["[a", "b"]


def test_native_list_keeps_only_strings():
    assert to_string_list(["a", 1, None, "b"]) == ["a", "b"]


def test_native_mapping_values():
    assert to_string_list({"a": "x", "b": 2, "c": "y"}) == ["x", "y"]


@pytest.mark.parametrize("value", [None, "", "  "])
def test_absent_values_are_empty(value):
    assert to_string_list(value) == []


@pytest.mark.parametrize("value", ["null", "undefined", "None", "[object Object]"])
def test_sentinel_looking_strings_are_kept(value):
    assert to_string_list(value) == [value]


class _Sentinel:
    def __init__(self, text):
        self.text = text

    def __str__(self):
        return self.text


@pytest.mark.parametrize("text", ["", "null", "undefined", "None", "[object Object]"])
def test_coerced_sentinels_are_empty(text):
    assert to_string_list(_Sentinel(text)) == []


def test_numbers_and_booleans_coerce():
    assert to_string_list(42) == ["42"]
    assert to_string_list(1.0) == ["1"]
    assert to_string_list(2.5) == ["2.5"]
    assert to_string_list(True) == ["true"]


def test_unprintable_object_is_empty():
    assert to_string_list(_Unprintable()) == []


def test_idempotent():
    once = to_string_list('{a,"b c"}')
    assert to_string_list(once) == once


def test_json_round_trip_preserves_order():
    items = ["z", "a", "m", "with, comma"]
    assert to_string_list(json.dumps(items)) == items


def test_parse_pg_array_strips_quotes():
    assert parse_pg_array("{'a',\"b\", c}") == ["a", "b", "c"]


def test_parse_json_field_mapping():
    assert parse_json_field('{"linkedin": "https://x", "n": 1}') == {"linkedin": "https://x"}
    assert parse_json_field({"a": "b"}) == {"a": "b"}


def test_parse_json_field_default():
    assert parse_json_field(None) == {}
    assert parse_json_field("", default=[]) == []
    assert parse_json_field("a,b") == ["a", "b"]


def test_sanitize_record_only_touches_list_fields():
    row = {"tags": "{a,b}", "title": "a,b", "images": None}
    out = sanitize_record(row)
    assert out == {"tags": ["a", "b"], "title": "a,b", "images": []}
    assert row["tags"] == "{a,b}"


def test_sanitize_record_bad_input():
    assert sanitize_record(None) == {}
    assert sanitize_record(42) == {}


def test_slugify():
    assert slugify("  Nordic Homes  Abroad ") == "nordic-homes-abroad"
    assert slugify(None) == ""
