"""Coercion of inconsistently stored list-like fields.

Stored rows carry tags, image URLs, specialties and languages in several
encodings: native lists, JSON text, Postgres array literals (``{a,b}``),
comma-separated text or a single bare value. Every reader goes through
:func:`to_string_list`, which is total and never raises.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any, Dict, List, Optional


_WHITESPACE_RE = re.compile(r"\s+")

# String coercions of non-string values that mean "there was no value".
_SENTINELS = frozenset({"", "null", "undefined", "none", "None", "[object Object]"})

# Row fields known to hold list-like values.
LIST_FIELDS = (
    "tags",
    "lifestyle_tags",
    "related_location_slug",
    "specialties",
    "languages_spoken",
    "notable_projects",
    "images",
    "image_urls",
    "raw_image_urls",
    "category_tags",
    "label_tags",
)


def normalize_text(value: Optional[str]) -> str:
    if value is None:
        return ""
    cleaned = _WHITESPACE_RE.sub(" ", str(value)).strip()
    return cleaned.casefold()


def slugify(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return _WHITESPACE_RE.sub("-", value.strip().lower())


def _strip_quotes(item: str) -> str:
    item = item.strip()
    if len(item) >= 2 and item[0] == item[-1] and item[0] in ("'", '"'):
        return item[1:-1]
    return item


def _strings(items: Any) -> List[str]:
    return [item for item in items if isinstance(item, str)]


def parse_pg_array(text: str) -> List[str]:
    """Parse a Postgres array literal such as ``{a,"b c",d}``."""

    inner = text.strip()
    if inner.startswith("{") and inner.endswith("}"):
        inner = inner[1:-1]
    out: List[str] = []
    for part in inner.split(","):
        item = _strip_quotes(part).strip()
        if item:
            out.append(item)
    return out


def _shape(value: Any) -> str:
    if value is None:
        return "missing"
    if isinstance(value, (list, tuple)):
        return "list"
    if isinstance(value, bytes):
        return "bytes"
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return "empty"
        if text[0] in "[{":
            return "json"
        if "," in text:
            return "csv"
        return "scalar"
    if isinstance(value, Mapping):
        return "mapping"
    return "other"


def _from_json_text(text: str) -> List[str]:
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None
    else:
        if isinstance(parsed, list):
            return _strings(parsed)
        if isinstance(parsed, dict):
            return _strings(parsed.values())
        return []

    # Not JSON: a Postgres literal, then a plain comma list, then one value.
    if text.startswith("{") and text.endswith("}"):
        return parse_pg_array(text)
    if "," in text:
        return _split_commas(text)
    return [text]


def _split_commas(text: str) -> List[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def _from_other(value: Any) -> List[str]:
    if isinstance(value, bool):
        coerced = "true" if value else "false"
    elif isinstance(value, float) and value.is_integer():
        coerced = str(int(value))
    else:
        try:
            coerced = str(value)
        except Exception:
            return []
    if coerced in _SENTINELS:
        return []
    return [coerced]


def to_string_list(value: Any) -> List[str]:
    """Coerce any stored value into a list of strings. Never raises."""

    shape = _shape(value)
    if shape in ("missing", "empty"):
        return []
    if shape == "list":
        return _strings(value)
    if shape == "bytes":
        return to_string_list(value.decode("utf-8", errors="replace"))
    if shape == "json":
        return _from_json_text(value.strip())
    if shape == "csv":
        return _split_commas(value)
    if shape == "scalar":
        return [value.strip()]
    if shape == "mapping":
        try:
            return _strings(value.values())
        except Exception:
            return []
    return _from_other(value)


def parse_json_field(value: Any, default: Any = None) -> Any:
    """Decode a mapping-shaped field (e.g. social links) or fall back to a list."""

    if isinstance(value, Mapping):
        return {str(k): v for k, v in value.items() if isinstance(v, str)}
    if isinstance(value, str) and value.strip().startswith("{"):
        try:
            parsed = json.loads(value)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            return {str(k): v for k, v in parsed.items() if isinstance(v, str)}
    items = to_string_list(value)
    if items:
        return items
    return {} if default is None else default


def sanitize_record(row: Any) -> Dict[str, Any]:
    """Return a plain dict copy of a row with list-like fields normalized."""

    if row is None:
        return {}
    try:
        record = dict(row)
    except (TypeError, ValueError):
        return {}
    for key in LIST_FIELDS:
        if key in record:
            record[key] = to_string_list(record[key])
    return record
