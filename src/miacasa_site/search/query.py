from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..normalize import to_string_list
from ..tiers import tier_price_bounds
from .filters import DEFAULT_SORT, FILTER_FIELDS, SORT_KEYS, FieldDefinition


ACTIVE_STATUS = "Active"
MAX_LIMIT = 100
MAX_OFFSET = 100_000
# SQLite binds integers as signed 64-bit.
_SQLITE_INT_MAX = 2**63 - 1


@dataclass(frozen=True)
class Condition:
    field: str
    op: str
    value: Any
    sql: str
    params: Tuple[Any, ...]


@dataclass(frozen=True)
class BuiltQuery:
    conditions: Tuple[Condition, ...]
    order_sql: str
    limit: int
    offset: int

    @property
    def where_sql(self) -> str:
        return " AND ".join(c.sql for c in self.conditions)

    @property
    def params(self) -> List[Any]:
        out: List[Any] = []
        for c in self.conditions:
            out.extend(c.params)
        return out

    def sql(self, table: str = "properties") -> str:
        where = f" WHERE {self.where_sql}" if self.conditions else ""
        return f"SELECT * FROM {table}{where} ORDER BY {self.order_sql} LIMIT ? OFFSET ?"

    def sql_params(self) -> List[Any]:
        return [*self.params, self.limit, self.offset]


@dataclass
class PropertySearchOptions:
    location: Optional[str] = None
    property_type: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    min_area: Optional[float] = None
    max_area: Optional[float] = None
    min_plot: Optional[float] = None
    max_plot: Optional[float] = None
    features: List[str] = field(default_factory=list)
    transaction_type: Optional[str] = None
    development_type: Optional[str] = None
    availability: Optional[str] = None
    investment_tier: Optional[str] = None
    featured: Optional[bool] = None
    sort_by: str = DEFAULT_SORT
    limit: int = 10
    offset: int = 0

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any], **overrides: Any) -> "PropertySearchOptions":
        """Build options from a query string mapping (camelCase keys).

        Values that do not parse are treated as absent.
        """

        kwargs: dict[str, Any] = {}
        for name, definition in FILTER_FIELDS.items():
            raw = _get_param(params, definition)
            if raw is None:
                continue
            value = _coerce(definition, raw)
            if value is not None and value != []:
                kwargs[name] = value
        sort_by = params.get("sortBy") if hasattr(params, "get") else None
        if isinstance(sort_by, str) and sort_by.strip():
            kwargs["sort_by"] = sort_by.strip()
        kwargs.update(overrides)
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in kwargs.items() if k in known})

    def active_filters(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name in FILTER_FIELDS:
            value = getattr(self, name)
            if value is None or value == [] or value == "":
                continue
            out[name] = value
        return out


def _get_param(params: Mapping[str, Any], definition: FieldDefinition) -> Any:
    key = definition.query_param
    if definition.type == "str_list" and hasattr(params, "getlist"):
        values = params.getlist(key)
        if not values:
            return None
        return ",".join(str(v) for v in values)
    try:
        return params.get(key)
    except AttributeError:
        return None


def _coerce(definition: FieldDefinition, raw: Any) -> Any:
    if definition.type == "str_list":
        return [v for v in to_string_list(raw) if v]
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    if definition.type == "int":
        number = _finite(raw)
        if number is None:
            return None
        value = int(number)
        return value if abs(value) <= _SQLITE_INT_MAX else None
    if definition.type == "float":
        return _finite(raw)
    if definition.type == "bool":
        if isinstance(raw, bool):
            return raw
        return str(raw).lower() in ("1", "true", "yes", "y", "on")
    return str(raw)


def _finite(raw: Any) -> Optional[float]:
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        return None
    return value if math.isfinite(value) else None


def _clamp_limit(limit: Any, *, default: int = 10, cap: int = MAX_LIMIT) -> int:
    try:
        n = int(limit if limit is not None else default)
    except (TypeError, ValueError):
        n = default
    return max(1, min(n, cap))


def _clamp_offset(offset: Any, *, cap: int = MAX_OFFSET) -> int:
    try:
        n = int(offset or 0)
    except (TypeError, ValueError, OverflowError):
        n = 0
    return max(0, min(n, cap))


def _like_param(q: str) -> str:
    # Parameterized LIKE; callers wrap with lower() to keep case-insensitive.
    return f"%{q.lower()}%"


def _conditions_for(definition: FieldDefinition, value: Any) -> List[Condition]:
    name = definition.name
    op = definition.op

    if op == "equals":
        column = definition.db_columns[0]
        if definition.type == "bool":
            if not value:
                return []
            return [Condition(name, op, True, f"{column} = 1", ())]
        return [Condition(name, op, value, f"{column} = ?", (value,))]

    if op in ("gte", "lte"):
        column = definition.db_columns[0]
        sql_op = ">=" if op == "gte" else "<="
        return [Condition(name, op, value, f"{column} {sql_op} ?", (value,))]

    if op == "contains_any":
        like = _like_param(str(value))
        parts = [f"lower(ifnull({c},'')) LIKE ?" for c in definition.db_columns]
        return [
            Condition(
                name,
                op,
                value,
                "(" + " OR ".join(parts) + ")",
                tuple(like for _ in definition.db_columns),
            )
        ]

    if op == "contains_all":
        column = definition.db_columns[0]
        return [
            Condition(name, "contains", item, f"lower(ifnull({column},'')) LIKE ?", (_like_param(item),))
            for item in value
        ]

    if op == "tier":
        stored_col, price_col = definition.db_columns
        stored_sql = f"lower(ifnull({stored_col},'')) = lower(?)"
        params: List[Any] = [value]
        bounds = tier_price_bounds(value)
        if bounds is None:
            return [Condition(name, op, value, stored_sql, tuple(params))]
        low, high = bounds
        band: List[str] = []
        if low is not None:
            band.append(f"{price_col} > ?")
            params.append(low)
        if high is not None:
            band.append(f"{price_col} <= ?")
            params.append(high)
        band_sql = " AND ".join(band)
        if low is None:
            band_sql = f"({price_col} IS NULL OR {band_sql})"
        derived_sql = f"(trim(ifnull({stored_col},'')) = '' AND {band_sql})"
        return [Condition(name, op, value, f"({stored_sql} OR {derived_sql})", tuple(params))]

    raise ValueError(f"Unsupported filter op: {op}")


def build_property_query(options: Optional[PropertySearchOptions] = None) -> BuiltQuery:
    """Compose the filtered, sorted, paginated read over active listings."""

    options = options or PropertySearchOptions()
    conditions: List[Condition] = [
        Condition(
            "listing_status",
            "equals",
            ACTIVE_STATUS,
            "listing_status = ?",
            (ACTIVE_STATUS,),
        )
    ]
    for name, value in options.active_filters().items():
        conditions.extend(_conditions_for(FILTER_FIELDS[name], value))

    order_sql = SORT_KEYS.get(str(options.sort_by or ""), SORT_KEYS[DEFAULT_SORT])
    return BuiltQuery(
        conditions=tuple(conditions),
        order_sql=order_sql,
        limit=_clamp_limit(options.limit),
        offset=_clamp_offset(options.offset),
    )


def tag_matches(value: Any, tag: str) -> bool:
    needle = (tag or "").strip().lower()
    if not needle:
        return True
    return any(needle in t.lower() for t in to_string_list(value))


def filter_by_tag(rows: Iterable[Mapping[str, Any]], tag: Optional[str], field_name: str = "tags") -> List[Mapping[str, Any]]:
    """Keep rows whose normalized `field_name` contains `tag` (case-insensitive)."""

    items = list(rows)
    if not tag or not str(tag).strip():
        return items
    return [r for r in items if tag_matches(_field(r, field_name), str(tag))]


def _field(row: Mapping[str, Any], name: str) -> Any:
    try:
        return row[name]
    except (KeyError, IndexError, TypeError):
        return None


def condition_summary(conditions: Sequence[Condition]) -> List[Tuple[str, str, Any]]:
    return [(c.field, c.op, c.value) for c in conditions]
