from .query import (
    BuiltQuery,
    Condition,
    PropertySearchOptions,
    build_property_query,
    filter_by_tag,
)

__all__ = [
    "BuiltQuery",
    "Condition",
    "PropertySearchOptions",
    "build_property_query",
    "filter_by_tag",
]
