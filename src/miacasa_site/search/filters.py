from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Tuple


FieldType = Literal["str", "int", "float", "bool", "str_list"]
Op = Literal[
    "equals",
    "gte",
    "lte",
    "contains",
    "contains_any",
    "contains_all",
    "tier",
]


@dataclass(frozen=True)
class FieldDefinition:
    name: str
    type: FieldType
    ui_label: str
    op: Op
    db_columns: Tuple[str, ...]
    query_param: str


# Property listing filters, keyed by option name.
FILTER_FIELDS: Dict[str, FieldDefinition] = {
    "location": FieldDefinition(
        name="location",
        type="str",
        ui_label="Location",
        op="contains_any",
        db_columns=("city", "province"),
        query_param="location",
    ),
    "property_type": FieldDefinition(
        name="property_type",
        type="str",
        ui_label="Property Type",
        op="equals",
        db_columns=("property_type",),
        query_param="propertyType",
    ),
    "min_price": FieldDefinition(
        name="min_price",
        type="float",
        ui_label="Min Price",
        op="gte",
        db_columns=("price",),
        query_param="minPrice",
    ),
    "max_price": FieldDefinition(
        name="max_price",
        type="float",
        ui_label="Max Price",
        op="lte",
        db_columns=("price",),
        query_param="maxPrice",
    ),
    "bedrooms": FieldDefinition(
        name="bedrooms",
        type="int",
        ui_label="Bedrooms",
        op="gte",
        db_columns=("bedrooms",),
        query_param="bedrooms",
    ),
    "bathrooms": FieldDefinition(
        name="bathrooms",
        type="int",
        ui_label="Bathrooms",
        op="gte",
        db_columns=("bathrooms",),
        query_param="bathrooms",
    ),
    "min_area": FieldDefinition(
        name="min_area",
        type="float",
        ui_label="Min Living Area (m²)",
        op="gte",
        db_columns=("area_sqm",),
        query_param="minArea",
    ),
    "max_area": FieldDefinition(
        name="max_area",
        type="float",
        ui_label="Max Living Area (m²)",
        op="lte",
        db_columns=("area_sqm",),
        query_param="maxArea",
    ),
    "min_plot": FieldDefinition(
        name="min_plot",
        type="float",
        ui_label="Min Plot (m²)",
        op="gte",
        db_columns=("plot_sqm",),
        query_param="minPlot",
    ),
    "max_plot": FieldDefinition(
        name="max_plot",
        type="float",
        ui_label="Max Plot (m²)",
        op="lte",
        db_columns=("plot_sqm",),
        query_param="maxPlot",
    ),
    "features": FieldDefinition(
        name="features",
        type="str_list",
        ui_label="Features",
        op="contains_all",
        db_columns=("features",),
        query_param="features",
    ),
    "transaction_type": FieldDefinition(
        name="transaction_type",
        type="str",
        ui_label="Transaction Type",
        op="equals",
        db_columns=("transaction_type",),
        query_param="transactionType",
    ),
    "development_type": FieldDefinition(
        name="development_type",
        type="str",
        ui_label="Development Type",
        op="equals",
        db_columns=("development_type",),
        query_param="developmentType",
    ),
    "availability": FieldDefinition(
        name="availability",
        type="str",
        ui_label="Availability",
        op="equals",
        db_columns=("availability_status",),
        query_param="availability",
    ),
    "investment_tier": FieldDefinition(
        name="investment_tier",
        type="str",
        ui_label="Investment Tier",
        op="tier",
        db_columns=("investment_tier", "price"),
        query_param="investmentTier",
    ),
    "featured": FieldDefinition(
        name="featured",
        type="bool",
        ui_label="Featured",
        op="equals",
        db_columns=("is_featured",),
        query_param="featured",
    ),
}


DEFAULT_SORT = "price-desc"

SORT_KEYS: Dict[str, str] = {
    "price-desc": "price DESC",
    "price-asc": "price ASC",
    "newest": "created_at DESC",
    "size-desc": "area_sqm DESC",
    "bedrooms-desc": "bedrooms DESC",
}

SORT_LABELS: Dict[str, str] = {
    "price-desc": "Price (high to low)",
    "price-asc": "Price (low to high)",
    "newest": "Newest",
    "size-desc": "Size (largest first)",
    "bedrooms-desc": "Bedrooms (most first)",
}
