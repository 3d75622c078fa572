from starlette.datastructures import QueryParams

from miacasa_site.search import PropertySearchOptions, build_property_query, filter_by_tag
from miacasa_site.search.query import MAX_LIMIT, MAX_OFFSET, condition_summary


def test_no_options_is_identity():
    built = build_property_query(PropertySearchOptions())
    assert condition_summary(built.conditions) == [("listing_status", "equals", "Active")]
    assert built.where_sql == "listing_status = ?"
    assert built.params == ["Active"]
    assert built.order_sql == "price DESC"


def test_none_options_is_identity():
    assert len(build_property_query(None).conditions) == 1


def test_price_and_bedroom_bounds_only():
    built = build_property_query(
        PropertySearchOptions(min_price=200000, max_price=500000, bedrooms=2)
    )
    summary = condition_summary(built.conditions)
    assert summary == [
        ("listing_status", "equals", "Active"),
        ("min_price", "gte", 200000),
        ("max_price", "lte", 500000),
        ("bedrooms", "gte", 2),
    ]
    assert built.where_sql == "listing_status = ? AND price >= ? AND price <= ? AND bedrooms >= ?"
    assert built.params == ["Active", 200000, 500000, 2]


def test_from_query_params():
    params = QueryParams(
        "minPrice=200000&maxPrice=500000&bedrooms=2&features=Pool&features=Sea view"
        "&location=Marbella&sortBy=newest&investmentTier=&bogus=1"
    )
    options = PropertySearchOptions.from_query_params(params, limit=12)
    assert options.min_price == 200000.0
    assert options.max_price == 500000.0
    assert options.bedrooms == 2
    assert options.features == ["Pool", "Sea view"]
    assert options.location == "Marbella"
    assert options.investment_tier is None
    assert options.sort_by == "newest"
    assert options.limit == 12


def test_unparseable_numbers_are_dropped():
    options = PropertySearchOptions.from_query_params({"minPrice": "cheap", "bedrooms": "two"})
    assert options.active_filters() == {}


def test_unknown_sort_falls_back():
    built = build_property_query(PropertySearchOptions(sort_by="random"))
    assert built.order_sql == "price DESC"
    assert build_property_query(PropertySearchOptions(sort_by="price-asc")).order_sql == "price ASC"


def test_features_are_each_required():
    built = build_property_query(PropertySearchOptions(features=["Pool", "Garage"]))
    summary = condition_summary(built.conditions)[1:]
    assert summary == [("features", "contains", "Pool"), ("features", "contains", "Garage")]
    assert built.params[1:] == ["%pool%", "%garage%"]


def test_location_matches_city_or_province():
    built = build_property_query(PropertySearchOptions(location="Marbella"))
    cond = built.conditions[1]
    assert "city" in cond.sql and "province" in cond.sql
    assert cond.params == ("%marbella%", "%marbella%")


def test_featured_false_adds_nothing():
    assert len(build_property_query(PropertySearchOptions(featured=False)).conditions) == 1
    cond = build_property_query(PropertySearchOptions(featured=True)).conditions[1]
    assert cond.sql == "is_featured = 1"


def test_tier_condition_uses_stored_or_price_band():
    cond = build_property_query(PropertySearchOptions(investment_tier="Mid-range")).conditions[1]
    assert cond.params == ("Mid-range", 200_000, 500_000)
    starter = build_property_query(PropertySearchOptions(investment_tier="Starter")).conditions[1]
    assert "price IS NULL" in starter.sql
    unknown = build_property_query(PropertySearchOptions(investment_tier="Gold")).conditions[1]
    assert unknown.params == ("Gold",)


def test_limit_and_offset_are_clamped():
    built = build_property_query(PropertySearchOptions(limit=10_000, offset=-5))
    assert built.limit == MAX_LIMIT
    assert built.offset == 0
    assert build_property_query(PropertySearchOptions(limit=0)).limit == 1
    assert built.sql().endswith("LIMIT ? OFFSET ?")
    assert built.sql_params()[-2:] == [MAX_LIMIT, 0]


def test_filter_by_tag_handles_mixed_encodings():
    rows = [
        {"id": 1, "tags": '["Legal","Buying"]'},
        {"id": 2, "tags": "{Market,Legal}"},
        {"id": 3, "tags": "Market, Investment"},
        {"id": 4, "tags": None},
        {"id": 5},
    ]
    assert [r["id"] for r in filter_by_tag(rows, "legal")] == [1, 2]
    assert [r["id"] for r in filter_by_tag(rows, "market")] == [2, 3]
    assert len(filter_by_tag(rows, "")) == 5
    assert len(filter_by_tag(rows, None)) == 5


def test_non_finite_and_oversized_numbers_are_absent():
    options = PropertySearchOptions.from_query_params(
        {"bedrooms": "1e30", "bathrooms": "inf", "minPrice": "nan", "maxPrice": "1e400", "minArea": "-inf"}
    )
    assert options.active_filters() == {}
    assert len(build_property_query(options).conditions) == 1


def test_large_but_representable_numbers_are_kept():
    options = PropertySearchOptions.from_query_params({"bedrooms": "3.9", "maxPrice": "1e12"})
    assert options.bedrooms == 3
    assert options.max_price == 1e12


def test_offset_is_capped():
    built = build_property_query(PropertySearchOptions(offset=10**30))
    assert built.offset == MAX_OFFSET
