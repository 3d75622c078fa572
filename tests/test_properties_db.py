import sqlite3

import pytest

from miacasa_site.properties_db import (
    get_featured_properties,
    get_market_insights,
    get_properties,
    get_properties_by_location,
    get_property_by_slug,
    get_similar_properties,
)
from miacasa_site.search import PropertySearchOptions


@pytest.fixture
def listings(insert):
    insert("locations", id="loc-1", slug="marbella", name="Marbella")
    rows = [
        ("p1", "villa-a", 150_000, 1, "Villa", "Marbella", '["Pool","Garden"]', None, "Active", 0, 100),
        ("p2", "villa-b", 350_000, 3, "Villa", "Marbella", "{Pool,Garage}", None, "Active", 1, 200),
        ("p3", "flat-c", 450_000, 2, "Apartment", "Estepona", "Terrace", "Luxury", "Active", 0, 90),
        ("p4", "villa-d", 900_000, 4, "Villa", "Marbella", "Pool", None, "Sold", 1, 300),
        ("p5", "plot-e", None, None, "Plot", "Marbella", None, None, "Active", 0, None),
    ]
    for pid, slug, price, beds, ptype, city, features, tier, status, featured, area in rows:
        insert(
            "properties",
            id=pid,
            slug=slug,
            title=slug,
            price=price,
            bedrooms=beds,
            property_type=ptype,
            city=city,
            province="Malaga",
            features=features,
            investment_tier=tier,
            listing_status=status,
            is_featured=featured,
            area_sqm=area,
            created_at=f"2024-01-0{pid[1]}",
        )


def _ids(rows):
    return [r["id"] for r in rows]


def test_only_active_listings_sorted_by_price(conn, listings):
    rows = get_properties(conn)
    assert "p4" not in _ids(rows)
    assert _ids(rows)[:3] == ["p3", "p2", "p1"]


def test_price_and_bedroom_filters(conn, listings):
    rows = get_properties(conn, PropertySearchOptions(min_price=200_000, max_price=500_000, bedrooms=2))
    assert sorted(_ids(rows)) == ["p2", "p3"]


def test_feature_filter_across_encodings(conn, listings):
    rows = get_properties(conn, PropertySearchOptions(features=["pool"]))
    assert sorted(_ids(rows)) == ["p1", "p2"]
    rows = get_properties(conn, PropertySearchOptions(features=["pool", "garage"]))
    assert _ids(rows) == ["p2"]


def test_tier_filter_uses_stored_then_price(conn, listings):
    assert _ids(get_properties(conn, PropertySearchOptions(investment_tier="Luxury"))) == ["p3"]
    assert sorted(_ids(get_properties(conn, PropertySearchOptions(investment_tier="Starter")))) == ["p1", "p5"]
    assert _ids(get_properties(conn, PropertySearchOptions(investment_tier="Mid-range"))) == ["p2"]


def test_rows_come_back_normalized(conn, listings):
    row = get_property_by_slug(conn, "villa-b")
    assert row["id"] == "p2"
    assert isinstance(row, dict)
    assert get_property_by_slug(conn, "missing") is None
    assert get_property_by_slug(conn, "") is None


def test_featured(conn, listings):
    assert _ids(get_featured_properties(conn)) == ["p2"]


def test_similar_excludes_self_and_other_types(conn, listings):
    prop = get_property_by_slug(conn, "villa-a")
    assert _ids(get_similar_properties(conn, prop)) == ["p2"]


def test_by_location(conn, listings):
    rows = get_properties_by_location(conn, "marbella", limit=10)
    assert sorted(_ids(rows)) == ["p1", "p2", "p5"]
    assert get_properties_by_location(conn, "nowhere") == []


def test_market_insights(conn, listings):
    insights = get_market_insights(conn, "marbella")
    assert insights["listing_count"] == 3
    assert insights["avg_price"] == 250_000
    assert insights["min_price"] == 150_000
    assert insights["max_price"] == 350_000
    assert insights["typical_tier"] == "Mid-range"
    assert insights["tier_distribution"]["Starter"] == 2
    assert get_market_insights(conn, "nowhere") is None


def test_missing_table_reads_as_empty(db_path):
    c = sqlite3.connect(db_path)
    c.row_factory = sqlite3.Row
    try:
        assert get_properties(c) == []
        assert get_property_by_slug(c, "x") is None
    finally:
        c.close()
