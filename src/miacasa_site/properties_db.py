from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Mapping, Optional

from .locations_db import get_location_by_slug
from .logging_setup import get_logger
from .normalize import sanitize_record
from .search.query import ACTIVE_STATUS, PropertySearchOptions, build_property_query
from .tiers import TIER_NAMES, derive_investment_tier, resolve_investment_tier


logger = get_logger("properties")


def get_properties(
    conn: sqlite3.Connection,
    options: Optional[PropertySearchOptions] = None,
) -> List[Dict[str, Any]]:
    built = build_property_query(options)
    try:
        rows = conn.execute(built.sql("properties"), built.sql_params()).fetchall()
    except sqlite3.Error as e:
        logger.warning("get_properties failed: %s", e)
        return []
    logger.debug(
        "get_properties returned %d rows",
        len(rows),
        extra={"filters": [c.field for c in built.conditions]},
    )
    return [sanitize_record(r) for r in rows]


def get_property_by_slug(conn: sqlite3.Connection, slug: str) -> Optional[Dict[str, Any]]:
    if not slug:
        return None
    try:
        row = conn.execute(
            "SELECT * FROM properties WHERE slug = ? LIMIT 1", (slug,)
        ).fetchone()
    except sqlite3.Error as e:
        logger.warning("get_property_by_slug(%s) failed: %s", slug, e)
        return None
    return sanitize_record(row) if row else None


def get_featured_properties(conn: sqlite3.Connection, limit: int = 6) -> List[Dict[str, Any]]:
    return get_properties(conn, PropertySearchOptions(featured=True, limit=limit))


def get_similar_properties(
    conn: sqlite3.Connection,
    prop: Mapping[str, Any],
    limit: int = 3,
) -> List[Dict[str, Any]]:
    """Active listings of the same type in the same city, excluding `prop`."""

    try:
        rows = conn.execute(
            """
            SELECT * FROM properties
            WHERE listing_status = ?
              AND ifnull(property_type,'') = ifnull(?,'')
              AND ifnull(city,'') = ifnull(?,'')
              AND id != ?
            ORDER BY price DESC
            LIMIT ?
            """,
            (
                ACTIVE_STATUS,
                prop.get("property_type"),
                prop.get("city"),
                prop.get("id"),
                int(limit),
            ),
        ).fetchall()
    except sqlite3.Error as e:
        logger.warning("get_similar_properties failed: %s", e)
        return []
    return [sanitize_record(r) for r in rows]


def get_properties_by_location(
    conn: sqlite3.Connection,
    location_slug: str,
    limit: int = 3,
) -> List[Dict[str, Any]]:
    location = get_location_by_slug(conn, location_slug)
    if not location:
        return []
    return get_properties(
        conn, PropertySearchOptions(location=location.get("name"), limit=limit)
    )


def get_market_insights(conn: sqlite3.Connection, location_slug: str) -> Optional[Dict[str, Any]]:
    """Aggregate price statistics over active listings in a location.

    Returns None when the location is unknown; a location without listings
    yields zero counts and null prices.
    """

    location = get_location_by_slug(conn, location_slug)
    if not location:
        return None
    name = str(location.get("name") or "")
    like = f"%{name.lower()}%"
    try:
        rows = conn.execute(
            """
            SELECT price, area_sqm, investment_tier FROM properties
            WHERE listing_status = ?
              AND (lower(ifnull(city,'')) LIKE ? OR lower(ifnull(province,'')) LIKE ?)
            """,
            (ACTIVE_STATUS, like, like),
        ).fetchall()
    except sqlite3.Error as e:
        logger.warning("get_market_insights(%s) failed: %s", location_slug, e)
        return None

    prices = [float(r["price"]) for r in rows if r["price"] is not None]
    per_sqm = [
        float(r["price"]) / float(r["area_sqm"])
        for r in rows
        if r["price"] is not None and r["area_sqm"]
    ]
    tiers = {name: 0 for name in TIER_NAMES}
    for r in rows:
        tier = resolve_investment_tier(dict(r))
        tiers[tier] = tiers.get(tier, 0) + 1

    avg_price = round(sum(prices) / len(prices), 2) if prices else None
    return {
        "location": location.get("name"),
        "location_slug": location.get("slug"),
        "listing_count": len(rows),
        "avg_price": avg_price,
        "min_price": min(prices) if prices else None,
        "max_price": max(prices) if prices else None,
        "avg_price_per_sqm": round(sum(per_sqm) / len(per_sqm), 2) if per_sqm else None,
        "typical_tier": derive_investment_tier(avg_price) if avg_price is not None else None,
        "tier_distribution": tiers,
    }
