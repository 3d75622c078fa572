"""Deterministic demo content for local development.

Rows deliberately mix the list encodings the site reads in production
(JSON text, Postgres array literals, comma lists, bare strings) so every
page exercises the normalizer.

Idempotent: if `properties` already holds rows, nothing is written.
"""

from __future__ import annotations

import json
import random
import sqlite3
from datetime import datetime, timedelta, timezone
from typing import Dict

from .db import ensure_schema
from .logging_setup import get_logger
from .normalize import slugify


logger = get_logger("seed")

_LOCATIONS = [
    # (id, name, region, parent_id, priority, tags)
    ("loc-costa-del-sol", "Costa del Sol", "Andalusia", None, 10, '["Beach","Golf","Sun"]'),
    ("loc-marbella", "Marbella", "Andalusia", "loc-costa-del-sol", 9, "{Luxury,Beach,\"Fine dining\"}"),
    ("loc-estepona", "Estepona", "Andalusia", "loc-costa-del-sol", 7, "Beach, Old town"),
    ("loc-mallorca", "Mallorca", "Balearic Islands", None, 8, "Island"),
    ("loc-palma", "Palma", "Balearic Islands", "loc-mallorca", 6, '["Marina","Culture"]'),
]

_FEATURE_SETS = [
    '["Pool","Sea view","Garden"]',
    "{Pool,Garage,\"Sea view\"}",
    "Terrace, Pool, Gym",
    "Garden",
    "",
]

_IMAGE_SETS = [
    '["https://images.unsplash.com/photo-1613490493576-7fde63acd811?w=1200"]',
    "{https://images.unsplash.com/photo-1600596542815-ffad4c1539a9?w=1200}",
    "https://images.unsplash.com/photo-1512917774080-9991f1c4c750?w=1200",
    "[]",
    None,
]

_TYPES = ["Villa", "Apartment", "Penthouse", "Townhouse", "Plot"]
_PRICES = [185000, 349000, 495000, 875000, 1450000, 3250000, 6900000]


def _count(conn: sqlite3.Connection, table: str) -> int:
    row = conn.execute(f"SELECT COUNT(1) FROM {table}").fetchone()
    return int(row[0] or 0) if row else 0


def seed_demo(conn: sqlite3.Connection, properties: int = 24, seed: int = 7) -> Dict[str, int]:
    ensure_schema(conn)
    if _count(conn, "properties") > 0:
        logger.info("demo seed skipped: properties already populated")
        return {"properties": 0, "locations": 0, "blog_posts": 0, "international_partners": 0}

    rng = random.Random(seed)
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    for loc_id, name, region, parent, priority, tags in _LOCATIONS:
        conn.execute(
            "INSERT INTO locations (id, slug, name, description, region, image_urls, lifestyle_tags, "
            "display_priority, parent_id) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (loc_id, slugify(name), name, f"Living and investing in {name}.", region, None, tags, priority, parent),
        )

    cities = [(n, r) for _, n, r, p, _, _ in _LOCATIONS if p]
    for i in range(properties):
        city, province = rng.choice(cities)
        ptype = rng.choice(_TYPES)
        price = rng.choice(_PRICES) if rng.random() > 0.08 else None
        title = f"{ptype} in {city} #{i + 1}"
        conn.execute(
            "INSERT INTO properties (id, custom_id, slug, title, description, price, currency, bedrooms, "
            "bathrooms, area_sqm, plot_sqm, property_type, city, province, country, features, images, "
            "investment_tier, transaction_type, availability_status, listing_status, is_featured, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                f"prop-{i + 1:03d}",
                f"MC-{1000 + i}",
                slugify(title.replace("#", "")),
                title,
                f"A {ptype.lower()} close to the centre of {city}.",
                price,
                "EUR",
                rng.randint(1, 6),
                rng.randint(1, 4),
                rng.randint(60, 600),
                rng.choice([None, 0, 450, 1200, 2500]),
                ptype,
                city,
                province,
                "Spain",
                rng.choice(_FEATURE_SETS),
                rng.choice(_IMAGE_SETS),
                None,
                rng.choice(["Resale", "New build"]),
                "Available",
                "Active" if rng.random() > 0.1 else "Sold",
                1 if i < 6 else 0,
                (now + timedelta(days=i)).isoformat(),
            ),
        )

    posts = [
        ("buying-in-marbella", "Buying property in Marbella", "Buying Guide", 1, "marbella", '["Buying","Legal","Marbella"]'),
        ("golden-visa-explained", "Residency through investment", "Legal", 1, None, "{Legal,Residency}"),
        ("mallorca-market-2024", "Mallorca market update", "Market", 0, "mallorca", "Market, Mallorca"),
        ("rental-yields", "Where rental yields are highest", "Market", 0, None, "Investment"),
    ]
    for n, (slug, title, category, is_guide, loc, tags) in enumerate(posts):
        conn.execute(
            "INSERT INTO blog_posts (id, slug, title, category, excerpt, body, location_slug, tags, is_guide, "
            "published, reading_time, created_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 1, ?, ?)",
            (
                f"post-{n + 1}",
                slug,
                title,
                category,
                f"{title}: what investors need to know.",
                f"<p>{title}.</p>",
                loc,
                tags,
                is_guide,
                f"{4 + n} min read",
                (now + timedelta(days=30 + n)).isoformat(),
            ),
        )

    partners = [
        ("Nordic Homes Abroad", "Sweden", "Stockholm", '["Swedish","English"]', 1),
        ("Atlantic Property Partners", "Ireland", "Dublin", "{English,Irish}", 0),
    ]
    for n, (name, country, city, langs, featured) in enumerate(partners):
        conn.execute(
            "INSERT INTO international_partners (id, partner_name, partner_type, country_name, city, description, "
            "specialties, languages_spoken, social_links, status, featured, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 'Active', ?, ?)",
            (
                f"partner-{n + 1}",
                name,
                "Agency",
                country,
                city,
                f"{name} helps clients from {country} buy in Spain.",
                "Relocation, Investment",
                langs,
                json.dumps({"linkedin": f"https://linkedin.com/company/{slugify(name)}"}),
                featured,
                now.isoformat(),
            ),
        )

    conn.commit()
    counts = {
        "properties": properties,
        "locations": len(_LOCATIONS),
        "blog_posts": len(posts),
        "international_partners": len(partners),
    }
    logger.info("demo seed complete", extra={"counts": counts})
    return counts
