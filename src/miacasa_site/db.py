from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import get_settings


TABLES = ("properties", "locations", "blog_posts", "international_partners", "inquiries")


def get_db_path() -> str:
    return get_settings().db_path


def connect(path: str | None = None) -> sqlite3.Connection:
    db_path = Path(path or get_db_path())
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def open_conn(path: str | None = None) -> Iterator[sqlite3.Connection]:
    conn = connect(path)
    try:
        yield conn
    finally:
        conn.close()


def get_conn() -> Iterator[sqlite3.Connection]:
    """FastAPI dependency yielding one connection per request."""

    conn = connect()
    try:
        yield conn
    finally:
        conn.close()


def table_exists(conn: sqlite3.Connection, table: str) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type='table' AND name=?", (table,)
    ).fetchone()
    return row is not None


def ensure_schema(conn: sqlite3.Connection) -> None:
    # List-like columns are TEXT on purpose: rows arrive as JSON text, Postgres
    # array literals, comma lists or bare values and are normalized on read.
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS properties (
            id TEXT PRIMARY KEY,
            custom_id TEXT,
            slug TEXT UNIQUE,
            title TEXT,
            description TEXT,
            price REAL,
            currency TEXT DEFAULT 'EUR',
            bedrooms INTEGER,
            bathrooms INTEGER,
            area_sqm REAL,
            plot_sqm REAL,
            property_type TEXT,
            address TEXT,
            city TEXT,
            province TEXT,
            country TEXT,
            latitude REAL,
            longitude REAL,
            features TEXT,
            category_tags TEXT,
            label_tags TEXT,
            images TEXT,
            hero_image_url TEXT,
            investment_note TEXT,
            investment_tier TEXT,
            transaction_type TEXT,
            development_type TEXT,
            availability_status TEXT,
            listing_status TEXT DEFAULT 'Active',
            is_featured INTEGER DEFAULT 0,
            yearly_taxes REAL,
            community_fees REAL,
            created_at TEXT,
            updated_at TEXT
        );
        CREATE INDEX IF NOT EXISTS idx_properties_status_price
            ON properties(listing_status, price);

        CREATE TABLE IF NOT EXISTS locations (
            id TEXT PRIMARY KEY,
            slug TEXT UNIQUE,
            name TEXT NOT NULL,
            description TEXT,
            region TEXT,
            image_urls TEXT,
            lifestyle_tags TEXT,
            display_priority INTEGER DEFAULT 0,
            parent_id TEXT REFERENCES locations(id),
            famous_for TEXT,
            climate TEXT,
            bio TEXT
        );

        CREATE TABLE IF NOT EXISTS blog_posts (
            id TEXT PRIMARY KEY,
            slug TEXT UNIQUE,
            title TEXT,
            category TEXT,
            excerpt TEXT,
            body TEXT,
            image_urls TEXT,
            location_slug TEXT,
            related_location_slug TEXT,
            tags TEXT,
            is_guide INTEGER DEFAULT 0,
            published INTEGER DEFAULT 1,
            reading_time TEXT,
            created_at TEXT
        );

        CREATE TABLE IF NOT EXISTS international_partners (
            id TEXT PRIMARY KEY,
            partner_name TEXT NOT NULL,
            partner_type TEXT,
            country_name TEXT,
            country_code TEXT,
            flag_emoji TEXT,
            region TEXT,
            city TEXT,
            contact_name TEXT,
            email TEXT,
            phone TEXT,
            website_url TEXT,
            profile_image_url TEXT,
            description TEXT,
            specialties TEXT,
            languages_spoken TEXT,
            years_experience TEXT,
            notable_projects TEXT,
            social_links TEXT,
            badge TEXT,
            status TEXT DEFAULT 'Active',
            featured INTEGER DEFAULT 0,
            created_at TEXT
        );

        CREATE TABLE IF NOT EXISTS inquiries (
            id TEXT PRIMARY KEY,
            property_id TEXT,
            property_custom_id TEXT,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            phone TEXT,
            message TEXT NOT NULL,
            source TEXT,
            status TEXT NOT NULL DEFAULT 'new',
            reveal INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL
        );
        """
    )
    conn.commit()
