from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from .logging_setup import get_logger
from .normalize import parse_json_field, sanitize_record, slugify


logger = get_logger("partners")

ACTIVE_STATUS = "Active"


def _partner(row: Any) -> Dict[str, Any]:
    record = sanitize_record(row)
    record["social_links"] = parse_json_field(record.get("social_links"), {})
    record["slug"] = slugify(record.get("partner_name"))
    return record


def get_partners(
    conn: sqlite3.Connection,
    limit: int = 100,
    country: Optional[str] = None,
    featured: Optional[bool] = None,
) -> List[Dict[str, Any]]:
    where = ["status = ?"]
    params: List[Any] = [ACTIVE_STATUS]
    if country:
        where.append("country_name = ?")
        params.append(country)
    if featured:
        where.append("featured = 1")
    try:
        rows = conn.execute(
            "SELECT * FROM international_partners WHERE "
            + " AND ".join(where)
            + " ORDER BY created_at DESC, partner_name ASC LIMIT ?",
            (*params, int(limit)),
        ).fetchall()
    except sqlite3.Error as e:
        logger.warning("get_partners failed: %s", e)
        return []
    return [_partner(r) for r in rows]


def get_partner_by_slug(conn: sqlite3.Connection, slug: str) -> Optional[Dict[str, Any]]:
    """Partners carry no slug column; match on the slugified partner name."""

    wanted = (slug or "").strip().lower()
    if not wanted:
        return None
    try:
        rows = conn.execute(
            "SELECT * FROM international_partners WHERE status = ?", (ACTIVE_STATUS,)
        ).fetchall()
    except sqlite3.Error as e:
        logger.warning("get_partner_by_slug(%s) failed: %s", slug, e)
        return None
    for r in rows:
        if slugify(r["partner_name"]) == wanted:
            return _partner(r)
    return None


def get_partner_by_id(conn: sqlite3.Connection, partner_id: str) -> Optional[Dict[str, Any]]:
    try:
        row = conn.execute(
            "SELECT * FROM international_partners WHERE id = ? LIMIT 1", (partner_id,)
        ).fetchone()
    except sqlite3.Error as e:
        logger.warning("get_partner_by_id(%s) failed: %s", partner_id, e)
        return None
    return _partner(row) if row else None


def get_partner_countries(conn: sqlite3.Connection) -> List[str]:
    try:
        rows = conn.execute(
            """
            SELECT DISTINCT country_name FROM international_partners
            WHERE status = ? AND ifnull(country_name,'') != ''
            ORDER BY country_name ASC
            """,
            (ACTIVE_STATUS,),
        ).fetchall()
    except sqlite3.Error as e:
        logger.warning("get_partner_countries failed: %s", e)
        return []
    return [str(r["country_name"]) for r in rows]
