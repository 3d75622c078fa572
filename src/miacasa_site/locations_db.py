from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from .logging_setup import get_logger
from .normalize import sanitize_record


logger = get_logger("locations")


def get_locations(
    conn: sqlite3.Connection,
    limit: int = 100,
    parent_only: bool = False,
    include_children: bool = True,
) -> List[Dict[str, Any]]:
    """Locations by display priority.

    With `parent_only` the top-level locations are returned, followed by their
    children when `include_children` is set.
    """

    where = " WHERE parent_id IS NULL" if parent_only else ""
    try:
        rows = conn.execute(
            "SELECT * FROM locations"
            + where
            + " ORDER BY display_priority DESC, name ASC LIMIT ?",
            (int(limit),),
        ).fetchall()
    except sqlite3.Error as e:
        logger.warning("get_locations failed: %s", e)
        return []

    out = [sanitize_record(r) for r in rows]
    if parent_only and include_children and out:
        parent_ids = [loc["id"] for loc in out]
        placeholders = ",".join(["?"] * len(parent_ids))
        try:
            children = conn.execute(
                f"SELECT * FROM locations WHERE parent_id IN ({placeholders})"
                " ORDER BY display_priority DESC, name ASC",
                parent_ids,
            ).fetchall()
        except sqlite3.Error as e:
            logger.warning("get_locations children lookup failed: %s", e)
            return out
        out.extend(sanitize_record(r) for r in children)
    return out


def get_location_by_slug(conn: sqlite3.Connection, slug: str) -> Optional[Dict[str, Any]]:
    if not slug:
        return None
    try:
        row = conn.execute(
            "SELECT * FROM locations WHERE slug = ? LIMIT 1", (slug,)
        ).fetchone()
        if row is None:
            logger.debug("no exact match for location slug %s, trying case-insensitive", slug)
            row = conn.execute(
                "SELECT * FROM locations WHERE lower(slug) = lower(?) LIMIT 1", (slug,)
            ).fetchone()
    except sqlite3.Error as e:
        logger.warning("get_location_by_slug(%s) failed: %s", slug, e)
        return None
    return sanitize_record(row) if row else None


def get_child_locations(conn: sqlite3.Connection, parent_id: str) -> List[Dict[str, Any]]:
    try:
        rows = conn.execute(
            "SELECT * FROM locations WHERE parent_id = ? ORDER BY display_priority DESC, name ASC",
            (parent_id,),
        ).fetchall()
    except sqlite3.Error as e:
        logger.warning("get_child_locations(%s) failed: %s", parent_id, e)
        return []
    return [sanitize_record(r) for r in rows]


def group_locations(locations: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Nest children under their parents (one level); orphans stay top-level."""

    by_id = {loc.get("id"): dict(loc, children=[]) for loc in locations}
    roots: List[Dict[str, Any]] = []
    for loc in by_id.values():
        parent = by_id.get(loc.get("parent_id")) if loc.get("parent_id") else None
        if parent is not None and parent is not loc:
            parent["children"].append(loc)
        else:
            roots.append(loc)
    return roots
