"""Blog posts and investment guides.

Both live in ``blog_posts``; ``is_guide`` tells them apart. Tags are stored in
mixed encodings, so tag filtering happens after the read.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Mapping, Optional

from .logging_setup import get_logger
from .normalize import sanitize_record, to_string_list
from .search.query import MAX_OFFSET, filter_by_tag, tag_matches


logger = get_logger("posts")


def _select_posts(
    conn: sqlite3.Connection,
    *,
    where: List[str],
    params: List[Any],
    limit: Optional[int],
    offset: int = 0,
) -> List[sqlite3.Row]:
    where_sql = (" WHERE " + " AND ".join(where)) if where else ""
    sql = "SELECT * FROM blog_posts" + where_sql + " ORDER BY created_at DESC, id DESC"
    args = list(params)
    if limit is not None:
        sql += " LIMIT ? OFFSET ?"
        args.extend([int(limit), max(0, min(int(offset), MAX_OFFSET))])
    return conn.execute(sql, args).fetchall()


def _list_posts(
    conn: sqlite3.Connection,
    *,
    label: str,
    limit: int,
    offset: int,
    category: Optional[str],
    tag: Optional[str],
    location_slug: Optional[str],
    published_only: bool,
    guides_only: bool,
) -> List[Dict[str, Any]]:
    where: List[str] = []
    params: List[Any] = []
    if published_only:
        where.append("published = 1")
    if guides_only:
        where.append("is_guide = 1")
    if isinstance(category, str) and category.strip():
        where.append("category = ?")
        params.append(category.strip())
    if isinstance(location_slug, str) and location_slug.strip():
        slug = location_slug.strip()
        where.append("(location_slug = ? OR lower(ifnull(location_slug,'')) LIKE ?)")
        params.extend([slug, f"%{slug.lower()}%"])

    has_tag = isinstance(tag, str) and bool(tag.strip())
    try:
        # Tag matches are decided in Python, so paginate after filtering.
        rows = _select_posts(
            conn,
            where=where,
            params=params,
            limit=None if has_tag else limit,
            offset=offset,
        )
    except sqlite3.Error as e:
        logger.warning("%s failed: %s", label, e)
        return []

    if has_tag:
        start = max(0, min(int(offset), MAX_OFFSET))
        rows = filter_by_tag(rows, tag)[start:start + limit]
    return [sanitize_record(r) for r in rows]


def get_blog_posts(
    conn: sqlite3.Connection,
    limit: int = 10,
    offset: int = 0,
    category: Optional[str] = None,
    tag: Optional[str] = None,
    location_slug: Optional[str] = None,
    published_only: bool = True,
) -> List[Dict[str, Any]]:
    return _list_posts(
        conn,
        label="get_blog_posts",
        limit=limit,
        offset=offset,
        category=category,
        tag=tag,
        location_slug=location_slug,
        published_only=published_only,
        guides_only=False,
    )


def get_guides(
    conn: sqlite3.Connection,
    limit: int = 10,
    offset: int = 0,
    category: Optional[str] = None,
    tag: Optional[str] = None,
    location_slug: Optional[str] = None,
) -> List[Dict[str, Any]]:
    return _list_posts(
        conn,
        label="get_guides",
        limit=limit,
        offset=offset,
        category=category,
        tag=tag,
        location_slug=location_slug,
        published_only=True,
        guides_only=True,
    )


def _post_by_slug(conn: sqlite3.Connection, slug: str, *, guide: Optional[bool]) -> Optional[Dict[str, Any]]:
    if not slug:
        return None
    sql = "SELECT * FROM blog_posts WHERE slug = ?"
    if guide is True:
        sql += " AND is_guide = 1"
    sql += " LIMIT 1"
    try:
        row = conn.execute(sql, (slug,)).fetchone()
    except sqlite3.Error as e:
        logger.warning("post lookup (%s) failed: %s", slug, e)
        return None
    return sanitize_record(row) if row else None


def get_blog_post_by_slug(conn: sqlite3.Connection, slug: str) -> Optional[Dict[str, Any]]:
    return _post_by_slug(conn, slug, guide=None)


def get_guide_by_slug(conn: sqlite3.Connection, slug: str) -> Optional[Dict[str, Any]]:
    return _post_by_slug(conn, slug, guide=True)


def get_related_blog_posts(
    conn: sqlite3.Connection,
    post: Mapping[str, Any],
    limit: int = 2,
) -> List[Dict[str, Any]]:
    """Posts related to `post`: same location first, then first shared tag, then newest."""

    post_id = post.get("id")
    picked: List[sqlite3.Row] = []
    seen = {post_id}

    def take(rows):
        for r in rows:
            if len(picked) >= limit:
                return
            if r["id"] in seen:
                continue
            seen.add(r["id"])
            picked.append(r)

    try:
        location_slug = post.get("location_slug")
        if location_slug:
            take(
                _select_posts(
                    conn,
                    where=["published = 1", "location_slug = ?", "id != ?"],
                    params=[location_slug, post_id],
                    limit=limit,
                )
            )

        tags = to_string_list(post.get("tags"))
        if len(picked) < limit and tags:
            pool = _select_posts(
                conn,
                where=["published = 1", "id != ?"],
                params=[post_id],
                limit=limit * 3,
            )
            take(r for r in pool if tag_matches(r["tags"], tags[0]))

        if len(picked) < limit:
            take(
                _select_posts(
                    conn,
                    where=["published = 1", "id != ?"],
                    params=[post_id],
                    limit=limit + len(seen),
                )
            )
    except sqlite3.Error as e:
        logger.warning("get_related_blog_posts failed: %s", e)

    return [sanitize_record(r) for r in picked]


def get_guide_categories(conn: sqlite3.Connection) -> List[str]:
    try:
        rows = conn.execute(
            """
            SELECT DISTINCT category FROM blog_posts
            WHERE published = 1 AND is_guide = 1 AND ifnull(category,'') != ''
            ORDER BY category ASC
            """
        ).fetchall()
    except sqlite3.Error as e:
        logger.warning("get_guide_categories failed: %s", e)
        return []
    return [str(r["category"]) for r in rows]


def get_blog_categories(conn: sqlite3.Connection) -> List[str]:
    try:
        rows = conn.execute(
            """
            SELECT DISTINCT category FROM blog_posts
            WHERE published = 1 AND ifnull(category,'') != ''
            ORDER BY category ASC
            """
        ).fetchall()
    except sqlite3.Error as e:
        logger.warning("get_blog_categories failed: %s", e)
        return []
    return [str(r["category"]) for r in rows]
