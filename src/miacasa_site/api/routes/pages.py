"""Server-rendered pages.

Every page does a handful of independent reads; a failed read comes back
empty from the data layer and the template shows a "coming soon" block.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request

from miacasa_site.api.templating import render
from miacasa_site.api.views import (
    cards,
    location_card,
    pages_for,
    partner_card,
    post_card,
    property_card,
    property_detail,
)
from miacasa_site.config import get_settings
from miacasa_site.db import get_conn
from miacasa_site.inquiries_db import InquiryInput, create_inquiry
from miacasa_site.locations_db import (
    get_child_locations,
    get_location_by_slug,
    get_locations,
    group_locations,
)
from miacasa_site.partners_db import (
    get_partner_by_id,
    get_partner_by_slug,
    get_partner_countries,
    get_partners,
)
from miacasa_site.posts_db import (
    get_blog_categories,
    get_blog_post_by_slug,
    get_blog_posts,
    get_guide_by_slug,
    get_guide_categories,
    get_guides,
    get_related_blog_posts,
)
from miacasa_site.properties_db import (
    get_featured_properties,
    get_market_insights,
    get_properties,
    get_properties_by_location,
    get_property_by_slug,
    get_similar_properties,
)
from miacasa_site.search.filters import FILTER_FIELDS, SORT_LABELS
from miacasa_site.search.query import PropertySearchOptions
from miacasa_site.tiers import INVESTMENT_TIERS

router = APIRouter(tags=["pages"])

MAX_PAGE = 1_000


def _page(request: Request) -> int:
    try:
        page = int(request.query_params.get("page") or 1)
    except ValueError:
        return 1
    return max(1, min(page, MAX_PAGE))


def _param(request: Request, name: str) -> Optional[str]:
    value = (request.query_params.get(name) or "").strip()
    return value or None


@router.get("/")
def home(request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    featured = get_featured_properties(conn, limit=6) or get_properties(
        conn, PropertySearchOptions(limit=6)
    )
    locations = get_locations(conn, limit=8, parent_only=True, include_children=False)
    return render(
        request,
        "home.html",
        {
            "properties": cards(featured, property_card),
            "locations": cards(locations, location_card),
            "posts": cards(get_blog_posts(conn, limit=3), post_card),
            "guides": cards(get_guides(conn, limit=3), post_card),
            "partners": cards(get_partners(conn, limit=4, featured=True), partner_card),
            "tiers": INVESTMENT_TIERS,
        },
    )


def _listing(request: Request, conn: sqlite3.Connection, heading: str):
    page_size = get_settings().page_size
    page = _page(request)
    options = PropertySearchOptions.from_query_params(
        request.query_params,
        limit=page_size,
        offset=(page - 1) * page_size,
    )
    rows = get_properties(conn, options)
    locations = group_locations(get_locations(conn, limit=200))
    return render(
        request,
        "investments.html",
        {
            "heading": heading,
            "properties": cards(rows, property_card),
            "options": options,
            "active_filters": options.active_filters(),
            "filter_fields": FILTER_FIELDS,
            "sort_labels": SORT_LABELS,
            "locations": cards(locations, location_card),
            "tiers": INVESTMENT_TIERS,
            "pagination": pages_for(page, len(rows), page_size),
            "query": dict(request.query_params),
        },
    )


@router.get("/investments")
def investments(request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    return _listing(request, conn, "Investment Properties")


@router.get("/search")
def search(request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    return _listing(request, conn, "Search Properties")


def _property_page(request: Request, conn: sqlite3.Connection, slug: str, inquiry: Optional[Dict[str, Any]] = None, status_code: int = 200):
    row = get_property_by_slug(conn, slug)
    if not row:
        raise HTTPException(status_code=404, detail="Property not found")
    return render(
        request,
        "property.html",
        {
            "property": property_detail(row),
            "similar": cards(get_similar_properties(conn, row, limit=3), property_card),
            "inquiry": inquiry or {"data": {"property_id": row.get("id")}, "errors": {}},
        },
        status_code=status_code,
    )


@router.get("/investments/{slug}")
def property_page(slug: str, request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    return _property_page(request, conn, slug)


@router.get("/properties/{slug}")
def property_alias(slug: str, request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    return _property_page(request, conn, slug)


@router.get("/investment-tiers")
def investment_tiers(request: Request):
    return render(request, "tiers.html", {"tiers": INVESTMENT_TIERS})


@router.get("/locations")
def locations_page(request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    rows = get_locations(conn, limit=200)
    return render(
        request,
        "locations.html",
        {"locations": cards(group_locations(rows), location_card)},
    )


@router.get("/locations/{slug}")
def location_page(slug: str, request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    row = get_location_by_slug(conn, slug)
    if not row:
        raise HTTPException(status_code=404, detail="Location not found")
    return render(
        request,
        "location.html",
        {
            "location": location_card(row),
            "location_row": row,
            "children": cards(get_child_locations(conn, row["id"]), location_card),
            "properties": cards(get_properties_by_location(conn, row["slug"], limit=6), property_card),
            "insights": get_market_insights(conn, row["slug"]),
            "posts": cards(get_blog_posts(conn, limit=3, location_slug=row["slug"]), post_card),
            "guides": cards(get_guides(conn, limit=3, location_slug=row["slug"]), post_card),
        },
    )


@router.get("/blog")
def blog(request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    page_size = get_settings().page_size
    page = _page(request)
    rows = get_blog_posts(
        conn,
        limit=page_size,
        offset=(page - 1) * page_size,
        category=_param(request, "category"),
        tag=_param(request, "tag"),
        location_slug=_param(request, "location"),
    )
    return render(
        request,
        "posts.html",
        {
            "heading": "Insights & Articles",
            "base_url": "/blog",
            "posts": cards(rows, post_card),
            "categories": get_blog_categories(conn),
            "category": _param(request, "category"),
            "tag": _param(request, "tag"),
            "pagination": pages_for(page, len(rows), page_size),
            "query": dict(request.query_params),
        },
    )


@router.get("/blog/{slug}")
def blog_post(slug: str, request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    row = get_blog_post_by_slug(conn, slug)
    if not row:
        raise HTTPException(status_code=404, detail="Article not found")
    return render(
        request,
        "post.html",
        {
            "post": post_card(row),
            "body": row.get("body") or "",
            "related": cards(get_related_blog_posts(conn, row, limit=2), post_card),
        },
    )


@router.get("/guides")
def guides(request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    page_size = get_settings().page_size
    page = _page(request)
    rows = get_guides(
        conn,
        limit=page_size,
        offset=(page - 1) * page_size,
        category=_param(request, "category"),
        tag=_param(request, "tag"),
        location_slug=_param(request, "location"),
    )
    return render(
        request,
        "posts.html",
        {
            "heading": "Investment Guides",
            "base_url": "/guides",
            "posts": cards(rows, post_card),
            "categories": get_guide_categories(conn),
            "category": _param(request, "category"),
            "tag": _param(request, "tag"),
            "pagination": pages_for(page, len(rows), page_size),
            "query": dict(request.query_params),
        },
    )


@router.get("/guides/{slug}")
def guide(slug: str, request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    row = get_guide_by_slug(conn, slug)
    if not row:
        raise HTTPException(status_code=404, detail="Guide not found")
    return render(
        request,
        "post.html",
        {
            "post": post_card(row),
            "body": row.get("body") or "",
            "related": cards(get_related_blog_posts(conn, row, limit=2), post_card),
        },
    )


@router.get("/partners")
def partners(request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    featured = _param(request, "featured")
    rows = get_partners(
        conn,
        country=_param(request, "country"),
        featured=bool(featured and featured.lower() in ("1", "true", "yes")),
    )
    return render(
        request,
        "partners.html",
        {
            "partners": cards(rows, partner_card),
            "countries": get_partner_countries(conn),
            "country": _param(request, "country"),
        },
    )


@router.get("/partners/{slug}")
def partner(slug: str, request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    row = get_partner_by_slug(conn, slug) or get_partner_by_id(conn, slug)
    if not row:
        raise HTTPException(status_code=404, detail="Partner not found")
    properties = get_properties(
        conn, PropertySearchOptions(location=row.get("city"), limit=3)
    ) if row.get("city") else []
    return render(
        request,
        "partner.html",
        {"partner": partner_card(row), "properties": cards(properties, property_card)},
    )


@router.post("/inquiry")
def inquiry_form(
    request: Request,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    message: Optional[str] = Form(None),
    property_id: Optional[str] = Form(None),
    property_slug: Optional[str] = Form(None),
    source: Optional[str] = Form(None),
    conn: sqlite3.Connection = Depends(get_conn),
):
    data = InquiryInput(
        name=name,
        email=email,
        phone=phone,
        message=message,
        property_id=property_id,
        source=source or ("property_page" if property_slug else "contact_form"),
    )
    result = create_inquiry(conn, data)
    if result.ok:
        return render(request, "inquiry_thanks.html", {"inquiry": result.inquiry})

    status_code = 400 if result.errors else 500
    inquiry = {
        "data": data.model_dump(),
        "errors": result.errors,
        "error": result.error,
        "property_slug": property_slug,
    }
    if property_slug and get_property_by_slug(conn, property_slug):
        return _property_page(request, conn, property_slug, inquiry=inquiry, status_code=status_code)
    return render(request, "inquiry_form.html", {"inquiry": inquiry}, status_code=status_code)
