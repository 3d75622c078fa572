"""Row -> template context helpers shared by the page routes."""

from __future__ import annotations

import random
from typing import Any, Dict, List, Mapping, Optional

from miacasa_site.config import get_settings
from miacasa_site.images import image_chain, select_image
from miacasa_site.normalize import to_string_list
from miacasa_site.tiers import resolve_investment_tier


_CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£"}


def format_price(price: Any, currency: Optional[str] = "EUR") -> str:
    try:
        value = float(price)
    except (TypeError, ValueError):
        return "Price on request"
    code = str(currency or "EUR").upper()
    amount = f"{value:,.0f}"
    symbol = _CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{symbol}{amount}"
    return f"{amount} {code}"


def location_label(row: Mapping[str, Any]) -> str:
    parts = [str(row.get(k) or "").strip() for k in ("city", "province")]
    return ", ".join(p for p in parts if p)


def _image(value: Any, category: str, seed: Any, mode: Optional[str], rng: Optional[random.Random]) -> Dict[str, Any]:
    url = select_image(
        value,
        category=category,
        mode=mode or get_settings().image_selection,
        seed=seed,
        rng=rng,
    )
    return {"image": url, "image_fallbacks": image_chain(url, category)[1:]}


def property_card(
    row: Mapping[str, Any],
    mode: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    images = to_string_list(row.get("images")) or to_string_list(row.get("hero_image_url"))
    card = {
        "id": row.get("id"),
        "slug": row.get("slug") or "",
        "url": f"/investments/{row.get('slug') or ''}",
        "title": row.get("title") or "Property",
        "property_type": row.get("property_type") or "Property",
        "price": row.get("price"),
        "price_label": format_price(row.get("price"), row.get("currency")),
        "location": location_label(row),
        "bedrooms": row.get("bedrooms"),
        "bathrooms": row.get("bathrooms"),
        "area_sqm": row.get("area_sqm"),
        "plot_sqm": row.get("plot_sqm"),
        "tier": resolve_investment_tier(row),
        "features": to_string_list(row.get("features")),
        "is_featured": bool(row.get("is_featured")),
    }
    card.update(_image(images, "property", row.get("id"), mode, rng))
    return card


def property_detail(row: Mapping[str, Any], mode: Optional[str] = None) -> Dict[str, Any]:
    detail = dict(row)
    detail.update(property_card(row, mode=mode))
    gallery = to_string_list(row.get("images"))
    hero = to_string_list(row.get("hero_image_url"))
    detail["gallery"] = [u for u in hero + gallery if u] or [detail["image"]]
    detail["gallery"] = list(dict.fromkeys(detail["gallery"]))
    return detail


def location_card(row: Mapping[str, Any], mode: Optional[str] = None) -> Dict[str, Any]:
    card = {
        "id": row.get("id"),
        "slug": row.get("slug") or "",
        "url": f"/locations/{row.get('slug') or ''}",
        "name": row.get("name") or "Location",
        "region": row.get("region") or "",
        "description": row.get("description") or "",
        "lifestyle_tags": to_string_list(row.get("lifestyle_tags")),
        "parent_id": row.get("parent_id"),
        "children": [location_card(c, mode=mode) for c in row.get("children") or []],
    }
    card.update(_image(row.get("image_urls"), "location", row.get("id"), mode, None))
    return card


def post_card(row: Mapping[str, Any], mode: Optional[str] = None) -> Dict[str, Any]:
    is_guide = bool(row.get("is_guide"))
    base = "/guides" if is_guide else "/blog"
    card = {
        "id": row.get("id"),
        "slug": row.get("slug") or "",
        "url": f"{base}/{row.get('slug') or ''}",
        "title": row.get("title") or "Untitled",
        "category": row.get("category") or "",
        "excerpt": row.get("excerpt") or "",
        "tags": to_string_list(row.get("tags")),
        "is_guide": is_guide,
        "reading_time": row.get("reading_time"),
        "created_at": row.get("created_at"),
        "location_slug": row.get("location_slug"),
    }
    card.update(_image(row.get("image_urls"), "blog", row.get("id"), mode, None))
    return card


def partner_card(row: Mapping[str, Any]) -> Dict[str, Any]:
    image = select_image(row.get("profile_image_url"), category="general", mode="first")
    social = row.get("social_links")
    return {
        "id": row.get("id"),
        "slug": row.get("slug") or "",
        "url": f"/partners/{row.get('slug') or row.get('id') or ''}",
        "name": row.get("partner_name") or "Partner",
        "partner_type": row.get("partner_type") or "",
        "country": row.get("country_name") or "",
        "city": row.get("city") or "",
        "flag": row.get("flag_emoji") or "",
        "description": row.get("description") or "",
        "specialties": to_string_list(row.get("specialties")),
        "languages": to_string_list(row.get("languages_spoken")),
        "notable_projects": to_string_list(row.get("notable_projects")),
        "social_links": social if isinstance(social, dict) else {},
        "email": row.get("email") or "",
        "phone": row.get("phone") or "",
        "website_url": row.get("website_url") or "",
        "badge": row.get("badge") or "",
        "image": image,
        "image_fallbacks": image_chain(image, "general")[1:],
    }


def pages_for(page: int, count: int, page_size: int) -> Dict[str, Optional[int]]:
    return {
        "page": page,
        "prev": page - 1 if page > 1 else None,
        "next": page + 1 if count >= page_size else None,
    }


def cards(rows: List[Mapping[str, Any]], builder) -> List[Dict[str, Any]]:
    return [builder(r) for r in rows]
