from __future__ import annotations

import hashlib
import random
from typing import Any, Dict, List, Optional, Tuple

from .normalize import to_string_list


FALLBACK_IMAGES: Dict[str, Tuple[str, ...]] = {
    "property": (
        "/static/placeholders/property.svg?height=600&width=800",
        "https://mabeaute-property-images.s3.amazonaws.com/webassets/homepage/property-placeholder.jpeg",
    ),
    "location": (
        "/static/placeholders/location.svg?height=500&width=800&text=Beautiful+Location",
        "https://mabeaute-property-images.s3.amazonaws.com/webassets/homepage/locations-placeholder.jpeg",
    ),
    "blog": (
        "/static/placeholders/blog.svg?height=400&width=800&text=Market+Insights",
        "https://mabeaute-property-images.s3.amazonaws.com/webassets/homepage/blog-placeholder.jpeg",
    ),
    "general": (
        "/static/placeholders/general.svg?height=600&width=800",
        "/static/placeholders/general.svg?height=400&width=600",
    ),
}


# Stored image fields sometimes hold these strings instead of a URL.
_NOT_A_URL = frozenset({"null", "undefined", "none", "[object object]"})


def _rotation(category: Optional[str]) -> Tuple[str, ...]:
    return FALLBACK_IMAGES.get(str(category or "general"), FALLBACK_IMAGES["general"])


def fallback_image_url(category: Optional[str] = "general", index: int = 0) -> str:
    rotation = _rotation(category)
    try:
        i = int(index)
    except (TypeError, ValueError):
        i = 0
    return rotation[i % len(rotation)]


def next_fallback(category: Optional[str], attempt: int) -> Optional[str]:
    """URL to try after the `attempt`-th failed load (1-based), or None when exhausted.

    The first failure moves off the primary image onto fallback 0; once every
    fallback in the category has failed no further substitution happens.
    """

    rotation = _rotation(category)
    if attempt < 1 or attempt > len(rotation):
        return None
    return rotation[attempt - 1]


def _seeded_index(seed: Any, size: int) -> int:
    digest = hashlib.sha256(str(seed).encode("utf-8")).hexdigest()
    return int(digest[:12], 16) % size


def select_image(
    value: Any,
    category: Optional[str] = "general",
    mode: str = "first",
    seed: Any = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Pick exactly one image URL from a stored image field.

    `mode` is "first", "random" (gallery views) or "seeded" (stable per
    `seed`, usually the entity id). Empty input yields the category fallback.
    """

    urls = [u for u in to_string_list(value) if u.strip() and u.strip().lower() not in _NOT_A_URL]
    if not urls:
        return fallback_image_url(category, 0)
    if mode == "random":
        return (rng or random).choice(urls)
    if mode == "seeded" and seed is not None:
        return urls[_seeded_index(seed, len(urls))]
    return urls[0]


def image_chain(primary: Optional[str], category: Optional[str] = "general") -> List[str]:
    """Primary URL followed by the category fallbacks, without repeats."""

    chain: List[str] = []
    for url in [primary, *_rotation(category)]:
        if url and url not in chain:
            chain.append(url)
    return chain
