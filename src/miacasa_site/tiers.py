from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class InvestmentTier:
    name: str
    max_price: Optional[float]  # inclusive; None for the open top band
    range_label: str
    description: str


# Single source of truth for tier badges, the tier guide page and the filter.
INVESTMENT_TIERS: Tuple[InvestmentTier, ...] = (
    InvestmentTier(
        name="Starter",
        max_price=200_000,
        range_label="≤ €200,000",
        description=(
            "Accessible entry point into the market. Ideal for first-time investors, "
            "typically studio or one-bedroom apartments in areas with growth potential."
        ),
    ),
    InvestmentTier(
        name="Mid-range",
        max_price=500_000,
        range_label="€200,001–€500,000",
        description=(
            "Balanced investment potential. Two or three bedrooms in established "
            "neighborhoods with good amenities."
        ),
    ),
    InvestmentTier(
        name="Luxury",
        max_price=1_000_000,
        range_label="€500,001–€1,000,000",
        description=(
            "Premium features and locations with high-quality finishes, desirable views "
            "and prime positioning."
        ),
    ),
    InvestmentTier(
        name="Luxury Plus",
        max_price=2_999_999,
        range_label="€1,000,001–€2,999,999",
        description=(
            "Distinctive architecture, premium materials and sophisticated design in "
            "prestigious addresses."
        ),
    ),
    InvestmentTier(
        name="Luxury Premium",
        max_price=4_999_999,
        range_label="€3,000,000–€4,999,999",
        description=(
            "Refined living with architectural significance, premium craftsmanship and "
            "expansive spaces."
        ),
    ),
    InvestmentTier(
        name="Ultra Prime",
        max_price=None,
        range_label="≥ €5,000,000",
        description=(
            "Landmark properties with unparalleled design, location and amenities."
        ),
    ),
)

TIER_NAMES = tuple(t.name for t in INVESTMENT_TIERS)


def _as_price(price: Any) -> Optional[float]:
    if price is None or isinstance(price, bool):
        return None
    try:
        value = float(price)
    except (TypeError, ValueError):
        return None
    if math.isnan(value):
        return None
    return value


def derive_investment_tier(price: Any) -> str:
    """Bucket a price into a tier name. Missing or unparseable prices are Starter."""

    value = _as_price(price)
    if value is None:
        return INVESTMENT_TIERS[0].name
    for tier in INVESTMENT_TIERS:
        if tier.max_price is None or value <= tier.max_price:
            return tier.name
    return INVESTMENT_TIERS[-1].name


def resolve_investment_tier(row: Mapping[str, Any]) -> str:
    stored = row.get("investment_tier") if row else None
    if isinstance(stored, str) and stored.strip():
        return stored.strip()
    return derive_investment_tier(row.get("price") if row else None)


def get_tier(name: Optional[str]) -> Optional[InvestmentTier]:
    for tier in INVESTMENT_TIERS:
        if name and tier.name.lower() == str(name).strip().lower():
            return tier
    return None


def tier_price_bounds(name: Optional[str]) -> Optional[Tuple[Optional[float], Optional[float]]]:
    """Exclusive lower / inclusive upper price bound of a tier, or None if unknown."""

    tier = get_tier(name)
    if tier is None:
        return None
    idx = INVESTMENT_TIERS.index(tier)
    low = INVESTMENT_TIERS[idx - 1].max_price if idx > 0 else None
    return (low, tier.max_price)
