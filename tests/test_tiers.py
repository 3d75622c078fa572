import pytest

from miacasa_site.tiers import (
    INVESTMENT_TIERS,
    TIER_NAMES,
    derive_investment_tier,
    get_tier,
    resolve_investment_tier,
    tier_price_bounds,
)


@pytest.mark.parametrize(
    "price,expected",
    [
        (150_000, "Starter"),
        (200_000, "Starter"),
        (200_001, "Mid-range"),
        (500_000, "Mid-range"),
        (999_999, "Luxury"),
        (1_000_000, "Luxury"),
        (2_500_000, "Luxury Plus"),
        (3_500_000, "Luxury Premium"),
        (4_999_999, "Luxury Premium"),
        (5_000_000, "Ultra Prime"),
        (50_000_000, "Ultra Prime"),
        ("750000", "Luxury"),
    ],
)
def test_derive_investment_tier(price, expected):
    assert derive_investment_tier(price) == expected


@pytest.mark.parametrize("price", [None, "", "n/a", float("nan"), True, object()])
def test_unusable_price_is_starter(price):
    assert derive_investment_tier(price) == "Starter"


def test_top_and_second_highest_tier():
    assert derive_investment_tier(5_000_000) == TIER_NAMES[-1]
    assert derive_investment_tier(4_999_999) == TIER_NAMES[-2]


def test_tiers_are_ordered_and_non_overlapping():
    bounds = [t.max_price for t in INVESTMENT_TIERS[:-1]]
    assert bounds == sorted(bounds)
    assert INVESTMENT_TIERS[-1].max_price is None


def test_stored_tier_wins():
    assert resolve_investment_tier({"investment_tier": "Luxury", "price": 100}) == "Luxury"
    assert resolve_investment_tier({"investment_tier": "  ", "price": 100}) == "Starter"
    assert resolve_investment_tier({}) == "Starter"


def test_get_tier_and_bounds():
    assert get_tier("luxury plus").name == "Luxury Plus"
    assert get_tier("gold") is None
    assert tier_price_bounds("Starter") == (None, 200_000)
    assert tier_price_bounds("Mid-range") == (200_000, 500_000)
    assert tier_price_bounds("Ultra Prime") == (4_999_999, None)
    assert tier_price_bounds("nope") is None
