"""
Tests for the shipping tier engine.

Covers:
- Tier containment (half-open bands, unbounded top tier)
- Selection in ascending order regardless of input order
- Fallback to the highest tier, empty schedules
"""

from decimal import Decimal

from ordering_engines.shipping import ShippingTierSpec, select_shipping_cost

STANDARD_TIERS = (
    ShippingTierSpec(Decimal("0"), Decimal("50"), Decimal("15")),
    ShippingTierSpec(Decimal("50"), Decimal("100"), Decimal("10")),
    ShippingTierSpec(Decimal("100"), Decimal("200"), Decimal("5")),
    ShippingTierSpec(Decimal("200"), None, Decimal("0")),
)


class TestTierContainment:
    def test_lower_bound_inclusive(self):
        assert STANDARD_TIERS[1].contains(Decimal("50"))

    def test_upper_bound_exclusive(self):
        assert not STANDARD_TIERS[1].contains(Decimal("100"))

    def test_unbounded_tier(self):
        assert STANDARD_TIERS[3].contains(Decimal("1000000"))


class TestSelectShippingCost:
    def test_first_tier(self):
        assert select_shipping_cost(STANDARD_TIERS, amount=Decimal("49.99")) == Decimal("15")

    def test_boundary_moves_to_next_tier(self):
        assert select_shipping_cost(STANDARD_TIERS, amount=Decimal("50.00")) == Decimal("10")

    def test_free_shipping_above_last_threshold(self):
        assert select_shipping_cost(STANDARD_TIERS, amount=Decimal("250")) == Decimal("0")

    def test_unsorted_tiers_are_sorted(self):
        shuffled = (STANDARD_TIERS[2], STANDARD_TIERS[0], STANDARD_TIERS[3], STANDARD_TIERS[1])
        assert select_shipping_cost(shuffled, amount=Decimal("120")) == Decimal("5")

    def test_no_match_falls_back_to_highest_tier(self):
        tiers = (
            ShippingTierSpec(Decimal("0"), Decimal("50"), Decimal("15")),
            ShippingTierSpec(Decimal("50"), Decimal("100"), Decimal("10")),
        )
        assert select_shipping_cost(tiers, amount=Decimal("150")) == Decimal("10")

    def test_amount_below_first_tier_falls_back_to_highest_tier(self):
        tiers = (
            ShippingTierSpec(Decimal("20"), Decimal("50"), Decimal("8")),
            ShippingTierSpec(Decimal("50"), Decimal("100"), Decimal("4")),
        )
        assert select_shipping_cost(tiers, amount=Decimal("10")) == Decimal("4")

    def test_empty_schedule_is_free(self):
        assert select_shipping_cost((), amount=Decimal("10")) == Decimal("0")
