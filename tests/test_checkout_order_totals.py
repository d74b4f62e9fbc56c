from decimal import Decimal

from app.checkout.services.order_totals import build_redemption_summary, calculate_order_totals
from tests.checkout_helpers import cart, customer, membership_config


def _totals(**kwargs):
    params = {
        "items": cart(600, 400),
        "manual_discount_input": "",
        "membership_config": membership_config(),
        "customer": None,
        "points_to_redeem_input": "",
    }
    params.update(kwargs)
    return calculate_order_totals(**params)


def test_plain_cart_without_membership() -> None:
    totals = _totals(membership_config=None)
    assert totals.subtotal == Decimal("1000")
    assert totals.total == Decimal("1000")
    assert totals.total_discount == Decimal("0")
    assert totals.points_to_earn == 0
    assert totals.redemption_status == "none"
    assert totals.item_count == 2


def test_plain_cart_earns_points_when_program_enabled() -> None:
    totals = _totals()
    assert totals.total == Decimal("1000")
    assert totals.points_to_earn == 10


def test_manual_and_tier_discount_stack_off_subtotal() -> None:
    totals = _totals(manual_discount_input="200", customer=customer(tier="Gold"))
    assert totals.manual_discount == Decimal("200")
    assert totals.tier_discount == Decimal("100")
    assert totals.total == Decimal("700")
    assert totals.tier_name == "Gold"
    assert totals.total_discount == Decimal("300")
    # 700 / 100 = 7, Gold multiplier 2
    assert totals.points_to_earn == 14


def test_manual_discount_is_capped_at_subtotal() -> None:
    totals = _totals(manual_discount_input="5000")
    assert totals.manual_discount == totals.subtotal
    assert totals.total == Decimal("0")
    assert totals.points_to_earn == 0


def test_rejected_redemption_keeps_discount_zero_and_reports_error() -> None:
    totals = _totals(customer=customer(points=50), points_to_redeem_input="50")
    assert totals.redemption_status == "rejected"
    assert totals.redemption_discount == Decimal("0")
    assert totals.points_redeemed == 0
    assert "100" in totals.redemption_error
    assert totals.max_allowed_points == 500


def test_redemption_is_clamped_against_preliminary_total() -> None:
    totals = _totals(
        manual_discount_input="200",
        customer=customer(tier="Gold", points=2000),
        points_to_redeem_input="1000",
    )
    assert totals.redemption_status == "clamped"
    assert totals.redemption_discount == Decimal("350")
    assert totals.points_redeemed == 350
    assert totals.total == Decimal("350")
    assert totals.redemption_error is None
    # 350 / 100 = 3.5, Gold multiplier 2
    assert totals.points_to_earn == 7


def test_points_input_is_floored() -> None:
    totals = _totals(customer=customer(points=500), points_to_redeem_input="150.9")
    assert totals.points_redeemed == 150
    assert totals.redemption_discount == Decimal("150")


def test_redemption_monotonic_beyond_cap() -> None:
    buyer = customer(points=100000)
    at_cap = _totals(customer=buyer, points_to_redeem_input="500")
    beyond = _totals(customer=buyer, points_to_redeem_input="90000")
    assert at_cap.max_allowed_points == 500
    assert beyond.redemption_discount == at_cap.redemption_discount


def test_empty_cart_degrades_to_zero() -> None:
    totals = _totals(items=[])
    assert totals.subtotal == Decimal("0")
    assert totals.total == Decimal("0")
    assert totals.redemption_error is None
    assert totals.max_allowed_points == 0


def test_accepts_mappings_and_is_idempotent() -> None:
    params = {
        "items": [{"lineTotal": 300}, {"lineTotal": "450.50"}],
        "manual_discount_input": "50",
        "membership_config": membership_config().model_dump(by_alias=True),
        "customer": {"membership": {"tier": "silver", "points": {"current": 120}}},
        "points_to_redeem_input": "100",
    }
    first = calculate_order_totals(**params)
    second = calculate_order_totals(**params)
    assert first == second
    assert first.subtotal == Decimal("750.50")
    assert Decimal("0") <= first.total <= first.subtotal
    assert first.total == max(
        Decimal("0"),
        first.subtotal - first.manual_discount - first.tier_discount - first.redemption_discount,
    )


def test_redemption_summary_requires_membership_card() -> None:
    config = membership_config()
    with_card = customer(points=120)
    totals = _totals(customer=with_card)
    summary = build_redemption_summary(totals, config, with_card)
    assert summary.enabled is True
    assert summary.max_redeem_points == 120
    assert summary.min_redeem_points == 100

    without_card = customer(points=120, card_id=None)
    assert build_redemption_summary(totals, config, without_card).enabled is False


def test_out_of_range_inputs_are_ignored() -> None:
    totals = _totals(
        manual_discount_input="1e400",
        customer=customer(points=500),
        points_to_redeem_input="1e999999999",
    )
    assert totals.manual_discount == Decimal("0")
    assert totals.redemption_status == "none"
    assert totals.points_redeemed == 0
    assert totals.total == Decimal("1000")


def test_very_large_cart_is_priced_without_error() -> None:
    totals = _totals(items=[{"lineTotal": Decimal("1e30")}], customer=customer(tier="Gold"))
    assert totals.tier_discount == Decimal("1e29")
    assert totals.total == Decimal("9e29")
    assert totals.points_to_earn > 0
