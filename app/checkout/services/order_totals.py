"""Order totals for POS checkout.

Discounts stack in a fixed order:

1. subtotal of the cart lines
2. manual discount, capped at the subtotal
3. membership tier discount, a percentage of the subtotal
4. points redemption, validated against the total left after 1-3
5. loyalty points earned on what is finally paid

Every call builds a fresh ``OrderTotals``. Inputs are never mutated and
nothing is cached, so callers recompute whenever the cart, the discount or
the redemption input changes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Sequence

from app.checkout.schemas.checkout import CartLine, Customer, MembershipConfig, RedemptionStatus
from app.checkout.services.cash_math import ZERO, NumericInput, parse_positive_number
from app.checkout.services.membership_config import ResolvedMembershipConfig, resolve_membership_config
from app.checkout.services.points_accrual import calculate_points_to_earn
from app.checkout.services.redemption import calculate_max_allowed_points, validate_redemption
from app.checkout.services.tier_discount import calculate_tier_discount


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    manual_discount: Decimal
    tier_discount: Decimal
    redemption_discount: Decimal
    total_discount: Decimal
    total: Decimal
    points_to_earn: int
    points_redeemed: int
    redemption_error: str | None
    redemption_status: RedemptionStatus
    max_allowed_points: int
    tier_name: str | None
    item_count: int


@dataclass(frozen=True)
class RedemptionSummary:
    enabled: bool
    points_balance: Decimal
    min_redeem_points: int
    max_redeem_points: int
    points_per_bdt: Decimal
    estimated_discount: Decimal
    error: str | None


def _coerce_lines(items: Sequence[CartLine | Mapping[str, Any]] | None) -> list[CartLine]:
    return [item if isinstance(item, CartLine) else CartLine.model_validate(item) for item in items or []]


def _coerce_customer(customer: Customer | Mapping[str, Any] | None) -> Customer | None:
    if customer is None or isinstance(customer, Customer):
        return customer
    return Customer.model_validate(customer)


def _coerce_config(
    membership_config: MembershipConfig | ResolvedMembershipConfig | Mapping[str, Any] | None,
) -> ResolvedMembershipConfig:
    if isinstance(membership_config, Mapping):
        membership_config = MembershipConfig.model_validate(membership_config)
    return resolve_membership_config(membership_config)


def customer_tier_name(customer: Customer | None) -> str | None:
    if customer is None or customer.membership is None:
        return None
    return customer.membership.tier or None


def customer_points_balance(customer: Customer | None) -> Decimal:
    if customer is None or customer.membership is None or customer.membership.points is None:
        return ZERO
    return customer.membership.points.current


def parse_points_input(raw: NumericInput) -> int:
    return math.floor(parse_positive_number(raw))


def calculate_order_totals(
    *,
    items: Sequence[CartLine | Mapping[str, Any]] | None,
    manual_discount_input: NumericInput = None,
    membership_config: MembershipConfig | ResolvedMembershipConfig | Mapping[str, Any] | None = None,
    customer: Customer | Mapping[str, Any] | None = None,
    points_to_redeem_input: NumericInput = None,
) -> OrderTotals:
    lines = _coerce_lines(items)
    config = _coerce_config(membership_config)
    customer = _coerce_customer(customer)

    subtotal = sum((line.line_total for line in lines), ZERO)
    manual_discount = min(parse_positive_number(manual_discount_input), subtotal)

    tier_name = customer_tier_name(customer)
    tier_discount = calculate_tier_discount(subtotal, config, tier_name)
    preliminary_total = max(ZERO, subtotal - manual_discount - tier_discount)

    redemption_discount = ZERO
    points_redeemed = 0
    redemption_error: str | None = None
    redemption_status: RedemptionStatus = "none"
    max_allowed_points = calculate_max_allowed_points(preliminary_total, config)

    requested_points = parse_points_input(points_to_redeem_input)
    if requested_points > 0:
        outcome = validate_redemption(
            requested_points,
            customer_points_balance(customer),
            preliminary_total,
            config,
        )
        redemption_status = outcome.status
        if outcome.valid:
            redemption_discount = outcome.discount_amount
            points_redeemed = outcome.points_to_redeem
        else:
            redemption_error = outcome.error

    total = max(ZERO, preliminary_total - redemption_discount)
    points_to_earn = calculate_points_to_earn(total, config, tier_name)

    return OrderTotals(
        subtotal=subtotal,
        manual_discount=manual_discount,
        tier_discount=tier_discount,
        redemption_discount=redemption_discount,
        total_discount=manual_discount + tier_discount + redemption_discount,
        total=total,
        points_to_earn=points_to_earn,
        points_redeemed=points_redeemed,
        redemption_error=redemption_error,
        redemption_status=redemption_status,
        max_allowed_points=max_allowed_points,
        tier_name=tier_name,
        item_count=len(lines),
    )


def build_redemption_summary(
    totals: OrderTotals,
    membership_config: MembershipConfig | ResolvedMembershipConfig | Mapping[str, Any] | None,
    customer: Customer | Mapping[str, Any] | None,
) -> RedemptionSummary:
    """What the redemption panel shows next to the totals."""
    config = _coerce_config(membership_config)
    customer = _coerce_customer(customer)
    balance = customer_points_balance(customer)
    has_card = bool(customer and customer.membership and customer.membership.card_id)
    return RedemptionSummary(
        enabled=config.enabled and config.redemption.enabled and has_card,
        points_balance=balance,
        min_redeem_points=config.redemption.min_redeem_points,
        max_redeem_points=max(0, min(totals.max_allowed_points, math.floor(balance))),
        points_per_bdt=config.redemption.points_per_bdt,
        estimated_discount=totals.redemption_discount,
        error=totals.redemption_error,
    )
