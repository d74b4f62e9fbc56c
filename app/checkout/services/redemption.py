"""Loyalty points redemption rules.

Checks run in a fixed order and the first failing one decides the outcome:

1. membership program enabled
2. redemption enabled
3. requested points at or above the minimum
4. requested points within the customer's balance
5. order total at or above the minimum order amount

A request that passes every check but would discount more than the
``max_redeem_percent`` cap is not rejected. It is clamped to the cap and
reported with status ``clamped``. The clamped point consumption is
``max_discount * points_per_bdt`` rounded down, so a fractional rate never
consumes a partial point.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from enum import Enum
from typing import Literal

from app.checkout.schemas.checkout import MembershipConfig
from app.checkout.services.cash_math import ZERO
from app.checkout.services.membership_config import (
    ResolvedMembershipConfig,
    ResolvedRedemption,
    resolve_membership_config,
)

OutcomeStatus = Literal["applied", "clamped", "rejected"]


class RejectionReason(str, Enum):
    PROGRAM_DISABLED = "PROGRAM_DISABLED"
    REDEMPTION_DISABLED = "REDEMPTION_DISABLED"
    BELOW_MIN_POINTS = "BELOW_MIN_POINTS"
    INSUFFICIENT_POINTS = "INSUFFICIENT_POINTS"
    BELOW_MIN_ORDER_AMOUNT = "BELOW_MIN_ORDER_AMOUNT"


@dataclass(frozen=True)
class RedemptionOutcome:
    status: OutcomeStatus
    discount_amount: Decimal
    points_to_redeem: int
    max_allowed_points: int
    reason: RejectionReason | None = None
    error: str | None = None

    @property
    def valid(self) -> bool:
        return self.status != "rejected"

    @property
    def clamped(self) -> bool:
        return self.status == "clamped"


def _floor(value: Decimal) -> Decimal:
    return value.to_integral_value(rounding=ROUND_FLOOR)


def _format_amount(value: Decimal) -> str:
    if value == _floor(value):
        return str(int(value))
    return format(value.normalize(), "f")


def _max_discount(order_total: Decimal, rules: ResolvedRedemption) -> Decimal:
    if order_total <= 0:
        return ZERO
    return _floor(order_total * rules.max_redeem_percent / Decimal("100"))


def _points_for_discount(discount: Decimal, rules: ResolvedRedemption) -> int:
    return int(_floor(discount * rules.points_per_bdt))


def calculate_max_allowed_points(
    order_total: Decimal,
    membership_config: MembershipConfig | ResolvedMembershipConfig | None,
) -> int:
    """Most points the order can absorb under the redemption cap."""
    config = resolve_membership_config(membership_config)
    if not config.enabled or not config.redemption.enabled:
        return 0
    return _points_for_discount(_max_discount(order_total, config.redemption), config.redemption)


def _reject(reason: RejectionReason, error: str, max_allowed_points: int = 0) -> RedemptionOutcome:
    return RedemptionOutcome(
        status="rejected",
        discount_amount=ZERO,
        points_to_redeem=0,
        max_allowed_points=max_allowed_points,
        reason=reason,
        error=error,
    )


def validate_redemption(
    points_to_redeem: int,
    customer_points: Decimal,
    order_total: Decimal,
    membership_config: MembershipConfig | ResolvedMembershipConfig | None,
) -> RedemptionOutcome:
    config = resolve_membership_config(membership_config)
    if not config.enabled:
        return _reject(RejectionReason.PROGRAM_DISABLED, "Membership program disabled")
    rules = config.redemption
    if not rules.enabled:
        return _reject(RejectionReason.REDEMPTION_DISABLED, "Points redemption not enabled")

    max_discount = _max_discount(order_total, rules)
    max_allowed_points = _points_for_discount(max_discount, rules)

    if points_to_redeem < rules.min_redeem_points:
        return _reject(
            RejectionReason.BELOW_MIN_POINTS,
            f"Minimum {rules.min_redeem_points} points required for redemption",
            max_allowed_points,
        )
    if points_to_redeem > customer_points:
        return _reject(
            RejectionReason.INSUFFICIENT_POINTS,
            f"Insufficient points. Available: {_format_amount(Decimal(customer_points))}",
            max_allowed_points,
        )
    if order_total < rules.min_order_amount:
        return _reject(
            RejectionReason.BELOW_MIN_ORDER_AMOUNT,
            f"Minimum order amount of {_format_amount(rules.min_order_amount)} required for redemption",
            max_allowed_points,
        )

    requested_discount = _floor(Decimal(points_to_redeem) / rules.points_per_bdt)
    if requested_discount > max_discount:
        return RedemptionOutcome(
            status="clamped",
            discount_amount=max_discount,
            points_to_redeem=max_allowed_points,
            max_allowed_points=max_allowed_points,
        )
    return RedemptionOutcome(
        status="applied",
        discount_amount=requested_discount,
        points_to_redeem=points_to_redeem,
        max_allowed_points=max_allowed_points,
    )
