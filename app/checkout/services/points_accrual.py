from __future__ import annotations

from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal

from app.checkout.schemas.checkout import MembershipConfig, RoundingMode
from app.checkout.services.membership_config import ResolvedMembershipConfig, resolve_membership_config

_ROUNDING = {
    "floor": ROUND_FLOOR,
    "ceil": ROUND_CEILING,
    "round": ROUND_HALF_UP,
}


def apply_rounding(value: Decimal, mode: RoundingMode) -> int:
    return int(value.to_integral_value(rounding=_ROUNDING[mode]))


def calculate_points_to_earn(
    final_total: Decimal,
    membership_config: MembershipConfig | ResolvedMembershipConfig | None,
    tier_name: str | None,
) -> int:
    """Loyalty points accrued on the amount the customer actually pays.

    ``final_total`` is the post-redemption total, so the redeemed portion of
    an order never earns points.
    """
    config = resolve_membership_config(membership_config)
    if not config.enabled or final_total <= 0:
        return 0
    base_points = final_total / config.amount_per_point * config.points_per_amount
    tier = config.find_tier(tier_name)
    multiplier = tier.points_multiplier if tier is not None else Decimal("1")
    return max(0, apply_rounding(base_points * multiplier, config.rounding_mode))
