from __future__ import annotations

from decimal import Decimal

from app.checkout.schemas.checkout import MembershipConfig
from app.checkout.services.cash_math import ZERO, round_to_whole_units
from app.checkout.services.membership_config import ResolvedMembershipConfig, resolve_membership_config


def calculate_tier_discount(
    subtotal: Decimal,
    membership_config: MembershipConfig | ResolvedMembershipConfig | None,
    tier_name: str | None,
) -> Decimal:
    """Discount granted by the customer's membership tier, in whole currency units."""
    config = resolve_membership_config(membership_config)
    if not config.enabled or not config.tiers:
        return ZERO
    tier = config.find_tier(tier_name)
    if tier is None or tier.discount_percent is None:
        return ZERO
    return round_to_whole_units(subtotal * tier.discount_percent / Decimal("100"))
