"""Resolution of the platform membership configuration.

The platform API ships the membership block with most fields optional. The
pricing pipeline never looks at that raw shape: it is resolved once into
``ResolvedMembershipConfig`` where every default is already applied.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from app.checkout.schemas.checkout import MembershipConfig, RoundingMode

DEFAULT_POINTS_PER_AMOUNT = Decimal("1")
DEFAULT_AMOUNT_PER_POINT = Decimal("100")
DEFAULT_ROUNDING_MODE: RoundingMode = "floor"
DEFAULT_MAX_REDEEM_PERCENT = Decimal("100")
DEFAULT_POINTS_PER_BDT = Decimal("1")


@dataclass(frozen=True)
class ResolvedTier:
    name: str
    discount_percent: Decimal | None
    points_multiplier: Decimal


@dataclass(frozen=True)
class ResolvedRedemption:
    enabled: bool
    min_redeem_points: int
    min_order_amount: Decimal
    max_redeem_percent: Decimal
    points_per_bdt: Decimal


@dataclass(frozen=True)
class ResolvedMembershipConfig:
    enabled: bool
    tiers: tuple[ResolvedTier, ...]
    redemption: ResolvedRedemption
    points_per_amount: Decimal
    amount_per_point: Decimal
    rounding_mode: RoundingMode

    def find_tier(self, tier_name: str | None) -> ResolvedTier | None:
        if not tier_name or not tier_name.strip():
            return None
        wanted = tier_name.strip().casefold()
        # First match wins when a name is configured twice.
        for tier in self.tiers:
            if tier.name.strip().casefold() == wanted:
                return tier
        return None


DISABLED_REDEMPTION = ResolvedRedemption(
    enabled=False,
    min_redeem_points=0,
    min_order_amount=Decimal("0"),
    max_redeem_percent=DEFAULT_MAX_REDEEM_PERCENT,
    points_per_bdt=DEFAULT_POINTS_PER_BDT,
)

DISABLED_MEMBERSHIP = ResolvedMembershipConfig(
    enabled=False,
    tiers=(),
    redemption=DISABLED_REDEMPTION,
    points_per_amount=DEFAULT_POINTS_PER_AMOUNT,
    amount_per_point=DEFAULT_AMOUNT_PER_POINT,
    rounding_mode=DEFAULT_ROUNDING_MODE,
)


def _pick(value, default):
    return default if value is None else value


def resolve_membership_config(
    config: MembershipConfig | ResolvedMembershipConfig | None,
) -> ResolvedMembershipConfig:
    if isinstance(config, ResolvedMembershipConfig):
        return config
    if config is None:
        return DISABLED_MEMBERSHIP

    tiers = tuple(
        ResolvedTier(
            name=tier.name,
            discount_percent=tier.discount_percent,
            points_multiplier=_pick(tier.points_multiplier, Decimal("1")),
        )
        for tier in config.tiers or []
    )

    redemption = DISABLED_REDEMPTION
    if config.redemption is not None:
        raw = config.redemption
        redemption = ResolvedRedemption(
            enabled=raw.enabled,
            min_redeem_points=_pick(raw.min_redeem_points, 0),
            min_order_amount=_pick(raw.min_order_amount, Decimal("0")),
            max_redeem_percent=_pick(raw.max_redeem_percent, DEFAULT_MAX_REDEEM_PERCENT),
            points_per_bdt=_pick(raw.points_per_bdt, DEFAULT_POINTS_PER_BDT),
        )

    return ResolvedMembershipConfig(
        enabled=config.enabled,
        tiers=tiers,
        redemption=redemption,
        points_per_amount=_pick(config.points_per_amount, DEFAULT_POINTS_PER_AMOUNT),
        amount_per_point=_pick(config.amount_per_point, DEFAULT_AMOUNT_PER_POINT),
        rounding_mode=_pick(config.rounding_mode, DEFAULT_ROUNDING_MODE),
    )
