from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RoundingMode = Literal["floor", "ceil", "round"]
RedemptionStatus = Literal["none", "applied", "clamped", "rejected"]
PosPaymentMethod = Literal["cash", "card", "bank_transfer", "bkash", "nagad", "rocket", "upay"]


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class CartLine(CamelModel):
    line_total: Decimal = Field(ge=0)


class MembershipTierConfig(CamelModel):
    name: str
    discount_percent: Decimal | None = Field(None, ge=0, le=100)
    points_multiplier: Decimal | None = Field(None, gt=0)
    min_points: int | None = None
    color: str | None = None


class RedemptionConfig(CamelModel):
    enabled: bool = False
    min_redeem_points: int | None = Field(None, ge=0)
    min_order_amount: Decimal | None = Field(None, ge=0)
    max_redeem_percent: Decimal | None = Field(None, ge=0, le=100)
    points_per_bdt: Decimal | None = Field(None, gt=0)


class MembershipConfig(CamelModel):
    enabled: bool = False
    tiers: list[MembershipTierConfig] | None = None
    redemption: RedemptionConfig | None = None
    points_per_amount: Decimal | None = Field(None, gt=0)
    amount_per_point: Decimal | None = Field(None, gt=0)
    rounding_mode: RoundingMode | None = None
    card_prefix: str | None = None
    card_digits: int | None = None


class CustomerPoints(CamelModel):
    current: Decimal = Decimal("0")


class CustomerMembership(CamelModel):
    tier: str | None = None
    points: CustomerPoints | None = None
    card_id: str | None = None


class Customer(CamelModel):
    id: str | None = None
    name: str | None = None
    phone: str | None = None
    membership: CustomerMembership | None = None


class PaymentMethodConfig(CamelModel):
    id: str | None = Field(None, alias="_id")
    type: str
    provider: str | None = None
    name: str
    is_active: bool | None = None
    note: str | None = None
    wallet_number: str | None = None


class PaymentOption(CamelModel):
    key: str
    pos_method: PosPaymentMethod
    label: str
    needs_reference: bool
    note: str | None = None
    wallet_number: str | None = None


class SplitPaymentEntry(CamelModel):
    id: str
    payment_key: str
    amount: str = ""
    reference: str = ""
    error: str | None = None


class SplitPaymentPatch(CamelModel):
    payment_key: str | None = None
    amount: str | None = None
    reference: str | None = None


class OrderTotalsRequest(CamelModel):
    items: list[CartLine] = Field(default_factory=list)
    manual_discount_input: str | None = None
    membership_config: MembershipConfig | None = None
    customer: Customer | None = None
    points_to_redeem_input: str | None = None


class RedemptionSummaryResponse(CamelModel):
    enabled: bool
    points_balance: Decimal
    min_redeem_points: int
    max_redeem_points: int
    points_per_bdt: Decimal
    estimated_discount: Decimal
    error: str | None


class OrderTotalsResponse(CamelModel):
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
    redemption: RedemptionSummaryResponse


class SplitPaymentRequest(CamelModel):
    total: Decimal = Field(ge=0)
    payment_methods: list[PaymentMethodConfig] = Field(default_factory=list)
    entries: list[SplitPaymentEntry] = Field(default_factory=list)


class SplitPaymentRow(CamelModel):
    entry: SplitPaymentEntry
    amount: Decimal
    fill_remainder: Decimal


class SplitPaymentResponse(CamelModel):
    total: Decimal
    allocated: Decimal
    remaining: Decimal
    is_balanced: bool
    has_errors: bool
    rows: list[SplitPaymentRow]


class CashTenderRequest(CamelModel):
    total: Decimal = Field(ge=0)
    cash_received: str | None = None


class CashTenderResponse(CamelModel):
    total: Decimal
    cash_received: Decimal
    change: Decimal
    amount_due: Decimal


class PaymentOptionsRequest(CamelModel):
    payment_methods: list[PaymentMethodConfig] = Field(default_factory=list)


class PaymentOptionsResponse(CamelModel):
    options: list[PaymentOption]
    default_key: str | None
