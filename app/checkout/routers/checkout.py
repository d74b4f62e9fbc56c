from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from app.checkout.core.config import settings
from app.checkout.core.logging import log_json
from app.checkout.core.metrics import metrics
from app.checkout.schemas.checkout import (
    CashTenderRequest,
    CashTenderResponse,
    OrderTotalsRequest,
    OrderTotalsResponse,
    PaymentOptionsRequest,
    PaymentOptionsResponse,
    RedemptionSummaryResponse,
    SplitPaymentRequest,
    SplitPaymentResponse,
    SplitPaymentRow,
)
from app.checkout.services.cash_math import calculate_amount_due, calculate_change, parse_cash_received
from app.checkout.services.order_totals import build_redemption_summary, calculate_order_totals
from app.checkout.services.payment_methods import build_payment_options, default_payment_option
from app.checkout.services.platform_config import default_membership_config
from app.checkout.services.split_payment import reconcile_split_payments

logger = logging.getLogger("checkout.pricing")

router = APIRouter()


@router.post("/checkout/totals", response_model=OrderTotalsResponse)
def quote_order_totals(payload: OrderTotalsRequest, request: Request):
    membership_config = payload.membership_config
    if membership_config is None:
        membership_config = default_membership_config()

    totals = calculate_order_totals(
        items=payload.items,
        manual_discount_input=payload.manual_discount_input,
        membership_config=membership_config,
        customer=payload.customer,
        points_to_redeem_input=payload.points_to_redeem_input,
    )
    summary = build_redemption_summary(totals, membership_config, payload.customer)

    metrics.increment_checkout_quote()
    if totals.redemption_status != "none":
        metrics.increment_redemption_outcome(totals.redemption_status)
    if settings.QUOTE_LOG_ENABLED:
        log_json(
            logger,
            {
                "event": "checkout_quote",
                "trace_id": getattr(request.state, "trace_id", ""),
                "item_count": totals.item_count,
                "subtotal": totals.subtotal,
                "total_discount": totals.total_discount,
                "total": totals.total,
                "tier_name": totals.tier_name,
                "redemption_status": totals.redemption_status,
                "points_redeemed": totals.points_redeemed,
                "points_to_earn": totals.points_to_earn,
            },
        )

    return OrderTotalsResponse(
        subtotal=totals.subtotal,
        manual_discount=totals.manual_discount,
        tier_discount=totals.tier_discount,
        redemption_discount=totals.redemption_discount,
        total_discount=totals.total_discount,
        total=totals.total,
        points_to_earn=totals.points_to_earn,
        points_redeemed=totals.points_redeemed,
        redemption_error=totals.redemption_error,
        redemption_status=totals.redemption_status,
        max_allowed_points=totals.max_allowed_points,
        tier_name=totals.tier_name,
        item_count=totals.item_count,
        redemption=RedemptionSummaryResponse(
            enabled=summary.enabled,
            points_balance=summary.points_balance,
            min_redeem_points=summary.min_redeem_points,
            max_redeem_points=summary.max_redeem_points,
            points_per_bdt=summary.points_per_bdt,
            estimated_discount=summary.estimated_discount,
            error=summary.error,
        ),
    )


@router.post("/checkout/split-payments", response_model=SplitPaymentResponse)
def reconcile_split(payload: SplitPaymentRequest):
    options = build_payment_options(payload.payment_methods)
    result = reconcile_split_payments(
        payload.total,
        payload.entries,
        options,
        tolerance=settings.SPLIT_BALANCE_TOLERANCE,
    )
    return SplitPaymentResponse(
        total=result.total,
        allocated=result.allocated,
        remaining=result.remaining,
        is_balanced=result.is_balanced,
        has_errors=result.has_errors,
        rows=[
            SplitPaymentRow(entry=row.entry, amount=row.amount, fill_remainder=row.fill_remainder)
            for row in result.rows
        ],
    )


@router.post("/checkout/cash", response_model=CashTenderResponse)
def cash_tender(payload: CashTenderRequest):
    cash_received = parse_cash_received(payload.cash_received)
    return CashTenderResponse(
        total=payload.total,
        cash_received=cash_received,
        change=calculate_change(cash_received, payload.total),
        amount_due=calculate_amount_due(cash_received, payload.total),
    )


@router.post("/checkout/payment-options", response_model=PaymentOptionsResponse)
def payment_options(payload: PaymentOptionsRequest):
    options = build_payment_options(payload.payment_methods)
    default = default_payment_option(options)
    return PaymentOptionsResponse(options=options, default_key=default.key if default else None)
