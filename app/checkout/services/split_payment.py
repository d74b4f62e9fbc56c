"""Split tender bookkeeping.

The entries belong to the caller. Nothing here blocks a checkout: every
entry gets an advisory ``error`` and the caller decides whether an
unbalanced or erroneous split may be submitted.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Sequence

from app.checkout.schemas.checkout import PaymentOption, SplitPaymentEntry, SplitPaymentPatch
from app.checkout.services.cash_math import ZERO, parse_positive_number
from app.checkout.services.payment_methods import find_option

DEFAULT_BALANCE_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class SplitRow:
    entry: SplitPaymentEntry
    amount: Decimal
    fill_remainder: Decimal


@dataclass(frozen=True)
class SplitPaymentReconciliation:
    total: Decimal
    allocated: Decimal
    remaining: Decimal
    is_balanced: bool
    has_errors: bool
    rows: list[SplitRow]

    @property
    def entries(self) -> list[SplitPaymentEntry]:
        return [row.entry for row in self.rows]


def _coerce_entry(entry: SplitPaymentEntry | Mapping[str, Any]) -> SplitPaymentEntry:
    return entry if isinstance(entry, SplitPaymentEntry) else SplitPaymentEntry.model_validate(entry)


def validate_split_entry(entry: SplitPaymentEntry, options: Sequence[PaymentOption]) -> str | None:
    option = find_option(options, entry.payment_key)
    if option is None:
        return "Invalid payment method"
    if parse_positive_number(entry.amount) <= 0:
        return "Amount required"
    if option.needs_reference and not entry.reference.strip():
        return f"Reference required for {option.label}"
    return None


def create_split_entry(option: PaymentOption) -> SplitPaymentEntry:
    return SplitPaymentEntry(id=f"split_{uuid.uuid4().hex}", payment_key=option.key)


def apply_split_update(
    entry: SplitPaymentEntry,
    patch: SplitPaymentPatch | Mapping[str, Any],
    options: Sequence[PaymentOption],
) -> SplitPaymentEntry:
    """Return ``entry`` with ``patch`` applied and its error cleared.

    Switching to a different payment method drops the old reference.
    """
    if not isinstance(patch, SplitPaymentPatch):
        patch = SplitPaymentPatch.model_validate(patch)
    update: dict[str, Any] = patch.model_dump(exclude_none=True)
    update["error"] = None
    if patch.payment_key is not None and patch.payment_key != entry.payment_key:
        if find_option(options, patch.payment_key) is not None and patch.reference is None:
            update["reference"] = ""
    return entry.model_copy(update=update)


def reconcile_split_payments(
    total: Decimal,
    entries: Sequence[SplitPaymentEntry | Mapping[str, Any]],
    options: Sequence[PaymentOption],
    *,
    tolerance: Decimal = DEFAULT_BALANCE_TOLERANCE,
) -> SplitPaymentReconciliation:
    normalized = [_coerce_entry(entry) for entry in entries]
    amounts = [parse_positive_number(entry.amount) for entry in normalized]
    allocated = sum(amounts, ZERO)
    remaining = total - allocated

    rows: list[SplitRow] = []
    for entry, amount in zip(normalized, amounts):
        error = validate_split_entry(entry, options)
        rows.append(
            SplitRow(
                entry=entry.model_copy(update={"error": error}),
                amount=amount,
                fill_remainder=max(ZERO, total - (allocated - amount)),
            )
        )

    return SplitPaymentReconciliation(
        total=total,
        allocated=allocated,
        remaining=remaining,
        is_balanced=abs(remaining) < tolerance and allocated > 0,
        has_errors=any(row.entry.error for row in rows),
        rows=rows,
    )
