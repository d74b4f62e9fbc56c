from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")

NumericInput = str | int | float | Decimal | None


def _to_decimal(raw: NumericInput) -> Decimal | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int):
        value = Decimal(raw)
    elif isinstance(raw, float):
        value = Decimal(str(raw))
    else:
        text = raw.strip()
        # An empty field reads as zero, not as garbage.
        if not text:
            return ZERO
        try:
            value = Decimal(text)
        except InvalidOperation:
            return None
    # Anything a double cannot hold counts as infinite, like a browser number field.
    if not value.is_finite() or not math.isfinite(float(value)):
        return None
    return value


def parse_positive_number(raw: NumericInput) -> Decimal:
    """Parse user input into a non-negative amount.

    Anything that is not a finite number, or is not above zero, becomes 0.
    """
    value = _to_decimal(raw)
    if value is None or value <= 0:
        return ZERO
    return value


def parse_cash_received(raw: NumericInput) -> Decimal:
    value = _to_decimal(raw)
    return ZERO if value is None else value


def calculate_change(cash_received: Decimal, total: Decimal) -> Decimal:
    return max(ZERO, cash_received - total)


def calculate_amount_due(cash_received: Decimal, total: Decimal) -> Decimal:
    return max(ZERO, total - cash_received)


def round_to_whole_units(value: Decimal) -> Decimal:
    return value.to_integral_value(rounding=ROUND_HALF_UP)
