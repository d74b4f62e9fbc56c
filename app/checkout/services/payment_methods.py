from __future__ import annotations

from typing import Any, Mapping, Sequence

from app.checkout.schemas.checkout import PaymentMethodConfig, PaymentOption, PosPaymentMethod

_MFS_PROVIDERS = {"bkash", "nagad", "rocket", "upay"}


def map_platform_method(method: PaymentMethodConfig) -> PosPaymentMethod | None:
    """Translate a platform payment method into the method name the POS API expects.

    Mobile wallets are configured as type ``mfs`` with a provider, while
    orders carry the provider name itself.
    """
    if method.type == "cash":
        return "cash"
    if method.type == "mfs":
        provider = (method.provider or "").lower()
        return provider if provider in _MFS_PROVIDERS else None
    if method.type == "bank_transfer":
        return "bank_transfer"
    if method.type == "card":
        return "card"
    return None


def payment_needs_reference(pos_method: PosPaymentMethod) -> bool:
    return pos_method != "cash"


def payment_key(method: PaymentMethodConfig, index: int) -> str:
    return method.id or f"{method.type}:{method.provider or ''}:{method.name}:{index}"


def build_payment_options(
    methods: Sequence[PaymentMethodConfig | Mapping[str, Any]] | None,
) -> list[PaymentOption]:
    active = [
        method
        for method in (
            item if isinstance(item, PaymentMethodConfig) else PaymentMethodConfig.model_validate(item)
            for item in methods or []
        )
        if method.is_active is not False
    ]
    options: list[PaymentOption] = []
    for idx, method in enumerate(active):
        pos_method = map_platform_method(method)
        if pos_method is None:
            continue
        options.append(
            PaymentOption(
                key=payment_key(method, idx),
                pos_method=pos_method,
                label=method.name,
                needs_reference=payment_needs_reference(pos_method),
                note=method.note,
                wallet_number=method.wallet_number if method.type == "mfs" else None,
            )
        )
    return options


def find_option(options: Sequence[PaymentOption], key: str | None) -> PaymentOption | None:
    if key is None:
        return None
    return next((option for option in options if option.key == key), None)


def default_payment_option(options: Sequence[PaymentOption]) -> PaymentOption | None:
    cash = next((option for option in options if option.pos_method == "cash"), None)
    if cash is not None:
        return cash
    return options[0] if options else None
