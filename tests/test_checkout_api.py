import json
from decimal import Decimal

from app.checkout.core.config import settings
from tests.checkout_helpers import membership_config


def _membership_payload() -> dict:
    return membership_config().model_dump(by_alias=True, mode="json")


def test_totals_breakdown(client):
    response = client.post(
        "/checkout/totals",
        json={
            "items": [{"lineTotal": 600}, {"lineTotal": 400}],
            "manualDiscountInput": "200",
            "membershipConfig": _membership_payload(),
            "customer": {"membership": {"tier": "Gold", "points": {"current": 2000}, "cardId": "MEM-1"}},
            "pointsToRedeemInput": "1000",
        },
    )
    assert response.status_code == 200
    payload = response.json()
    assert Decimal(payload["subtotal"]) == Decimal("1000")
    assert Decimal(payload["manualDiscount"]) == Decimal("200")
    assert Decimal(payload["tierDiscount"]) == Decimal("100")
    assert Decimal(payload["redemptionDiscount"]) == Decimal("350")
    assert Decimal(payload["total"]) == Decimal("350")
    assert payload["redemptionStatus"] == "clamped"
    assert payload["pointsRedeemed"] == 350
    assert payload["maxAllowedPoints"] == 350
    assert payload["tierName"] == "Gold"
    assert payload["redemption"]["enabled"] is True
    assert payload["redemption"]["maxRedeemPoints"] == 350


def test_totals_report_redemption_error_as_data(client):
    response = client.post(
        "/checkout/totals",
        json={
            "items": [{"lineTotal": 1000}],
            "membershipConfig": _membership_payload(),
            "customer": {"membership": {"points": {"current": 50}}},
            "pointsToRedeemInput": "50",
        },
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["redemptionStatus"] == "rejected"
    assert "100" in payload["redemptionError"]
    assert Decimal(payload["redemptionDiscount"]) == Decimal("0")
    assert payload["redemption"]["enabled"] is False


def test_totals_fall_back_to_platform_membership_file(client, tmp_path, monkeypatch):
    path = tmp_path / "platform.json"
    path.write_text(json.dumps({"platformName": "Shop", "membership": _membership_payload()}), encoding="utf-8")
    monkeypatch.setattr(settings, "MEMBERSHIP_CONFIG_PATH", str(path))

    response = client.post("/checkout/totals", json={"items": [{"lineTotal": 1000}]})
    assert response.status_code == 200
    assert response.json()["pointsToEarn"] == 10


def test_broken_platform_membership_file(client, tmp_path, monkeypatch):
    path = tmp_path / "platform.json"
    path.write_text("{not json", encoding="utf-8")
    monkeypatch.setattr(settings, "MEMBERSHIP_CONFIG_PATH", str(path))

    response = client.post("/checkout/totals", json={"items": []})
    assert response.status_code == 422
    assert response.json()["code"] == "MEMBERSHIP_CONFIG_INVALID"


def test_missing_platform_membership_file(client, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "MEMBERSHIP_CONFIG_PATH", str(tmp_path / "absent.json"))

    response = client.post("/checkout/totals", json={"items": []})
    assert response.status_code == 503
    payload = response.json()
    assert payload["code"] == "MEMBERSHIP_CONFIG_UNAVAILABLE"
    assert payload["trace_id"]


def test_negative_line_total_is_rejected(client):
    response = client.post("/checkout/totals", json={"items": [{"lineTotal": -5}]})
    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "VALIDATION_ERROR"
    assert payload["details"]["errors"][0]["field"] == "items.0.lineTotal"


def test_split_payment_reconciliation(client):
    response = client.post(
        "/checkout/split-payments",
        json={
            "total": 700,
            "paymentMethods": [
                {"_id": "pm-cash", "type": "cash", "name": "Cash"},
                {"_id": "pm-card", "type": "card", "name": "Card"},
            ],
            "entries": [
                {"id": "a", "paymentKey": "pm-cash", "amount": "500"},
                {"id": "b", "paymentKey": "pm-card", "amount": "200", "reference": ""},
            ],
        },
    )
    assert response.status_code == 200
    payload = response.json()
    assert Decimal(payload["allocated"]) == Decimal("700")
    assert Decimal(payload["remaining"]) == Decimal("0")
    assert payload["isBalanced"] is True
    assert payload["hasErrors"] is True
    assert payload["rows"][1]["entry"]["error"] == "Reference required for Card"


def test_cash_tender(client):
    response = client.post("/checkout/cash", json={"total": 700, "cashReceived": "1000"})
    assert response.status_code == 200
    payload = response.json()
    assert Decimal(payload["change"]) == Decimal("300")
    assert Decimal(payload["amountDue"]) == Decimal("0")


def test_payment_options(client):
    response = client.post(
        "/checkout/payment-options",
        json={
            "paymentMethods": [
                {"_id": "pm-nagad", "type": "mfs", "provider": "Nagad", "name": "Nagad"},
                {"_id": "pm-cash", "type": "cash", "name": "Cash"},
            ]
        },
    )
    assert response.status_code == 200
    payload = response.json()
    assert [option["posMethod"] for option in payload["options"]] == ["nagad", "cash"]
    assert payload["defaultKey"] == "pm-cash"


def test_quote_metrics_are_exported(client):
    client.post(
        "/checkout/totals",
        json={
            "items": [{"lineTotal": 1000}],
            "membershipConfig": _membership_payload(),
            "customer": {"membership": {"points": {"current": 5000}}},
            "pointsToRedeemInput": "5000",
        },
    )
    response = client.get("/checkout/ops/metrics")
    assert response.status_code == 200
    assert "checkout_quotes_total 1.0" in response.text
    assert 'redemption_outcomes_total{status="clamped"} 1.0' in response.text
