from __future__ import annotations

import json
from decimal import Decimal

import pytest
import requests

import backoffice.integrations.http as http_module
from backoffice.core.exceptions import UpstreamServiceError
from backoffice.integrations.inventory_client import HttpInventoryClient
from backoffice.integrations.pricing_client import HttpPricingClient


class _FakeResponse:
    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.text = body

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self, **kwargs):
        return json.loads(self.text, **kwargs)


def _install(monkeypatch, status_code=200, body="{}", calls=None):
    def _request(method, url, **kwargs):
        if calls is not None:
            calls.append((method, url, kwargs))
        return _FakeResponse(status_code, body)

    monkeypatch.setattr(http_module.requests, "request", _request)


CONFIGURATION_BODY = """
{
  "id": "C1",
  "assetId": "A1",
  "validated": true,
  "leadTimeDays": 5,
  "priceSnapshot": {
    "components": [
      {"type": "RAM", "reference": "RAM-16", "quantity": 2, "unitPrice": 35.10, "lineTotal": 70.20}
    ],
    "laborCost": 45.00,
    "subtotal": 1115.40,
    "margin": 100.00,
    "total": 1215.40,
    "currency": "EUR",
    "frozenAt": "2026-01-15T09:30:00"
  }
}
"""


def test_pricing_client_decodes_prices_as_decimals(monkeypatch):
    calls = []
    _install(monkeypatch, body=CONFIGURATION_BODY, calls=calls)

    configuration = HttpPricingClient("http://pricing.local/").get_configuration("C1")

    assert configuration.validated is True
    assert configuration.pricing_snapshot.total == Decimal("1215.40")
    assert configuration.pricing_snapshot.components[0].unit_price == Decimal("35.10")
    method, url, kwargs = calls[0]
    assert (method, url) == ("GET", "http://pricing.local/cto/configurations/C1")
    assert isinstance(kwargs["timeout"], tuple)


def test_non_2xx_answer_raises_upstream_error(monkeypatch):
    _install(monkeypatch, status_code=404, body='{"message": "not found"}')

    with pytest.raises(UpstreamServiceError) as exc_info:
        HttpPricingClient("http://pricing.local").get_configuration("missing")

    assert exc_info.value.service == "pricing"
    assert exc_info.value.status_code == 404


def test_transport_error_raises_upstream_error(monkeypatch):
    def _boom(method, url, **kwargs):
        raise requests.exceptions.ConnectTimeout("timed out")

    monkeypatch.setattr(http_module.requests, "request", _boom)

    with pytest.raises(UpstreamServiceError, match="timed out"):
        HttpInventoryClient("http://inventory.local").check_availability("A1")


def test_malformed_payload_raises_upstream_error(monkeypatch):
    _install(monkeypatch, body='{"assetId": "A1"}')

    with pytest.raises(UpstreamServiceError, match="Malformed"):
        HttpInventoryClient("http://inventory.local").check_availability("A1")


def test_reserve_posts_order_reference(monkeypatch):
    calls = []
    _install(monkeypatch, body='{"id": "R1", "assetId": "A1", "orderRef": "ORD-1"}', calls=calls)

    reservation = HttpInventoryClient("http://inventory.local").reserve_asset("A1", "ORD-1")

    assert reservation.id == "R1"
    method, url, kwargs = calls[0]
    assert (method, url) == ("POST", "http://inventory.local/inventory/assets/A1/reserve")
    assert kwargs["json"] == {"orderRef": "ORD-1"}
