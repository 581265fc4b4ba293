from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi import HTTPException

from backoffice.api.v1 import invoices as invoices_api
from backoffice.api.v1 import options as options_api
from backoffice.api.v1 import orders as orders_api
from backoffice.api.v1 import payments as payments_api
from backoffice.api.v1 import quotes as quotes_api
from backoffice.models.enums import OrderStatus, PaymentMethod
from backoffice.schemas.invoices import InvoiceCreateRequest
from backoffice.schemas.options import AddOptionsRequest, OptionPriceUpdateRequest
from backoffice.schemas.orders import OrderStatusUpdateRequest
from backoffice.schemas.payments import PaymentCreateRequest
from backoffice.schemas.quotes import QuoteAttachmentRequest, QuoteCommentRequest, QuoteCreateRequest

BUYER = {"x_company_id": "COMP-1", "x_actor_role": "ACHETEUR"}
SALES = {"x_company_id": "HQ", "x_actor_role": "SALES_INTERNAL"}


@pytest.fixture
def api(pipeline, monkeypatch):
    monkeypatch.setattr(quotes_api, "_quote_service", lambda db: pipeline.quotes)
    monkeypatch.setattr(orders_api, "_order_service", lambda db: pipeline.orders)
    monkeypatch.setattr(invoices_api, "_invoice_service", lambda db: pipeline.invoices)
    monkeypatch.setattr(payments_api, "_payment_service", lambda db: pipeline.payments)
    pipeline.pricing.register("C1", asset_id="A1")
    return pipeline


def _create_quote(api):
    payload = QuoteCreateRequest(asset_id="A1", configuration_id="C1", customer_ref="CUST-1")
    return quotes_api.create_quote(payload, db=api.session, **BUYER)


def test_missing_context_headers_is_unauthorized(api):
    with pytest.raises(HTTPException) as exc:
        quotes_api.list_quotes(db=api.session, x_company_id=None, x_actor_role="ACHETEUR")

    assert exc.value.status_code == 401


def test_quote_is_invisible_to_other_company(api):
    quote = _create_quote(api)

    with pytest.raises(HTTPException) as exc:
        quotes_api.get_quote(quote.id, db=api.session, x_company_id="COMP-2", x_actor_role="ACHETEUR")

    assert exc.value.status_code == 403


def test_second_conversion_is_a_conflict_with_existing_order(api):
    quote = _create_quote(api)
    order = quotes_api.convert_quote(quote.id, db=api.session, **BUYER)

    with pytest.raises(HTTPException) as exc:
        quotes_api.convert_quote(quote.id, db=api.session, **BUYER)

    assert exc.value.status_code == 409
    assert exc.value.detail["error_code"] == "QuoteAlreadyConverted"
    assert exc.value.detail["details"]["existing_order_id"] == order.id


def test_reader_cannot_convert(api):
    quote = _create_quote(api)

    with pytest.raises(HTTPException) as exc:
        quotes_api.convert_quote(quote.id, db=api.session, x_company_id="COMP-1", x_actor_role="LECTURE")

    assert exc.value.status_code == 403


def test_comment_and_timeline_round(api):
    quote = _create_quote(api)

    quotes_api.add_comment(quote.id, QuoteCommentRequest(message="Need it by Monday"), db=api.session, **BUYER)
    timeline = quotes_api.quote_timeline(quote.id, db=api.session, **SALES)

    assert [item.message for item in timeline.items] == ["Need it by Monday"]


def test_attachment_route_is_internal_only(api):
    quote = _create_quote(api)
    payload = QuoteAttachmentRequest(filename="rack-layout.pdf", url="https://files.example.com/rack-layout.pdf")

    with pytest.raises(HTTPException) as exc:
        quotes_api.add_attachment(quote.id, payload, db=api.session, **BUYER)
    attachment = quotes_api.add_attachment(quote.id, payload, db=api.session, **SALES)
    timeline = quotes_api.quote_timeline(quote.id, db=api.session, **BUYER)

    assert exc.value.status_code == 403
    assert attachment.filename == "rack-layout.pdf"
    assert [(item.type, item.url) for item in timeline.items] == [("attachment", payload.url)]


def test_unknown_order_is_not_found(api):
    with pytest.raises(HTTPException) as exc:
        orders_api.get_order("missing", db=api.session, **SALES)

    assert exc.value.status_code == 404


def test_order_price_includes_frozen_options(api):
    order = quotes_api.convert_quote(_create_quote(api).id, db=api.session, **BUYER)
    options_api.add_order_options(
        order.id,
        AddOptionsRequest(option_ids=["OPT-WARRANTY-3Y"]),
        db=api.session,
        **BUYER,
    )

    price = orders_api.get_order_price(order.id, db=api.session, **BUYER)

    assert price["pricing_snapshot"].total == Decimal("1215.40")
    assert price["order_total"] == Decimal("1414.40")


def test_invalid_status_transition_is_unprocessable(api):
    order = quotes_api.convert_quote(_create_quote(api).id, db=api.session, **BUYER)

    with pytest.raises(HTTPException) as exc:
        orders_api.update_order_status(
            order.id, OrderStatusUpdateRequest(status=OrderStatus.DELIVERED), db=api.session, **SALES
        )

    assert exc.value.status_code == 422


def test_customer_cannot_change_catalog_price(api):
    with pytest.raises(HTTPException) as exc:
        options_api.set_option_price(
            "OPT-RFID-TAG", OptionPriceUpdateRequest(price=Decimal("30.00")), db=api.session, **BUYER
        )

    assert exc.value.status_code == 403


def test_invoice_payment_flow_through_routes(api):
    order = quotes_api.convert_quote(_create_quote(api).id, db=api.session, **BUYER)
    orders_api.update_order_status(
        order.id, OrderStatusUpdateRequest(status=OrderStatus.CONFIRMED), db=api.session, **SALES
    )
    invoice = invoices_api.create_invoice(
        InvoiceCreateRequest(order_id=order.id), db=api.session, **SALES
    )
    invoices_api.issue_invoice(invoice.id, db=api.session, **SALES)

    with pytest.raises(HTTPException) as exc:
        payments_api.register_payment(
            invoice.id,
            PaymentCreateRequest(method=PaymentMethod.CARD, amount=Decimal("10.00")),
            db=api.session,
            **BUYER,
        )
    assert exc.value.status_code == 403

    receipt = payments_api.register_payment(
        invoice.id,
        PaymentCreateRequest(method=PaymentMethod.BANK_TRANSFER, amount=Decimal("1215.40")),
        db=api.session,
        **SALES,
    )
    assert receipt.invoice_paid is True

    balance = payments_api.remaining_balance(invoice.id, db=api.session, **BUYER)
    assert balance.remaining == Decimal("0.00")


def test_invoice_of_other_company_is_forbidden(api, issued_invoice):
    invoice = issued_invoice(company_id="COMP-9")

    with pytest.raises(HTTPException) as exc:
        invoices_api.get_invoice(invoice.id, db=api.session, **BUYER)

    assert exc.value.status_code == 403


def test_health_reports_database_state(monkeypatch):
    from backoffice.api.v1 import health as health_api

    monkeypatch.setattr(health_api, "verify_database_connection", lambda: False)

    assert health_api.health()["database"] == "unavailable"


def test_router_mounts_every_resource():
    from backoffice.main import create_app

    paths = set(create_app().openapi()["paths"])

    assert "/api/v1/quotes/{quote_id}/convert" in paths
    assert "/api/v1/orders/{order_id}/options" in paths
    assert "/api/v1/invoices/{invoice_id}/payments" in paths
    assert "/api/v1/health" in paths
