from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from backoffice.core.result import ErrorCode
from backoffice.models.enums import InvoiceStatus, OrderStatus, PaymentMethod
from backoffice.schemas.orders import OrderBilling


def test_invoice_copies_order_total_and_numbers_sequentially(pipeline, confirmed_order):
    first_order = confirmed_order(total="1215.40")
    second_order = confirmed_order(total="640.00")

    first = pipeline.invoices.create_from_order(pipeline.orders.billing_view(first_order.id).value).value
    second = pipeline.invoices.create_from_order(pipeline.orders.billing_view(second_order.id).value).value

    assert first.status == InvoiceStatus.DRAFT
    assert first.amount_total == Decimal("1215.40")
    assert first.company_id == "COMP-1"
    assert first.invoice_number.startswith("FAC-")
    assert first.invoice_number.endswith("-0001")
    assert second.invoice_number.endswith("-0002")
    assert first.issued_at is None and first.due_at is None


def test_invoice_total_includes_frozen_options(pipeline, confirmed_order):
    order = confirmed_order(total="1215.40")
    # Attached while RESERVED would be typical; CONFIRMED orders still accept options.
    pipeline.options.add_options_to_order(order.id, ["OPT-WARRANTY-3Y"])

    invoice = pipeline.invoices.create_from_order(pipeline.orders.billing_view(order.id).value).value

    assert invoice.amount_total == Decimal("1414.40")


def test_invoice_total_is_copied_not_recomputed(pipeline):
    billing = OrderBilling(id="ORD-X", company_id="COMP-1", status=OrderStatus.CONFIRMED, total_amount=Decimal("10.01"))

    invoice = pipeline.invoices.create_from_order(billing).value

    assert invoice.amount_total == Decimal("10.01")


def test_only_confirmed_orders_can_be_invoiced(pipeline):
    billing = OrderBilling(id="ORD-R", status=OrderStatus.RESERVED, total_amount=Decimal("100.00"))

    result = pipeline.invoices.create_from_order(billing)

    assert result.error.code == ErrorCode.ORDER_NOT_ELIGIBLE
    assert result.error.http_status == 422


def test_second_invoice_for_same_order_is_rejected(pipeline, confirmed_order):
    order = confirmed_order()
    billing = pipeline.orders.billing_view(order.id).value
    first = pipeline.invoices.create_from_order(billing).value

    second = pipeline.invoices.create_from_order(billing)

    assert second.error.code == ErrorCode.INVOICE_ALREADY_EXISTS
    assert second.error.details["invoice_id"] == first.id


def test_issue_sets_dates_and_document_reference(pipeline, confirmed_order):
    order = confirmed_order()
    invoice = pipeline.invoices.create_from_order(pipeline.orders.billing_view(order.id).value).value

    issued = pipeline.invoices.issue(invoice.id).value

    assert issued.status == InvoiceStatus.ISSUED
    assert issued.due_at - issued.issued_at == timedelta(days=30)
    assert issued.document_ref == f"memory://{invoice.invoice_number}.pdf"
    document = pipeline.renderer.documents[0]
    assert document.amount_total == Decimal("1215.40")
    assert document.issued_at == issued.issued_at


def test_render_failure_leaves_invoice_in_draft(pipeline, confirmed_order):
    order = confirmed_order()
    invoice = pipeline.invoices.create_from_order(pipeline.orders.billing_view(order.id).value).value
    pipeline.renderer.fail = True

    result = pipeline.invoices.issue(invoice.id)

    assert result.error.code == ErrorCode.DOCUMENT_RENDER_FAILED
    pipeline.session.refresh(invoice)
    assert invoice.status == InvoiceStatus.DRAFT
    assert invoice.issued_at is None
    assert invoice.document_ref is None


def test_issue_twice_is_rejected(pipeline, issued_invoice):
    invoice = issued_invoice()

    result = pipeline.invoices.issue(invoice.id)

    assert result.error.code == ErrorCode.INVALID_INVOICE_STATUS


def test_check_and_mark_paid_is_idempotent(pipeline, issued_invoice):
    invoice = issued_invoice(total="300.00")

    not_yet = pipeline.invoices.check_and_mark_paid(invoice.id)
    pipeline.payments.payments.create(invoice.id, PaymentMethod.BANK_TRANSFER, Decimal("300.00"))
    pipeline.session.commit()
    settled = pipeline.invoices.check_and_mark_paid(invoice.id)
    again = pipeline.invoices.check_and_mark_paid(invoice.id)

    assert not_yet.value is False
    assert settled.value is True
    assert again.value is False
    assert pipeline.invoices.get_invoice(invoice.id).value.status == InvoiceStatus.PAID


def test_check_and_mark_paid_on_draft_is_rejected(pipeline, confirmed_order):
    order = confirmed_order()
    invoice = pipeline.invoices.create_from_order(pipeline.orders.billing_view(order.id).value).value

    result = pipeline.invoices.check_and_mark_paid(invoice.id)

    assert result.error.code == ErrorCode.INVOICE_NOT_ISSUED


def test_list_invoices_by_company(pipeline, confirmed_order):
    mine = confirmed_order(company_id="COMP-1")
    theirs = confirmed_order(company_id="COMP-2")
    pipeline.invoices.create_from_order(pipeline.orders.billing_view(mine.id).value)
    pipeline.invoices.create_from_order(pipeline.orders.billing_view(theirs.id).value)

    invoices = pipeline.invoices.list_invoices_by_company("COMP-1")

    assert [invoice.order_id for invoice in invoices] == [mine.id]
