from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select

from backoffice.core.result import ErrorCode
from backoffice.models.enums import ActorRole, InvoiceStatus, PaymentMethod
from backoffice.models.payment import Payment
from backoffice.repositories.invoice_repository import InvoiceRepository


def _payment_count(session, invoice_id: str) -> int:
    stmt = select(func.count()).select_from(Payment).where(Payment.invoice_id == invoice_id)
    return session.scalar(stmt)


def test_full_payment_settles_invoice(pipeline, issued_invoice):
    invoice = issued_invoice(total="1215.40")

    result = pipeline.payments.register_payment(
        invoice.id, PaymentMethod.BANK_TRANSFER, Decimal("1215.40"), ActorRole.SALES_INTERNAL
    )

    assert result.ok
    assert result.value.invoice_paid is True
    assert result.value.payment.amount == Decimal("1215.40")
    assert pipeline.invoices.get_invoice(invoice.id).value.status == InvoiceStatus.PAID


def test_overpayment_is_rejected_and_nothing_persisted(pipeline, issued_invoice):
    invoice = issued_invoice(total="1215.40")

    result = pipeline.payments.register_payment(
        invoice.id, PaymentMethod.BANK_TRANSFER, Decimal("1300.00"), ActorRole.SALES_INTERNAL
    )

    assert result.error.code == ErrorCode.INVALID_PAYMENT_AMOUNT
    assert result.error.details["remaining"] == "1215.40"
    assert _payment_count(pipeline.session, invoice.id) == 0
    assert pipeline.invoices.get_invoice(invoice.id).value.status == InvoiceStatus.ISSUED


def test_partial_payments_accumulate_until_paid(pipeline, issued_invoice):
    invoice = issued_invoice(total="1000.00")

    first = pipeline.payments.register_payment(invoice.id, PaymentMethod.CARD, Decimal("400.00"), ActorRole.ADMIN)
    balance = pipeline.payments.remaining_balance(invoice.id).value
    too_much = pipeline.payments.register_payment(
        invoice.id, PaymentMethod.CHECK, Decimal("600.01"), ActorRole.TECH_INTERNAL
    )
    last = pipeline.payments.register_payment(
        invoice.id, PaymentMethod.DIRECT_DEBIT, Decimal("600.00"), ActorRole.TECH_INTERNAL
    )

    assert first.value.invoice_paid is False
    assert balance.total_paid == Decimal("400.00")
    assert balance.remaining == Decimal("600.00")
    assert too_much.error.code == ErrorCode.INVALID_PAYMENT_AMOUNT
    assert last.value.invoice_paid is True
    payments = pipeline.payments.list_payments(invoice.id).value
    assert [payment.method for payment in payments] == [PaymentMethod.CARD, PaymentMethod.DIRECT_DEBIT]


def test_paid_invoice_accepts_no_further_payment(pipeline, issued_invoice):
    invoice = issued_invoice(total="50.00")
    pipeline.payments.register_payment(invoice.id, PaymentMethod.CARD, Decimal("50.00"), ActorRole.ADMIN)

    result = pipeline.payments.register_payment(invoice.id, PaymentMethod.CARD, Decimal("0.01"), ActorRole.ADMIN)

    assert result.error.code == ErrorCode.INVALID_PAYMENT_AMOUNT
    assert _payment_count(pipeline.session, invoice.id) == 1


def test_customer_roles_cannot_register_payments(pipeline, issued_invoice):
    invoice = issued_invoice()

    for role in (ActorRole.CLIENT_ADMIN, ActorRole.BUYER, ActorRole.READER):
        result = pipeline.payments.register_payment(invoice.id, PaymentMethod.CARD, Decimal("10.00"), role)
        assert result.error.code == ErrorCode.PAYMENT_UNAUTHORIZED
        assert result.error.http_status == 403
    assert _payment_count(pipeline.session, invoice.id) == 0


def test_payment_on_draft_invoice_is_rejected(pipeline, confirmed_order):
    order = confirmed_order()
    invoice = pipeline.invoices.create_from_order(pipeline.orders.billing_view(order.id).value).value

    result = pipeline.payments.register_payment(
        invoice.id, PaymentMethod.BANK_TRANSFER, Decimal("10.00"), ActorRole.SALES_INTERNAL
    )

    assert result.error.code == ErrorCode.INVOICE_NOT_ISSUED


def test_invalid_amounts_are_rejected(pipeline, issued_invoice):
    invoice = issued_invoice()

    for amount in (Decimal("0"), Decimal("-5.00"), Decimal("10.001")):
        result = pipeline.payments.register_payment(invoice.id, PaymentMethod.CARD, amount, ActorRole.ADMIN)
        assert result.error.code == ErrorCode.INVALID_PAYMENT_AMOUNT


def test_unknown_invoice_is_not_found(pipeline):
    result = pipeline.payments.register_payment("missing", PaymentMethod.CARD, Decimal("1.00"), ActorRole.ADMIN)

    assert result.error.code == ErrorCode.INVOICE_NOT_FOUND


def test_lost_version_claims_end_in_conflict(pipeline, issued_invoice, monkeypatch):
    invoice = issued_invoice(total="100.00")
    attempts = []

    def _always_stale(self, invoice_id, seen_version):
        attempts.append(seen_version)
        return False

    monkeypatch.setattr(InvoiceRepository, "claim_version", _always_stale)

    result = pipeline.payments.register_payment(invoice.id, PaymentMethod.CARD, Decimal("10.00"), ActorRole.ADMIN)

    assert result.error.code == ErrorCode.CONCURRENT_UPDATE
    assert result.error.http_status == 409
    assert len(attempts) == 3
    assert _payment_count(pipeline.session, invoice.id) == 0


def test_each_payment_bumps_invoice_version(pipeline, issued_invoice):
    invoice = issued_invoice(total="100.00")

    pipeline.payments.register_payment(invoice.id, PaymentMethod.CARD, Decimal("10.00"), ActorRole.ADMIN)
    pipeline.payments.register_payment(invoice.id, PaymentMethod.CARD, Decimal("10.00"), ActorRole.ADMIN)

    pipeline.session.refresh(invoice)
    assert invoice.version == 2
