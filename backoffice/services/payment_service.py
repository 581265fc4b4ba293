"""Payment recording with no-overpayment enforcement and inline settlement."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session

from backoffice.auth.rbac import can_register_payment
from backoffice.core.config import get_config
from backoffice.core.result import ErrorCode, Ok, Result, fail
from backoffice.models.enums import ActorRole, InvoiceStatus, PaymentMethod
from backoffice.models.payment import Payment
from backoffice.repositories.invoice_repository import InvoiceRepository
from backoffice.repositories.payment_repository import PaymentRepository
from backoffice.schemas.payments import PaymentReceipt, PaymentView, RemainingBalance
from backoffice.services.base_service import BaseService
from backoffice.services.invoice_service import InvoiceService
from backoffice.utils.money import ZERO, has_more_than_cents, to_money

logger = logging.getLogger(__name__)

PAYABLE_STATUSES = frozenset({InvoiceStatus.ISSUED, InvoiceStatus.PAID})


class PaymentService(BaseService):
    """Service that appends payments to issued invoices."""

    def __init__(self, db: Session | None = None, invoice_service: InvoiceService | None = None) -> None:
        super().__init__(db)
        self.invoice_service = invoice_service or InvoiceService(db=self.db)

    @property
    def payments(self) -> PaymentRepository:
        return PaymentRepository(self.db)

    @property
    def invoices(self) -> InvoiceRepository:
        return InvoiceRepository(self.db)

    def register_payment(
        self,
        invoice_id: str,
        method: PaymentMethod,
        amount: Decimal,
        actor_role: ActorRole,
    ) -> Result[PaymentReceipt]:
        """Record a COMPLETED payment and settle the invoice when it becomes fully covered.

        Concurrent registrations on one invoice are serialized through the
        invoice ``version`` column; a writer that loses the claim re-reads the
        balance and tries again, up to ``PAYMENT_MAX_ATTEMPTS`` times.
        """
        if not can_register_payment(actor_role):
            return fail(
                ErrorCode.PAYMENT_UNAUTHORIZED,
                f"Role {actor_role.value} may not register payments.",
                invoice_id,
            )
        try:
            amount = Decimal(str(amount))
        except InvalidOperation:
            return fail(ErrorCode.INVALID_PAYMENT_AMOUNT, f"Invalid payment amount {amount!r}.", invoice_id)
        if not amount.is_finite() or amount <= ZERO or has_more_than_cents(amount):
            return fail(
                ErrorCode.INVALID_PAYMENT_AMOUNT,
                "Payment amount must be positive with at most two decimals.",
                invoice_id,
                amount=str(amount),
            )

        max_attempts = get_config().PAYMENT_MAX_ATTEMPTS
        for attempt in range(1, max_attempts + 1):
            invoice = self.invoices.get(invoice_id)
            if invoice is None:
                return fail(ErrorCode.INVOICE_NOT_FOUND, f"Invoice {invoice_id} not found.", invoice_id)
            self.db.refresh(invoice)
            if invoice.status not in PAYABLE_STATUSES:
                return fail(
                    ErrorCode.INVOICE_NOT_ISSUED,
                    f"Invoice {invoice_id} is {invoice.status.value}; payments require an issued invoice.",
                    invoice_id,
                    status=invoice.status.value,
                )

            seen_version = invoice.version
            remaining = invoice.amount_total - self.payments.total_paid(invoice_id)
            if amount > remaining:
                return fail(
                    ErrorCode.INVALID_PAYMENT_AMOUNT,
                    f"Payment of {amount} exceeds the remaining balance of {remaining}.",
                    invoice_id,
                    amount=str(amount),
                    remaining=str(remaining),
                )

            if not self.invoices.claim_version(invoice_id, seen_version):
                self.rollback()
                logger.warning(
                    "payment.register.version_conflict",
                    extra={
                        "event": "payment.register.version_conflict",
                        "invoice_id": invoice_id,
                        "attempt": attempt,
                        "attempts_total": max_attempts,
                    },
                )
                continue

            payment = self.payments.create(invoice_id, method, to_money(amount))
            self.db.refresh(invoice)
            invoice_paid = self.invoice_service.settle_if_covered(invoice)
            self.commit()
            logger.info(
                "payment.registered",
                extra={
                    "event": "payment.registered",
                    "invoice_id": invoice_id,
                    "payment_id": payment.id,
                    "method": method.value,
                    "amount": str(payment.amount),
                    "invoice_paid": invoice_paid,
                },
            )
            return Ok(PaymentReceipt(payment=PaymentView.model_validate(payment), invoice_paid=invoice_paid))

        logger.error(
            "payment.register.conflict_exhausted",
            extra={"event": "payment.register.conflict_exhausted", "invoice_id": invoice_id},
        )
        return fail(
            ErrorCode.CONCURRENT_UPDATE,
            f"Invoice {invoice_id} kept changing while the payment was being recorded.",
            invoice_id,
            attempts=max_attempts,
        )

    def list_payments(self, invoice_id: str) -> Result[list[Payment]]:
        if self.invoices.get(invoice_id) is None:
            return fail(ErrorCode.INVOICE_NOT_FOUND, f"Invoice {invoice_id} not found.", invoice_id)
        return Ok(self.payments.list_by_invoice(invoice_id))

    def remaining_balance(self, invoice_id: str) -> Result[RemainingBalance]:
        invoice = self.invoices.get(invoice_id)
        if invoice is None:
            return fail(ErrorCode.INVOICE_NOT_FOUND, f"Invoice {invoice_id} not found.", invoice_id)
        paid = self.payments.total_paid(invoice_id)
        return Ok(
            RemainingBalance(
                invoice_id=invoice_id,
                amount_total=invoice.amount_total,
                total_paid=paid,
                remaining=to_money(invoice.amount_total - paid),
            )
        )
