"""Invoice lifecycle: DRAFT creation from a confirmed order, issuing and settlement."""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from backoffice.core.config import get_config
from backoffice.core.result import ErrorCode, Ok, Result, fail
from backoffice.models.base import utcnow
from backoffice.models.enums import InvoiceStatus, OrderStatus
from backoffice.models.invoice import Invoice
from backoffice.orchestration.transitions import INVOICE_LIFECYCLE
from backoffice.repositories.invoice_repository import InvoiceRepository
from backoffice.repositories.payment_repository import PaymentRepository
from backoffice.schemas.orders import OrderBilling
from backoffice.services.base_service import BaseService
from backoffice.services.invoice_renderer import InvoiceDocument, InvoiceRenderer, PdfInvoiceRenderer
from backoffice.utils.ids import format_invoice_number
from backoffice.utils.money import to_money

logger = logging.getLogger(__name__)


class InvoiceService(BaseService):
    """Service for invoice creation, issuing and paid-status settlement."""

    def __init__(self, db: Session | None = None, renderer: InvoiceRenderer | None = None) -> None:
        super().__init__(db)
        self.renderer = renderer or PdfInvoiceRenderer()

    @property
    def invoices(self) -> InvoiceRepository:
        return InvoiceRepository(self.db)

    def get_invoice(self, invoice_id: str) -> Result[Invoice]:
        invoice = self.invoices.get(invoice_id)
        if invoice is None:
            return fail(ErrorCode.INVOICE_NOT_FOUND, f"Invoice {invoice_id} not found.", invoice_id)
        return Ok(invoice)

    def list_invoices_by_company(self, company_id: str) -> list[Invoice]:
        return self.invoices.list_by_company(company_id)

    def create_from_order(self, order: OrderBilling) -> Result[Invoice]:
        """Open a DRAFT invoice; ``order.total_amount`` is copied without recomputation."""
        if order.status != OrderStatus.CONFIRMED:
            return fail(
                ErrorCode.ORDER_NOT_ELIGIBLE,
                f"Order {order.id} must be CONFIRMED to be invoiced.",
                order.id,
                status=order.status.value,
            )
        existing = self.invoices.get_by_order(order.id)
        if existing is not None:
            return fail(
                ErrorCode.INVOICE_ALREADY_EXISTS,
                f"Order {order.id} already has invoice {existing.invoice_number}.",
                order.id,
                invoice_id=existing.id,
            )

        now = utcnow()
        invoice = Invoice(
            order_id=order.id,
            company_id=order.company_id,
            invoice_number=format_invoice_number(now.year, now.month, self.invoices.next_sequence()),
            amount_total=to_money(order.total_amount),
            status=InvoiceStatus.DRAFT,
            created_at=now,
        )
        self.db.add(invoice)
        if not self.commit_unique():
            raced = self.invoices.get_by_order(order.id)
            if raced is not None:
                return fail(
                    ErrorCode.INVOICE_ALREADY_EXISTS,
                    f"Order {order.id} already has invoice {raced.invoice_number}.",
                    order.id,
                    invoice_id=raced.id,
                )
            return fail(
                ErrorCode.CONCURRENT_UPDATE,
                "Invoice number was taken by a concurrent request.",
                order.id,
            )
        logger.info(
            "invoice.created",
            extra={
                "event": "invoice.created",
                "invoice_id": invoice.id,
                "invoice_number": invoice.invoice_number,
                "order_id": order.id,
                "amount_total": str(invoice.amount_total),
            },
        )
        return Ok(invoice)

    def issue(self, invoice_id: str) -> Result[Invoice]:
        """Render the document, then move DRAFT to ISSUED; a failed render leaves the invoice in DRAFT."""
        found = self.get_invoice(invoice_id)
        if not found.ok:
            return found
        invoice = found.value
        if not INVOICE_LIFECYCLE.can_transition(invoice.status, InvoiceStatus.ISSUED):
            return fail(
                ErrorCode.INVALID_INVOICE_STATUS,
                f"Invoice {invoice_id} is {invoice.status.value}; only DRAFT invoices can be issued.",
                invoice_id,
                status=invoice.status.value,
            )

        issued_at = utcnow()
        due_at = issued_at + timedelta(days=get_config().INVOICE_PAYMENT_TERM_DAYS)
        document = InvoiceDocument(
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            order_id=invoice.order_id,
            company_id=invoice.company_id,
            amount_total=invoice.amount_total,
            issued_at=issued_at,
            due_at=due_at,
        )
        try:
            document_ref = self.renderer.render(document)
        except Exception as exc:
            logger.exception(
                "invoice.issue.render_failed",
                extra={"event": "invoice.issue.render_failed", "invoice_id": invoice_id},
            )
            return fail(
                ErrorCode.DOCUMENT_RENDER_FAILED,
                f"Invoice {invoice_id} document could not be rendered.",
                invoice_id,
                reason=str(exc),
            )

        if not self.invoices.mark_issued(invoice_id, issued_at, due_at, document_ref):
            self.rollback()
            return fail(
                ErrorCode.INVALID_INVOICE_STATUS,
                f"Invoice {invoice_id} was issued concurrently.",
                invoice_id,
            )
        self.commit()
        self.db.refresh(invoice)
        logger.info(
            "invoice.issued",
            extra={
                "event": "invoice.issued",
                "invoice_id": invoice_id,
                "due_at": due_at.isoformat(),
                "document_ref": document_ref,
            },
        )
        return Ok(invoice)

    def settle_if_covered(self, invoice: Invoice) -> bool:
        """Stage ISSUED -> PAID when completed payments cover the total; the caller commits."""
        if invoice.status != InvoiceStatus.ISSUED:
            return False
        paid = PaymentRepository(self.db).total_paid(invoice.id)
        if paid < invoice.amount_total:
            return False
        return self.invoices.mark_paid(invoice.id)

    def check_and_mark_paid(self, invoice_id: str) -> Result[bool]:
        """Idempotent settlement; ``Ok(True)`` only when this call moved the invoice to PAID."""
        found = self.get_invoice(invoice_id)
        if not found.ok:
            return found
        invoice = found.value
        if invoice.status == InvoiceStatus.DRAFT:
            return fail(ErrorCode.INVOICE_NOT_ISSUED, f"Invoice {invoice_id} has not been issued.", invoice_id)
        settled = self.settle_if_covered(invoice)
        if settled:
            self.commit()
            self.db.refresh(invoice)
            logger.info("invoice.paid", extra={"event": "invoice.paid", "invoice_id": invoice_id})
        return Ok(settled)
