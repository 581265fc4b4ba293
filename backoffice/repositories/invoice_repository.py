"""Invoice persistence with optimistic version claims."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select, update

from backoffice.models.base import utcnow
from backoffice.models.enums import InvoiceStatus
from backoffice.models.invoice import Invoice
from backoffice.repositories.base_repository import BaseRepository


class InvoiceRepository(BaseRepository):
    def get(self, invoice_id: str) -> Invoice | None:
        return self.session.get(Invoice, invoice_id)

    def get_by_order(self, order_id: str) -> Invoice | None:
        return self.session.scalar(select(Invoice).where(Invoice.order_id == order_id))

    def list_by_company(self, company_id: str) -> list[Invoice]:
        stmt = select(Invoice).where(Invoice.company_id == company_id).order_by(Invoice.created_at.desc())
        return list(self.session.scalars(stmt))

    def next_sequence(self) -> int:
        return int(self.session.scalar(select(func.count()).select_from(Invoice)) or 0) + 1

    def mark_issued(self, invoice_id: str, issued_at: datetime, due_at: datetime, document_ref: str) -> bool:
        stmt = (
            update(Invoice)
            .where(Invoice.id == invoice_id, Invoice.status == InvoiceStatus.DRAFT)
            .values(
                status=InvoiceStatus.ISSUED,
                issued_at=issued_at,
                due_at=due_at,
                document_ref=document_ref,
                updated_at=utcnow(),
            )
        )
        return self.session.execute(stmt).rowcount == 1

    def mark_paid(self, invoice_id: str) -> bool:
        stmt = (
            update(Invoice)
            .where(Invoice.id == invoice_id, Invoice.status == InvoiceStatus.ISSUED)
            .values(status=InvoiceStatus.PAID, updated_at=utcnow())
        )
        return self.session.execute(stmt).rowcount == 1

    def claim_version(self, invoice_id: str, seen_version: int) -> bool:
        """Bump ``version`` only if nobody else wrote since ``seen_version`` was read."""
        stmt = (
            update(Invoice)
            .where(Invoice.id == invoice_id, Invoice.version == seen_version)
            .values(version=seen_version + 1)
        )
        return self.session.execute(stmt).rowcount == 1
