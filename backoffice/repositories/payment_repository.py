"""Payment persistence (append-only)."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select

from backoffice.models.enums import PaymentMethod, PaymentStatus
from backoffice.models.payment import Payment
from backoffice.repositories.base_repository import BaseRepository
from backoffice.utils.money import to_money


class PaymentRepository(BaseRepository):
    def create(self, invoice_id: str, method: PaymentMethod, amount: Decimal) -> Payment:
        return self.add(
            Payment(invoice_id=invoice_id, method=method, amount=amount, status=PaymentStatus.COMPLETED)
        )

    def list_by_invoice(self, invoice_id: str) -> list[Payment]:
        stmt = select(Payment).where(Payment.invoice_id == invoice_id).order_by(Payment.created_at.asc())
        return list(self.session.scalars(stmt))

    def total_paid(self, invoice_id: str) -> Decimal:
        stmt = select(func.sum(Payment.amount)).where(
            Payment.invoice_id == invoice_id,
            Payment.status == PaymentStatus.COMPLETED,
        )
        return to_money(self.session.scalar(stmt))
