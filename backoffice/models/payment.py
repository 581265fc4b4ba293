"""Payment model module."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Enum, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.models.base import Base, CreatedAtMixin
from backoffice.models.enums import PaymentMethod, PaymentStatus
from backoffice.utils.ids import new_entity_id


class Payment(Base, CreatedAtMixin):
    __tablename__ = "payments"
    __table_args__ = (Index("idx_payments_invoice_status", "invoice_id", "status"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_entity_id)
    invoice_id: Mapped[str] = mapped_column(ForeignKey("invoices.id", ondelete="RESTRICT"), nullable=False)
    method: Mapped[PaymentMethod] = mapped_column(Enum(PaymentMethod), nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(Enum(PaymentStatus), default=PaymentStatus.COMPLETED, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    invoice = relationship("Invoice", back_populates="payments")
