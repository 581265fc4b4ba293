"""Invoice model module."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.models.base import AuditMixin, Base
from backoffice.models.enums import InvoiceStatus
from backoffice.utils.ids import new_entity_id


class Invoice(Base, AuditMixin):
    __tablename__ = "invoices"
    __table_args__ = (Index("idx_invoices_company_status", "company_id", "status"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_entity_id)
    order_id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)
    company_id: Mapped[str | None] = mapped_column(String(64), index=True)
    invoice_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    amount_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[InvoiceStatus] = mapped_column(Enum(InvoiceStatus), default=InvoiceStatus.DRAFT, nullable=False)
    issued_at: Mapped[datetime | None] = mapped_column(DateTime)
    due_at: Mapped[datetime | None] = mapped_column(DateTime)
    document_ref: Mapped[str | None] = mapped_column(String(512))
    # Bumped by every payment write so concurrent registrations serialize.
    version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    payments = relationship("Payment", back_populates="invoice", order_by="Payment.created_at")
