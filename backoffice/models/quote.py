"""Quote model module."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Enum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.models.base import AuditMixin, Base, CompanyScopedMixin
from backoffice.models.enums import QuoteStatus
from backoffice.utils.ids import new_entity_id


class Quote(Base, AuditMixin, CompanyScopedMixin):
    __tablename__ = "quotes"
    __table_args__ = (
        Index("idx_quotes_company_status", "company_id", "status"),
        Index("idx_quotes_company_expires", "company_id", "expires_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_entity_id)
    customer_ref: Mapped[str] = mapped_column(String(128), nullable=False)
    asset_id: Mapped[str] = mapped_column(String(64), nullable=False)
    configuration_id: Mapped[str] = mapped_column(String(64), nullable=False)
    pricing_snapshot: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    lead_time_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[QuoteStatus] = mapped_column(Enum(QuoteStatus), default=QuoteStatus.ACTIVE, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    converted_order_id: Mapped[str | None] = mapped_column(String(36), unique=True)

    comments = relationship("QuoteComment", back_populates="quote", order_by="QuoteComment.created_at")
    attachments = relationship(
        "QuoteAttachment", back_populates="quote", order_by="QuoteAttachment.created_at"
    )
