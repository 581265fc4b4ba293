"""Order model module."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Enum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.models.base import AuditMixin, Base
from backoffice.models.enums import OrderStatus


class Order(Base, AuditMixin):
    __tablename__ = "orders"
    __table_args__ = (
        Index("idx_orders_customer_ref", "customer_ref"),
        Index("idx_orders_status", "status"),
    )

    # Assigned by the caller before the asset is reserved against it.
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    company_id: Mapped[str | None] = mapped_column(String(64), index=True)
    asset_id: Mapped[str] = mapped_column(String(64), nullable=False)
    configuration_id: Mapped[str] = mapped_column(String(64), nullable=False)
    customer_ref: Mapped[str] = mapped_column(String(128), nullable=False)
    pricing_snapshot: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    lead_time_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[OrderStatus] = mapped_column(Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False)
    reservation_id: Mapped[str | None] = mapped_column(String(64))

    options = relationship("OrderOption", back_populates="order", order_by="OrderOption.created_at")
