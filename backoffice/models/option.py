"""Option catalog and order option model module."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, Enum, ForeignKey, Index, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.models.base import AuditMixin, Base, CreatedAtMixin
from backoffice.models.enums import OptionCategory
from backoffice.utils.ids import new_entity_id


class Option(Base, AuditMixin):
    __tablename__ = "options"
    __table_args__ = (Index("idx_options_active_name", "active", "name"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[OptionCategory] = mapped_column(Enum(OptionCategory), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class OrderOption(Base, CreatedAtMixin):
    __tablename__ = "order_options"
    __table_args__ = (UniqueConstraint("order_id", "option_id", name="uq_order_options_order_option"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_entity_id)
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.id", ondelete="RESTRICT"), nullable=False, index=True)
    option_id: Mapped[str] = mapped_column(ForeignKey("options.id", ondelete="RESTRICT"), nullable=False)
    # Catalog price copied at attach time; later catalog changes never touch it.
    frozen_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    order = relationship("Order", back_populates="options")
    option = relationship("Option")
