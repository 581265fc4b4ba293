"""Shared SQLAlchemy base and common mixins for back office models."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Naive UTC timestamp; columns store UTC without offset on every backend."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Declarative base class for the back office schema."""


class CreatedAtMixin:
    """Creation timestamp shared by append-only rows."""

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class AuditMixin(CreatedAtMixin):
    """Standard audit fields for mutable rows."""

    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class CompanyScopedMixin:
    """Mixin enforcing company ownership of business rows."""

    company_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
