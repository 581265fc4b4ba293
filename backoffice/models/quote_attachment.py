"""Quote attachment model module (assisted-sale timeline)."""

from __future__ import annotations

from sqlalchemy import Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.models.base import Base, CreatedAtMixin
from backoffice.models.enums import ActorRole
from backoffice.utils.ids import new_entity_id


class QuoteAttachment(Base, CreatedAtMixin):
    """Append-only file reference; the file itself lives in external storage."""

    __tablename__ = "quote_attachments"
    __table_args__ = (Index("idx_quote_attachments_quote_created", "quote_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_entity_id)
    quote_id: Mapped[str] = mapped_column(ForeignKey("quotes.id", ondelete="RESTRICT"), nullable=False)
    uploaded_by: Mapped[ActorRole] = mapped_column(Enum(ActorRole), nullable=False)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(1024), nullable=False)

    quote = relationship("Quote", back_populates="attachments")
