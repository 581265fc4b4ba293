"""Quote comment model module (assisted-sale timeline)."""

from __future__ import annotations

from sqlalchemy import Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.models.base import Base, CreatedAtMixin
from backoffice.models.enums import ActorRole
from backoffice.utils.ids import new_entity_id


class QuoteComment(Base, CreatedAtMixin):
    __tablename__ = "quote_comments"
    __table_args__ = (Index("idx_quote_comments_quote_created", "quote_id", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_entity_id)
    quote_id: Mapped[str] = mapped_column(ForeignKey("quotes.id", ondelete="RESTRICT"), nullable=False)
    author: Mapped[ActorRole] = mapped_column(Enum(ActorRole), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    quote = relationship("Quote", back_populates="comments")
