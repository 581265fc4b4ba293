"""Quote persistence with compare-and-set status writes."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, or_, select, update

from backoffice.models.base import utcnow
from backoffice.models.enums import ActorRole, QuoteStatus
from backoffice.models.quote import Quote
from backoffice.models.quote_attachment import QuoteAttachment
from backoffice.models.quote_comment import QuoteComment
from backoffice.repositories.base_repository import BaseRepository
from backoffice.schemas.quotes import QuoteFilters


def _displayed_status_is(status: QuoteStatus, now: datetime):
    # An ACTIVE row past its expiry reads as EXPIRED until conversion persists it.
    lapsed = and_(Quote.status == QuoteStatus.ACTIVE, Quote.expires_at < now)
    if status == QuoteStatus.ACTIVE:
        return and_(Quote.status == QuoteStatus.ACTIVE, Quote.expires_at >= now)
    if status == QuoteStatus.EXPIRED:
        return or_(Quote.status == QuoteStatus.EXPIRED, lapsed)
    return Quote.status == status


class QuoteRepository(BaseRepository):
    def get(self, quote_id: str) -> Quote | None:
        return self.session.get(Quote, quote_id)

    def list_by_company(
        self,
        company_id: str,
        filters: QuoteFilters | None = None,
        now: datetime | None = None,
    ) -> list[Quote]:
        """Company quotes, newest first; the status filter matches the displayed status."""
        stmt = select(Quote).where(Quote.company_id == company_id)
        if filters is not None:
            if filters.status is not None:
                stmt = stmt.where(_displayed_status_is(filters.status, now or utcnow()))
            if filters.expires_after is not None:
                stmt = stmt.where(Quote.expires_at >= filters.expires_after)
            if filters.expires_before is not None:
                stmt = stmt.where(Quote.expires_at <= filters.expires_before)
        stmt = stmt.order_by(Quote.created_at.desc())
        return list(self.session.scalars(stmt))

    def mark_expired(self, quote_id: str) -> bool:
        stmt = (
            update(Quote)
            .where(Quote.id == quote_id, Quote.status == QuoteStatus.ACTIVE)
            .values(status=QuoteStatus.EXPIRED, updated_at=utcnow())
        )
        return self.session.execute(stmt).rowcount == 1

    def mark_converted(self, quote_id: str, order_id: str) -> bool:
        """Exactly-once ACTIVE -> CONVERTED; False when another writer got there first."""
        stmt = (
            update(Quote)
            .where(Quote.id == quote_id, Quote.status == QuoteStatus.ACTIVE)
            .values(status=QuoteStatus.CONVERTED, converted_order_id=order_id, updated_at=utcnow())
        )
        return self.session.execute(stmt).rowcount == 1

    def update_expiry(self, quote_id: str, current_expires_at: datetime, new_expires_at: datetime) -> bool:
        stmt = (
            update(Quote)
            .where(
                Quote.id == quote_id,
                Quote.status == QuoteStatus.ACTIVE,
                Quote.expires_at == current_expires_at,
            )
            .values(expires_at=new_expires_at, updated_at=utcnow())
        )
        return self.session.execute(stmt).rowcount == 1

    def add_comment(self, quote_id: str, author: ActorRole, message: str) -> QuoteComment:
        return self.add(QuoteComment(quote_id=quote_id, author=author, message=message))

    def list_comments(self, quote_id: str) -> list[QuoteComment]:
        stmt = (
            select(QuoteComment)
            .where(QuoteComment.quote_id == quote_id)
            .order_by(QuoteComment.created_at.asc(), QuoteComment.id.asc())
        )
        return list(self.session.scalars(stmt))

    def add_attachment(self, quote_id: str, uploaded_by: ActorRole, filename: str, url: str) -> QuoteAttachment:
        return self.add(QuoteAttachment(quote_id=quote_id, uploaded_by=uploaded_by, filename=filename, url=url))

    def list_attachments(self, quote_id: str) -> list[QuoteAttachment]:
        stmt = (
            select(QuoteAttachment)
            .where(QuoteAttachment.quote_id == quote_id)
            .order_by(QuoteAttachment.created_at.asc(), QuoteAttachment.id.asc())
        )
        return list(self.session.scalars(stmt))
