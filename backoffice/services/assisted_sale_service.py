"""Assisted-sale timeline: append-only comments and attachments exchanged on a quote."""

from __future__ import annotations

import logging

from backoffice.auth.company_context import company_matches
from backoffice.auth.rbac import can_add_attachment, can_comment_quote, is_internal_role
from backoffice.core.result import ErrorCode, Ok, Result, fail
from backoffice.models.enums import ActorRole, QuoteStatus
from backoffice.models.quote import Quote
from backoffice.models.quote_attachment import QuoteAttachment
from backoffice.models.quote_comment import QuoteComment
from backoffice.repositories.quote_repository import QuoteRepository
from backoffice.schemas.quotes import QuoteTimeline, QuoteTimelineItem
from backoffice.services.base_service import BaseService

logger = logging.getLogger(__name__)


class AssistedSaleService(BaseService):
    """Service for the sales conversation attached to a quote."""

    @property
    def quotes(self) -> QuoteRepository:
        return QuoteRepository(self.db)

    def _find_quote(self, quote_id: str, role: ActorRole, company_id: str | None) -> Result[Quote]:
        quote = self.quotes.get(quote_id)
        if quote is None:
            return fail(ErrorCode.QUOTE_NOT_FOUND, f"Quote {quote_id} not found.", quote_id)
        # Internal staff work across customer companies.
        if company_id is not None and not is_internal_role(role) and not company_matches(quote.company_id, company_id):
            return fail(ErrorCode.ACCESS_DENIED, f"Quote {quote_id} belongs to another company.", quote_id)
        return Ok(quote)

    def _find_open_quote(self, quote_id: str, role: ActorRole, company_id: str | None) -> Result[Quote]:
        found = self._find_quote(quote_id, role, company_id)
        if not found.ok:
            return found
        quote = found.value
        if quote.status == QuoteStatus.CONVERTED:
            return fail(
                ErrorCode.QUOTE_ALREADY_CONVERTED,
                f"Quote {quote_id} is converted and can no longer be modified.",
                quote_id,
                existing_order_id=quote.converted_order_id,
            )
        return found

    def append_comment(self, quote: Quote, author_role: ActorRole, message: str) -> QuoteComment:
        """Stage a comment in the caller's transaction without committing."""
        return self.quotes.add_comment(quote.id, author_role, message)

    def add_comment(
        self,
        quote_id: str,
        author_role: ActorRole,
        message: str,
        company_id: str | None = None,
    ) -> Result[QuoteComment]:
        if not can_comment_quote(author_role):
            return fail(
                ErrorCode.ROLE_NOT_ALLOWED,
                f"Role {author_role.value} may not comment on quotes.",
                quote_id,
            )
        found = self._find_open_quote(quote_id, author_role, company_id)
        if not found.ok:
            return found
        comment = self.append_comment(found.value, author_role, message.strip())
        self.commit()
        logger.info(
            "quote.comment.added",
            extra={"event": "quote.comment.added", "quote_id": quote_id, "author_role": author_role.value},
        )
        return Ok(comment)

    def add_attachment(
        self,
        quote_id: str,
        uploaded_by: ActorRole,
        filename: str,
        url: str,
        company_id: str | None = None,
    ) -> Result[QuoteAttachment]:
        """Record a file reference on the quote; only internal staff may attach."""
        if not can_add_attachment(uploaded_by):
            return fail(
                ErrorCode.ROLE_NOT_ALLOWED,
                f"Role {uploaded_by.value} may not add attachments to quotes.",
                quote_id,
            )
        found = self._find_open_quote(quote_id, uploaded_by, company_id)
        if not found.ok:
            return found
        attachment = self.quotes.add_attachment(quote_id, uploaded_by, filename.strip(), url.strip())
        self.commit()
        logger.info(
            "quote.attachment.added",
            extra={
                "event": "quote.attachment.added",
                "quote_id": quote_id,
                "attachment_id": attachment.id,
                "uploaded_by": uploaded_by.value,
            },
        )
        return Ok(attachment)

    def get_timeline(
        self,
        quote_id: str,
        role: ActorRole = ActorRole.SALES_INTERNAL,
        company_id: str | None = None,
    ) -> Result[QuoteTimeline]:
        found = self._find_quote(quote_id, role, company_id)
        if not found.ok:
            return found
        items = [QuoteTimelineItem.from_comment(comment) for comment in self.quotes.list_comments(quote_id)]
        items.extend(
            QuoteTimelineItem.from_attachment(attachment) for attachment in self.quotes.list_attachments(quote_id)
        )
        # Stable sort keeps comments ahead of attachments stamped at the same instant.
        items.sort(key=lambda item: item.created_at)
        return Ok(QuoteTimeline(quote_id=quote_id, items=items))
