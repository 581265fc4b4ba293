"""Quote request/response schemas."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from backoffice.models.base import utcnow
from backoffice.models.enums import ActorRole, QuoteStatus
from backoffice.models.quote import Quote
from backoffice.models.quote_attachment import QuoteAttachment
from backoffice.models.quote_comment import QuoteComment
from backoffice.schemas.pricing import PricingSnapshot


class QuoteCreateRequest(BaseModel):
    asset_id: str = Field(min_length=1, max_length=64)
    configuration_id: str = Field(min_length=1, max_length=64)
    customer_ref: str = Field(min_length=1, max_length=128)


class QuoteExtendRequest(BaseModel):
    new_expires_at: datetime


class QuoteCommentRequest(BaseModel):
    message: str = Field(min_length=1, max_length=5000)


class QuoteAttachmentRequest(BaseModel):
    filename: str = Field(min_length=1, max_length=255)
    url: str = Field(min_length=1, max_length=1024)


class QuoteFilters(BaseModel):
    status: QuoteStatus | None = None
    expires_after: datetime | None = None
    expires_before: datetime | None = None


class QuoteView(BaseModel):
    id: str
    company_id: str
    customer_ref: str
    asset_id: str
    configuration_id: str
    pricing_snapshot: PricingSnapshot
    lead_time_days: int
    status: QuoteStatus
    is_expired: bool
    created_at: datetime
    expires_at: datetime
    days_remaining: int
    converted_order_id: str | None = None

    @classmethod
    def from_quote(cls, quote: Quote, now: datetime | None = None) -> "QuoteView":
        """Display view; an ACTIVE quote past its expiry reads as EXPIRED without being persisted."""
        now = now or utcnow()
        expired = now > quote.expires_at
        status = QuoteStatus.EXPIRED if expired and quote.status == QuoteStatus.ACTIVE else quote.status
        remaining_seconds = (quote.expires_at - now).total_seconds()
        return cls(
            id=quote.id,
            company_id=quote.company_id,
            customer_ref=quote.customer_ref,
            asset_id=quote.asset_id,
            configuration_id=quote.configuration_id,
            pricing_snapshot=PricingSnapshot.from_storage(quote.pricing_snapshot),
            lead_time_days=quote.lead_time_days,
            status=status,
            is_expired=expired,
            created_at=quote.created_at,
            expires_at=quote.expires_at,
            days_remaining=max(0, math.ceil(remaining_seconds / 86400)),
            converted_order_id=quote.converted_order_id,
        )


class QuoteCommentView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    quote_id: str
    author: ActorRole
    message: str
    created_at: datetime


class QuoteAttachmentView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    quote_id: str
    uploaded_by: ActorRole
    filename: str
    url: str
    created_at: datetime


class QuoteTimelineItem(BaseModel):
    """One timeline entry; comment entries carry a message, attachment entries a file reference."""

    type: Literal["comment", "attachment"]
    id: str
    author: ActorRole
    created_at: datetime
    message: str | None = None
    filename: str | None = None
    url: str | None = None

    @classmethod
    def from_comment(cls, comment: QuoteComment) -> "QuoteTimelineItem":
        return cls(
            type="comment",
            id=comment.id,
            author=comment.author,
            created_at=comment.created_at,
            message=comment.message,
        )

    @classmethod
    def from_attachment(cls, attachment: QuoteAttachment) -> "QuoteTimelineItem":
        return cls(
            type="attachment",
            id=attachment.id,
            author=attachment.uploaded_by,
            created_at=attachment.created_at,
            filename=attachment.filename,
            url=attachment.url,
        )


class QuoteTimeline(BaseModel):
    quote_id: str
    items: list[QuoteTimelineItem]


class QuoteExtension(BaseModel):
    quote_id: str
    previous_expires_at: datetime
    new_expires_at: datetime
