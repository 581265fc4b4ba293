"""Quote endpoints for API v1."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from backoffice.api.v1._authz import require, resolve_context, unwrap
from backoffice.auth.rbac import can_convert_quote
from backoffice.database.db import get_db
from backoffice.models.enums import QuoteStatus
from backoffice.schemas.orders import OrderView
from backoffice.schemas.quotes import (
    QuoteAttachmentRequest,
    QuoteAttachmentView,
    QuoteCommentRequest,
    QuoteCommentView,
    QuoteCreateRequest,
    QuoteExtendRequest,
    QuoteExtension,
    QuoteFilters,
    QuoteTimeline,
    QuoteView,
)
from backoffice.services.assisted_sale_service import AssistedSaleService
from backoffice.services.quote_service import QuoteService

router = APIRouter(prefix="/quotes", tags=["quotes"])


def _quote_service(db: Session) -> QuoteService:
    return QuoteService(db=db)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_quote(
    payload: QuoteCreateRequest,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> QuoteView:
    context = resolve_context(x_company_id, x_actor_role)
    quote = unwrap(
        _quote_service(db).create_quote(
            company_id=context.company_id,
            customer_ref=payload.customer_ref,
            asset_id=payload.asset_id,
            configuration_id=payload.configuration_id,
        )
    )
    return QuoteView.from_quote(quote)


@router.get("")
def list_quotes(
    status_filter: QuoteStatus | None = Query(default=None, alias="status"),
    expires_after: datetime | None = Query(default=None),
    expires_before: datetime | None = Query(default=None),
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> list[QuoteView]:
    context = resolve_context(x_company_id, x_actor_role)
    filters = QuoteFilters(status=status_filter, expires_after=expires_after, expires_before=expires_before)
    return _quote_service(db).list_quotes(context.company_id, filters)


@router.get("/{quote_id}")
def get_quote(
    quote_id: str,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> QuoteView:
    context = resolve_context(x_company_id, x_actor_role)
    return unwrap(_quote_service(db).get_quote(quote_id, context.company_id))


@router.post("/{quote_id}/convert", status_code=status.HTTP_201_CREATED)
def convert_quote(
    quote_id: str,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> OrderView:
    context = resolve_context(x_company_id, x_actor_role)
    require(can_convert_quote(context.role), f"Role {context.role.value} may not convert quotes.")
    order = unwrap(_quote_service(db).convert_to_order(quote_id, context.company_id))
    return OrderView.model_validate(order)


@router.post("/{quote_id}/extend")
def extend_quote(
    quote_id: str,
    payload: QuoteExtendRequest,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> QuoteExtension:
    context = resolve_context(x_company_id, x_actor_role)
    return unwrap(_quote_service(db).extend_expiry(quote_id, payload.new_expires_at, context))


@router.post("/{quote_id}/comments", status_code=status.HTTP_201_CREATED)
def add_comment(
    quote_id: str,
    payload: QuoteCommentRequest,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> QuoteCommentView:
    context = resolve_context(x_company_id, x_actor_role)
    comment = unwrap(
        AssistedSaleService(db=db).add_comment(
            quote_id,
            context.role,
            payload.message,
            company_id=context.company_id,
        )
    )
    return QuoteCommentView.model_validate(comment)


@router.post("/{quote_id}/attachments", status_code=status.HTTP_201_CREATED)
def add_attachment(
    quote_id: str,
    payload: QuoteAttachmentRequest,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> QuoteAttachmentView:
    context = resolve_context(x_company_id, x_actor_role)
    attachment = unwrap(
        AssistedSaleService(db=db).add_attachment(
            quote_id,
            context.role,
            payload.filename,
            payload.url,
            company_id=context.company_id,
        )
    )
    return QuoteAttachmentView.model_validate(attachment)


@router.get("/{quote_id}/timeline")
def quote_timeline(
    quote_id: str,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> QuoteTimeline:
    context = resolve_context(x_company_id, x_actor_role)
    return unwrap(AssistedSaleService(db=db).get_timeline(quote_id, context.role, context.company_id))
