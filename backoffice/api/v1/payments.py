"""Payment endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from backoffice.api.v1._authz import ensure_invoice_visible, resolve_context, unwrap
from backoffice.auth.company_context import CompanyContext
from backoffice.database.db import get_db
from backoffice.schemas.payments import PaymentCreateRequest, PaymentReceipt, PaymentView, RemainingBalance
from backoffice.services.payment_service import PaymentService

router = APIRouter(prefix="/invoices/{invoice_id}", tags=["payments"])


def _payment_service(db: Session) -> PaymentService:
    return PaymentService(db=db)


def _check_invoice(service: PaymentService, invoice_id: str, context: CompanyContext) -> None:
    ensure_invoice_visible(unwrap(service.invoice_service.get_invoice(invoice_id)), context)


@router.post("/payments", status_code=status.HTTP_201_CREATED)
def register_payment(
    invoice_id: str,
    payload: PaymentCreateRequest,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> PaymentReceipt:
    context = resolve_context(x_company_id, x_actor_role)
    # PaymentUnauthorized for customer roles comes back from the service.
    return unwrap(
        _payment_service(db).register_payment(
            invoice_id=invoice_id,
            method=payload.method,
            amount=payload.amount,
            actor_role=context.role,
        )
    )


@router.get("/payments")
def list_payments(
    invoice_id: str,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> list[PaymentView]:
    context = resolve_context(x_company_id, x_actor_role)
    service = _payment_service(db)
    _check_invoice(service, invoice_id, context)
    return [PaymentView.model_validate(item) for item in unwrap(service.list_payments(invoice_id))]


@router.get("/balance")
def remaining_balance(
    invoice_id: str,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> RemainingBalance:
    context = resolve_context(x_company_id, x_actor_role)
    service = _payment_service(db)
    _check_invoice(service, invoice_id, context)
    return unwrap(service.remaining_balance(invoice_id))
