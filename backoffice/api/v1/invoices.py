"""Invoice endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from backoffice.api.v1._authz import ensure_invoice_visible, require, resolve_context, unwrap
from backoffice.auth.rbac import can_manage_orders
from backoffice.database.db import get_db
from backoffice.schemas.invoices import InvoiceCreateRequest, InvoiceView
from backoffice.services.invoice_service import InvoiceService
from backoffice.services.order_service import OrderService

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _invoice_service(db: Session) -> InvoiceService:
    return InvoiceService(db=db)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_invoice(
    payload: InvoiceCreateRequest,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> InvoiceView:
    context = resolve_context(x_company_id, x_actor_role)
    require(can_manage_orders(context.role), f"Role {context.role.value} may not create invoices.")
    billing = unwrap(OrderService(db=db).billing_view(payload.order_id))
    return InvoiceView.model_validate(unwrap(_invoice_service(db).create_from_order(billing)))


@router.get("")
def list_invoices(
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> list[InvoiceView]:
    context = resolve_context(x_company_id, x_actor_role)
    return [InvoiceView.model_validate(item) for item in _invoice_service(db).list_invoices_by_company(context.company_id)]


@router.get("/{invoice_id}")
def get_invoice(
    invoice_id: str,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> InvoiceView:
    context = resolve_context(x_company_id, x_actor_role)
    invoice = unwrap(_invoice_service(db).get_invoice(invoice_id))
    ensure_invoice_visible(invoice, context)
    return InvoiceView.model_validate(invoice)


@router.post("/{invoice_id}/issue")
def issue_invoice(
    invoice_id: str,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> InvoiceView:
    context = resolve_context(x_company_id, x_actor_role)
    require(can_manage_orders(context.role), f"Role {context.role.value} may not issue invoices.")
    return InvoiceView.model_validate(unwrap(_invoice_service(db).issue(invoice_id)))


@router.post("/{invoice_id}/settle")
def settle_invoice(
    invoice_id: str,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> dict:
    context = resolve_context(x_company_id, x_actor_role)
    require(can_manage_orders(context.role), f"Role {context.role.value} may not settle invoices.")
    service = _invoice_service(db)
    transitioned = unwrap(service.check_and_mark_paid(invoice_id))
    invoice = unwrap(service.get_invoice(invoice_id))
    return {"invoice_id": invoice_id, "status": invoice.status.value, "transitioned": transitioned}
