"""Order endpoints for API v1."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from backoffice.api.v1._authz import require, resolve_context, unwrap, visible_order
from backoffice.auth.company_context import company_matches
from backoffice.auth.rbac import can_manage_orders, is_internal_role
from backoffice.database.db import get_db
from backoffice.schemas.orders import OrderCreateRequest, OrderStatusUpdateRequest, OrderView
from backoffice.schemas.pricing import PricingSnapshot
from backoffice.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def _order_service(db: Session) -> OrderService:
    return OrderService(db=db)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreateRequest,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> OrderView:
    context = resolve_context(x_company_id, x_actor_role)
    order = unwrap(
        _order_service(db).create_order(
            asset_id=payload.asset_id,
            configuration_id=payload.configuration_id,
            customer_ref=payload.customer_ref,
            company_id=context.company_id,
        )
    )
    return OrderView.model_validate(order)


@router.get("")
def list_orders(
    customer_ref: str,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> list[OrderView]:
    context = resolve_context(x_company_id, x_actor_role)
    orders = _order_service(db).list_orders_by_customer(customer_ref)
    if not is_internal_role(context.role):
        orders = [order for order in orders if company_matches(order.company_id, context.company_id)]
    return [OrderView.model_validate(order) for order in orders]


@router.get("/{order_id}")
def get_order(
    order_id: str,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> OrderView:
    context = resolve_context(x_company_id, x_actor_role)
    return OrderView.model_validate(unwrap(visible_order(_order_service(db), order_id, context)))


@router.get("/{order_id}/price")
def get_order_price(
    order_id: str,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> dict:
    context = resolve_context(x_company_id, x_actor_role)
    service = _order_service(db)
    unwrap(visible_order(service, order_id, context))
    snapshot: PricingSnapshot = unwrap(service.get_order_price(order_id))
    total: Decimal = unwrap(service.order_total(order_id))
    return {"order_id": order_id, "pricing_snapshot": snapshot, "order_total": total}


@router.patch("/{order_id}/status")
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdateRequest,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> OrderView:
    context = resolve_context(x_company_id, x_actor_role)
    require(can_manage_orders(context.role), f"Role {context.role.value} may not change order status.")
    return OrderView.model_validate(unwrap(_order_service(db).update_status(order_id, payload.status)))
