"""Option catalog and order option endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from backoffice.api.v1._authz import require, resolve_context, unwrap, visible_order
from backoffice.auth.rbac import can_add_order_options, can_manage_catalog
from backoffice.database.db import get_db
from backoffice.schemas.options import AddOptionsRequest, OptionPriceUpdateRequest, OptionView, OrderOptionsSummary
from backoffice.services.option_service import OptionService
from backoffice.services.order_service import OrderService

router = APIRouter(tags=["options"])


@router.get("/options")
def list_options(db: Session = Depends(get_db)) -> list[OptionView]:
    return [OptionView.model_validate(option) for option in OptionService(db=db).list_active_options()]


@router.get("/options/{option_id}")
def get_option(option_id: str, db: Session = Depends(get_db)) -> OptionView:
    return OptionView.model_validate(unwrap(OptionService(db=db).get_option(option_id)))


@router.put("/options/{option_id}/price")
def set_option_price(
    option_id: str,
    payload: OptionPriceUpdateRequest,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> OptionView:
    context = resolve_context(x_company_id, x_actor_role)
    require(can_manage_catalog(context.role), f"Role {context.role.value} may not manage the option catalog.")
    return OptionView.model_validate(unwrap(OptionService(db=db).set_option_price(option_id, payload.price)))


@router.post("/options/{option_id}/deactivate")
def deactivate_option(
    option_id: str,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> OptionView:
    context = resolve_context(x_company_id, x_actor_role)
    require(can_manage_catalog(context.role), f"Role {context.role.value} may not manage the option catalog.")
    return OptionView.model_validate(unwrap(OptionService(db=db).deactivate_option(option_id)))


@router.post("/orders/{order_id}/options", status_code=status.HTTP_201_CREATED)
def add_order_options(
    order_id: str,
    payload: AddOptionsRequest,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> OrderOptionsSummary:
    context = resolve_context(x_company_id, x_actor_role)
    require(can_add_order_options(context.role), f"Role {context.role.value} may not add options to orders.")
    unwrap(visible_order(OrderService(db=db), order_id, context))
    return unwrap(OptionService(db=db).add_options_to_order(order_id, payload.option_ids))


@router.get("/orders/{order_id}/options")
def get_order_options(
    order_id: str,
    x_company_id: str | None = Header(default=None, alias="X-Company-Id"),
    x_actor_role: str | None = Header(default=None, alias="X-Actor-Role"),
    db: Session = Depends(get_db),
) -> OrderOptionsSummary:
    context = resolve_context(x_company_id, x_actor_role)
    unwrap(visible_order(OrderService(db=db), order_id, context))
    return unwrap(OptionService(db=db).get_order_options(order_id))
