"""Shared caller-context and result helpers for API v1 route modules."""

from __future__ import annotations

from typing import TypeVar

from fastapi import HTTPException, status

from backoffice.auth.company_context import CompanyContext, company_matches, from_headers
from backoffice.auth.rbac import is_internal_role
from backoffice.core.exceptions import AuthenticationError
from backoffice.core.result import ErrorCode, Ok, Result, fail
from backoffice.models.invoice import Invoice
from backoffice.models.order import Order
from backoffice.services.order_service import OrderService

T = TypeVar("T")


def resolve_context(company_id: str | None, role: str | None) -> CompanyContext:
    try:
        return from_headers(company_id, role)
    except AuthenticationError as exc:
        code, detail = map_auth_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc


def require(allowed: bool, detail: str) -> None:
    if not allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def visible_order(service: OrderService, order_id: str, context: CompanyContext) -> Result[Order]:
    """Customers only see orders of their own company; internal staff see all."""
    found = service.get_order(order_id)
    if not found.ok or is_internal_role(context.role):
        return found
    if not company_matches(found.value.company_id, context.company_id):
        return fail(ErrorCode.ACCESS_DENIED, f"Order {order_id} belongs to another company.", order_id)
    return Ok(found.value)


def ensure_invoice_visible(invoice: Invoice, context: CompanyContext) -> None:
    if is_internal_role(context.role) or company_matches(invoice.company_id, context.company_id):
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"Invoice {invoice.id} belongs to another company.",
    )


def unwrap(result: Result[T]) -> T:
    """Return the ``Ok`` value or raise the HTTP error matching the failure kind."""
    if result.ok:
        return result.value
    error = result.error
    raise HTTPException(status_code=error.http_status, detail=error.to_dict())


def map_auth_error(exc: Exception) -> tuple[int, str]:
    if isinstance(exc, AuthenticationError):
        return 401, str(exc)
    return 401, "Unauthorized."
