"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from backoffice.api.v1 import health, invoices, options, orders, payments, quotes
from backoffice.core.config import get_config

api_router = APIRouter(prefix=get_config().API_PREFIX)
api_router.include_router(health.router)
api_router.include_router(quotes.router)
api_router.include_router(orders.router)
api_router.include_router(options.router)
api_router.include_router(invoices.router)
api_router.include_router(payments.router)


def get_api_router() -> APIRouter:
    return api_router
