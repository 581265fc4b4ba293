"""Order request/response schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from backoffice.models.enums import OrderStatus
from backoffice.schemas.pricing import PricingSnapshot


class OrderCreateRequest(BaseModel):
    asset_id: str = Field(min_length=1, max_length=64)
    configuration_id: str = Field(min_length=1, max_length=64)
    customer_ref: str = Field(min_length=1, max_length=128)


class OrderStatusUpdateRequest(BaseModel):
    status: OrderStatus


class OrderView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    company_id: str | None = None
    asset_id: str
    configuration_id: str
    customer_ref: str
    pricing_snapshot: PricingSnapshot
    lead_time_days: int
    status: OrderStatus
    reservation_id: str | None = None
    created_at: datetime


class OrderBilling(BaseModel):
    """Order data handed to invoicing; ``total_amount`` is final and copied as-is."""

    model_config = ConfigDict(frozen=True)

    id: str
    company_id: str | None = None
    status: OrderStatus
    total_amount: Decimal
