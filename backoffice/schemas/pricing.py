"""Pricing snapshot value types consumed from the pricing engine."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_FROZEN = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ComponentPrice(BaseModel):
    model_config = _FROZEN

    type: str
    reference: str
    quantity: int = Field(ge=0)
    unit_price: Decimal
    line_total: Decimal


class PricingSnapshot(BaseModel):
    """Priced configuration captured once and copied verbatim afterwards."""

    model_config = _FROZEN

    components: tuple[ComponentPrice, ...] = ()
    labor_cost: Decimal = Decimal("0")
    subtotal: Decimal
    margin: Decimal = Decimal("0")
    total: Decimal
    currency: str = Field(default="EUR", min_length=3, max_length=3)
    frozen_at: datetime

    def to_storage(self) -> dict[str, Any]:
        """Canonical JSON form persisted on quotes and orders."""
        return self.model_dump(mode="json")

    @classmethod
    def from_storage(cls, payload: dict[str, Any]) -> "PricingSnapshot":
        return cls.model_validate(payload)


class ConfigurationSnapshot(BaseModel):
    """What the pricing engine reports for a technical configuration id."""

    model_config = _FROZEN

    id: str
    asset_id: str
    validated: bool
    pricing_snapshot: PricingSnapshot = Field(alias="priceSnapshot")
    lead_time_days: int = Field(default=0, ge=0)
