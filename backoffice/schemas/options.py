"""Option catalog and order option schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from backoffice.models.enums import OptionCategory
from backoffice.models.option import OrderOption


class AddOptionsRequest(BaseModel):
    option_ids: list[str] = Field(min_length=1, max_length=50)


class OptionView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: OptionCategory
    description: str
    price: Decimal
    active: bool


class OrderOptionView(BaseModel):
    id: str
    option_id: str
    option_name: str
    price: Decimal
    added_at: datetime

    @classmethod
    def from_order_option(cls, order_option: OrderOption) -> "OrderOptionView":
        return cls(
            id=order_option.id,
            option_id=order_option.option_id,
            option_name=order_option.option.name if order_option.option is not None else "Unknown",
            price=order_option.frozen_price,
            added_at=order_option.created_at,
        )


class OrderOptionsSummary(BaseModel):
    order_id: str
    options: list[OrderOptionView]
    total_options_price: Decimal
    count: int


class OptionPriceUpdateRequest(BaseModel):
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
