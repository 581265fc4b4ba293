"""Payment request/response schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from backoffice.models.enums import PaymentMethod, PaymentStatus


class PaymentCreateRequest(BaseModel):
    method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    amount: Decimal


class PaymentView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    invoice_id: str
    method: PaymentMethod
    status: PaymentStatus
    amount: Decimal
    created_at: datetime


class PaymentReceipt(BaseModel):
    payment: PaymentView
    invoice_paid: bool


class RemainingBalance(BaseModel):
    invoice_id: str
    amount_total: Decimal
    total_paid: Decimal
    remaining: Decimal
