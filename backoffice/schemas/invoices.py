"""Invoice request/response schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from backoffice.models.enums import InvoiceStatus


class InvoiceCreateRequest(BaseModel):
    order_id: str


class InvoiceView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    order_id: str
    company_id: str | None = None
    invoice_number: str
    amount_total: Decimal
    status: InvoiceStatus
    issued_at: datetime | None = None
    due_at: datetime | None = None
    document_ref: str | None = None
    created_at: datetime
