"""Lifecycle tables for quotes, orders and invoices."""

from __future__ import annotations

from backoffice.models.enums import InvoiceStatus, OrderStatus, QuoteStatus
from backoffice.orchestration.state_machine import StateMachine

QUOTE_LIFECYCLE = StateMachine(
    {
        QuoteStatus.ACTIVE: {QuoteStatus.EXPIRED, QuoteStatus.CONVERTED},
        QuoteStatus.EXPIRED: set(),
        QuoteStatus.CONVERTED: set(),
    }
)

ORDER_LIFECYCLE = StateMachine(
    {
        OrderStatus.PENDING: {OrderStatus.RESERVED, OrderStatus.FAILED},
        OrderStatus.RESERVED: {OrderStatus.CONFIRMED, OrderStatus.FAILED},
        OrderStatus.CONFIRMED: {OrderStatus.SHIPPED},
        OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
        OrderStatus.DELIVERED: set(),
        OrderStatus.FAILED: set(),
    }
)

INVOICE_LIFECYCLE = StateMachine(
    {
        InvoiceStatus.DRAFT: {InvoiceStatus.ISSUED},
        InvoiceStatus.ISSUED: {InvoiceStatus.PAID},
        InvoiceStatus.PAID: set(),
    }
)
