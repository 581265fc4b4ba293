"""Canonical enum values for the back office schema."""

from __future__ import annotations

import enum


class ActorRole(str, enum.Enum):
    CLIENT_ADMIN = "ADMIN_CLIENT"
    BUYER = "ACHETEUR"
    READER = "LECTURE"
    SALES_INTERNAL = "SALES_INTERNAL"
    TECH_INTERNAL = "TECH_INTERNAL"
    ADMIN = "ADMIN"


class QuoteStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    CONVERTED = "CONVERTED"


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    RESERVED = "RESERVED"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"


class OptionCategory(str, enum.Enum):
    WARRANTY = "WARRANTY"
    SERVICE = "SERVICE"


class InvoiceStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    ISSUED = "ISSUED"
    PAID = "PAID"


class PaymentMethod(str, enum.Enum):
    BANK_TRANSFER = "BANK_TRANSFER"
    CARD = "CARD"
    CHECK = "CHECK"
    DIRECT_DEBIT = "DIRECT_DEBIT"


class PaymentStatus(str, enum.Enum):
    COMPLETED = "COMPLETED"


# Order statuses after which the physical unit has left the warehouse.
SHIPPED_ORDER_STATUSES = frozenset({OrderStatus.SHIPPED, OrderStatus.DELIVERED})
