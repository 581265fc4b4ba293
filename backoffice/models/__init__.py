"""SQLAlchemy model package for the back office schema."""

from backoffice.models.base import Base
from backoffice.models.enums import (
    ActorRole,
    InvoiceStatus,
    OptionCategory,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    QuoteStatus,
)
from backoffice.models.invoice import Invoice
from backoffice.models.option import Option, OrderOption
from backoffice.models.order import Order
from backoffice.models.payment import Payment
from backoffice.models.quote import Quote
from backoffice.models.quote_attachment import QuoteAttachment
from backoffice.models.quote_comment import QuoteComment

__all__ = [
    "ActorRole",
    "Base",
    "Invoice",
    "InvoiceStatus",
    "Option",
    "OptionCategory",
    "Order",
    "OrderOption",
    "OrderStatus",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "Quote",
    "QuoteAttachment",
    "QuoteComment",
    "QuoteStatus",
]
