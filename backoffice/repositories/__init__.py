"""Transactional repositories over a SQLAlchemy session."""

from backoffice.repositories.invoice_repository import InvoiceRepository
from backoffice.repositories.option_repository import OptionRepository
from backoffice.repositories.order_repository import OrderRepository
from backoffice.repositories.payment_repository import PaymentRepository
from backoffice.repositories.quote_repository import QuoteRepository

__all__ = [
    "InvoiceRepository",
    "OptionRepository",
    "OrderRepository",
    "PaymentRepository",
    "QuoteRepository",
]
