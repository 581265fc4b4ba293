"""Pydantic schema package for API contracts and value types."""

from backoffice.schemas.invoices import InvoiceCreateRequest, InvoiceView
from backoffice.schemas.options import (
    AddOptionsRequest,
    OptionPriceUpdateRequest,
    OptionView,
    OrderOptionsSummary,
    OrderOptionView,
)
from backoffice.schemas.orders import OrderBilling, OrderCreateRequest, OrderStatusUpdateRequest, OrderView
from backoffice.schemas.payments import PaymentCreateRequest, PaymentReceipt, PaymentView, RemainingBalance
from backoffice.schemas.pricing import ComponentPrice, ConfigurationSnapshot, PricingSnapshot
from backoffice.schemas.quotes import (
    QuoteAttachmentRequest,
    QuoteAttachmentView,
    QuoteCommentRequest,
    QuoteCommentView,
    QuoteCreateRequest,
    QuoteExtendRequest,
    QuoteExtension,
    QuoteFilters,
    QuoteTimeline,
    QuoteTimelineItem,
    QuoteView,
)

__all__ = [
    "AddOptionsRequest",
    "ComponentPrice",
    "ConfigurationSnapshot",
    "InvoiceCreateRequest",
    "InvoiceView",
    "OptionPriceUpdateRequest",
    "OptionView",
    "OrderBilling",
    "OrderCreateRequest",
    "OrderOptionView",
    "OrderOptionsSummary",
    "OrderStatusUpdateRequest",
    "OrderView",
    "PaymentCreateRequest",
    "PaymentReceipt",
    "PaymentView",
    "PricingSnapshot",
    "QuoteAttachmentRequest",
    "QuoteAttachmentView",
    "QuoteCommentRequest",
    "QuoteCommentView",
    "QuoteCreateRequest",
    "QuoteExtendRequest",
    "QuoteExtension",
    "QuoteFilters",
    "QuoteTimeline",
    "QuoteTimelineItem",
    "QuoteView",
    "RemainingBalance",
]
