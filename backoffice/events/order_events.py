"""Order domain events and the publisher used to emit them.

Publishing is fire-and-forget: a failing publisher is logged and never
changes the outcome of the operation that produced the event.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Literal, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field

from backoffice.models.base import utcnow

logger = logging.getLogger(__name__)


class OrderCreatedEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_type: Literal["OrderCreated"] = "OrderCreated"
    order_id: str
    asset_id: str
    customer_ref: str
    company_id: str | None = None
    total_price: Decimal
    occurred_at: datetime = Field(default_factory=utcnow)


class OrderReservationConfirmedEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_type: Literal["OrderReservationConfirmed"] = "OrderReservationConfirmed"
    order_id: str
    asset_id: str
    reservation_id: str
    occurred_at: datetime = Field(default_factory=utcnow)


OrderEvent = Union[OrderCreatedEvent, OrderReservationConfirmedEvent]


class EventPublisher(Protocol):
    def publish(self, event: OrderEvent) -> None: ...


class LoggingEventPublisher:
    """Default publisher: writes each event to the structured log."""

    def publish(self, event: OrderEvent) -> None:
        logger.info(
            "domain_event.published",
            extra={"event": "domain_event.published", **event.model_dump(mode="json")},
        )


def publish_safely(publisher: EventPublisher, event: OrderEvent) -> None:
    try:
        publisher.publish(event)
    except Exception as exc:
        logger.error(
            "domain_event.publish_failed",
            extra={
                "event": "domain_event.publish_failed",
                "event_type": event.event_type,
                "order_id": event.order_id,
                "error": str(exc),
            },
        )
