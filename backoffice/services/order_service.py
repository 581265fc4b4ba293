"""Order creation, reservation and lifecycle orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from backoffice.core.exceptions import UpstreamServiceError
from backoffice.core.result import ErrorCode, Ok, Result, fail
from backoffice.events.order_events import (
    EventPublisher,
    LoggingEventPublisher,
    OrderCreatedEvent,
    OrderReservationConfirmedEvent,
    publish_safely,
)
from backoffice.integrations.inventory_client import HttpInventoryClient, InventoryClient
from backoffice.integrations.pricing_client import HttpPricingClient, PricingClient
from backoffice.models.enums import OrderStatus
from backoffice.models.order import Order
from backoffice.orchestration.transitions import ORDER_LIFECYCLE
from backoffice.repositories.option_repository import OptionRepository
from backoffice.repositories.order_repository import OrderRepository
from backoffice.repositories.quote_repository import QuoteRepository
from backoffice.schemas.orders import OrderBilling
from backoffice.schemas.pricing import PricingSnapshot
from backoffice.services.base_service import BaseService
from backoffice.utils.ids import new_entity_id
from backoffice.utils.money import ZERO, to_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderSource:
    """Everything an order is built from; ``quote_id`` is set on the quote path only."""

    asset_id: str
    configuration_id: str
    customer_ref: str
    snapshot: PricingSnapshot
    lead_time_days: int
    company_id: str | None = None
    quote_id: str | None = None


class OrderService(BaseService):
    """Service that turns a priced configuration into a reserved order."""

    def __init__(
        self,
        db: Session | None = None,
        pricing: PricingClient | None = None,
        inventory: InventoryClient | None = None,
        publisher: EventPublisher | None = None,
    ) -> None:
        super().__init__(db)
        self.pricing = pricing or HttpPricingClient()
        self.inventory = inventory or HttpInventoryClient()
        self.publisher = publisher or LoggingEventPublisher()

    @property
    def orders(self) -> OrderRepository:
        return OrderRepository(self.db)

    def create_order(
        self,
        asset_id: str,
        configuration_id: str,
        customer_ref: str,
        company_id: str | None = None,
    ) -> Result[Order]:
        """Direct path: the configuration is re-fetched and must be validated for this asset."""
        try:
            configuration = self.pricing.get_configuration(configuration_id)
        except UpstreamServiceError as exc:
            return fail(
                ErrorCode.UPSTREAM_UNAVAILABLE,
                "Pricing service is unavailable.",
                configuration_id,
                service=exc.service,
                reason=exc.details,
            )
        if not configuration.validated or configuration.asset_id != asset_id:
            return fail(
                ErrorCode.CONFIGURATION_NOT_VALIDATED,
                f"Configuration {configuration_id} is not validated for asset {asset_id}.",
                configuration_id,
                asset_id=asset_id,
            )
        return self.place_order(
            OrderSource(
                asset_id=asset_id,
                configuration_id=configuration_id,
                customer_ref=customer_ref,
                snapshot=configuration.pricing_snapshot,
                lead_time_days=configuration.lead_time_days,
                company_id=company_id,
            )
        )

    def place_order(self, source: OrderSource) -> Result[Order]:
        """Check availability, reserve, persist RESERVED and, for quotes, flip the quote to CONVERTED.

        On the quote path the order insert and the quote status write share
        one transaction; losing the status compare-and-set rolls both back.
        """
        try:
            availability = self.inventory.check_availability(source.asset_id)
        except UpstreamServiceError as exc:
            return fail(
                ErrorCode.UPSTREAM_UNAVAILABLE,
                "Inventory service is unavailable.",
                source.asset_id,
                service=exc.service,
                reason=exc.details,
            )
        if not availability.available:
            return fail(
                ErrorCode.ASSET_NOT_AVAILABLE,
                f"Asset {source.asset_id} is not available.",
                source.asset_id,
                inventory_status=availability.status,
            )

        order_id = new_entity_id()
        try:
            reservation = self.inventory.reserve_asset(source.asset_id, order_id)
        except UpstreamServiceError as exc:
            logger.warning(
                "order.reservation_failed",
                extra={
                    "event": "order.reservation_failed",
                    "order_id": order_id,
                    "asset_id": source.asset_id,
                    "reason": exc.details,
                },
            )
            return fail(
                ErrorCode.RESERVATION_FAILED,
                f"Asset {source.asset_id} could not be reserved.",
                source.asset_id,
                reason=exc.details,
            )

        order = Order(
            id=order_id,
            company_id=source.company_id,
            asset_id=source.asset_id,
            configuration_id=source.configuration_id,
            customer_ref=source.customer_ref,
            pricing_snapshot=source.snapshot.to_storage(),
            lead_time_days=source.lead_time_days,
            status=OrderStatus.RESERVED,
            reservation_id=reservation.id,
        )
        self.orders.add(order)

        if source.quote_id is not None:
            quotes = QuoteRepository(self.db)
            converted = quotes.mark_converted(source.quote_id, order_id) and self.commit_unique()
            if not converted:
                self.rollback()
                return self._lost_conversion(source.quote_id, order_id, reservation.id)
        else:
            self.commit()

        logger.info(
            "order.created",
            extra={
                "event": "order.created",
                "order_id": order_id,
                "quote_id": source.quote_id,
                "asset_id": source.asset_id,
                "reservation_id": reservation.id,
            },
        )
        publish_safely(
            self.publisher,
            OrderCreatedEvent(
                order_id=order_id,
                asset_id=source.asset_id,
                customer_ref=source.customer_ref,
                company_id=source.company_id,
                total_price=source.snapshot.total,
            ),
        )
        publish_safely(
            self.publisher,
            OrderReservationConfirmedEvent(
                order_id=order_id,
                asset_id=source.asset_id,
                reservation_id=reservation.id,
            ),
        )
        return Ok(order)

    def _lost_conversion(self, quote_id: str, order_id: str, reservation_id: str):
        quote = QuoteRepository(self.db).get(quote_id)
        existing_order_id = quote.converted_order_id if quote is not None else None
        # The reservation made for the discarded order is left to the inventory side to expire.
        logger.warning(
            "quote.conversion_lost",
            extra={
                "event": "quote.conversion_lost",
                "quote_id": quote_id,
                "discarded_order_id": order_id,
                "orphan_reservation_id": reservation_id,
                "existing_order_id": existing_order_id,
            },
        )
        return fail(
            ErrorCode.QUOTE_ALREADY_CONVERTED,
            f"Quote {quote_id} has already been converted.",
            quote_id,
            existing_order_id=existing_order_id,
        )

    def get_order(self, order_id: str) -> Result[Order]:
        order = self.orders.get(order_id)
        if order is None:
            return fail(ErrorCode.ORDER_NOT_FOUND, f"Order {order_id} not found.", order_id)
        return Ok(order)

    def list_orders_by_customer(self, customer_ref: str) -> list[Order]:
        return self.orders.list_by_customer(customer_ref)

    def get_order_price(self, order_id: str) -> Result[PricingSnapshot]:
        found = self.get_order(order_id)
        if not found.ok:
            return found
        return Ok(PricingSnapshot.from_storage(found.value.pricing_snapshot))

    def order_total(self, order_id: str) -> Result[Decimal]:
        """Frozen snapshot total plus the frozen prices of attached options."""
        found = self.get_order(order_id)
        if not found.ok:
            return found
        snapshot = PricingSnapshot.from_storage(found.value.pricing_snapshot)
        options_total = sum(
            (item.frozen_price for item in OptionRepository(self.db).list_order_options(order_id)),
            ZERO,
        )
        return Ok(to_money(snapshot.total + options_total))

    def billing_view(self, order_id: str) -> Result[OrderBilling]:
        found = self.get_order(order_id)
        if not found.ok:
            return found
        order = found.value
        total = self.order_total(order_id)
        if not total.ok:
            return total
        return Ok(
            OrderBilling(
                id=order.id,
                company_id=order.company_id,
                status=order.status,
                total_amount=total.value,
            )
        )

    def update_status(self, order_id: str, status: OrderStatus) -> Result[Order]:
        found = self.get_order(order_id)
        if not found.ok:
            return found
        order = found.value
        current = order.status
        if not ORDER_LIFECYCLE.can_transition(current, status):
            return fail(
                ErrorCode.INVALID_ORDER_TRANSITION,
                f"Order {order_id} cannot move from {current.value} to {status.value}.",
                order_id,
                current=current.value,
                target=status.value,
                allowed=sorted(target.value for target in ORDER_LIFECYCLE.allowed_targets(current)),
            )
        if not self.orders.transition_status(order_id, current, status):
            self.rollback()
            return fail(
                ErrorCode.CONCURRENT_UPDATE,
                f"Order {order_id} was modified concurrently.",
                order_id,
            )
        self.commit()
        self.db.refresh(order)
        logger.info(
            "order.status.updated",
            extra={
                "event": "order.status.updated",
                "order_id": order_id,
                "from_status": current.value,
                "to_status": status.value,
            },
        )
        return Ok(order)
