"""Option catalog maintenance and price-frozen attachment of options to orders."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from decimal import Decimal

from backoffice.core.result import ErrorCode, Ok, Result, fail
from backoffice.models.enums import SHIPPED_ORDER_STATUSES, OptionCategory
from backoffice.models.option import Option, OrderOption
from backoffice.repositories.option_repository import OptionRepository
from backoffice.repositories.order_repository import OrderRepository
from backoffice.schemas.options import OrderOptionsSummary, OrderOptionView
from backoffice.services.base_service import BaseService
from backoffice.utils.money import ZERO, has_more_than_cents, to_money

logger = logging.getLogger(__name__)

DEFAULT_CATALOG: tuple[dict, ...] = (
    {
        "id": "OPT-WARRANTY-3Y",
        "name": "Extended warranty 3 years",
        "category": OptionCategory.WARRANTY,
        "description": "Parts and labour coverage extended to 3 years.",
        "price": Decimal("199.00"),
    },
    {
        "id": "OPT-WARRANTY-5Y",
        "name": "Extended warranty 5 years",
        "category": OptionCategory.WARRANTY,
        "description": "Parts and labour coverage extended to 5 years.",
        "price": Decimal("349.00"),
    },
    {
        "id": "OPT-BATTERY-NEW",
        "name": "New battery",
        "category": OptionCategory.SERVICE,
        "description": "Battery replaced with a new cell before shipping.",
        "price": Decimal("89.00"),
    },
    {
        "id": "OPT-SOFTWARE-PREINSTALL",
        "name": "Software pre-installation",
        "category": OptionCategory.SERVICE,
        "description": "Customer software image installed and checked.",
        "price": Decimal("49.00"),
    },
    {
        "id": "OPT-ASSET-LABELING",
        "name": "Asset labeling",
        "category": OptionCategory.SERVICE,
        "description": "Inventory label with the customer's asset tag.",
        "price": Decimal("15.00"),
    },
    {
        "id": "OPT-RFID-TAG",
        "name": "RFID tag",
        "category": OptionCategory.SERVICE,
        "description": "RFID tag fitted for fleet tracking.",
        "price": Decimal("25.00"),
    },
)


def _summarize(order_id: str, order_options: Sequence[OrderOption]) -> OrderOptionsSummary:
    views = [OrderOptionView.from_order_option(item) for item in order_options]
    return OrderOptionsSummary(
        order_id=order_id,
        options=views,
        total_options_price=to_money(sum((view.price for view in views), ZERO)),
        count=len(views),
    )


class OptionService(BaseService):
    """Service for the option catalog and order option attachment."""

    @property
    def options(self) -> OptionRepository:
        return OptionRepository(self.db)

    def list_active_options(self) -> list[Option]:
        return self.options.list_active()

    def get_option(self, option_id: str) -> Result[Option]:
        option = self.options.get(option_id)
        if option is None:
            return fail(ErrorCode.OPTION_NOT_FOUND, f"Option {option_id} not found.", option_id)
        return Ok(option)

    def get_order_options(self, order_id: str) -> Result[OrderOptionsSummary]:
        if OrderRepository(self.db).get(order_id) is None:
            return fail(ErrorCode.ORDER_NOT_FOUND, f"Order {order_id} not found.", order_id)
        return Ok(_summarize(order_id, self.options.list_order_options(order_id)))

    def add_options_to_order(self, order_id: str, option_ids: Sequence[str]) -> Result[OrderOptionsSummary]:
        """Attach catalog options to an order, copying each current price.

        The batch is validated in full before anything is written, so one
        rejected option leaves the order untouched. The summary covers every
        option now on the order, not only those added by this call.
        """
        order = OrderRepository(self.db).get(order_id)
        if order is None:
            return fail(ErrorCode.ORDER_NOT_FOUND, f"Order {order_id} not found.", order_id)
        if order.status in SHIPPED_ORDER_STATUSES:
            return fail(
                ErrorCode.ORDER_ALREADY_SHIPPED,
                f"Order {order_id} has already shipped; options can no longer be added.",
                order_id,
                status=order.status.value,
            )

        catalog = self.options.get_many(option_ids)
        already_attached = self.options.attached_option_ids(order_id)
        accepted: list[Option] = []
        seen: set[str] = set()
        for option_id in option_ids:
            option = catalog.get(option_id)
            if option is None:
                return fail(ErrorCode.OPTION_NOT_FOUND, f"Option {option_id} not found.", option_id)
            if not option.active:
                return fail(ErrorCode.OPTION_NOT_ACTIVE, f"Option {option_id} is not active.", option_id)
            if option_id in already_attached or option_id in seen:
                return fail(
                    ErrorCode.OPTION_ALREADY_ADDED,
                    f"Option {option_id} is already attached to order {order_id}.",
                    option_id,
                    order_id=order_id,
                )
            seen.add(option_id)
            accepted.append(option)

        for option in accepted:
            self.options.attach(order_id, option, to_money(option.price))
        if not self.commit_unique():
            # A concurrent request attached one of these options first.
            return fail(
                ErrorCode.OPTION_ALREADY_ADDED,
                f"An option in this batch was attached to order {order_id} concurrently.",
                order_id,
                option_ids=list(option_ids),
            )

        summary = _summarize(order_id, self.options.list_order_options(order_id))
        logger.info(
            "order.options.attached",
            extra={
                "event": "order.options.attached",
                "order_id": order_id,
                "option_ids": [option.id for option in accepted],
                "total_options_price": str(summary.total_options_price),
            },
        )
        return Ok(summary)

    def seed_catalog(self) -> int:
        """Insert the default catalog entries that are missing; returns how many were created."""
        created = 0
        for entry in DEFAULT_CATALOG:
            if self.options.get(entry["id"]) is not None:
                continue
            self.db.add(Option(active=True, **entry))
            created += 1
        self.commit()
        return created

    def set_option_price(self, option_id: str, price: Decimal) -> Result[Option]:
        """Change the catalog price; prices already frozen on orders are not affected."""
        option = self.options.get(option_id)
        if option is None:
            return fail(ErrorCode.OPTION_NOT_FOUND, f"Option {option_id} not found.", option_id)
        price = Decimal(str(price))
        if price < ZERO or has_more_than_cents(price):
            return fail(
                ErrorCode.INVALID_OPTION_PRICE,
                "Option price must be a non-negative amount with at most two decimals.",
                option_id,
                price=str(price),
            )
        previous = option.price
        option.price = to_money(price)
        self.commit()
        logger.info(
            "option.price.updated",
            extra={
                "event": "option.price.updated",
                "option_id": option_id,
                "previous_price": str(previous),
                "price": str(option.price),
            },
        )
        return Ok(option)

    def deactivate_option(self, option_id: str) -> Result[Option]:
        option = self.options.get(option_id)
        if option is None:
            return fail(ErrorCode.OPTION_NOT_FOUND, f"Option {option_id} not found.", option_id)
        option.active = False
        self.commit()
        logger.info("option.deactivated", extra={"event": "option.deactivated", "option_id": option_id})
        return Ok(option)
