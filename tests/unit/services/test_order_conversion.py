from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from sqlalchemy import func, select

from backoffice.core.exceptions import UpstreamServiceError
from backoffice.core.result import ErrorCode
from backoffice.models.enums import OrderStatus, QuoteStatus
from backoffice.models.order import Order
from backoffice.schemas.pricing import PricingSnapshot
from backoffice.services.order_service import OrderSource


def _order_count(session) -> int:
    return session.scalar(select(func.count()).select_from(Order))


def _active_quote(pipeline, total="1215.40"):
    pipeline.pricing.register("C1", asset_id="A1", total=total)
    return pipeline.quotes.create_quote("COMP-1", "CUST-1", "A1", "C1").value


def test_conversion_fails_when_asset_unavailable(pipeline):
    quote = _active_quote(pipeline)
    pipeline.inventory.available = False

    result = pipeline.quotes.convert_to_order(quote.id, "COMP-1")

    assert result.error.code == ErrorCode.ASSET_NOT_AVAILABLE
    assert result.error.http_status == 422
    pipeline.session.refresh(quote)
    assert quote.status == QuoteStatus.ACTIVE
    assert _order_count(pipeline.session) == 0
    assert pipeline.inventory.reservations == []


def test_conversion_creates_reserved_order_and_converts_quote(pipeline):
    quote = _active_quote(pipeline)
    pricing_calls_before = len(pipeline.pricing.calls)

    result = pipeline.quotes.convert_to_order(quote.id, "COMP-1")

    assert result.ok
    order = result.value
    assert order.status == OrderStatus.RESERVED
    assert order.reservation_id == "R1"
    assert order.company_id == "COMP-1"
    assert PricingSnapshot.from_storage(order.pricing_snapshot).total == Decimal("1215.40")
    assert order.pricing_snapshot == quote.pricing_snapshot
    pipeline.session.refresh(quote)
    assert quote.status == QuoteStatus.CONVERTED
    assert quote.converted_order_id == order.id
    # The quote snapshot is reused; pricing is not asked again.
    assert len(pipeline.pricing.calls) == pricing_calls_before
    assert pipeline.inventory.reservations == [("A1", order.id)]


def test_second_conversion_reports_existing_order(pipeline):
    quote = _active_quote(pipeline)
    first = pipeline.quotes.convert_to_order(quote.id, "COMP-1").value

    second = pipeline.quotes.convert_to_order(quote.id, "COMP-1")

    assert second.error.code == ErrorCode.QUOTE_ALREADY_CONVERTED
    assert second.error.http_status == 409
    assert second.error.details["existing_order_id"] == first.id
    assert _order_count(pipeline.session) == 1


def test_losing_conversion_race_rolls_back_the_new_order(pipeline):
    quote = _active_quote(pipeline)
    winner = pipeline.quotes.convert_to_order(quote.id, "COMP-1").value
    snapshot = PricingSnapshot.from_storage(quote.pricing_snapshot)

    # A request that read the quote while it was still ACTIVE reaches the write step late.
    result = pipeline.orders.place_order(
        OrderSource(
            asset_id="A1",
            configuration_id="C1",
            customer_ref="CUST-1",
            snapshot=snapshot,
            lead_time_days=5,
            company_id="COMP-1",
            quote_id=quote.id,
        )
    )

    assert result.error.code == ErrorCode.QUOTE_ALREADY_CONVERTED
    assert result.error.details["existing_order_id"] == winner.id
    assert _order_count(pipeline.session) == 1
    pipeline.session.refresh(quote)
    assert quote.converted_order_id == winner.id


def test_conversion_of_expired_quote_persists_expired(pipeline):
    quote = _active_quote(pipeline)
    quote.expires_at = quote.created_at - timedelta(minutes=1)
    pipeline.session.commit()

    result = pipeline.quotes.convert_to_order(quote.id, "COMP-1")

    assert result.error.code == ErrorCode.QUOTE_EXPIRED
    pipeline.session.refresh(quote)
    assert quote.status == QuoteStatus.EXPIRED
    assert _order_count(pipeline.session) == 0


def test_conversion_by_other_company_is_denied(pipeline):
    quote = _active_quote(pipeline)

    result = pipeline.quotes.convert_to_order(quote.id, "COMP-2")

    assert result.error.code == ErrorCode.ACCESS_DENIED
    pipeline.session.refresh(quote)
    assert quote.status == QuoteStatus.ACTIVE


def test_failed_reservation_leaves_no_order(pipeline):
    quote = _active_quote(pipeline)
    pipeline.inventory.reserve_error = UpstreamServiceError("inventory", "asset locked by RMA", status_code=409)

    result = pipeline.quotes.convert_to_order(quote.id, "COMP-1")

    assert result.error.code == ErrorCode.RESERVATION_FAILED
    assert result.error.details["reason"] == "asset locked by RMA"
    assert result.error.http_status == 502
    assert _order_count(pipeline.session) == 0
    pipeline.session.refresh(quote)
    assert quote.status == QuoteStatus.ACTIVE


def test_inventory_outage_is_upstream_failure(pipeline):
    quote = _active_quote(pipeline)
    pipeline.inventory.availability_error = UpstreamServiceError("inventory", "timeout")

    result = pipeline.quotes.convert_to_order(quote.id, "COMP-1")

    assert result.error.code == ErrorCode.UPSTREAM_UNAVAILABLE
    assert _order_count(pipeline.session) == 0


def test_conversion_publishes_order_events(pipeline):
    quote = _active_quote(pipeline)

    order = pipeline.quotes.convert_to_order(quote.id, "COMP-1").value

    assert [event.event_type for event in pipeline.publisher.events] == [
        "OrderCreated",
        "OrderReservationConfirmed",
    ]
    assert pipeline.publisher.events[0].total_price == Decimal("1215.40")
    assert pipeline.publisher.events[1].reservation_id == order.reservation_id


def test_publisher_failure_does_not_undo_the_order(pipeline):
    quote = _active_quote(pipeline)
    pipeline.publisher.fail = True

    result = pipeline.quotes.convert_to_order(quote.id, "COMP-1")

    assert result.ok
    assert _order_count(pipeline.session) == 1


def test_direct_order_refetches_and_validates_configuration(pipeline):
    pipeline.pricing.register("C9", asset_id="A9", total="899.00")

    result = pipeline.orders.create_order("A9", "C9", "CUST-9")

    assert result.ok
    assert result.value.company_id is None
    assert pipeline.pricing.calls == ["C9"]
    assert pipeline.orders.get_order_price(result.value.id).value.total == Decimal("899.00")


def test_direct_order_rejects_unvalidated_configuration(pipeline):
    pipeline.pricing.register("C9", asset_id="A9", validated=False)

    result = pipeline.orders.create_order("A9", "C9", "CUST-9")

    assert result.error.code == ErrorCode.CONFIGURATION_NOT_VALIDATED
    assert pipeline.inventory.reservations == []


def test_order_status_follows_lifecycle(pipeline):
    pipeline.pricing.register("C9", asset_id="A9")
    order = pipeline.orders.create_order("A9", "C9", "CUST-9").value

    skipped = pipeline.orders.update_status(order.id, OrderStatus.SHIPPED)
    confirmed = pipeline.orders.update_status(order.id, OrderStatus.CONFIRMED)
    shipped = pipeline.orders.update_status(order.id, OrderStatus.SHIPPED)
    delivered = pipeline.orders.update_status(order.id, OrderStatus.DELIVERED)
    back = pipeline.orders.update_status(order.id, OrderStatus.CONFIRMED)

    assert skipped.error.code == ErrorCode.INVALID_ORDER_TRANSITION
    assert skipped.error.details["allowed"] == ["CONFIRMED", "FAILED"]
    assert confirmed.ok and shipped.ok and delivered.ok
    assert delivered.value.status == OrderStatus.DELIVERED
    assert back.error.code == ErrorCode.INVALID_ORDER_TRANSITION


def test_list_orders_by_customer(pipeline):
    pipeline.pricing.register("C9", asset_id="A9")
    first = pipeline.orders.create_order("A9", "C9", "CUST-9").value
    pipeline.orders.create_order("A9", "C9", "CUST-OTHER")

    orders = pipeline.orders.list_orders_by_customer("CUST-9")

    assert [order.id for order in orders] == [first.id]
