from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from backoffice.core.exceptions import UpstreamServiceError
from backoffice.integrations.inventory_client import Availability, Reservation
from backoffice.models import Base
from backoffice.models.enums import OrderStatus
from backoffice.schemas.pricing import ComponentPrice, ConfigurationSnapshot, PricingSnapshot
from backoffice.services.invoice_service import InvoiceService
from backoffice.services.option_service import OptionService
from backoffice.services.order_service import OrderService
from backoffice.services.payment_service import PaymentService
from backoffice.services.quote_service import QuoteService


def _build_session():
    engine = create_engine("sqlite:///:memory:")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    return TestingSessionLocal()


def make_snapshot(total: str = "1215.40") -> PricingSnapshot:
    total_amount = Decimal(total)
    labor = Decimal("45.00")
    margin = Decimal("100.00")
    chassis = total_amount - labor - margin
    return PricingSnapshot(
        components=(
            ComponentPrice(
                type="CHASSIS",
                reference="LAT-5420",
                quantity=1,
                unit_price=chassis,
                line_total=chassis,
            ),
        ),
        labor_cost=labor,
        subtotal=total_amount - margin,
        margin=margin,
        total=total_amount,
        currency="EUR",
        frozen_at=datetime(2026, 1, 15, 9, 30),
    )


class StubPricing:
    def __init__(self) -> None:
        self.configurations: dict[str, ConfigurationSnapshot] = {}
        self.calls: list[str] = []
        self.error: UpstreamServiceError | None = None

    def register(
        self,
        configuration_id: str = "C1",
        asset_id: str = "A1",
        total: str = "1215.40",
        validated: bool = True,
        lead_time_days: int = 5,
    ) -> ConfigurationSnapshot:
        configuration = ConfigurationSnapshot(
            id=configuration_id,
            asset_id=asset_id,
            validated=validated,
            pricing_snapshot=make_snapshot(total),
            lead_time_days=lead_time_days,
        )
        self.configurations[configuration_id] = configuration
        return configuration

    def get_configuration(self, configuration_id: str) -> ConfigurationSnapshot:
        self.calls.append(configuration_id)
        if self.error is not None:
            raise self.error
        if configuration_id not in self.configurations:
            raise UpstreamServiceError("pricing", f"Configuration {configuration_id} not found", status_code=404)
        return self.configurations[configuration_id]


class StubInventory:
    def __init__(self) -> None:
        self.available = True
        self.reservation_ids = ["R1", "R2", "R3", "R4"]
        self.reserve_error: UpstreamServiceError | None = None
        self.availability_error: UpstreamServiceError | None = None
        self.reservations: list[tuple[str, str]] = []

    def check_availability(self, asset_id: str) -> Availability:
        if self.availability_error is not None:
            raise self.availability_error
        return Availability(
            asset_id=asset_id,
            available=self.available,
            status="IN_STOCK" if self.available else "SOLD",
        )

    def reserve_asset(self, asset_id: str, order_ref: str) -> Reservation:
        if self.reserve_error is not None:
            raise self.reserve_error
        self.reservations.append((asset_id, order_ref))
        return Reservation(id=self.reservation_ids[len(self.reservations) - 1], asset_id=asset_id, order_ref=order_ref)


class StubRenderer:
    def __init__(self) -> None:
        self.documents = []
        self.fail = False

    def render(self, document) -> str:
        if self.fail:
            raise RuntimeError("renderer offline")
        self.documents.append(document)
        return f"memory://{document.invoice_number}.pdf"


class RecordingPublisher:
    def __init__(self) -> None:
        self.events = []
        self.fail = False

    def publish(self, event) -> None:
        if self.fail:
            raise RuntimeError("broker unavailable")
        self.events.append(event)


@pytest.fixture
def session():
    db = _build_session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def pipeline(session):
    """Services wired to one in-memory session and stub collaborators."""
    pricing = StubPricing()
    inventory = StubInventory()
    renderer = StubRenderer()
    publisher = RecordingPublisher()
    orders = OrderService(db=session, pricing=pricing, inventory=inventory, publisher=publisher)
    invoices = InvoiceService(db=session, renderer=renderer)
    options = OptionService(db=session)
    options.seed_catalog()
    return SimpleNamespace(
        session=session,
        pricing=pricing,
        inventory=inventory,
        renderer=renderer,
        publisher=publisher,
        quotes=QuoteService(db=session, pricing=pricing, order_service=orders),
        orders=orders,
        options=options,
        invoices=invoices,
        payments=PaymentService(db=session, invoice_service=invoices),
    )


@pytest.fixture
def confirmed_order(pipeline):
    """Factory: a CONFIRMED order built through the direct path."""

    def _make(total: str = "1215.40", company_id: str = "COMP-1"):
        pipeline.pricing.register("C-CONF", asset_id="A-CONF", total=total)
        order = pipeline.orders.create_order("A-CONF", "C-CONF", "CUST-1", company_id=company_id).value
        assert pipeline.orders.update_status(order.id, OrderStatus.CONFIRMED).ok
        return order

    return _make


@pytest.fixture
def issued_invoice(pipeline, confirmed_order):
    """Factory: an ISSUED invoice for a freshly confirmed order."""

    def _make(total: str = "1215.40", company_id: str = "COMP-1"):
        order = confirmed_order(total=total, company_id=company_id)
        billing = pipeline.orders.billing_view(order.id).value
        invoice = pipeline.invoices.create_from_order(billing).value
        assert pipeline.invoices.issue(invoice.id).ok
        return invoice

    return _make
