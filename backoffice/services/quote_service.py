"""Quote lifecycle: creation from a priced configuration, reads, expiry and conversion."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from backoffice.auth.company_context import CompanyContext, company_matches
from backoffice.auth.rbac import can_extend_quote
from backoffice.core.config import get_config
from backoffice.core.exceptions import UpstreamServiceError
from backoffice.core.result import ErrorCode, Ok, Result, fail
from backoffice.integrations.pricing_client import HttpPricingClient, PricingClient
from backoffice.models.base import utcnow
from backoffice.models.enums import QuoteStatus
from backoffice.models.order import Order
from backoffice.models.quote import Quote
from backoffice.repositories.quote_repository import QuoteRepository
from backoffice.schemas.pricing import PricingSnapshot
from backoffice.schemas.quotes import QuoteExtension, QuoteFilters, QuoteView
from backoffice.services.assisted_sale_service import AssistedSaleService
from backoffice.services.base_service import BaseService
from backoffice.services.order_service import OrderService, OrderSource

logger = logging.getLogger(__name__)


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class QuoteService(BaseService):
    """Service for company-scoped quotes with a frozen pricing snapshot."""

    def __init__(
        self,
        db: Session | None = None,
        pricing: PricingClient | None = None,
        order_service: OrderService | None = None,
        assisted_sale: AssistedSaleService | None = None,
    ) -> None:
        super().__init__(db)
        self.pricing = pricing or HttpPricingClient()
        self.order_service = order_service or OrderService(db=self.db, pricing=self.pricing)
        self.assisted_sale = assisted_sale or AssistedSaleService(db=self.db)

    @property
    def quotes(self) -> QuoteRepository:
        return QuoteRepository(self.db)

    def _owned_quote(self, quote_id: str, company_id: str) -> Result[Quote]:
        quote = self.quotes.get(quote_id)
        if quote is None:
            return fail(ErrorCode.QUOTE_NOT_FOUND, f"Quote {quote_id} not found.", quote_id)
        if not company_matches(quote.company_id, company_id):
            logger.warning(
                "quote.access_denied",
                extra={"event": "quote.access_denied", "quote_id": quote_id, "company_id": company_id},
            )
            return fail(ErrorCode.ACCESS_DENIED, f"Quote {quote_id} belongs to another company.", quote_id)
        return Ok(quote)

    def create_quote(
        self,
        company_id: str,
        customer_ref: str,
        asset_id: str,
        configuration_id: str,
    ) -> Result[Quote]:
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

        now = utcnow()
        quote = Quote(
            company_id=company_id,
            customer_ref=customer_ref,
            asset_id=asset_id,
            configuration_id=configuration_id,
            pricing_snapshot=configuration.pricing_snapshot.to_storage(),
            lead_time_days=configuration.lead_time_days,
            status=QuoteStatus.ACTIVE,
            created_at=now,
            expires_at=now + timedelta(days=get_config().QUOTE_VALIDITY_DAYS),
        )
        self.quotes.add(quote)
        self.commit()
        logger.info(
            "quote.created",
            extra={
                "event": "quote.created",
                "quote_id": quote.id,
                "company_id": company_id,
                "configuration_id": configuration_id,
                "total": str(configuration.pricing_snapshot.total),
            },
        )
        return Ok(quote)

    def get_quote(self, quote_id: str, requesting_company_id: str) -> Result[QuoteView]:
        found = self._owned_quote(quote_id, requesting_company_id)
        if not found.ok:
            return found
        return Ok(QuoteView.from_quote(found.value))

    def list_quotes(self, company_id: str, filters: QuoteFilters | None = None) -> list[QuoteView]:
        now = utcnow()
        quotes = self.quotes.list_by_company(company_id, filters, now=now)
        return [QuoteView.from_quote(quote, now=now) for quote in quotes]

    def convert_to_order(self, quote_id: str, company_id: str) -> Result[Order]:
        found = self._owned_quote(quote_id, company_id)
        if not found.ok:
            return found
        quote = found.value

        if quote.status == QuoteStatus.CONVERTED:
            return fail(
                ErrorCode.QUOTE_ALREADY_CONVERTED,
                f"Quote {quote_id} has already been converted.",
                quote_id,
                existing_order_id=quote.converted_order_id,
            )
        if quote.status == QuoteStatus.EXPIRED or utcnow() > quote.expires_at:
            if quote.status == QuoteStatus.ACTIVE and self.quotes.mark_expired(quote_id):
                self.commit()
                logger.info("quote.expired", extra={"event": "quote.expired", "quote_id": quote_id})
            return fail(
                ErrorCode.QUOTE_EXPIRED,
                f"Quote {quote_id} expired on {quote.expires_at.isoformat()}.",
                quote_id,
                expires_at=quote.expires_at.isoformat(),
            )

        # The quote snapshot is reused as-is; pricing is not consulted again.
        return self.order_service.place_order(
            OrderSource(
                asset_id=quote.asset_id,
                configuration_id=quote.configuration_id,
                customer_ref=quote.customer_ref,
                snapshot=PricingSnapshot.from_storage(quote.pricing_snapshot),
                lead_time_days=quote.lead_time_days,
                company_id=quote.company_id,
                quote_id=quote.id,
            )
        )

    def extend_expiry(self, quote_id: str, new_expiry: datetime, context: CompanyContext) -> Result[QuoteExtension]:
        """Push the expiry of an ACTIVE quote forward and record it on the timeline."""
        if not can_extend_quote(context.role):
            return fail(
                ErrorCode.ROLE_NOT_ALLOWED,
                f"Role {context.role.value} may not extend quotes.",
                quote_id,
            )
        quote = self.quotes.get(quote_id)
        if quote is None:
            return fail(ErrorCode.QUOTE_NOT_FOUND, f"Quote {quote_id} not found.", quote_id)
        if quote.status != QuoteStatus.ACTIVE:
            return fail(
                ErrorCode.INVALID_EXTENSION,
                f"Cannot extend quote with status {quote.status.value}.",
                quote_id,
                status=quote.status.value,
            )
        new_expiry = _as_naive_utc(new_expiry)
        previous = quote.expires_at
        if new_expiry <= previous:
            return fail(
                ErrorCode.INVALID_EXTENSION,
                "New expiration date must be after the current expiration date.",
                quote_id,
                current_expires_at=previous.isoformat(),
            )

        if not self.quotes.update_expiry(quote_id, previous, new_expiry):
            self.rollback()
            return fail(ErrorCode.CONCURRENT_UPDATE, f"Quote {quote_id} was modified concurrently.", quote_id)
        self.assisted_sale.append_comment(
            quote,
            context.role,
            f"Quote extended from {previous.date().isoformat()} to {new_expiry.date().isoformat()}",
        )
        self.commit()
        logger.info(
            "quote.extended",
            extra={
                "event": "quote.extended",
                "quote_id": quote_id,
                "previous_expires_at": previous.isoformat(),
                "new_expires_at": new_expiry.isoformat(),
            },
        )
        return Ok(QuoteExtension(quote_id=quote_id, previous_expires_at=previous, new_expires_at=new_expiry))
