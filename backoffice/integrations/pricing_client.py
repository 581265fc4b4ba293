"""Pricing engine client: resolves validated configurations and their price snapshot."""

from __future__ import annotations

from typing import Protocol
from urllib.parse import quote

from pydantic import ValidationError

from backoffice.core.config import get_config
from backoffice.core.exceptions import UpstreamServiceError
from backoffice.integrations.http import request_json
from backoffice.schemas.pricing import ConfigurationSnapshot

SERVICE_NAME = "pricing"


class PricingClient(Protocol):
    def get_configuration(self, configuration_id: str) -> ConfigurationSnapshot: ...


class HttpPricingClient:
    def __init__(self, base_url: str | None = None) -> None:
        self.base_url = (base_url or get_config().PRICING_SERVICE_URL).rstrip("/")

    def get_configuration(self, configuration_id: str) -> ConfigurationSnapshot:
        body = request_json(
            SERVICE_NAME,
            "GET",
            f"{self.base_url}/cto/configurations/{quote(configuration_id, safe='')}",
        )
        try:
            return ConfigurationSnapshot.model_validate(body)
        except ValidationError as exc:
            raise UpstreamServiceError(SERVICE_NAME, f"Malformed configuration payload: {exc}") from exc
