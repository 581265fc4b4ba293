"""Inventory service client: availability checks and asset reservation."""

from __future__ import annotations

from typing import Protocol
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from backoffice.core.config import get_config
from backoffice.core.exceptions import UpstreamServiceError
from backoffice.integrations.http import request_json

SERVICE_NAME = "inventory"

_UPSTREAM = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Availability(BaseModel):
    model_config = _UPSTREAM

    asset_id: str
    available: bool
    status: str = "UNKNOWN"
    reserved: bool = False


class Reservation(BaseModel):
    model_config = _UPSTREAM

    id: str
    asset_id: str
    order_ref: str


class InventoryClient(Protocol):
    def check_availability(self, asset_id: str) -> Availability: ...

    def reserve_asset(self, asset_id: str, order_ref: str) -> Reservation: ...


class HttpInventoryClient:
    def __init__(self, base_url: str | None = None) -> None:
        self.base_url = (base_url or get_config().INVENTORY_SERVICE_URL).rstrip("/")

    def _asset_url(self, asset_id: str, action: str) -> str:
        return f"{self.base_url}/inventory/assets/{quote(asset_id, safe='')}/{action}"

    def check_availability(self, asset_id: str) -> Availability:
        body = request_json(SERVICE_NAME, "GET", self._asset_url(asset_id, "availability"))
        return _parse(Availability, body)

    def reserve_asset(self, asset_id: str, order_ref: str) -> Reservation:
        body = request_json(SERVICE_NAME, "POST", self._asset_url(asset_id, "reserve"), {"orderRef": order_ref})
        return _parse(Reservation, body)


def _parse(model: type[BaseModel], body: dict):
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise UpstreamServiceError(SERVICE_NAME, f"Malformed {model.__name__} payload: {exc}") from exc
