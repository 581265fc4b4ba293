"""Shared request helper for upstream JSON services."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

import requests

from backoffice.core.config import get_config
from backoffice.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)


def request_json(service: str, method: str, url: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
    """Send one request; transport errors and non-2xx answers raise ``UpstreamServiceError``."""
    config = get_config()
    try:
        response = requests.request(
            method,
            url,
            json=payload,
            headers={"Accept": "application/json"},
            timeout=(config.UPSTREAM_CONNECT_TIMEOUT_SECONDS, config.UPSTREAM_TIMEOUT_SECONDS),
        )
    except requests.exceptions.RequestException as exc:
        logger.warning(
            "upstream.call.unreachable",
            extra={"event": "upstream.call.unreachable", "service": service, "url": url, "error": str(exc)},
        )
        raise UpstreamServiceError(service, str(exc)) from exc

    if not response.ok:
        logger.warning(
            "upstream.call.failed",
            extra={
                "event": "upstream.call.failed",
                "service": service,
                "url": url,
                "status_code": response.status_code,
            },
        )
        raise UpstreamServiceError(service, response.text[:500], status_code=response.status_code)

    try:
        # Prices stay exact: JSON floats are decoded straight to Decimal.
        body = response.json(parse_float=Decimal)
    except ValueError as exc:
        raise UpstreamServiceError(service, "Response body is not valid JSON.", response.status_code) from exc
    if not isinstance(body, dict):
        raise UpstreamServiceError(service, "Response body must be a JSON object.", response.status_code)
    return body
