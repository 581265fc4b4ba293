"""Startup validation and bootstrap helpers."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from urllib.parse import urlparse

from backoffice.core.config import Config, get_config
from backoffice.core.logging_config import configure_logging
from backoffice.database.db import get_active_database_url, verify_database_connection

logger = logging.getLogger(__name__)

_LOCAL_HOSTS = {"localhost", "127.0.0.1", "::1"}


def _check_database(config: Config) -> str:
    database_ok = verify_database_connection()
    active_database_url = get_active_database_url()
    if not database_ok and config.DB_CONNECTIVITY_REQUIRED:
        raise RuntimeError("Database connectivity check failed.")
    if not database_ok:
        logger.warning(
            "startup.database.connectivity_optional_failed",
            extra={"event": "startup.database.connectivity_optional_failed"},
        )
    if config.is_production and active_database_url.startswith("sqlite"):
        logger.warning(
            "startup.production.sqlite_detected",
            extra={"event": "startup.production.sqlite_detected"},
        )
    return active_database_url


def _check_upstreams(config: Config) -> None:
    if not config.is_production:
        return
    for name in ("PRICING_SERVICE_URL", "INVENTORY_SERVICE_URL"):
        host = urlparse(getattr(config, name)).hostname
        if host in _LOCAL_HOSTS:
            logger.warning(
                "startup.production.local_upstream",
                extra={"event": "startup.production.local_upstream", "setting": name, "host": host},
            )


def _check_invoice_output(config: Config) -> None:
    # Issuing renders into this directory; an unwritable one keeps every invoice in DRAFT.
    output_dir = Path(config.INVOICE_OUTPUT_DIR)
    writable = os.access(output_dir, os.W_OK) if output_dir.exists() else os.access(
        output_dir.resolve().parent, os.W_OK
    )
    if not writable:
        logger.warning(
            "startup.invoice_output.not_writable",
            extra={"event": "startup.invoice_output.not_writable", "path": str(output_dir)},
        )


def validate_startup_config() -> None:
    """Fail-fast config and connectivity checks."""
    config = get_config()
    active_database_url = _check_database(config)
    _check_upstreams(config)
    _check_invoice_output(config)

    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": config.ENV,
            "database_url_scheme": active_database_url.split("://", 1)[0],
            "pricing_service_url": config.PRICING_SERVICE_URL,
            "inventory_service_url": config.INVENTORY_SERVICE_URL,
        },
    )


def bootstrap() -> None:
    """Initialize logging and validate runtime configuration."""
    configure_logging()
    validate_startup_config()
