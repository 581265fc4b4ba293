"""Configuration module for the back office application."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from backoffice.core.exceptions import ConfigurationError

load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Runtime configuration with validation."""

    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    DATABASE_URL: str
    DB_CONNECTIVITY_REQUIRED: bool
    PRICING_SERVICE_URL: str
    INVENTORY_SERVICE_URL: str
    UPSTREAM_CONNECT_TIMEOUT_SECONDS: float
    UPSTREAM_TIMEOUT_SECONDS: float
    QUOTE_VALIDITY_DAYS: int
    INVOICE_PAYMENT_TERM_DAYS: int
    INVOICE_OUTPUT_DIR: str
    PAYMENT_MAX_ATTEMPTS: int
    API_HOST: str
    API_PORT: int
    API_PREFIX: str
    LOG_LEVEL: str
    LOG_FILE: str

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


def _build_config(env: str | None = None) -> Config:
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()
    debug = _as_bool(os.getenv("DEBUG"), default=(resolved_env != "production"))

    config = Config(
        APP_NAME="Refurb Back Office",
        APP_VERSION=os.getenv("APP_VERSION", "1.0.0"),
        ENV=resolved_env,
        DEBUG=debug if resolved_env != "production" else False,
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./backoffice.db"),
        DB_CONNECTIVITY_REQUIRED=_as_bool(
            os.getenv("DB_CONNECTIVITY_REQUIRED"), default=(resolved_env == "production")
        ),
        PRICING_SERVICE_URL=os.getenv("PRICING_SERVICE_URL", "http://localhost:3005").rstrip("/"),
        INVENTORY_SERVICE_URL=os.getenv("INVENTORY_SERVICE_URL", "http://localhost:3003").rstrip("/"),
        UPSTREAM_CONNECT_TIMEOUT_SECONDS=float(os.getenv("UPSTREAM_CONNECT_TIMEOUT_SECONDS", "2")),
        UPSTREAM_TIMEOUT_SECONDS=float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10")),
        QUOTE_VALIDITY_DAYS=int(os.getenv("QUOTE_VALIDITY_DAYS", "30")),
        INVOICE_PAYMENT_TERM_DAYS=int(os.getenv("INVOICE_PAYMENT_TERM_DAYS", "30")),
        INVOICE_OUTPUT_DIR=os.getenv("INVOICE_OUTPUT_DIR", "./invoices"),
        PAYMENT_MAX_ATTEMPTS=int(os.getenv("PAYMENT_MAX_ATTEMPTS", "3")),
        API_HOST=os.getenv("API_HOST", "0.0.0.0"),
        API_PORT=int(os.getenv("API_PORT", "8000")),
        API_PREFIX=os.getenv("API_PREFIX", "/api/v1"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        LOG_FILE=os.getenv("LOG_FILE", ""),
    )
    _validate_config(config)
    return config


def _validate_database_url(database_url: str) -> None:
    parsed = urlparse(database_url)
    if parsed.scheme not in {"sqlite", "postgresql", "postgresql+psycopg2"}:
        raise ConfigurationError(
            "DATABASE_URL must use sqlite:// or postgresql:// style URL."
        )
    if parsed.scheme.startswith("postgresql") and not parsed.hostname:
        raise ConfigurationError("PostgreSQL DATABASE_URL is missing hostname.")


def _validate_service_url(name: str, url: str) -> None:
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.hostname:
        raise ConfigurationError(f"{name} must be an http(s) URL with a hostname.")


def _validate_config(config: Config) -> None:
    _validate_database_url(config.DATABASE_URL)
    _validate_service_url("PRICING_SERVICE_URL", config.PRICING_SERVICE_URL)
    _validate_service_url("INVENTORY_SERVICE_URL", config.INVENTORY_SERVICE_URL)

    if config.UPSTREAM_CONNECT_TIMEOUT_SECONDS <= 0:
        raise ConfigurationError("UPSTREAM_CONNECT_TIMEOUT_SECONDS must be > 0.")
    if config.UPSTREAM_TIMEOUT_SECONDS <= 0:
        raise ConfigurationError("UPSTREAM_TIMEOUT_SECONDS must be > 0.")
    if config.QUOTE_VALIDITY_DAYS < 1:
        raise ConfigurationError("QUOTE_VALIDITY_DAYS must be >= 1.")
    if config.INVOICE_PAYMENT_TERM_DAYS < 1:
        raise ConfigurationError("INVOICE_PAYMENT_TERM_DAYS must be >= 1.")
    if config.PAYMENT_MAX_ATTEMPTS < 1:
        raise ConfigurationError("PAYMENT_MAX_ATTEMPTS must be >= 1.")
    if config.LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationError("LOG_LEVEL must be one of DEBUG/INFO/WARNING/ERROR/CRITICAL.")
    if config.is_production and "change_me" in config.DATABASE_URL.lower():
        raise ConfigurationError("Production DATABASE_URL uses placeholder credentials.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Get validated configuration for the requested environment."""
    return _build_config(env)
