"""Typed outcomes returned by the pipeline services.

Every service operation returns either ``Ok(value)`` or ``Err(error)``.
Callers branch on ``result.ok`` instead of catching exceptions.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    CONFLICT = "conflict"
    BUSINESS_RULE_VIOLATION = "business_rule_violation"
    UPSTREAM_FAILURE = "upstream_failure"


class ErrorCode(str, enum.Enum):
    QUOTE_NOT_FOUND = "QuoteNotFound"
    ORDER_NOT_FOUND = "OrderNotFound"
    OPTION_NOT_FOUND = "OptionNotFound"
    INVOICE_NOT_FOUND = "InvoiceNotFound"

    ACCESS_DENIED = "AccessDenied"
    PAYMENT_UNAUTHORIZED = "PaymentUnauthorized"
    ROLE_NOT_ALLOWED = "RoleNotAllowed"

    QUOTE_ALREADY_CONVERTED = "QuoteAlreadyConverted"
    OPTION_ALREADY_ADDED = "OptionAlreadyAdded"
    INVOICE_ALREADY_EXISTS = "InvoiceAlreadyExists"
    CONCURRENT_UPDATE = "ConcurrentUpdate"

    CONFIGURATION_NOT_VALIDATED = "ConfigurationNotValidated"
    ASSET_NOT_AVAILABLE = "AssetNotAvailable"
    QUOTE_EXPIRED = "QuoteExpired"
    ORDER_ALREADY_SHIPPED = "OrderAlreadyShipped"
    OPTION_NOT_ACTIVE = "OptionNotActive"
    ORDER_NOT_ELIGIBLE = "OrderNotEligible"
    INVALID_ORDER_TRANSITION = "InvalidOrderTransition"
    INVOICE_NOT_ISSUED = "InvoiceNotIssued"
    INVALID_INVOICE_STATUS = "InvalidInvoiceStatus"
    INVALID_PAYMENT_AMOUNT = "InvalidPaymentAmount"
    INVALID_EXTENSION = "InvalidExtension"
    INVALID_OPTION_PRICE = "InvalidOptionPrice"

    RESERVATION_FAILED = "ReservationFailed"
    UPSTREAM_UNAVAILABLE = "UpstreamUnavailable"
    DOCUMENT_RENDER_FAILED = "DocumentRenderFailed"


ERROR_KINDS: dict[ErrorCode, ErrorKind] = {
    ErrorCode.QUOTE_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.ORDER_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.OPTION_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.INVOICE_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.ACCESS_DENIED: ErrorKind.ACCESS_DENIED,
    ErrorCode.PAYMENT_UNAUTHORIZED: ErrorKind.ACCESS_DENIED,
    ErrorCode.ROLE_NOT_ALLOWED: ErrorKind.ACCESS_DENIED,
    ErrorCode.QUOTE_ALREADY_CONVERTED: ErrorKind.CONFLICT,
    ErrorCode.OPTION_ALREADY_ADDED: ErrorKind.CONFLICT,
    ErrorCode.INVOICE_ALREADY_EXISTS: ErrorKind.CONFLICT,
    ErrorCode.CONCURRENT_UPDATE: ErrorKind.CONFLICT,
    ErrorCode.CONFIGURATION_NOT_VALIDATED: ErrorKind.BUSINESS_RULE_VIOLATION,
    ErrorCode.ASSET_NOT_AVAILABLE: ErrorKind.BUSINESS_RULE_VIOLATION,
    ErrorCode.QUOTE_EXPIRED: ErrorKind.BUSINESS_RULE_VIOLATION,
    ErrorCode.ORDER_ALREADY_SHIPPED: ErrorKind.BUSINESS_RULE_VIOLATION,
    ErrorCode.OPTION_NOT_ACTIVE: ErrorKind.BUSINESS_RULE_VIOLATION,
    ErrorCode.ORDER_NOT_ELIGIBLE: ErrorKind.BUSINESS_RULE_VIOLATION,
    ErrorCode.INVALID_ORDER_TRANSITION: ErrorKind.BUSINESS_RULE_VIOLATION,
    ErrorCode.INVOICE_NOT_ISSUED: ErrorKind.BUSINESS_RULE_VIOLATION,
    ErrorCode.INVALID_INVOICE_STATUS: ErrorKind.BUSINESS_RULE_VIOLATION,
    ErrorCode.INVALID_PAYMENT_AMOUNT: ErrorKind.BUSINESS_RULE_VIOLATION,
    ErrorCode.INVALID_EXTENSION: ErrorKind.BUSINESS_RULE_VIOLATION,
    ErrorCode.INVALID_OPTION_PRICE: ErrorKind.BUSINESS_RULE_VIOLATION,
    ErrorCode.RESERVATION_FAILED: ErrorKind.UPSTREAM_FAILURE,
    ErrorCode.UPSTREAM_UNAVAILABLE: ErrorKind.UPSTREAM_FAILURE,
    ErrorCode.DOCUMENT_RENDER_FAILED: ErrorKind.UPSTREAM_FAILURE,
}

HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ACCESS_DENIED: 403,
    ErrorKind.CONFLICT: 409,
    ErrorKind.BUSINESS_RULE_VIOLATION: 422,
    ErrorKind.UPSTREAM_FAILURE: 502,
}


@dataclass(frozen=True)
class DomainError:
    code: ErrorCode
    message: str
    entity_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> ErrorKind:
        return ERROR_KINDS[self.code]

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.code.value,
            "kind": self.kind.value,
            "detail": self.message,
            "entity_id": self.entity_id,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Err:
    error: DomainError
    ok: ClassVar[bool] = False


Result = Union[Ok[T], Err]


def fail(
    code: ErrorCode,
    message: str,
    entity_id: str | None = None,
    **details: Any,
) -> Err:
    """Shorthand for building an ``Err`` result."""
    return Err(DomainError(code=code, message=message, entity_id=entity_id, details=details))
