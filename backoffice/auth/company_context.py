"""Company context extraction and isolation checks."""

from __future__ import annotations

from dataclasses import dataclass

from backoffice.auth.rbac import parse_role
from backoffice.core.exceptions import AuthenticationError
from backoffice.models.enums import ActorRole


@dataclass(frozen=True)
class CompanyContext:
    company_id: str
    role: ActorRole


def from_headers(company_id: str | None, role: str | None) -> CompanyContext:
    """Build the caller context supplied by the upstream auth layer."""
    if company_id is None or not company_id.strip():
        raise AuthenticationError("X-Company-Id header is required.")
    if role is None or not role.strip():
        raise AuthenticationError("X-Actor-Role header is required.")
    return CompanyContext(company_id=company_id.strip(), role=parse_role(role))


def company_matches(entity_company_id: str | None, requesting_company_id: str) -> bool:
    """Ensure entity access stays inside the requesting company."""
    return entity_company_id is not None and str(entity_company_id) == str(requesting_company_id)
