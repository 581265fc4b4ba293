"""Custom exceptions for the back office application.

Business-rule outcomes are not exceptions; services return them as
``Result`` values (see ``backoffice.core.result``). The classes below cover
startup problems and collaborator transport failures only.
"""


class BackOfficeException(Exception):
    """Base exception for the back office application."""

    pass


class ConfigurationError(BackOfficeException):
    """Raised when configuration is invalid."""

    pass


class AuthenticationError(BackOfficeException):
    """Raised when the caller's company/role context cannot be resolved."""

    pass


class UpstreamServiceError(BackOfficeException):
    """Raised by integration clients when a collaborator fails or is unreachable."""

    def __init__(self, service: str, details: str, status_code: int | None = None) -> None:
        self.service = service
        self.details = details
        self.status_code = status_code
        code = f" ({status_code})" if status_code is not None else ""
        super().__init__(f"{service} error{code}: {details}")


class DocumentRenderError(BackOfficeException):
    """Raised when an invoice document cannot be produced."""

    pass
