from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFound(DomainError):
    """Raised when an update/delete targets a record the server does not have."""


class RemoteUnavailable(Exception):
    """The remote service could not serve a request.

    ``reason`` is one of ``"transport"``, ``"status"`` or ``"payload"`` and only
    feeds log messages; every reason triggers the same fallback.
    """

    def __init__(self, message: str, *, reason: str = "transport", status_code: Optional[int] = None):
        super().__init__(message)
        self.reason = reason
        self.status_code = status_code
