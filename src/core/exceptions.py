"""Domain exceptions raised by the complaint box core.

Callers at the presentation boundary catch :class:`ComplaintBoxError` and
show ``message`` to the user.
"""

from __future__ import annotations

from typing import Any


class ComplaintBoxError(Exception):
    """Base exception for all complaint box errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AccountNotFoundError(ComplaintBoxError):
    """Login was attempted with an email that has no account."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("User not found. Please register first.", {"email": email})


class InvalidAdminCodeError(ComplaintBoxError):
    """Admin self-registration was attempted with a wrong access code."""

    def __init__(self) -> None:
        super().__init__("Invalid admin access code. Please contact system administrator.")


class PermissionDeniedError(ComplaintBoxError):
    """The acting account lacks the capability an operation requires."""

    def __init__(self, account_id: str, capability: str) -> None:
        self.account_id = account_id
        self.capability = capability
        super().__init__(
            f"Account '{account_id}' is not allowed to {capability.replace('_', ' ')}.",
            {"account_id": account_id, "capability": capability},
        )


class StorageError(ComplaintBoxError):
    """A persisted collection could not be read or written."""
