# app/core/exceptions.py
"""Error taxonomy shared by the services and the HTTP layer.

Every error carries the HTTP status and machine-readable code it maps to, and
a message that is safe to show to the user. Store errors keep a generic
message; their cause is logged where they are raised.
"""
from typing import Optional


class FinanceTrackerError(Exception):
    status_code = 500
    code = "internal_error"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FinanceTrackerError):
    """Malformed input the client can fix."""
    status_code = 400
    code = "validation_error"
    default_message = "Invalid input"


class AuthError(FinanceTrackerError):
    """Credential check failed."""
    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid credentials"


class UnauthenticatedError(AuthError):
    """Session missing, invalid or expired."""
    code = "not_authenticated"
    default_message = "Not authenticated"


class NotFoundError(FinanceTrackerError):
    """Record absent or owned by another user."""
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class ConflictError(FinanceTrackerError):
    status_code = 409
    code = "conflict"
    default_message = "Already exists"


class AlreadyLockedError(FinanceTrackerError):
    status_code = 409
    code = "already_locked"
    default_message = "Income is locked"


class StoreError(FinanceTrackerError):
    """Infrastructure failure; the caller may retry."""
    status_code = 503
    code = "store_unavailable"
    default_message = "Service temporarily unavailable, please retry"


class StoreTimeoutError(StoreError):
    status_code = 504
    code = "store_timeout"
    default_message = "The request took too long, please retry"


class StoreUnavailableError(StoreError):
    pass
