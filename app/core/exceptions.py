"""
Domain exceptions raised by the service layer.

Every user action fails with one of these; the API layer turns them into
``{"success": false, "error": <message>}`` responses with the exception's
``status_code``.
"""

from decimal import Decimal
from typing import Any, Dict, Optional


class StakeHabitError(Exception):
    """Base exception for all StakeHabit errors."""

    status_code = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(StakeHabitError):
    """Malformed amount, phone number or name."""


class NotFound(StakeHabitError):
    """Requested record does not exist for this user."""

    status_code = 404


class InsufficientBalance(StakeHabitError):
    """Ledger entry would take the wallet balance below zero."""

    def __init__(
        self,
        required: Optional[Decimal] = None,
        available: Optional[Decimal] = None,
        message: str = "Insufficient balance",
    ) -> None:
        details = {}
        if required is not None:
            details["required"] = str(required)
        if available is not None:
            details["available"] = str(available)
        super().__init__(message, details)


class AlreadyCompletedToday(StakeHabitError):
    """Habit was already checked in for the current day."""

    status_code = 409

    def __init__(self, message: str = "Already completed today") -> None:
        super().__init__(message)


class AuthenticationFailed(StakeHabitError):
    """Bad credentials or inactive account."""

    status_code = 401


class GatewayError(StakeHabitError):
    """Payment gateway rejected the request or could not be reached."""


class PersistenceError(StakeHabitError):
    """Unexpected database failure."""

    status_code = 500

    def __init__(self, message: str = "Something went wrong, please try again") -> None:
        super().__init__(message)
