from decimal import Decimal
from typing import Optional


class FarmError(Exception):
    """Base class for business-rule failures raised inside a transaction."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(FarmError):
    status_code = 404


class InsufficientStockError(FarmError):
    def __init__(self, available: Decimal, requested: Decimal, message: Optional[str] = None):
        self.available = available
        self.requested = requested
        super().__init__(
            message or f"Insufficient stock. Available: {available}, Requested: {requested}"
        )


class InvalidTransitionError(FarmError):
    status_code = 409
