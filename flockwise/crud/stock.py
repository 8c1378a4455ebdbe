from decimal import Decimal
from typing import Optional

from flockwise.exceptions import InsufficientStockError


def apply_stock_delta(current: Optional[Decimal], delta: Decimal, message: Optional[str] = None) -> Decimal:
    """
    Return the stock level after applying `delta`.

    Raises InsufficientStockError when the result would be negative; callers run
    inside a transaction and must not have written anything they cannot roll back.
    """
    current = Decimal(current or 0)
    new_stock = current + Decimal(delta)
    if new_stock < 0:
        raise InsufficientStockError(available=current, requested=-Decimal(delta), message=message)
    return new_stock
