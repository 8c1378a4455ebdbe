from decimal import ROUND_HALF_UP, Decimal
from typing import Optional


def round_decimal(value, places: int = 2) -> Decimal:
    """Round half-up to a fixed number of decimal places."""
    if value is None:
        value = 0
    return Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def safe_ratio(numerator, denominator, places: int = 2) -> Optional[Decimal]:
    """numerator / denominator rounded, or None when the denominator is not positive."""
    if denominator is None or Decimal(denominator) <= 0:
        return None
    return round_decimal(Decimal(numerator or 0) / Decimal(denominator), places)


def percentage(part, whole, places: int = 2) -> Decimal:
    """100 * part / whole rounded; 0 when whole is not positive."""
    if whole is None or Decimal(whole) <= 0:
        return round_decimal(0, places)
    return round_decimal(Decimal(part or 0) * 100 / Decimal(whole), places)
