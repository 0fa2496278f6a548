# pos_analytics/utils/math_utils.py
import math
from typing import Optional

def round2(value: float) -> float:
    """Round a money or percentage figure to two decimals."""
    return float(round(value, 2))

def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning a default when the denominator is zero.

    Args:
        numerator: Numerator
        denominator: Denominator
        default: Value returned when denominator is 0

    Returns:
        Quotient or default
    """
    if denominator == 0:
        return default

    return numerator / denominator

def percentage(part: float, whole: float) -> float:
    """Calculate part / whole as a percentage, 0 when whole is 0."""
    return safe_divide(part, whole) * 100.0

def ceil_div(quantity: float, rate: float) -> Optional[int]:
    """Number of whole rate-steps needed to consume a quantity.

    Args:
        quantity: Quantity to consume
        rate: Consumption per step

    Returns:
        ceil(quantity / rate), or None when the rate is not positive
    """
    if rate <= 0:
        return None

    return math.ceil(quantity / rate)
