# pos_analytics/core/retention.py
from datetime import date
from typing import AbstractSet, Optional

from ..records import RetentionPeriod
from ..utils.math_utils import percentage, round2

def calculate_retention(
    previous_customers: AbstractSet[int],
    current_customers: AbstractSet[int],
    period: str = '',
    period_start: Optional[date] = None
) -> RetentionPeriod:
    """Compare the customers of two consecutive periods.

    Args:
        previous_customers: Ids of customers who bought in the previous period
        current_customers: Ids of customers who bought in the current period
        period: Label of the current period
        period_start: First day of the current period

    Returns:
        RetentionPeriod with new, returning and lost counts and the share of
        previous customers that came back (0 without previous customers)
    """
    previous_customers = set(previous_customers)
    current_customers = set(current_customers)

    returning = len(current_customers & previous_customers)

    return RetentionPeriod(
        period=period,
        new=len(current_customers - previous_customers),
        returning=returning,
        lost=len(previous_customers - current_customers),
        retention_rate=round2(percentage(returning, len(previous_customers))),
        period_start=period_start
    )
