# pos_analytics/core/lifecycle.py
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from ..records import (
    CustomerLifecycle, CustomerPurchaseSummary, CustomerSnapshot, LifecycleStatus,
    PurchaseTier, SaleSnapshot, SeasonalPattern, TierSummary
)
from ..utils.date_utils import days_between, format_month
from ..utils.math_utils import percentage, round2, safe_divide

DAYS_PER_MONTH = 30

# (upper bound exclusive, tier) for customers with at least one purchase
PURCHASE_TIERS = [
    (2, PurchaseTier.NEW),
    (4, PurchaseTier.OCCASIONAL),
    (8, PurchaseTier.REGULAR),
    (15, PurchaseTier.FREQUENT),
]

def classify_status(
    purchases: int,
    last_purchase: Optional[datetime],
    today: datetime,
    active_days: int = 30,
    at_risk_days: int = 90
) -> LifecycleStatus:
    """Derive the lifecycle status of a customer.

    Args:
        purchases: Number of completed purchases
        last_purchase: Date of the latest purchase
        today: Query instant
        active_days: Max days since last purchase to count as active
        at_risk_days: Max days since last purchase before the customer is lost

    Returns:
        LifecycleStatus
    """
    if purchases == 0:
        return LifecycleStatus.NO_PURCHASES

    if last_purchase is None:
        return LifecycleStatus.INACTIVE

    days_since_last = days_between(today, last_purchase)

    if days_since_last <= active_days:
        return LifecycleStatus.ACTIVE
    elif days_since_last <= at_risk_days:
        return LifecycleStatus.AT_RISK
    return LifecycleStatus.LOST

def analyze_lifecycle(
    customer: CustomerSnapshot,
    today: datetime,
    active_days: int = 30,
    at_risk_days: int = 90
) -> CustomerLifecycle:
    """Summarize the purchase history of a customer.

    Args:
        customer: Customer with the full completed sale history, oldest first
        today: Query instant
        active_days: See classify_status
        at_risk_days: See classify_status

    Returns:
        CustomerLifecycle
    """
    sales = customer.sales
    count = len(sales)

    first_purchase = sales[0].sale_date if sales else None
    last_purchase = sales[-1].sale_date if sales else None

    days_as_customer = days_between(today, first_purchase) if first_purchase else 0

    if days_as_customer > 0:
        purchases_per_month = count / (days_as_customer / DAYS_PER_MONTH)
    else:
        purchases_per_month = 0.0

    total_value = sum(sale.total_amount for sale in sales)
    average_value = safe_divide(total_value, count)

    return CustomerLifecycle(
        customer_id=customer.id,
        name=customer.name,
        first_purchase=first_purchase,
        last_purchase=last_purchase,
        days_as_customer=days_as_customer,
        purchases_per_month=round2(purchases_per_month),
        average_value=round2(average_value),
        total_value=round2(total_value),
        status=classify_status(count, last_purchase, today, active_days, at_risk_days)
    )

def classify_purchase_tier(purchases: int) -> PurchaseTier:
    """Tier a customer by the number of purchases in a period."""
    if purchases <= 0:
        return PurchaseTier.NONE

    for upper_bound, tier in PURCHASE_TIERS:
        if purchases < upper_bound:
            return tier

    return PurchaseTier.PREMIUM

def summarize_customer_purchases(customers: Iterable[CustomerSnapshot]) -> List[CustomerPurchaseSummary]:
    """Summarize purchases per customer in a period.

    Args:
        customers: Customers with the completed sales of the period

    Returns:
        Summaries sorted by total spent, highest first
    """
    summaries = []

    for customer in customers:
        purchases = len(customer.sales)
        last_purchase = max((s.sale_date for s in customer.sales), default=None)

        summaries.append(CustomerPurchaseSummary(
            customer_id=customer.id,
            name=customer.name,
            purchases=purchases,
            last_purchase=last_purchase,
            total_spent=round2(sum(s.total_amount for s in customer.sales)),
            tier=classify_purchase_tier(purchases)
        ))

    summaries.sort(key=lambda s: s.total_spent, reverse=True)
    return summaries

def summarize_tiers(summaries: Sequence[CustomerPurchaseSummary]) -> List[TierSummary]:
    """Count customers per purchase tier, lowest tier first."""
    counts = {tier: 0 for tier in PurchaseTier}
    for summary in summaries:
        counts[summary.tier] += 1

    return [
        TierSummary(
            tier=tier,
            customers=count,
            percentage=round2(percentage(count, len(summaries)))
        )
        for tier, count in counts.items()
    ]

def seasonal_patterns(sales: Sequence[SaleSnapshot]) -> List[SeasonalPattern]:
    """Group completed sales by calendar month.

    Args:
        sales: Completed sales of the period

    Returns:
        One SeasonalPattern per month with sales, in chronological order
    """
    months: Dict[tuple, dict] = {}

    for sale in sales:
        key = (sale.sale_date.year, sale.sale_date.month)
        bucket = months.setdefault(key, {
            'label': format_month(sale.sale_date),
            'customers': set(),
            'transactions': 0,
            'total_value': 0.0
        })
        bucket['customers'].add(sale.customer_id)
        bucket['transactions'] += 1
        bucket['total_value'] += sale.total_amount

    return [
        SeasonalPattern(
            period=bucket['label'],
            customers=len(bucket['customers']),
            transactions=bucket['transactions'],
            average_value=round2(safe_divide(bucket['total_value'], bucket['transactions'])),
            total_value=round2(bucket['total_value'])
        )
        for _, bucket in sorted(months.items())
    ]
