# pos_analytics/core/stock_forecast.py
import math
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from ..records import (
    UNCATEGORIZED, AlertLevel, CategoryValue, EarlyAlert, InventoryValueReport, InventoryVelocity,
    ProductSnapshot, SaleSnapshot, StockPrediction, VelocityCategory
)
from ..utils.date_utils import add_days
from ..utils.math_utils import ceil_div, percentage, round2

EMPTY_STOCK_DIVISOR = 0.1

# (minimum turnover, category), highest first
VELOCITY_THRESHOLDS = [
    (3.0, VelocityCategory.VERY_FAST),
    (1.5, VelocityCategory.FAST),
    (0.5, VelocityCategory.MEDIUM),
]

def units_sold_by_product(sales: Iterable[SaleSnapshot]) -> Dict[int, int]:
    """Total units sold per product id across a set of sales."""
    totals: Dict[int, int] = defaultdict(int)

    for sale in sales:
        for item in sale.items:
            totals[item.product_id] += item.quantity

    return dict(totals)

def daily_consumption(total_sold: float, window_days: int) -> float:
    """Average units consumed per day over a window of at least one day."""
    return total_sold / max(window_days, 1)

def days_until(quantity: float, daily: float) -> Optional[int]:
    """Days until a quantity is consumed at a daily rate.

    Returns:
        ceil(quantity / daily), or None when nothing is consumed
    """
    return ceil_div(quantity, daily)

def forecast_stock(
    product: ProductSnapshot,
    total_sold: int,
    window_days: int,
    today: datetime
) -> StockPrediction:
    """Predict when a product runs out of stock.

    Args:
        product: Product to forecast
        total_sold: Units sold in the window
        window_days: Length of the window in days
        today: Query instant

    Returns:
        StockPrediction (days_until_empty None when the product does not sell)
    """
    daily = daily_consumption(total_sold, window_days)
    days_until_empty = days_until(product.stock, daily)

    estimated_empty_date = None
    if days_until_empty is not None:
        estimated_empty_date = add_days(today, days_until_empty)

    return StockPrediction(
        product_id=product.id,
        name=product.name,
        category=product.category,
        current_stock=product.stock,
        min_stock=product.min_stock,
        daily_consumption=daily,
        days_until_empty=days_until_empty,
        estimated_empty_date=estimated_empty_date
    )

def rank_by_depletion(predictions: Iterable[StockPrediction]) -> List[StockPrediction]:
    """Drop products that never empty and sort the rest, soonest first."""
    ranked = [p for p in predictions if p.days_until_empty is not None]
    ranked.sort(key=lambda p: p.days_until_empty)
    return ranked

def alert_level(
    stock: int,
    min_stock: int,
    days_left: Optional[int],
    low_stock_days: int = 7
) -> AlertLevel:
    """Determine the alert level of a product.

    Args:
        stock: Current stock
        min_stock: Minimum stock
        days_left: Days until stock reaches the minimum (None: never)
        low_stock_days: Days left at or under which stock is low

    Returns:
        AlertLevel
    """
    if stock <= min_stock:
        return AlertLevel.CRITICAL
    elif days_left is not None and days_left <= low_stock_days:
        return AlertLevel.LOW
    return AlertLevel.ADEQUATE

def reorder_quantity(daily: float, stock: int, horizon_days: int = 30) -> int:
    """Units to order to cover the horizon at the current consumption."""
    return max(0, math.ceil(daily * horizon_days) - stock)

def early_alert(
    product: ProductSnapshot,
    total_sold: int,
    window_days: int,
    low_stock_days: int = 7,
    horizon_days: int = 30
) -> EarlyAlert:
    """Build the stock alert of a product.

    Args:
        product: Product to evaluate
        total_sold: Units sold in the window
        window_days: Length of the window in days
        low_stock_days: See alert_level
        horizon_days: Days of consumption a reorder should cover

    Returns:
        EarlyAlert
    """
    daily = daily_consumption(total_sold, window_days)
    stock_above_min = max(0, product.stock - product.min_stock)
    days_left = days_until(stock_above_min, daily)

    return EarlyAlert(
        product_id=product.id,
        name=product.name,
        category=product.category,
        current_stock=product.stock,
        min_stock=product.min_stock,
        alert_level=alert_level(product.stock, product.min_stock, days_left, low_stock_days),
        days_left=days_left,
        reorder_quantity=reorder_quantity(daily, product.stock, horizon_days)
    )

def order_alerts(alerts: Iterable[EarlyAlert]) -> List[EarlyAlert]:
    """Keep critical and low alerts, critical first then fewest days left."""
    pending = [a for a in alerts if a.alert_level != AlertLevel.ADEQUATE]

    pending.sort(key=lambda a: (
        a.alert_level != AlertLevel.CRITICAL,
        a.days_left is None,
        a.days_left if a.days_left is not None else 0
    ))

    return pending

def velocity_category(turnover: float) -> VelocityCategory:
    for threshold, category in VELOCITY_THRESHOLDS:
        if turnover >= threshold:
            return category

    if turnover > 0:
        return VelocityCategory.SLOW
    return VelocityCategory.VERY_SLOW

def inventory_velocity(product: ProductSnapshot, total_sold: int, window_days: int) -> InventoryVelocity:
    """Measure how fast a product's stock turns over.

    Args:
        product: Product to evaluate
        total_sold: Units sold in the window
        window_days: Length of the window in days

    Returns:
        InventoryVelocity
    """
    stock_divisor = product.stock if product.stock > 0 else EMPTY_STOCK_DIVISOR
    turnover = round2(total_sold / stock_divisor)

    return InventoryVelocity(
        product_id=product.id,
        name=product.name,
        category=product.category,
        current_stock=product.stock,
        sold_quantity=total_sold,
        turnover_rate=turnover,
        days_to_sell_stock=days_until(product.stock, daily_consumption(total_sold, window_days)),
        velocity=velocity_category(turnover)
    )

def rank_by_velocity(records: Iterable[InventoryVelocity]) -> List[InventoryVelocity]:
    return sorted(records, key=lambda r: r.turnover_rate, reverse=True)

def inventory_value_by_category(products: Sequence[ProductSnapshot]) -> List[CategoryValue]:
    """Value stock at purchase price and group it by category.

    Args:
        products: Products to value

    Returns:
        CategoryValue per category, highest value first
    """
    values: Dict[str, float] = defaultdict(float)
    counts: Dict[str, int] = defaultdict(int)

    for product in products:
        category = product.category or UNCATEGORIZED
        values[category] += (product.purchase_price or 0.0) * product.stock
        counts[category] += 1

    total = sum(values.values())

    result = [
        CategoryValue(
            category=category,
            products=counts[category],
            value=round2(value),
            percentage=round2(percentage(value, total))
        )
        for category, value in values.items()
    ]

    result.sort(key=lambda c: c.value, reverse=True)
    return result

def summarize_inventory_value(products: Sequence[ProductSnapshot]) -> InventoryValueReport:
    """Inventory value per category together with the total stock value."""
    total = sum((p.purchase_price or 0.0) * p.stock for p in products)
    return InventoryValueReport(categories=inventory_value_by_category(products), total_value=round2(total))
