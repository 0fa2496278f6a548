# pos_analytics/core/excess_inventory.py
import math
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ..records import ExcessInventory, ProductSnapshot, SaleSnapshot
from ..utils.date_utils import days_between_ceil
from ..utils.math_utils import round2
from .stock_forecast import daily_consumption, units_sold_by_product

def last_sale_by_product(sales: Iterable[SaleSnapshot]) -> Dict[int, datetime]:
    """Latest sale date per product id."""
    last_sales: Dict[int, datetime] = {}

    for sale in sales:
        for item in sale.items:
            current = last_sales.get(item.product_id)
            if current is None or sale.sale_date > current:
                last_sales[item.product_id] = sale.sale_date

    return last_sales

def optimal_stock(min_stock: int, daily: float, horizon_days: int = 30) -> int:
    """Minimum stock plus the units consumed over the horizon."""
    return min_stock + math.ceil(daily * horizon_days)

def measure_excess(
    product: ProductSnapshot,
    total_sold: int,
    window_days: int,
    last_sale_date: Optional[datetime],
    today: datetime,
    horizon_days: int = 30
) -> ExcessInventory:
    """Measure the stock a product holds above its optimal level.

    Args:
        product: Product to evaluate
        total_sold: Units sold in the window
        window_days: Length of the window in days
        last_sale_date: Latest completed sale of the product in the window
        today: Query instant
        horizon_days: Days of consumption the optimal stock covers

    Returns:
        ExcessInventory (excess_stock 0 when the product is not overstocked)
    """
    optimal = optimal_stock(product.min_stock, daily_consumption(total_sold, window_days), horizon_days)
    excess = max(0, product.stock - optimal)

    days_since_last_sale = None
    if last_sale_date is not None:
        days_since_last_sale = days_between_ceil(today, last_sale_date)

    return ExcessInventory(
        product_id=product.id,
        name=product.name,
        category=product.category,
        current_stock=product.stock,
        optimal_stock=optimal,
        excess_stock=excess,
        excess_cost=round2(excess * (product.purchase_price or 0.0)),
        last_sale_date=last_sale_date,
        days_since_last_sale=days_since_last_sale
    )

def detect_excess(
    products: Iterable[ProductSnapshot],
    sales: Iterable[SaleSnapshot],
    window_days: int,
    today: datetime,
    horizon_days: int = 30
) -> List[ExcessInventory]:
    """Find overstocked products.

    Args:
        products: Products to evaluate
        sales: Completed sales of the window
        window_days: Length of the window in days
        today: Query instant
        horizon_days: See measure_excess

    Returns:
        Products with excess stock, highest excess cost first
    """
    sales = list(sales)
    last_sales = last_sale_by_product(sales)

    sold = units_sold_by_product(sales)

    excess = [
        measure_excess(
            product,
            sold.get(product.id, 0),
            window_days,
            last_sales.get(product.id),
            today,
            horizon_days
        )
        for product in products
    ]

    excess = [e for e in excess if e.excess_stock > 0]
    excess.sort(key=lambda e: e.excess_cost, reverse=True)
    return excess
