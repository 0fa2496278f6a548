# pos_analytics/core/profit_margin.py
from collections import OrderedDict
from typing import Dict, Iterable, List

from ..exceptions import ValidationError
from ..records import (
    UNCATEGORIZED, CategoryMargin, PeriodProfit, ProductMargin, ProfitMarginReport, SaleSnapshot
)
from ..utils.date_utils import get_period_key
from ..utils.math_utils import percentage, round2

PERIODS = ('daily', 'weekly', 'monthly')

def margin_percent(revenue: float, cost: float) -> float:
    """Margin over revenue as a percentage, 0 without revenue."""
    return percentage(revenue - cost, revenue)

def aggregate_profit_margins(sales: Iterable[SaleSnapshot]) -> ProfitMarginReport:
    """Aggregate revenue, cost and margin per product and per category.

    Revenue is quantity x unit price of each line; cost is quantity x the
    product's purchase price, or 0 when the product has none. Product revenue
    and cost are rounded to cents before anything else is derived from them,
    and category totals are summed from the rounded product figures so a
    category's margin is exactly the sum of its products' margins.

    Args:
        sales: Completed sales with their items

    Returns:
        ProfitMarginReport with products and categories, highest margin first
    """
    products: Dict[int, ProductMargin] = OrderedDict()

    for sale in sales:
        for item in sale.items:
            product = products.get(item.product_id)
            if product is None:
                product = ProductMargin(
                    product_id=item.product_id,
                    name=item.product_name,
                    category=item.category or UNCATEGORIZED
                )
                products[item.product_id] = product

            product.units += item.quantity
            product.revenue += item.unit_price * item.quantity
            product.cost += (item.purchase_price or 0.0) * item.quantity

    categories: Dict[str, CategoryMargin] = OrderedDict()

    for product in products.values():
        product.revenue = round2(product.revenue)
        product.cost = round2(product.cost)
        product.margin = round2(product.revenue - product.cost)
        product.margin_percent = round2(margin_percent(product.revenue, product.cost))

        category = categories.get(product.category)
        if category is None:
            category = CategoryMargin(category=product.category)
            categories[product.category] = category

        category.products += 1
        category.revenue += product.revenue
        category.cost += product.cost
        category.margin += product.margin

    for category in categories.values():
        # Sums of cent values; rounding only clears float noise
        category.revenue = round2(category.revenue)
        category.cost = round2(category.cost)
        category.margin = round2(category.margin)
        category.margin_percent = round2(margin_percent(category.revenue, category.cost))

    return ProfitMarginReport(
        products=sorted(products.values(), key=lambda p: p.margin, reverse=True),
        categories=sorted(categories.values(), key=lambda c: c.margin, reverse=True)
    )

def profit_by_period(sales: Iterable[SaleSnapshot], period: str = 'monthly') -> List[PeriodProfit]:
    """Gross profit per day, ISO week or month.

    Args:
        sales: Completed sales with their items
        period: 'daily', 'weekly' or 'monthly'

    Returns:
        PeriodProfit per period with sales, in chronological order
    """
    if period not in PERIODS:
        raise ValidationError(
            f"Invalid period: {period}. Valid values are: {', '.join(PERIODS)}", code='INVALID_PERIOD'
        )

    totals: Dict[str, List[float]] = {}

    for sale in sales:
        key = get_period_key(sale.sale_date, period)
        bucket = totals.setdefault(key, [0.0, 0.0])

        for item in sale.items:
            bucket[0] += item.unit_price * item.quantity
            bucket[1] += (item.purchase_price or 0.0) * item.quantity

    result = []
    for key, (revenue, cost) in sorted(totals.items()):
        revenue, cost = round2(revenue), round2(cost)
        result.append(PeriodProfit(
            period=key,
            revenue=revenue,
            cost=cost,
            gross_profit=round2(revenue - cost),
            gross_margin=round2(margin_percent(revenue, cost))
        ))

    return result
