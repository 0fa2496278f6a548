# pos_analytics/core/sales_analysis.py
from collections import defaultdict
from typing import Dict, Iterable, List, Sequence, Tuple

from ..records import (
    UNCATEGORIZED, CategorySales, DailySales, HourlySales, PeriodComparison,
    SaleSnapshot, TicketStats, WeekdaySales
)
from ..utils.math_utils import percentage, round2

WEEKDAYS = ('Lunes', 'Martes', 'Miércoles', 'Jueves', 'Viernes', 'Sábado', 'Domingo')

MONTH_SALES = 'Ventas este mes'
MONTH_REVENUE = 'Ingresos este mes'
YEAR_SALES = 'Ventas este año'
YEAR_REVENUE = 'Ingresos este año'

def _day_key(sale: SaleSnapshot) -> str:
    return sale.sale_date.strftime('%Y-%m-%d')

def sales_by_category(sales: Iterable[SaleSnapshot]) -> List[CategorySales]:
    """Units and revenue sold per product category.

    Args:
        sales: Completed sales with their items

    Returns:
        CategorySales per category, most units first
    """
    units: Dict[str, int] = defaultdict(int)
    revenue: Dict[str, float] = defaultdict(float)

    for sale in sales:
        for item in sale.items:
            category = item.category or UNCATEGORIZED
            units[category] += item.quantity
            revenue[category] += item.subtotal

    result = [
        CategorySales(category=category, units=count, revenue=round2(revenue[category]))
        for category, count in units.items()
    ]

    result.sort(key=lambda c: c.units, reverse=True)
    return result

def sales_trend(sales: Iterable[SaleSnapshot]) -> List[DailySales]:
    """Number of sales and their total per calendar day, oldest day first.

    Days without sales are not listed.
    """
    days: Dict[str, List[float]] = {}

    for sale in sales:
        bucket = days.setdefault(_day_key(sale), [0, 0.0])
        bucket[0] += 1
        bucket[1] += sale.total_amount

    return [
        DailySales(day=day, sales=count, total=round2(total))
        for day, (count, total) in sorted(days.items())
    ]

def hourly_analysis(sales: Sequence[SaleSnapshot]) -> List[HourlySales]:
    """Share of sales per hour of the day.

    Args:
        sales: Completed sales

    Returns:
        24 rows, '00:00' to '23:00', including hours without sales
    """
    counts = [0] * 24
    for sale in sales:
        counts[sale.sale_date.hour] += 1

    total = len(sales)

    return [
        HourlySales(hour=f"{hour:02d}:00", sales=count, percentage=round2(percentage(count, total)))
        for hour, count in enumerate(counts)
    ]

def weekday_analysis(sales: Sequence[SaleSnapshot]) -> List[WeekdaySales]:
    """Share of sales per day of the week, Monday first."""
    counts = [0] * 7
    for sale in sales:
        counts[sale.sale_date.weekday()] += 1

    total = len(sales)

    return [
        WeekdaySales(weekday=name, sales=count, percentage=round2(percentage(count, total)))
        for name, count in zip(WEEKDAYS, counts)
    ]

def summarize_sales(sales: Iterable[SaleSnapshot]) -> Tuple[int, float]:
    """Number of sales and the sum of their totals."""
    count = 0
    revenue = 0.0

    for sale in sales:
        count += 1
        revenue += sale.total_amount

    return count, round2(revenue)

def compare_periods(label: str, current: float, previous: float) -> PeriodComparison:
    """Compare a figure with the previous period's.

    The percentage change is relative to the previous figure, and 0 when
    the previous period had nothing.
    """
    difference = round2(current - previous)

    return PeriodComparison(
        period=label,
        current=current,
        previous=previous,
        difference=difference,
        percentage=round2(percentage(difference, previous))
    )

def comparative_analysis(
    current_month: Iterable[SaleSnapshot],
    previous_month: Iterable[SaleSnapshot],
    current_year: Iterable[SaleSnapshot],
    previous_year: Iterable[SaleSnapshot]
) -> List[PeriodComparison]:
    """Month-to-date and year-to-date sales and revenue against the previous month and year.

    Args:
        current_month: Sales from the first of the month to the query date
        previous_month: The same span one month earlier
        current_year: Sales from 1 January to the query date
        previous_year: The same span one year earlier

    Returns:
        Sales this month, revenue this month, sales this year and revenue
        this year, in that order
    """
    month_count, month_revenue = summarize_sales(current_month)
    last_month_count, last_month_revenue = summarize_sales(previous_month)
    year_count, year_revenue = summarize_sales(current_year)
    last_year_count, last_year_revenue = summarize_sales(previous_year)

    return [
        compare_periods(MONTH_SALES, month_count, last_month_count),
        compare_periods(MONTH_REVENUE, month_revenue, last_month_revenue),
        compare_periods(YEAR_SALES, year_count, last_year_count),
        compare_periods(YEAR_REVENUE, year_revenue, last_year_revenue),
    ]

def ticket_analysis(sales: Iterable[SaleSnapshot]) -> List[TicketStats]:
    """Average, smallest and largest ticket per day, oldest day first."""
    tickets: Dict[str, List[float]] = {}

    for sale in sales:
        tickets.setdefault(_day_key(sale), []).append(sale.total_amount)

    return [
        TicketStats(
            day=day,
            tickets=len(amounts),
            average=round2(sum(amounts) / len(amounts)),
            minimum=round2(min(amounts)),
            maximum=round2(max(amounts))
        )
        for day, amounts in sorted(tickets.items())
    ]
