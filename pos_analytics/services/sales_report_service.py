# pos_analytics/services/sales_report_service.py
from datetime import date, datetime
from typing import List, Optional, Union

from pos_analytics.core.affinity import associated_products
from pos_analytics.core.profit_margin import aggregate_profit_margins, profit_by_period
from pos_analytics.core.sales_analysis import (
    comparative_analysis, hourly_analysis, sales_by_category, sales_trend,
    ticket_analysis, weekday_analysis
)
from pos_analytics.records import (
    CategorySales, DailySales, HourlySales, PeriodComparison, PeriodProfit,
    ProductAffinity, ProfitMarginReport, TicketStats, WeekdaySales
)
from pos_analytics.services.base import ReportService
from pos_analytics.utils.date_utils import convert_to_datetime, end_of_day, get_month_bounds, subtract_months

DateLike = Union[date, datetime]

class SalesReportService(ReportService):
    """Service for sales volume, product affinity and profitability reports."""

    def associated_products(
        self,
        start: DateLike,
        end: DateLike,
        limit: Optional[int] = None
    ) -> List[ProductAffinity]:
        """Products frequently bought together in the window.

        Args:
            start: First day of the window
            end: Last day of the window
            limit: Number of pairs; ANALYTICS.affinity_limit when omitted

        Returns:
            Product pairs, strongest correlation first
        """
        window_start, window_end, _ = self._window(start, end)
        limit = limit if limit is not None else self.settings['affinity_limit']

        def compute():
            sales = self._fetch("completed sales", self.data_source.get_completed_sales, window_start, window_end)
            return associated_products(sales, limit=limit)

        return self._run(
            "Associated Products", {'start': window_start, 'end': window_end, 'limit': limit}, compute
        )

    def profit_margin_analysis(
        self,
        start: DateLike,
        end: DateLike,
        limit: Optional[int] = None
    ) -> ProfitMarginReport:
        """Margins per product and per category in the window.

        Category totals always cover every product sold; only the product
        list is cut to the limit.

        Args:
            start: First day of the window
            end: Last day of the window
            limit: Number of products; ANALYTICS.profit_margin_limit when omitted

        Returns:
            ProfitMarginReport
        """
        window_start, window_end, _ = self._window(start, end)
        limit = limit if limit is not None else self.settings['profit_margin_limit']

        def compute():
            sales = self._fetch("completed sales", self.data_source.get_completed_sales, window_start, window_end)
            report = aggregate_profit_margins(sales)
            return ProfitMarginReport(products=report.products[:limit], categories=report.categories)

        return self._run(
            "Profit Margin Analysis", {'start': window_start, 'end': window_end, 'limit': limit}, compute
        )

    def profit_by_period(self, start: DateLike, end: DateLike, period: str = 'monthly') -> List[PeriodProfit]:
        """Gross profit per day, ISO week or month of the window."""
        window_start, window_end, _ = self._window(start, end)

        def compute():
            sales = self._fetch("completed sales", self.data_source.get_completed_sales, window_start, window_end)
            return profit_by_period(sales, period)

        return self._run(
            "Profit By Period", {'start': window_start, 'end': window_end, 'period': period}, compute
        )

    def _completed_sales_report(self, report_name, start, end, analyze):
        window_start, window_end, _ = self._window(start, end)

        def compute():
            sales = self._fetch("completed sales", self.data_source.get_completed_sales, window_start, window_end)
            return analyze(sales)

        return self._run(report_name, {'start': window_start, 'end': window_end}, compute)

    def sales_by_category(self, start: DateLike, end: DateLike) -> List[CategorySales]:
        """Units and revenue per category, most units first."""
        return self._completed_sales_report("Sales By Category", start, end, sales_by_category)

    def sales_trend(self, start: DateLike, end: DateLike) -> List[DailySales]:
        """Number of sales and revenue per day of the window."""
        return self._completed_sales_report("Sales Trend", start, end, sales_trend)

    def hourly_analysis(self, start: DateLike, end: DateLike) -> List[HourlySales]:
        """Share of the window's sales made in each hour of the day."""
        return self._completed_sales_report("Hourly Analysis", start, end, hourly_analysis)

    def weekday_analysis(self, start: DateLike, end: DateLike) -> List[WeekdaySales]:
        """Share of the window's sales made on each day of the week."""
        return self._completed_sales_report("Weekday Analysis", start, end, weekday_analysis)

    def ticket_analysis(self, start: DateLike, end: DateLike) -> List[TicketStats]:
        """Average, minimum and maximum ticket per day of the window."""
        return self._completed_sales_report("Ticket Analysis", start, end, ticket_analysis)

    def comparative_analysis(self, end: Optional[DateLike] = None) -> List[PeriodComparison]:
        """Month-to-date and year-to-date figures against the previous month and year.

        The previous month runs from its first day to the same day of month
        as ``end`` (clamped to its length); the previous year from 1 January
        to the same date one year earlier.

        Args:
            end: Last day compared; today when omitted

        Returns:
            Sales and revenue comparisons for the month and for the year
        """
        current_end = end_of_day(convert_to_datetime(end) if end is not None else self.today)
        current_month_start, _ = get_month_bounds(current_end)
        current_year_start = current_month_start.replace(month=1)

        previous_month_end = end_of_day(subtract_months(current_end, 1))
        previous_month_start, _ = get_month_bounds(previous_month_end)

        previous_year_end = end_of_day(subtract_months(current_end, 12))
        previous_year_start = current_year_start.replace(year=current_year_start.year - 1)

        def fetch(start, end):
            return self._fetch("completed sales", self.data_source.get_completed_sales, start, end)

        def compute():
            return comparative_analysis(
                fetch(current_month_start, current_end),
                fetch(previous_month_start, previous_month_end),
                fetch(current_year_start, current_end),
                fetch(previous_year_start, previous_year_end)
            )

        return self._run("Comparative Analysis", {'end': current_end}, compute)
