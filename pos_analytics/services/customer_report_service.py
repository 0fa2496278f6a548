# pos_analytics/services/customer_report_service.py
from datetime import date, datetime
from typing import List, Optional, Union

from pos_analytics.core.lifecycle import (
    analyze_lifecycle, seasonal_patterns, summarize_customer_purchases, summarize_tiers
)
from pos_analytics.core.retention import calculate_retention
from pos_analytics.core.rfm import measure_customer, score_customers, summarize_segments
from pos_analytics.records import (
    CustomerLifecycle, CustomerPurchaseSummary, RFMAnalysis, RetentionPeriod,
    SeasonalPattern, SegmentSummary, TierSummary
)
from pos_analytics.services.base import ReportService
from pos_analytics.utils.date_utils import format_month, get_month_bounds, get_previous_month, get_trailing_months

DateLike = Union[date, datetime]

class CustomerReportService(ReportService):
    """Service for customer segmentation, lifecycle and retention reports."""

    def rfm_analysis(self, start: DateLike, end: DateLike) -> List[RFMAnalysis]:
        """Segment every customer by recency, frequency and monetary value.

        Recency is measured against the query instant; frequency and monetary
        value cover the completed sales of the window.

        Args:
            start: First day of the window
            end: Last day of the window

        Returns:
            Scored analyses, highest combined score first, customers without
            purchases in the window last
        """
        window_start, window_end, _ = self._window(start, end)

        def compute():
            customers = self._fetch(
                "customers with sales", self.data_source.get_customers_with_sales, window_start, window_end
            )
            today = self.today
            return score_customers([measure_customer(c, today) for c in customers])

        return self._run("RFM Analysis", {'start': window_start, 'end': window_end}, compute)

    def segment_summary(self, start: DateLike, end: DateLike) -> List[SegmentSummary]:
        """Count customers per RFM segment."""
        return summarize_segments(self.rfm_analysis(start, end))

    def customer_lifecycle(self) -> List[CustomerLifecycle]:
        """Lifecycle status of every customer over their full history."""
        def compute():
            customers = self._fetch("customer history", self.data_source.get_customers_with_sales)
            today = self.today

            return [
                analyze_lifecycle(
                    customer,
                    today,
                    active_days=self.settings['active_days'],
                    at_risk_days=self.settings['at_risk_days']
                )
                for customer in customers
            ]

        return self._run("Customer Lifecycle", {}, compute)

    def retention_rate(self, end: Optional[DateLike] = None, months: Optional[int] = None) -> List[RetentionPeriod]:
        """Month over month customer retention.

        Args:
            end: Any day of the most recent month; the query instant when omitted
            months: Number of months; ANALYTICS.retention_months when omitted

        Returns:
            One RetentionPeriod per month, oldest first
        """
        end = end if end is not None else self.today
        months = months if months is not None else self.settings['retention_months']

        def compute():
            periods = []

            for month_start, month_end in reversed(get_trailing_months(end, months)):
                previous_month, previous_year = get_previous_month(month_start)
                previous_start, previous_end = get_month_bounds(date(previous_year, previous_month, 1))

                previous_ids = self._fetch(
                    "active customers", self.data_source.get_active_customer_ids, previous_start, previous_end
                )
                current_ids = self._fetch(
                    "active customers", self.data_source.get_active_customer_ids, month_start, month_end
                )

                periods.append(calculate_retention(
                    previous_ids,
                    current_ids,
                    period=format_month(month_start),
                    period_start=month_start.date()
                ))

            return periods

        return self._run("Customer Retention", {'end': end, 'months': months}, compute)

    def seasonal_patterns(self, start: DateLike, end: DateLike) -> List[SeasonalPattern]:
        """Customers, transactions and ticket size per calendar month."""
        window_start, window_end, _ = self._window(start, end)

        def compute():
            sales = self._fetch("completed sales", self.data_source.get_completed_sales, window_start, window_end)
            return seasonal_patterns(sales)

        return self._run("Seasonal Patterns", {'start': window_start, 'end': window_end}, compute)

    def _purchase_summaries(self, window_start, window_end) -> List[CustomerPurchaseSummary]:
        customers = self._fetch(
            "customers with sales", self.data_source.get_customers_with_sales, window_start, window_end
        )
        return summarize_customer_purchases(customers)

    def customers_with_purchases(self, start: DateLike, end: DateLike) -> List[CustomerPurchaseSummary]:
        """Customers who bought in the window with their spend and tier."""
        window_start, window_end, _ = self._window(start, end)

        def compute():
            summaries = self._purchase_summaries(window_start, window_end)
            return [s for s in summaries if s.purchases > 0]

        return self._run("Customers With Purchases", {'start': window_start, 'end': window_end}, compute)

    def purchase_tiers(self, start: DateLike, end: DateLike) -> List[TierSummary]:
        """Distribution of all customers over purchase tiers in the window."""
        window_start, window_end, _ = self._window(start, end)

        def compute():
            return summarize_tiers(self._purchase_summaries(window_start, window_end))

        return self._run("Purchase Tiers", {'start': window_start, 'end': window_end}, compute)

    def top_customers(self, start: DateLike, end: DateLike, limit: Optional[int] = None) -> List[CustomerPurchaseSummary]:
        """Customers with the highest spend in the window.

        Args:
            start: First day of the window
            end: Last day of the window
            limit: Number of customers; ANALYTICS.top_customers_limit when omitted

        Returns:
            Purchase summaries, highest spend first
        """
        limit = limit if limit is not None else self.settings['top_customers_limit']
        return self.customers_with_purchases(start, end)[:limit]
