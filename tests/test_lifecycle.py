"""
Unit tests for customer lifecycle, purchase tiers and seasonal patterns.
"""
import unittest
from datetime import datetime, timedelta

from pos_analytics.core.lifecycle import (
    analyze_lifecycle, classify_purchase_tier, classify_status,
    seasonal_patterns, summarize_customer_purchases, summarize_tiers
)
from pos_analytics.records import CustomerSnapshot, LifecycleStatus, PurchaseTier, SaleSnapshot

def make_sale(sale_id, customer_id, sale_date, total):
    return SaleSnapshot(id=sale_id, customer_id=customer_id, sale_date=sale_date, total_amount=total)

class TestLifecycleStatus(unittest.TestCase):
    """Test cases for lifecycle status thresholds."""

    def setUp(self):
        """Set up test fixtures."""
        self.today = datetime(2025, 6, 30)

    def test_no_purchases(self):
        self.assertEqual(classify_status(0, None, self.today), LifecycleStatus.NO_PURCHASES)

    def test_thresholds(self):
        """30 days is still active and 90 days is still at risk."""
        def days_ago(days):
            return self.today - timedelta(days=days)

        self.assertEqual(classify_status(3, days_ago(0), self.today), LifecycleStatus.ACTIVE)
        self.assertEqual(classify_status(3, days_ago(30), self.today), LifecycleStatus.ACTIVE)
        self.assertEqual(classify_status(3, days_ago(31), self.today), LifecycleStatus.AT_RISK)
        self.assertEqual(classify_status(3, days_ago(90), self.today), LifecycleStatus.AT_RISK)
        self.assertEqual(classify_status(3, days_ago(91), self.today), LifecycleStatus.LOST)

    def test_configured_thresholds(self):
        last = self.today - timedelta(days=10)

        self.assertEqual(
            classify_status(1, last, self.today, active_days=7, at_risk_days=14),
            LifecycleStatus.AT_RISK
        )
        self.assertEqual(
            classify_status(1, last, self.today, active_days=7, at_risk_days=9),
            LifecycleStatus.LOST
        )

    def test_purchases_without_date(self):
        self.assertEqual(classify_status(2, None, self.today), LifecycleStatus.INACTIVE)

class TestAnalyzeLifecycle(unittest.TestCase):
    """Test cases for the lifecycle summary of a customer."""

    def setUp(self):
        """Set up test fixtures."""
        self.today = datetime(2025, 6, 30)

    def test_analyze_lifecycle(self):
        customer = CustomerSnapshot(id=1, name="Ana", sales=(
            make_sale(1, 1, datetime(2025, 1, 1), 100.0),
            make_sale(2, 1, datetime(2025, 6, 20), 50.0),
        ))

        lifecycle = analyze_lifecycle(customer, self.today)

        self.assertEqual(lifecycle.first_purchase, datetime(2025, 1, 1))
        self.assertEqual(lifecycle.last_purchase, datetime(2025, 6, 20))
        self.assertEqual(lifecycle.days_as_customer, 180)
        self.assertEqual(lifecycle.purchases_per_month, 0.33)
        self.assertEqual(lifecycle.average_value, 75.0)
        self.assertEqual(lifecycle.total_value, 150.0)
        self.assertEqual(lifecycle.status, LifecycleStatus.ACTIVE)

    def test_customer_without_sales(self):
        lifecycle = analyze_lifecycle(CustomerSnapshot(id=2, name="Luis"), self.today)

        self.assertIsNone(lifecycle.first_purchase)
        self.assertIsNone(lifecycle.last_purchase)
        self.assertEqual(lifecycle.days_as_customer, 0)
        self.assertEqual(lifecycle.purchases_per_month, 0.0)
        self.assertEqual(lifecycle.average_value, 0.0)
        self.assertEqual(lifecycle.status, LifecycleStatus.NO_PURCHASES)

    def test_first_purchase_today(self):
        """No division by zero on the first day."""
        customer = CustomerSnapshot(id=3, name="Eva", sales=(
            make_sale(3, 3, datetime(2025, 6, 30), 20.0),
        ))

        lifecycle = analyze_lifecycle(customer, self.today)

        self.assertEqual(lifecycle.days_as_customer, 0)
        self.assertEqual(lifecycle.purchases_per_month, 0.0)
        self.assertEqual(lifecycle.average_value, 20.0)

    def test_lost_customer(self):
        customer = CustomerSnapshot(id=4, name="Old", sales=(
            make_sale(4, 4, datetime(2024, 12, 1), 40.0),
        ))

        self.assertEqual(analyze_lifecycle(customer, self.today).status, LifecycleStatus.LOST)

class TestPurchaseTiers(unittest.TestCase):
    """Test cases for purchase-count tiers."""

    def test_classify_purchase_tier(self):
        self.assertEqual(classify_purchase_tier(0), PurchaseTier.NONE)
        self.assertEqual(classify_purchase_tier(1), PurchaseTier.NEW)
        self.assertEqual(classify_purchase_tier(2), PurchaseTier.OCCASIONAL)
        self.assertEqual(classify_purchase_tier(3), PurchaseTier.OCCASIONAL)
        self.assertEqual(classify_purchase_tier(4), PurchaseTier.REGULAR)
        self.assertEqual(classify_purchase_tier(7), PurchaseTier.REGULAR)
        self.assertEqual(classify_purchase_tier(8), PurchaseTier.FREQUENT)
        self.assertEqual(classify_purchase_tier(14), PurchaseTier.FREQUENT)
        self.assertEqual(classify_purchase_tier(15), PurchaseTier.PREMIUM)
        self.assertEqual(classify_purchase_tier(40), PurchaseTier.PREMIUM)

    def test_summaries_and_distribution(self):
        day = datetime(2025, 2, 1)
        customers = [
            CustomerSnapshot(id=1, name="Small", sales=(make_sale(1, 1, day, 10.0),)),
            CustomerSnapshot(id=2, name="Big", sales=tuple(
                make_sale(10 + i, 2, day + timedelta(days=i), 25.0) for i in range(4)
            )),
            CustomerSnapshot(id=3, name="None"),
            CustomerSnapshot(id=4, name="Mid", sales=(
                make_sale(20, 4, day, 30.0), make_sale(21, 4, day + timedelta(days=3), 15.0),
            )),
        ]

        summaries = summarize_customer_purchases(customers)

        self.assertEqual([s.customer_id for s in summaries], [2, 4, 1, 3])
        self.assertEqual(summaries[0].total_spent, 100.0)
        self.assertEqual(summaries[0].tier, PurchaseTier.REGULAR)
        self.assertEqual(summaries[0].last_purchase, day + timedelta(days=3))
        self.assertEqual(summaries[1].tier, PurchaseTier.OCCASIONAL)
        self.assertIsNone(summaries[3].last_purchase)

        distribution = {t.tier: t for t in summarize_tiers(summaries)}

        self.assertEqual(distribution[PurchaseTier.NONE].customers, 1)
        self.assertEqual(distribution[PurchaseTier.NEW].percentage, 25.0)
        self.assertEqual(distribution[PurchaseTier.PREMIUM].customers, 0)
        self.assertEqual(sum(t.customers for t in distribution.values()), 4)

class TestSeasonalPatterns(unittest.TestCase):
    """Test cases for monthly purchase patterns."""

    def test_seasonal_patterns(self):
        sales = [
            make_sale(1, 1, datetime(2025, 1, 20), 30.0),
            make_sale(2, 2, datetime(2024, 12, 5), 10.0),
            make_sale(3, 1, datetime(2025, 1, 3), 20.0),
            make_sale(4, 2, datetime(2025, 1, 9), 10.0),
        ]

        patterns = seasonal_patterns(sales)

        self.assertEqual([p.period for p in patterns], ['Dec 2024', 'Jan 2025'])
        self.assertEqual(patterns[1].customers, 2)
        self.assertEqual(patterns[1].transactions, 3)
        self.assertEqual(patterns[1].total_value, 60.0)
        self.assertEqual(patterns[1].average_value, 20.0)

    def test_no_sales(self):
        self.assertEqual(seasonal_patterns([]), [])

if __name__ == '__main__':
    unittest.main()
