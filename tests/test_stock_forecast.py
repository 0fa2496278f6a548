"""
Unit tests for stock forecasts, early alerts, velocity and inventory value.
"""
import unittest
from datetime import date, datetime

from pos_analytics.core.stock_forecast import (
    alert_level, daily_consumption, days_until, early_alert, forecast_stock,
    inventory_value_by_category, inventory_velocity, order_alerts, rank_by_depletion,
    rank_by_velocity, reorder_quantity, summarize_inventory_value, units_sold_by_product
)
from pos_analytics.records import (
    AlertLevel, EarlyAlert, ProductSnapshot, SaleItemSnapshot, SaleSnapshot, VelocityCategory
)

def make_product(product_id, stock, min_stock=0, purchase_price=1.0, category='Bebidas'):
    return ProductSnapshot(
        id=product_id,
        name=f"Product {product_id}",
        category=category,
        stock=stock,
        min_stock=min_stock,
        purchase_price=purchase_price,
        selling_price=2.0
    )

class TestStockForecast(unittest.TestCase):
    """Test cases for stock depletion forecasts."""

    def setUp(self):
        """Set up test fixtures."""
        self.today = datetime(2025, 1, 31, 9, 0)
        self.product = make_product(1, stock=100, min_stock=20)

    def test_daily_consumption(self):
        self.assertEqual(daily_consumption(30, 30), 1.0)
        self.assertEqual(daily_consumption(30, 0), 30.0)
        self.assertEqual(daily_consumption(0, 30), 0.0)

    def test_days_until(self):
        self.assertEqual(days_until(100, 1.0), 100)
        self.assertEqual(days_until(10, 3.0), 4)
        self.assertIsNone(days_until(10, 0.0))

    def test_forecast_scenario(self):
        """30 units over 30 days empties 100 units in 100 days."""
        prediction = forecast_stock(self.product, 30, 30, self.today)

        self.assertEqual(prediction.daily_consumption, 1.0)
        self.assertEqual(prediction.days_until_empty, 100)
        self.assertEqual(prediction.estimated_empty_date, date(2025, 5, 11))

    def test_no_consumption_never_empties(self):
        prediction = forecast_stock(self.product, 0, 30, self.today)

        self.assertIsNone(prediction.days_until_empty)
        self.assertIsNone(prediction.estimated_empty_date)

    def test_rank_by_depletion(self):
        predictions = [
            forecast_stock(make_product(1, stock=100), 30, 30, self.today),
            forecast_stock(make_product(2, stock=50), 0, 30, self.today),
            forecast_stock(make_product(3, stock=10), 30, 30, self.today),
        ]

        ranked = rank_by_depletion(predictions)

        self.assertEqual([p.product_id for p in ranked], [3, 1])

    def test_units_sold_by_product(self):
        sales = [
            SaleSnapshot(id=1, customer_id=1, sale_date=self.today, total_amount=0.0, items=(
                SaleItemSnapshot(product_id=1, product_name="A", category="X", quantity=2, unit_price=1.0),
                SaleItemSnapshot(product_id=2, product_name="B", category="X", quantity=5, unit_price=1.0),
            )),
            SaleSnapshot(id=2, customer_id=1, sale_date=self.today, total_amount=0.0, items=(
                SaleItemSnapshot(product_id=1, product_name="A", category="X", quantity=3, unit_price=1.0),
            )),
        ]

        self.assertEqual(units_sold_by_product(sales), {1: 5, 2: 5})

class TestEarlyAlerts(unittest.TestCase):
    """Test cases for early stock alerts."""

    def test_adequate_scenario(self):
        alert = early_alert(make_product(1, stock=100, min_stock=20), 30, 30)

        self.assertEqual(alert.alert_level, AlertLevel.ADEQUATE)
        self.assertEqual(alert.days_left, 80)
        self.assertEqual(alert.reorder_quantity, 0)

    def test_critical_alert(self):
        """Stock under the minimum is critical and reorders a month of sales."""
        alert = early_alert(make_product(1, stock=10, min_stock=20), 60, 30)

        self.assertEqual(alert.alert_level, AlertLevel.CRITICAL)
        self.assertEqual(alert.days_left, 0)
        self.assertEqual(alert.reorder_quantity, 50)

    def test_alert_level(self):
        self.assertEqual(alert_level(20, 20, None), AlertLevel.CRITICAL)
        self.assertEqual(alert_level(25, 20, 5), AlertLevel.LOW)
        self.assertEqual(alert_level(25, 20, 7), AlertLevel.LOW)
        self.assertEqual(alert_level(25, 20, 8), AlertLevel.ADEQUATE)
        self.assertEqual(alert_level(25, 20, None), AlertLevel.ADEQUATE)
        self.assertEqual(alert_level(25, 20, 10, low_stock_days=14), AlertLevel.LOW)

    def test_reorder_quantity(self):
        self.assertEqual(reorder_quantity(1.5, 20), 25)
        self.assertEqual(reorder_quantity(0.0, 20), 0)
        self.assertEqual(reorder_quantity(1.0, 5, horizon_days=10), 5)

    def test_order_alerts(self):
        """Critical first, then fewest days left; adequate dropped."""
        def make_alert(product_id, level, days_left):
            return EarlyAlert(product_id=product_id, name="", category="", current_stock=0,
                              min_stock=0, alert_level=level, days_left=days_left, reorder_quantity=0)

        alerts = [
            make_alert(1, AlertLevel.LOW, 5),
            make_alert(2, AlertLevel.CRITICAL, None),
            make_alert(3, AlertLevel.ADEQUATE, 40),
            make_alert(4, AlertLevel.LOW, 3),
            make_alert(5, AlertLevel.CRITICAL, 0),
        ]

        self.assertEqual([a.product_id for a in order_alerts(alerts)], [5, 2, 4, 1])

class TestInventoryVelocity(unittest.TestCase):
    """Test cases for stock turnover."""

    def test_velocity_categories(self):
        cases = [
            (10, 30, VelocityCategory.VERY_FAST),
            (100, 150, VelocityCategory.FAST),
            (100, 50, VelocityCategory.MEDIUM),
            (100, 20, VelocityCategory.SLOW),
            (100, 0, VelocityCategory.VERY_SLOW),
        ]

        for stock, sold, expected in cases:
            record = inventory_velocity(make_product(1, stock=stock), sold, 30)
            self.assertEqual(record.velocity, expected)

    def test_turnover_and_days_to_sell(self):
        record = inventory_velocity(make_product(1, stock=10), 30, 30)

        self.assertEqual(record.turnover_rate, 3.0)
        self.assertEqual(record.days_to_sell_stock, 10)

    def test_empty_stock(self):
        """Empty stock is treated as a tenth of a unit."""
        record = inventory_velocity(make_product(1, stock=0), 5, 30)

        self.assertEqual(record.turnover_rate, 50.0)
        self.assertEqual(record.days_to_sell_stock, 0)

    def test_unsold_product(self):
        record = inventory_velocity(make_product(1, stock=100), 0, 30)

        self.assertEqual(record.turnover_rate, 0.0)
        self.assertIsNone(record.days_to_sell_stock)

    def test_rank_by_velocity(self):
        records = [
            inventory_velocity(make_product(1, stock=100), 10, 30),
            inventory_velocity(make_product(2, stock=10), 30, 30),
            inventory_velocity(make_product(3, stock=100), 60, 30),
        ]

        self.assertEqual([r.product_id for r in rank_by_velocity(records)], [2, 3, 1])

class TestInventoryValue(unittest.TestCase):
    """Test cases for inventory value by category."""

    def test_inventory_value_by_category(self):
        products = [
            make_product(1, stock=10, purchase_price=2.0, category='Bebidas'),
            make_product(2, stock=5, purchase_price=4.0, category='Bebidas'),
            make_product(3, stock=10, purchase_price=6.0, category='Snacks'),
            make_product(4, stock=8, purchase_price=None, category=None),
        ]

        values = inventory_value_by_category(products)

        self.assertEqual([v.category for v in values], ['Snacks', 'Bebidas', 'Sin categoría'])
        self.assertEqual(values[0].value, 60.0)
        self.assertEqual(values[0].percentage, 60.0)
        self.assertEqual(values[1].products, 2)
        self.assertEqual(values[1].percentage, 40.0)
        self.assertEqual(values[2].value, 0.0)

    def test_summarize_inventory_value(self):
        products = [
            make_product(1, stock=3, purchase_price=0.333, category='Bebidas'),
            make_product(2, stock=10, purchase_price=6.0, category='Snacks'),
        ]

        report = summarize_inventory_value(products)

        self.assertEqual(report.total_value, 61.0)
        self.assertEqual([v.category for v in report.categories], ['Snacks', 'Bebidas'])

    def test_no_stock_value(self):
        values = inventory_value_by_category([make_product(1, stock=0)])

        self.assertEqual(values[0].percentage, 0.0)

if __name__ == '__main__':
    unittest.main()
