"""
Unit tests for product affinity.
"""
import unittest
from datetime import datetime

from pos_analytics.core.affinity import associated_products
from pos_analytics.records import SaleItemSnapshot, SaleSnapshot

NAMES = {1: "Café", 2: "Leche", 3: "Galletas"}

def make_sale(sale_id, product_ids):
    items = tuple(
        SaleItemSnapshot(product_id=pid, product_name=NAMES[pid], category="General",
                         quantity=1, unit_price=1.0)
        for pid in product_ids
    )
    return SaleSnapshot(id=sale_id, customer_id=1, sale_date=datetime(2025, 1, sale_id),
                        total_amount=float(len(items)), items=items)

class TestAffinity(unittest.TestCase):
    """Test cases for the product affinity scorer."""

    def setUp(self):
        """Set up test fixtures."""
        self.sales = [
            make_sale(1, [1, 2]),
            make_sale(2, [1, 2, 3]),
            make_sale(3, [3, 1]),
            make_sale(4, [1, 1, 2]),
            make_sale(5, [2]),
        ]

    def test_associated_products(self):
        pairs = associated_products(self.sales)

        self.assertEqual(
            [(p.product1_id, p.product2_id) for p in pairs],
            [(1, 3), (1, 2), (2, 3)]
        )

        coffee_milk = pairs[1]
        self.assertEqual(coffee_milk.product1, "Café")
        self.assertEqual(coffee_milk.product2, "Leche")
        self.assertEqual(coffee_milk.frequency, 3)
        self.assertEqual(coffee_milk.correlation, 75.0)

        self.assertEqual(pairs[0].frequency, 2)
        self.assertEqual(pairs[0].correlation, 100.0)
        self.assertEqual(pairs[2].correlation, 50.0)

    def test_sorted_by_correlation_then_frequency(self):
        pairs = associated_products(self.sales[:4])

        self.assertEqual(
            [(p.product1_id, p.product2_id, p.correlation) for p in pairs],
            [(1, 2, 100.0), (1, 3, 100.0), (2, 3, 50.0)]
        )

    def test_duplicate_lines_count_once(self):
        pairs = associated_products([make_sale(1, [1, 1, 2]), make_sale(2, [1])])

        self.assertEqual(pairs[0].frequency, 1)
        self.assertEqual(pairs[0].correlation, 100.0)

    def test_limit(self):
        self.assertEqual(len(associated_products(self.sales, limit=1)), 1)

    def test_correlation_in_range(self):
        for pair in associated_products(self.sales):
            self.assertGreaterEqual(pair.correlation, 0.0)
            self.assertLessEqual(pair.correlation, 100.0)

    def test_no_pairs(self):
        self.assertEqual(associated_products([]), [])
        self.assertEqual(associated_products([make_sale(1, [2])]), [])

if __name__ == '__main__':
    unittest.main()
