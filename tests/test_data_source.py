"""
Unit tests for the SQLAlchemy data source against an in-memory SQLite database.
"""
import unittest
from datetime import datetime

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from pos_analytics.db.interface import SQLAlchemySalesDataSource
from pos_analytics.models import Base, Category, Customer, Product, Sale, SaleItem, SaleStatus

class TestSQLAlchemySalesDataSource(unittest.TestCase):
    """Test cases for the SQLAlchemy data source."""

    def setUp(self):
        """Set up test fixtures."""
        self.engine = create_engine('sqlite://')
        Base.metadata.create_all(self.engine)
        self.session = sessionmaker(bind=self.engine)()

        drinks = Category(id=1, name="Bebidas")
        coffee = Product(id=1, name="Café", category=drinks, stock=100, min_stock=20,
                         purchase_price=6.0, selling_price=10.0)
        candle = Product(id=2, name="Vela", stock=30, min_stock=5,
                         purchase_price=None, selling_price=4.0)

        ana = Customer(id=1, name="Ana")
        luis = Customer(id=2, name="Luis")
        idle = Customer(id=3, name="Idle")

        self.session.add_all([drinks, coffee, candle, ana, luis, idle])

        self._add_sale(1, ana, datetime(2025, 1, 5), SaleStatus.COMPLETED, [(coffee, 2, 10.0), (candle, 1, 4.0)])
        self._add_sale(2, luis, datetime(2025, 1, 20), SaleStatus.COMPLETED, [(coffee, 1, 10.0)])
        self._add_sale(3, idle, datetime(2025, 1, 10), SaleStatus.CANCELLED, [(coffee, 5, 10.0)])
        self._add_sale(4, luis, datetime(2025, 1, 12), SaleStatus.PENDING, [(coffee, 3, 10.0)])
        self._add_sale(5, ana, datetime(2025, 2, 2), SaleStatus.COMPLETED, [(candle, 2, 4.0)])

        self.session.commit()

        self.data_source = SQLAlchemySalesDataSource(self.session)
        self.start = datetime(2025, 1, 1)
        self.end = datetime(2025, 1, 31, 23, 59, 59)

    def tearDown(self):
        """Close the session and dispose of the database."""
        self.session.close()
        self.engine.dispose()

    def _add_sale(self, sale_id, customer, sale_date, status, lines):
        items = [
            SaleItem(product=product, quantity=quantity, unit_price=price, subtotal=quantity * price)
            for product, quantity, price in lines
        ]
        self.session.add(Sale(
            id=sale_id,
            customer=customer,
            sale_date=sale_date,
            total_amount=sum(item.subtotal for item in items),
            status=status,
            items=items
        ))

    def test_get_completed_sales(self):
        sales = self.data_source.get_completed_sales(self.start, self.end)

        self.assertEqual([s.id for s in sales], [1, 2])

        first = sales[0]
        self.assertEqual(first.customer_id, 1)
        self.assertEqual(first.total_amount, 24.0)
        self.assertEqual(len(first.items), 2)

        coffee_line = [i for i in first.items if i.product_id == 1][0]
        self.assertEqual(coffee_line.product_name, "Café")
        self.assertEqual(coffee_line.category, "Bebidas")
        self.assertEqual(coffee_line.purchase_price, 6.0)
        self.assertEqual(coffee_line.subtotal, 20.0)

        candle_line = [i for i in first.items if i.product_id == 2][0]
        self.assertIsNone(candle_line.category)
        self.assertIsNone(candle_line.purchase_price)

    def test_get_customers_with_sales(self):
        customers = self.data_source.get_customers_with_sales(self.start, self.end)

        self.assertEqual([c.id for c in customers], [1, 2, 3])
        self.assertEqual([s.id for s in customers[0].sales], [1])
        self.assertEqual(customers[2].sales, ())

    def test_get_customers_full_history(self):
        customers = self.data_source.get_customers_with_sales()

        self.assertEqual([s.id for s in customers[0].sales], [1, 5])

    def test_get_active_customer_ids(self):
        self.assertEqual(self.data_source.get_active_customer_ids(self.start, self.end), {1, 2})
        self.assertEqual(
            self.data_source.get_active_customer_ids(datetime(2025, 2, 1), datetime(2025, 2, 28)),
            {1}
        )

    def test_get_products(self):
        products = self.data_source.get_products()

        self.assertEqual([p.name for p in products], ["Café", "Vela"])
        self.assertEqual(products[0].category, "Bebidas")
        self.assertEqual(products[0].stock, 100)
        self.assertIsNone(products[1].category)

    def test_subtotal_mismatch_logged(self):
        item = self.session.query(SaleItem).filter(SaleItem.sale_id == 2).one()
        item.subtotal = 99.0
        self.session.commit()

        with self.assertLogs('pos_analytics.db.interface', level='WARNING') as logs:
            self.data_source.get_completed_sales(self.start, self.end)

        self.assertIn("subtotal", logs.output[0])

class TestSaleStatus(unittest.TestCase):
    """Test cases for the sale status enum."""

    def test_from_string(self):
        self.assertEqual(SaleStatus.from_string('completed'), SaleStatus.COMPLETED)
        self.assertEqual(str(SaleStatus.CANCELLED), 'CANCELLED')

        with self.assertRaises(ValueError):
            SaleStatus.from_string('refunded')

if __name__ == '__main__':
    unittest.main()
