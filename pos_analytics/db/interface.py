# pos_analytics/db/interface.py
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy.orm import Session, joinedload, selectinload

from pos_analytics.models import Customer, Product, Sale, SaleItem, SaleStatus
from pos_analytics.records import CustomerSnapshot, ProductSnapshot, SaleItemSnapshot, SaleSnapshot
from pos_analytics.utils.validation import validate_product, validate_sale_item

logger = logging.getLogger(__name__)

class SalesDataSource(ABC):
    """Read access to the point-of-sale data the reports are computed from.

    Every method returns completed sales only; pending and cancelled sales
    are never visible to the analytics. Windows are inclusive at both ends.
    """

    @abstractmethod
    def get_customers_with_sales(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[CustomerSnapshot]:
        """Get all customers with their completed sales in the window, oldest first."""
        pass

    @abstractmethod
    def get_products(self) -> List[ProductSnapshot]:
        """Get all products with their category name."""
        pass

    @abstractmethod
    def get_completed_sales(self, start: datetime, end: datetime) -> List[SaleSnapshot]:
        """Get completed sales with their items in the window, oldest first."""
        pass

    @abstractmethod
    def get_active_customer_ids(self, start: datetime, end: datetime) -> Set[int]:
        """Get ids of customers with at least one completed sale in the window."""
        pass

def _in_window(sale_date: datetime, start: Optional[datetime], end: Optional[datetime]) -> bool:
    if start is not None and sale_date < start:
        return False
    if end is not None and sale_date > end:
        return False
    return True

class SQLAlchemySalesDataSource(SalesDataSource):
    """Data source backed by the SQLAlchemy models.

    Rows are converted to snapshots while the session is open, so the
    returned records stay usable after the session closes.
    """

    def __init__(self, session: Session):
        self.session = session

    def _completed_sales_query(self, start: Optional[datetime] = None, end: Optional[datetime] = None):
        query = self.session.query(Sale).options(
            selectinload(Sale.items).joinedload(SaleItem.product).joinedload(Product.category)
        ).filter(Sale.status == SaleStatus.COMPLETED)

        if start is not None:
            query = query.filter(Sale.sale_date >= start)
        if end is not None:
            query = query.filter(Sale.sale_date <= end)

        return query.order_by(Sale.sale_date, Sale.id)

    def _item_snapshot(self, item: SaleItem) -> SaleItemSnapshot:
        errors = validate_sale_item(item.quantity, item.unit_price, item.subtotal)
        if errors:
            logger.warning(f"Sale item {item.id} of sale {item.sale_id} failed validation: {errors}")

        product = item.product
        category = product.category.name if product.category else None

        return SaleItemSnapshot(
            product_id=item.product_id,
            product_name=product.name,
            category=category,
            quantity=item.quantity,
            unit_price=item.unit_price,
            purchase_price=product.purchase_price
        )

    def _sale_snapshot(self, sale: Sale) -> SaleSnapshot:
        return SaleSnapshot(
            id=sale.id,
            customer_id=sale.customer_id,
            sale_date=sale.sale_date,
            total_amount=sale.total_amount,
            items=tuple(self._item_snapshot(item) for item in sale.items)
        )

    def get_customers_with_sales(self, start=None, end=None):
        sales_by_customer: Dict[int, List[SaleSnapshot]] = defaultdict(list)

        for sale in self._completed_sales_query(start, end):
            sales_by_customer[sale.customer_id].append(self._sale_snapshot(sale))

        customers = self.session.query(Customer).order_by(Customer.id).all()

        return [
            CustomerSnapshot(
                id=customer.id,
                name=customer.name,
                sales=tuple(sales_by_customer.get(customer.id, ()))
            )
            for customer in customers
        ]

    def get_products(self):
        products = self.session.query(Product).options(
            joinedload(Product.category)
        ).order_by(Product.id).all()

        snapshots = []
        for product in products:
            snapshot = ProductSnapshot(
                id=product.id,
                name=product.name,
                category=product.category.name if product.category else None,
                stock=product.stock,
                min_stock=product.min_stock,
                purchase_price=product.purchase_price,
                selling_price=product.selling_price
            )

            errors = validate_product(snapshot)
            if errors:
                logger.warning(f"Product {product.id} failed validation: {errors}")

            snapshots.append(snapshot)

        return snapshots

    def get_completed_sales(self, start, end):
        return [self._sale_snapshot(sale) for sale in self._completed_sales_query(start, end)]

    def get_active_customer_ids(self, start, end):
        rows = self.session.query(Sale.customer_id).filter(
            Sale.status == SaleStatus.COMPLETED,
            Sale.sale_date >= start,
            Sale.sale_date <= end
        ).distinct().all()

        return {row[0] for row in rows}

class InMemorySalesDataSource(SalesDataSource):
    """Data source over fixture data held in memory.

    Sales are stored with their status and filtered the same way the
    database source filters them.
    """

    def __init__(self):
        self.customers: Dict[int, str] = {}
        self.products: List[ProductSnapshot] = []
        self.sales: List[Tuple[SaleStatus, SaleSnapshot]] = []

    def add_customer(self, customer_id: int, name: str):
        self.customers[customer_id] = name

    def add_product(self, product: ProductSnapshot):
        self.products.append(product)

    def add_sale(self, sale: SaleSnapshot, status: SaleStatus = SaleStatus.COMPLETED):
        if sale.customer_id not in self.customers:
            self.add_customer(sale.customer_id, f"Customer {sale.customer_id}")
        self.sales.append((status, sale))

    def _completed(self, start=None, end=None) -> List[SaleSnapshot]:
        sales = [
            sale for status, sale in self.sales
            if status == SaleStatus.COMPLETED and _in_window(sale.sale_date, start, end)
        ]
        sales.sort(key=lambda s: (s.sale_date, s.id))
        return sales

    def get_customers_with_sales(self, start=None, end=None):
        sales_by_customer: Dict[int, List[SaleSnapshot]] = defaultdict(list)
        for sale in self._completed(start, end):
            sales_by_customer[sale.customer_id].append(sale)

        return [
            CustomerSnapshot(id=customer_id, name=name, sales=tuple(sales_by_customer.get(customer_id, ())))
            for customer_id, name in sorted(self.customers.items())
        ]

    def get_products(self):
        return list(self.products)

    def get_completed_sales(self, start, end):
        return self._completed(start, end)

    def get_active_customer_ids(self, start, end):
        return {sale.customer_id for sale in self._completed(start, end)}
