# pos_analytics/models.py
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum, Index
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
import enum

Base = declarative_base()

class SaleStatus(enum.Enum):
    """Enum for sale status.

    Values:
        PENDING: Sale started but not paid
        COMPLETED: Paid sale; the only status analytics reads
        CANCELLED: Voided sale
    """
    PENDING = 'PENDING'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'

    def __str__(self):
        """Return the string value of the enum."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> 'SaleStatus':
        """Create a SaleStatus from a string value.

        Raises:
            ValueError if the string value is not valid
        """
        try:
            return cls(value.upper())
        except (ValueError, AttributeError):
            raise ValueError(f"Invalid sale status: {value}. Valid values are: PENDING, COMPLETED, CANCELLED")

class Category(Base):
    __tablename__ = 'category'

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, unique=True)

    products = relationship("Product", back_populates="category")

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"

class Customer(Base):
    __tablename__ = 'customer'

    id = Column(Integer, primary_key=True)
    name = Column(String(150), nullable=False)
    email = Column(String(150))
    phone = Column(String(30))
    created_at = Column(DateTime, default=func.now())

    sales = relationship("Sale", back_populates="customer", order_by="Sale.sale_date")

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}')>"

class Product(Base):
    """Product model for the catalogue and stock levels."""
    __tablename__ = 'product'

    id = Column(Integer, primary_key=True)
    name = Column(String(150), nullable=False)
    category_id = Column(Integer, ForeignKey('category.id'))
    stock = Column(Integer, default=0, nullable=False)
    min_stock = Column(Integer, default=0, nullable=False)
    purchase_price = Column(Float)  # Unit cost; may be unknown
    selling_price = Column(Float, default=0.0, nullable=False)

    category = relationship("Category", back_populates="products")
    sale_items = relationship("SaleItem", back_populates="product")

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"

class Sale(Base):
    __tablename__ = 'sale'

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey('customer.id'), nullable=False)
    sale_date = Column(DateTime, default=func.now(), nullable=False)
    total_amount = Column(Float, default=0.0, nullable=False)
    status = Column(Enum(SaleStatus), default=SaleStatus.PENDING, nullable=False)

    customer = relationship("Customer", back_populates="sales")
    items = relationship("SaleItem", back_populates="sale")

    __table_args__ = (
        Index('idx_sale_status_date', 'status', 'sale_date'),
        Index('idx_sale_customer', 'customer_id'),
    )

class SaleItem(Base):
    __tablename__ = 'sale_item'

    id = Column(Integer, primary_key=True)
    sale_id = Column(Integer, ForeignKey('sale.id'), nullable=False)
    product_id = Column(Integer, ForeignKey('product.id'), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    subtotal = Column(Float, nullable=False)  # quantity * unit_price

    sale = relationship("Sale", back_populates="items")
    product = relationship("Product", back_populates="sale_items")
