# pos_analytics/records.py
"""Plain records exchanged between the data source, the analytics core and
the report consumers.

Snapshots (``*Snapshot``) are what a data source hands to the core. The other
records are derived per request and never persisted; ``to_dict()`` keys are
the column set used by exports.
"""
import enum
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple, Any

UNCATEGORIZED = 'Sin categoría'


class CustomerSegment(enum.Enum):
    """RFM marketing segments."""
    CHAMPIONS = 'Campeones'
    LOYAL = 'Leales'
    POTENTIAL = 'Potenciales'
    AT_RISK = 'En Riesgo'
    NEEDS_ATTENTION = 'Necesitan Atención'
    NEW = 'Nuevos'
    DORMANT = 'Durmientes'
    OCCASIONAL = 'Ocasionales'
    NO_ACTIVITY = 'Sin Actividad'

    def __str__(self):
        return self.value


class LifecycleStatus(enum.Enum):
    ACTIVE = 'Activo'
    AT_RISK = 'En Riesgo'
    LOST = 'Perdido'
    INACTIVE = 'Inactivo'
    NO_PURCHASES = 'Sin Compras'

    def __str__(self):
        return self.value


class PurchaseTier(enum.Enum):
    """Customer tiers by number of purchases in a period."""
    NONE = 'Sin compras'
    NEW = 'Nuevo'
    OCCASIONAL = 'Ocasional'
    REGULAR = 'Regular'
    FREQUENT = 'Frecuente'
    PREMIUM = 'Premium'

    def __str__(self):
        return self.value


class AlertLevel(enum.Enum):
    CRITICAL = 'crítico'
    LOW = 'bajo'
    ADEQUATE = 'adecuado'

    def __str__(self):
        return self.value


class VelocityCategory(enum.Enum):
    VERY_FAST = 'muy rápida'
    FAST = 'rápida'
    MEDIUM = 'media'
    SLOW = 'lenta'
    VERY_SLOW = 'muy lenta'

    def __str__(self):
        return self.value


class RecordMixin:
    """Shared serialization for report records."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a flat dict; enum members become their labels."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, enum.Enum):
                value = value.value
            result[f.name] = value
        return result


# Snapshots -----------------------------------------------------------------

@dataclass(frozen=True)
class ProductSnapshot:
    id: int
    name: str
    category: Optional[str]
    stock: int
    min_stock: int
    purchase_price: Optional[float]
    selling_price: float


@dataclass(frozen=True)
class SaleItemSnapshot:
    product_id: int
    product_name: str
    category: Optional[str]
    quantity: int
    unit_price: float
    purchase_price: Optional[float] = None

    @property
    def subtotal(self) -> float:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class SaleSnapshot:
    id: int
    customer_id: int
    sale_date: datetime
    total_amount: float
    items: Tuple[SaleItemSnapshot, ...] = ()


@dataclass(frozen=True)
class CustomerSnapshot:
    id: int
    name: str
    sales: Tuple[SaleSnapshot, ...] = ()


# Customer records ------------------------------------------------------------

@dataclass
class RFMAnalysis(RecordMixin):
    customer_id: int
    name: str
    recency_days: Optional[int]  # None: no purchase in the window
    frequency: int
    monetary: float
    r_score: Optional[int] = None
    f_score: Optional[int] = None
    m_score: Optional[int] = None
    rfm_score: Optional[int] = None
    segment: CustomerSegment = CustomerSegment.NO_ACTIVITY


@dataclass
class SegmentSummary(RecordMixin):
    segment: CustomerSegment
    customers: int
    percentage: float


@dataclass
class CustomerLifecycle(RecordMixin):
    customer_id: int
    name: str
    first_purchase: Optional[datetime]
    last_purchase: Optional[datetime]
    days_as_customer: int
    purchases_per_month: float
    average_value: float
    total_value: float
    status: LifecycleStatus


@dataclass
class CustomerPurchaseSummary(RecordMixin):
    customer_id: int
    name: str
    purchases: int
    last_purchase: Optional[datetime]
    total_spent: float
    tier: PurchaseTier


@dataclass
class TierSummary(RecordMixin):
    tier: PurchaseTier
    customers: int
    percentage: float


@dataclass
class RetentionPeriod(RecordMixin):
    period: str
    new: int
    returning: int
    lost: int
    retention_rate: float
    period_start: Optional[date] = None


@dataclass
class SeasonalPattern(RecordMixin):
    period: str
    customers: int
    transactions: int
    average_value: float
    total_value: float


# Inventory records -----------------------------------------------------------

@dataclass
class StockPrediction(RecordMixin):
    product_id: int
    name: str
    category: Optional[str]
    current_stock: int
    min_stock: int
    daily_consumption: float
    days_until_empty: Optional[int]  # None: never empties at this rate
    estimated_empty_date: Optional[date]


@dataclass
class EarlyAlert(RecordMixin):
    product_id: int
    name: str
    category: Optional[str]
    current_stock: int
    min_stock: int
    alert_level: AlertLevel
    days_left: Optional[int]
    reorder_quantity: int


@dataclass
class ExcessInventory(RecordMixin):
    product_id: int
    name: str
    category: Optional[str]
    current_stock: int
    optimal_stock: int
    excess_stock: int
    excess_cost: float
    last_sale_date: Optional[datetime]
    days_since_last_sale: Optional[int]


@dataclass
class InventoryVelocity(RecordMixin):
    product_id: int
    name: str
    category: Optional[str]
    current_stock: int
    sold_quantity: int
    turnover_rate: float
    days_to_sell_stock: Optional[int]
    velocity: VelocityCategory


@dataclass
class CategoryValue(RecordMixin):
    category: Optional[str]
    products: int
    value: float
    percentage: float


@dataclass
class InventoryValueReport:
    """Stock value per category plus the value of the whole inventory."""
    categories: List[CategoryValue] = field(default_factory=list)
    total_value: float = 0.0

    def __len__(self):
        return len(self.categories)


# Sales records ---------------------------------------------------------------

@dataclass
class ProductAffinity(RecordMixin):
    product1_id: int
    product1: str
    product2_id: int
    product2: str
    frequency: int
    correlation: float


@dataclass
class ProductMargin(RecordMixin):
    product_id: int
    name: str
    category: Optional[str]
    units: int = 0
    revenue: float = 0.0
    cost: float = 0.0
    margin: float = 0.0
    margin_percent: float = 0.0


@dataclass
class CategoryMargin(RecordMixin):
    category: Optional[str]
    products: int = 0
    revenue: float = 0.0
    cost: float = 0.0
    margin: float = 0.0
    margin_percent: float = 0.0


@dataclass
class ProfitMarginReport:
    products: List[ProductMargin] = field(default_factory=list)
    categories: List[CategoryMargin] = field(default_factory=list)

    def __len__(self):
        return len(self.products)


@dataclass
class PeriodProfit(RecordMixin):
    period: str
    revenue: float
    cost: float
    gross_profit: float
    gross_margin: float


@dataclass
class CategorySales(RecordMixin):
    category: Optional[str]
    units: int
    revenue: float


@dataclass
class DailySales(RecordMixin):
    day: str
    sales: int
    total: float


@dataclass
class HourlySales(RecordMixin):
    hour: str  # 'HH:00'
    sales: int
    percentage: float


@dataclass
class WeekdaySales(RecordMixin):
    weekday: str
    sales: int
    percentage: float


@dataclass
class PeriodComparison(RecordMixin):
    """A sales count or revenue figure against the same span one period earlier."""
    period: str
    current: float
    previous: float
    difference: float
    percentage: float  # 0 when there is nothing to compare against


@dataclass
class TicketStats(RecordMixin):
    day: str
    tickets: int
    average: float
    minimum: float
    maximum: float
