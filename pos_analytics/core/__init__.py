from .quintiles import compute_quintiles, score_ascending, score_descending
from .rfm import (
    classify_segment, combined_score, measure_customer,
    score_customers, summarize_segments
)
from .lifecycle import (
    classify_status, analyze_lifecycle, classify_purchase_tier,
    summarize_customer_purchases, summarize_tiers, seasonal_patterns
)
from .retention import calculate_retention
from .stock_forecast import (
    units_sold_by_product, daily_consumption, days_until, forecast_stock,
    rank_by_depletion, alert_level, reorder_quantity, early_alert,
    order_alerts, velocity_category, inventory_velocity, rank_by_velocity,
    inventory_value_by_category, summarize_inventory_value
)
from .excess_inventory import last_sale_by_product, optimal_stock, measure_excess, detect_excess
from .affinity import associated_products
from .profit_margin import margin_percent, aggregate_profit_margins, profit_by_period
from .sales_analysis import (
    sales_by_category, sales_trend, hourly_analysis, weekday_analysis,
    summarize_sales, compare_periods, comparative_analysis, ticket_analysis
)

__all__ = [
    'compute_quintiles',
    'score_ascending',
    'score_descending',
    'classify_segment',
    'combined_score',
    'measure_customer',
    'score_customers',
    'summarize_segments',
    'classify_status',
    'analyze_lifecycle',
    'classify_purchase_tier',
    'summarize_customer_purchases',
    'summarize_tiers',
    'seasonal_patterns',
    'calculate_retention',
    'units_sold_by_product',
    'daily_consumption',
    'days_until',
    'forecast_stock',
    'rank_by_depletion',
    'alert_level',
    'reorder_quantity',
    'early_alert',
    'order_alerts',
    'velocity_category',
    'inventory_velocity',
    'rank_by_velocity',
    'inventory_value_by_category',
    'summarize_inventory_value',
    'last_sale_by_product',
    'optimal_stock',
    'measure_excess',
    'detect_excess',
    'associated_products',
    'margin_percent',
    'aggregate_profit_margins',
    'profit_by_period',
    'sales_by_category',
    'sales_trend',
    'hourly_analysis',
    'weekday_analysis',
    'summarize_sales',
    'compare_periods',
    'comparative_analysis',
    'ticket_analysis'
]
