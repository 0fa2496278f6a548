from .date_utils import normalize_window, window_days, days_between, get_trailing_months, format_month
from .math_utils import round2, safe_divide, percentage, ceil_div
from .validation import validate_product, validate_sale_item

__all__ = [
    'normalize_window',
    'window_days',
    'days_between',
    'get_trailing_months',
    'format_month',
    'round2',
    'safe_divide',
    'percentage',
    'ceil_div',
    'validate_product',
    'validate_sale_item'
]
