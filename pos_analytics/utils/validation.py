from typing import Dict
import math

from pos_analytics.records import ProductSnapshot

SUBTOTAL_TOLERANCE = 0.005

def validate_product(product: ProductSnapshot) -> Dict[str, str]:
    """Validate a product snapshot.

    Args:
        product: Product to validate

    Returns:
        Dictionary with validation errors
    """
    errors = {}

    if not product.name:
        errors['name'] = 'Product name is required'

    if product.stock is None or product.stock < 0:
        errors['stock'] = 'Stock must be zero or positive'

    if product.min_stock is None or product.min_stock < 0:
        errors['min_stock'] = 'Minimum stock must be zero or positive'

    if product.purchase_price is not None and product.purchase_price < 0:
        errors['purchase_price'] = 'Purchase price cannot be negative'

    return errors

def validate_sale_item(quantity, unit_price, subtotal) -> Dict[str, str]:
    """Validate a persisted sale item.

    Args:
        quantity: Units sold
        unit_price: Price per unit
        subtotal: Stored subtotal

    Returns:
        Dictionary with validation errors
    """
    errors = {}

    if quantity is None or quantity <= 0:
        errors['quantity'] = 'Quantity must be positive'

    if unit_price is None or unit_price < 0:
        errors['unit_price'] = 'Unit price cannot be negative'

    if not errors and subtotal is not None:
        expected = quantity * unit_price
        if not math.isclose(subtotal, expected, abs_tol=SUBTOTAL_TOLERANCE):
            errors['subtotal'] = f'Subtotal {subtotal} does not match quantity x unit price ({expected})'

    return errors
