# pos_analytics/core/affinity.py
from collections import Counter
from itertools import combinations
from typing import Iterable, List

from ..records import ProductAffinity, SaleSnapshot
from ..utils.math_utils import round2

def associated_products(sales: Iterable[SaleSnapshot], limit: int = 10) -> List[ProductAffinity]:
    """Find products that are frequently bought together.

    A product is counted once per sale no matter how many lines carry it.
    The correlation of a pair is the share of sales of its less frequent
    product that also contain the other one.

    Args:
        sales: Completed sales with their items
        limit: Maximum number of pairs returned

    Returns:
        Product pairs by correlation then frequency, highest first
    """
    product_counts: Counter = Counter()
    pair_counts: Counter = Counter()
    names = {}

    for sale in sales:
        products = {}
        for item in sale.items:
            products[item.product_id] = item.product_name

        names.update(products)
        product_counts.update(products.keys())

        for pair in combinations(sorted(products), 2):
            pair_counts[pair] += 1

    affinities = []
    for (product1_id, product2_id), frequency in pair_counts.items():
        base = min(product_counts[product1_id], product_counts[product2_id])

        affinities.append(ProductAffinity(
            product1_id=product1_id,
            product1=names[product1_id],
            product2_id=product2_id,
            product2=names[product2_id],
            frequency=frequency,
            correlation=round2(frequency / base * 100)
        ))

    affinities.sort(key=lambda a: (a.correlation, a.frequency), reverse=True)
    return affinities[:limit]
