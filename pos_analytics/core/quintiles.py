# pos_analytics/core/quintiles.py
import math
from typing import List, Sequence
import numpy as np

from ..exceptions import CalculationError

QUINTILE_POINTS = (0.2, 0.4, 0.6, 0.8)

def compute_quintiles(values: Sequence[float]) -> List[float]:
    """Compute the four cut-points splitting a population into five bins.

    The cut-points are the elements of the ascending-sorted population at
    indices floor(n * 0.2), floor(n * 0.4), floor(n * 0.6) and floor(n * 0.8).
    With a single value all four cut-points equal that value.

    Args:
        values: Metric values of the population

    Returns:
        List [q1, q2, q3, q4]

    Raises:
        CalculationError if the population is empty
    """
    if len(values) == 0:
        raise CalculationError("Cannot compute quintiles of an empty population", code='EMPTY_POPULATION')

    ordered = np.sort(np.asarray(values, dtype=float))
    n = len(ordered)

    return [float(ordered[int(math.floor(n * point))]) for point in QUINTILE_POINTS]

def score_ascending(value: float, quintiles: Sequence[float]) -> int:
    """Score a value where smaller is better (recency).

    Args:
        value: Value to score
        quintiles: Cut-points from compute_quintiles

    Returns:
        Score from 1 to 5
    """
    q1, q2, q3, q4 = quintiles

    if value <= q1:
        return 5
    elif value <= q2:
        return 4
    elif value <= q3:
        return 3
    elif value <= q4:
        return 2
    return 1

def score_descending(value: float, quintiles: Sequence[float]) -> int:
    """Score a value where larger is better (frequency, monetary).

    Args:
        value: Value to score
        quintiles: Cut-points from compute_quintiles

    Returns:
        Score from 1 to 5
    """
    q1, q2, q3, q4 = quintiles

    if value >= q4:
        return 5
    elif value >= q3:
        return 4
    elif value >= q2:
        return 3
    elif value >= q1:
        return 2
    return 1
