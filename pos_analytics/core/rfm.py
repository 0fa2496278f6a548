# pos_analytics/core/rfm.py
from datetime import datetime
from typing import Callable, Iterable, List, Sequence, Tuple

from ..exceptions import ValidationError
from ..records import CustomerSegment, CustomerSnapshot, RFMAnalysis, SegmentSummary
from ..utils.date_utils import days_between
from ..utils.math_utils import percentage, round2
from .quintiles import compute_quintiles, score_ascending, score_descending

SegmentRule = Tuple[Callable[[int, int, int], bool], CustomerSegment]

# Evaluated in order; the first matching predicate wins.
SEGMENT_RULES: List[SegmentRule] = [
    (lambda r, f, m: r >= 4 and f >= 4 and m >= 4, CustomerSegment.CHAMPIONS),
    (lambda r, f, m: r >= 3 and f >= 3 and m >= 3, CustomerSegment.LOYAL),
    (lambda r, f, m: r >= 4 and f <= 3 and m <= 3, CustomerSegment.POTENTIAL),
    (lambda r, f, m: r <= 2 and f >= 3 and m >= 3, CustomerSegment.AT_RISK),
    (lambda r, f, m: r <= 2 and f >= 3 and m <= 3, CustomerSegment.NEEDS_ATTENTION),
    (lambda r, f, m: r >= 4 and f <= 2, CustomerSegment.NEW),
    (lambda r, f, m: r <= 2 and f <= 2, CustomerSegment.DORMANT),
]

FALLBACK_SEGMENT = CustomerSegment.OCCASIONAL

def classify_segment(r_score: int, f_score: int, m_score: int) -> CustomerSegment:
    """Assign the marketing segment for a set of RFM scores.

    Combinations no rule covers (e.g. R=3, F=2) are Occasional.

    Args:
        r_score: Recency score (1-5)
        f_score: Frequency score (1-5)
        m_score: Monetary score (1-5)

    Returns:
        CustomerSegment
    """
    for name, score in (('recency', r_score), ('frequency', f_score), ('monetary', m_score)):
        if not isinstance(score, int) or not 1 <= score <= 5:
            raise ValidationError(
                f"Invalid {name} score: {score}. Scores range from 1 to 5",
                code='INVALID_SCORE', details={'score': name, 'value': score}
            )

    for predicate, segment in SEGMENT_RULES:
        if predicate(r_score, f_score, m_score):
            return segment

    return FALLBACK_SEGMENT

def combined_score(r_score: int, f_score: int, m_score: int) -> int:
    """Combine three scores into a single 111-555 number."""
    return r_score * 100 + f_score * 10 + m_score

def measure_customer(customer: CustomerSnapshot, today: datetime) -> RFMAnalysis:
    """Measure recency, frequency and monetary value of a customer.

    Args:
        customer: Customer with the completed sales of the report window
        today: Query instant recency is measured against

    Returns:
        Unscored RFMAnalysis
    """
    sales = customer.sales

    if not sales:
        return RFMAnalysis(
            customer_id=customer.id,
            name=customer.name,
            recency_days=None,
            frequency=0,
            monetary=0.0
        )

    last_purchase = max(sale.sale_date for sale in sales)

    return RFMAnalysis(
        customer_id=customer.id,
        name=customer.name,
        recency_days=days_between(today, last_purchase),
        frequency=len(sales),
        monetary=round2(sum(sale.total_amount for sale in sales))
    )

def score_customers(analyses: Sequence[RFMAnalysis]) -> List[RFMAnalysis]:
    """Score and segment a population of measured customers.

    Customers without purchases are labelled No Activity and kept out of the
    quintile population.

    Args:
        analyses: Output of measure_customer for every customer

    Returns:
        Scored analyses, highest combined score first, customers without
        activity last
    """
    active = [a for a in analyses if a.frequency > 0]
    inactive = [a for a in analyses if a.frequency == 0]

    if active:
        recency_quintiles = compute_quintiles([a.recency_days for a in active])
        frequency_quintiles = compute_quintiles([a.frequency for a in active])
        monetary_quintiles = compute_quintiles([a.monetary for a in active])

        for analysis in active:
            analysis.r_score = score_ascending(analysis.recency_days, recency_quintiles)
            analysis.f_score = score_descending(analysis.frequency, frequency_quintiles)
            analysis.m_score = score_descending(analysis.monetary, monetary_quintiles)
            analysis.rfm_score = combined_score(analysis.r_score, analysis.f_score, analysis.m_score)
            analysis.segment = classify_segment(analysis.r_score, analysis.f_score, analysis.m_score)

    for analysis in inactive:
        analysis.segment = CustomerSegment.NO_ACTIVITY

    active.sort(key=lambda a: a.rfm_score, reverse=True)

    return active + inactive

def summarize_segments(analyses: Iterable[RFMAnalysis]) -> List[SegmentSummary]:
    """Count customers per segment.

    Args:
        analyses: Scored analyses

    Returns:
        One SegmentSummary per segment, in rule order, No Activity last
    """
    counts = {segment: 0 for segment in CustomerSegment}
    total = 0

    for analysis in analyses:
        counts[analysis.segment] += 1
        total += 1

    order = [segment for _, segment in SEGMENT_RULES] + [FALLBACK_SEGMENT, CustomerSegment.NO_ACTIVITY]

    return [
        SegmentSummary(
            segment=segment,
            customers=counts[segment],
            percentage=round2(percentage(counts[segment], total))
        )
        for segment in order
    ]
