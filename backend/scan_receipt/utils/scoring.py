"""
Selection and confidence scoring for extraction results.

Amount selection is a strict ranking, not a weighted score:
priority tier first, then position in the text, then value.
"""

from decimal import Decimal
from typing import List, Optional, Tuple

from .candidates import AmountCandidate

__all__ = [
    'amount_rank', 'select_best_amount', 'select_top_amounts',
    'calculate_confidence', 'FIELD_WEIGHTS', 'COMPLETENESS_BONUS', 'MAX_CONFIDENCE',
]

# Points awarded per extracted field
FIELD_WEIGHTS = {
    'amount': 40,
    'date': 30,
    'merchant': 30,
}

# Extra points when every field was extracted
COMPLETENESS_BONUS = 10

MAX_CONFIDENCE = 100


def amount_rank(candidate: AmountCandidate) -> Tuple[int, int, Decimal]:
    """
    Sort key for amount candidates (ascending = better).

    - Lower priority tier first
    - Later position in text (totals are printed after subtotals)
    - Larger value
    """
    return (candidate.priority, -candidate.position, -candidate.value)


def select_best_amount(
    candidates: List[AmountCandidate]
) -> Optional[AmountCandidate]:
    """
    Select best amount candidate.

    Args:
        candidates: List of AmountCandidate objects

    Returns:
        Best candidate or None
    """
    if not candidates:
        return None

    return min(candidates, key=amount_rank)


def select_top_amounts(
    candidates: List[AmountCandidate],
    top_n: int = 3
) -> List[AmountCandidate]:
    """Select top N amount candidates in ranking order."""
    return sorted(candidates, key=amount_rank)[:top_n]


def calculate_confidence(
    amount: Optional[Decimal],
    date: Optional[str],
    merchant: Optional[str]
) -> int:
    """
    Calculate completeness confidence from which fields were extracted.

    Only presence matters, never the literal values:
    - amount: +40
    - date: +30
    - merchant: +30
    - all three: +10 bonus
    Capped at 100.

    Args:
        amount: Extracted amount or None
        date: Extracted ISO date or None
        merchant: Extracted merchant or None

    Returns:
        Integer score between 0 and 100
    """
    present = {
        'amount': amount is not None,
        'date': date is not None,
        'merchant': merchant is not None,
    }

    score = sum(FIELD_WEIGHTS[field] for field, found in present.items() if found)

    if all(present.values()):
        score += COMPLETENESS_BONUS

    return min(score, MAX_CONFIDENCE)
