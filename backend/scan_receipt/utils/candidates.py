"""
Candidate dataclasses for extraction scoring.

Each candidate represents a potential extracted value with the metadata
used for selection. Candidates never outlive a single parse call.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Set


@dataclass(frozen=True)
class AmountCandidate:
    """
    Candidate for the receipt total.

    Selection factors:
    - priority: Index of the pattern family that matched (lower = stronger)
    - position: Match start offset (later = more likely the grand total)
    - value: Parsed amount (larger wins a remaining tie)
    """
    value: Decimal
    priority: int
    position: int
    pattern_name: str = ""
    raw_text: str = ""  # Original matched text


@dataclass(frozen=True)
class ExclusionZone:
    """Character interval [start, end) covered by a subtotal match."""
    start: int
    end: int
    raw_text: str = ""

    def offsets(self) -> Set[int]:
        return set(range(self.start, self.end))


def create_amount_candidate(
    value: Decimal,
    priority: int,
    position: int,
    pattern_name: str = "",
    raw_text: str = ""
) -> AmountCandidate:
    """
    Create AmountCandidate from a pattern match.

    Args:
        value: Parsed amount
        priority: Pattern family index
        position: Match start offset in the full text
        pattern_name: Name of pattern that matched
        raw_text: Original matched text

    Returns:
        AmountCandidate
    """
    return AmountCandidate(
        value=value,
        priority=priority,
        position=position,
        pattern_name=pattern_name,
        raw_text=raw_text
    )


def zones_to_offsets(zones) -> Set[int]:
    """Union the offsets of all zones; overlapping zones collapse."""
    excluded: Set[int] = set()
    for zone in zones:
        excluded.update(zone.offsets())
    return excluded
