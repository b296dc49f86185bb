"""
Ranker

Imposes a deterministic total order over candidates for display.

With a candidate rank, programs are split around an anchor rank into an
achievable group and an aspirational group, then ordered by institute
category, closing rank and name. Without one, only category and names
are used.
"""

from typing import List, Optional, Tuple

from .contracts import Candidate
from .constants import (
    ANCHOR_OFFSET_TABLE,
    BEYOND_TABLE_OFFSET,
    CATEGORY_PRECEDENCE,
    MISSING_RANK,
)


def anchor_offset(candidate_rank: int) -> int:
    """Offset below the candidate's rank; wider for larger rank numbers."""
    for upper, offset in ANCHOR_OFFSET_TABLE:
        if candidate_rank <= upper:
            return offset
    return BEYOND_TABLE_OFFSET


def anchor_rank(candidate_rank: int) -> int:
    return max(1, candidate_rank - anchor_offset(candidate_rank))


def _closing_sort_value(candidate: Candidate) -> float:
    closing = candidate.record.closing_rank
    if closing is None or closing <= 0:
        return MISSING_RANK
    return closing


def _identity_key(candidate: Candidate) -> Tuple:
    record = candidate.record
    return (
        record.program_key.institute,
        record.program_key.program_name,
        record.program_key.quota,
        record.program_key.seat_type,
        record.program_key.gender,
        record.year,
        record.round,
    )


def is_achievable(candidate: Candidate, anchor: int) -> bool:
    return _closing_sort_value(candidate) >= anchor


def rank_candidates(
    candidates: List[Candidate],
    candidate_rank: Optional[int] = None
) -> List[Candidate]:
    """
    Sort candidates for display.

    Args:
        candidates: Candidates in any order
        candidate_rank: Candidate's rank, or None to sort by name only

    Returns:
        New list in display order
    """
    if candidate_rank is None:
        return sorted(
            candidates,
            key=lambda c: (CATEGORY_PRECEDENCE[c.institute_category],) + _identity_key(c),
        )

    anchor = anchor_rank(candidate_rank)

    def sort_key(c: Candidate) -> Tuple:
        group = 1 if is_achievable(c, anchor) else 2
        return (
            group,
            CATEGORY_PRECEDENCE[c.institute_category],
            _closing_sort_value(c),
        ) + _identity_key(c)

    return sorted(candidates, key=sort_key)
