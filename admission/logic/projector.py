"""
Rank Projector

Projects next cycle's closing rank from an aggregated history.

The projection is a recency-weighted mean of the latest closing ranks,
nudged by a bounded momentum term when the two most recent years moved
sharply.
"""

import math
from typing import List, Optional

from .contracts import HistoricalSeries, Projection
from .constants import (
    RECENCY_WEIGHTS,
    FALLBACK_RECENCY_WEIGHT,
    MAX_PROJECTION_YEARS,
    MOMENTUM_THRESHOLD,
    MOMENTUM_DAMPING,
    MOMENTUM_CAP,
)


def recency_weight(index: int) -> float:
    """Weight of the index-th most recent year."""
    if index < len(RECENCY_WEIGHTS):
        return RECENCY_WEIGHTS[index]
    return FALLBACK_RECENCY_WEIGHT


def valid_closing_ranks(series: HistoricalSeries) -> List[int]:
    """
    Closing ranks usable for projection, most recent first.
    Only the latest MAX_PROJECTION_YEARS entries are considered.
    """
    ranks = [r.closing_rank for r in series if r.closing_rank is not None and r.closing_rank > 0]
    return ranks[:MAX_PROJECTION_YEARS]


def weighted_mean(ranks: List[int]) -> Optional[float]:
    total_weight = 0.0
    total = 0.0
    for index, rank in enumerate(ranks):
        weight = recency_weight(index)
        total += rank * weight
        total_weight += weight

    if total_weight <= 0:
        return None
    return total / total_weight


def momentum_adjustment(base: float, ranks: List[int]) -> float:
    """
    Bounded nudge from the latest year-on-year change.

    Args:
        base: Weighted mean projection
        ranks: Valid closing ranks, most recent first

    Returns:
        Amount to add to base, never more than 10% of it either way
    """
    if len(ranks) < 2:
        return 0.0

    latest, previous = ranks[0], ranks[1]
    if previous is None or previous <= 0:
        return 0.0

    relative_change = (latest - previous) / previous
    if abs(relative_change) <= MOMENTUM_THRESHOLD:
        return 0.0

    if latest < previous:
        # Tightened: cutoff rank got harder to clear
        return base * max(-MOMENTUM_CAP, relative_change * MOMENTUM_DAMPING)
    return base * min(MOMENTUM_CAP, relative_change * MOMENTUM_DAMPING)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def project_rank(series: HistoricalSeries) -> Optional[Projection]:
    """
    Project the next cycle's closing rank.

    Args:
        series: Aggregated history, most recent year first

    Returns:
        Projection, or None when there is no usable history
    """
    ranks = valid_closing_ranks(series)
    if not ranks:
        return None

    base = weighted_mean(ranks)
    if base is None:
        return None

    projected = base + momentum_adjustment(base, ranks)
    return Projection(projected_rank=max(1, round_half_up(projected)))
