"""
Confidence Scorer

Rates how far a projection can be trusted from the number of historical
points behind it and how much those points disagree.
"""

import math
from typing import Optional, Sequence

from .constants import Confidence, CONFIDENCE_TABLE, DISPERSION_BANDS


def population_std_dev(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def relative_std_dev(closing_ranks: Sequence[int], projected_rank: Optional[int]) -> float:
    """Dispersion of the history relative to the projection."""
    if not closing_ranks or not projected_rank or projected_rank <= 0:
        return 0.0
    return population_std_dev(closing_ranks) / projected_rank


def dispersion_band(relative_dispersion: float) -> int:
    """Column index into CONFIDENCE_TABLE."""
    for index, upper in enumerate(DISPERSION_BANDS):
        if relative_dispersion < upper:
            return index
    return len(DISPERSION_BANDS)


def score_confidence(closing_ranks: Sequence[int], projected_rank: Optional[int]) -> Confidence:
    """
    Map sample size and dispersion to a confidence label.

    Args:
        closing_ranks: Closing ranks that fed the projection
        projected_rank: The projection they produced

    Returns:
        Confidence label; never VERY_HIGH with fewer than 4 points
    """
    n_points = len(closing_ranks)
    if n_points == 0:
        return Confidence.NONE
    if n_points == 1:
        return Confidence.VERY_LOW

    row = CONFIDENCE_TABLE[min(n_points, 4)]
    return row[dispersion_band(relative_std_dev(closing_ranks, projected_rank))]
