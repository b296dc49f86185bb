"""
Probability Estimator

Maps the gap between a candidate's rank and a projected cutoff to an
admission probability, and picks the advisory message for it.
"""

import math
from typing import Optional

from .constants import (
    Confidence,
    PROBABILITY_WITHIN_CUTOFF,
    PROBABILITY_CEILING,
    PROBABILITY_FLOOR,
    PROBABILITY_DECIMALS,
    MIN_DECAY_SCALE,
    DECAY_SCALE_RATIO,
    NO_HISTORY_MESSAGE,
    UNRELIABLE_MESSAGE,
    LOW_CONFIDENCE_SUFFIX,
    PROBABILITY_MESSAGES,
    FALLBACK_PROBABILITY_MESSAGE,
)


def decay_scale(projected_rank: float) -> float:
    """Characteristic rank distance over which probability decays by 1/e."""
    return max(MIN_DECAY_SCALE, projected_rank * DECAY_SCALE_RATIO)


def estimate_probability(candidate_rank: int, projected_rank: Optional[float]) -> float:
    """
    Estimate the chance of clearing a projected cutoff.

    A rank at or better than the projection is near-certain. Past it,
    probability decays exponentially with the rank gap.

    Args:
        candidate_rank: Candidate's rank (positive)
        projected_rank: Projected closing rank

    Returns:
        Probability in [0.01, 0.98]
    """
    if isinstance(projected_rank, bool) or not isinstance(projected_rank, (int, float)):
        return PROBABILITY_FLOOR
    if math.isnan(projected_rank) or projected_rank <= 0:
        return PROBABILITY_FLOOR

    if candidate_rank <= projected_rank:
        return PROBABILITY_WITHIN_CUTOFF

    diff = candidate_rank - projected_rank
    probability = PROBABILITY_CEILING * math.exp(-diff / decay_scale(projected_rank))
    probability = max(PROBABILITY_FLOOR, min(PROBABILITY_CEILING, probability))
    return round(probability, PROBABILITY_DECIMALS)


def base_message(probability: float) -> str:
    for threshold, message in PROBABILITY_MESSAGES:
        if probability >= threshold:
            return message
    return FALLBACK_PROBABILITY_MESSAGE


def recommendation_message(probability: float, confidence: Confidence) -> str:
    """Advisory text for a probability, hedged by its confidence."""
    if confidence == Confidence.NONE:
        return NO_HISTORY_MESSAGE
    if confidence == Confidence.VERY_LOW:
        return UNRELIABLE_MESSAGE
    if confidence == Confidence.LOW:
        return base_message(probability) + LOW_CONFIDENCE_SUFFIX
    return base_message(probability)
