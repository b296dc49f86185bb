"""
Prediction Logic Module

Provides the deterministic cutoff projection and ranking engine for
seat-allocation programs.
"""

from .contracts import (
    ProgramKey,
    CutoffRecord,
    HistoricalSeries,
    Projection,
    PredictionResult,
    Candidate,
    FilterRequest,
    AppliedFilters,
    FilterOutput,
)
from .engine import PredictionEngine, predict_and_rank
from .constants import Confidence, InstituteCategory

__all__ = [
    # Main engine
    "PredictionEngine",
    "predict_and_rank",

    # Contracts
    "ProgramKey",
    "CutoffRecord",
    "HistoricalSeries",
    "Projection",
    "PredictionResult",
    "Candidate",
    "FilterRequest",
    "AppliedFilters",
    "FilterOutput",

    # Enums
    "Confidence",
    "InstituteCategory",
]
