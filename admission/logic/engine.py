"""
Prediction Engine

Main orchestrator that combines the core components into a single pipeline.
This is the primary entry point for scoring and ordering candidates.
"""

from typing import Dict, List, Optional

from .contracts import Candidate, CutoffRecord, HistoricalSeries, PredictionResult, ProgramKey
from .aggregator import aggregate_history
from .projector import project_rank, valid_closing_ranks
from .estimator import estimate_probability, recommendation_message
from .confidence import score_confidence
from .classifier import classify_record
from .ranker import rank_candidates
from .constants import Confidence, NO_HISTORY_MESSAGE, UNRELIABLE_MESSAGE


class PredictionEngine:
    """
    Pure pipeline over already-fetched rows.

    Pipeline flow:
    1. Aggregation - Collapse each program's history to one row per year
    2. Projection - Project next cycle's closing rank
    3. Estimation - Probability and confidence from the projection
    4. Classification - Tag each institute with its tier
    5. Ranking - Total order for display
    """

    def __init__(self):
        self.version = "1.0.0"

    def predict(self, candidate_rank: int, series: HistoricalSeries) -> PredictionResult:
        """
        Predict admission for one program.

        Args:
            candidate_rank: Candidate's rank (already validated positive)
            series: Aggregated history, most recent year first

        Returns:
            PredictionResult; insufficient history is a defined result,
            not an error
        """
        if not series:
            return PredictionResult(
                projected_rank=None,
                probability=0,
                confidence=Confidence.NONE,
                message=NO_HISTORY_MESSAGE,
            )

        projection = project_rank(series)
        if projection is None:
            # Rows exist but none carries a usable closing rank
            return PredictionResult(
                projected_rank=None,
                probability=0,
                confidence=Confidence.VERY_LOW,
                message=UNRELIABLE_MESSAGE,
            )

        probability = estimate_probability(candidate_rank, projection.projected_rank)
        confidence = score_confidence(valid_closing_ranks(series), projection.projected_rank)

        return PredictionResult(
            projected_rank=projection.projected_rank,
            probability=probability,
            confidence=confidence,
            message=recommendation_message(probability, confidence),
        )

    def predict_and_rank(
        self,
        candidates: List[CutoffRecord],
        history: Dict[ProgramKey, List[CutoffRecord]],
        candidate_rank: Optional[int] = None
    ) -> List[Candidate]:
        """
        Score every current-cycle row and return them in display order.

        Args:
            candidates: Current-cycle cutoff rows
            history: Raw rows for every program, all years and rounds
            candidate_rank: Candidate's rank, or None for a name-ordered list

        Returns:
            Ranked list of Candidate objects
        """
        scored: List[Candidate] = []
        for record in candidates:
            category = classify_record(record.institute_type, record.program_key.institute)

            if candidate_rank is None:
                scored.append(Candidate(record=record, institute_category=category))
                continue

            series = aggregate_history(history.get(record.program_key, []))
            scored.append(Candidate(
                record=record,
                institute_category=category,
                prediction=self.predict(candidate_rank, series),
                historical_data=series,
            ))

        return rank_candidates(scored, candidate_rank)


# Convenience function for simple usage
def predict_and_rank(
    candidates: List[CutoffRecord],
    history: Dict[ProgramKey, List[CutoffRecord]],
    candidate_rank: Optional[int] = None
) -> List[Candidate]:
    engine = PredictionEngine()
    return engine.predict_and_rank(candidates, history, candidate_rank)
