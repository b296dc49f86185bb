"""
Filter Runner

Orchestrates one filter request:
1. Resolves the admission cycle (latest year/round when unspecified)
2. Serves from the response cache when possible
3. Fetches candidates and their history via the repository
4. Runs the prediction engine
5. Serializes and caches the response

This is a pure orchestration layer - NO probability math, NO SQL.
"""

import os
import re
import json
import time
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..cache import ResponseCache
from . import repository
from .classifier import matches_category
from .contracts import AppliedFilters, Candidate, CutoffRecord, FilterOutput, FilterRequest, ProgramKey
from .engine import PredictionEngine
from .constants import (
    CACHE_VERSION,
    DEFAULT_RESULT_LIMIT,
    FILTER_TTL_WITH_RANK,
    FILTER_TTL_WITHOUT_RANK,
    SUGGESTION_TTL,
    TREND_TTL,
    FILTER_OPTIONS_TTL,
)

logger = logging.getLogger(__name__)

RESULT_LIMIT = int(os.getenv("FILTER_RESULT_LIMIT", DEFAULT_RESULT_LIMIT))

INVALID_RANK_MESSAGE = "User rank must be a positive integer number."

_DIGITS = re.compile(r"\d+")


class InvalidRankError(ValueError):
    """Raised when a supplied user rank is not a positive integer."""


def normalize_user_rank(value: Any) -> Optional[int]:
    """
    Validate a user rank from a request.

    Returns None when no rank was given. Accepts positive ints and
    strings of digits.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidRankError(INVALID_RANK_MESSAGE)
    if isinstance(value, int):
        if value <= 0:
            raise InvalidRankError(INVALID_RANK_MESSAGE)
        return value
    if isinstance(value, str) and _DIGITS.fullmatch(value) and int(value) > 0:
        return int(value)
    raise InvalidRankError(INVALID_RANK_MESSAGE)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def resolve_filters(db: Session, request: FilterRequest) -> AppliedFilters:
    """
    Normalize request filters and default the admission cycle.

    Raises:
        InvalidRankError: if the user rank is malformed
    """
    user_rank = normalize_user_rank(request.user_rank)
    year = request.year
    round_no = request.round_no

    if year is None:
        year = repository.max_year(db)
        if year is not None:
            logger.info(f"Default Year applied: {year}")

    if round_no is None and year is not None:
        round_no = repository.max_round(db, year)
        if round_no is not None:
            logger.info(f"Default Round applied: {round_no} for Year {year}")

    return AppliedFilters(
        institute=_clean(request.institute),
        program_name=_clean(request.program_name),
        quota=_clean(request.quota),
        seat_type=_clean(request.seat_type),
        gender=_clean(request.gender),
        institute_type=_clean(request.institute_type),
        user_rank=user_rank,
        year=year,
        round_no=round_no,
    )


def filter_cache_key(filters: AppliedFilters) -> str:
    return f"filter:{CACHE_VERSION}:{json.dumps(filters.model_dump(), sort_keys=True)}"


# =============================================================================
# PIPELINE
# =============================================================================

def run_filter_pipeline(
    db: Session,
    filters: AppliedFilters,
    limit: int = RESULT_LIMIT
) -> FilterOutput:
    """
    Fetch, predict and rank for resolved filters. No caching.

    Args:
        db: Database session
        filters: Resolved filters
        limit: Max current-cycle rows to evaluate

    Returns:
        FilterOutput with ranked candidates
    """
    start_time = time.perf_counter()

    records = repository.fetch_candidates(db, filters, limit)

    history: Dict[ProgramKey, List[CutoffRecord]] = {}
    if filters.user_rank is not None and records:
        keys = list(dict.fromkeys(r.program_key for r in records))
        history = repository.fetch_history(db, keys)

    engine = PredictionEngine()
    ranked = engine.predict_and_rank(records, history, filters.user_rank)
    ranked = [c for c in ranked if matches_category(c.institute_category, filters.institute_type)]

    if not ranked:
        message = "No matches found for the given criteria."
    elif filters.user_rank is not None:
        message = "Filtered results with probability estimation."
    else:
        message = "Filtered results."

    processing_time = (time.perf_counter() - start_time) * 1000
    logger.info(f"✨ Filter pipeline complete: {len(ranked)} results ({processing_time:.2f}ms)")

    return FilterOutput(
        success=True,
        count=len(ranked),
        message=message,
        results=ranked,
        applied_filters=filters,
        processing_time_ms=round(processing_time, 2),
    )


def run_filter(
    db: Session,
    request: FilterRequest,
    cache: ResponseCache
) -> Dict[str, Any]:
    """
    Main entry point for the filter endpoint.

    Returns:
        JSON-ready response dict, possibly from cache

    Raises:
        InvalidRankError: if the user rank is malformed
    """
    filters = resolve_filters(db, request)
    cache_key = filter_cache_key(filters)

    cached = cache.get(cache_key)
    if cached is not None:
        logger.info(f"Serving filter results from cache for key: {cache_key}")
        return cached

    output = run_filter_pipeline(db, filters)
    response_data = serialize_output(output)

    ttl = FILTER_TTL_WITH_RANK if filters.user_rank is not None else FILTER_TTL_WITHOUT_RANK
    cache.set(cache_key, response_data, ttl)
    return response_data


# =============================================================================
# CACHED LOOKUPS
# =============================================================================

def get_institute_suggestions(db: Session, term: str, cache: ResponseCache) -> List[str]:
    cache_key = f"suggest-institutes:{term.lower()}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    suggestions = repository.suggest_institutes(db, term)
    cache.set(cache_key, suggestions, SUGGESTION_TTL)
    return suggestions


def get_program_suggestions(db: Session, term: str, cache: ResponseCache) -> List[str]:
    cache_key = f"suggest-programs:{term.lower()}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    programs = repository.suggest_programs(db, term)
    cache.set(cache_key, programs, SUGGESTION_TTL)
    return programs


def get_rank_trend(db: Session, program_key: ProgramKey, cache: ResponseCache) -> Dict[str, Any]:
    cache_key = f"rank-trends:{json.dumps(program_key.model_dump(), sort_keys=True)}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    records = repository.fetch_trend(db, program_key)
    response_data = {
        "success": True,
        "message": None if records else "No trend data found for the specific criteria.",
        "data": [_serialize_cycle(r) for r in records],
    }
    cache.set(cache_key, response_data, TREND_TTL)
    return response_data


def get_filter_options(db: Session, cache: ResponseCache) -> Dict[str, Any]:
    cache_key = f"filter-options:{CACHE_VERSION}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    options = repository.filter_options(db)
    cache.set(cache_key, options, FILTER_OPTIONS_TTL)
    return options


# =============================================================================
# SERIALIZATION
# =============================================================================

def _serialize_cycle(record: CutoffRecord) -> Dict[str, Any]:
    return {
        "year": record.year,
        "round": record.round,
        "opening_rank": record.opening_rank,
        "closing_rank": record.closing_rank,
    }


def serialize_candidate(candidate: Candidate, position: int) -> Dict[str, Any]:
    """Convert a ranked Candidate to a JSON-serializable dict."""
    record = candidate.record
    data = {
        "rank": position,
        "institute": record.program_key.institute,
        "academic_program_name": record.program_key.program_name,
        "quota": record.program_key.quota,
        "seat_type": record.program_key.seat_type,
        "gender": record.program_key.gender,
        "institute_category": candidate.institute_category.value,
        "year": record.year,
        "round": record.round,
        "opening_rank": record.opening_rank,
        "closing_rank": record.closing_rank,
    }

    prediction = candidate.prediction
    if prediction is not None:
        data.update({
            "projected_rank": prediction.projected_rank,
            "probability": prediction.probability,
            "confidence": prediction.confidence.value,
            "message": prediction.message,
            "historical_data": [_serialize_cycle(r) for r in candidate.historical_data],
        })
    return data


def serialize_output(output: FilterOutput) -> Dict[str, Any]:
    return {
        "success": output.success,
        "count": output.count,
        "message": output.message,
        "filter_data": [serialize_candidate(c, i + 1) for i, c in enumerate(output.results)],
        "applied_filters": output.applied_filters.model_dump(),
    }
