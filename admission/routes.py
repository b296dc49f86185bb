"""
Admission API Routes

Exposes the prediction engine and cutoff lookups via REST API.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from db import get_db, ping_database
from .cache import ResponseCache, response_cache
from .logic.contracts import FilterRequest, ProgramKey, TrendRequest
from .logic.runner import (
    InvalidRankError,
    run_filter,
    get_institute_suggestions,
    get_program_suggestions,
    get_rank_trend,
    get_filter_options,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admission"])


def get_cache() -> ResponseCache:
    return response_cache


def _error(status_code: int, message: str, error: Optional[Exception] = None) -> JSONResponse:
    content = {"success": False, "message": message}
    if error is not None:
        content["error"] = str(error)
    return JSONResponse(status_code=status_code, content=content)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/health", summary="Database and cache health check")
def health_check(db_session=Depends(get_db), cache: ResponseCache = Depends(get_cache)):
    cache_status = "connected" if cache.is_ready() else "disconnected"
    try:
        db: Session
        with db_session as db:
            ping_database(db)
    except Exception as e:
        logger.error(f"Health check error: {e}")
        return JSONResponse(status_code=500, content={
            "success": False,
            "database": "disconnected",
            "cache": cache_status,
            "error": str(e),
        })

    return {
        "success": True,
        "database": "connected",
        "cache": cache_status,
        "cache_backend": cache.backend,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.post("/filter", summary="Filter cutoffs with probability estimation")
def filter_cutoffs(
    request: FilterRequest,
    db_session=Depends(get_db),
    cache: ResponseCache = Depends(get_cache)
):
    """
    Filter current-cycle cutoffs and, when a rank is given, attach an
    admission probability to each program.

    **Request Body:**
    - `institute`, `AcademicProgramName`: substring filters
    - `quota`, `SeatType`, `gender`: exact filters
    - `instituteType`: IIT / NIT / IIIT / GFTI
    - `userRank`: candidate's rank (positive integer)
    - `Year`, `round`: admission cycle, latest when omitted
    """
    try:
        db: Session
        with db_session as db:
            return run_filter(db, request, cache)
    except InvalidRankError as e:
        return _error(400, str(e))
    except Exception as e:
        logger.exception(f"Filter endpoint error: {e}")
        return _error(500, "Error fetching or processing filter data.", e)


@router.get("/suggest-institutes", summary="Institute name suggestions")
def suggest_institutes(
    term: Optional[str] = Query(default=None),
    db_session=Depends(get_db),
    cache: ResponseCache = Depends(get_cache)
):
    if not term or not term.strip():
        return _error(400, "Search term required")
    try:
        db: Session
        with db_session as db:
            return get_institute_suggestions(db, term.strip(), cache)
    except Exception as e:
        logger.error(f"Institute suggestion error: {e}")
        return _error(500, "Error fetching suggestions", e)


@router.get("/suggest-programs", summary="Program name suggestions")
def suggest_programs(
    term: Optional[str] = Query(default=None),
    db_session=Depends(get_db),
    cache: ResponseCache = Depends(get_cache)
):
    if not term or not term.strip():
        return _error(400, "Search term required")
    try:
        db: Session
        with db_session as db:
            return get_program_suggestions(db, term.strip(), cache)
    except Exception as e:
        logger.error(f"Program suggestion error: {e}")
        return _error(500, "Error fetching program suggestions", e)


@router.post("/rank-trends", summary="Cutoff history for one program")
def rank_trends(
    request: TrendRequest,
    db_session=Depends(get_db),
    cache: ResponseCache = Depends(get_cache)
):
    if not all([request.institute, request.program, request.seat_type, request.quota, request.gender]):
        return _error(
            400,
            "Please provide Institute, Program Name, Seat Type, Quota, and Gender for rank trends.",
        )

    program_key = ProgramKey(
        institute=request.institute,
        program_name=request.program,
        quota=request.quota,
        seat_type=request.seat_type,
        gender=request.gender,
    )
    try:
        db: Session
        with db_session as db:
            return get_rank_trend(db, program_key, cache)
    except Exception as e:
        logger.error(f"Rank trends error: {e}")
        return _error(500, "Error fetching rank trends", e)


@router.get("/filter-options", summary="Distinct values for filter dropdowns")
def filter_options(db_session=Depends(get_db), cache: ResponseCache = Depends(get_cache)):
    try:
        db: Session
        with db_session as db:
            return get_filter_options(db, cache)
    except Exception as e:
        logger.error(f"Filter options error: {e}")
        return _error(500, "Error fetching filter options", e)
