"""
Cutoff Repository

Reads raw cutoff rows from the cutoff table and converts them into
CutoffRecord contracts.

This is a pure READ + TRANSFORM layer:
- NO probability logic
- NO ranking (the category predicate only restates the classifier in SQL)
- NO DB writes

Query ordering here only decides which rows survive the limit. The
display order is always rebuilt in memory by the ranker.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import and_, func, not_, or_
from sqlalchemy.orm import Session

from ..models import CutoffRow
from .contracts import AppliedFilters, CutoffRecord, ProgramKey
from .constants import (
    CATEGORY_NAME_PATTERNS,
    DEFAULT_RESULT_LIMIT,
    SUGGESTION_LIMIT,
    InstituteCategory,
)

logger = logging.getLogger(__name__)

# Keys per OR-group in the history query; keeps SQL expression depth bounded
HISTORY_BATCH_SIZE = 200

_DIGITS = re.compile(r"\d+")


def parse_rank(raw: Any) -> Optional[int]:
    """
    Convert a stored rank cell to an optional integer.

    Blank cells, non-digit text (e.g. "123P") and non-positive numbers
    all become None.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() and raw > 0 else None

    text = str(raw).strip()
    if text.endswith(".0"):
        text = text[:-2]
    if not _DIGITS.fullmatch(text):
        return None
    value = int(text)
    return value if value > 0 else None


def row_to_record(row: CutoffRow) -> CutoffRecord:
    return CutoffRecord(
        program_key=ProgramKey(
            institute=row.institute,
            program_name=row.academic_program_name,
            quota=row.quota,
            seat_type=row.seat_type,
            gender=row.gender,
        ),
        year=row.year,
        round=row.round,
        opening_rank=row.opening_rank,
        closing_rank=row.closing_rank,
        institute_type=row.institute_type,
    )


def _key_clause(key: ProgramKey):
    return and_(
        CutoffRow.institute == key.institute,
        CutoffRow.academic_program_name == key.program_name,
        CutoffRow.quota == key.quota,
        CutoffRow.seat_type == key.seat_type,
        CutoffRow.gender == key.gender,
    )


def _named_like(lowered, long_name: str, prefix: str):
    return or_(lowered.like(f"%{long_name}%"), lowered.like(f"{prefix}%"))


def category_clause(requested: Optional[str]):
    """
    SQL predicate selecting rows of one institute category.

    Mirrors classify_record: a non-blank institute_type wins over the
    institute name, exact codes beat name patterns, patterns are tried
    in CATEGORY_NAME_PATTERNS order and GFTI is whatever named row is
    left over.

    Returns None when the request does not narrow by a known category
    (blank, "ALL", UNKNOWN or unrecognised text).
    """
    if not requested or not requested.strip():
        return None
    wanted = requested.strip().upper()
    codes = [c.value for c in InstituteCategory if c != InstituteCategory.UNKNOWN]
    if wanted not in codes:
        return None

    label = func.coalesce(func.nullif(func.trim(CutoffRow.institute_type), ""), CutoffRow.institute)
    code = func.upper(func.trim(label))
    lowered = func.lower(func.trim(label))
    not_other_codes = [code != c for c in codes if c != wanted]

    if wanted == InstituteCategory.GFTI.value:
        return or_(
            code == wanted,
            and_(
                *not_other_codes,
                *[not_(_named_like(lowered, long_name, prefix)) for _, long_name, prefix in CATEGORY_NAME_PATTERNS],
                func.trim(label) != "",
            ),
        )

    earlier = []
    for category, long_name, prefix in CATEGORY_NAME_PATTERNS:
        if category.value == wanted:
            return or_(
                code == wanted,
                and_(*not_other_codes, *earlier, _named_like(lowered, long_name, prefix)),
            )
        earlier.append(not_(_named_like(lowered, long_name, prefix)))
    return None


# =============================================================================
# CYCLE DEFAULTS
# =============================================================================

def max_year(db: Session) -> Optional[int]:
    return db.query(func.max(CutoffRow.year)).scalar()


def max_round(db: Session, year: int) -> Optional[int]:
    return db.query(func.max(CutoffRow.round)).filter(CutoffRow.year == year).scalar()


# =============================================================================
# CANDIDATES & HISTORY
# =============================================================================

def fetch_candidates(
    db: Session,
    filters: AppliedFilters,
    limit: int = DEFAULT_RESULT_LIMIT
) -> List[CutoffRecord]:
    """
    Fetch current-cycle rows matching the request filters.

    Args:
        db: Database session
        filters: Resolved filters (year/round already defaulted)
        limit: Max rows to return

    Returns:
        List of CutoffRecord
    """
    query = db.query(CutoffRow)

    if filters.year is not None:
        query = query.filter(CutoffRow.year == filters.year)
    if filters.round_no is not None:
        query = query.filter(CutoffRow.round == filters.round_no)

    # Substring filters
    if filters.institute:
        query = query.filter(CutoffRow.institute.ilike(f"%{filters.institute}%"))
    if filters.program_name:
        query = query.filter(CutoffRow.academic_program_name.ilike(f"%{filters.program_name}%"))

    # Equality filters
    if filters.quota:
        query = query.filter(CutoffRow.quota == filters.quota)
    if filters.seat_type:
        query = query.filter(CutoffRow.seat_type == filters.seat_type)
    if filters.gender:
        query = query.filter(CutoffRow.gender == filters.gender)

    # Narrow by category before the limit so far-off matches still survive
    category = category_clause(filters.institute_type)
    if category is not None:
        query = query.filter(category)

    if filters.user_rank is not None:
        query = query.filter(CutoffRow.closing_rank.isnot(None)).order_by(
            func.abs(CutoffRow.closing_rank - filters.user_rank),
            CutoffRow.id,
        )
    else:
        query = query.order_by(
            CutoffRow.institute,
            CutoffRow.academic_program_name,
            CutoffRow.closing_rank.is_(None),
            CutoffRow.closing_rank,
            CutoffRow.id,
        )

    rows = query.limit(limit).all()
    logger.info(f"Fetched {len(rows)} candidate rows for {filters.year}/{filters.round_no}")
    return [row_to_record(row) for row in rows]


def fetch_history(
    db: Session,
    program_keys: Sequence[ProgramKey]
) -> Dict[ProgramKey, List[CutoffRecord]]:
    """
    Fetch every year and round for the given programs.

    Args:
        db: Database session
        program_keys: Distinct program identities

    Returns:
        Dict mapping each key that has rows to its raw records
    """
    keys = list(dict.fromkeys(program_keys))
    history: Dict[ProgramKey, List[CutoffRecord]] = {}
    if not keys:
        return history

    for start in range(0, len(keys), HISTORY_BATCH_SIZE):
        batch = keys[start:start + HISTORY_BATCH_SIZE]
        rows = (
            db.query(CutoffRow)
            .filter(or_(*[_key_clause(key) for key in batch]))
            .order_by(CutoffRow.year.desc(), CutoffRow.round.desc())
            .all()
        )
        for row in rows:
            record = row_to_record(row)
            history.setdefault(record.program_key, []).append(record)

    logger.info(f"Fetched history for {len(history)} of {len(keys)} programs")
    return history


def fetch_trend(db: Session, program_key: ProgramKey) -> List[CutoffRecord]:
    """All rows of one program, oldest cycle first."""
    rows = (
        db.query(CutoffRow)
        .filter(_key_clause(program_key))
        .order_by(CutoffRow.year.asc(), CutoffRow.round.asc())
        .all()
    )
    return [row_to_record(row) for row in rows]


# =============================================================================
# SUGGESTIONS & OPTIONS
# =============================================================================

def suggest_institutes(db: Session, term: str, limit: int = SUGGESTION_LIMIT) -> List[str]:
    rows = (
        db.query(CutoffRow.institute)
        .filter(CutoffRow.institute.ilike(f"%{term}%"))
        .distinct()
        .order_by(CutoffRow.institute.asc())
        .limit(limit)
        .all()
    )
    return [r[0] for r in rows]


def suggest_programs(db: Session, term: str, limit: int = SUGGESTION_LIMIT) -> List[str]:
    rows = (
        db.query(CutoffRow.academic_program_name)
        .filter(CutoffRow.academic_program_name.ilike(f"%{term}%"))
        .distinct()
        .order_by(CutoffRow.academic_program_name.asc())
        .limit(limit)
        .all()
    )
    return [r[0] for r in rows]


def _distinct(db: Session, column, descending: bool = False) -> List[Any]:
    order = column.desc() if descending else column.asc()
    rows = db.query(column).filter(column.isnot(None)).distinct().order_by(order).all()
    return [r[0] for r in rows]


def filter_options(db: Session) -> Dict[str, List[Any]]:
    """Distinct values for every filter dropdown."""
    return {
        "years": _distinct(db, CutoffRow.year, descending=True),
        "quotas": _distinct(db, CutoffRow.quota),
        "seat_types": _distinct(db, CutoffRow.seat_type),
        "genders": _distinct(db, CutoffRow.gender),
        "rounds": _distinct(db, CutoffRow.round),
    }
