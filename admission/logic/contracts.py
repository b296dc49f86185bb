"""
Data Contracts for the Prediction Engine

Defines Pydantic models for the raw cutoff rows the engine consumes, the
prediction it produces, and the filter request/response at the API boundary.
"""

from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator

from .constants import Confidence, InstituteCategory


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class ProgramKey(BaseModel):
    """
    Identity of one seat offering.
    Equality is exact, case-sensitive match on all five fields.
    """
    institute: str
    program_name: str
    quota: str
    seat_type: str
    gender: str

    class Config:
        frozen = True

    def as_tuple(self) -> tuple:
        return (self.institute, self.program_name, self.quota, self.seat_type, self.gender)


class CutoffRecord(BaseModel):
    """One observed (program, year, round) cutoff row."""
    program_key: ProgramKey
    year: int
    round: int
    opening_rank: Optional[int] = None
    closing_rank: Optional[int] = None
    institute_type: Optional[str] = None

    class Config:
        frozen = True


# Aggregated history: one record per year, most recent year first
HistoricalSeries = List[CutoffRecord]


class FilterRequest(BaseModel):
    """
    Request body for the filter endpoint.
    Accepts the legacy camel-case field names as well as snake_case.
    """
    institute: Optional[str] = None
    program_name: Optional[str] = Field(default=None, alias="AcademicProgramName")
    quota: Optional[str] = None
    seat_type: Optional[str] = Field(default=None, alias="SeatType")
    gender: Optional[str] = None
    institute_type: Optional[str] = Field(default=None, alias="instituteType")
    # Raw value; the runner validates it so bad input gets the 400 contract
    user_rank: Optional[Any] = Field(default=None, alias="userRank")
    year: Optional[int] = Field(default=None, alias="Year")
    round_no: Optional[int] = Field(default=None, alias="round")

    class Config:
        populate_by_name = True

    @field_validator("year", "round_no", mode="before")
    @classmethod
    def blank_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TrendRequest(BaseModel):
    """Request body for the rank trends endpoint."""
    institute: Optional[str] = None
    program: Optional[str] = None
    quota: Optional[str] = None
    seat_type: Optional[str] = Field(default=None, alias="SeatType")
    gender: Optional[str] = None

    class Config:
        populate_by_name = True


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class Projection(BaseModel):
    projected_rank: int = Field(ge=1)


class PredictionResult(BaseModel):
    """Admission estimate for one program."""
    projected_rank: Optional[int] = None
    probability: float = Field(ge=0.0, le=0.99)
    confidence: Confidence
    message: str = ""


class Candidate(BaseModel):
    """
    A current-cycle cutoff row joined with its prediction.
    This is the unit the ranker sorts.
    """
    record: CutoffRecord
    institute_category: InstituteCategory = InstituteCategory.UNKNOWN
    prediction: Optional[PredictionResult] = None
    historical_data: List[CutoffRecord] = Field(default_factory=list)


class AppliedFilters(BaseModel):
    """Filters after defaults were resolved; also the cache key source."""
    institute: Optional[str] = None
    program_name: Optional[str] = None
    quota: Optional[str] = None
    seat_type: Optional[str] = None
    gender: Optional[str] = None
    institute_type: Optional[str] = None
    user_rank: Optional[int] = None
    year: Optional[int] = None
    round_no: Optional[int] = None


class FilterOutput(BaseModel):
    """Response of the filter pipeline."""
    success: bool = True
    count: int = 0
    message: str = ""
    results: List[Candidate] = Field(default_factory=list)
    applied_filters: AppliedFilters = Field(default_factory=AppliedFilters)
    processing_time_ms: Optional[float] = None
