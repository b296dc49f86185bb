import os
from contextlib import contextmanager

# db.py refuses to import without a URL; tests run against SQLite
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base
from admission.models import CutoffRow
from admission.logic.contracts import Candidate, CutoffRecord, ProgramKey
from admission.logic.classifier import classify_record


def make_key(institute="National Institute of Technology, Warangal", program="Computer Science and Engineering",
             quota="OS", seat_type="OPEN", gender="Gender-Neutral"):
    return ProgramKey(institute=institute, program_name=program, quota=quota, seat_type=seat_type, gender=gender)


def make_record(closing=None, year=2024, round_no=6, opening=None, institute_type=None, **key_fields):
    return CutoffRecord(
        program_key=make_key(**key_fields),
        year=year,
        round=round_no,
        opening_rank=opening,
        closing_rank=closing,
        institute_type=institute_type,
    )


def make_candidate(closing=None, **fields):
    record = make_record(closing=closing, **fields)
    return Candidate(
        record=record,
        institute_category=classify_record(record.institute_type, record.program_key.institute),
    )


def make_row(institute, program, year, round_no, closing, opening=None, quota="OS",
             seat_type="OPEN", gender="Gender-Neutral", institute_type=None):
    return CutoffRow(
        institute=institute,
        academic_program_name=program,
        quota=quota,
        seat_type=seat_type,
        gender=gender,
        institute_type=institute_type,
        year=year,
        round=round_no,
        opening_rank=opening,
        closing_rank=closing,
    )


@pytest.fixture
def db_session():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    TestingSession = sessionmaker(bind=test_engine, autoflush=False, future=True)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        test_engine.dispose()


@pytest.fixture
def session_factory(db_session):
    """Stand-in for db.get_db that hands out the test session."""
    @contextmanager
    def factory():
        yield db_session
        db_session.commit()
    return factory


@pytest.fixture
def seeded_db(db_session):
    rows = [
        # NIT Warangal CSE: three years, several rounds
        make_row("National Institute of Technology, Warangal", "Computer Science and Engineering", 2022, 1, 3800, 900),
        make_row("National Institute of Technology, Warangal", "Computer Science and Engineering", 2022, 6, 4500, 1000),
        make_row("National Institute of Technology, Warangal", "Computer Science and Engineering", 2023, 6, 4000, 950),
        make_row("National Institute of Technology, Warangal", "Computer Science and Engineering", 2024, 1, 3600, 800),
        make_row("National Institute of Technology, Warangal", "Computer Science and Engineering", 2024, 6, 4200, 850),
        # IIT Bombay CSE
        make_row("Indian Institute of Technology Bombay", "Computer Science and Engineering", 2023, 6, 67, 1),
        make_row("Indian Institute of Technology Bombay", "Computer Science and Engineering", 2024, 6, 68, 1),
        # IIIT Allahabad IT: latest row has a blank closing rank
        make_row("Indian Institute of Information Technology, Allahabad", "Information Technology", 2023, 6, 9000, 4000),
        make_row("Indian Institute of Information Technology, Allahabad", "Information Technology", 2024, 6, None, 4200),
        # GFTI
        make_row("Birla Institute of Technology, Mesra", "Electrical Engineering", 2023, 6, 30000, 21000),
        make_row("Birla Institute of Technology, Mesra", "Electrical Engineering", 2024, 6, 31000, 22000),
        # Same program, female-only pool
        make_row("National Institute of Technology, Warangal", "Computer Science and Engineering", 2024, 6, 7000, 2000,
                 gender="Female-only (including Supernumerary)"),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return db_session
