"""
Tests for the cutoff CSV ingest.
"""

import pytest

from admission.models import CutoffRow
from cutoffs_upload import import_cutoffs, row_from_csv

HEADER = "Institute,Academic Program Name,Quota,Seat Type,Gender,Year,Round,Opening Rank,Closing Rank\n"


def test_row_from_csv_parses_rank_text():
    row = row_from_csv({
        "Institute": " NIT Trichy ",
        "Academic Program Name": "Civil Engineering",
        "Quota": "OS",
        "Seat Type": "OPEN",
        "Gender": "Gender-Neutral",
        "Year": "2024",
        "Round": "6",
        "Opening Rank": "12P",
        "Closing Rank": "",
    })

    assert row.institute == "NIT Trichy"
    assert row.institute_type is None
    assert (row.year, row.round) == (2024, 6)
    assert row.opening_rank is None
    assert row.closing_rank is None


def test_row_from_csv_requires_identity():
    with pytest.raises(ValueError):
        row_from_csv({"Institute": "NIT Trichy", "Year": "2024", "Round": "6"})


def test_import_cutoffs(tmp_path, db_session, session_factory):
    csv_path = tmp_path / "cutoffs.csv"
    csv_path.write_text(
        HEADER
        + "NIT Trichy,Civil Engineering,OS,OPEN,Gender-Neutral,2024,6,8000,12000\n"
        + "NIT Trichy,Civil Engineering,OS,OPEN,Gender-Neutral,2024,5,7900,\n"
        + ",Civil Engineering,OS,OPEN,Gender-Neutral,2024,4,7000,9000\n",
        encoding="utf-8",
    )

    inserted = import_cutoffs(str(csv_path), session_factory=session_factory)

    assert inserted == 2
    rows = db_session.query(CutoffRow).order_by(CutoffRow.round).all()
    assert [(r.round, r.closing_rank) for r in rows] == [(5, None), (6, 12000)]
