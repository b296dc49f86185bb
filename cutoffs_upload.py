import os
import sys
import csv
import logging
from dotenv import load_dotenv

from db import Base, engine, get_db
from admission.models import CutoffRow
from admission.logic.repository import parse_rank

load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

BATCH_SIZE = 1000

# CSV header -> CutoffRow attribute
COLUMN_MAP = {
    "Institute": "institute",
    "Academic Program Name": "academic_program_name",
    "Quota": "quota",
    "Seat Type": "seat_type",
    "Gender": "gender",
    "Institute Type": "institute_type",
    "Year": "year",
    "Round": "round",
    "Opening Rank": "opening_rank",
    "Closing Rank": "closing_rank",
}

REQUIRED_COLUMNS = ["Institute", "Academic Program Name", "Quota", "Seat Type", "Gender", "Year", "Round"]


def ensure_cutoff_table():
    CutoffRow.__table__.create(bind=engine, checkfirst=True)


def row_from_csv(entry: dict) -> CutoffRow:
    """Build a CutoffRow from one CSV line; rank cells go through parse_rank."""
    missing = [c for c in REQUIRED_COLUMNS if not (entry.get(c) or "").strip()]
    if missing:
        raise ValueError(f"missing {', '.join(missing)}")

    return CutoffRow(
        institute=entry["Institute"].strip(),
        academic_program_name=entry["Academic Program Name"].strip(),
        quota=entry["Quota"].strip(),
        seat_type=entry["Seat Type"].strip(),
        gender=entry["Gender"].strip(),
        institute_type=(entry.get("Institute Type") or "").strip() or None,
        year=int(entry["Year"]),
        round=int(entry["Round"]),
        opening_rank=parse_rank(entry.get("Opening Rank")),
        closing_rank=parse_rank(entry.get("Closing Rank")),
    )


def import_cutoffs(csv_path: str, session_factory=get_db) -> int:
    """
    Load a cutoff CSV into the cutoff table.

    Returns:
        Number of rows inserted. Lines with missing identity or cycle
        columns are skipped and logged.
    """
    ensure_cutoff_table()
    inserted = 0
    skipped = 0
    batch = []

    with open(csv_path, newline="", encoding="utf-8") as f, session_factory() as db:
        for line_no, entry in enumerate(csv.DictReader(f), start=2):
            try:
                batch.append(row_from_csv(entry))
            except ValueError as e:
                skipped += 1
                logger.warning(f"Skipping line {line_no}: {e}")
                continue

            if len(batch) >= BATCH_SIZE:
                db.add_all(batch)
                db.flush()
                inserted += len(batch)
                batch = []

        if batch:
            db.add_all(batch)
            inserted += len(batch)

    logger.info(f"Imported {inserted} cutoff rows from {csv_path} ({skipped} skipped)")
    return inserted


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python cutoffs_upload.py <cutoffs.csv>")
        sys.exit(1)
    Base.metadata.create_all(bind=engine)
    import_cutoffs(os.path.abspath(sys.argv[1]))
