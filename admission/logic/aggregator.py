"""
Cutoff Aggregator

Collapses raw per-round cutoff rows into one representative row per year.
The representative row is the latest round that has a closing rank.
"""

from typing import Dict, Iterable, List

from .contracts import CutoffRecord, HistoricalSeries, ProgramKey


def aggregate_history(records: Iterable[CutoffRecord]) -> HistoricalSeries:
    """
    Reduce raw cutoff rows for one program into a per-year series.

    Args:
        records: All cutoff rows for a program, in any order

    Returns:
        At most one record per year, most recent year first. Years whose
        rows all lack a closing rank are omitted.
    """
    ordered = sorted(records, key=lambda r: (r.year, r.round), reverse=True)

    series: List[CutoffRecord] = []
    seen_years = set()
    for record in ordered:
        if record.year in seen_years or record.closing_rank is None:
            continue
        seen_years.add(record.year)
        series.append(record)

    return series


def batch_aggregate(
    history: Dict[ProgramKey, List[CutoffRecord]]
) -> Dict[ProgramKey, HistoricalSeries]:
    """Aggregate every program's raw rows."""
    return {key: aggregate_history(rows) for key, rows in history.items()}
