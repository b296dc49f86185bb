"""
Tests for the recommendation ranker.
"""

import itertools
import random

import pytest

from conftest import make_candidate
from admission.logic.ranker import anchor_offset, anchor_rank, rank_candidates


def names(ranked):
    return [(c.record.program_key.institute, c.record.closing_rank) for c in ranked]


@pytest.mark.parametrize("rank, offset", [
    (1, 1000),
    (4000, 1000),
    (10000, 1000),
    (10001, 1500),
    (25000, 2200),
    (55000, 4000),
    (100000, 6000),
    (200000, 20000),
    (210000, 20000),
    (210001, 30000),
    (900000, 30000),
])
def test_anchor_offset_table(rank, offset):
    assert anchor_offset(rank) == offset


def test_anchor_offset_is_monotone():
    offsets = [anchor_offset(r) for r in range(1, 400000, 777)]
    assert offsets == sorted(offsets)


def test_anchor_rank_floors_at_one():
    assert anchor_rank(500) == 1
    assert anchor_rank(4000) == 3000


def test_same_group_same_category_orders_by_closing_rank():
    ranked = rank_candidates([
        make_candidate(closing=3500, institute="NIT Agartala"),
        make_candidate(closing=3000, institute="NIT Trichy"),
    ], 4000)

    assert names(ranked) == [("NIT Trichy", 3000), ("NIT Agartala", 3500)]


def test_achievable_group_comes_before_aspirational():
    # anchor for 4000 is 3000
    ranked = rank_candidates([
        make_candidate(closing=2000, institute="IIT Bombay"),
        make_candidate(closing=3000, institute="Birla Institute of Technology, Mesra"),
        make_candidate(closing=5000, institute="NIT Trichy"),
    ], 4000)

    assert names(ranked) == [
        ("NIT Trichy", 5000),
        ("Birla Institute of Technology, Mesra", 3000),
        ("IIT Bombay", 2000),
    ]


def test_category_precedes_closing_rank_within_group():
    ranked = rank_candidates([
        make_candidate(closing=3200, institute="NIT Trichy"),
        make_candidate(closing=3900, institute="IIIT Hyderabad"),
        make_candidate(closing=3500, institute="IIT Bhilai"),
    ], 4000)

    assert names(ranked) == [("IIT Bhilai", 3500), ("NIT Trichy", 3200), ("IIIT Hyderabad", 3900)]


def test_institute_name_breaks_ties():
    ranked = rank_candidates([
        make_candidate(closing=3500, institute="NIT Trichy"),
        make_candidate(closing=3500, institute="NIT Agartala"),
    ], 4000)

    assert names(ranked) == [("NIT Agartala", 3500), ("NIT Trichy", 3500)]


def test_missing_closing_rank_sorts_last_in_its_category():
    ranked = rank_candidates([
        make_candidate(closing=None, institute="NIT Agartala"),
        make_candidate(closing=9000, institute="NIT Trichy"),
    ], 4000)

    assert names(ranked) == [("NIT Trichy", 9000), ("NIT Agartala", None)]


def test_without_rank_orders_by_category_then_names():
    ranked = rank_candidates([
        make_candidate(closing=100, institute="NIT Trichy", program="Computer Science and Engineering"),
        make_candidate(closing=99999, institute="NIT Trichy", program="Civil Engineering"),
        make_candidate(closing=5000, institute="IIT Bombay"),
        make_candidate(closing=1, institute="Birla Institute of Technology, Mesra"),
    ])

    assert [(c.record.program_key.institute, c.record.program_key.program_name) for c in ranked] == [
        ("IIT Bombay", "Computer Science and Engineering"),
        ("NIT Trichy", "Civil Engineering"),
        ("NIT Trichy", "Computer Science and Engineering"),
        ("Birla Institute of Technology, Mesra", "Computer Science and Engineering"),
    ]


@pytest.mark.parametrize("candidate_rank", [None, 4000, 60000])
def test_order_is_deterministic(candidate_rank):
    pool = [
        make_candidate(closing=3500, institute="NIT Trichy"),
        make_candidate(closing=3500, institute="NIT Trichy", gender="Female-only (including Supernumerary)"),
        make_candidate(closing=3500, institute="NIT Trichy", seat_type="OBC-NCL"),
        make_candidate(closing=None, institute="IIT Bombay"),
        make_candidate(closing=61000, institute="Birla Institute of Technology, Mesra"),
        make_candidate(closing=2000, institute="IIIT Hyderabad"),
    ]
    expected = [c.record for c in rank_candidates(pool, candidate_rank)]

    rng = random.Random(7)
    for _ in range(30):
        shuffled = pool[:]
        rng.shuffle(shuffled)
        assert [c.record for c in rank_candidates(shuffled, candidate_rank)] == expected


def test_ranking_does_not_mutate_input():
    pool = [make_candidate(closing=c, institute=f"NIT {c}") for c in (5000, 1000, 3000)]
    before = list(pool)
    rank_candidates(pool, 4000)
    assert pool == before
