"""
Tests for the confidence scorer.
"""

import pytest

from admission.logic.constants import Confidence
from admission.logic.confidence import population_std_dev, relative_std_dev, score_confidence


def test_no_points():
    assert score_confidence([], None) == Confidence.NONE


def test_single_point_is_very_low():
    assert score_confidence([20000], 20000) == Confidence.VERY_LOW


def test_population_std_dev():
    assert population_std_dev([900, 1100]) == 100
    assert population_std_dev([]) == 0


def test_relative_std_dev_guards():
    assert relative_std_dev([900, 1100], 0) == 0
    assert relative_std_dev([900, 1100], None) == 0
    assert relative_std_dev([], 1000) == 0


@pytest.mark.parametrize("projected, expected", [
    (1200, Confidence.VERY_HIGH),   # 0.083
    (800, Confidence.HIGH),         # 0.125
    (600, Confidence.MEDIUM),       # 0.167
    (450, Confidence.MEDIUM),       # 0.222
    (300, Confidence.LOW),          # 0.333
])
def test_four_or_more_points(projected, expected):
    assert score_confidence([900, 1100, 900, 1100], projected) == expected


@pytest.mark.parametrize("projected, expected", [
    (1000, Confidence.HIGH),        # 0.082
    (600, Confidence.HIGH),         # 0.136
    (500, Confidence.MEDIUM),       # 0.163
    (350, Confidence.LOW),          # 0.233
])
def test_three_points(projected, expected):
    assert score_confidence([900, 1100, 1000], projected) == expected


@pytest.mark.parametrize("projected, expected", [
    (1000, Confidence.MEDIUM),      # 0.100
    (550, Confidence.MEDIUM),       # 0.182
    (450, Confidence.LOW),          # 0.222
])
def test_two_points(projected, expected):
    assert score_confidence([900, 1100], projected) == expected


def test_long_stable_history_rates_very_high():
    stable = score_confidence([1000, 1000, 1000, 1000, 1000], 1000)
    assert stable == Confidence.VERY_HIGH


def test_very_high_requires_four_points():
    for ranks in ([1000], [1000, 1000], [1000, 1000, 1000]):
        assert score_confidence(ranks, 1000) != Confidence.VERY_HIGH
