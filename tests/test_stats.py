from __future__ import annotations

import math

import pytest

from fpl_league_insights.stats import average, jaccard_similarity, standard_deviation, to_percent


def test_average_empty_is_none():
    assert average([]) is None


def test_average_basic():
    assert average([40, 50, 60]) == 50


def test_standard_deviation_empty_is_none():
    assert standard_deviation([]) is None


def test_standard_deviation_is_population():
    # Population stdev of this classic sample is exactly 2 (sample stdev would be ~2.14)
    assert standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)


def test_standard_deviation_uniform_is_zero():
    assert standard_deviation([55, 55, 55]) == 0


@pytest.mark.parametrize("numerator", [0, 1, -5, 100.5])
def test_to_percent_zero_denominator_is_none(numerator):
    assert to_percent(numerator, 0) is None


def test_to_percent_negative_denominator_is_none():
    assert to_percent(10, -3) is None


def test_to_percent_basic():
    assert to_percent(3, 4) == 75


def test_jaccard_both_empty_is_none():
    assert jaccard_similarity(set(), set()) is None


def test_jaccard_one_empty_is_zero():
    assert jaccard_similarity({1, 2}, set()) == 0


def test_jaccard_partial_overlap():
    # |{2,3}| / |{1,2,3,4}|
    assert jaccard_similarity({1, 2, 3}, {2, 3, 4}) == 0.5


def test_no_helper_returns_nan_or_inf():
    values = [to_percent(1, 0), average([]), standard_deviation([]), jaccard_similarity([], [])]
    for v in values:
        assert v is None or math.isfinite(v)
