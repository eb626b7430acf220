"""Percentage normalization: two decimals, exact 100.00 total, close to naive rounding."""

import pytest

from fanstatsengine.utils.math import normalize_percentages, safe_div


def test_safe_div_zero_denominator():
    assert safe_div(5, 0) == 0.0
    assert safe_div(6, 3) == 2.0


def test_sums_to_exactly_100():
    scores = {f"T{i:02d}": 1.0 for i in range(32)}
    out = normalize_percentages(scores)
    assert round(sum(out.values()), 2) == 100.0


def test_each_value_within_one_unit_of_naive_rounding():
    scores = {"A": 1.0, "B": 1.0, "C": 1.0}
    out = normalize_percentages(scores)
    for k, v in out.items():
        assert abs(v - round(scores[k] / 3 * 100, 2)) <= 0.01 + 1e-9
    assert out == {"A": 33.34, "B": 33.33, "C": 33.33}


def test_zero_total_returns_empty():
    assert normalize_percentages({"A": 0.0, "B": 0.0}) == {}
    assert normalize_percentages({}) == {}


def test_single_team_gets_everything():
    assert normalize_percentages({"A": 7.5}) == {"A": 100.0}


@pytest.mark.parametrize("n", [3, 7, 13, 32])
def test_uneven_splits_still_sum_to_100(n):
    scores = {f"T{i}": float(i + 1) ** 1.5 for i in range(n)}
    out = normalize_percentages(scores)
    assert abs(sum(out.values()) - 100.0) <= 0.01
