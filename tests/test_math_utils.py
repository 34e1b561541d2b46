import pytest

from heatcheck.math_utils import (
    compute_volatility,
    ewma,
    ewma_vs_line,
    fmt_num,
    mean,
    median,
    moving_average,
    percentile,
    round_half_up,
    std_dev,
)


def test_ewma_weights_latest_value():
    assert ewma([10, 20, 30], 0.5) == pytest.approx(22.5)
    assert ewma([], 0.85) == 0.0
    assert ewma([7], 0.85) == 7.0


def test_ewma_vs_line():
    assert ewma_vs_line([11], 0.5, 10) == pytest.approx(10.0)
    assert ewma_vs_line([11], 0.5, 0) == 0.0


def test_mean_and_median():
    assert mean([]) == 0.0
    assert median([3, 1, 2]) == 2
    assert median([1, 2, 3, 4]) == 2.5


def test_std_dev_is_population():
    assert std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)
    assert std_dev([5]) == 0.0


def test_percentile_interpolates():
    assert percentile([1, 2, 3, 4, 5], 50) == 3
    assert percentile([1, 2, 3, 4], 25) == pytest.approx(1.75)
    assert percentile([], 90) == 0.0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(2.4) == 2


def test_volatility_range():
    assert compute_volatility([10, 10, 10]) == 1
    assert compute_volatility([0, 2]) == 10
    assert compute_volatility([]) == 1
    assert compute_volatility([0, 0, 0]) == 1


def test_moving_average_trailing_window():
    assert moving_average([1, 2, 3, 4], 2) == [1, 1.5, 2.5, 3.5]


def test_fmt_num():
    assert fmt_num(24.5) == "24.5"
    assert fmt_num(30.0) == "30"
    assert fmt_num("SW") == "SW"
