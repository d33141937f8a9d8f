"""
Unit tests for residual analysis.
"""

from datetime import date, timedelta
from math import isclose

from src.anomaly.residuals import ResidualAnalyzer, population_stats
from src.data.schema import AlignedDay


def _days(stock, market):
    return [
        AlignedDay(
            date=date(2025, 1, 1) + timedelta(days=i),
            stock_return=s,
            market_return=m,
            stock_close=100.0,
            stock_volume=1000,
        )
        for i, (s, m) in enumerate(zip(stock, market))
    ]


def test_expected_and_residual_returns():
    points = ResidualAnalyzer().analyze(_days([3.0, -1.0], [2.0, -2.0]), beta=1.2)

    assert isclose(points[0].expected_return, 2.4)
    assert isclose(points[0].residual_return, 0.6)
    assert isclose(points[1].expected_return, -2.4)
    assert isclose(points[1].residual_return, 1.4)


def test_zscores_are_centered():
    stock = [0.3, -1.2, 4.5, 0.0, 2.2, -0.7, 1.1, -3.4, 0.9, 0.05]
    market = [0.1, -0.5, 1.0, 0.2, 0.4, -0.3, 0.6, -1.1, 0.2, 0.0]

    points = ResidualAnalyzer().analyze(_days(stock, market), beta=1.1)
    mean_z = sum(p.z_score for p in points) / len(points)

    assert abs(mean_z) < 1e-9


def test_zscore_uses_population_std():
    # residuals 1 and -1: mean 0, population std 1
    points = ResidualAnalyzer().analyze(_days([1.0, -1.0], [0.0, 0.0]), beta=1.0)

    assert isclose(points[0].z_score, 1.0)
    assert isclose(points[1].z_score, -1.0)


def test_zero_dispersion_gives_zero_zscores():
    market = [0.5, -0.2, 1.0]
    stock = [2 * m for m in market]

    points = ResidualAnalyzer().analyze(_days(stock, market), beta=2.0)

    assert all(p.z_score == 0.0 for p in points)


def test_linear_fit_with_intercept_gives_zero_zscores():
    # residuals are all 0.3 up to rounding noise
    market = [0.13 * ((i * 7) % 11 - 5) + 0.01 * i for i in range(40)]
    stock = [1.1 * m + 0.3 for m in market]

    points = ResidualAnalyzer().analyze(_days(stock, market), beta=1.1)

    assert all(p.z_score == 0.0 for p in points)
    assert all(isclose(p.residual_return, 0.3) for p in points)


def test_small_real_dispersion_is_kept():
    points = ResidualAnalyzer().analyze(_days([1e-4, -1e-4], [0.0, 0.0]), beta=1.0)

    assert isclose(points[0].z_score, 1.0)
    assert isclose(points[1].z_score, -1.0)


def test_single_day_gives_zero_zscore():
    points = ResidualAnalyzer().analyze(_days([5.0], [1.0]), beta=1.0)
    assert points[0].z_score == 0.0


def test_population_stats_empty():
    assert population_stats([]) == (0.0, 0.0)
