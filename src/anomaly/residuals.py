"""
Residual analysis under the single-factor market model.

For each aligned day:
- expected_return = beta * market_return
- residual_return = stock_return - expected_return
- z_score = (residual_return - mean) / std over the whole window

Mean and std are population statistics computed once per window. A std that
is negligible next to the residuals themselves is rounding noise from a
perfect linear fit and counts as zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import sqrt
from typing import List, Sequence, Tuple

from src.data.schema import AlignedDay

from .schema import ResidualPoint

# relative to the largest residual magnitude (at least 1.0)
ZERO_DISPERSION_TOLERANCE = 1e-9


def population_stats(values: Sequence[float]) -> Tuple[float, float]:
    """
    Return (mean, std) with divide-by-N variance. Empty input gives (0, 0).
    """
    if not values:
        return 0.0, 0.0
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return mean, sqrt(variance)


def has_zero_dispersion(values: Sequence[float], std: float) -> bool:
    """True when std is zero up to floating-point noise."""
    scale = max([1.0] + [abs(v) for v in values])
    return std <= ZERO_DISPERSION_TOLERANCE * scale


@dataclass
class ResidualAnalyzer:
    """
    Computes expected returns, residuals and residual z-scores.

    A window with zero residual dispersion (fewer than 2 days, or a perfect
    linear fit) gets z-scores of exactly 0.
    """

    def analyze(self, days: Sequence[AlignedDay], beta: float) -> List[ResidualPoint]:
        expected = [beta * d.market_return for d in days]
        residuals = [d.stock_return - e for d, e in zip(days, expected)]

        mean, std = population_stats(residuals)
        if has_zero_dispersion(residuals, std):
            std = 0.0

        points: List[ResidualPoint] = []
        for day, expected_return, residual in zip(days, expected, residuals):
            z_score = (residual - mean) / std if std > 0.0 else 0.0
            points.append(
                ResidualPoint(
                    date=day.date,
                    stock_return=day.stock_return,
                    market_return=day.market_return,
                    expected_return=expected_return,
                    residual_return=residual,
                    z_score=z_score,
                )
            )
        return points
