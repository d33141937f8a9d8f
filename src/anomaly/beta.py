"""
Single-factor beta estimation.

beta = cov(stock, market) / var(market), using population moments (divide by
N, not N - 1). The ratio is the same either way in exact arithmetic, but
other tools that mix sample and population moments can disagree in the last
few floating-point digits.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from src.core.config import BetaConfig
from src.data.schema import AlignedDay

from .schema import BetaEstimate, BetaSource

logger = logging.getLogger(__name__)


@dataclass
class BetaEstimator:
    """
    Market-model beta with graceful degradation.

    Short windows and a flat benchmark fall back to default_beta instead of
    failing.
    """

    min_points: int = 20
    default_beta: float = 1.0

    @classmethod
    def from_config(cls, beta_config: BetaConfig) -> "BetaEstimator":
        return cls(min_points=beta_config.min_points, default_beta=beta_config.default_beta)

    def estimate(self, days: Sequence[AlignedDay]) -> float:
        value, _ = self._regress(days)
        return value

    def resolve(
        self, days: Sequence[AlignedDay], override: Optional[float] = None
    ) -> BetaEstimate:
        """
        Pick the beta for a run.

        A non-null override (e.g. a fundamentals beta) replaces the computed
        value; the computed value is still reported for diagnostics. A NaN or
        infinite override is ignored.
        """
        computed, used_default = self._regress(days)

        if override is not None and not math.isfinite(override):
            logger.warning(f"Ignoring non-finite beta override: {override}")
            override = None

        if override is not None:
            return BetaEstimate(
                value=float(override),
                computed=computed,
                source=BetaSource.OVERRIDE,
                used_default=used_default,
            )

        return BetaEstimate(
            value=computed,
            computed=computed,
            source=BetaSource.DEFAULT if used_default else BetaSource.ESTIMATED,
            used_default=used_default,
        )

    def _regress(self, days: Sequence[AlignedDay]) -> Tuple[float, bool]:
        n = len(days)
        if n < self.min_points:
            return self.default_beta, True

        market = [d.market_return for d in days]
        # constant series may not round to exactly zero variance
        if min(market) == max(market):
            return self.default_beta, True

        mean_stock = sum(d.stock_return for d in days) / n
        mean_market = sum(market) / n

        covariance = 0.0
        market_variance = 0.0
        for d in days:
            market_dev = d.market_return - mean_market
            covariance += (d.stock_return - mean_stock) * market_dev
            market_variance += market_dev * market_dev

        if market_variance == 0.0:
            return self.default_beta, True

        return (covariance / n) / (market_variance / n), False
