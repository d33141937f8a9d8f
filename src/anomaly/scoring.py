"""
Classification and confidence scoring for anomalies.

Maps a day's residual z-score, returns and volume ratio onto an anomaly flag,
a type and a severity using fixed, configurable thresholds.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.config import AnomalyThresholds, ConfidenceConfig

from .schema import AnomalySeverity, AnomalyType


@dataclass(frozen=True)
class Classification:
    """Result of classifying one day."""

    is_anomaly: bool
    type: AnomalyType
    severity: AnomalySeverity


@dataclass
class AnomalyClassifier:
    """
    Rule-based classifier over the market-model decomposition.

    Thresholds are fixed per instance so outputs are reproducible; nothing
    here adapts to the data it sees.
    """

    thresholds: AnomalyThresholds

    def classify(
        self,
        stock_return: float,
        market_return: float,
        residual_return: float,
        z_score: float,
        volume_ratio: float,
    ) -> Classification:
        return Classification(
            is_anomaly=self.is_anomaly(z_score, volume_ratio),
            type=self.anomaly_type(market_return, residual_return),
            severity=self.severity(z_score, residual_return),
        )

    def is_anomaly(self, z_score: float, volume_ratio: float) -> bool:
        t = self.thresholds
        return abs(z_score) > t.zscore_anomaly or volume_ratio > t.volume_ratio_anomaly

    def anomaly_type(self, market_return: float, residual_return: float) -> AnomalyType:
        t = self.thresholds
        market = abs(market_return)
        residual = abs(residual_return)

        if market > t.market_correlated_market_move and residual < t.market_correlated_max_residual:
            return AnomalyType.MARKET_CORRELATED
        if market > t.hybrid_market_move and residual > t.hybrid_min_residual:
            return AnomalyType.HYBRID
        return AnomalyType.COMPANY_SPECIFIC

    def severity(self, z_score: float, residual_return: float) -> AnomalySeverity:
        t = self.thresholds
        z = abs(z_score)
        residual = abs(residual_return)

        if z > t.zscore_high or residual > t.residual_high:
            return AnomalySeverity.HIGH
        if z > t.zscore_medium or residual > t.residual_medium:
            return AnomalySeverity.MEDIUM
        return AnomalySeverity.LOW


def confidence_score(z_score: float, confidence: ConfidenceConfig) -> int:
    """
    Display confidence: min(cap, base + |z| * scale), floored at 0.

    This is a presentation heuristic, not a statistical confidence interval.
    """

    raw = confidence.base + abs(z_score) * confidence.zscore_scale
    return int(round(max(0.0, min(confidence.cap, raw))))
