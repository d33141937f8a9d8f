"""
Beta-adjusted anomaly detection engine.

Consumes instrument and benchmark DailyBar sets, aligns them by date, fits a
single-factor market model, and turns days whose residual or volume stands
out into AnomalyEvent objects. Pipeline:

    bars → alignment → [beta, volume baseline] → residuals → classification
         → sequence encoding → ranking
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from src.core.config import AnomalyConfig, config
from src.data.alignment import align_series, trim_window
from src.data.schema import AlignedDay, DailyBar

from .beta import BetaEstimator
from .ranking import AnomalyRanker
from .residuals import ResidualAnalyzer
from .schema import (
    AnomalyEvent,
    BetaEstimate,
    DetectionResult,
    DetectionStatus,
    ResidualPoint,
)
from .scoring import AnomalyClassifier, confidence_score
from .sequence import SequenceEncoder
from .volume import VolumeAnomalyDetector

logger = logging.getLogger(__name__)


def event_id(day: AlignedDay, index: int) -> str:
    """Stable id from the calendar date and window index."""
    return f"seq_{day.date:%Y%m%d}_{index:03d}"


def window_position(index: int, window_size: int) -> float:
    """0 for the oldest day of the window, 100 for the newest."""
    if window_size <= 1:
        return 100.0
    return index / (window_size - 1) * 100.0


@dataclass
class AnomalyDetector:
    """
    Deterministic anomaly detector for one symbol at a time.

    Notes:
    - Stateless between calls: every run recomputes beta and baselines.
    - Fewer than 2 aligned days yields an empty result flagged
      insufficient_data rather than an exception.
    - The regression window is the most recent max_aligned_days aligned days.
    """

    anomaly_config: Optional[AnomalyConfig] = None

    def __post_init__(self) -> None:
        cfg = self.anomaly_config or config.anomaly
        self.anomaly_config = cfg
        self._beta = BetaEstimator.from_config(cfg.beta)
        self._residuals = ResidualAnalyzer()
        self._volume = VolumeAnomalyDetector(lookback=cfg.volume.lookback)
        self._classifier = AnomalyClassifier(cfg.thresholds)
        self._encoder = SequenceEncoder()
        self._ranker = AnomalyRanker(max_results=cfg.window.max_results)

    def detect(
        self,
        stock_bars: Iterable[DailyBar],
        market_bars: Iterable[DailyBar],
        beta_override: Optional[float] = None,
        symbol: str = "",
    ) -> DetectionResult:
        aligned = align_series(stock_bars, market_bars)
        return self.detect_aligned(aligned, beta_override=beta_override, symbol=symbol)

    def detect_aligned(
        self,
        aligned: Sequence[AlignedDay],
        beta_override: Optional[float] = None,
        symbol: str = "",
    ) -> DetectionResult:
        window = trim_window(list(aligned), self.anomaly_config.window.max_aligned_days)
        beta = self._beta.resolve(window, beta_override)

        if len(window) < 2:
            logger.warning(
                f"{symbol or 'symbol'}: insufficient data ({len(window)} aligned day(s))"
            )
            return self._result(symbol, [], beta, len(window), DetectionStatus.INSUFFICIENT_DATA)

        residuals = self._residuals.analyze(window, beta.value)
        ratios = self._volume.ratios([d.stock_volume for d in window])

        candidates: List[AnomalyEvent] = []
        for index, (day, point, ratio) in enumerate(zip(window, residuals, ratios)):
            event = self._detect_day(symbol, index, len(window), day, point, ratio, beta)
            if event is not None:
                candidates.append(event)

        events = self._ranker.rank(candidates)
        logger.info(
            f"{symbol or 'symbol'}: {len(candidates)} anomalous day(s) in a "
            f"{len(window)}-day window, beta={beta.value:.3f} ({beta.source.value}), "
            f"returning {len(events)}"
        )
        return self._result(symbol, events, beta, len(window), DetectionStatus.OK)

    def _detect_day(
        self,
        symbol: str,
        index: int,
        window_size: int,
        day: AlignedDay,
        point: ResidualPoint,
        volume_ratio: float,
        beta: BetaEstimate,
    ) -> Optional[AnomalyEvent]:
        classification = self._classifier.classify(
            stock_return=point.stock_return,
            market_return=point.market_return,
            residual_return=point.residual_return,
            z_score=point.z_score,
            volume_ratio=volume_ratio,
        )
        if not classification.is_anomaly:
            return None

        return AnomalyEvent(
            id=event_id(day, index),
            symbol=symbol,
            date=day.date,
            type=classification.type,
            severity=classification.severity,
            sequence=self._encoder.encode(
                point.stock_return, point.residual_return, volume_ratio
            ),
            stock_return=point.stock_return,
            market_return=point.market_return,
            expected_return=point.expected_return,
            residual_return=point.residual_return,
            beta=beta.value,
            z_score=point.z_score,
            volume_ratio=volume_ratio,
            confidence=confidence_score(point.z_score, self.anomaly_config.confidence),
            position=window_position(index, window_size),
            close=day.stock_close,
        )

    def _result(
        self,
        symbol: str,
        events: List[AnomalyEvent],
        beta: BetaEstimate,
        window_size: int,
        status: DetectionStatus,
    ) -> DetectionResult:
        return DetectionResult(
            symbol=symbol,
            events=events,
            beta=beta.value,
            computed_beta=beta.computed,
            beta_source=beta.source,
            used_default_beta=beta.used_default,
            window_size=window_size,
            status=status,
        )
