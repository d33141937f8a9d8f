"""
Backend service layer for anomaly detection.

Fetches instrument and benchmark bars from a BarSource, applies the lookback
window, and runs the AnomalyDetector for one or many symbols.
"""

from __future__ import annotations

import datetime as dt
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from src.anomaly.engine import AnomalyDetector
from src.anomaly.schema import DetectionResult
from src.core.config import WindowConfig, config
from src.core.exceptions import ConfigurationError, DataSourceError
from src.core.logging_config import setup_logging
from src.data.schema import DailyBar
from src.data.sources import BarSource, CSVBarSource

logger = logging.getLogger("backend.radar")


@dataclass
class AnomalyRadarService:
    """
    Detection service over a caller-supplied bar source.

    - The benchmark is fetched once per call and shared read-only.
    - Provider betas override the regression beta when use_provider_beta is set.
    - No retries: provider failures raise DataSourceError.
    """

    source: BarSource
    detector: AnomalyDetector = field(default_factory=AnomalyDetector)
    window: Optional[WindowConfig] = None
    max_workers: Optional[int] = None
    use_provider_beta: bool = True

    def __post_init__(self) -> None:
        self.window = self.window or self.detector.anomaly_config.window
        self.max_workers = self.max_workers or config.max_workers

    def detect_anomalies(
        self,
        symbol: str,
        lookback_days: Optional[int] = None,
        as_of: Optional[dt.date] = None,
    ) -> DetectionResult:
        """
        Detect anomalies for one symbol.

        Returns:
            DetectionResult with events newest first, capped at max_results.

        Raises:
            ConfigurationError: If lookback_days is below 2
            DataSourceError: If bars cannot be fetched
        """
        from_date, to_date = self._date_range(lookback_days, as_of)
        market_bars = self._fetch_bars(self.window.benchmark_symbol, from_date, to_date)
        return self._detect_symbol(symbol, market_bars, from_date, to_date)

    def detect_many(
        self,
        symbols: Iterable[str],
        lookback_days: Optional[int] = None,
        as_of: Optional[dt.date] = None,
    ) -> Dict[str, DetectionResult]:
        """
        Detect anomalies for several symbols in parallel.

        Each symbol is an independent task. A symbol whose bars cannot be
        fetched is logged and left out of the returned mapping; a benchmark
        failure raises DataSourceError since no symbol can be analyzed.
        """
        from_date, to_date = self._date_range(lookback_days, as_of)
        market_bars = self._fetch_bars(self.window.benchmark_symbol, from_date, to_date)
        unique = list(dict.fromkeys(s.upper() for s in symbols))

        results: Dict[str, DetectionResult] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self._detect_symbol, symbol, market_bars, from_date, to_date): symbol
                for symbol in unique
            }
            for future in as_completed(futures):
                symbol = futures[future]
                try:
                    results[symbol] = future.result()
                except DataSourceError as exc:
                    logger.error("Skipping %s: %s", symbol, exc)

        return results

    def _detect_symbol(
        self,
        symbol: str,
        market_bars: List[DailyBar],
        from_date: dt.date,
        to_date: dt.date,
    ) -> DetectionResult:
        stock_bars = self._fetch_bars(symbol, from_date, to_date)
        override = self.source.get_beta(symbol) if self.use_provider_beta else None
        return self.detector.detect(stock_bars, market_bars, beta_override=override, symbol=symbol)

    def _fetch_bars(self, symbol: str, from_date: dt.date, to_date: dt.date) -> List[DailyBar]:
        try:
            bars = self.source.get_daily_bars(symbol, from_date, to_date)
        except DataSourceError as exc:
            logger.error("Bar fetch failed for %s: %s", symbol, exc)
            raise
        logger.debug("Fetched %d bar(s) for %s (%s to %s)", len(bars), symbol, from_date, to_date)
        return bars

    def _date_range(
        self, lookback_days: Optional[int], as_of: Optional[dt.date]
    ) -> Tuple[dt.date, dt.date]:
        days = self.window.lookback_days if lookback_days is None else lookback_days
        if days < 2:
            raise ConfigurationError(f"lookback_days must be at least 2, got {days}")
        to_date = as_of or dt.date.today()
        return to_date - dt.timedelta(days=days), to_date


def create_csv_radar_service(directory: Union[str, Path]) -> AnomalyRadarService:
    """
    Factory for a radar service reading bars from CSV files, with logging configured.
    """

    setup_logging()
    setup_logging("backend")
    return AnomalyRadarService(source=CSVBarSource(directory))
