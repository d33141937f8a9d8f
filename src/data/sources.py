"""
Daily bar sources.

The detector never talks to a market-data provider directly. A BarSource is
the seam: the caller plugs in whatever provider it owns (HTTP client, local
files, a cached DataFrame) and the service asks it for bars and, optionally,
a fundamentals beta.

Design:
- Sources return raw DailyBar lists; validation happens in alignment
- Rows that cannot be parsed at all are logged and skipped
- Provider failures surface as DataSourceError, never as None
"""

import csv
import datetime as dt
import logging
import math
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd
from pydantic import ValidationError

from src.core.exceptions import DataSourceError, DataValidationError
from src.data.schema import DailyBar

logger = logging.getLogger(__name__)


class BarSource(ABC):
    """
    Abstract base class for daily bar providers.

    Subclasses implement get_daily_bars; get_beta is optional and returns
    None when the provider has no fundamentals data.
    """

    @abstractmethod
    def get_daily_bars(
        self,
        symbol: str,
        from_date: dt.date,
        to_date: dt.date,
    ) -> List[DailyBar]:
        """
        Fetch daily bars for a symbol.

        Args:
            symbol: Ticker symbol
            from_date: First calendar date (inclusive)
            to_date: Last calendar date (inclusive)

        Returns:
            DailyBar list in any order

        Raises:
            DataSourceError: If the provider cannot deliver data
        """
        pass

    def get_beta(self, symbol: str) -> Optional[float]:
        """Fundamentals-sourced beta for a symbol, if the provider has one."""
        return None


def parse_bar(record: Mapping[str, Any]) -> DailyBar:
    """
    Build a DailyBar from a raw provider record.

    Args:
        record: Mapping with "date", "close" and optional "volume" keys.
            Dates may be date/datetime objects or ISO strings (a time part
            is ignored).

    Returns:
        DailyBar

    Raises:
        DataValidationError: If the record is missing fields or holds
            unparseable values
    """
    raw_date = record.get("date")
    if raw_date is None or raw_date == "":
        raise DataValidationError("missing date")

    raw_close = record.get("close")
    if raw_close is None or raw_close == "":
        raise DataValidationError("missing close")

    try:
        if isinstance(raw_date, str):
            raw_date = dt.date.fromisoformat(raw_date.strip()[:10])

        raw_volume = record.get("volume")
        volume = 0.0 if raw_volume in (None, "") else float(raw_volume)
        if not math.isfinite(volume):
            raise DataValidationError(f"non-finite volume: {raw_volume}")

        return DailyBar(date=raw_date, close=float(raw_close), volume=int(volume))
    except (TypeError, ValueError, ValidationError) as e:
        raise DataValidationError(str(e)) from e


def parse_bars(records: Iterable[Mapping[str, Any]]) -> Tuple[List[DailyBar], int]:
    """
    Parse raw records, skipping the ones that fail.

    Returns:
        Tuple of (parsed bars, number of skipped records)
    """
    bars: List[DailyBar] = []
    skipped = 0

    for index, record in enumerate(records):
        try:
            bars.append(parse_bar(record))
        except DataValidationError as e:
            skipped += 1
            logger.warning(f"Skipping bar record {index}: {e}")

    return bars, skipped


def _in_range(bar: DailyBar, from_date: dt.date, to_date: dt.date) -> bool:
    return from_date <= bar.date <= to_date


class CSVBarSource(BarSource):
    """
    Reads bars from a directory holding one "<SYMBOL>.csv" per symbol.

    Example file:
        date,close,volume
        2025-02-03,101.25,1250000
        2025-02-04,102.80,1410000

    An optional "beta.csv" with "symbol,beta" columns supplies overrides.
    """

    BETA_FILE = "beta.csv"

    def __init__(self, directory: Union[str, Path], encoding: str = "utf-8"):
        """
        Initialize CSV source.

        Raises:
            DataSourceError: If the directory doesn't exist
        """
        self.directory = Path(directory)
        self.encoding = encoding

        if not self.directory.is_dir():
            raise DataSourceError(f"Bar directory not found: {self.directory}")

    def get_daily_bars(
        self,
        symbol: str,
        from_date: dt.date,
        to_date: dt.date,
    ) -> List[DailyBar]:
        path = self.directory / f"{symbol.upper()}.csv"
        if not path.exists():
            raise DataSourceError(f"No bar file for {symbol}: {path}")

        try:
            with open(path, "r", encoding=self.encoding, newline="") as f:
                records = [
                    {k.strip().lower(): v for k, v in row.items() if k}
                    for row in csv.DictReader(f)
                ]
        except (OSError, csv.Error) as e:
            logger.error(f"Error reading bar file {path}: {e}")
            raise DataSourceError(f"Failed to read bars for {symbol}: {e}") from e

        bars, skipped = parse_bars(records)
        if skipped:
            logger.warning(f"{symbol}: skipped {skipped} unparseable row(s) in {path.name}")

        return [b for b in bars if _in_range(b, from_date, to_date)]

    def get_beta(self, symbol: str) -> Optional[float]:
        path = self.directory / self.BETA_FILE
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding=self.encoding, newline="") as f:
                for row in csv.DictReader(f):
                    if row.get("symbol", "").strip().upper() != symbol.upper():
                        continue
                    value = row.get("beta", "").strip()
                    return float(value) if value else None
        except (OSError, csv.Error, ValueError) as e:
            logger.error(f"Error reading beta file {path}: {e}")
            raise DataSourceError(f"Failed to read beta for {symbol}: {e}") from e

        return None


class DataFrameBarSource(BarSource):
    """
    Serves bars from pandas DataFrames keyed by symbol.

    Each frame holds a "close" column and optionally "volume" (column names
    are matched case-insensitively, so provider frames with "Close"/"Volume"
    work as-is). Dates come from a "date" column if present, else the index.
    """

    def __init__(
        self,
        frames: Dict[str, pd.DataFrame],
        betas: Optional[Dict[str, float]] = None,
    ):
        self.frames = {symbol.upper(): frame for symbol, frame in frames.items()}
        self.betas = {symbol.upper(): beta for symbol, beta in (betas or {}).items()}

    def get_daily_bars(
        self,
        symbol: str,
        from_date: dt.date,
        to_date: dt.date,
    ) -> List[DailyBar]:
        frame = self.frames.get(symbol.upper())
        if frame is None:
            raise DataSourceError(f"No bar data for {symbol}")

        df = frame.rename(columns=lambda c: str(c).strip().lower())
        if "close" not in df.columns:
            raise DataSourceError(f"Bar data for {symbol} has no close column")

        dates = pd.to_datetime(df["date"] if "date" in df.columns else df.index)
        volumes = df["volume"].fillna(0) if "volume" in df.columns else pd.Series(0, index=df.index)

        records = [
            {"date": ts.date(), "close": close, "volume": volume}
            for ts, close, volume in zip(dates, df["close"], volumes)
        ]
        bars, skipped = parse_bars(records)
        if skipped:
            logger.warning(f"{symbol}: skipped {skipped} unparseable row(s)")

        return [b for b in bars if _in_range(b, from_date, to_date)]

    def get_beta(self, symbol: str) -> Optional[float]:
        return self.betas.get(symbol.upper())
