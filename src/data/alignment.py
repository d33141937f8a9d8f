"""
Date alignment of instrument and benchmark bars.

Converts raw DailyBar collections into the ordered AlignedDay sequence the
anomaly detector runs on. Pipeline per series:

    DailyBar set (unordered, possibly malformed)
        ↓
    Validation (drop non-positive close, negative volume, duplicate dates)
        ↓
    Returns (percent change vs. previous valid close)
        ↓
    Inner join on calendar date → AlignedDay (oldest first)

Design:
- No interpolation: a date missing from either series is simply absent
- Both inputs may arrive in any order
- Bad bars are logged and dropped, they never crash the pipeline
"""

import logging
import math
from typing import Iterable, List, Tuple

from src.data.schema import AlignedDay, DailyBar, ReturnPoint

logger = logging.getLogger(__name__)


def is_valid_bar(bar: DailyBar) -> bool:
    """
    Check a bar can take part in return computation.

    Args:
        bar: DailyBar to check

    Returns:
        True if close is finite and positive and volume is non-negative
    """
    return math.isfinite(bar.close) and bar.close > 0 and bar.volume >= 0


def clean_bars(bars: Iterable[DailyBar]) -> Tuple[List[DailyBar], int]:
    """
    Sort bars by date, dropping malformed bars and duplicate dates.

    Args:
        bars: DailyBar objects in any order

    Returns:
        Tuple of (valid bars oldest first, number of bars dropped)

    Notes:
        - For duplicate dates the first valid occurrence wins
        - Sorting is stable so "first" means first in input order
    """
    ordered = sorted(bars, key=lambda b: b.date)
    cleaned: List[DailyBar] = []
    seen = set()
    dropped = 0

    for bar in ordered:
        if not is_valid_bar(bar) or bar.date in seen:
            dropped += 1
            continue
        seen.add(bar.date)
        cleaned.append(bar)

    return cleaned, dropped


def compute_returns(bars: Iterable[DailyBar]) -> List[ReturnPoint]:
    """
    Compute daily percentage returns for one instrument.

    Args:
        bars: DailyBar objects in any order

    Returns:
        ReturnPoint list, oldest first. The earliest valid bar contributes
        no point since it has no previous close.
    """
    cleaned, dropped = clean_bars(bars)
    if dropped:
        logger.warning(f"Dropped {dropped} malformed or duplicate bar(s)")

    points: List[ReturnPoint] = []
    for previous, current in zip(cleaned, cleaned[1:]):
        # previous.close > 0 is guaranteed by clean_bars
        return_pct = (current.close - previous.close) / previous.close * 100.0
        points.append(
            ReturnPoint(
                date=current.date,
                close=current.close,
                volume=current.volume,
                return_pct=return_pct,
            )
        )

    return points


def align_series(
    stock_bars: Iterable[DailyBar],
    market_bars: Iterable[DailyBar],
) -> List[AlignedDay]:
    """
    Pair instrument and benchmark returns by calendar date.

    Args:
        stock_bars: Instrument bars
        market_bars: Benchmark bars

    Returns:
        AlignedDay list sorted ascending by date, one entry per date present
        in both return series. Empty if either input has fewer than 2 bars.
    """
    stock_bars = list(stock_bars)
    market_bars = list(market_bars)

    if len(stock_bars) < 2 or len(market_bars) < 2:
        return []

    stock_returns = compute_returns(stock_bars)
    market_by_date = {p.date: p for p in compute_returns(market_bars)}

    aligned = [
        AlignedDay(
            date=point.date,
            stock_return=point.return_pct,
            market_return=market_by_date[point.date].return_pct,
            stock_close=point.close,
            stock_volume=point.volume,
        )
        for point in stock_returns
        if point.date in market_by_date
    ]

    logger.debug(
        f"Aligned {len(aligned)} day(s) from {len(stock_returns)} instrument "
        f"and {len(market_by_date)} benchmark return(s)"
    )
    return aligned


def trim_window(days: List[AlignedDay], max_days: int) -> List[AlignedDay]:
    """
    Keep the most recent aligned days.

    Args:
        days: AlignedDay list, oldest first
        max_days: Maximum number of days to keep

    Returns:
        The last max_days entries, still oldest first
    """
    if max_days <= 0:
        return []
    return days[-max_days:]
