"""
Pytest configuration and shared fixtures.

Provides synthetic bar series and detector configuration for unit and
integration tests.
"""

import pytest
from datetime import date, timedelta
from typing import Callable, List, Optional, Sequence

import pandas as pd

from src.core.config import AnomalyConfig
from src.data.schema import DailyBar


START_DATE = date(2025, 1, 1)


def bars_from_returns(
    returns: Sequence[float],
    volumes: Optional[Sequence[int]] = None,
    start: date = START_DATE,
    start_close: float = 100.0,
) -> List[DailyBar]:
    """
    Build consecutive daily bars whose percentage returns are `returns`.

    The first bar is the anchor (no return), so len(bars) == len(returns) + 1.
    `volumes`, if given, applies to the return days; the anchor gets the
    first volume.
    """
    if volumes is None:
        volumes = [1_000_000] * len(returns)
    volumes = list(volumes)

    bars = [DailyBar(date=start, close=start_close, volume=volumes[0] if volumes else 0)]
    close = start_close
    for i, (ret, volume) in enumerate(zip(returns, volumes), start=1):
        close = close * (1.0 + ret / 100.0)
        bars.append(DailyBar(date=start + timedelta(days=i), close=close, volume=volume))
    return bars


def wiggle(n: int, amplitude: float = 0.2) -> List[float]:
    """Small deterministic non-constant returns: +a, -a, +a/2, -a/2, ..."""
    pattern = [amplitude, -amplitude, amplitude / 2, -amplitude / 2]
    return [pattern[i % len(pattern)] for i in range(n)]


@pytest.fixture
def make_bars() -> Callable[..., List[DailyBar]]:
    """Factory fixture wrapping bars_from_returns."""
    return bars_from_returns


@pytest.fixture
def anomaly_config() -> AnomalyConfig:
    """
    Detector configuration with explicit defaults.

    Ensures tests run consistently regardless of RADAR_* environment settings.
    """
    return AnomalyConfig()


@pytest.fixture
def spike_series():
    """
    60 aligned days: day 30 has stock +12%, market +1%, volume x3.

    All other days carry small returns and constant volume. Returns the
    (stock_bars, market_bars) pair.
    """
    n = 60
    market = wiggle(n, 0.1)
    stock = list(market)
    market[30] = 1.0
    stock[30] = 12.0

    volumes = [1_000_000] * n
    volumes[30] = 3_000_000

    return bars_from_returns(stock, volumes), bars_from_returns(market)


@pytest.fixture
def bar_frame() -> pd.DataFrame:
    """Provider-shaped DataFrame (DatetimeIndex, capitalized columns)."""
    index = pd.date_range("2025-01-01", periods=5, freq="D")
    return pd.DataFrame(
        {
            "Close": [100.0, 101.0, 102.0, 101.5, 103.0],
            "Volume": [1000, 1100, 1200, 1300, 1400],
        },
        index=index,
    )


def pytest_configure(config):
    """
    Pytest hook for custom configuration.

    Registers custom markers used throughout tests.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
