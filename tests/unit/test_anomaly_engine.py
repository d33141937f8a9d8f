"""
Unit tests for the anomaly detection engine.
"""

from datetime import date, timedelta
from math import isfinite

import pytest

from src.anomaly.engine import AnomalyDetector, event_id, window_position
from src.anomaly.schema import (
    AnomalySeverity,
    AnomalyType,
    BetaSource,
    DetectionStatus,
)
from src.core.config import AnomalyConfig, WindowConfig
from src.data.schema import AlignedDay

from conftest import wiggle


def _aligned(stock, market, volumes=None):
    volumes = volumes or [1_000_000] * len(stock)
    return [
        AlignedDay(
            date=date(2025, 1, 2) + timedelta(days=i),
            stock_return=s,
            market_return=m,
            stock_close=100.0 + i,
            stock_volume=v,
        )
        for i, (s, m, v) in enumerate(zip(stock, market, volumes))
    ]


def _spike_window():
    market = wiggle(60, 0.1)
    stock = list(market)
    market[30] = 1.0
    stock[30] = 12.0
    volumes = [1_000_000] * 60
    volumes[30] = 3_000_000
    return _aligned(stock, market, volumes)


def test_company_specific_spike(anomaly_config):
    days = _spike_window()

    result = AnomalyDetector(anomaly_config).detect_aligned(days, beta_override=1.0, symbol="ACME")

    assert result.status == DetectionStatus.OK
    assert result.window_size == 60
    assert len(result.events) == 1

    event = result.events[0]
    assert event.date == days[30].date
    assert event.symbol == "ACME"
    assert event.type == AnomalyType.COMPANY_SPECIFIC
    assert event.severity == AnomalySeverity.HIGH
    assert event.confidence == 95
    assert event.expected_return == pytest.approx(1.0)
    assert event.residual_return == pytest.approx(11.0)
    assert event.volume_ratio == pytest.approx(3.0)
    assert event.beta == 1.0
    assert event.sequence == "ATG-GCT-TTAG"
    assert event.close == days[30].stock_close
    assert event.position == pytest.approx(30 / 59 * 100)


def test_market_correlated_day(anomaly_config):
    market = wiggle(40, 0.1)
    market[25] = 3.0
    stock = list(market)
    volumes = [1_000_000] * 40
    volumes[25] = 3_000_000

    result = AnomalyDetector(anomaly_config).detect_aligned(
        _aligned(stock, market, volumes), beta_override=1.0
    )

    assert len(result.events) == 1
    event = result.events[0]
    assert event.type == AnomalyType.MARKET_CORRELATED
    assert event.residual_return == pytest.approx(0.0)
    assert event.z_score == 0.0
    assert event.severity == AnomalySeverity.LOW


def test_insufficient_data_returns_empty_result(anomaly_config):
    result = AnomalyDetector(anomaly_config).detect_aligned(_aligned([1.0], [1.0]))

    assert result.events == []
    assert result.status == DetectionStatus.INSUFFICIENT_DATA
    assert result.window_size == 1
    assert result.used_default_beta is True


def _noisy_linear(n=32, beta=1.2, noise=0.05):
    # noise pattern is mean-zero and orthogonal to the wiggle, so |z| stays at 1
    market = wiggle(n, 0.5)
    pattern = [noise, noise, -noise, -noise]
    stock = [beta * m + pattern[i % 4] for i, m in enumerate(market)]
    return stock, market


def test_quiet_window_has_no_events(anomaly_config):
    stock, market = _noisy_linear()

    result = AnomalyDetector(anomaly_config).detect_aligned(_aligned(stock, market))

    assert result.status == DetectionStatus.OK
    assert result.events == []
    assert result.beta == pytest.approx(1.2)
    assert result.beta_source == BetaSource.ESTIMATED


def test_override_reported_with_computed_beta(anomaly_config):
    stock, market = _noisy_linear()

    result = AnomalyDetector(anomaly_config).detect_aligned(_aligned(stock, market), beta_override=0.9)

    assert result.beta == 0.9
    assert result.computed_beta == pytest.approx(1.2)
    assert result.beta_source == BetaSource.OVERRIDE


def test_linear_series_with_intercept_has_no_events(anomaly_config):
    market = [0.13 * ((i * 7) % 11 - 5) + 0.01 * i for i in range(40)]
    stock = [1.3 * m + 0.2 for m in market]

    result = AnomalyDetector(anomaly_config).detect_aligned(_aligned(stock, market))

    assert result.beta_source == BetaSource.ESTIMATED
    assert result.beta == pytest.approx(1.3)
    assert result.events == []


@pytest.mark.parametrize("override", [float("nan"), float("inf")])
def test_non_finite_override_falls_back_to_estimate(anomaly_config, override):
    stock, market = _noisy_linear()
    volumes = [1_000_000] * len(stock)
    volumes[20] = 3_000_000

    result = AnomalyDetector(anomaly_config).detect_aligned(
        _aligned(stock, market, volumes), beta_override=override
    )

    assert result.beta_source == BetaSource.ESTIMATED
    assert result.beta == pytest.approx(1.2)
    assert len(result.events) == 1
    event = result.events[0]
    assert isfinite(event.expected_return)
    assert isfinite(event.residual_return)
    assert event.volume_ratio == pytest.approx(3.0)


def test_events_capped_and_newest_first():
    cfg = AnomalyConfig(window=WindowConfig(max_results=3))
    market = wiggle(50, 0.1)
    stock = list(market)
    volumes = [1_000_000] * 50
    for i in (5, 15, 25, 35, 45):
        volumes[i] = 5_000_000

    result = AnomalyDetector(cfg).detect_aligned(_aligned(stock, market, volumes), beta_override=1.0)

    assert len(result.events) == 3
    dates = [e.date for e in result.events]
    assert dates == sorted(dates, reverse=True)
    assert dates[0] == date(2025, 1, 2) + timedelta(days=45)


def test_window_limited_to_recent_days():
    cfg = AnomalyConfig(window=WindowConfig(max_aligned_days=20))
    market = wiggle(50, 0.1)
    stock = list(market)
    stock[5] = 15.0  # outside the last 20 days

    result = AnomalyDetector(cfg).detect_aligned(_aligned(stock, market), beta_override=1.0)

    assert result.window_size == 20
    assert result.events == []


def test_repeated_runs_are_identical(anomaly_config):
    detector = AnomalyDetector(anomaly_config)
    days = _spike_window()

    first = detector.detect_aligned(days, beta_override=1.0)
    second = detector.detect_aligned(days, beta_override=1.0)

    assert first == second
    assert [e.id for e in first.events] == [e.id for e in second.events]


def test_event_id_and_position_helpers():
    day = _aligned([0.0], [0.0])[0]

    assert event_id(day, 7) == "seq_20250102_007"
    assert window_position(0, 60) == 0.0
    assert window_position(59, 60) == 100.0
    assert window_position(0, 1) == 100.0


def test_detect_from_bars(spike_series, anomaly_config):
    stock_bars, market_bars = spike_series

    result = AnomalyDetector(anomaly_config).detect(stock_bars, market_bars, beta_override=1.0)

    assert result.window_size == 60
    assert len(result.events) == 1
    event = result.events[0]
    assert event.date == stock_bars[31].date
    assert event.severity == AnomalySeverity.HIGH
    assert event.confidence == 95
