"""
Canonical internal market-data schema for the anomaly pipeline.

This module defines the standardized representation of daily bars after
retrieval from a data provider, the returns derived from them, and the
instrument/benchmark pairs the anomaly detector consumes.

Design rationale:
- Minimal fields (only what's needed for a single-factor market model)
- Dates are calendar dates; any time-of-day component is discarded
- Bars are immutable once retrieved
- Returns are expressed in percent, not fractions
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DailyBar(BaseModel):
    """
    One trading day for one instrument.

    Attributes:
        date: Calendar date of the session
        close: Closing price
        volume: Shares traded

    Notes:
        - close and volume are not range-checked here. Non-positive closes and
          negative volumes are dropped by the series aligner so providers can
          hand over raw data untouched.
        - datetime inputs are reduced to their calendar date.
    """

    model_config = ConfigDict(frozen=True)

    date: dt.date = Field(
        ...,
        description="Calendar date of the session"
    )

    close: float = Field(
        ...,
        description="Closing price"
    )

    volume: int = Field(
        default=0,
        description="Shares traded during the session"
    )

    @field_validator("date", mode="before")
    @classmethod
    def _calendar_date(cls, value):
        if isinstance(value, dt.datetime):
            return value.date()
        return value


class ReturnPoint(BaseModel):
    """
    Daily return derived from two consecutive valid bars.

    return_pct = (close - previous_close) / previous_close * 100

    The earliest bar of a series never produces a ReturnPoint.
    """

    model_config = ConfigDict(frozen=True)

    date: dt.date
    close: float = Field(..., gt=0.0)
    volume: int = Field(..., ge=0)
    return_pct: float


class AlignedDay(BaseModel):
    """
    Instrument and benchmark returns for the same calendar date.

    Attributes:
        date: Calendar date present in both series
        stock_return: Instrument return in percent
        market_return: Benchmark return in percent
        stock_close: Instrument close on this date
        stock_volume: Instrument volume on this date
    """

    model_config = ConfigDict(frozen=True)

    date: dt.date
    stock_return: float
    market_return: float
    stock_close: float = Field(..., gt=0.0)
    stock_volume: int = Field(..., ge=0)
