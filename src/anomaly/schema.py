"""
Schema definitions for beta-adjusted anomaly detection.

All anomaly outputs are deterministic and explainable. Each event carries the
returns, the market-model expectation, and the deviations that flagged it, so
repeated runs over the same bars produce identical events.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnomalyType(str, Enum):
    """Why a day moved the way it did."""

    COMPANY_SPECIFIC = "company_specific"
    MARKET_CORRELATED = "market_correlated"
    HYBRID = "hybrid"


class AnomalySeverity(str, Enum):
    """Severity levels for anomalies."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BetaSource(str, Enum):
    """Where the beta used for a run came from."""

    OVERRIDE = "override"
    ESTIMATED = "estimated"
    DEFAULT = "default"


class DetectionStatus(str, Enum):
    """Outcome of a detection run."""

    OK = "ok"
    INSUFFICIENT_DATA = "insufficient_data"


class BetaEstimate(BaseModel):
    """
    Beta used for a run plus the locally computed value.

    Fields:
    - value: beta applied downstream
    - computed: regression beta (or the default when the regression degenerates)
    - source: override, estimated, or default
    - used_default: True when the regression fell back to the default beta
    """

    model_config = ConfigDict(frozen=True)

    value: float
    computed: float
    source: BetaSource
    used_default: bool


class ResidualPoint(BaseModel):
    """
    Market-model decomposition of one aligned day.

    Fields:
    - expected_return: beta * market_return
    - residual_return: stock_return - expected_return
    - z_score: residual standardized against the window's residuals
    """

    model_config = ConfigDict(frozen=True)

    date: dt.date
    stock_return: float
    market_return: float
    expected_return: float
    residual_return: float
    z_score: float


class AnomalyEvent(BaseModel):
    """
    A single anomalous trading day.

    Fields:
    - id: stable identifier built from the date and window index
    - symbol: instrument symbol (empty when the caller didn't name it)
    - date: calendar date; the join key for news correlation
    - type / severity: classification results
    - sequence: symbolic fingerprint of the bucketed move
    - stock_return, market_return, expected_return, residual_return: percent
    - beta: coefficient used for the whole run
    - z_score: residual z-score for this day
    - volume_ratio: same-day volume / trailing baseline
    - confidence: display heuristic in [0, 100], not a statistical interval
    - position: 0 (oldest) to 100 (newest) within the window, for placement only
    - close: instrument close on the day
    """

    model_config = ConfigDict(frozen=True)

    id: str
    symbol: str = ""
    date: dt.date
    type: AnomalyType
    severity: AnomalySeverity
    sequence: str
    stock_return: float
    market_return: float
    expected_return: float
    residual_return: float
    beta: float
    z_score: float
    volume_ratio: float = Field(ge=0.0)
    confidence: int = Field(ge=0, le=100)
    position: float = Field(ge=0.0, le=100.0)
    close: Optional[float] = None


class DetectionResult(BaseModel):
    """
    Events for one symbol plus run diagnostics.

    Lets a caller tell "nothing anomalous" (status ok, no events) apart from
    "not enough data" (status insufficient_data).
    """

    symbol: str = ""
    events: List[AnomalyEvent] = Field(default_factory=list)
    beta: float
    computed_beta: float
    beta_source: BetaSource
    used_default_beta: bool
    window_size: int = Field(ge=0)
    status: DetectionStatus
