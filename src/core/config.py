"""
Application configuration for the Anomaly Radar.

Provides environment-aware settings with reproducible defaults. All anomaly
thresholds are configurable to avoid hard-coded "magic numbers", but they are
fixed per run: nothing here adapts to the data.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnomalyThresholds(BaseModel):
	"""
	Thresholds for flagging and classifying anomalous days.

	Rationale:
	- The z-score and volume cut-offs are empirically chosen screening values,
	  not derived from a significance level.
	- Return-based thresholds are in percentage points.
	"""

	zscore_anomaly: float = Field(1.5, ge=0.0, description="|z| above which a day is anomalous")
	volume_ratio_anomaly: float = Field(
		2.0, ge=0.0, description="Volume ratio above which a day is anomalous"
	)

	zscore_high: float = Field(3.0, ge=0.0, description="High severity z-score")
	zscore_medium: float = Field(2.0, ge=0.0, description="Medium severity z-score")
	residual_high: float = Field(5.0, ge=0.0, description="High severity |residual| (%)")
	residual_medium: float = Field(3.0, ge=0.0, description="Medium severity |residual| (%)")

	market_correlated_market_move: float = Field(
		2.0, ge=0.0, description="|market return| needed for a market-correlated move"
	)
	market_correlated_max_residual: float = Field(
		1.0, ge=0.0, description="|residual| must stay below this for a market-correlated move"
	)
	hybrid_market_move: float = Field(
		1.0, ge=0.0, description="|market return| needed for a hybrid move"
	)
	hybrid_min_residual: float = Field(
		2.0, ge=0.0, description="|residual| needed for a hybrid move"
	)


class BetaConfig(BaseModel):
	"""
	Configuration for beta estimation.

	Notes:
	- min_points: aligned days required before the regression is trusted.
	- default_beta: fallback when data is short or the market is flat.
	"""

	min_points: int = Field(20, ge=2)
	default_beta: float = 1.0


class VolumeConfig(BaseModel):
	"""
	Trailing volume baseline configuration.
	"""

	lookback: int = Field(20, ge=1)


class ConfidenceConfig(BaseModel):
	"""
	Display confidence heuristic: min(cap, base + |z| * zscore_scale).

	This is a presentation score, not a statistical confidence interval.
	"""

	base: float = Field(60.0, ge=0.0, le=100.0)
	zscore_scale: float = Field(10.0, ge=0.0)
	cap: float = Field(95.0, ge=0.0, le=100.0)


class WindowConfig(BaseModel):
	"""
	Analysis window configuration.

	Notes:
	- lookback_days: calendar days of history requested from the bar source.
	- max_aligned_days: most recent aligned days kept for the regression.
	- max_results: cap on anomalies returned per symbol.
	"""

	lookback_days: int = Field(90, ge=2)
	max_aligned_days: int = Field(60, ge=2)
	max_results: int = Field(6, ge=1)
	benchmark_symbol: str = Field("SPY", min_length=1)


class AnomalyConfig(BaseModel):
	"""
	Anomaly detection configuration.
	"""

	thresholds: AnomalyThresholds = AnomalyThresholds()
	beta: BetaConfig = BetaConfig()
	volume: VolumeConfig = VolumeConfig()
	confidence: ConfidenceConfig = ConfidenceConfig()
	window: WindowConfig = WindowConfig()


class Config(BaseSettings):
	"""
	Global configuration with environment overrides.

	Nested values can be overridden with a double underscore, e.g.
	RADAR_ANOMALY__WINDOW__MAX_RESULTS=10.
	"""

	model_config = SettingsConfigDict(
		env_prefix="RADAR_",
		env_file=".env",
		env_nested_delimiter="__",
		extra="ignore",
	)

	log_level: str = Field("INFO", description="Default logging level")
	logs_dir: Path = Field(Path("logs"), description="Directory for log files")
	max_workers: int = Field(4, ge=1, description="Worker threads for multi-symbol runs")
	anomaly: AnomalyConfig = AnomalyConfig()

	def model_post_init(self, __context: object) -> None:
		self.logs_dir.mkdir(parents=True, exist_ok=True)


config = Config()
