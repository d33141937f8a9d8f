"""
Anomaly module: Beta-adjusted anomaly detection.

Implements deterministic beta estimation, residual analysis, volume baselines,
classification, sequence encoding, and ranking of anomaly events.
"""

from .beta import BetaEstimator
from .engine import AnomalyDetector
from .ranking import AnomalyRanker
from .residuals import ResidualAnalyzer, has_zero_dispersion, population_stats
from .schema import (
    AnomalyEvent,
    AnomalySeverity,
    AnomalyType,
    BetaEstimate,
    BetaSource,
    DetectionResult,
    DetectionStatus,
    ResidualPoint,
)
from .scoring import AnomalyClassifier, Classification, confidence_score
from .sequence import SequenceEncoder
from .volume import VolumeAnomalyDetector

__all__ = [
	"AnomalyDetector",
	"AnomalyEvent",
	"AnomalySeverity",
	"AnomalyType",
	"BetaEstimate",
	"BetaSource",
	"DetectionResult",
	"DetectionStatus",
	"ResidualPoint",
	"BetaEstimator",
	"ResidualAnalyzer",
	"population_stats",
	"has_zero_dispersion",
	"VolumeAnomalyDetector",
	"AnomalyClassifier",
	"Classification",
	"confidence_score",
	"SequenceEncoder",
	"AnomalyRanker",
]
