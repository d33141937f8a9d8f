"""
Custom exceptions for the Anomaly Radar.

These exceptions provide clear error semantics across the system.
Use them to distinguish between data issues, provider problems, and configuration errors.
"""


class AnomalyDetectionError(Exception):
    """Base exception for anomaly detection failures."""
    pass


class DataValidationError(AnomalyDetectionError):
    """Raised when input data fails validation or parsing."""
    pass


class DataSourceError(AnomalyDetectionError):
    """Raised when a bar or beta provider cannot deliver data."""
    pass


class ConfigurationError(AnomalyDetectionError):
    """Raised when configuration is invalid or missing."""
    pass
