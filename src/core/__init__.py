"""
Core module: Configuration, logging, and exception handling.
"""

from .config import Config, config
from .exceptions import (
    AnomalyDetectionError,
    ConfigurationError,
    DataSourceError,
    DataValidationError,
)

__all__ = [
    "Config",
    "config",
    "AnomalyDetectionError",
    "DataSourceError",
    "DataValidationError",
    "ConfigurationError",
]
