"""
News correlation exports.
"""

from .config import NewsConfig
from .correlator import NewsCorrelator
from .schema import CorrelatedAnomaly, NewsArticle

__all__ = [
    "NewsCorrelator",
    "NewsConfig",
    "CorrelatedAnomaly",
    "NewsArticle",
]
