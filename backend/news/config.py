"""
Configuration for news correlation.

All settings are deterministic and bounded so a noisy news feed cannot
bloat the correlated output.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class NewsConfig(BaseModel):
    """
    News correlation configuration.

    Notes:
    - max_gap_days: largest calendar-day distance between an anomaly and an article.
    - max_articles: cap on articles attached to a single anomaly.
    - match_symbol: if True, articles tagged with another symbol are ignored.
    """

    max_gap_days: int = Field(1, ge=0)
    max_articles: int = Field(1, ge=1)
    match_symbol: bool = True
