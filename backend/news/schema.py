"""
Schema for news correlation.

Articles are supplied by the caller; the detector's AnomalyEvent.date is the
only join key used to attach them.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.anomaly.schema import AnomalyEvent


class NewsArticle(BaseModel):
    """
    News article reference.

    Fields:
    - title: headline
    - published_at: publication time
    - url: optional link
    - symbol: optional ticker the provider tagged the article with
    """

    title: str = Field(min_length=1)
    published_at: datetime
    url: Optional[str] = None
    symbol: Optional[str] = None


class CorrelatedAnomaly(BaseModel):
    """
    Anomaly event with the articles published around its date.

    Fields:
    - event: the untouched anomaly event
    - articles: nearest articles first, bounded by max_articles
    """

    event: AnomalyEvent
    articles: List[NewsArticle] = Field(default_factory=list)

    @property
    def has_news(self) -> bool:
        return bool(self.articles)
