"""
News correlation for anomaly events.

Attaches caller-supplied articles to anomaly events by date proximity and
returns stable, machine-consumable records. Retrieval of the articles
themselves stays with the caller.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from src.anomaly.schema import AnomalyEvent

from .config import NewsConfig
from .schema import CorrelatedAnomaly, NewsArticle

logger = logging.getLogger("backend.news")


class NewsCorrelator:
    """
    Deterministic news correlator.

    Matching rules:
    - An article matches when its publication date is within max_gap_days
      calendar days of the event date.
    - With match_symbol, articles tagged with a different symbol are skipped
      (untagged articles always qualify).
    - Matches are ordered by day distance, then publication time, then title.
    """

    def __init__(self, config: Optional[NewsConfig] = None) -> None:
        self.config = config or NewsConfig()

    def correlate(
        self,
        events: Iterable[AnomalyEvent],
        articles: Iterable[NewsArticle],
    ) -> List[CorrelatedAnomaly]:
        """
        Pair each event with its nearest articles.

        Args:
            events: AnomalyEvent objects, in the order they should be returned.
            articles: NewsArticle objects in any order.

        Returns:
            One CorrelatedAnomaly per event, in input order.
        """
        article_list = list(articles)
        correlated = [
            CorrelatedAnomaly(event=event, articles=self._match(event, article_list))
            for event in events
        ]

        matched = sum(1 for c in correlated if c.has_news)
        logger.info("Correlated news for %d of %d anomaly event(s)", matched, len(correlated))
        return correlated

    def _match(self, event: AnomalyEvent, articles: List[NewsArticle]) -> List[NewsArticle]:
        candidates: List[Tuple[int, NewsArticle]] = []
        for article in articles:
            if not self._symbol_matches(event, article):
                continue
            gap = abs((article.published_at.date() - event.date).days)
            if gap <= self.config.max_gap_days:
                candidates.append((gap, article))

        candidates.sort(key=lambda c: (c[0], c[1].published_at, c[1].title))
        return [article for _, article in candidates[: self.config.max_articles]]

    def _symbol_matches(self, event: AnomalyEvent, article: NewsArticle) -> bool:
        if not self.config.match_symbol or not article.symbol or not event.symbol:
            return True
        return article.symbol.upper() == event.symbol.upper()
