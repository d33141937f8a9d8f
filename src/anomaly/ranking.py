"""
Ordering and truncation of detected anomalies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from .schema import AnomalyEvent


@dataclass
class AnomalyRanker:
    """
    Most recent first, capped at max_results.

    Severity is never used for ordering; callers that want it can sort on
    the severity field themselves.
    """

    max_results: int = 6

    def rank(self, events: Iterable[AnomalyEvent]) -> List[AnomalyEvent]:
        if self.max_results <= 0:
            return []
        ordered = sorted(events, key=lambda e: (e.date, e.position), reverse=True)
        return ordered[: self.max_results]
