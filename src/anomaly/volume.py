"""
Trailing volume baselines.

Each day's volume is compared to the mean of the days before it in the
window, never including the day itself.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Sequence


@dataclass
class VolumeAnomalyDetector:
    """
    Same-day volume / trailing-mean volume.

    Warm-up: the first day of a window has no history and gets a neutral
    ratio of 1.0; later days average the preceding min(lookback, i) volumes.
    """

    lookback: int = 20

    def ratios(self, volumes: Sequence[float]) -> List[float]:
        window: Deque[float] = deque(maxlen=self.lookback)
        ratios: List[float] = []

        for volume in volumes:
            ratios.append(self._ratio(float(volume), window))
            window.append(float(volume))

        return ratios

    def _ratio(self, volume: float, window: Deque[float]) -> float:
        if not window:
            return 1.0
        baseline = sum(window) / len(window)
        if baseline <= 0.0:
            return 1.0
        return volume / baseline
