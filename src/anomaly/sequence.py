"""
Symbolic sequence encoding for anomalies.

Buckets a day's return, residual and volume ratio and joins one token per
bucket into a short fingerprint such as "ATG-GCT-TTAG". The tokens carry no
meaning beyond being compact and visually distinct.

Token table:

    group     bucket               token
    return    > +5                 ATG
    return    > 0                  ATC
    return    < -5                 TAC
    return    otherwise            TAG
    residual  |residual| > 3       GCT
    residual  |residual| > 1       GCA
    residual  otherwise            GCG
    volume    ratio > 2            TTAG
    volume    ratio > 1.5          TCAG
    volume    otherwise            TGAG
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

RETURN_TOKENS = ("ATG", "ATC", "TAC", "TAG")
RESIDUAL_TOKENS = ("GCT", "GCA", "GCG")
VOLUME_TOKENS = ("TTAG", "TCAG", "TGAG")

SEPARATOR = "-"


def return_bucket(stock_return: float) -> int:
    if stock_return > 5.0:
        return 0
    if stock_return > 0.0:
        return 1
    if stock_return < -5.0:
        return 2
    return 3


def residual_bucket(residual_return: float) -> int:
    residual = abs(residual_return)
    if residual > 3.0:
        return 0
    if residual > 1.0:
        return 1
    return 2


def volume_bucket(volume_ratio: float) -> int:
    if volume_ratio > 2.0:
        return 0
    if volume_ratio > 1.5:
        return 1
    return 2


@dataclass(frozen=True)
class SequenceEncoder:
    """
    Pure, total mapping from bucket triples to sequence strings.
    """

    separator: str = SEPARATOR

    def buckets(
        self, stock_return: float, residual_return: float, volume_ratio: float
    ) -> Tuple[int, int, int]:
        return (
            return_bucket(stock_return),
            residual_bucket(residual_return),
            volume_bucket(volume_ratio),
        )

    def encode(self, stock_return: float, residual_return: float, volume_ratio: float) -> str:
        r, s, v = self.buckets(stock_return, residual_return, volume_ratio)
        return self.separator.join((RETURN_TOKENS[r], RESIDUAL_TOKENS[s], VOLUME_TOKENS[v]))
