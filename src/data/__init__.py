"""
Data module: Daily bar retrieval seams, validation, returns, and date alignment.

Responsible for converting raw provider bars into the aligned return series
the anomaly detector consumes. Pipeline:

    Provider bars (CSV / DataFrame / caller-owned client)
        ↓
    BarSource (src/data/sources.py) → DailyBar
        ↓
    Validation + returns (src/data/alignment.py) → ReturnPoint
        ↓
    Date alignment (src/data/alignment.py) → AlignedDay
        ↓
    Ready for anomaly detection (src/anomaly)
"""

from src.data.alignment import (
    align_series,
    clean_bars,
    compute_returns,
    is_valid_bar,
    trim_window,
)
from src.data.schema import AlignedDay, DailyBar, ReturnPoint
from src.data.sources import (
    BarSource,
    CSVBarSource,
    DataFrameBarSource,
    parse_bar,
    parse_bars,
)

__all__ = [
    # Schema
    "DailyBar",
    "ReturnPoint",
    "AlignedDay",

    # Sources
    "BarSource",
    "CSVBarSource",
    "DataFrameBarSource",
    "parse_bar",
    "parse_bars",

    # Alignment
    "align_series",
    "clean_bars",
    "compute_returns",
    "is_valid_bar",
    "trim_window",
]
