# src/edgarstream/index/partitions.py
"""
Quarterly partition enumeration.

The full index is published as one master file per (year, quarter). A date
range maps to the partitions that can contain its filings, newest first, so
callers looking for recent filings can stop early.
"""

from __future__ import annotations

from datetime import date
from typing import Iterator, Tuple

from edgarstream.config import PARTITION_URL


def quarter_of(month: int) -> int:
    """Calendar quarter (1-4) containing `month` (1-12)."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    return (month - 1) // 3 + 1


def iter_partitions(start: date, end: date) -> Iterator[Tuple[int, int]]:
    """
    Yield the (year, quarter) partitions covering [start, end], newest first.

    An inverted range (start after end) yields nothing.

    Example
    -------
    >>> list(iter_partitions(date(2018, 6, 1), date(2018, 10, 20)))
    [(2018, 4), (2018, 3), (2018, 2)]
    """
    if start > end:
        return

    for year in range(end.year, start.year - 1, -1):
        start_quarter = 1 if year > start.year else quarter_of(start.month)
        end_quarter = 4 if year < end.year else quarter_of(end.month)

        for quarter in range(end_quarter, start_quarter - 1, -1):
            yield year, quarter


def partition_url(year: int, quarter: int) -> str:
    return PARTITION_URL.format(year=year, quarter=quarter)
