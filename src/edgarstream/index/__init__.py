# src/edgarstream/index/__init__.py
"""
Quarterly full-index support for edgarstream.

This subpackage knows the layout of the EDGAR full index: how a date range
maps to (year, quarter) partitions, and how master index lines map to
IndexEntry records. It performs no network access; see `edgarstream.client`.
"""

from .entry import IndexEntry, entries_to_dataframe, parse_index_entry
from .partitions import iter_partitions, partition_url, quarter_of
from .reader import STOP, iter_index, parse_index

__all__ = [
    "IndexEntry",
    "STOP",
    "entries_to_dataframe",
    "iter_index",
    "iter_partitions",
    "parse_index",
    "parse_index_entry",
    "partition_url",
    "quarter_of",
]
