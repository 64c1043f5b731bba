# src/edgarstream/__init__.py
"""
edgarstream

Streaming access to SEC EDGAR filings: date-range traversal of the
quarterly full index and incremental extraction of tagged payloads
(e.g. Form 4 XML) from submission envelopes.

Public API:
- Client
- get_logger
- extract_tag
- parse_form4 / parse_form4_from_document
- STOP
"""

from __future__ import annotations

from .logging_utils import get_logger

from .client import Client
from .documents import (
    Form4,
    Form4Transaction,
    TaggedPayloadReader,
    extract_tag,
    parse_form4,
    parse_form4_from_document,
)
from .errors import (
    ArchiveDecompressionError,
    DocumentDecodeError,
    EdgarError,
    IndexFormatError,
    StatusError,
    TagNotFoundError,
    UnterminatedTagError,
)
from .fetching import DEFAULT_FETCHER_CONFIG, FetcherConfig, URLFetcher
from .index import STOP, IndexEntry, iter_partitions, parse_index, parse_index_entry, quarter_of

__all__ = [
    "ArchiveDecompressionError",
    "Client",
    "DEFAULT_FETCHER_CONFIG",
    "DocumentDecodeError",
    "EdgarError",
    "FetcherConfig",
    "Form4",
    "Form4Transaction",
    "IndexEntry",
    "IndexFormatError",
    "STOP",
    "StatusError",
    "TagNotFoundError",
    "TaggedPayloadReader",
    "URLFetcher",
    "UnterminatedTagError",
    "extract_tag",
    "get_logger",
    "iter_partitions",
    "parse_form4",
    "parse_form4_from_document",
    "parse_index",
    "parse_index_entry",
    "quarter_of",
]
