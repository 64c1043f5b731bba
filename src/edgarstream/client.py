# src/edgarstream/client.py
"""
EDGAR client: date-range traversal of the quarterly full index and
retrieval of the filings it references.

A Client owns one URLFetcher (and therefore one rate limit) and no other
state, so a single instance can be shared between threads. Construct as many
isolated instances as needed; there is no module-level default client.

Typical use
-----------
>>> client = Client()
>>> for entry in client.iter_index_entries(date(2018, 10, 15), date(2018, 10, 19)):
...     print(entry.form_type, entry.url)
"""

from __future__ import annotations

import gzip
import logging
import zlib
from contextlib import closing
from datetime import date, datetime
from typing import BinaryIO, Callable, Iterable, Iterator, Optional, Union

import pandas as pd

from edgarstream.config import FORM4_TYPES
from edgarstream.documents.form4 import Form4, parse_form4_from_document
from edgarstream.errors import ArchiveDecompressionError
from edgarstream.fetching import FetcherConfig, URLFetcher
from edgarstream.index.entry import IndexEntry, entries_to_dataframe
from edgarstream.index.partitions import iter_partitions, partition_url
from edgarstream.index.reader import STOP, iter_index


DateLike = Union[date, datetime]

_DECOMPRESSION_ERRORS = (gzip.BadGzipFile, EOFError, zlib.error)


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _run_callback(items: Iterator, f: Callable) -> bool:
    try:
        for item in items:
            if f(item) is STOP:
                return True
    finally:
        items.close()
    return False


class Client:
    """
    SEC EDGAR client.

    Parameters
    ----------
    logger:
        Logger for progress messages. Defaults to this module's logger,
        which propagates to the application's logging configuration.
    config:
        Transport configuration, used when `fetcher` is not given.
    fetcher:
        Pre-built URLFetcher, e.g. to share one rate limit between clients.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        config: Optional[FetcherConfig] = None,
        fetcher: Optional[URLFetcher] = None,
    ):
        self._logger = logger or logging.getLogger(__name__)
        self._fetcher = fetcher or URLFetcher(self._logger, config)

    @property
    def fetcher(self) -> URLFetcher:
        return self._fetcher

    # -----------------------------
    # full index traversal
    # -----------------------------

    def _iter_partition(self, resp: BinaryIO, url: str) -> Iterator[IndexEntry]:
        count = 0
        # The line reader must be finalized before the gzip stream closes.
        with gzip.GzipFile(fileobj=resp, mode="rb") as zf, closing(iter_index(zf)) as entries:
            while True:
                try:
                    entry = next(entries)
                except StopIteration:
                    break
                except _DECOMPRESSION_ERRORS as e:
                    raise ArchiveDecompressionError(url) from e
                count += 1
                yield entry

        if count == 0:
            self._logger.debug(f"No entries in {url}")

    def iter_index_entries(self, start: DateLike, end: Optional[DateLike] = None) -> Iterator[IndexEntry]:
        """
        Yield full index entries filed between `start` and `end` (inclusive).

        Partitions are fetched one at a time, newest quarter first; within a
        partition entries keep the order of the index file. `end` defaults to
        today. An inverted range yields nothing and fetches nothing.

        Closing the generator (or breaking out of a for loop) releases the
        open response.

        Raises
        ------
        StatusError, urllib.error.URLError
            Transport failures.
        ArchiveDecompressionError
            A partition is not valid gzip data.
        IndexFormatError
            A partition contains a malformed line.
        """
        start_date = _as_date(start)
        end_date = _as_date(end) if end is not None else date.today()

        if start_date > end_date:
            self._logger.debug(f"Empty range {start_date} > {end_date}")
            return

        for year, quarter in iter_partitions(start_date, end_date):
            url = partition_url(year, quarter)
            self._logger.info(f"Loading index {year} QTR{quarter}")

            resp = self._fetcher.fetch(url)
            try:
                with closing(self._iter_partition(resp, url)) as entries:
                    for entry in entries:
                        if start_date <= entry.date_filed <= end_date:
                            yield entry
            finally:
                resp.close()

    def get_index_entries(
        self,
        start: DateLike,
        end: Optional[DateLike],
        f: Callable[[IndexEntry], Optional[object]],
    ) -> bool:
        """
        Call `f` for each full index entry filed between `start` and `end`.

        `f` may return STOP to end the traversal early; anything it raises
        aborts the traversal and propagates unchanged.

        Returns
        -------
        bool
            True if `f` stopped the traversal, False if it ran to completion.
        """
        return _run_callback(self.iter_index_entries(start, end), f)

    def index_entries_dataframe(
        self,
        start: DateLike,
        end: Optional[DateLike] = None,
        form_types: Optional[Iterable[str]] = None,
    ) -> pd.DataFrame:
        """
        Collect index entries into a DataFrame (see `entries_to_dataframe`),
        optionally keeping only the given form types.
        """
        entries = self.iter_index_entries(start, end)
        if form_types is not None:
            wanted = frozenset(form_types)
            entries = (e for e in entries if e.form_type in wanted)
        return entries_to_dataframe(entries)

    # -----------------------------
    # Form 4 filings
    # -----------------------------

    def fetch_form4(self, entry: IndexEntry) -> Form4:
        """Download the filing referenced by `entry` and decode its Form 4 payload."""
        with self._fetcher.fetch(entry.url) as resp:
            return parse_form4_from_document(resp)

    def iter_form4_filings(self, start: DateLike, end: Optional[DateLike] = None) -> Iterator[Form4]:
        """
        Yield Form 4 and Form 4/A filings filed between `start` and `end`.

        Filings are decoded in index order (newest quarter first). Any
        download or decode failure aborts the iteration.
        """
        entries = self.iter_index_entries(start, end)
        try:
            for entry in entries:
                if entry.form_type not in FORM4_TYPES:
                    continue
                self._logger.debug(f"Decoding Form {entry.form_type} {entry.filename}")
                yield self.fetch_form4(entry)
        finally:
            entries.close()

    def get_form4_filings(
        self,
        start: DateLike,
        end: Optional[DateLike],
        f: Callable[[Form4], Optional[object]],
    ) -> bool:
        """
        Call `f` for each Form 4 filing between `start` and `end`.

        Same stop / error semantics as `get_index_entries`.
        """
        return _run_callback(self.iter_form4_filings(start, end), f)
