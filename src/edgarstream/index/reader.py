# src/edgarstream/index/reader.py
"""
Line-oriented reading of decompressed master index files.

Malformed lines are never skipped: the archive format is stable, so a bad
line means a corrupt download or a format change and processing stops.
"""

from __future__ import annotations

import io
from itertools import islice
from typing import BinaryIO, Callable, Iterator, Optional

from edgarstream.config import INDEX_ENCODING, INDEX_PREAMBLE_LINES
from edgarstream.index.entry import IndexEntry, parse_index_entry


class _Stop:
    __slots__ = ()

    def __repr__(self) -> str:
        return "STOP"


# Returned by a per-record callback to end iteration without an error.
STOP = _Stop()


def iter_index(stream: BinaryIO) -> Iterator[IndexEntry]:
    """
    Yield the entries of a master index read from a binary stream.

    The 11-line preamble is skipped and blank lines are ignored. An empty
    stream yields nothing.

    Raises
    ------
    IndexFormatError
        On the first malformed line.
    """
    text = io.TextIOWrapper(stream, encoding=INDEX_ENCODING, newline="")
    try:
        for raw in islice(text, INDEX_PREAMBLE_LINES, None):
            line = raw.rstrip("\r\n")
            if not line.strip():
                continue
            yield parse_index_entry(line)
    finally:
        # Leave closing the underlying stream to its owner.
        text.detach()


def parse_index(stream: BinaryIO, f: Callable[[IndexEntry], Optional[object]]) -> bool:
    """
    Call `f` for each entry of a master index read from `stream`.

    Returns
    -------
    bool
        True if `f` returned STOP, False if the index was read to the end.
    """
    for entry in iter_index(stream):
        if f(entry) is STOP:
            return True
    return False
