# src/edgarstream/index/entry.py
"""
Master index entries.

Each non-header line of a quarterly master index describes one filing:

    CIK|Company Name|Form Type|Date Filed|Filename

`Filename` is relative to the archive root and resolves to the full
submission text file (the filing envelope).
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

import msgspec
import numpy as np
import pandas as pd

from edgarstream.config import (
    ARCHIVE_BASE_URL,
    INDEX_DATE_FORMAT,
    INDEX_DELIMITER,
    INDEX_FIELD_COUNT,
)
from edgarstream.errors import IndexFormatError


class IndexEntry(msgspec.Struct, frozen=True):
    cik: int
    company_name: str
    form_type: str
    date_filed: date
    filename: str

    @property
    def url(self) -> str:
        """Retrieval URL of the filing envelope."""
        return ARCHIVE_BASE_URL + self.filename

    def to_line(self) -> str:
        return INDEX_DELIMITER.join(
            [
                str(self.cik),
                self.company_name,
                self.form_type,
                self.date_filed.strftime(INDEX_DATE_FORMAT),
                self.filename,
            ]
        )

    def __str__(self) -> str:
        return self.to_line()


def parse_index_entry(line: str) -> IndexEntry:
    """
    Parse one master index line.

    Raises
    ------
    IndexFormatError
        Wrong number of columns, non-integer CIK or unparseable date.
    """
    cols = line.split(INDEX_DELIMITER)
    if len(cols) != INDEX_FIELD_COUNT:
        raise IndexFormatError(line, f"expected {INDEX_FIELD_COUNT} columns, got {len(cols)}")

    try:
        cik = int(cols[0])
    except ValueError:
        raise IndexFormatError(line, "CIK is not an integer") from None

    try:
        date_filed = datetime.strptime(cols[3], INDEX_DATE_FORMAT).date()
    except ValueError:
        raise IndexFormatError(line, "unparseable date") from None

    return IndexEntry(
        cik=cik,
        company_name=cols[1],
        form_type=cols[2],
        date_filed=date_filed,
        filename=cols[4],
    )


def entries_to_dataframe(entries: Iterable[IndexEntry]) -> pd.DataFrame:
    """
    Collect index entries into a DataFrame.

    Returns
    -------
    pandas.DataFrame
        Columns:
        - cik (int64)
        - company_name (object)
        - form_type (category)
        - date_filed (datetime64[s], day precision)
        - filename (object)
        - url (object)
    """
    rows = [msgspec.structs.asdict(e) | {"url": e.url} for e in entries]
    df = pd.DataFrame(
        rows,
        columns=["cik", "company_name", "form_type", "date_filed", "filename", "url"],
    )

    df["cik"] = df["cik"].astype("int64")
    df["form_type"] = pd.Categorical(df["form_type"])
    df["date_filed"] = (
        np.array([d.isoformat() for d in df["date_filed"]], dtype="datetime64[D]")
        .astype("datetime64[s]")
    )
    return df
