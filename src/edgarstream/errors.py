# src/edgarstream/errors.py
"""
Exception types raised by edgarstream.

Transport-level connection failures are not wrapped: they surface as the
`urllib.error.URLError` raised by the standard library. Exceptions raised by
caller callbacks are propagated unchanged.
"""

from __future__ import annotations


class EdgarError(Exception):
    """Base class for all edgarstream errors."""


class StatusError(EdgarError):
    """A request completed with a non-success HTTP status."""

    def __init__(self, url: str, status_code: int):
        super().__init__(f"{url}: HTTP status {status_code}")
        self.url = url
        self.status_code = status_code


class ArchiveDecompressionError(EdgarError):
    """A partition index could not be decompressed."""

    def __init__(self, url: str):
        super().__init__(f"Failed to decompress index {url}")
        self.url = url


class IndexFormatError(EdgarError):
    """A partition index line is malformed."""

    def __init__(self, line: str, reason: str):
        super().__init__(f"Malformed index entry ({reason}): {line!r}")
        self.line = line
        self.reason = reason


class TagNotFoundError(EdgarError):
    """The opening tag never appeared in the document."""

    def __init__(self, tag: str):
        super().__init__(f"Missing tag <{tag}>")
        self.tag = tag


class UnterminatedTagError(EdgarError):
    """The document ended before the closing tag."""

    def __init__(self, tag: str):
        super().__init__(f"Document ended before </{tag}>")
        self.tag = tag


class DocumentDecodeError(EdgarError):
    """An extracted payload could not be decoded into a typed record."""
