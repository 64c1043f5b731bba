# src/edgarstream/documents/tagged.py
"""
Streaming extraction of a tagged section from an SEC filing envelope.

A full submission text file wraps each document in SGML-like markers, e.g.

    <DOCUMENT>
    <TYPE>4
    <TEXT>
    <XML>
    <?xml version="1.0"?>
    <ownershipDocument>...</ownershipDocument>
    </XML>
    </TEXT>
    </DOCUMENT>

`extract_tag` reads the envelope only up to the opening marker and returns a
file-like object producing the lines between the markers on demand, so a
decoder can start parsing before the rest of the envelope has arrived.
"""

from __future__ import annotations

import enum
import io
from typing import Iterable, Iterator, Optional

from edgarstream.errors import TagNotFoundError, UnterminatedTagError


class CursorState(enum.Enum):
    SEARCHING = "searching"
    EMITTING = "emitting"
    EXHAUSTED = "exhausted"


def _chomp(line: bytes) -> bytes:
    if line.endswith(b"\r\n"):
        return line[:-2]
    if line.endswith(b"\n"):
        return line[:-1]
    return line


class TaggedPayloadReader(io.RawIOBase):
    """
    Read-only, forward-only view of the content between <tag> and </tag>.

    Each underlying line is pulled only when the consumer asks for more data.
    Once the closing marker is seen the reader is exhausted for good and the
    envelope is not read any further.
    """

    def __init__(
        self,
        lines: Iterable[bytes],
        tag: str,
        strict: bool = True,
        keepends: bool = False,
    ):
        super().__init__()
        self.tag = tag
        self.strict = strict
        self.keepends = keepends
        self.state = CursorState.SEARCHING

        self._lines: Iterator[bytes] = iter(lines)
        self._opening = f"<{tag}>".encode("ascii")
        self._closing = f"</{tag}>".encode("ascii")
        self._pending = b""
        self._offset = 0

    def readable(self) -> bool:
        return True

    def find_opening_tag(self) -> None:
        """
        Advance the envelope past the opening marker.

        Raises
        ------
        TagNotFoundError
            The envelope ended without the opening marker.
        """
        if self.state is not CursorState.SEARCHING:
            return

        for line in self._lines:
            if line.strip() == self._opening:
                self.state = CursorState.EMITTING
                return

        self.state = CursorState.EXHAUSTED
        raise TagNotFoundError(self.tag)

    def _next_line(self) -> Optional[bytes]:
        if self.state is CursorState.SEARCHING:
            self.find_opening_tag()
        if self.state is CursorState.EXHAUSTED:
            return None

        try:
            line = next(self._lines)
        except StopIteration:
            self.state = CursorState.EXHAUSTED
            if self.strict:
                raise UnterminatedTagError(self.tag) from None
            return None

        if line.strip() == self._closing:
            self.state = CursorState.EXHAUSTED
            return None

        return line if self.keepends else _chomp(line)

    def _take_pending(self) -> bytes:
        chunk = self._pending[self._offset:]
        self._pending = b""
        self._offset = 0
        return chunk

    def chunks(self) -> Iterator[bytes]:
        """Yield the payload one line at a time (empty lines included)."""
        if self._offset < len(self._pending):
            yield self._take_pending()

        while True:
            line = self._next_line()
            if line is None:
                return
            yield line

    def readinto(self, b) -> int:
        view = memoryview(b).cast("B")
        if len(view) == 0:
            return 0

        # Blank payload lines are skipped here: a zero-byte read means EOF.
        while self._offset >= len(self._pending):
            line = self._next_line()
            if line is None:
                return 0
            self._pending = line
            self._offset = 0

        n = min(len(view), len(self._pending) - self._offset)
        view[:n] = self._pending[self._offset:self._offset + n]
        self._offset += n
        return n


def extract_tag(
    envelope: Iterable[bytes],
    tag: str,
    *,
    strict: bool = True,
    keepends: bool = False,
) -> TaggedPayloadReader:
    """
    Extract a tagged section from an SEC document read from `envelope`.

    Parameters
    ----------
    envelope:
        Binary file-like object (or any iterable of byte lines).
    tag:
        Marker name without angle brackets, e.g. "XML".
    strict:
        If True, reaching the end of the envelope before </tag> raises
        UnterminatedTagError from the reader. If False the payload silently
        ends there.
    keepends:
        Keep each payload line's separator instead of stripping it.

    Returns
    -------
    TaggedPayloadReader
        Reader positioned just after the opening marker.

    Raises
    ------
    TagNotFoundError
        The envelope does not contain <tag>. The envelope has been consumed.
    """
    reader = TaggedPayloadReader(envelope, tag, strict=strict, keepends=keepends)
    reader.find_opening_tag()
    return reader
