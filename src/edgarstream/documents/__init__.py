# src/edgarstream/documents/__init__.py
"""
Filing document handling: streaming section extraction from submission
envelopes and decoding of structured payloads.
"""

from .form4 import Form4, Form4Transaction, parse_form4, parse_form4_from_document
from .tagged import CursorState, TaggedPayloadReader, extract_tag

__all__ = [
    "CursorState",
    "Form4",
    "Form4Transaction",
    "TaggedPayloadReader",
    "extract_tag",
    "parse_form4",
    "parse_form4_from_document",
]
