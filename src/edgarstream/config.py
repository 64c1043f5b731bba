# src/edgarstream/config.py
"""
Archive constants for edgarstream.

Format-level facts about the EDGAR archive live here so parsers and the
client share one definition. This module MUST NOT contain any I/O.
"""

from __future__ import annotations


# =============================================================================
# Archive locations
# =============================================================================

ARCHIVE_BASE_URL = "https://www.sec.gov/Archives/"

# Quarterly full index, gzip-compressed master file
PARTITION_URL = ARCHIVE_BASE_URL + "edgar/full-index/{year}/QTR{quarter}/master.gz"


# =============================================================================
# Master index format
# =============================================================================

# Description / contact / column header lines at the top of every master file
INDEX_PREAMBLE_LINES = 11

INDEX_DELIMITER = "|"
INDEX_FIELD_COUNT = 5
INDEX_DATE_FORMAT = "%Y-%m-%d"

# Master files are ASCII in practice; company names occasionally are not
INDEX_ENCODING = "latin-1"


# =============================================================================
# Filing documents
# =============================================================================

# Tag wrapping the structured payload inside a filing envelope
XML_PAYLOAD_TAG = "XML"

FORM_TYPE_4 = "4"
FORM_TYPE_4_AMENDED = "4/A"
FORM4_TYPES = (FORM_TYPE_4, FORM_TYPE_4_AMENDED)
