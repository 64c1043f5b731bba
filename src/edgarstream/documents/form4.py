# src/edgarstream/documents/form4.py
"""
SEC Form 4 (statement of changes in beneficial ownership) decoding.

Form 4 filings carry their structured content as an <ownershipDocument> XML
payload inside the <XML> section of the submission envelope. Fields are mapped
declaratively: each record type has a table of
(field name, element path, converter) rows, and the collected values are
validated into msgspec structs.

Numeric prices are frequently blank or footnoted ("See F1") in real filings,
so they are decoded leniently to 0.0.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, BinaryIO, Callable, Dict, Iterable, List, Optional, Tuple
from xml.etree import ElementTree

import msgspec
import numpy as np
import pandas as pd

from edgarstream.config import XML_PAYLOAD_TAG
from edgarstream.documents.tagged import extract_tag
from edgarstream.errors import DocumentDecodeError


# -----------------------------
# typed records
# -----------------------------

class Form4Transaction(msgspec.Struct):
    security_title: str = ""
    transaction_date: Optional[date] = None
    conversion_or_exercise_price: float = 0.0
    form_type: str = ""
    transaction_code: str = ""
    equity_swap_involved: bool = False
    shares: float = 0.0
    price_per_share: float = 0.0
    acquired_disposed_code: str = ""
    shares_owned_following_transaction: float = 0.0
    direct_or_indirect_ownership: str = ""


class Form4(msgspec.Struct):
    period_of_report: Optional[date] = None
    issuer_cik: int = 0
    issuer_name: str = ""
    issuer_trading_symbol: str = ""
    reporting_owner_cik: int = 0
    reporting_owner_name: str = ""
    reporting_owner_title: str = ""
    reporting_owner_is_director: bool = False
    reporting_owner_is_officer: bool = False
    reporting_owner_is_ten_percent_owner: bool = False
    non_derivative_transactions: List[Form4Transaction] = []
    derivative_transactions: List[Form4Transaction] = []

    def transactions_dataframe(self) -> pd.DataFrame:
        """
        Flatten both transaction tables into one DataFrame.

        Returns
        -------
        pandas.DataFrame
            One row per transaction, columns of Form4Transaction plus:
            - table ("non_derivative" | "derivative")
            - issuer_cik, reporting_owner_cik (int64)
            transaction_date is datetime64[s] (NaT when missing).
        """
        columns = ["table"] + list(Form4Transaction.__struct_fields__)
        rows = [
            {"table": table} | msgspec.structs.asdict(t)
            for table, txs in (
                ("non_derivative", self.non_derivative_transactions),
                ("derivative", self.derivative_transactions),
            )
            for t in txs
        ]
        df = pd.DataFrame(rows, columns=columns)

        df["transaction_date"] = np.array(
            [d.isoformat() if d is not None else "NaT" for d in df["transaction_date"]],
            dtype="datetime64[D]",
        ).astype("datetime64[s]")
        df["issuer_cik"] = np.int64(self.issuer_cik)
        df["reporting_owner_cik"] = np.int64(self.reporting_owner_cik)
        return df


# -----------------------------
# scalar converters
# -----------------------------

def _to_text(s: str) -> str:
    return s


def _to_int(s: str) -> int:
    return int(s)


def _to_bool(s: str) -> bool:
    v = s.lower()
    if v in ("1", "true"):
        return True
    if v in ("0", "false"):
        return False
    raise ValueError(f"not a boolean: {s!r}")


def _to_date(s: str) -> date:
    # Some filers append a timezone offset, e.g. 2018-10-15-05:00
    return datetime.strptime(s[:10], "%Y-%m-%d").date()


def _to_float(s: str) -> float:
    return float(s.replace(",", ""))


def _to_robust_float(s: str) -> float:
    try:
        return _to_float(s)
    except ValueError:
        return 0.0


Converter = Callable[[str], Any]
FieldMap = Tuple[Tuple[str, str, Converter], ...]


_TRANSACTION_FIELDS: FieldMap = (
    ("security_title", "securityTitle/value", _to_text),
    ("transaction_date", "transactionDate/value", _to_date),
    ("conversion_or_exercise_price", "conversionOrExercisePrice/value", _to_robust_float),
    ("form_type", "transactionCoding/transactionFormType", _to_text),
    ("transaction_code", "transactionCoding/transactionCode", _to_text),
    ("equity_swap_involved", "transactionCoding/equitySwapInvolved", _to_bool),
    ("shares", "transactionAmounts/transactionShares/value", _to_float),
    ("price_per_share", "transactionAmounts/transactionPricePerShare/value", _to_robust_float),
    ("acquired_disposed_code", "transactionAmounts/transactionAcquiredDisposedCode/value", _to_text),
    ("shares_owned_following_transaction", "postTransactionAmounts/sharesOwnedFollowingTransaction/value", _to_float),
    ("direct_or_indirect_ownership", "ownershipNature/directOrIndirectOwnership/value", _to_text),
)

_FORM4_FIELDS: FieldMap = (
    ("period_of_report", "periodOfReport", _to_date),
    ("issuer_cik", "issuer/issuerCik", _to_int),
    ("issuer_name", "issuer/issuerName", _to_text),
    ("issuer_trading_symbol", "issuer/issuerTradingSymbol", _to_text),
    ("reporting_owner_cik", "reportingOwner/reportingOwnerId/rptOwnerCik", _to_int),
    ("reporting_owner_name", "reportingOwner/reportingOwnerId/rptOwnerName", _to_text),
    ("reporting_owner_title", "reportingOwner/reportingOwnerRelationship/officerTitle", _to_text),
    ("reporting_owner_is_director", "reportingOwner/reportingOwnerRelationship/isDirector", _to_bool),
    ("reporting_owner_is_officer", "reportingOwner/reportingOwnerRelationship/isOfficer", _to_bool),
    ("reporting_owner_is_ten_percent_owner", "reportingOwner/reportingOwnerRelationship/isTenPercentOwner", _to_bool),
)

# (field name, repeated element path, row mapping)
_FORM4_TABLES: Tuple[Tuple[str, str, FieldMap], ...] = (
    ("non_derivative_transactions", "nonDerivativeTable/nonDerivativeTransaction", _TRANSACTION_FIELDS),
    ("derivative_transactions", "derivativeTable/derivativeTransaction", _TRANSACTION_FIELDS),
)


def map_fields(elem: ElementTree.Element, fields: Iterable[Tuple[str, str, Converter]]) -> Dict[str, Any]:
    """
    Collect converted values for every path present in `elem`.

    Missing elements and blank text are left out so struct defaults apply.
    A converter failure names the offending path.
    """
    out: Dict[str, Any] = {}
    for name, path, convert in fields:
        text = elem.findtext(path)
        if text is None or not text.strip():
            continue
        try:
            out[name] = convert(text.strip())
        except ValueError as e:
            raise DocumentDecodeError(f"Invalid value at {path}: {text.strip()!r}") from e
    return out


def decode_form4(root: ElementTree.Element) -> Form4:
    """Decode a parsed <ownershipDocument> element."""
    if root.tag != "ownershipDocument":
        raise DocumentDecodeError(f"Expected <ownershipDocument>, got <{root.tag}>")

    data = map_fields(root, _FORM4_FIELDS)
    for name, path, fields in _FORM4_TABLES:
        data[name] = [map_fields(row, fields) for row in root.findall(path)]

    try:
        return msgspec.convert(data, Form4)
    except msgspec.ValidationError as e:
        raise DocumentDecodeError(str(e)) from e


def parse_form4(stream: BinaryIO) -> Form4:
    """
    Parse a Form 4 XML document read from `stream`.

    Raises
    ------
    DocumentDecodeError
        Malformed XML or a field that cannot be converted.
    """
    try:
        root = ElementTree.parse(stream).getroot()
    except ElementTree.ParseError as e:
        raise DocumentDecodeError(f"Malformed Form 4 XML: {e}") from e
    return decode_form4(root)


def parse_form4_from_document(envelope: BinaryIO) -> Form4:
    """
    Parse a Form 4 filing from a full SEC submission envelope.

    Raises
    ------
    TagNotFoundError
        The envelope has no <XML> section.
    UnterminatedTagError
        The envelope ends inside the <XML> section.
    DocumentDecodeError
        The payload is not a valid Form 4 document.
    """
    # Line separators are kept so multi-line text values survive.
    return parse_form4(extract_tag(envelope, XML_PAYLOAD_TAG, keepends=True))
