import io
import unittest
from datetime import date

import numpy as np
import pandas as pd

from edgarstream.documents.form4 import (
    Form4,
    Form4Transaction,
    parse_form4,
    parse_form4_from_document,
)
from edgarstream.errors import DocumentDecodeError, TagNotFoundError, UnterminatedTagError


# Trimmed from https://www.sec.gov/Archives/edgar/data/1000045/0001357521-18-000008.txt
_FORM4_XML = """<?xml version="1.0"?>
<ownershipDocument>

    <schemaVersion>X0306</schemaVersion>

    <documentType>4</documentType>

    <periodOfReport>2018-10-15</periodOfReport>

    <issuer>
        <issuerCik>0001000045</issuerCik>
        <issuerName>NICHOLAS FINANCIAL INC</issuerName>
        <issuerTradingSymbol>NICK</issuerTradingSymbol>
    </issuer>

    <reportingOwner>
        <reportingOwnerId>
            <rptOwnerCik>0001357521</rptOwnerCik>
            <rptOwnerName>MALSON KELLY M</rptOwnerName>
        </reportingOwnerId>
        <reportingOwnerRelationship>
            <isDirector>0</isDirector>
            <isOfficer>1</isOfficer>
            <isTenPercentOwner>0</isTenPercentOwner>
            <isOther>0</isOther>
            <officerTitle>CFO</officerTitle>
        </reportingOwnerRelationship>
    </reportingOwner>

    <nonDerivativeTable>
        <nonDerivativeTransaction>
            <securityTitle>
                <value>Common</value>
            </securityTitle>
            <transactionDate>
                <value>2018-10-15</value>
            </transactionDate>
            <transactionCoding>
                <transactionFormType>4</transactionFormType>
                <transactionCode>P</transactionCode>
                <equitySwapInvolved>0</equitySwapInvolved>
            </transactionCoding>
            <transactionTimeliness>
                <value></value>
            </transactionTimeliness>
            <transactionAmounts>
                <transactionShares>
                    <value>1569</value>
                    <footnoteId id="F1"/>
                </transactionShares>
                <transactionPricePerShare>
                    <value>11.98</value>
                    <footnoteId id="F2"/>
                </transactionPricePerShare>
                <transactionAcquiredDisposedCode>
                    <value>A</value>
                </transactionAcquiredDisposedCode>
            </transactionAmounts>
            <postTransactionAmounts>
                <sharesOwnedFollowingTransaction>
                    <value>15989</value>
                </sharesOwnedFollowingTransaction>
            </postTransactionAmounts>
            <ownershipNature>
                <directOrIndirectOwnership>
                    <value>D</value>
                </directOrIndirectOwnership>
            </ownershipNature>
        </nonDerivativeTransaction>
        <nonDerivativeTransaction>
            <securityTitle>
                <value>Common</value>
            </securityTitle>
            <transactionDate>
                <value>2018-10-15</value>
            </transactionDate>
            <transactionCoding>
                <transactionFormType>4</transactionFormType>
                <transactionCode>A</transactionCode>
                <equitySwapInvolved>0</equitySwapInvolved>
                <footnoteId id="F3"/>
            </transactionCoding>
            <transactionAmounts>
                <transactionShares>
                    <value>1569</value>
                </transactionShares>
                <transactionPricePerShare>
                    <value>0</value>
                    <footnoteId id="F3"/>
                </transactionPricePerShare>
                <transactionAcquiredDisposedCode>
                    <value>A</value>
                </transactionAcquiredDisposedCode>
            </transactionAmounts>
            <postTransactionAmounts>
                <sharesOwnedFollowingTransaction>
                    <value>17558</value>
                </sharesOwnedFollowingTransaction>
            </postTransactionAmounts>
            <ownershipNature>
                <directOrIndirectOwnership>
                    <value>D</value>
                </directOrIndirectOwnership>
            </ownershipNature>
        </nonDerivativeTransaction>
    </nonDerivativeTable>

    <footnotes>
        <footnote id="F1">Purchases of shares was made in accordance with a 10b5-1 Plan previously executed.</footnote>
    </footnotes>

    <ownerSignature>
        <signatureName>/s/ Kelly M. Malson</signatureName>
        <signatureDate>2018-10-15</signatureDate>
    </ownerSignature>
</ownershipDocument>
"""

_ENVELOPE_HEAD = """<SEC-DOCUMENT>0001357521-18-000008.txt : 20181015
<SEC-HEADER>0001357521-18-000008.hdr.sgml : 20181015
ACCESSION NUMBER:\t\t0001357521-18-000008
CONFORMED SUBMISSION TYPE:\t4
</SEC-HEADER>
<DOCUMENT>
<TYPE>4
<SEQUENCE>1
<FILENAME>primary_doc.xml
<TEXT>
"""

_ENVELOPE_TAIL = """</TEXT>
</DOCUMENT>
</SEC-DOCUMENT>
"""


def _envelope(payload: str) -> io.BytesIO:
    return io.BytesIO((_ENVELOPE_HEAD + "<XML>\n" + payload + "</XML>\n" + _ENVELOPE_TAIL).encode("utf-8"))


def _expected_form4() -> Form4:
    return Form4(
        period_of_report=date(2018, 10, 15),
        issuer_cik=1000045,
        issuer_name="NICHOLAS FINANCIAL INC",
        issuer_trading_symbol="NICK",
        reporting_owner_cik=1357521,
        reporting_owner_name="MALSON KELLY M",
        reporting_owner_title="CFO",
        reporting_owner_is_director=False,
        reporting_owner_is_officer=True,
        reporting_owner_is_ten_percent_owner=False,
        non_derivative_transactions=[
            Form4Transaction(
                security_title="Common",
                transaction_date=date(2018, 10, 15),
                conversion_or_exercise_price=0.0,
                form_type="4",
                transaction_code="P",
                equity_swap_involved=False,
                shares=1569.0,
                price_per_share=11.98,
                acquired_disposed_code="A",
                shares_owned_following_transaction=15989.0,
                direct_or_indirect_ownership="D",
            ),
            Form4Transaction(
                security_title="Common",
                transaction_date=date(2018, 10, 15),
                conversion_or_exercise_price=0.0,
                form_type="4",
                transaction_code="A",
                equity_swap_involved=False,
                shares=1569.0,
                price_per_share=0.0,
                acquired_disposed_code="A",
                shares_owned_following_transaction=17558.0,
                direct_or_indirect_ownership="D",
            ),
        ],
        derivative_transactions=[],
    )


_DERIVATIVE_XML = """<?xml version="1.0"?>
<ownershipDocument>
    <issuer><issuerCik>320193</issuerCik></issuer>
    <reportingOwner>
        <reportingOwnerRelationship><isDirector>true</isDirector></reportingOwnerRelationship>
    </reportingOwner>
    <derivativeTable>
        <derivativeTransaction>
            <securityTitle><value>Stock Option</value></securityTitle>
            <conversionOrExercisePrice><value>See footnote</value></conversionOrExercisePrice>
            <transactionDate><value>2019-02-01-05:00</value></transactionDate>
            <transactionAmounts>
                <transactionShares><value>1,000</value></transactionShares>
                <transactionPricePerShare><value></value></transactionPricePerShare>
            </transactionAmounts>
        </derivativeTransaction>
    </derivativeTable>
</ownershipDocument>
"""


class ParseForm4Tests(unittest.TestCase):
    def test_parses_standalone_document(self):
        form = parse_form4(io.BytesIO(_FORM4_XML.encode("utf-8")))

        self.assertEqual(form, _expected_form4())

    def test_parses_from_submission_envelope(self):
        form = parse_form4_from_document(_envelope(_FORM4_XML))

        self.assertEqual(form, _expected_form4())

    def test_multiline_text_keeps_line_break(self):
        xml = _FORM4_XML.replace(
            "<issuerName>NICHOLAS FINANCIAL INC</issuerName>",
            "<issuerName>NICHOLAS\nFINANCIAL INC</issuerName>",
        )

        form = parse_form4_from_document(_envelope(xml))

        self.assertEqual(form.issuer_name, "NICHOLAS\nFINANCIAL INC")

    def test_envelope_read_stops_after_payload(self):
        envelope = _envelope(_FORM4_XML)

        parse_form4_from_document(envelope)

        self.assertEqual(envelope.readline(), b"</TEXT>\n")

    def test_lenient_numbers_and_boolean_words(self):
        form = parse_form4(io.BytesIO(_DERIVATIVE_XML.encode("utf-8")))

        self.assertEqual(form.issuer_cik, 320193)
        self.assertTrue(form.reporting_owner_is_director)
        self.assertIsNone(form.period_of_report)
        self.assertListEqual(form.non_derivative_transactions, [])

        tx = form.derivative_transactions[0]
        self.assertEqual(tx.security_title, "Stock Option")
        self.assertEqual(tx.conversion_or_exercise_price, 0.0)
        self.assertEqual(tx.transaction_date, date(2019, 2, 1))
        self.assertEqual(tx.shares, 1000.0)
        self.assertEqual(tx.price_per_share, 0.0)

    def test_invalid_strict_number_is_decode_error(self):
        xml = _DERIVATIVE_XML.replace("1,000", "many")

        with self.assertRaises(DocumentDecodeError) as ctx:
            parse_form4(io.BytesIO(xml.encode("utf-8")))

        self.assertIn("transactionShares", str(ctx.exception))

    def test_malformed_xml_is_decode_error(self):
        with self.assertRaises(DocumentDecodeError):
            parse_form4(io.BytesIO(b"<ownershipDocument><issuer></ownershipDocument>"))

    def test_wrong_root_is_decode_error(self):
        with self.assertRaises(DocumentDecodeError):
            parse_form4(io.BytesIO(b"<?xml version='1.0'?><edgarSubmission/>"))

    def test_missing_xml_section(self):
        envelope = io.BytesIO((_ENVELOPE_HEAD + _ENVELOPE_TAIL).encode("utf-8"))

        with self.assertRaises(TagNotFoundError):
            parse_form4_from_document(envelope)

    def test_truncated_envelope(self):
        envelope = io.BytesIO((_ENVELOPE_HEAD + "<XML>\n" + _FORM4_XML[:200]).encode("utf-8"))

        with self.assertRaises(UnterminatedTagError):
            parse_form4_from_document(envelope)


class TransactionsDataFrameTests(unittest.TestCase):
    def test_flattens_both_tables(self):
        df = _expected_form4().transactions_dataframe()

        self.assertEqual(len(df), 2)
        self.assertListEqual(list(df["table"]), ["non_derivative", "non_derivative"])
        self.assertListEqual(list(df["transaction_code"]), ["P", "A"])
        self.assertEqual(df["transaction_date"].dtype, np.dtype("datetime64[s]"))
        self.assertEqual(df.loc[0, "transaction_date"], pd.Timestamp("2018-10-15"))
        self.assertTrue((df["issuer_cik"] == 1000045).all())

    def test_missing_dates_become_nat(self):
        form = Form4(derivative_transactions=[Form4Transaction(security_title="Option")])

        df = form.transactions_dataframe()

        self.assertEqual(list(df["table"]), ["derivative"])
        self.assertTrue(pd.isna(df.loc[0, "transaction_date"]))

    def test_no_transactions(self):
        df = Form4().transactions_dataframe()

        self.assertEqual(len(df), 0)
        self.assertIn("shares", df.columns)


if __name__ == "__main__":
    unittest.main()
