"""Tests for bank statement parsing."""

import logging
from datetime import date
from decimal import Decimal

import pytest

from tallyup.domain.entities import AccountBalanceSnapshot
from tallyup.domain.errors import FieldParseError, FormatError
from tallyup.domain.fingerprint import create_import_fingerprint
from tallyup.domain.statement_parser import (
    ASB_BANK_COLUMNS,
    KIWIBANK_COLUMNS,
    parse_asb_bank_statement,
    parse_asb_credit_card_statement,
    parse_kiwibank_statement,
    parse_statement,
)

ASB_HEADER = (
    "Created date / time : 12 April 2025 / 11:10:19\n"
    "Bank 12; Branch 3405; Account 0123456-50 (Streamline)\n"
    "From date 20250101\n"
    "To date 20250412\n"
    "Avail Bal : 1020.00 as of 20250320\n"
    "Ledger Balance : 20.00 as of 20250412\n"
    f"{ASB_BANK_COLUMNS}\n"
    "\n"
)


def test_parse_asb_bank_statement(read_fixture):
    """Test parsing the ASB bank account export."""
    result = parse_asb_bank_statement(read_fixture("asb_bank.csv"))

    assert result.format_name == "asb_bank"
    assert len(result.transactions) == 6
    assert [t.amount for t in result.transactions] == [
        Decimal("1300.00"),
        Decimal("-1300.00"),
        Decimal("4400.00"),
        Decimal("-4400.00"),
        Decimal("2750.00"),
        Decimal("-2750.00"),
    ]
    assert [t.date for t in result.transactions] == [
        date(2025, 1, 18),
        date(2025, 1, 18),
        date(2025, 2, 18),
        date(2025, 2, 19),
        date(2025, 3, 20),
        date(2025, 3, 20),
    ]
    assert result.transactions[0].description == "Credit Card"
    assert result.transactions[1].description == "TO CARD 5023  Credit Card"
    assert result.balance == AccountBalanceSnapshot(
        account="12-3405-0123456-50 (Streamline)",
        balance=Decimal("20.00"),
        date=date(2025, 4, 12),
    )


def test_parse_asb_bank_fingerprint_uses_raw_line(read_fixture):
    """Test that each draft is fingerprinted from its source line."""
    result = parse_asb_bank_statement(read_fixture("asb_bank.csv"))

    raw_line = '2025/01/18,2025011801,D/C,,"D/C FROM A B Cat","Credit Card",1300.00'
    assert result.transactions[0].import_fingerprint == create_import_fingerprint(raw_line)
    assert len({t.import_fingerprint for t in result.transactions}) == 6


def test_parse_asb_bank_skips_blank_and_short_rows():
    """Test that blank lines and rows with too few columns are ignored."""
    text = (
        ASB_HEADER
        + "2025/01/18,2025011801,D/C,,\"Payee\",\"Memo\",10.00\n"
        + "\n"
        + "2025/01/19,only,three\n"
        + "2025/01/20,2025012001,D/C,,\"Payee\",\"Other\",-5.00\n"
    )

    result = parse_asb_bank_statement(text)

    assert [t.description for t in result.transactions] == ["Memo", "Other"]


def test_parse_asb_bank_quoted_comma_in_memo():
    """Test that quoted fields may contain commas."""
    text = ASB_HEADER + '2025/01/18,1,D/C,,"Payee","Rent, March","-1,250.00"\n'
    result = parse_asb_bank_statement(text)

    assert result.transactions[0].description == "Rent, March"
    assert result.transactions[0].amount == Decimal("-1250.00")


def test_parse_asb_bank_with_crlf_line_endings(read_fixture):
    """Test that Windows line endings parse the same way."""
    text = read_fixture("asb_bank.csv").replace("\n", "\r\n")

    result = parse_asb_bank_statement(text)

    assert len(result.transactions) == 6
    assert result.transactions[0].import_fingerprint == create_import_fingerprint(
        '2025/01/18,2025011801,D/C,,"D/C FROM A B Cat","Credit Card",1300.00'
    )


def test_parse_asb_bank_rejects_wrong_column_header():
    """Test that the column header must match exactly."""
    text = ASB_HEADER.replace(ASB_BANK_COLUMNS, "Date,Payee,Amount")

    with pytest.raises(FormatError, match="line 7"):
        parse_asb_bank_statement(text)


def test_parse_asb_bank_rejects_short_header():
    """Test that a truncated header is a format error."""
    with pytest.raises(FormatError, match="header needs 8 lines"):
        parse_asb_bank_statement("Created date / time : today\n")


def test_parse_asb_bank_bad_ledger_balance_reports_line():
    """Test that an unparseable ledger balance names header line 6."""
    text = ASB_HEADER.replace("Ledger Balance : 20.00", "Ledger Balance : abc")

    with pytest.raises(FieldParseError) as exc_info:
        parse_asb_bank_statement(text)

    assert exc_info.value.line_number == 6
    assert exc_info.value.raw_value == "abc"


def test_parse_asb_credit_card_negates_amounts(read_fixture):
    """Test that card purchases become negative amounts."""
    result = parse_asb_credit_card_statement(read_fixture("asb_credit_card.csv"))

    assert result.format_name == "asb_credit_card"
    assert result.balance is None
    assert [t.amount for t in result.transactions] == [
        Decimal("2750.00"),
        Decimal("-8.50"),
        Decimal("-10.63"),
        Decimal("-0.22"),
        Decimal("-11.50"),
    ]
    assert result.transactions[0].description == "PAYMENT RECEIVED THANK YOU"
    assert result.transactions[1].date == date(2025, 4, 9)
    assert result.transactions[2].description == (
        "AMAZON DOWNLOADS TOKYO 862.00 YEN at a Conversion Rate  of 81.0913 (NZ$10.63)"
    )


def test_parse_kiwibank_statement(read_fixture):
    """Test parsing the Kiwibank export."""
    result = parse_kiwibank_statement(read_fixture("kiwibank.csv"))

    assert result.format_name == "kiwibank"
    assert len(result.transactions) == 6
    first = result.transactions[0]
    assert first.date == date(2025, 1, 31)
    assert first.description == "INTEREST EARNED"
    assert first.amount == Decimal("0.25")
    assert result.transactions[1].description == "PIE TAX 10.500%"
    assert result.transactions[1].amount == Decimal("-0.03")


def test_parse_kiwibank_balance_comes_from_last_row(read_fixture):
    """Test that the last row's account, balance and date are the snapshot."""
    result = parse_kiwibank_statement(read_fixture("kiwibank.csv"))

    assert result.balance == AccountBalanceSnapshot(
        account="38-1234-0123456-01",
        balance=Decimal("71.53"),
        date=date(2025, 3, 31),
    )


def test_parse_kiwibank_without_rows_has_no_balance():
    """Test that a header-only Kiwibank file yields no snapshot."""
    result = parse_kiwibank_statement(KIWIBANK_COLUMNS + "\n")

    assert result.transactions == []
    assert result.balance is None


def test_parse_kiwibank_short_row_is_fatal():
    """Test that a Kiwibank row missing columns fails with its line number."""
    text = (
        KIWIBANK_COLUMNS
        + "\n38-1234-0123456-01,31-01-2025,INTEREST EARNED ;,,,,,,,,,,0.25,,0.25,71.16\n"
        + "38-1234-0123456-01,31-01-2025,TRUNCATED\n"
    )

    with pytest.raises(FieldParseError) as exc_info:
        parse_kiwibank_statement(text)

    assert exc_info.value.line_number == 3


def test_parse_statement_detects_each_format(read_fixture):
    """Test that the dispatcher picks the right decoder."""
    assert parse_statement(read_fixture("asb_bank.csv")).format_name == "asb_bank"
    assert parse_statement(read_fixture("asb_credit_card.csv")).format_name == "asb_credit_card"
    assert parse_statement(read_fixture("kiwibank.csv")).format_name == "kiwibank"


def test_parse_statement_accepts_byte_order_mark(read_fixture):
    """Test that a leading BOM does not break header detection."""
    result = parse_statement("\ufeff" + read_fixture("kiwibank.csv"))

    assert result.format_name == "kiwibank"


def test_parse_statement_unknown_format(read_fixture):
    """Test that unrecognised CSV fails with one generic message."""
    with pytest.raises(FormatError, match="Could not parse CSV data from any known format"):
        parse_statement(read_fixture("unknown_format.csv"))


@pytest.mark.parametrize("text", ["", "\n\n", "   "])
def test_parse_statement_empty_input(text):
    """Test that empty input is a format error."""
    with pytest.raises(FormatError):
        parse_statement(text)


def test_parse_statement_logs_rejected_decoders(read_fixture, caplog):
    """Test that per-format rejections are logged at debug level, not raised."""
    with caplog.at_level(logging.DEBUG, logger="tallyup.domain.statement_parser"):
        parse_statement(read_fixture("kiwibank.csv"))

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("Could not parse ASB bank statement") for message in messages)
    assert any(message.startswith("Could not parse ASB credit card statement") for message in messages)


def test_parse_statement_bad_amount_reports_line_and_value():
    """Test that a bad amount after a matched header is not masked."""
    text = (
        ASB_HEADER
        + '2025/01/18,2025011801,D/C,,"Payee","Fine",10.00\n'
        + '2025/01/19,2025011901,D/C,,"Payee","Broken",12.3x\n'
    )

    with pytest.raises(FieldParseError) as exc_info:
        parse_statement(text)

    error = exc_info.value
    assert error.line_number == 10
    assert error.raw_value == "12.3x"
    assert "line 10" in str(error)
    assert "'12.3x'" in str(error)


def test_parse_statement_bad_date_reports_line_and_value():
    """Test that a bad date names the row it came from."""
    text = ASB_HEADER + '18/01/2025,2025011801,D/C,,"Payee","Memo",10.00\n'

    with pytest.raises(FieldParseError) as exc_info:
        parse_statement(text)

    assert exc_info.value.line_number == 9
    assert exc_info.value.raw_value == "18/01/2025"


def test_parse_statement_rejects_non_finite_amount():
    """Test that NaN and infinity are not accepted as amounts."""
    text = ASB_HEADER + '2025/01/18,2025011801,D/C,,"Payee","Memo",NaN\n'

    with pytest.raises(FieldParseError, match="not a finite number"):
        parse_statement(text)


def test_parse_asb_bank_keeps_trailing_semicolon():
    """Test that only Kiwibank's " ;" padding is removed from descriptions."""
    text = ASB_HEADER + '2025/01/18,1,D/C,,"Payee","REF 12;",10.00\n'

    result = parse_statement(text)

    assert result.format_name == "asb_bank"
    assert result.transactions[0].description == "REF 12;"


def test_parse_asb_credit_card_keeps_trailing_semicolon(read_fixture):
    text = read_fixture("asb_credit_card.csv").replace('"Buckstars"', '"Buckstars ;"')

    result = parse_asb_credit_card_statement(text)

    assert result.transactions[-1].description == "Buckstars ;"


def test_parse_kiwibank_removes_only_padding():
    text = (
        KIWIBANK_COLUMNS
        + "\n38-1234-0123456-01,31-01-2025,PARKING;,,,,,,,,,,,4.00,-4.00,67.16\n"
        + "38-1234-0123456-01,31-01-2025,COFFEE ;,,,,,,,,,,,4.50,-4.50,62.66\n"
    )

    result = parse_kiwibank_statement(text)

    assert [t.description for t in result.transactions] == ["PARKING;", "COFFEE"]


@pytest.mark.parametrize("separator", ["\x0b", "\x0c", "\x1c", "\x85", "\u2028", "\u2029"])
def test_parse_statement_only_newline_ends_a_row(separator):
    """Test that other Unicode line breaks stay inside the description."""
    line = f'2025/01/18,2025011801,D/C,,"Payee","Line{separator}break",10.00'
    text = ASB_HEADER + line + "\n"

    result = parse_statement(text)

    assert len(result.transactions) == 1
    draft = result.transactions[0]
    assert draft.description == f"Line{separator}break"
    assert draft.import_fingerprint == create_import_fingerprint(line)
