"""Bank statement parsing.

Supported statement layouts, tried in this order:

- ASB bank account export: eight header lines, the second naming the account
  and the sixth carrying the ledger balance.
- ASB credit card export: six header lines, amounts reported from the card's
  point of view and therefore negated.
- Kiwibank detailed export: a single column header line; every row carries
  the account and running balance.

Each decoder either returns a ``ParseResult`` or raises ``FormatError`` when
the header does not match. Once a header has matched, an unparseable row
raises ``FieldParseError`` so the caller sees the real problem instead of
"unknown format".
"""

import csv
import logging
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Iterator, Optional, Sequence

from tallyup.domain.entities import AccountBalanceSnapshot, ParseResult, TransactionDraft
from tallyup.domain.errors import (
    FieldParseError,
    FormatError,
    invalid_field,
    unknown_statement_format,
)
from tallyup.domain.fingerprint import create_import_fingerprint
from tallyup.utils.amount_parser import parse_amount
from tallyup.utils.date_parser import parse_statement_date

logger = logging.getLogger(__name__)

ASB_BANK_COLUMNS = "Date,Unique Id,Tran Type,Cheque Number,Payee,Memo,Amount"
ASB_CREDIT_CARD_COLUMNS = (
    "Date Processed,Date of Transaction,Unique Id,Tran Type,Reference,Description,Amount"
)
KIWIBANK_COLUMNS = (
    "Account number,Date,Memo/Description,Source Code (payment type),TP ref,TP part,"
    "TP code,OP ref,OP part,OP code,OP name,OP Bank Account Number,Amount (credit),"
    "Amount (debit),Amount,Balance"
)

# Header line checks
PREFIX = "prefix"
EXACT = "exact"
BLANK = "blank"

ASB_BANK_HEADER = (
    (PREFIX, "Created date / time"),
    (PREFIX, "Bank "),
    (PREFIX, "From date "),
    (PREFIX, "To date "),
    (PREFIX, "Avail Bal"),
    (PREFIX, "Ledger Balance"),
    (EXACT, ASB_BANK_COLUMNS),
    (BLANK, ""),
)

ASB_CREDIT_CARD_HEADER = (
    (PREFIX, "Created date / time"),
    (PREFIX, "Card Number"),
    (PREFIX, "From date "),
    (PREFIX, "To date "),
    (EXACT, ASB_CREDIT_CARD_COLUMNS),
    (BLANK, ""),
)

KIWIBANK_HEADER = ((EXACT, KIWIBANK_COLUMNS),)

_ASB_ACCOUNT_LINE = re.compile(
    r"^Bank (?P<bank>\d+); Branch (?P<branch>\d+); Account (?P<account>.+?)\s*$"
)
_ASB_LEDGER_BALANCE_LINE = re.compile(
    r"^Ledger Balance : (?P<balance>\S+) as of (?P<date>\S+)\s*$"
)


@dataclass(frozen=True)
class RowLayout:
    """Where a statement keeps the fields of a transaction row.

    Strict layouts reject short rows instead of skipping them.
    ``description_suffix`` is padding the bank appends to every description.
    """

    date_column: int
    description_column: int
    amount_column: int
    date_format: str
    min_columns: int
    negate_amount: bool = False
    strict: bool = False
    account_column: Optional[int] = None
    balance_column: Optional[int] = None
    description_suffix: Optional[str] = None


ASB_BANK_ROWS = RowLayout(
    date_column=0,
    description_column=5,
    amount_column=6,
    date_format="%Y/%m/%d",
    min_columns=7,
)
ASB_CREDIT_CARD_ROWS = RowLayout(
    date_column=0,
    description_column=5,
    amount_column=6,
    date_format="%Y/%m/%d",
    min_columns=7,
    negate_amount=True,
)
KIWIBANK_ROWS = RowLayout(
    date_column=1,
    description_column=2,
    amount_column=14,
    date_format="%d-%m-%Y",
    min_columns=16,
    strict=True,
    account_column=0,
    balance_column=15,
    description_suffix=" ;",
)


def parse_asb_bank_statement(text: str) -> ParseResult:
    """Parse an ASB bank account export.

    The account name is built from the second header line, so
    "Bank 12; Branch 3405; Account 0123456-50 (Streamline)" becomes
    "12-3405-0123456-50 (Streamline)". The ledger balance line provides the
    balance snapshot.

    Raises:
        FormatError: If the text is not an ASB bank account export
        FieldParseError: If a date or amount cannot be parsed
    """
    lines = _split_lines(text)
    _check_header(lines, ASB_BANK_HEADER, "ASB bank statement")

    account = _parse_asb_account(lines[1])
    balance_amount, balance_date = _parse_asb_ledger_balance(lines[5], line_number=6)

    transactions = [
        draft for _, _, draft in _parse_rows(lines, len(ASB_BANK_HEADER), ASB_BANK_ROWS)
    ]
    return ParseResult(
        format_name="asb_bank",
        transactions=transactions,
        balance=AccountBalanceSnapshot(account=account, balance=balance_amount, date=balance_date),
    )


def parse_asb_credit_card_statement(text: str) -> ParseResult:
    """Parse an ASB credit card export.

    Card statements report purchases as positive amounts, so every amount is
    negated to keep "negative means money out". No balance is reported.

    Raises:
        FormatError: If the text is not an ASB credit card export
        FieldParseError: If a date or amount cannot be parsed
    """
    lines = _split_lines(text)
    _check_header(lines, ASB_CREDIT_CARD_HEADER, "ASB credit card statement")

    transactions = [
        draft
        for _, _, draft in _parse_rows(lines, len(ASB_CREDIT_CARD_HEADER), ASB_CREDIT_CARD_ROWS)
    ]
    return ParseResult(format_name="asb_credit_card", transactions=transactions)


def parse_kiwibank_statement(text: str) -> ParseResult:
    """Parse a detailed Kiwibank export.

    Every row carries the account and running balance; the last row's values
    become the balance snapshot. A statement without data rows has no
    snapshot.

    Raises:
        FormatError: If the text is not a detailed Kiwibank export
        FieldParseError: If a row is short, or a date, amount or balance
            cannot be parsed
    """
    lines = _split_lines(text)
    _check_header(lines, KIWIBANK_HEADER, "Kiwibank statement")

    rows = list(_parse_rows(lines, len(KIWIBANK_HEADER), KIWIBANK_ROWS))
    balance = None
    if rows:
        line_number, fields, _ = rows[-1]
        balance = _row_balance(
            fields[KIWIBANK_ROWS.account_column].strip(), fields, line_number, KIWIBANK_ROWS
        )

    return ParseResult(
        format_name="kiwibank",
        transactions=[draft for _, _, draft in rows],
        balance=balance,
    )


Decoder = Callable[[str], ParseResult]

# Tried in order; the first decoder whose header matches wins.
DECODERS: tuple[tuple[str, Decoder], ...] = (
    ("ASB bank", parse_asb_bank_statement),
    ("ASB credit card", parse_asb_credit_card_statement),
    ("Kiwibank", parse_kiwibank_statement),
)


def parse_statement(text: str, decoders: Sequence[tuple[str, Decoder]] = DECODERS) -> ParseResult:
    """Parse a statement with the first decoder that recognises it.

    Args:
        text: Full statement text
        decoders: (name, decoder) pairs to try in order

    Returns:
        ParseResult from the first decoder that accepted the text

    Raises:
        FieldParseError: If a decoder recognised the layout but a row is bad
        FormatError: If no decoder recognised the text
    """
    for name, decoder in decoders:
        try:
            result = decoder(text)
        except FieldParseError:
            raise
        except FormatError as e:
            logger.debug("Could not parse %s statement: %s", name, e)
            continue
        logger.debug("Parsed %s statement: %d transactions", name, len(result.transactions))
        return result

    raise FormatError(unknown_statement_format())


def _split_lines(text: str) -> list[str]:
    # Only "\n" ends a line; other Unicode line breaks stay inside the row
    lines = text.lstrip("\ufeff").split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _check_header(lines: list[str], header: Sequence[tuple[str, str]], statement: str) -> None:
    if not lines or not any(line.strip() for line in lines):
        raise FormatError(f"{statement} is empty")
    if len(lines) < len(header):
        raise FormatError(f"{statement} header needs {len(header)} lines, found {len(lines)}")

    for line_number, (line, (check, expected)) in enumerate(zip(lines, header), start=1):
        line = line.rstrip()
        if check == PREFIX and line.startswith(expected):
            continue
        if check == EXACT and line == expected:
            continue
        if check == BLANK and not line:
            continue
        wanted = "an empty line" if check == BLANK else f"'{expected}'"
        raise FormatError(f"{statement} expected {wanted} on line {line_number}")


def _parse_asb_account(line: str) -> str:
    match = _ASB_ACCOUNT_LINE.match(line.strip())
    if match is None:
        raise FormatError(f"ASB bank statement has no account on line 2: '{line}'")
    return f"{match['bank']}-{match['branch']}-{match['account']}"


def _parse_asb_ledger_balance(line: str, line_number: int) -> tuple[Decimal, date]:
    match = _ASB_LEDGER_BALANCE_LINE.match(line.strip())
    if match is None:
        raise FormatError(f"ASB bank statement has no ledger balance on line {line_number}")
    amount = _parse_field_amount(match["balance"], line_number, "balance")
    balance_date = _parse_field_date(match["date"], "%Y%m%d", line_number)
    return amount, balance_date


def _parse_rows(
    lines: list[str], first_index: int, layout: RowLayout
) -> Iterator[tuple[int, list[str], TransactionDraft]]:
    """Yield (line number, fields, draft) for every data row.

    Line numbers are 1-based. Blank lines are skipped, as are short rows
    unless the layout is strict.
    """
    for index in range(first_index, len(lines)):
        line = lines[index]
        if not line.strip():
            continue

        line_number = index + 1
        fields = next(csv.reader([line]), [])
        if len(fields) < layout.min_columns:
            if layout.strict:
                raise FieldParseError(
                    f"Line {line_number} has {len(fields)} columns, expected {layout.min_columns}",
                    line_number,
                    line,
                )
            logger.debug(
                "Skipping line %d: %d columns, expected %d",
                line_number,
                len(fields),
                layout.min_columns,
            )
            continue

        yield line_number, fields, _build_draft(fields, line, line_number, layout)


def _build_draft(fields: list[str], line: str, line_number: int, layout: RowLayout) -> TransactionDraft:
    amount = _parse_field_amount(fields[layout.amount_column], line_number, "amount")
    if layout.negate_amount:
        amount = -amount

    return TransactionDraft(
        amount=amount,
        date=_parse_field_date(fields[layout.date_column], layout.date_format, line_number),
        description=_clean_description(fields[layout.description_column], layout.description_suffix),
        import_fingerprint=create_import_fingerprint(line),
    )


def _row_balance(
    account: str, fields: list[str], line_number: int, layout: RowLayout
) -> AccountBalanceSnapshot:
    return AccountBalanceSnapshot(
        account=account,
        balance=_parse_field_amount(fields[layout.balance_column], line_number, "balance"),
        date=_parse_field_date(fields[layout.date_column], layout.date_format, line_number),
    )


def _clean_description(value: str, suffix: Optional[str]) -> str:
    value = value.strip()
    if suffix:
        while value.endswith(suffix):
            value = value[: -len(suffix)]
    return value


def _parse_field_date(raw_value: str, date_format: str, line_number: int) -> date:
    try:
        return parse_statement_date(raw_value, date_format)
    except ValueError as e:
        raise FieldParseError(
            invalid_field("date", raw_value, line_number, e), line_number, raw_value
        ) from e


def _parse_field_amount(raw_value: str, line_number: int, kind: str) -> Decimal:
    try:
        return parse_amount(raw_value)
    except ValueError as e:
        raise FieldParseError(
            invalid_field(kind, raw_value, line_number, e), line_number, raw_value
        ) from e
