"""CSV import domain service."""

import logging
import time
from typing import Iterable

from tallyup.database.base import Database
from tallyup.domain.auto_tagging import AutoTaggingService
from tallyup.domain.balance import BalanceService
from tallyup.domain.entities import (
    AccountBalance,
    ImportResult,
    ParseResult,
    StatementUpload,
    TaggingMode,
)
from tallyup.domain.errors import (
    ContentTypeError,
    FieldParseError,
    FormatError,
    StorageError,
    TaggingError,
)
from tallyup.domain.statement_parser import parse_statement
from tallyup.domain.transaction import TransactionService

logger = logging.getLogger(__name__)

CSV_CONTENT_TYPE = "text/csv"


class CSVImportService:
    """Service for importing bank statement CSV files."""

    def __init__(self, db: Database):
        """Initialize CSV import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transaction_service = TransactionService(db)
        self.tagging_service = AutoTaggingService(db)
        self.balance_service = BalanceService(db)

    def import_statements(
        self, uploads: Iterable[StatementUpload], auto_tag: bool = True
    ) -> ImportResult:
        """Import transactions and balances from statement files.

        Every file is checked and parsed before anything is stored, so one
        bad file means nothing is imported. The transactions from all files
        are then stored in one batch, tagged, and each statement's balance
        is reconciled.

        Args:
            uploads: Statement files with their declared content type
            auto_tag: Whether to apply tagging rules to new transactions

        Returns:
            ImportResult describing what was stored. A tagging failure is
            reported in ``tagging_error`` because the transactions were
            already stored.

        Raises:
            ContentTypeError: If a file is not declared as CSV
            FormatError: If a file is not a known statement format
            FieldParseError: If a file has a row that cannot be parsed
            StorageError: If transactions or balances could not be stored
        """
        start_time = time.perf_counter()
        uploads = list(uploads)
        for upload in uploads:
            if upload.content_type != CSV_CONTENT_TYPE:
                raise ContentTypeError(upload.filename, upload.content_type)

        parsed = [self._parse_upload(upload) for upload in uploads]
        drafts = [draft for result in parsed for draft in result.transactions]

        imported = self.transaction_service.import_drafts(drafts)

        tagging = None
        tagging_error = None
        if auto_tag and imported:
            try:
                tagging = self.tagging_service.apply_rules(TaggingMode.FROM_ARGS, imported)
            except TaggingError as e:
                logger.error("Auto-tagging failed after import: %s", e)
                tagging_error = e

        balances = self._reconcile_balances(parsed)

        duration_ms = round((time.perf_counter() - start_time) * 1000)
        logger.info(
            "Imported %d of %d transactions from %d files in %dms",
            len(imported),
            len(drafts),
            len(uploads),
            duration_ms,
        )
        return ImportResult(
            files_parsed=len(parsed),
            drafts_parsed=len(drafts),
            imported=imported,
            tagging=tagging,
            tagging_error=tagging_error,
            balances=balances,
            duration_ms=duration_ms,
        )

    def _parse_upload(self, upload: StatementUpload) -> ParseResult:
        try:
            result = parse_statement(upload.text)
        except FieldParseError as e:
            raise FieldParseError(
                f"{upload.filename}: {e}", e.line_number, e.raw_value
            ) from e
        except FormatError as e:
            raise FormatError(f"{upload.filename}: {e}") from e

        logger.info(
            "Parsed %s as %s: %d transactions",
            upload.filename,
            result.format_name,
            len(result.transactions),
        )
        return result

    def _reconcile_balances(self, parsed: list[ParseResult]) -> list[AccountBalance]:
        balances: dict[str, AccountBalance] = {}
        for result in parsed:
            if result.balance is None:
                continue
            try:
                stored = self.balance_service.reconcile(result.balance)
            except StorageError as e:
                raise StorageError(
                    f"Transactions were imported, but the balance for "
                    f"{result.balance.account} could not be updated: {e}"
                ) from e
            balances[stored.account] = stored
        return list(balances.values())
