"""Transaction domain service."""

import logging
from typing import Iterable, Optional
from datetime import date
from tallyup.database.base import Database
from tallyup.domain.entities import Transaction as TransactionEntity, TransactionDraft

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for storing and listing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def import_drafts(self, drafts: Iterable[TransactionDraft]) -> list[TransactionEntity]:
        """Store parsed drafts, skipping any that were imported before.

        The whole batch is written in one database transaction. A draft is a
        duplicate when its import fingerprint is already stored, including a
        duplicate earlier in the same batch.

        Args:
            drafts: Parsed transactions

        Returns:
            The transactions that were inserted, in input order

        Raises:
            StorageError: If the batch could not be written; nothing is stored
        """
        drafts = list(drafts)
        inserted = self.db.insert_transactions(drafts)
        logger.info(
            "Stored %d new transactions, skipped %d duplicates",
            len(inserted),
            len(drafts) - len(inserted),
        )
        return inserted

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        untagged: bool = False,
    ) -> list[TransactionEntity]:
        """List transactions with optional filters.

        Args:
            start_date: Optional start date (inclusive)
            end_date: Optional end date (inclusive)
            untagged: If True, only list transactions without a tag

        Returns:
            List of transaction entities, newest first
        """
        return self.db.list_transactions(
            start_date=start_date, end_date=end_date, untagged=untagged
        )
