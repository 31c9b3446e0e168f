"""Account balance domain service."""

import logging
from typing import Optional
from tallyup.database.base import Database
from tallyup.domain.entities import AccountBalance, AccountBalanceSnapshot

logger = logging.getLogger(__name__)


class BalanceService:
    """Service for keeping account balances current."""

    def __init__(self, db: Database):
        """Initialize balance service.

        Args:
            db: Database instance
        """
        self.db = db

    def reconcile(self, snapshot: AccountBalanceSnapshot) -> AccountBalance:
        """Record a balance reported by a statement if it is the newest one.

        A snapshot replaces the stored balance only when its date is strictly
        later. Importing an older statement leaves the stored balance as is,
        so the order statements are imported in does not matter.

        Args:
            snapshot: Balance from a parsed statement

        Returns:
            The stored balance after reconciliation

        Raises:
            StorageError: If the balance could not be written
        """
        stored = self.db.upsert_balance(snapshot)
        if stored.date == snapshot.date and stored.balance == snapshot.balance:
            logger.info("Balance for %s is now %s as of %s", stored.account, stored.balance, stored.date)
        else:
            logger.info(
                "Kept balance for %s as of %s, snapshot from %s is not newer",
                stored.account,
                stored.date,
                snapshot.date,
            )
        return stored

    def get_balance(self, account: str) -> Optional[AccountBalance]:
        """Get the stored balance for an account."""
        return self.db.get_balance(account)

    def list_balances(self) -> list[AccountBalance]:
        """List current balances for all accounts."""
        return self.db.list_balances()
