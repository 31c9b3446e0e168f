"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from tallyup.domain.entities import (
    AccountBalance,
    AccountBalanceSnapshot,
    Rule,
    Tag,
    Transaction,
    TransactionDraft,
)


class Database(ABC):
    """Abstract database interface for tallyup.

    Every write method is its own unit of work: it either commits all of its
    changes or rolls all of them back and raises ``StorageError``.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Tag operations
    @abstractmethod
    def create_tag(self, name: str) -> int:
        """Create a tag. Returns tag ID."""
        pass

    @abstractmethod
    def get_tag(self, tag_id: int) -> Optional[Tag]:
        """Get tag by ID."""
        pass

    @abstractmethod
    def get_tag_by_name(self, name: str) -> Optional[Tag]:
        """Get tag by name."""
        pass

    @abstractmethod
    def list_tags(self) -> list[Tag]:
        """List all tags ordered by name."""
        pass

    @abstractmethod
    def rename_tag(self, tag_id: int, name: str) -> None:
        """Change a tag's name."""
        pass

    @abstractmethod
    def delete_tag(self, tag_id: int) -> None:
        """Delete a tag, its rules, and clear it from transactions."""
        pass

    # Rule operations
    @abstractmethod
    def create_rule(self, pattern: str, tag_id: int) -> int:
        """Create an auto-tagging rule. Returns rule ID."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int) -> Optional[Rule]:
        """Get rule by ID."""
        pass

    @abstractmethod
    def list_rules(self) -> list[Rule]:
        """List rules, longest pattern first, then by ID."""
        pass

    @abstractmethod
    def update_rule(self, rule_id: int, pattern: str, tag_id: int) -> None:
        """Change a rule's pattern and tag."""
        pass

    @abstractmethod
    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule."""
        pass

    # Transaction operations
    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        untagged: bool = False,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first."""
        pass

    @abstractmethod
    def count_transactions(self) -> int:
        """Count all stored transactions."""
        pass

    @abstractmethod
    def insert_transactions(self, drafts: Iterable[TransactionDraft]) -> list[Transaction]:
        """Insert drafts in one database transaction.

        Drafts whose ``import_fingerprint`` already exists are skipped
        silently. Returns only the rows that were actually inserted, in input
        order.
        """
        pass

    @abstractmethod
    def set_transaction_tags(self, assignments: Iterable[tuple[int, int]]) -> int:
        """Set ``tag_id`` for (transaction_id, tag_id) pairs in one database transaction.

        Returns the number of pairs applied.
        """
        pass

    # Balance operations
    @abstractmethod
    def upsert_balance(self, snapshot: AccountBalanceSnapshot) -> AccountBalance:
        """Store a balance snapshot unless a newer one is already stored.

        Returns the stored balance for the account after the operation.
        """
        pass

    @abstractmethod
    def get_balance(self, account: str) -> Optional[AccountBalance]:
        """Get the stored balance for an account."""
        pass

    @abstractmethod
    def list_balances(self) -> list[AccountBalance]:
        """List stored balances ordered by account."""
        pass
