"""Rule-based auto-tagging.

A rule matches a transaction when the description starts with the rule's
pattern, ignoring case. Each transaction carries at most one tag; when
several rules match, the longest pattern wins and ties go to the rule created
first (lowest ID).
"""

import logging
from typing import Iterable, Optional, Sequence

from tallyup.database.base import Database
from tallyup.domain.entities import (
    Rule,
    TaggingMode,
    TaggingOutcome,
    TaggingResult,
    Transaction,
)
from tallyup.domain.errors import StorageError, TaggingError

logger = logging.getLogger(__name__)


def matches_rule_pattern(description: str, pattern: str) -> bool:
    """Check whether a description starts with a pattern, ignoring case.

    An empty pattern matches every description.
    """
    return description.casefold().startswith(pattern.casefold())


def order_rules(rules: Iterable[Rule]) -> list[Rule]:
    """Sort rules so the first match is the winning one."""
    return sorted(rules, key=lambda rule: (-len(rule.pattern), rule.id))


def select_tag(description: str, rules: Sequence[Rule]) -> Optional[int]:
    """Return the tag of the winning rule for a description.

    Args:
        description: Transaction description
        rules: Rules as returned by ``order_rules``

    Returns:
        Tag ID, or None if no rule matches
    """
    for rule in rules:
        if matches_rule_pattern(description, rule.pattern):
            return rule.tag_id
    return None


class AutoTaggingService:
    """Service for applying tagging rules to transactions."""

    def __init__(self, db: Database):
        """Initialize auto-tagging service.

        Args:
            db: Database instance
        """
        self.db = db

    def apply_rules(
        self,
        mode: TaggingMode,
        transactions: Optional[Iterable[Transaction]] = None,
    ) -> TaggingResult:
        """Tag transactions using the current rules.

        Args:
            mode: FROM_ARGS tags ``transactions``; ALL tags every stored
                transaction; UNTAGGED tags stored transactions without a tag
            transactions: Transactions to tag, required for FROM_ARGS

        Returns:
            TaggingResult with the number of transactions changed and the
            number of distinct tags applied

        Raises:
            ValueError: If FROM_ARGS is used without transactions
            TaggingError: If the tag updates could not be written; no
                transaction was changed
        """
        if mode is TaggingMode.FROM_ARGS and transactions is None:
            raise ValueError("transactions are required when tagging from arguments")

        rules = order_rules(self.db.list_rules())
        if not rules:
            logger.info("No tagging rules defined, skipping auto-tagging")
            return TaggingResult.no_rules()

        targets = self._load_targets(mode, transactions)

        updates: list[tuple[int, int]] = []
        for transaction in targets:
            tag_id = select_tag(transaction.description, rules)
            if tag_id is not None and tag_id != transaction.tag_id:
                updates.append((transaction.id, tag_id))

        if not updates:
            logger.info("Checked %d transactions against %d rules, no changes", len(targets), len(rules))
            return TaggingResult.no_matches()

        try:
            self.db.set_transaction_tags(updates)
        except StorageError as e:
            raise TaggingError(f"Could not apply tags to {len(updates)} transactions: {e}") from e

        tags_applied = len({tag_id for _, tag_id in updates})
        logger.info("Tagged %d transactions with %d tags", len(updates), tags_applied)
        return TaggingResult(
            transactions_tagged=len(updates),
            tags_applied=tags_applied,
            outcome=TaggingOutcome.TAGGED,
        )

    def _load_targets(
        self, mode: TaggingMode, transactions: Optional[Iterable[Transaction]]
    ) -> list[Transaction]:
        if mode is TaggingMode.FROM_ARGS:
            return list(transactions)
        if mode is TaggingMode.UNTAGGED:
            return self.db.list_transactions(untagged=True)
        return self.db.list_transactions()
