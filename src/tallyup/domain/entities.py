"""Domain model entities for tallyup.

These are pure data classes representing business concepts, independent of
database schema. Parsing produces drafts and snapshots; the database layer
turns them into persisted entities with an ``id``.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from tallyup.domain.errors import TaggingError


@dataclass(frozen=True)
class Tag:
    """Classification tag domain entity."""

    id: int
    name: str


@dataclass(frozen=True)
class Rule:
    """Auto-tagging rule: descriptions starting with ``pattern`` get ``tag_id``."""

    id: int
    pattern: str
    tag_id: int


@dataclass(frozen=True)
class TransactionDraft:
    """A parsed transaction that has not been stored yet.

    Positive amounts are money in, negative amounts are money out.
    """

    amount: Decimal
    date: date
    description: str
    import_fingerprint: Optional[int] = None
    tag_id: Optional[int] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    amount: Decimal
    date: date
    description: str
    import_fingerprint: Optional[int]
    tag_id: Optional[int]


@dataclass(frozen=True)
class AccountBalanceSnapshot:
    """An account balance as reported by a statement."""

    account: str
    balance: Decimal
    date: date


@dataclass(frozen=True)
class AccountBalance:
    """The current stored balance for an account."""

    id: int
    account: str
    balance: Decimal
    date: date


@dataclass(frozen=True)
class StatementUpload:
    """One uploaded statement file."""

    filename: str
    content_type: Optional[str]
    text: str


@dataclass(frozen=True)
class ParseResult:
    """The transactions and balance found in one statement."""

    format_name: str
    transactions: list[TransactionDraft]
    balance: Optional[AccountBalanceSnapshot] = None


class TaggingMode(Enum):
    """Which transactions a batch tagging run should look at."""

    FROM_ARGS = "from_args"
    ALL = "all"
    UNTAGGED = "untagged"


class TaggingOutcome(Enum):
    """Summary outcome of a tagging run."""

    NO_RULES = "no_rules"
    NO_MATCHES = "no_matches"
    TAGGED = "tagged"


@dataclass(frozen=True)
class TaggingResult:
    """Statistics about a tagging run."""

    transactions_tagged: int
    tags_applied: int
    outcome: TaggingOutcome

    @classmethod
    def no_rules(cls) -> "TaggingResult":
        return cls(transactions_tagged=0, tags_applied=0, outcome=TaggingOutcome.NO_RULES)

    @classmethod
    def no_matches(cls) -> "TaggingResult":
        return cls(transactions_tagged=0, tags_applied=0, outcome=TaggingOutcome.NO_MATCHES)


@dataclass(frozen=True)
class ImportResult:
    """Outcome of importing one or more statement files."""

    files_parsed: int
    drafts_parsed: int
    imported: list[Transaction]
    tagging: Optional[TaggingResult] = None
    tagging_error: Optional["TaggingError"] = None
    balances: list[AccountBalance] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def imported_count(self) -> int:
        return len(self.imported)

    @property
    def skipped_count(self) -> int:
        """Drafts that were not inserted because their fingerprint already existed."""
        return self.drafts_parsed - len(self.imported)
