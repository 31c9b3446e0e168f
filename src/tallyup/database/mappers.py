"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain entities do not
change when the schema does.
"""

from tallyup.domain import entities as domain
from tallyup.database.models import (
    Balance as ORMBalance,
    Rule as ORMRule,
    Tag as ORMTag,
    Transaction as ORMTransaction,
)


def tag_to_domain(orm_tag: ORMTag) -> domain.Tag:
    """Convert SQLAlchemy Tag model to domain Tag entity."""
    return domain.Tag(id=orm_tag.id, name=orm_tag.name)


def rule_to_domain(orm_rule: ORMRule) -> domain.Rule:
    """Convert SQLAlchemy Rule model to domain Rule entity."""
    return domain.Rule(id=orm_rule.id, pattern=orm_rule.pattern, tag_id=orm_rule.tag_id)


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        amount=orm_transaction.amount,
        date=orm_transaction.date,
        description=orm_transaction.description,
        import_fingerprint=orm_transaction.import_fingerprint,
        tag_id=orm_transaction.tag_id,
    )


def balance_to_domain(orm_balance: ORMBalance) -> domain.AccountBalance:
    """Convert SQLAlchemy Balance model to domain AccountBalance entity."""
    return domain.AccountBalance(
        id=orm_balance.id,
        account=orm_balance.account,
        balance=orm_balance.balance,
        date=orm_balance.date,
    )


def draft_to_row(draft: domain.TransactionDraft) -> dict:
    """Convert a TransactionDraft to column values for an INSERT."""
    return {
        "amount": draft.amount,
        "date": draft.date,
        "description": draft.description,
        "import_fingerprint": draft.import_fingerprint,
        "tag_id": draft.tag_id,
    }
