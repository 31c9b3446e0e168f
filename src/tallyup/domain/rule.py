"""Auto-tagging rule domain service."""

from typing import Optional
from tallyup.database.base import Database
from tallyup.domain.entities import Rule as RuleEntity, Tag as TagEntity
from tallyup.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_rule,
    rule_not_found,
    rule_pattern_empty,
    tag_not_found,
)


class RuleService:
    """Service for managing auto-tagging rules."""

    def __init__(self, db: Database):
        """Initialize rule service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_rule(self, pattern: str, tag_id: int) -> int:
        """Create a rule that tags descriptions starting with ``pattern``.

        Args:
            pattern: Description prefix, matched case-insensitively
            tag_id: Tag to apply

        Returns:
            Rule ID

        Raises:
            ValidationError: If the pattern is empty
            NotFoundError: If the tag does not exist
            ConflictError: If the same rule already exists
        """
        pattern = self._validate(pattern, tag_id)
        return self.db.create_rule(pattern=pattern, tag_id=tag_id)

    def update_rule(self, rule_id: int, pattern: str, tag_id: int) -> None:
        """Change the pattern and tag of a rule.

        Transactions tagged by the old rule keep their tag until tagging
        runs again.

        Raises:
            NotFoundError: If the rule or the tag does not exist
            ValidationError: If the pattern is empty
            ConflictError: If another rule already has this pattern and tag
        """
        if self.db.get_rule(rule_id) is None:
            raise NotFoundError(rule_not_found(rule_id))

        pattern = self._validate(pattern, tag_id, rule_id=rule_id)
        self.db.update_rule(rule_id, pattern=pattern, tag_id=tag_id)

    def _validate(self, pattern: str, tag_id: int, rule_id: Optional[int] = None) -> str:
        pattern = pattern.strip()
        if not pattern:
            raise ValidationError(rule_pattern_empty())

        tag = self.db.get_tag(tag_id)
        if tag is None:
            raise NotFoundError(tag_not_found(tag_id))

        for rule in self.db.list_rules():
            if rule.id != rule_id and rule.tag_id == tag_id and rule.pattern == pattern:
                raise ConflictError(duplicate_rule(pattern, tag.name))

        return pattern

    def get_rule(self, rule_id: int) -> Optional[RuleEntity]:
        """Get rule by ID."""
        return self.db.get_rule(rule_id)

    def list_rules(self) -> list[RuleEntity]:
        """List rules in the order they are applied."""
        return self.db.list_rules()

    def list_rules_with_tags(self) -> list[tuple[RuleEntity, TagEntity]]:
        """List rules paired with their tag, ordered by pattern."""
        tags = {tag.id: tag for tag in self.db.list_tags()}
        rules = sorted(self.db.list_rules(), key=lambda rule: (rule.pattern.lower(), rule.id))
        return [(rule, tags[rule.tag_id]) for rule in rules if rule.tag_id in tags]

    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule.

        Raises:
            NotFoundError: If the rule does not exist
        """
        if self.db.get_rule(rule_id) is None:
            raise NotFoundError(rule_not_found(rule_id))
        self.db.delete_rule(rule_id)
