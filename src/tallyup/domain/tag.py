"""Tag domain service."""

from typing import Optional
from tallyup.database.base import Database
from tallyup.domain.entities import Tag as TagEntity
from tallyup.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_tag_name,
    tag_name_empty,
    tag_not_found,
)


class TagService:
    """Service for managing tags."""

    def __init__(self, db: Database):
        """Initialize tag service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_tag(self, name: str) -> int:
        """Create a tag.

        Args:
            name: Tag name, surrounding whitespace is removed

        Returns:
            Tag ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a tag with the same name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError(tag_name_empty())
        if self.db.get_tag_by_name(name) is not None:
            raise ConflictError(duplicate_tag_name(name))

        return self.db.create_tag(name)

    def get_tag(self, tag_id: int) -> Optional[TagEntity]:
        """Get tag by ID."""
        return self.db.get_tag(tag_id)

    def resolve_tag(self, tag: str) -> TagEntity:
        """Find a tag by numeric ID or by name.

        Raises:
            NotFoundError: If no tag matches
        """
        tag = tag.strip()
        found = None
        if tag.isdigit():
            found = self.db.get_tag(int(tag))
        if found is None:
            found = self.db.get_tag_by_name(tag)
        if found is None:
            raise NotFoundError(tag_not_found(tag))
        return found

    def list_tags(self) -> list[TagEntity]:
        """List all tags.

        Returns:
            List of tag entities ordered by name
        """
        return self.db.list_tags()

    def rename_tag(self, tag_id: int, name: str) -> None:
        """Rename a tag.

        Rules and transactions keep the tag, so they show the new name.

        Raises:
            ValidationError: If the name is empty
            NotFoundError: If the tag does not exist
            ConflictError: If another tag already has the name
        """
        name = name.strip()
        if not name:
            raise ValidationError(tag_name_empty())
        if self.db.get_tag(tag_id) is None:
            raise NotFoundError(tag_not_found(tag_id))

        existing = self.db.get_tag_by_name(name)
        if existing is not None and existing.id != tag_id:
            raise ConflictError(duplicate_tag_name(name))

        self.db.rename_tag(tag_id, name)

    def delete_tag(self, tag_id: int) -> None:
        """Delete a tag.

        Rules for the tag are deleted and transactions with the tag become
        untagged.

        Raises:
            NotFoundError: If the tag does not exist
        """
        if self.db.get_tag(tag_id) is None:
            raise NotFoundError(tag_not_found(tag_id))
        self.db.delete_tag(tag_id)
