"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class FormatError(DomainError):
    """Statement text does not match a known statement layout."""


class FieldParseError(FormatError):
    """A data row has a date or amount that cannot be parsed."""

    def __init__(self, message: str, line_number: int, raw_value: str):
        super().__init__(message)
        self.line_number = line_number
        self.raw_value = raw_value


class ContentTypeError(DomainError):
    """Uploaded file was not declared as CSV."""

    def __init__(self, filename: str, content_type: Optional[str]):
        super().__init__(not_csv(filename, content_type))
        self.filename = filename
        self.content_type = content_type


class StorageError(RuntimeError):
    """Unexpected database failure. The failed batch was rolled back."""


class TaggingError(RuntimeError):
    """Auto-tagging failed after transactions were already imported."""


def not_csv(filename: str, content_type: Optional[str]) -> str:
    """Return message for an upload with the wrong content type."""
    return f"File '{filename}' must be CSV (text/csv), got '{content_type or 'unknown'}'"


def unknown_statement_format() -> str:
    """Return message when no decoder accepts a statement."""
    return "Could not parse CSV data from any known format"


def invalid_field(kind: str, raw_value: str, line_number: int, reason: object) -> str:
    """Return message for an unparseable field on a statement row."""
    return f"Could not parse '{raw_value}' as {kind} on line {line_number}: {reason}"


def tag_not_found(tag: int | str) -> str:
    """Return message for missing tag by ID or name."""
    if isinstance(tag, int):
        return f"Tag {tag} not found"
    return f"Tag '{tag}' not found"


def tag_name_empty() -> str:
    """Return message for an empty tag name."""
    return "Tag name cannot be empty"


def duplicate_tag_name(name: str) -> str:
    """Return message for duplicate tag name."""
    return f"Tag with name '{name}' already exists"


def rule_not_found(rule_id: int) -> str:
    """Return message for missing rule."""
    return f"Rule {rule_id} not found"


def rule_pattern_empty() -> str:
    """Return message for an empty rule pattern."""
    return "Rule pattern cannot be empty"


def duplicate_rule(pattern: str, tag_name: str) -> str:
    """Return message for a rule that already exists."""
    return f"Rule '{pattern}' -> '{tag_name}' already exists"
