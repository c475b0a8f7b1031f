#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the Ideas Taxonomy project.

Exception Hierarchy:
    Exception (built-in)
    └── TaxonomyError - Base for all taxonomy errors
        ├── StoreError - Entity store read/write failures
        │   └── RecordNotFoundError - Lookup of a missing record
        ├── FrontmatterError - Unreadable YAML front matter
        ├── ValidationError - Record validation failures
        ├── UnknownEntityKindError - Unrecognised entity kind name
        └── RelationshipSyncError - Relationship synchronization failures
            └── PartialSyncError - Some mirror writes failed

Usage:
    from taxonomy.core.exceptions import PartialSyncError, ValidationError

    try:
        editor.save("idea", record)
    except ValidationError as e:
        logger.log_warning(f"Invalid idea: {e}")
    except PartialSyncError as e:
        logger.log_warning(f"Relationships may be partially saved: {e}")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from taxonomy.relations.engine import SyncResult


class TaxonomyError(Exception):
    """
    Base exception for all taxonomy errors.

    Catch this to handle any error raised by the taxonomy package, or catch
    specific subclasses for more granular handling.
    """

    pass


class StoreError(TaxonomyError):
    """
    Exception for entity store failures.

    Raised when the store cannot persist or load a record:
    - Permission or disk errors while writing a Markdown file
    - A record missing the identifier needed to name its file

    Examples:
        >>> raise StoreError("Cannot write _ideas/5.md: permission denied")
        >>> raise StoreError("Update record has no notation components")
    """

    pass


class RecordNotFoundError(StoreError):
    """
    Exception for lookups of records that do not exist.

    Examples:
        >>> raise RecordNotFoundError("No story found with identifier: 23")
    """

    pass


class FrontmatterError(TaxonomyError):
    """
    Exception for Markdown files whose YAML front matter cannot be parsed.

    Examples:
        >>> raise FrontmatterError("Invalid YAML in _ideas/5.md")
    """

    pass


class ValidationError(TaxonomyError):
    """
    Exception for record validation failures.

    Carries the full list of validation messages so callers can show all
    problems at once.

    Attributes:
        errors: Individual validation messages

    Examples:
        >>> raise ValidationError(["title is required"])
    """

    def __init__(self, errors: List[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__(", ".join(self.errors))


class UnknownEntityKindError(TaxonomyError, ValueError):
    """
    Exception for unrecognised entity kind names.

    Examples:
        >>> raise UnknownEntityKindError("Unknown entity kind: 'material'")
    """

    pass


class RelationshipSyncError(TaxonomyError):
    """
    Base exception for relationship synchronization failures.
    """

    pass


class PartialSyncError(RelationshipSyncError):
    """
    Exception raised when one or more mirror writes failed during a sync.

    Every independent target write was still attempted before this is
    raised, so the relationship graph may be partially updated.

    Attributes:
        result: SyncResult with the written targets and per-target failures
    """

    def __init__(self, message: str, result: Optional["SyncResult"] = None) -> None:
        super().__init__(message)
        self.result = result
