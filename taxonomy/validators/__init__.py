#!/usr/bin/env python3
"""
validators
----------
Validation tools for taxonomy records and their relationships.

- records: Field checks run before a record is saved
- consistency: Whole-store audit of mirrored relation fields

Usage:
    # Through CLI
    taxonomy check

    # Direct import for programmatic use
    from taxonomy.validators.records import validate_idea
    from taxonomy.validators.consistency import RelationshipConsistencyValidator
"""

from .consistency import (
    ConsistencyIssue,
    ConsistencyValidationReport,
    RelationshipConsistencyValidator,
)
from .records import (
    is_valid_notation,
    is_valid_sprint_id,
    next_figure_number,
    next_idea_number,
    next_story_number,
    validate_figure,
    validate_idea,
    validate_note,
    validate_sprint,
    validate_story,
    validate_update,
)

__all__ = [
    "ConsistencyIssue",
    "ConsistencyValidationReport",
    "RelationshipConsistencyValidator",
    "is_valid_notation",
    "is_valid_sprint_id",
    "next_figure_number",
    "next_idea_number",
    "next_story_number",
    "validate_figure",
    "validate_idea",
    "validate_note",
    "validate_sprint",
    "validate_story",
    "validate_update",
]
