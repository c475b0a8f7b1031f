#!/usr/bin/env python3
"""
records.py
----------
Field validation for taxonomy records before they are saved.

Each validate_* function returns a list of human-readable error strings;
an empty list means the record is valid. The editor turns a non-empty
list into a ValidationError.

Checks:
    - Required fields are present and non-empty
    - Identifiers are non-negative integers (or YYSS sprint ids)
    - Identifiers are unique among existing records
    - Status, priority and type values come from their vocabularies
    - Dates use YYYY-MM-DD and sprints end after they start

Numbering:
    next_idea_number, next_story_number and next_figure_number return the
    highest existing number plus one. Story numbers are global, not per
    idea.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from datetime import date
from typing import Any, Iterable, List, Optional

# --- Local imports ---
from taxonomy.models.enums import (
    FigureStatus,
    IdeaStatus,
    SprintStatus,
    StoryPriority,
    StoryStatus,
    UpdateType,
)
from taxonomy.models.kinds import Record
from taxonomy.relations.identifiers import (
    as_int,
    as_list,
    normalize_id,
    note_slug,
    parse_notation,
    update_notation,
)

__all__ = [
    "is_valid_sprint_id",
    "is_valid_notation",
    "parse_notation",
    "next_idea_number",
    "next_story_number",
    "next_figure_number",
    "validate_idea",
    "validate_story",
    "validate_sprint",
    "validate_update",
    "validate_figure",
    "validate_note",
]

_SPRINT_ID_RE = re.compile(r"^\d{4}$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_NOTATION_PATTERNS = [
    re.compile(r"^\d{4}\.\d+\.\d+$"),  # 2609.5.23
    re.compile(r"^\d+\.\d+$"),  # 5.23
    re.compile(r"^i\d+$"),  # i5
    re.compile(r"^s\d+$"),  # s23
]


# ----- Formats -----
def is_valid_sprint_id(sprint_id: Any) -> bool:
    """Check that a sprint id uses the YYSS format (e.g. '2609')."""
    return bool(_SPRINT_ID_RE.match(normalize_id(sprint_id) or ""))


def is_valid_notation(notation: Any) -> bool:
    """Check that a notation matches one of the four notation tiers."""
    text = normalize_id(notation) or ""
    return any(pattern.match(text) for pattern in _NOTATION_PATTERNS)


def _is_non_negative_int(value: Any) -> bool:
    number = as_int(value)
    return number is not None and number >= 0


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def _check_date(record: Record, field_name: str, errors: List[str], required: bool) -> None:
    value = record.get(field_name)
    if _is_blank(value):
        if required:
            errors.append(f"{field_name} is required")
        return
    if not _DATE_RE.match(str(value).strip()):
        errors.append(f"{field_name} must be in YYYY-MM-DD format")


def _check_choice(
    record: Record, field_name: str, choices: List[str], errors: List[str]
) -> None:
    value = record.get(field_name)
    if _is_blank(value):
        errors.append(f"{field_name} is required")
    elif value not in choices:
        errors.append(f"{field_name} must be one of: {', '.join(choices)}")


# ----- Numbering -----
def _next_number(records: Iterable[Record], field_name: str) -> int:
    numbers = [as_int(record.get(field_name)) for record in records]
    numbers = [number for number in numbers if number is not None]
    return max(numbers) + 1 if numbers else 0


def next_idea_number(ideas: Iterable[Record]) -> int:
    """Next free idea number (0 for the first idea)."""
    return _next_number(ideas, "idea_number")


def next_story_number(stories: Iterable[Record]) -> int:
    """Next free story number across all ideas."""
    return _next_number(stories, "story_number")


def next_figure_number(figures: Iterable[Record]) -> int:
    """Next free figure number."""
    return _next_number(figures, "figure_number")


def _number_taken(
    records: Iterable[Record], field_name: str, number: int, exclude: Optional[Any]
) -> bool:
    excluded = as_int(exclude)
    for record in records:
        existing = as_int(record.get(field_name))
        if existing == number and existing != excluded:
            return True
    return False


# ----- Record validators -----
def validate_idea(
    idea: Record, existing_ideas: Iterable[Record], exclude_idea_number: Any = None
) -> List[str]:
    """
    Validate idea front matter.

    Args:
        idea: Idea record to check
        existing_ideas: Ideas already in the store
        exclude_idea_number: Number of the idea being edited, if any

    Returns:
        List of error messages
    """
    errors: List[str] = []

    number = idea.get("idea_number")
    if number is None:
        errors.append("idea_number is required")
    elif not _is_non_negative_int(number):
        errors.append("idea_number must be a non-negative integer")
    elif _number_taken(existing_ideas, "idea_number", as_int(number), exclude_idea_number):
        errors.append(f"Idea number {as_int(number)} already exists")

    if _is_blank(idea.get("title")):
        errors.append("title is required")
    if _is_blank(idea.get("description")):
        errors.append("description is required")
    _check_choice(idea, "status", IdeaStatus.choices(), errors)
    _check_date(idea, "created", errors, required=True)

    return errors


def validate_story(
    story: Record,
    existing_stories: Iterable[Record],
    existing_ideas: Optional[Iterable[Record]] = None,
    exclude_story_number: Any = None,
) -> List[str]:
    """
    Validate story front matter.

    Story numbers are unique across every idea. When existing_ideas is
    given, each related idea must exist.

    Returns:
        List of error messages
    """
    errors: List[str] = []

    number = story.get("story_number")
    if number is None:
        errors.append("story_number is required")
    elif not _is_non_negative_int(number):
        errors.append("story_number must be a non-negative integer")
    elif _number_taken(existing_stories, "story_number", as_int(number), exclude_story_number):
        errors.append(f"Story number {as_int(number)} already exists")

    if existing_ideas is not None:
        known = {as_int(idea.get("idea_number")) for idea in existing_ideas}
        for idea_number in as_list(story.get("related_ideas")):
            if as_int(idea_number) not in known:
                errors.append(f"Related idea {idea_number} does not exist")

    if _is_blank(story.get("title")):
        errors.append("title is required")
    _check_choice(story, "status", StoryStatus.choices(), errors)
    _check_choice(story, "priority", StoryPriority.choices(), errors)

    for sprint_id in as_list(story.get("related_sprints")):
        if not is_valid_sprint_id(sprint_id):
            errors.append(f"Related sprint {sprint_id} must be in YYSS format (e.g., 2609)")

    return errors


def validate_sprint(
    sprint: Record, existing_sprints: Iterable[Record], exclude_sprint_id: Any = None
) -> List[str]:
    """Validate sprint front matter; returns a list of error messages."""
    errors: List[str] = []

    sprint_id = normalize_id(sprint.get("sprint_id"))
    excluded = normalize_id(exclude_sprint_id)
    if not sprint_id:
        errors.append("sprint_id is required")
    elif not is_valid_sprint_id(sprint_id):
        errors.append("sprint_id must be in YYSS format (e.g., 2609)")
    elif any(
        normalize_id(existing.get("sprint_id")) == sprint_id and sprint_id != excluded
        for existing in existing_sprints
    ):
        errors.append(f"Sprint {sprint_id} already exists")

    year = sprint.get("year")
    if year is None:
        errors.append("year is required")
    elif as_int(year) is None or not 2000 <= as_int(year) <= 2100:
        errors.append("year must be a valid 4-digit year")

    sprint_number = sprint.get("sprint_number")
    if sprint_number is None:
        errors.append("sprint_number is required")
    elif as_int(sprint_number) is None or not 1 <= as_int(sprint_number) <= 26:
        errors.append("sprint_number must be between 1 and 26")

    _check_date(sprint, "start_date", errors, required=True)
    _check_date(sprint, "end_date", errors, required=True)

    start = _parse_date(sprint.get("start_date"))
    end = _parse_date(sprint.get("end_date"))
    if start and end and end <= start:
        errors.append("end_date must be after start_date")

    status = sprint.get("status")
    if not _is_blank(status) and status not in SprintStatus.choices():
        errors.append(f"status must be one of: {', '.join(SprintStatus.choices())}")

    return errors


def validate_update(
    update: Record, existing_updates: Iterable[Record], exclude_notation: Any = None
) -> List[str]:
    """
    Validate update front matter.

    An update needs at least one of idea_number and story_number; its
    notation is computed from sprint_id, idea_number and story_number.
    """
    errors: List[str] = []

    sprint_id = update.get("sprint_id")
    if not _is_blank(sprint_id) and not is_valid_sprint_id(sprint_id):
        errors.append("sprint_id must be in YYSS format (e.g., 2609)")
    for field_name in ("idea_number", "story_number"):
        value = update.get(field_name)
        if value is not None and not _is_non_negative_int(value):
            errors.append(f"{field_name} must be a non-negative integer")

    notation = update_notation(update)
    if notation is None:
        errors.append("update needs an idea_number or a story_number")
    else:
        excluded = normalize_id(exclude_notation)
        if any(
            update_notation(existing) == notation and notation != excluded
            for existing in existing_updates
        ):
            errors.append(f"Update {notation} already exists")

    _check_date(update, "date", errors, required=True)
    _check_choice(update, "type", UpdateType.choices(), errors)

    return errors


def validate_figure(
    figure: Record, existing_figures: Iterable[Record], exclude_figure_number: Any = None
) -> List[str]:
    errors: List[str] = []

    number = figure.get("figure_number")
    if number is None:
        errors.append("figure_number is required")
    elif not _is_non_negative_int(number):
        errors.append("figure_number must be a non-negative integer")
    elif _number_taken(existing_figures, "figure_number", as_int(number), exclude_figure_number):
        errors.append(f"Figure number {as_int(number)} already exists")

    if _is_blank(figure.get("title")):
        errors.append("title is required")
    status = figure.get("status")
    if not _is_blank(status) and status not in FigureStatus.choices():
        errors.append(f"status must be one of: {', '.join(FigureStatus.choices())}")
    _check_date(figure, "created", errors, required=False)

    return errors


def validate_note(
    note: Record, existing_notes: Iterable[Record], exclude_slug: Any = None
) -> List[str]:
    errors: List[str] = []

    if _is_blank(note.get("title")):
        errors.append("title is required")
    _check_date(note, "date", errors, required=False)

    slug = note_slug(note)
    excluded = normalize_id(exclude_slug)
    if any(note_slug(existing) == slug and slug != excluded for existing in existing_notes):
        errors.append(f"Note {slug} already exists")

    return errors


def _parse_date(value: Any) -> Optional[date]:
    if _is_blank(value) or not _DATE_RE.match(str(value).strip()):
        return None
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None
