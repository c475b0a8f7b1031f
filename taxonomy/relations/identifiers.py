#!/usr/bin/env python3
"""
identifiers.py
--------------
Identifier normalization and equality helpers for relationship syncing.

Relation fields mix numbers (ideas, stories, figures) and strings (sprints,
notes, updates), and YAML happily turns "5" into 5 and back. Everything
here converts identifiers into one canonical string form so membership
tests are exact, while back-reference values keep their native type.

Key Functions:
    format_notation: Build an update's notation with fallback tiers
    parse_notation: Split a notation back into its components
    update_notation: Compute an update record's notation from its fields
    note_slug: Resolve a note's slug through its fallbacks
    record_identity: Canonical identifier of any record
    canonical_id: Map a raw relation value into a kind's identifier space
    parse_story_reference: Split a composite "idea.story" reference
    format_story_reference: Build the composite reference for a story

Notation tiers:
    sprint + idea + story  → "2609.5.23"
    idea + story           → "5.23"
    idea only              → "i5"
    story only             → "s23"
    nothing                → ""
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
import time
from typing import Any, Dict, List, Optional, Tuple

# --- Local imports ---
from taxonomy.models.kinds import EntityKind, Record
from taxonomy.utils.slugify import slugify

_STORY_REFERENCE_RE = re.compile(r"^\s*(\d+)\.(\d+)\s*$")
_FULL_NOTATION_RE = re.compile(r"^(\d{4})\.(\d+)\.(\d+)$")
_IDEA_STORY_NOTATION_RE = re.compile(r"^(\d+)\.(\d+)$")
_IDEA_NOTATION_RE = re.compile(r"^i(\d+)$")
_STORY_NOTATION_RE = re.compile(r"^s(\d+)$")


# ----- Scalar coercion -----
def as_int(value: Any) -> Optional[int]:
    """
    Coerce a value to int, or None when it is not an integral number.

    Examples:
        >>> as_int(5), as_int("05"), as_int(5.0), as_int("5.5"), as_int("x")
        (5, 5, 5, None, None)
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if number.is_integer() else None


def as_number(value: Any) -> Optional[float]:
    """Coerce a value to float, or None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def normalize_id(value: Any) -> Optional[str]:
    """
    Convert a raw identifier into a trimmed string.

    Integral floats lose their ".0" so YAML-parsed numbers match form input.

    Returns:
        Trimmed string, or None for None/empty values
    """
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def as_list(value: Any) -> List[Any]:
    """Copy a relation field as a list; anything that is not a list is empty."""
    if not isinstance(value, list):
        return []
    return list(value)


# ----- Equality -----
def numbers_equal(existing: Any, candidate: Any) -> bool:
    """
    Compare two identifiers numerically.

    Examples:
        >>> numbers_equal(5, "5"), numbers_equal("5.0", 5), numbers_equal("x", "x")
        (True, True, False)
    """
    left = as_number(existing)
    right = as_number(candidate)
    if left is None or right is None:
        return False
    return left == right


def strings_equal(existing: Any, candidate: Any) -> bool:
    """
    Compare two identifiers as trimmed strings.

    Examples:
        >>> strings_equal(2609, "2609"), strings_equal(" a ", "a"), strings_equal(None, None)
        (True, True, False)
    """
    left = normalize_id(existing)
    return left is not None and left == normalize_id(candidate)


def story_references_equal(existing: Any, candidate: Any) -> bool:
    """
    Compare composite "idea.story" references by their story component.

    Falls back to string equality when either side is not a composite
    reference.

    Examples:
        >>> story_references_equal("5.23", "0.23")
        True
        >>> story_references_equal("5.23", "5.24")
        False
    """
    left = parse_story_reference(existing)
    right = parse_story_reference(candidate)
    if left is None or right is None:
        return str(existing) == str(candidate)
    return left[1] == right[1]


# ----- Composite story references -----
def parse_story_reference(value: Any) -> Optional[Tuple[int, int]]:
    """
    Parse a composite "idea.story" reference.

    Returns:
        (idea_number, story_number), or None if the value is not a reference

    Examples:
        >>> parse_story_reference("5.23")
        (5, 23)
        >>> parse_story_reference("23") is None
        True
    """
    if value is None:
        return None
    match = _STORY_REFERENCE_RE.match(str(value))
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def story_reference_to_story_id(value: Any) -> Optional[str]:
    """
    Extract the story identifier from a composite reference.

    Examples:
        >>> story_reference_to_story_id("5.23")
        '23'
        >>> story_reference_to_story_id("garbage") is None
        True
    """
    parsed = parse_story_reference(value)
    if parsed is None:
        return None
    return str(parsed[1])


def format_story_reference(story: Record) -> Optional[str]:
    """
    Build the composite reference a figure stores for a story.

    The idea component is the story's first related idea, or 0 when it has
    none.

    Returns:
        "idea.story", or None if the story has no usable story_number
    """
    story_number = as_int(story.get("story_number"))
    if story_number is None:
        return None
    related_ideas = as_list(story.get("related_ideas"))
    idea_number = as_int(related_ideas[0]) if related_ideas else None
    return f"{idea_number if idea_number is not None else 0}.{story_number}"


# ----- Notation -----
def format_notation(
    sprint_id: Optional[str] = None,
    idea_number: Optional[int] = None,
    story_number: Optional[int] = None,
) -> str:
    """
    Format an update notation from its optional components.

    Examples:
        >>> format_notation("2609", 5, 23)
        '2609.5.23'
        >>> format_notation(None, 5, 23)
        '5.23'
        >>> format_notation(None, 5, None)
        'i5'
        >>> format_notation(None, None, 23)
        's23'
        >>> format_notation()
        ''
    """
    if sprint_id and idea_number is not None and story_number is not None:
        return f"{sprint_id}.{idea_number}.{story_number}"
    if idea_number is not None and story_number is not None:
        return f"{idea_number}.{story_number}"
    if idea_number is not None:
        return f"i{idea_number}"
    if story_number is not None:
        return f"s{story_number}"
    return ""


def parse_notation(notation: str) -> Dict[str, Any]:
    """
    Parse a notation into its components.

    Returns:
        Dict with any of sprint_id, idea_number, story_number; empty if the
        notation matches no tier
    """
    notation = (notation or "").strip()

    match = _FULL_NOTATION_RE.match(notation)
    if match:
        return {
            "sprint_id": match.group(1),
            "idea_number": int(match.group(2)),
            "story_number": int(match.group(3)),
        }
    match = _IDEA_STORY_NOTATION_RE.match(notation)
    if match:
        return {"idea_number": int(match.group(1)), "story_number": int(match.group(2))}
    match = _IDEA_NOTATION_RE.match(notation)
    if match:
        return {"idea_number": int(match.group(1))}
    match = _STORY_NOTATION_RE.match(notation)
    if match:
        return {"story_number": int(match.group(1))}
    return {}


def update_notation(update: Record) -> Optional[str]:
    """
    Compute an update's notation from its sprint/idea/story fields.

    The stored "notation" field is never consulted, so partially populated
    or stale records still resolve to their real identity.

    Returns:
        Notation string, or None if the update has no components at all
    """
    notation = format_notation(
        normalize_id(update.get("sprint_id")),
        as_int(update.get("idea_number")),
        as_int(update.get("story_number")),
    )
    return notation or None


# ----- Notes -----
def note_slug(note: Record) -> str:
    """
    Resolve a note's slug.

    Fallback order: slug → filename without ".md" → slugified title →
    "note-{date}" → "note-{current timestamp in ms}".
    """
    slug = normalize_id(note.get("slug"))
    if slug:
        return slug
    filename = normalize_id(note.get("filename"))
    if filename:
        return re.sub(r"\.md$", "", filename)
    title_slug = slugify(str(note.get("title") or ""))
    if title_slug:
        return title_slug
    date_value = normalize_id(note.get("date"))
    if date_value:
        return f"note-{date_value}"
    return f"note-{int(time.time() * 1000)}"


def format_figure_notation(figure_number: Any) -> str:
    """Display label for a figure: fig_{number}."""
    return f"fig_{normalize_id(figure_number) or ''}"


# ----- Identity -----
def record_identity(kind: EntityKind, record: Record) -> Optional[str]:
    """
    Canonical string identifier of a record.

    Args:
        kind: Kind of the record
        record: Record dictionary

    Returns:
        Canonical identifier, or None when the record has none
    """
    if kind is EntityKind.UPDATE:
        return update_notation(record)
    if kind is EntityKind.NOTE:
        return note_slug(record)
    return canonical_id(kind, record.get(kind.id_field))


def canonical_id(kind: EntityKind, value: Any) -> Optional[str]:
    """
    Map a raw identifier into a kind's canonical identifier space.

    Numeric kinds require an integral value ("05" and 5.0 both become "5");
    anything else is dropped. String kinds are trimmed.

    Returns:
        Canonical identifier, or None if the value is unusable
    """
    if kind.is_numeric:
        number = as_int(value)
        return str(number) if number is not None else None
    return normalize_id(value)


def normalize_relation_values(
    source_kind: EntityKind, field: str, values: Any
) -> List[Any]:
    """
    Normalize a relation field into its persisted form.

    Numeric kinds are stored as ints and string kinds as strings; a figure's
    related_stories keeps its composite strings. Unusable and duplicate
    values are dropped, first occurrence wins.

    Args:
        source_kind: Kind of the record owning the field
        field: Relation field name (related_ideas, ...)
        values: Raw field value

    Returns:
        Normalized list (possibly empty)
    """
    target_kind = _kind_for_relation_field(field)
    normalized: List[Any] = []
    seen = set()
    for value in as_list(values):
        if source_kind is EntityKind.FIGURE and target_kind is EntityKind.STORY:
            parsed = parse_story_reference(value)
            item: Any = f"{parsed[0]}.{parsed[1]}" if parsed else None
            key = str(parsed[1]) if parsed else None
        elif target_kind is not None and target_kind.is_numeric:
            item = as_int(value)
            key = str(item) if item is not None else None
        else:
            item = normalize_id(value)
            key = item
        if item is None or key in seen:
            continue
        seen.add(key)
        normalized.append(item)
    return normalized


def _kind_for_relation_field(field: str) -> Optional[EntityKind]:
    for kind in EntityKind:
        if kind.relation_field == field:
            return kind
    return None
