#!/usr/bin/env python3
"""
projector.py
------------
Read-only projection of a record's relationships for display.

Builds the ordered "related items" listing shown by `taxonomy show`: one
group per related kind (ideas, stories, sprints, notes, figures, updates),
each holding a label per related record. Ids that no stored record
matches still appear, as a bare identifier.

Labels:
    ideas    i5 - Title
    stories  s23 - Title
    sprints  2609 - 2026-04-20 -> 2026-05-03
    notes    Title (slug)
    figures  fig_3 - Title
    updates  2609.5.23 (progress)

Extra sources:
    - A sprint's stories also include every story listing the sprint
    - An update's groups start with its own sprint, idea and story
    - A figure's composite story references reduce to story numbers
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# --- Local imports ---
from taxonomy.models.kinds import RELATION_ORDER, EntityKind, Record
from taxonomy.relations.identifiers import (
    as_list,
    canonical_id,
    format_figure_notation,
    note_slug,
    record_identity,
    story_reference_to_story_id,
    update_notation,
)
from taxonomy.store.base import EntityStore


@dataclass
class RelatedGroup:
    """Related records of one kind, as display labels."""

    kind: EntityKind
    items: List[str] = field(default_factory=list)

    @property
    def heading(self) -> str:
        return self.kind.plural.upper()


def related_items(
    store: EntityStore, kind: EntityKind | str, record: Record
) -> List[RelatedGroup]:
    """
    Build the labelled related-item groups for a record.

    Args:
        store: Store used to resolve labels
        kind: Kind of the record
        record: Record whose relations to list

    Returns:
        Non-empty groups in relation order
    """
    kind = EntityKind.parse(kind)
    groups: List[RelatedGroup] = []
    cache: Dict[EntityKind, Dict[str, Record]] = {}

    for other in RELATION_ORDER:
        if other is kind:
            continue
        ids = _unique(_related_ids(store, kind, other, record), other)
        if not ids:
            continue
        index = cache.setdefault(other, _index(store, other))
        labels = [format_related(other, target_id, index.get(target_id)) for target_id in ids]
        groups.append(RelatedGroup(other, labels))
    return groups


def record_heading(kind: EntityKind | str, record: Record) -> Tuple[str, str]:
    """Title and subtitle describing a record, e.g. ('Story s23', 'Title')."""
    kind = EntityKind.parse(kind)
    if kind is EntityKind.IDEA:
        return f"Idea i{record.get('idea_number')}", str(record.get("title") or "")
    if kind is EntityKind.STORY:
        return f"Story s{record.get('story_number')}", str(record.get("title") or "")
    if kind is EntityKind.SPRINT:
        return (
            f"Sprint {record.get('sprint_id')}",
            f"{record.get('start_date') or '?'} -> {record.get('end_date') or '?'}",
        )
    if kind is EntityKind.NOTE:
        return f"Note {note_slug(record)}", str(record.get("title") or "")
    if kind is EntityKind.FIGURE:
        return format_figure_notation(record.get("figure_number")), str(record.get("title") or "")
    return f"Update {update_notation(record) or '?'}", str(record.get("type") or "")


def format_related(kind: EntityKind, target_id: str, target: Optional[Record]) -> str:
    """Label for one related record; bare identifier when it is not stored."""
    if kind is EntityKind.IDEA:
        return f"i{target_id} - {target.get('title') or ''}" if target else f"i{target_id}"
    if kind is EntityKind.STORY:
        return f"s{target_id} - {target.get('title') or ''}" if target else f"s{target_id}"
    if kind is EntityKind.SPRINT:
        if not target:
            return target_id
        return f"{target_id} - {target.get('start_date') or ''} -> {target.get('end_date') or ''}"
    if kind is EntityKind.NOTE:
        return f"{target.get('title') or ''} ({target_id})" if target else target_id
    if kind is EntityKind.FIGURE:
        label = format_figure_notation(target_id)
        return f"{label} - {target.get('title') or ''}" if target else label
    return f"{target_id} ({target.get('type') or ''})" if target else target_id


# ----- Internals -----

def _related_ids(
    store: EntityStore, kind: EntityKind, other: EntityKind, record: Record
) -> List[Any]:
    values = as_list(record.get(other.relation_field))

    if kind is EntityKind.FIGURE and other is EntityKind.STORY:
        return [story_reference_to_story_id(value) for value in values]

    if kind is EntityKind.SPRINT and other is EntityKind.STORY:
        sprint_id = record_identity(kind, record)
        for story in store.list_all(EntityKind.STORY):
            listed = [canonical_id(EntityKind.SPRINT, v) for v in as_list(story.get("related_sprints"))]
            if sprint_id in listed:
                values.append(story.get("story_number"))
        return values

    if kind is EntityKind.UPDATE:
        own_field = {
            EntityKind.IDEA: "idea_number",
            EntityKind.STORY: "story_number",
            EntityKind.SPRINT: "sprint_id",
        }.get(other)
        if own_field:
            return [record.get(own_field)] + values

    return values


def _unique(values: List[Any], kind: EntityKind) -> List[str]:
    unique: List[str] = []
    for value in values:
        target_id = canonical_id(kind, value)
        if target_id and target_id not in unique:
            unique.append(target_id)
    return unique


def _index(store: EntityStore, kind: EntityKind) -> Dict[str, Record]:
    index: Dict[str, Record] = {}
    for record in store.list_all(kind):
        identity = record_identity(kind, record)
        if identity:
            index.setdefault(identity, record)
    return index
