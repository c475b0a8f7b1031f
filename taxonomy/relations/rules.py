#!/usr/bin/env python3
"""
rules.py
--------
Declarative relation table for bidirectional relationship syncing.

Every directed (source kind, target kind) pair that links records is one
RelationRule. A rule says which field on the source lists candidate
targets, which field on the target mirrors the link back, how to map a raw
source value into the target's identifier space, what value the target
stores to point back at the source, and how to compare stored values.

Each of the six kinds carries a relation field to each of the other five,
so the table holds 30 rules, grouped by source kind.

Irregularity:
    Figures store their stories as composite "idea.story" strings.
    Figure → Story extracts the story component before matching, and
    Story → Figure writes a composite reference and compares only the
    story component.

Usage:
    from taxonomy.relations.rules import rules_for
    from taxonomy.models import EntityKind

    for rule in rules_for(EntityKind.IDEA):
        print(rule.source_field, "→", rule.target.value, rule.target_field)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Set

# --- Local imports ---
from taxonomy.models.kinds import EntityKind, Record
from taxonomy.relations.identifiers import (
    as_int,
    as_list,
    canonical_id,
    format_story_reference,
    note_slug,
    normalize_id,
    numbers_equal,
    story_reference_to_story_id,
    story_references_equal,
    strings_equal,
    update_notation,
)

IdMapper = Callable[[Any, Record], Optional[str]]
BackReference = Callable[[Record, Record], Any]
IdEquality = Callable[[Any, Any], bool]


@dataclass(frozen=True)
class RelationRule:
    """
    One directed relation between two entity kinds.

    Attributes:
        source: Kind of the record being saved
        target: Kind of the records that mirror the relation
        source_field: List field on the source holding raw target ids
        target_field: List field on the target holding back-references
        map_to_target_id: Raw source value → canonical target id (or None)
        value_for_back_reference: Value the target stores for the source
        ids_equal: Equality used when diffing the target's mirror field
    """

    source: EntityKind
    target: EntityKind
    source_field: str
    target_field: str
    map_to_target_id: IdMapper
    value_for_back_reference: BackReference
    ids_equal: IdEquality = strings_equal

    def selected_ids(self, source_record: Record) -> Set[str]:
        """Deduplicated canonical target ids listed by the source record."""
        selected = set()
        for value in as_list(source_record.get(self.source_field)):
            target_id = self.map_to_target_id(value, source_record)
            if target_id:
                selected.add(target_id)
        return selected

    @property
    def key(self) -> tuple:
        return (self.source, self.target)


# ----- Mappers -----
def _to_target(kind: EntityKind) -> IdMapper:
    def mapper(value: Any, _source: Record) -> Optional[str]:
        return canonical_id(kind, value)

    return mapper


def _story_reference_to_story(value: Any, _source: Record) -> Optional[str]:
    return story_reference_to_story_id(value)


# ----- Back-reference values -----
def _idea_number(source: Record, _target: Record) -> Optional[int]:
    return as_int(source.get("idea_number"))


def _story_number(source: Record, _target: Record) -> Optional[int]:
    return as_int(source.get("story_number"))


def _story_reference(source: Record, _target: Record) -> Optional[str]:
    return format_story_reference(source)


def _sprint_id(source: Record, _target: Record) -> Optional[str]:
    return normalize_id(source.get("sprint_id"))


def _note_slug(source: Record, _target: Record) -> str:
    return note_slug(source)


def _figure_number(source: Record, _target: Record) -> Optional[int]:
    return as_int(source.get("figure_number"))


def _update_notation(source: Record, _target: Record) -> Optional[str]:
    return update_notation(source)


def _rule(
    source: EntityKind,
    target: EntityKind,
    value_for_back_reference: BackReference,
    ids_equal: IdEquality = strings_equal,
    map_to_target_id: Optional[IdMapper] = None,
) -> RelationRule:
    return RelationRule(
        source=source,
        target=target,
        source_field=target.relation_field,
        target_field=source.relation_field,
        map_to_target_id=map_to_target_id or _to_target(target),
        value_for_back_reference=value_for_back_reference,
        ids_equal=ids_equal,
    )


IDEA, STORY, SPRINT, NOTE, FIGURE, UPDATE = (
    EntityKind.IDEA,
    EntityKind.STORY,
    EntityKind.SPRINT,
    EntityKind.NOTE,
    EntityKind.FIGURE,
    EntityKind.UPDATE,
)

RELATION_RULES: List[RelationRule] = [
    # IDEA → *
    _rule(IDEA, STORY, _idea_number, numbers_equal),
    _rule(IDEA, SPRINT, _idea_number, numbers_equal),
    _rule(IDEA, NOTE, _idea_number, numbers_equal),
    _rule(IDEA, FIGURE, _idea_number, numbers_equal),
    _rule(IDEA, UPDATE, _idea_number, numbers_equal),
    # STORY → *
    _rule(STORY, IDEA, _story_number, numbers_equal),
    _rule(STORY, SPRINT, _story_number, numbers_equal),
    _rule(STORY, NOTE, _story_number, numbers_equal),
    _rule(STORY, FIGURE, _story_reference, story_references_equal),
    _rule(STORY, UPDATE, _story_number, numbers_equal),
    # SPRINT → *
    _rule(SPRINT, IDEA, _sprint_id),
    _rule(SPRINT, STORY, _sprint_id),
    _rule(SPRINT, NOTE, _sprint_id),
    _rule(SPRINT, FIGURE, _sprint_id),
    _rule(SPRINT, UPDATE, _sprint_id),
    # NOTE → *
    _rule(NOTE, IDEA, _note_slug),
    _rule(NOTE, STORY, _note_slug),
    _rule(NOTE, SPRINT, _note_slug),
    _rule(NOTE, FIGURE, _note_slug),
    _rule(NOTE, UPDATE, _note_slug),
    # FIGURE → *
    _rule(FIGURE, IDEA, _figure_number, numbers_equal),
    _rule(
        FIGURE,
        STORY,
        _figure_number,
        numbers_equal,
        map_to_target_id=_story_reference_to_story,
    ),
    _rule(FIGURE, SPRINT, _figure_number, numbers_equal),
    _rule(FIGURE, NOTE, _figure_number, numbers_equal),
    _rule(FIGURE, UPDATE, _figure_number, numbers_equal),
    # UPDATE → *
    _rule(UPDATE, IDEA, _update_notation),
    _rule(UPDATE, STORY, _update_notation),
    _rule(UPDATE, SPRINT, _update_notation),
    _rule(UPDATE, NOTE, _update_notation),
    _rule(UPDATE, FIGURE, _update_notation),
]


def rules_for(
    source: EntityKind, rules: Sequence[RelationRule] = RELATION_RULES
) -> List[RelationRule]:
    """Rules whose source kind matches, in table order."""
    return [rule for rule in rules if rule.source is source]


def rule_for(
    source: EntityKind,
    target: EntityKind,
    rules: Sequence[RelationRule] = RELATION_RULES,
) -> Optional[RelationRule]:
    """The rule for one directed pair, or None if the pair is not linked."""
    for rule in rules:
        if rule.source is source and rule.target is target:
            return rule
    return None
