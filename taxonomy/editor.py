#!/usr/bin/env python3
"""
editor.py
---------
Save and delete orchestration for taxonomy records.

RecordEditor is the single entry point for changing records: it validates,
normalizes, persists and then runs the relationship sync so both sides of
every link stay in step.

Save Flow:
    1. Normalize (derive update notation and note slug, clean relation lists)
    2. Validate against the records already stored
    3. Persist through the store
    4. Sync relation fields onto every target

Delete Flow:
    With cascade (default), the record is first synced with every relation
    field cleared, which removes its back-references everywhere, and only
    then deleted. If that detach partially fails the record is kept.

Usage:
    from taxonomy.editor import RecordEditor

    editor = RecordEditor(store, logger)
    editor.save("story", {"story_number": 23, "title": "...", ...})
    editor.set_relations("story", 23, "related_ideas", [5])
    editor.delete("story", 23)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Callable, Dict, List, Optional, Sequence

# --- Local imports ---
from taxonomy.core.cli import ResyncStats
from taxonomy.core.exceptions import PartialSyncError, TaxonomyError, ValidationError
from taxonomy.core.logging_manager import TaxonomyLogger, safe_logger
from taxonomy.models.kinds import RELATION_ORDER, EntityKind, Record, relation_fields_of
from taxonomy.relations.engine import RelationshipSync, SyncResult, set_relation_values
from taxonomy.relations.identifiers import (
    as_int,
    normalize_id,
    normalize_relation_values,
    note_slug,
    record_identity,
    update_notation,
)
from taxonomy.relations.rules import RELATION_RULES, RelationRule
from taxonomy.store.base import EntityStore
from taxonomy.validators import records as record_validators

Validator = Callable[..., List[str]]

_VALIDATORS: Dict[EntityKind, Validator] = {
    EntityKind.IDEA: record_validators.validate_idea,
    EntityKind.SPRINT: record_validators.validate_sprint,
    EntityKind.NOTE: record_validators.validate_note,
    EntityKind.FIGURE: record_validators.validate_figure,
    EntityKind.UPDATE: record_validators.validate_update,
}


class RecordEditor:
    """
    Validates, persists and syncs taxonomy records.

    Attributes:
        store: Entity store holding every record
        logger: Optional logger
        sync: Relationship sync engine bound to the same store
    """

    def __init__(
        self,
        store: EntityStore,
        logger: Optional[TaxonomyLogger] = None,
        rules: Sequence[RelationRule] = RELATION_RULES,
    ) -> None:
        self.store = store
        self.logger = logger
        self.sync = RelationshipSync(store, logger, rules)

    # ----- Save -----

    def save(
        self,
        kind: EntityKind | str,
        record: Record,
        validate: bool = True,
        create: bool = False,
    ) -> SyncResult:
        """
        Persist a record and mirror its relations.

        Args:
            kind: Kind of the record
            record: Record to save (not modified)
            validate: Run field validation first
            create: Treat the record as new, so an existing record with the
                same identifier is a conflict rather than an edit

        Returns:
            SyncResult of the relationship sync

        Raises:
            ValidationError: If validation fails (nothing is written)
            StoreError: If the record itself cannot be written
            PartialSyncError: If some mirror writes failed
        """
        kind = EntityKind.parse(kind)
        prepared = prepare_record(kind, record)

        if validate:
            errors = self.validate(kind, prepared, create=create)
            if errors:
                safe_logger(self.logger).log_warning(
                    f"Rejected invalid {kind.value}", {"errors": errors}
                )
                raise ValidationError(errors)

        self.store.save(kind, prepared)
        safe_logger(self.logger).log_operation(
            "save_record", {"kind": kind.value, "id": record_identity(kind, prepared)}
        )
        return self.sync.sync(kind, prepared)

    def validate(self, kind: EntityKind | str, record: Record, create: bool = False) -> List[str]:
        """
        Run the field validator for a kind against the stored records.

        Returns:
            List of error messages (empty when valid)
        """
        kind = EntityKind.parse(kind)
        existing = self.store.list_all(kind)
        exclude = None if create else _raw_identity(kind, record)

        if kind is EntityKind.STORY:
            return record_validators.validate_story(
                record, existing, self.store.list_all(EntityKind.IDEA), exclude
            )
        return _VALIDATORS[kind](record, existing, exclude)

    def set_relations(
        self,
        kind: EntityKind | str,
        identifier: Any,
        field_name: str,
        values: List[Any],
    ) -> SyncResult:
        """
        Replace one relation field of a stored record, then save and sync.

        Raises:
            RecordNotFoundError: If the record does not exist
            ValidationError: If the field is not a relation field of the kind
        """
        kind = EntityKind.parse(kind)
        if field_name not in relation_fields_of(kind):
            raise ValidationError(
                f"{field_name} is not a relation field of {kind.value}; "
                f"expected one of {', '.join(relation_fields_of(kind))}"
            )

        record = self.store.get(kind, identifier)
        record[field_name] = list(values)
        return self.save(kind, record, validate=False)

    # ----- Delete -----

    def delete(
        self, kind: EntityKind | str, identifier: Any, cascade: bool = True
    ) -> Optional[SyncResult]:
        """
        Delete a record, removing its back-references first when cascading.

        Args:
            kind: Kind of the record
            identifier: Record identifier
            cascade: Detach the record from every target before deleting

        Returns:
            SyncResult of the detach, or None without cascade

        Raises:
            RecordNotFoundError: If the record does not exist
            PartialSyncError: If the detach partially failed (record kept)
        """
        kind = EntityKind.parse(kind)
        record = self.store.get(kind, identifier)

        result = self.sync.detach(kind, record) if cascade else None
        self.store.delete(kind, identifier)

        safe_logger(self.logger).log_operation(
            "delete_record",
            {"kind": kind.value, "id": record_identity(kind, record), "cascade": cascade},
        )
        return result

    # ----- Repair -----

    def resync_all(self) -> ResyncStats:
        """
        Re-sync every record in relation order to repair the graph.

        Kinds earlier in relation order win disagreements: an idea's list of
        stories is applied before any story's list of ideas is read. Records
        whose own relation lists are not normalized (duplicates, empty
        lists) are rewritten first.

        Returns:
            ResyncStats with record and mirror write counts
        """
        stats = ResyncStats()

        for kind in RELATION_ORDER:
            for record in self.store.list_all(kind):
                stats.records_processed += 1
                try:
                    prepared = prepare_record(kind, record)
                    if prepared != record:
                        self.store.save(kind, prepared)
                        stats.records_rewritten += 1
                    result = self.sync.sync(kind, prepared)
                except PartialSyncError as e:
                    if e.result is not None and e.result.failures:
                        stats.add_result(e.result)
                    else:
                        stats.errors += 1
                    continue
                except TaxonomyError as e:
                    stats.errors += 1
                    safe_logger(self.logger).log_error(
                        e, {"operation": "resync", "kind": kind.value}
                    )
                    continue
                stats.add_result(result)

        safe_logger(self.logger).log_operation("resync_all", stats.to_dict())
        return stats


# ----- Normalization -----

def prepare_record(kind: EntityKind, record: Record) -> Record:
    """
    Normalize a record into the form it is persisted in.

    - Update notation is recomputed from sprint_id, idea_number, story_number
    - Notes get a slug when they have none
    - Relation lists are deduplicated and typed; empty ones are removed

    Returns:
        New normalized record
    """
    prepared = dict(record)

    if prepared.get("sprint_id") is not None:
        prepared["sprint_id"] = normalize_id(prepared["sprint_id"])

    if kind is EntityKind.UPDATE:
        notation = update_notation(prepared)
        if notation:
            prepared["notation"] = notation
    elif kind is EntityKind.NOTE and not normalize_id(prepared.get("slug")):
        prepared["slug"] = note_slug(prepared)

    for field_name in relation_fields_of(kind):
        if field_name in prepared:
            values = normalize_relation_values(kind, field_name, prepared[field_name])
            set_relation_values(prepared, field_name, values)

    return prepared


def _raw_identity(kind: EntityKind, record: Record) -> Any:
    if kind.is_numeric:
        return as_int(record.get(kind.id_field))
    return record_identity(kind, record)
