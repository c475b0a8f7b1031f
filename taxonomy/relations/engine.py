#!/usr/bin/env python3
"""
engine.py
---------
Bidirectional relationship synchronization.

After a record is saved, RelationshipSync walks every relation rule whose
source kind matches and rewrites the mirror field on each target so it
reflects exactly the links the source currently lists. Only targets whose
mirror field actually changes are written, so syncing the same record twice
performs no writes the second time.

Sync Cycle (per rule):
    1. Map the source field's raw values into canonical target ids
    2. Load every record of the target kind from the store
    3. For each target, link or unlink the source's back-reference
    4. Persist each changed target once (empty mirrors become absent)

Failure Handling:
    - Unparseable raw ids are dropped
    - Targets or sources without a usable identifier are skipped
    - A failed target write does not stop the others; once every write has
      been attempted, PartialSyncError is raised with the full SyncResult

Usage:
    from taxonomy.relations.engine import RelationshipSync

    engine = RelationshipSync(store, logger)
    result = engine.sync("idea", idea_record)
    print(result.summary())

    # Remove every back-reference a record owns (used before deleting it)
    engine.detach("idea", idea_record)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple

# --- Local imports ---
from taxonomy.core.exceptions import PartialSyncError, TaxonomyError
from taxonomy.core.logging_manager import TaxonomyLogger, safe_logger
from taxonomy.models.kinds import EntityKind, Record, relation_fields_of
from taxonomy.relations.identifiers import as_list, record_identity
from taxonomy.relations.rules import RELATION_RULES, RelationRule, rules_for

if TYPE_CHECKING:
    from taxonomy.store.base import EntityStore


# ==================== Sync Result ====================

@dataclass
class TargetWrite:
    """One mirror record rewritten during a sync."""

    kind: EntityKind
    identifier: str
    field: str
    action: str  # linked, unlinked, deduplicated


@dataclass
class TargetFailure:
    """One mirror write (or collection load) that failed during a sync."""

    kind: EntityKind
    identifier: Optional[str]
    field: str
    error: str


@dataclass
class SyncResult:
    """
    Outcome of syncing one source record.

    Attributes:
        source_kind: Kind of the synced record
        source_id: Canonical identifier of the synced record
        rules_applied: Number of relation rules evaluated
        writes: Targets whose mirror field was rewritten
        failures: Targets whose write failed
    """

    source_kind: EntityKind
    source_id: Optional[str]
    rules_applied: int = 0
    writes: List[TargetWrite] = field(default_factory=list)
    failures: List[TargetFailure] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True when every attempted write succeeded."""
        return not self.failures

    @property
    def changed(self) -> bool:
        """True when at least one target was rewritten."""
        return bool(self.writes)

    def summary(self) -> str:
        """One-line human-readable summary."""
        label = f"{self.source_kind.value} {self.source_id or '?'}"
        return (
            f"{label}: {self.rules_applied} rules, "
            f"{len(self.writes)} mirrors written, {len(self.failures)} failed"
        )


# ==================== Engine ====================

class RelationshipSync:
    """
    Keeps relation fields consistent from both sides of every link.

    The engine holds no state between calls; the store is the only source
    of truth. It assumes saves are serialized by the caller.

    Attributes:
        store: Entity store used to load and persist targets
        logger: Optional logger
        rules: Relation table to apply
    """

    def __init__(
        self,
        store: "EntityStore",
        logger: Optional[TaxonomyLogger] = None,
        rules: Sequence[RelationRule] = RELATION_RULES,
    ) -> None:
        self.store = store
        self.logger = logger
        self.rules = list(rules)

    def sync(self, kind: EntityKind | str, record: Record) -> SyncResult:
        """
        Mirror a freshly saved record's relation fields onto its targets.

        Args:
            kind: Kind of the saved record
            record: The record exactly as persisted

        Returns:
            SyncResult describing every write

        Raises:
            PartialSyncError: If any target write failed (after all were tried)
        """
        kind = EntityKind.parse(kind)
        result = SyncResult(source_kind=kind, source_id=record_identity(kind, record))

        for rule in rules_for(kind, self.rules):
            self._apply_rule(rule, record, result)
            result.rules_applied += 1

        details = {
            "kind": kind.value,
            "id": result.source_id,
            "writes": len(result.writes),
            "failures": len(result.failures),
        }
        if result.failures:
            safe_logger(self.logger).log_warning(
                "Relationships may be partially saved", details
            )
            raise PartialSyncError(
                f"Relationships for {kind.value} {result.source_id} may be partially "
                f"saved: {len(result.failures)} of "
                f"{len(result.failures) + len(result.writes)} mirror writes failed",
                result,
            )

        safe_logger(self.logger).log_operation("sync_relationships", details)
        return result

    def detach(self, kind: EntityKind | str, record: Record) -> SyncResult:
        """
        Remove every back-reference pointing at a record.

        Syncs a copy of the record with all relation fields cleared, which
        unlinks it from every target. Used before deleting a record.

        Raises:
            PartialSyncError: If any target write failed
        """
        kind = EntityKind.parse(kind)
        stripped = {
            key: value
            for key, value in record.items()
            if key not in relation_fields_of(kind)
        }
        safe_logger(self.logger).log_debug(
            f"Detaching {kind.value} {record_identity(kind, record)}"
        )
        return self.sync(kind, stripped)

    # ----- Internals -----

    def _apply_rule(self, rule: RelationRule, source: Record, result: SyncResult) -> None:
        selected_ids = rule.selected_ids(source)

        try:
            targets = self.store.list_all(rule.target)
        except (TaxonomyError, OSError) as e:
            safe_logger(self.logger).log_error(
                e, {"operation": "load_targets", "target": rule.target.value}
            )
            result.failures.append(
                TargetFailure(rule.target, None, rule.target_field, str(e))
            )
            return

        dirty: List[Tuple[str, Record, str]] = []
        for target in targets:
            target_id = record_identity(rule.target, target)
            if not target_id:
                continue

            link_value = rule.value_for_back_reference(source, target)
            if link_value is None or link_value == "":
                continue

            should_link = target_id in selected_ids
            current = as_list(target.get(rule.target_field))
            matches = [v for v in current if rule.ids_equal(v, link_value)]
            remaining = [v for v in current if not rule.ids_equal(v, link_value)]

            if should_link and not matches:
                next_values, action = remaining + [link_value], "linked"
            elif not should_link and matches:
                next_values, action = remaining, "unlinked"
            elif should_link and len(matches) > 1:
                next_values, action = self._collapse(current, link_value, rule), "deduplicated"
            else:
                continue

            updated = dict(target)
            set_relation_values(updated, rule.target_field, next_values)
            dirty.append((target_id, updated, action))

        for target_id, updated, action in dirty:
            try:
                self.store.save(rule.target, updated)
            except (TaxonomyError, OSError) as e:
                safe_logger(self.logger).log_error(
                    e,
                    {
                        "operation": "write_mirror",
                        "target": rule.target.value,
                        "id": target_id,
                        "field": rule.target_field,
                    },
                )
                result.failures.append(
                    TargetFailure(rule.target, target_id, rule.target_field, str(e))
                )
                continue

            result.writes.append(
                TargetWrite(rule.target, target_id, rule.target_field, action)
            )
            safe_logger(self.logger).log_debug(
                f"{action} {rule.source.value} → {rule.target.value} {target_id}",
                {"field": rule.target_field},
            )

    @staticmethod
    def _collapse(current: List[Any], link_value: Any, rule: RelationRule) -> List[Any]:
        """Keep the first matching entry only, replaced by the fresh link value."""
        collapsed: List[Any] = []
        placed = False
        for value in current:
            if rule.ids_equal(value, link_value):
                if not placed:
                    collapsed.append(link_value)
                    placed = True
                continue
            collapsed.append(value)
        return collapsed


def set_relation_values(record: Record, field_name: str, values: List[Any]) -> None:
    """Set a relation field, removing it entirely when the list is empty."""
    if values:
        record[field_name] = values
    else:
        record.pop(field_name, None)
