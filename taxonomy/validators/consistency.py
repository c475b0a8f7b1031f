#!/usr/bin/env python3
"""
consistency.py
--------------
Relationship consistency validation for the taxonomy content tree.

Walks every relation rule over the whole store and checks that each link
is mirrored on the other side.

Checks for:
- Missing back-references (A lists B, B does not list A)
- Dangling references (A lists an id no record of that kind has)
- Unparseable references (a value that maps to no identifier)
- Duplicate references (the same id listed twice in one field)
- Empty relation lists persisted as [] instead of being absent

Usage:
    taxonomy check            # Print the report
    taxonomy resync           # Repair by re-syncing every record
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

# --- Local imports ---
from taxonomy.core.logging_manager import TaxonomyLogger, safe_logger
from taxonomy.models.kinds import RELATION_ORDER, EntityKind, Record
from taxonomy.relations.identifiers import as_list, record_identity
from taxonomy.relations.rules import RELATION_RULES, RelationRule, rules_for
from taxonomy.store.base import EntityStore


@dataclass
class ConsistencyIssue:
    """Represents a relationship consistency issue."""

    check_type: str  # missing-back-reference, dangling-reference, ...
    severity: str  # error, warning
    entity_type: str  # idea, story, sprint, note, figure, update
    entity_id: str
    field: str
    message: str
    suggestion: Optional[str] = None


@dataclass
class ConsistencyValidationReport:
    """Complete relationship consistency report."""

    records_checked: int = 0
    rules_checked: int = 0
    total_errors: int = 0
    total_warnings: int = 0
    issues: List[ConsistencyIssue] = field(default_factory=list)

    def add_issue(self, issue: ConsistencyIssue) -> None:
        """Add an issue to the report."""
        self.issues.append(issue)
        if issue.severity == "error":
            self.total_errors += 1
        elif issue.severity == "warning":
            self.total_warnings += 1

    @property
    def has_errors(self) -> bool:
        """Check if any errors were found."""
        return self.total_errors > 0

    @property
    def has_warnings(self) -> bool:
        """Check if any warnings were found."""
        return self.total_warnings > 0

    @property
    def is_healthy(self) -> bool:
        """Check if the relationship graph is healthy (no errors)."""
        return not self.has_errors

    def issues_of(self, check_type: str) -> List[ConsistencyIssue]:
        """Issues of one check type."""
        return [issue for issue in self.issues if issue.check_type == check_type]


class RelationshipConsistencyValidator:
    """Validates that every relation in the store is mirrored on both sides."""

    def __init__(
        self,
        store: EntityStore,
        logger: Optional[TaxonomyLogger] = None,
        rules: Sequence[RelationRule] = RELATION_RULES,
    ):
        """
        Initialize the consistency validator.

        Args:
            store: Entity store to audit
            logger: Optional logger instance
            rules: Relation table to check against
        """
        self.store = store
        self.logger = logger
        self.rules = list(rules)
        self.report = ConsistencyValidationReport()

    def validate_all(self) -> ConsistencyValidationReport:
        """
        Run every relationship check over the whole store.

        Returns:
            Complete validation report
        """
        self.report = ConsistencyValidationReport()
        safe_logger(self.logger).log_info("Checking relationship consistency...")

        records = {kind: self.store.list_all(kind) for kind in RELATION_ORDER}
        identities = {
            kind: {
                identity: record
                for record in kind_records
                for identity in [record_identity(kind, record)]
                if identity
            }
            for kind, kind_records in records.items()
        }

        for kind in RELATION_ORDER:
            for record in records[kind]:
                self.report.records_checked += 1
                for rule in rules_for(kind, self.rules):
                    self._check_rule(rule, record, identities[rule.target])

        self.report.rules_checked = len(self.rules)
        safe_logger(self.logger).log_operation(
            "check_consistency",
            {
                "records": self.report.records_checked,
                "errors": self.report.total_errors,
                "warnings": self.report.total_warnings,
            },
        )
        return self.report

    def _check_rule(
        self, rule: RelationRule, source: Record, targets: Dict[str, Record]
    ) -> None:
        source_id = record_identity(rule.source, source) or "?"
        raw = source.get(rule.source_field)

        if isinstance(raw, list) and not raw:
            self._add(
                "empty-list",
                "warning",
                rule.source,
                source_id,
                rule.source_field,
                f"{rule.source_field} is an empty list",
                "Remove the field or run: taxonomy resync",
            )
            return

        seen: List[str] = []
        for value in as_list(raw):
            target_id = rule.map_to_target_id(value, source)
            if not target_id:
                self._add(
                    "unparseable-reference",
                    "warning",
                    rule.source,
                    source_id,
                    rule.source_field,
                    f"Cannot read {rule.target.value} reference {value!r}",
                )
                continue

            if target_id in seen:
                self._add(
                    "duplicate-reference",
                    "warning",
                    rule.source,
                    source_id,
                    rule.source_field,
                    f"{rule.target.value} {target_id} is listed more than once",
                    "Run: taxonomy resync",
                )
                continue
            seen.append(target_id)

            target = targets.get(target_id)
            if target is None:
                self._add(
                    "dangling-reference",
                    "error",
                    rule.source,
                    source_id,
                    rule.source_field,
                    f"{rule.target.value} {target_id} does not exist",
                    f"Remove {target_id} from {rule.source_field}",
                )
                continue

            back_reference = rule.value_for_back_reference(source, target)
            mirrored = as_list(target.get(rule.target_field))
            if not any(rule.ids_equal(existing, back_reference) for existing in mirrored):
                self._add(
                    "missing-back-reference",
                    "error",
                    rule.source,
                    source_id,
                    rule.source_field,
                    f"{rule.target.value} {target_id} does not list "
                    f"{rule.source.value} {source_id} in {rule.target_field}",
                    "Run: taxonomy resync",
                )

    def _add(
        self,
        check_type: str,
        severity: str,
        kind: EntityKind,
        entity_id: str,
        field_name: str,
        message: str,
        suggestion: Optional[str] = None,
    ) -> None:
        self.report.add_issue(
            ConsistencyIssue(
                check_type=check_type,
                severity=severity,
                entity_type=kind.value,
                entity_id=entity_id,
                field=field_name,
                message=message,
                suggestion=suggestion,
            )
        )
