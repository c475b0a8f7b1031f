"""
Relationship synchronization.

- identifiers: Identifier normalization, notation and slug helpers
- rules: The declarative relation table
- engine: RelationshipSync, which mirrors relation fields after a save
- projector: Related-item listings built from the synced graph
"""

from .identifiers import (
    format_notation,
    parse_notation,
    record_identity,
)
from .rules import RELATION_RULES, RelationRule, rule_for, rules_for
from .engine import RelationshipSync, SyncResult

__all__ = [
    "format_notation",
    "parse_notation",
    "record_identity",
    "RELATION_RULES",
    "RelationRule",
    "rule_for",
    "rules_for",
    "RelationshipSync",
    "SyncResult",
]
