#!/usr/bin/env python3
"""
base.py
-------
Entity store contract.

A store is a per-kind keyed collection of records. The relationship engine
only needs list_all and save; the editor and CLI also use get and delete.

Stores signal failure by raising StoreError (file stores may also let
OSError escape); callers that must keep going catch these per record.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Iterable, List, Optional, Protocol, runtime_checkable

# --- Local imports ---
from taxonomy.models.kinds import EntityKind, Record
from taxonomy.relations.identifiers import canonical_id, record_identity


@runtime_checkable
class EntityStore(Protocol):
    """Protocol for taxonomy record stores."""

    def list_all(self, kind: EntityKind) -> List[Record]:
        """Return copies of every record of a kind."""
        ...

    def get(self, kind: EntityKind, identifier: Any) -> Record:
        """Return a copy of one record; raise RecordNotFoundError if absent."""
        ...

    def save(self, kind: EntityKind, record: Record) -> None:
        """Insert or replace a record, keyed by its identity."""
        ...

    def delete(self, kind: EntityKind, identifier: Any) -> None:
        """Remove one record; raise RecordNotFoundError if absent."""
        ...


def find_record(
    kind: EntityKind, records: Iterable[Record], identifier: Any
) -> Optional[Record]:
    """
    Find a record by identifier among already loaded records.

    Args:
        kind: Kind of the records
        records: Records to search
        identifier: Raw identifier (5, "5", "2609.5.23", ...)

    Returns:
        Matching record, or None
    """
    wanted = canonical_id(kind, identifier)
    if wanted is None:
        return None
    for record in records:
        if record_identity(kind, record) == wanted:
            return record
    return None
