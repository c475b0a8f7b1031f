#!/usr/bin/env python3
"""
memory.py
---------
Dictionary-backed entity store.

Keeps records in memory keyed by kind and canonical identity. Reads and
writes deep-copy records so callers never share mutable state with the
store. Used for dry runs and as the fake store in tests.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import copy
from typing import Any, Dict, Iterable, List, Optional

# --- Local imports ---
from taxonomy.core.exceptions import RecordNotFoundError, StoreError
from taxonomy.core.logging_manager import TaxonomyLogger, safe_logger
from taxonomy.models.kinds import EntityKind, Record
from taxonomy.relations.identifiers import canonical_id, record_identity


class MemoryStore:
    """
    In-memory EntityStore implementation.

    Attributes:
        logger: Optional logger
    """

    def __init__(
        self,
        records: Optional[Dict[EntityKind | str, Iterable[Record]]] = None,
        logger: Optional[TaxonomyLogger] = None,
    ) -> None:
        """
        Initialize the store, optionally seeded with records.

        Args:
            records: Mapping of kind → records to preload
            logger: Optional logger
        """
        self.logger = logger
        self._records: Dict[EntityKind, Dict[str, Record]] = {
            kind: {} for kind in EntityKind
        }
        for kind, items in (records or {}).items():
            for record in items:
                self.save(EntityKind.parse(kind), record)

    def list_all(self, kind: EntityKind) -> List[Record]:
        kind = EntityKind.parse(kind)
        return [copy.deepcopy(record) for record in self._records[kind].values()]

    def get(self, kind: EntityKind, identifier: Any) -> Record:
        kind = EntityKind.parse(kind)
        key = canonical_id(kind, identifier)
        record = self._records[kind].get(key) if key else None
        if record is None:
            raise RecordNotFoundError(f"No {kind.value} found with identifier: {identifier}")
        return copy.deepcopy(record)

    def save(self, kind: EntityKind, record: Record) -> None:
        kind = EntityKind.parse(kind)
        key = record_identity(kind, record)
        if not key:
            raise StoreError(f"Cannot save {kind.value} without an identifier")
        self._records[kind][key] = copy.deepcopy(record)
        safe_logger(self.logger).log_debug(f"Saved {kind.value} {key}")

    def delete(self, kind: EntityKind, identifier: Any) -> None:
        kind = EntityKind.parse(kind)
        key = canonical_id(kind, identifier)
        if not key or key not in self._records[kind]:
            raise RecordNotFoundError(f"No {kind.value} found with identifier: {identifier}")
        del self._records[kind][key]
        safe_logger(self.logger).log_debug(f"Deleted {kind.value} {key}")
