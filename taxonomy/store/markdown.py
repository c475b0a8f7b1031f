#!/usr/bin/env python3
"""
markdown.py
-----------
Markdown file store for taxonomy records.

Each kind lives in its own collection directory under the content root;
each record is one Markdown file with YAML front matter.

File Naming:
    _ideas/{idea_number}.md
    _stories/{story_number}.md          (legacy: _stories/{idea}/{story}.md)
    _sprints/{sprint_id}.md
    _notes/{date}-{slug}.md             (or the note's existing filename)
    _figures/{figure_number}.md
    _updates/{sprint}-{idea}-{story}.md  (missing parts written as "x")

Normalization on read:
    - Identifiers are coerced to their native types (sprint ids as strings)
    - Relation lists hold ints for numeric kinds and strings otherwise
    - Legacy stories gain related_ideas from idea_number and
      related_sprints from assigned_sprint
    - Notes carry a "filename" key naming their file

Normalization on write:
    - None values and empty relation lists are dropped
    - A note's "filename" key picks its file but is not written

Usage:
    from taxonomy.store.markdown import MarkdownStore

    store = MarkdownStore(Path("~/site"), logger)
    ideas = store.list_all(EntityKind.IDEA)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path
from typing import Any, Iterator, List, Optional, Tuple

# --- Local imports ---
from taxonomy.core.exceptions import FrontmatterError, RecordNotFoundError, StoreError
from taxonomy.core.logging_manager import TaxonomyLogger, safe_logger
from taxonomy.core.paths import collection_dir
from taxonomy.models.kinds import EntityKind, Record, relation_fields_of
from taxonomy.relations.identifiers import (
    as_int,
    canonical_id,
    normalize_id,
    normalize_relation_values,
    note_slug,
    record_identity,
)
from taxonomy.utils.md import parse_markdown_record, render_markdown_record
from taxonomy.utils.slugify import note_filename

# Stands in for an update's missing sprint, idea or story in its file name
MISSING_PART = "x"


class MarkdownStore:
    """
    EntityStore backed by Markdown files with YAML front matter.

    Attributes:
        content_dir: Content root holding the collection directories
        logger: Optional logger
        unreadable: Files skipped during the last listing (bad front matter)
    """

    def __init__(self, content_dir: Path, logger: Optional[TaxonomyLogger] = None) -> None:
        self.content_dir = Path(content_dir)
        self.logger = logger
        self.unreadable: List[Path] = []

    # ----- EntityStore -----

    def list_all(self, kind: EntityKind) -> List[Record]:
        """
        Read every record of a kind, sorted in the kind's natural order.

        Files whose front matter cannot be parsed are skipped, logged and
        remembered in `unreadable`.
        """
        kind = EntityKind.parse(kind)
        records = [record for _, record in self._iter_records(kind)]
        return sorted(records, key=lambda record: _sort_key(kind, record))

    def get(self, kind: EntityKind, identifier: Any) -> Record:
        kind = EntityKind.parse(kind)
        path, record = self._locate(kind, identifier)
        return record

    def save(self, kind: EntityKind, record: Record) -> None:
        """
        Write a record to its file, creating the collection if needed.

        A record previously stored under another file name (legacy story
        subdirectory, older update naming, renamed note) is moved: the new
        file is written, then the old one removed.

        Raises:
            StoreError: If the record cannot be named, its file already holds
                a different record, or the write fails
        """
        kind = EntityKind.parse(kind)
        identity = record_identity(kind, record)
        directory = self._collection(kind)
        path = directory / self._filename_for(kind, record)
        previous = self._previous_path(kind, record, identity, path)

        document = render_markdown_record(_prepare_for_write(kind, record))
        try:
            directory.mkdir(parents=True, exist_ok=True)
            path.write_text(document, encoding="utf-8")
            if previous is not None and previous != path:
                previous.unlink()
                safe_logger(self.logger).log_info(
                    f"Moved {kind.value} {identity}", {"from": str(previous), "to": str(path)}
                )
        except OSError as e:
            raise StoreError(f"Cannot write {path}: {e}") from e

        safe_logger(self.logger).log_debug(
            f"Saved {kind.value}", {"file": str(path.relative_to(self.content_dir))}
        )

    def delete(self, kind: EntityKind, identifier: Any) -> None:
        kind = EntityKind.parse(kind)
        path, _ = self._locate(kind, identifier)
        try:
            path.unlink()
        except OSError as e:
            raise StoreError(f"Cannot delete {path}: {e}") from e

        safe_logger(self.logger).log_operation(
            "delete_record", {"kind": kind.value, "file": str(path)}
        )

    # ----- File layout -----

    def _collection(self, kind: EntityKind) -> Path:
        return collection_dir(self.content_dir, kind.value)

    def _filename_for(self, kind: EntityKind, record: Record) -> str:
        if kind is EntityKind.NOTE:
            filename = normalize_id(record.get("filename"))
            if filename:
                return Path(filename).name
            return note_filename(normalize_id(record.get("date")) or "", note_slug(record))

        if kind is EntityKind.UPDATE:
            parts = [
                normalize_id(record.get("sprint_id")),
                normalize_id(as_int(record.get("idea_number"))),
                normalize_id(as_int(record.get("story_number"))),
            ]
            if not any(parts[1:]):
                stem = ""
            else:
                stem = "-".join(part or MISSING_PART for part in parts)
        else:
            stem = record_identity(kind, record) or ""

        if not stem:
            raise StoreError(f"Cannot name file for {kind.value} without an identifier")
        return f"{stem}.md"

    def _iter_files(self, kind: EntityKind) -> Iterator[Path]:
        directory = self._collection(kind)
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            return

        for entry in sorted(directory.iterdir()):
            if entry.is_dir() and kind is EntityKind.STORY:
                # Legacy layout: _stories/{idea_number}/{story_number}.md
                yield from sorted(entry.glob("*.md"))
            elif entry.is_file() and entry.suffix == ".md":
                yield entry

    def _iter_records(self, kind: EntityKind) -> Iterator[Tuple[Path, Record]]:
        self.unreadable = []
        for path in self._iter_files(kind):
            try:
                record = parse_markdown_record(path.read_text(encoding="utf-8"), str(path))
            except (FrontmatterError, UnicodeDecodeError) as e:
                self.unreadable.append(path)
                safe_logger(self.logger).log_warning(
                    f"Skipping unreadable {kind.value} file", {"file": str(path), "error": str(e)}
                )
                continue

            if kind is EntityKind.NOTE:
                record.setdefault("filename", path.name)
            yield path, normalize_record(kind, record)

    def _locate(self, kind: EntityKind, identifier: Any) -> Tuple[Path, Record]:
        wanted = canonical_id(kind, identifier)
        if wanted:
            for path, record in self._iter_records(kind):
                if record_identity(kind, record) == wanted:
                    return path, record
        raise RecordNotFoundError(f"No {kind.value} found with identifier: {identifier}")

    def _previous_path(
        self, kind: EntityKind, record: Record, identity: Optional[str], path: Path
    ) -> Optional[Path]:
        """
        Find the file currently holding this record, guarding `path`.

        Legacy story numbers were only unique per idea, so among several
        legacy files with the same number the one under the record's own
        idea directory is chosen.

        Raises:
            StoreError: If `path` holds a different or unreadable record
        """
        matches: List[Tuple[Path, Record]] = []
        for existing_path, existing in self._iter_records(kind):
            existing_identity = record_identity(kind, existing)
            if existing_path == path and existing_identity != identity:
                raise StoreError(
                    f"Refusing to overwrite {path}: it holds {kind.value} "
                    f"{existing_identity or '(no identifier)'}"
                )
            if existing_identity == identity:
                matches.append((existing_path, existing))

        if path in self.unreadable:
            raise StoreError(f"Refusing to overwrite unreadable file {path}")
        if not matches:
            return None
        if any(existing_path == path for existing_path, _ in matches):
            return path

        if kind is EntityKind.STORY:
            idea_dir = normalize_id(as_int(record.get("idea_number")))
            for existing_path, _ in matches:
                if existing_path.parent.name == idea_dir:
                    return existing_path
        return matches[0][0]


# ----- Record normalization -----

def normalize_record(kind: EntityKind, record: Record) -> Record:
    """
    Coerce a parsed record's identifiers and relation lists to native types.

    Args:
        kind: Kind of the record
        record: Record as parsed from front matter

    Returns:
        New normalized record
    """
    normalized = dict(record)

    for id_field in ("idea_number", "story_number", "figure_number"):
        if id_field in normalized:
            number = as_int(normalized[id_field])
            if number is not None:
                normalized[id_field] = number
    if normalized.get("sprint_id") is not None:
        normalized["sprint_id"] = normalize_id(normalized["sprint_id"])

    if kind is EntityKind.STORY:
        if "related_ideas" not in normalized and normalized.get("idea_number") is not None:
            normalized["related_ideas"] = [normalized["idea_number"]]
        if "related_sprints" not in normalized and normalized.get("assigned_sprint"):
            normalized["related_sprints"] = [normalize_id(normalized["assigned_sprint"])]

    for field_name in relation_fields_of(kind):
        if isinstance(normalized.get(field_name), list):
            normalized[field_name] = normalize_relation_values(
                kind, field_name, normalized[field_name]
            )

    return normalized


def _prepare_for_write(kind: EntityKind, record: Record) -> Record:
    prepared = {key: value for key, value in record.items() if value is not None}
    if kind is EntityKind.NOTE:
        prepared.pop("filename", None)
    for field_name in relation_fields_of(kind):
        if field_name in prepared and not prepared[field_name]:
            del prepared[field_name]
    return prepared


def _sort_key(kind: EntityKind, record: Record) -> tuple:
    if kind is EntityKind.SPRINT:
        return (str(record.get("sprint_id") or ""),)
    if kind is EntityKind.NOTE:
        return (str(record.get("date") or ""), note_slug(record))
    if kind is EntityKind.UPDATE:
        return (
            str(record.get("sprint_id") or ""),
            as_int(record.get("idea_number")) or 0,
            as_int(record.get("story_number")) or 0,
        )
    return (as_int(record.get(kind.id_field)) or 0,)
