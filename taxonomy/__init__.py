"""
Ideas Taxonomy
==============

Relationship tooling for a Markdown-based ideas taxonomy.

The taxonomy is a Jekyll-style content tree of six record kinds (ideas,
stories, sprints, notes, figures, updates), each a Markdown file with YAML
front matter. Records link to each other through related_<kind> list
fields, and every link is kept mirrored on both sides.

Main Components:
    - relations: Relation table, sync engine and related-item projection
    - store: Entity stores (Markdown files, in-memory)
    - validators: Record field checks and whole-store consistency audit
    - editor: Save/delete orchestration (validate, persist, sync)
    - core: Logging, exceptions, paths and CLI helpers
    - cli: The `taxonomy` command

Example Usage:
    >>> from pathlib import Path
    >>> from taxonomy.editor import RecordEditor
    >>> from taxonomy.store import MarkdownStore
    >>> editor = RecordEditor(MarkdownStore(Path("site")))
    >>> editor.set_relations("story", 23, "related_ideas", [5])
"""

__version__ = "0.1.0"
