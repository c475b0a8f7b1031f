"""
Entity stores.

- base: EntityStore protocol and lookup helper
- memory: Dictionary-backed store for tests and dry runs
- markdown: Markdown + YAML front matter files under the content root
"""

from .base import EntityStore, find_record
from .markdown import MarkdownStore
from .memory import MemoryStore

__all__ = [
    "EntityStore",
    "find_record",
    "MarkdownStore",
    "MemoryStore",
]
