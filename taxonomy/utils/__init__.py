"""
Utilities package for the Ideas Taxonomy.

- md: Markdown front matter parsing and rendering
- slugify: Slug and filename generation

Import commonly-used utilities directly from this package:
    from taxonomy.utils import parse_markdown_record, slugify
"""

from .md import (
    split_frontmatter,
    parse_markdown_record,
    render_markdown_record,
)
from .slugify import (
    slugify,
    note_filename,
)

__all__ = [
    # Markdown/YAML
    "split_frontmatter",
    "parse_markdown_record",
    "render_markdown_record",
    # Slugs
    "slugify",
    "note_filename",
]
