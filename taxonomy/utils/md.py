#!/usr/bin/env python3
"""
md.py
-------------------
Markdown utilities for taxonomy records.

Every record is a Markdown file with a YAML front matter block:

    ---
    layout: idea
    idea_number: 5
    related_stories:
    - 23
    ---

    Body text...

This module splits, parses and renders that format. Type normalization of
individual fields is left to the store.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import date, datetime
from typing import Any, Dict, List, Tuple

# --- Third party imports ---
import yaml

# --- Local imports ---
from taxonomy.core.exceptions import FrontmatterError


# ----- YAML Frontmatter Parsing -----
def split_frontmatter(content: str) -> Tuple[str, List[str]]:
    """
    Split markdown content into YAML frontmatter and body.

    Args:
        content: Full markdown file content

    Returns:
        Tuple of (frontmatter_text, body_lines)
        - frontmatter_text: YAML content as string (empty if no frontmatter)
        - body_lines: List of body content lines

    Examples:
        >>> fm, body = split_frontmatter("---\\nidea_number: 5\\n---\\n\\nBody")
        >>> fm
        'idea_number: 5'
        >>> body
        ['Body']
    """
    lines = content.splitlines()

    if not lines or lines[0].strip() != "---":
        return "", lines

    frontmatter_end = None
    for i, line in enumerate(lines[1:], 1):
        if line.strip() == "---":
            frontmatter_end = i
            break

    if frontmatter_end is None:
        return "", lines

    frontmatter_lines = lines[1:frontmatter_end]
    body_lines = lines[frontmatter_end + 1 :]

    while body_lines and body_lines[0].strip() == "":
        body_lines.pop(0)

    return "\n".join(frontmatter_lines), body_lines


def parse_markdown_record(content: str, source: str = "<string>") -> Dict[str, Any]:
    """
    Parse a Markdown document into a record dictionary.

    Front matter keys become record fields; the trimmed body is stored under
    "body". Dates parsed by YAML are converted back to ISO strings so records
    compare and serialize consistently.

    Args:
        content: Full markdown file content
        source: Name used in error messages (usually the file path)

    Returns:
        Record dictionary

    Raises:
        FrontmatterError: If the YAML block is invalid or not a mapping
    """
    frontmatter_text, body_lines = split_frontmatter(content)

    try:
        data = yaml.safe_load(frontmatter_text) if frontmatter_text else {}
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML front matter in {source}: {e}") from e

    data = data or {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"Front matter in {source} must be a mapping, got {type(data).__name__}"
        )

    record = {key: _normalize_yaml_value(value) for key, value in data.items()}
    record["body"] = "\n".join(body_lines).strip()
    return record


def render_markdown_record(record: Dict[str, Any]) -> str:
    """
    Render a record dictionary as Markdown with YAML front matter.

    None values are dropped (YAML has no "undefined"); the "body" key is
    written after the front matter block.

    Args:
        record: Record dictionary

    Returns:
        Markdown document text
    """
    body = record.get("body") or ""
    frontmatter = {
        key: value
        for key, value in record.items()
        if key != "body" and value is not None
    }

    yaml_str = yaml.safe_dump(
        frontmatter,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    ).strip()

    document = f"---\n{yaml_str}\n---\n"
    if body:
        document += f"\n{body.strip()}\n"
    return document


def _normalize_yaml_value(value: Any) -> Any:
    """Convert YAML date/datetime scalars back to ISO strings."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, list):
        return [_normalize_yaml_value(item) for item in value]
    return value
