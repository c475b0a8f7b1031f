#!/usr/bin/env python3
"""
slugify.py
----------
String slugification utilities for note slugs and filenames.

Key Features:
    - Lowercase transformation
    - Accent/diacritic normalization (Café → cafe)
    - Special character handling (apostrophes, parentheses, etc.)
    - Space to hyphen conversion
    - Maximum length enforcement

Usage:
    from taxonomy.utils.slugify import slugify, note_filename

    slug = slugify("Reading List: Café Notes")   # "reading-list-cafe-notes"
    filename = note_filename("2025-01-15", slug)  # "2025-01-15-reading-list-cafe-notes.md"
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
import unicodedata


def slugify(text: str, max_length: int = 200) -> str:
    """
    Convert text to a filesystem-safe slug.

    Args:
        text: Input text to slugify
        max_length: Maximum slug length (default 200)

    Returns:
        Slugified string, empty if nothing usable remains

    Examples:
        >>> slugify("Café Notes")
        'cafe-notes'
        >>> slugify("Tom's idea (draft)")
        'toms-idea-draft'
        >>> slugify("R&D / planning")
        'randd-planning'
    """
    if not text:
        return ""

    # Decompose accents and keep ASCII only
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")

    text = text.lower()
    text = text.replace("'", "")
    text = re.sub(r"[(){}\[\]]", " ", text)
    text = text.replace("&", "and")
    text = text.replace("/", "-")
    text = re.sub(r"[\s_]+", "-", text)
    text = re.sub(r"[^a-z0-9-]", "", text)
    text = re.sub(r"-+", "-", text)
    text = text.strip("-")

    if len(text) > max_length:
        text = text[:max_length].rstrip("-")

    return text


def note_filename(date_value: str, slug: str) -> str:
    """
    Build the Jekyll-style filename for a note.

    Args:
        date_value: Note date in YYYY-MM-DD format (may be empty)
        slug: Note slug

    Returns:
        "{date}-{slug}.md", or "{slug}.md" when there is no date

    Examples:
        >>> note_filename("2025-01-15", "reading-list")
        '2025-01-15-reading-list.md'
        >>> note_filename("", "reading-list")
        'reading-list.md'
    """
    if date_value:
        return f"{date_value}-{slug}.md"
    return f"{slug}.md"
