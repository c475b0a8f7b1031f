#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants and configuration for the Ideas Taxonomy project.

The taxonomy lives in a Jekyll-style content directory where every entity
kind has its own underscore-prefixed collection folder:

    CONTENT_DIR/
    ├── _ideas/        # {idea_number}.md
    ├── _stories/      # {story_number}.md
    ├── _sprints/      # {sprint_id}.md
    ├── _notes/        # {date}-{slug}.md
    ├── _figures/      # {figure_number}.md
    ├── _updates/      # {sprint}-{idea}-{story}.md
    └── logs/          # Application logs

CONTENT_DIR is taken from the TAXONOMY_CONTENT_DIR environment variable when
set, otherwise from the current working directory. Every CLI command also
accepts --content-dir to override it.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path
from typing import Dict

CONTENT_DIR_ENV = "TAXONOMY_CONTENT_DIR"


def _get_content_dir() -> Path:
    """
    Determine the content root directory.

    Returns:
        Path from TAXONOMY_CONTENT_DIR, or the current working directory
    """
    configured = os.environ.get(CONTENT_DIR_ENV)
    if configured:
        return Path(configured).expanduser().resolve()
    return Path.cwd()


# ----- Content directory -----
CONTENT_DIR: Path = _get_content_dir()

# ----- Collections -----
COLLECTION_DIRS: Dict[str, str] = {
    "idea": "_ideas",
    "story": "_stories",
    "sprint": "_sprints",
    "note": "_notes",
    "figure": "_figures",
    "update": "_updates",
}

IDEAS_DIR = CONTENT_DIR / COLLECTION_DIRS["idea"]
STORIES_DIR = CONTENT_DIR / COLLECTION_DIRS["story"]
SPRINTS_DIR = CONTENT_DIR / COLLECTION_DIRS["sprint"]
NOTES_DIR = CONTENT_DIR / COLLECTION_DIRS["note"]
FIGURES_DIR = CONTENT_DIR / COLLECTION_DIRS["figure"]
UPDATES_DIR = CONTENT_DIR / COLLECTION_DIRS["update"]

# ---- Logs ----
LOG_DIR = CONTENT_DIR / "logs"


def collection_dir(content_dir: Path, kind: str) -> Path:
    """
    Resolve the collection directory for an entity kind.

    Args:
        content_dir: Content root
        kind: Entity kind value ('idea', 'story', ...)

    Returns:
        Path to the kind's collection directory

    Raises:
        KeyError: If kind is not a known entity kind
    """
    return Path(content_dir) / COLLECTION_DIRS[kind]
