"""
conftest.py
-----------
Shared pytest fixtures for taxonomy tests.

Provides fixtures for:
- Valid sample records of every kind
- In-memory stores seeded with those records
- Temporary content directories with Markdown collections
"""
import pytest
from pathlib import Path
from types import SimpleNamespace

from taxonomy.models.kinds import EntityKind
from taxonomy.store.markdown import MarkdownStore
from taxonomy.store.memory import MemoryStore
from taxonomy.utils.md import render_markdown_record


# ----- Record Factories -----

def make_idea(number=5, **fields):
    record = {
        "layout": "idea",
        "idea_number": number,
        "title": f"Idea {number}",
        "description": "An idea worth pursuing",
        "status": "active",
        "created": "2026-01-05",
    }
    record.update(fields)
    return record


def make_story(number=23, **fields):
    record = {
        "layout": "story",
        "story_number": number,
        "title": f"Story {number}",
        "description": "A unit of work",
        "status": "planned",
        "priority": "medium",
        "created": "2026-01-06",
    }
    record.update(fields)
    return record


def make_sprint(sprint_id="2609", **fields):
    record = {
        "layout": "sprint",
        "sprint_id": sprint_id,
        "year": 2026,
        "sprint_number": int(sprint_id[2:]),
        "start_date": "2026-04-20",
        "end_date": "2026-05-03",
        "status": "planned",
    }
    record.update(fields)
    return record


def make_note(slug="design-notes", **fields):
    record = {
        "layout": "note",
        "title": "Design Notes",
        "slug": slug,
        "date": "2026-02-01",
    }
    record.update(fields)
    return record


def make_figure(number=3, **fields):
    record = {
        "layout": "figure",
        "figure_number": number,
        "title": f"Figure {number}",
        "status": "active",
        "image_path": f"/assets/figures/fig_{number}.png",
        "created": "2026-02-02",
    }
    record.update(fields)
    return record


def make_update(sprint_id="2609", idea_number=5, story_number=23, **fields):
    record = {
        "layout": "update",
        "sprint_id": sprint_id,
        "idea_number": idea_number,
        "story_number": story_number,
        "date": "2026-04-22",
        "type": "progress",
    }
    record.update(fields)
    return record


# ----- Store Fixtures -----

@pytest.fixture
def sample_records():
    """One unlinked record of every kind."""
    return {
        EntityKind.IDEA: [make_idea(5), make_idea(7)],
        EntityKind.STORY: [make_story(23), make_story(24)],
        EntityKind.SPRINT: [make_sprint("2609")],
        EntityKind.NOTE: [make_note("design-notes")],
        EntityKind.FIGURE: [make_figure(3)],
        EntityKind.UPDATE: [make_update()],
    }


@pytest.fixture
def memory_store(sample_records):
    """MemoryStore seeded with sample_records."""
    return MemoryStore(sample_records)


@pytest.fixture
def content_dir(tmp_path):
    """Empty content root."""
    root = tmp_path / "site"
    root.mkdir()
    return root


@pytest.fixture
def write_record(content_dir):
    """Write a record file directly, bypassing the store."""

    def _write(relative_path, record):
        path = Path(content_dir) / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_markdown_record(record), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def markdown_store(content_dir):
    """MarkdownStore over the empty content root."""
    return MarkdownStore(content_dir)


@pytest.fixture
def populated_content_dir(content_dir, sample_records):
    """Content root holding every sample record as Markdown."""
    store = MarkdownStore(content_dir)
    for kind, records in sample_records.items():
        for record in records:
            store.save(kind, record)
    return content_dir


@pytest.fixture
def make():
    """Record factories: make.idea(5), make.story(23, related_ideas=[5]), ..."""
    return SimpleNamespace(
        idea=make_idea,
        story=make_story,
        sprint=make_sprint,
        note=make_note,
        figure=make_figure,
        update=make_update,
    )
