"""
Tests for MarkdownStore.

Covers file naming, read normalization (legacy fields and layouts), write
normalization, sorting, and error handling.
"""
import pytest
import yaml
from unittest.mock import MagicMock, patch

from taxonomy.core.exceptions import RecordNotFoundError, StoreError
from taxonomy.core.logging_manager import TaxonomyLogger
from taxonomy.models.kinds import EntityKind
from taxonomy.relations.identifiers import record_identity
from taxonomy.store.markdown import MarkdownStore, normalize_record
from taxonomy.utils.md import split_frontmatter


def read_frontmatter(path):
    frontmatter, _ = split_frontmatter(path.read_text(encoding="utf-8"))
    return yaml.safe_load(frontmatter)


class TestFileNaming:
    """Each kind is written to its own collection with its own file name."""

    def test_idea(self, markdown_store, content_dir, make):
        markdown_store.save(EntityKind.IDEA, make.idea(5))
        assert (content_dir / "_ideas" / "5.md").exists()

    def test_story(self, markdown_store, content_dir, make):
        markdown_store.save(EntityKind.STORY, make.story(23))
        assert (content_dir / "_stories" / "23.md").exists()

    def test_sprint(self, markdown_store, content_dir, make):
        markdown_store.save(EntityKind.SPRINT, make.sprint("2609"))
        assert (content_dir / "_sprints" / "2609.md").exists()

    def test_figure(self, markdown_store, content_dir, make):
        markdown_store.save(EntityKind.FIGURE, make.figure(3))
        assert (content_dir / "_figures" / "3.md").exists()

    def test_update(self, markdown_store, content_dir, make):
        markdown_store.save(EntityKind.UPDATE, make.update("2609", 5, 23))
        assert (content_dir / "_updates" / "2609-5-23.md").exists()

    def test_note_date_and_slug(self, markdown_store, content_dir, make):
        markdown_store.save(EntityKind.NOTE, make.note("design-notes"))
        assert (content_dir / "_notes" / "2026-02-01-design-notes.md").exists()

    def test_note_keeps_existing_filename(self, markdown_store, content_dir, make):
        note = make.note("design-notes", filename="legacy-name.md")
        markdown_store.save(EntityKind.NOTE, note)

        path = content_dir / "_notes" / "legacy-name.md"
        assert path.exists()
        assert "filename" not in read_frontmatter(path)

    def test_record_without_identifier(self, markdown_store):
        with pytest.raises(StoreError):
            markdown_store.save(EntityKind.IDEA, {"title": "No number"})

    def test_update_tiers_get_distinct_files(self, markdown_store, content_dir, make):
        updates = [
            make.update(None, 23, None),
            make.update(None, None, 23),
            make.update("2609", 5, None),
            make.update("2609", None, 5),
        ]
        for update in updates:
            markdown_store.save(EntityKind.UPDATE, update)

        names = sorted(path.name for path in (content_dir / "_updates").iterdir())
        assert names == ["2609-5-x.md", "2609-x-5.md", "x-23-x.md", "x-x-23.md"]
        stored = markdown_store.list_all(EntityKind.UPDATE)
        assert {record_identity(EntityKind.UPDATE, u) for u in stored} == {
            "i23",
            "s23",
            "i5",
            "s5",
        }

    def test_refuses_to_overwrite_other_record(self, markdown_store, content_dir, write_record, make):
        path = write_record("_updates/x-23-x.md", make.update(None, None, 23))

        with pytest.raises(StoreError, match="Refusing to overwrite"):
            markdown_store.save(EntityKind.UPDATE, make.update(None, 23, None))

        assert read_frontmatter(path)["story_number"] == 23

    def test_refuses_to_overwrite_unreadable_file(self, markdown_store, content_dir, make):
        path = content_dir / "_ideas" / "5.md"
        path.parent.mkdir(parents=True)
        path.write_text("---\ntitle: [unclosed\n---\nKeep me\n", encoding="utf-8")

        with pytest.raises(StoreError, match="unreadable"):
            markdown_store.save(EntityKind.IDEA, make.idea(5))

        assert "Keep me" in path.read_text(encoding="utf-8")

    def test_older_update_file_is_renamed(self, markdown_store, content_dir, write_record, make):
        write_record("_updates/2609-5.md", make.update("2609", 5, None))

        update = markdown_store.get(EntityKind.UPDATE, "i5")
        update["type"] = "blocker"
        markdown_store.save(EntityKind.UPDATE, update)

        assert not (content_dir / "_updates" / "2609-5.md").exists()
        assert read_frontmatter(content_dir / "_updates" / "2609-5-x.md")["type"] == "blocker"
        assert len(markdown_store.list_all(EntityKind.UPDATE)) == 1


class TestReadWrite:
    """Round trips through real files."""

    def test_body_preserved(self, markdown_store, make):
        markdown_store.save(EntityKind.IDEA, make.idea(5, body="# Heading\n\nText"))
        assert markdown_store.get(EntityKind.IDEA, 5)["body"] == "# Heading\n\nText"

    def test_empty_relation_lists_not_written(self, markdown_store, content_dir, make):
        markdown_store.save(
            EntityKind.IDEA, make.idea(5, related_stories=[], related_sprints=None)
        )
        frontmatter = read_frontmatter(content_dir / "_ideas" / "5.md")
        assert "related_stories" not in frontmatter
        assert "related_sprints" not in frontmatter

    def test_missing_collection_is_created(self, markdown_store, content_dir):
        assert markdown_store.list_all(EntityKind.FIGURE) == []
        assert (content_dir / "_figures").is_dir()

    def test_sorted_by_number(self, markdown_store, make):
        for number in (10, 2, 7):
            markdown_store.save(EntityKind.STORY, make.story(number))
        stories = markdown_store.list_all("stories")
        assert [story["story_number"] for story in stories] == [2, 7, 10]

    def test_notes_sorted_by_date_then_slug(self, markdown_store, make):
        markdown_store.save(EntityKind.NOTE, make.note("b", date="2026-02-01"))
        markdown_store.save(EntityKind.NOTE, make.note("a", date="2026-03-01"))
        markdown_store.save(EntityKind.NOTE, make.note("a", date="2026-02-01", title="Other"))
        notes = markdown_store.list_all(EntityKind.NOTE)
        assert [(n["date"], n["slug"]) for n in notes] == [
            ("2026-02-01", "a"),
            ("2026-02-01", "b"),
            ("2026-03-01", "a"),
        ]

    def test_delete(self, markdown_store, content_dir, make):
        markdown_store.save(EntityKind.SPRINT, make.sprint("2609"))
        markdown_store.delete(EntityKind.SPRINT, 2609)
        assert not (content_dir / "_sprints" / "2609.md").exists()

    def test_delete_missing(self, markdown_store):
        with pytest.raises(RecordNotFoundError):
            markdown_store.delete(EntityKind.IDEA, 5)

    def test_write_failure_becomes_store_error(self, markdown_store, make):
        with patch("pathlib.Path.write_text", side_effect=OSError("read-only")):
            with pytest.raises(StoreError, match="read-only"):
                markdown_store.save(EntityKind.IDEA, make.idea(5))


class TestReadNormalization:
    """Records are normalized when read from disk."""

    def test_unquoted_sprint_id_becomes_string(self, markdown_store, write_record):
        write_record("_sprints/2609.md", {"sprint_id": 2609, "related_ideas": ["5"]})
        sprint = markdown_store.get(EntityKind.SPRINT, "2609")
        assert sprint["sprint_id"] == "2609"
        assert sprint["related_ideas"] == [5]

    def test_string_relations_are_strings(self, markdown_store, write_record):
        write_record("_ideas/5.md", {"idea_number": 5, "related_sprints": [2609, 2610]})
        assert markdown_store.get(EntityKind.IDEA, 5)["related_sprints"] == ["2609", "2610"]

    def test_legacy_story_fields(self, markdown_store, write_record):
        write_record(
            "_stories/23.md",
            {"idea_number": 5, "story_number": 23, "assigned_sprint": 2609},
        )
        story = markdown_store.get(EntityKind.STORY, 23)
        assert story["related_ideas"] == [5]
        assert story["related_sprints"] == ["2609"]

    def test_legacy_fields_do_not_override_relations(self, markdown_store, write_record):
        write_record(
            "_stories/23.md",
            {"idea_number": 5, "story_number": 23, "related_ideas": [7]},
        )
        assert markdown_store.get(EntityKind.STORY, 23)["related_ideas"] == [7]

    def test_legacy_story_subdirectory(self, markdown_store, content_dir, write_record):
        write_record("_stories/5/23.md", {"idea_number": 5, "story_number": 23, "title": "Old"})

        story = markdown_store.get(EntityKind.STORY, 23)
        assert story["title"] == "Old"

        story["title"] = "Moved"
        markdown_store.save(EntityKind.STORY, story)

        assert (content_dir / "_stories" / "23.md").exists()
        assert not (content_dir / "_stories" / "5" / "23.md").exists()
        assert markdown_store.get(EntityKind.STORY, 23)["title"] == "Moved"

    def test_only_own_legacy_story_file_is_removed(self, markdown_store, content_dir, write_record):
        write_record("_stories/5/23.md", {"idea_number": 5, "story_number": 23, "title": "Five"})
        write_record("_stories/7/23.md", {"idea_number": 7, "story_number": 23, "title": "Seven"})

        story = {"idea_number": 7, "story_number": 23, "title": "Seven, moved"}
        markdown_store.save(EntityKind.STORY, story)

        assert not (content_dir / "_stories" / "7" / "23.md").exists()
        assert read_frontmatter(content_dir / "_stories" / "5" / "23.md")["title"] == "Five"
        assert read_frontmatter(content_dir / "_stories" / "23.md")["title"] == "Seven, moved"

    def test_unrelated_legacy_story_kept(self, markdown_store, content_dir, write_record, make):
        write_record("_stories/5/24.md", {"idea_number": 5, "story_number": 24})

        markdown_store.save(EntityKind.STORY, make.story(23))

        assert (content_dir / "_stories" / "5" / "24.md").exists()

    def test_note_filename_attached(self, markdown_store, write_record):
        write_record("_notes/2026-02-01-reading.md", {"title": "Reading"})
        note = markdown_store.list_all(EntityKind.NOTE)[0]
        assert note["filename"] == "2026-02-01-reading.md"
        assert markdown_store.get(EntityKind.NOTE, "2026-02-01-reading")["title"] == "Reading"

    def test_yaml_dates_become_iso_strings(self, markdown_store, content_dir):
        path = content_dir / "_ideas" / "5.md"
        path.parent.mkdir(parents=True)
        path.write_text("---\nidea_number: 5\ncreated: 2026-01-05\n---\n", encoding="utf-8")
        assert markdown_store.get(EntityKind.IDEA, 5)["created"] == "2026-01-05"

    def test_normalize_record_drops_unusable_ids(self):
        record = normalize_record(
            EntityKind.IDEA, {"idea_number": "5", "related_stories": ["23", "x", 23]}
        )
        assert record["idea_number"] == 5
        assert record["related_stories"] == [23]


class TestUnreadableFiles:
    def test_bad_yaml_is_skipped_and_logged(self, content_dir, write_record):
        logger = MagicMock(spec=TaxonomyLogger)
        store = MarkdownStore(content_dir, logger)
        write_record("_ideas/5.md", {"idea_number": 5})
        bad = content_dir / "_ideas" / "6.md"
        bad.write_text("---\nidea_number: [unclosed\n---\n", encoding="utf-8")

        ideas = store.list_all(EntityKind.IDEA)

        assert [idea["idea_number"] for idea in ideas] == [5]
        assert store.unreadable == [bad]
        logger.log_warning.assert_called_once()
