"""
Tests for record field validation and numbering helpers.
"""
import pytest

from taxonomy.validators.records import (
    is_valid_notation,
    is_valid_sprint_id,
    next_figure_number,
    next_idea_number,
    next_story_number,
    validate_figure,
    validate_idea,
    validate_note,
    validate_sprint,
    validate_story,
    validate_update,
)


class TestFormats:
    @pytest.mark.parametrize("sprint_id", ["2609", 2609, "0001"])
    def test_valid_sprint_ids(self, sprint_id):
        assert is_valid_sprint_id(sprint_id)

    @pytest.mark.parametrize("sprint_id", ["269", "26090", "26a9", "", None])
    def test_invalid_sprint_ids(self, sprint_id):
        assert not is_valid_sprint_id(sprint_id)

    @pytest.mark.parametrize("notation", ["2609.5.23", "5.23", "i5", "s23"])
    def test_valid_notations(self, notation):
        assert is_valid_notation(notation)

    @pytest.mark.parametrize("notation", ["", "i", "x5", "26.5.23.1", "5."])
    def test_invalid_notations(self, notation):
        assert not is_valid_notation(notation)


class TestNumbering:
    def test_first_numbers_are_zero(self):
        assert next_idea_number([]) == 0
        assert next_story_number([]) == 0
        assert next_figure_number([]) == 0

    def test_max_plus_one(self, make):
        assert next_idea_number([make.idea(3), make.idea(9), make.idea(4)]) == 10
        assert next_figure_number([make.figure(1), {"figure_number": "bad"}]) == 2

    def test_story_numbers_are_global(self, make):
        stories = [make.story(4, related_ideas=[1]), make.story(11, related_ideas=[2])]
        assert next_story_number(stories) == 12


class TestValidateIdea:
    def test_valid(self, make):
        assert validate_idea(make.idea(5), [make.idea(7)]) == []

    def test_missing_fields(self):
        errors = validate_idea({}, [])
        assert "idea_number is required" in errors
        assert "title is required" in errors
        assert "description is required" in errors
        assert "status is required" in errors
        assert "created is required" in errors

    def test_bad_values(self, make):
        errors = validate_idea(make.idea(-1, status="paused", created="05/01/2026"), [])
        assert "idea_number must be a non-negative integer" in errors
        assert any(e.startswith("status must be one of") for e in errors)
        assert "created must be in YYYY-MM-DD format" in errors

    def test_duplicate_number(self, make):
        assert validate_idea(make.idea(5), [make.idea(5)]) == ["Idea number 5 already exists"]

    def test_editing_excludes_itself(self, make):
        assert validate_idea(make.idea(5), [make.idea(5)], exclude_idea_number=5) == []


class TestValidateStory:
    def test_valid(self, make):
        story = make.story(23, related_ideas=[5], related_sprints=["2609"])
        assert validate_story(story, [], [make.idea(5)]) == []

    def test_global_uniqueness(self, make):
        existing = [make.story(23, related_ideas=[7])]
        errors = validate_story(make.story(23, related_ideas=[5]), existing)
        assert errors == ["Story number 23 already exists"]

    def test_unknown_related_idea(self, make):
        errors = validate_story(make.story(23, related_ideas=[9]), [], [make.idea(5)])
        assert errors == ["Related idea 9 does not exist"]

    def test_related_ideas_not_checked_without_ideas(self, make):
        assert validate_story(make.story(23, related_ideas=[9]), []) == []

    def test_bad_vocabulary_and_sprint(self, make):
        story = make.story(23, status="doing", priority="urgent", related_sprints=["26-09"])
        errors = validate_story(story, [])
        assert len(errors) == 3


class TestValidateSprint:
    def test_valid(self, make):
        assert validate_sprint(make.sprint("2609"), []) == []

    def test_ranges(self, make):
        errors = validate_sprint(make.sprint("2609", year=1999, sprint_number=27), [])
        assert "year must be a valid 4-digit year" in errors
        assert "sprint_number must be between 1 and 26" in errors

    def test_end_after_start(self, make):
        sprint = make.sprint("2609", start_date="2026-05-03", end_date="2026-05-03")
        assert validate_sprint(sprint, []) == ["end_date must be after start_date"]

    def test_duplicate(self, make):
        errors = validate_sprint(make.sprint("2609"), [make.sprint("2609")])
        assert errors == ["Sprint 2609 already exists"]
        assert validate_sprint(make.sprint("2609"), [make.sprint("2609")], "2609") == []


class TestValidateUpdate:
    def test_valid(self, make):
        assert validate_update(make.update(), []) == []

    def test_partial_notation_is_valid(self, make):
        assert validate_update(make.update(None, 5, None), []) == []

    def test_needs_idea_or_story(self, make):
        errors = validate_update(make.update("2609", None, None), [])
        assert "update needs an idea_number or a story_number" in errors

    def test_duplicate_notation(self, make):
        errors = validate_update(make.update(), [make.update()])
        assert errors == ["Update 2609.5.23 already exists"]

    def test_bad_type_and_sprint(self, make):
        errors = validate_update(make.update("26", 5, 23, type="memo"), [])
        assert "sprint_id must be in YYSS format (e.g., 2609)" in errors
        assert any(e.startswith("type must be one of") for e in errors)


class TestValidateFigureAndNote:
    def test_figure(self, make):
        assert validate_figure(make.figure(3), []) == []
        assert validate_figure(make.figure(3), [make.figure(3)]) == [
            "Figure number 3 already exists"
        ]
        assert "title is required" in validate_figure({"figure_number": 4}, [])

    def test_figure_status(self, make):
        errors = validate_figure(make.figure(3, status="deleted"), [])
        assert errors == ["status must be one of: active, archived"]

    def test_note(self, make):
        assert validate_note(make.note("a"), [make.note("b")]) == []
        assert validate_note(make.note("a"), [make.note("a")]) == ["Note a already exists"]
        assert validate_note(make.note("a"), [make.note("a")], exclude_slug="a") == []
        assert "title is required" in validate_note({"slug": "x"}, [])
