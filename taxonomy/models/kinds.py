"""
Entity Kinds
------------

The six kinds of taxonomy record and the naming conventions tying them
together.

Each kind has:
    - a natural identifier field (idea_number, story_number, ...)
    - a plural name used in relation field names (related_ideas, ...)
    - a layout value written to front matter

Records themselves are plain dictionaries of front matter fields plus an
optional "body" string, exactly as read from the Markdown files.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum
from typing import Any, Dict, List

# --- Local imports ---
from taxonomy.core.exceptions import UnknownEntityKindError

Record = Dict[str, Any]


class EntityKind(str, Enum):
    """
    Enumeration of taxonomy entity kinds.
    - IDEA: Top-level idea, identified by idea_number
    - STORY: Unit of work, identified by a globally unique story_number
    - SPRINT: Two-week sprint, identified by a YYSS sprint_id
    - NOTE: Free-form note, identified by slug
    - FIGURE: Diagram or image, identified by figure_number
    - UPDATE: Progress update, identified by its notation
    """

    IDEA = "idea"
    STORY = "story"
    SPRINT = "sprint"
    NOTE = "note"
    FIGURE = "figure"
    UPDATE = "update"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available kind names."""
        return [kind.value for kind in cls]

    @classmethod
    def parse(cls, value: "EntityKind | str") -> "EntityKind":
        """
        Resolve a kind from its name, plural name or enum member.

        Args:
            value: 'idea', 'ideas', 'IDEA' or EntityKind.IDEA

        Returns:
            Matching EntityKind

        Raises:
            UnknownEntityKindError: If nothing matches
        """
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        for kind in cls:
            if name in (kind.value, kind.plural):
                return kind
        raise UnknownEntityKindError(
            f"Unknown entity kind: '{value}'. Expected one of {', '.join(cls.choices())}"
        )

    @property
    def plural(self) -> str:
        """Plural name used in relation fields and collection names."""
        return _PLURALS[self]

    @property
    def id_field(self) -> str:
        """Front matter field holding the natural identifier."""
        return _ID_FIELDS[self]

    @property
    def relation_field(self) -> str:
        """Name of the field other records use to point at this kind."""
        return f"related_{self.plural}"

    @property
    def is_numeric(self) -> bool:
        """True for kinds whose identifier is an integer."""
        return self in (EntityKind.IDEA, EntityKind.STORY, EntityKind.FIGURE)


_PLURALS = {
    EntityKind.IDEA: "ideas",
    EntityKind.STORY: "stories",
    EntityKind.SPRINT: "sprints",
    EntityKind.NOTE: "notes",
    EntityKind.FIGURE: "figures",
    EntityKind.UPDATE: "updates",
}

_ID_FIELDS = {
    EntityKind.IDEA: "idea_number",
    EntityKind.STORY: "story_number",
    EntityKind.SPRINT: "sprint_id",
    EntityKind.NOTE: "slug",
    EntityKind.FIGURE: "figure_number",
    EntityKind.UPDATE: "notation",
}

RELATION_ORDER: List[EntityKind] = [
    EntityKind.IDEA,
    EntityKind.STORY,
    EntityKind.SPRINT,
    EntityKind.NOTE,
    EntityKind.FIGURE,
    EntityKind.UPDATE,
]

RELATION_FIELDS: List[str] = [kind.relation_field for kind in RELATION_ORDER]


def relation_fields_of(kind: EntityKind) -> List[str]:
    """Relation fields a record of `kind` may carry (one per other kind)."""
    return [other.relation_field for other in RELATION_ORDER if other is not kind]
