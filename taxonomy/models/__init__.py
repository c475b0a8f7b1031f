"""
Entity kinds and status vocabularies for taxonomy records.
"""

from .kinds import (
    EntityKind,
    Record,
    RELATION_FIELDS,
    RELATION_ORDER,
    relation_fields_of,
)
from .enums import (
    FigureStatus,
    IdeaStatus,
    SprintStatus,
    StoryPriority,
    StoryStatus,
    UpdateType,
)

__all__ = [
    "EntityKind",
    "Record",
    "RELATION_FIELDS",
    "RELATION_ORDER",
    "relation_fields_of",
    "FigureStatus",
    "IdeaStatus",
    "SprintStatus",
    "StoryPriority",
    "StoryStatus",
    "UpdateType",
]
