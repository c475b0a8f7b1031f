"""
Enumeration Types
------------------

Status vocabularies for taxonomy records.

Enums:
    - IdeaStatus: planned, active, completed, archived
    - StoryStatus: backlog, planned, in-progress, done
    - StoryPriority: low, medium, high, critical
    - SprintStatus: planned, active, completed
    - UpdateType: progress, completion, blocker, note
    - FigureStatus: active, archived
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum
from typing import List


class IdeaStatus(str, Enum):
    """Lifecycle status of an idea."""

    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"

    @classmethod
    def choices(cls) -> List[str]:
        return [status.value for status in cls]


class StoryStatus(str, Enum):
    """Workflow status of a story."""

    BACKLOG = "backlog"
    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    DONE = "done"

    @classmethod
    def choices(cls) -> List[str]:
        return [status.value for status in cls]


class StoryPriority(str, Enum):
    """Priority of a story."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def choices(cls) -> List[str]:
        return [priority.value for priority in cls]


class SprintStatus(str, Enum):
    """Status of a sprint."""

    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def choices(cls) -> List[str]:
        return [status.value for status in cls]


class UpdateType(str, Enum):
    """
    Kind of progress update.
    - PROGRESS: Work moved forward
    - COMPLETION: Story finished
    - BLOCKER: Work is blocked
    - NOTE: Anything else worth recording
    """

    PROGRESS = "progress"
    COMPLETION = "completion"
    BLOCKER = "blocker"
    NOTE = "note"

    @classmethod
    def choices(cls) -> List[str]:
        return [update_type.value for update_type in cls]


class FigureStatus(str, Enum):
    """Whether a figure is still in use."""

    ACTIVE = "active"
    ARCHIVED = "archived"

    @classmethod
    def choices(cls) -> List[str]:
        return [status.value for status in cls]
