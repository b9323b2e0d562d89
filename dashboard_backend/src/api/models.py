from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, TypedDict


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    CODE_REVIEW = "CODE_REVIEW"
    DONE = "DONE"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


# Board column order; also the order of the status distribution.
STATUS_ORDER = (TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.CODE_REVIEW, TaskStatus.DONE)

# Cycle order of the priority toggle.
PRIORITY_CYCLE = (Priority.LOW, Priority.MEDIUM, Priority.HIGH, Priority.CRITICAL)

NOTE_COLORS = ("neutral", "red", "blue", "green", "yellow", "purple")

THEMES = ("night_shift", "cyberpunk", "dracula", "amber", "paper", "lofi")

BACKGROUND_TYPES = ("image", "video")


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A task card on the board.

    Fields:
    - id: uuid4 string, never reused
    - title: short title
    - description: free text
    - status: one of TaskStatus values (imported data may carry unrecognized values)
    - priority: one of Priority values (same caveat)
    - createdAt: creation time in epoch milliseconds
    - tags: free-form labels
    """

    id: str
    title: str
    description: str
    status: str
    priority: str
    createdAt: int
    tags: List[str]


# PUBLIC_INTERFACE
class NoteEntity(TypedDict):
    """A sticky note. List position is its display order."""

    id: str
    content: str
    tags: List[str]
    color: str
    createdAt: int


# PUBLIC_INTERFACE
class SnippetEntity(TypedDict):
    """A saved code snippet."""

    id: str
    title: str
    code: str
    language: str
    tags: List[str]
    createdAt: int


# PUBLIC_INTERFACE
class SessionEntity(TypedDict):
    """A completed focus session; timestamp is the completion time."""

    id: str
    timestamp: int
    durationMinutes: float


# PUBLIC_INTERFACE
class CaffeineEntity(TypedDict):
    """A logged caffeine intake; amount in mg."""

    id: str
    amount: float
    timestamp: int


class BackgroundConfig(TypedDict):
    url: str
    type: str
    opacity: float
    blur: float
    showRadialGradient: bool


class ToolsConfig(TypedDict):
    showCaffeineCounter: bool


# The persisted root document. Kept as a plain dict at runtime so unknown
# top-level keys survive a load/save round trip.
AppDocument = Dict[str, Any]
