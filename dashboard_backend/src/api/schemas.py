from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .models import Priority, TaskStatus

NoteColor = Literal["neutral", "red", "blue", "green", "yellow", "purple"]
ThemeId = Literal["night_shift", "cyberpunk", "dracula", "amber", "paper", "lofi"]
CaffeinePreset = Literal["espresso", "energy_drink", "black_tea", "soda"]

CAFFEINE_PRESETS = {"espresso": 80, "energy_drink": 150, "black_tea": 40, "soda": 35}


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    """Strip tags, dropping blanks and duplicates while keeping order."""
    if tags is None:
        return None
    cleaned: List[str] = []
    for tag in tags:
        t = tag.strip()
        if t and t not in cleaned:
            cleaned.append(t)
    return cleaned


# ---------------------------------------------------------------- tasks


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a task. A blank title becomes 'Untitled'.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"title": "Fix flaky deploy", "priority": "HIGH", "tags": ["infra"]}
        }
    )

    title: str = Field(default="", max_length=200, description="Short title of the task")
    description: str = Field(default="", description="Free-text description")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="Board column")
    priority: Priority = Field(default=Priority.MEDIUM, description="Priority level")
    tags: List[str] = Field(default_factory=list, description="Free-form labels")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return v.strip() or "Untitled"

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        return _clean_tags(v) or []


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Schema for editing a task. Only provided fields are changed.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    tags: Optional[List[str]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        s = v.strip()
        if not s:
            raise ValueError("title must not be blank")
        return s

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(v)


class TaskMove(BaseModel):
    """Target column of a drag-and-drop."""

    status: TaskStatus


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    A task as returned by the API. Fields are passed through as stored;
    imported tasks may lack any key or carry unrecognized values.
    """

    model_config = ConfigDict(extra="allow")

    id: Any = None
    title: Any = ""
    description: Any = ""
    status: Any = Field(default=None, description="TaskStatus value, or the unrecognized value as imported")
    priority: Any = Field(default=None, description="Priority value, or the unrecognized value as imported")
    createdAt: Any = None
    tags: Any = Field(default_factory=list)


# ---------------------------------------------------------------- notes


class NoteCreate(BaseModel):
    content: str = ""
    color: NoteColor = "neutral"
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        return _clean_tags(v) or []


class NoteUpdate(BaseModel):
    content: Optional[str] = None
    color: Optional[NoteColor] = None
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(v)


class NoteReorder(BaseModel):
    """Drag a note from one list position to another."""

    from_index: int = Field(..., ge=0)
    to_index: int = Field(..., ge=0)


class TagIn(BaseModel):
    tag: str = Field(..., min_length=1, max_length=50)

    @field_validator("tag")
    @classmethod
    def validate_tag(cls, v: str) -> str:
        s = v.strip()
        if not s:
            raise ValueError("tag must not be blank")
        return s


class NoteOut(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Any = None
    content: Any = ""
    tags: Any = Field(default_factory=list)
    color: Any = "neutral"
    createdAt: Any = None


# ---------------------------------------------------------------- snippets


class SnippetCreate(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {"title": "Debounce", "code": "const debounce = ...", "language": "typescript"}
        }
    )

    title: str = Field(default="", max_length=200)
    code: str = ""
    language: str = "typescript"
    tags: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return v.strip() or "Untitled Snippet"

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        return v.strip().lower() or "typescript"

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        return _clean_tags(v) or []


class SnippetUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    code: Optional[str] = None
    language: Optional[str] = Field(default=None, min_length=1)
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(v)


class SnippetOut(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Any = None
    title: Any = ""
    code: Any = ""
    language: Any = ""
    tags: Any = Field(default_factory=list)
    createdAt: Any = None


# ---------------------------------------------------------------- logs


class SessionCreate(BaseModel):
    duration_minutes: float = Field(..., gt=0, le=24 * 60, description="Length of the completed session")


class CaffeineCreate(BaseModel):
    """Either an amount in mg or one of the drink presets."""

    amount: Optional[float] = Field(default=None, gt=0, le=2000, description="Caffeine in mg")
    preset: Optional[CaffeinePreset] = None

    @model_validator(mode="after")
    def require_amount_or_preset(self) -> "CaffeineCreate":
        if self.amount is None and self.preset is None:
            raise ValueError("amount or preset is required")
        return self

    def resolved_amount(self) -> float:
        if self.amount is not None:
            return self.amount
        return float(CAFFEINE_PRESETS[self.preset])


# ---------------------------------------------------------------- settings


class ThemeUpdate(BaseModel):
    theme: ThemeId


class BackgroundUpdate(BaseModel):
    url: Optional[str] = None
    type: Optional[Literal["image", "video"]] = None
    opacity: Optional[float] = Field(default=None, ge=0, le=1)
    blur: Optional[float] = Field(default=None, ge=0, le=20)
    showRadialGradient: Optional[bool] = None


class ToolsUpdate(BaseModel):
    showCaffeineCounter: Optional[bool] = None


# ---------------------------------------------------------------- timer


class TimerModeIn(BaseModel):
    mode: Literal["focus", "shortBreak", "longBreak"]


class TimerTick(BaseModel):
    seconds: int = Field(default=1, ge=1, le=3600)


class TimerOut(BaseModel):
    mode: str
    label: str
    running: bool
    remainingSeconds: int
    display: str
    completedSession: Optional[dict] = None


# ---------------------------------------------------------------- backup


class ImportOut(BaseModel):
    imported: List[str] = Field(..., description="Top-level keys merged into the document")
    warnings: List[str] = Field(default_factory=list, description="Dropped keys and unrecognized values")
