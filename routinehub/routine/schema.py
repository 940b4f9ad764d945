"""Pydantic schemas for routine data validation."""

from datetime import datetime
from datetime import time as _time_type
from typing import Literal

from pydantic import BaseModel, Field, StrictInt, field_validator, model_validator

from routinehub.routine.utils import WEEKDAYS, normalize_iso_date, parse_time_of_day

Priority = Literal["low", "medium", "high"]


# ============================================================================
# Task Schemas
# ============================================================================


class TaskDraft(BaseModel):
    """Definition of a recurring task, as submitted for creation.

    Defaults mirror the "new routine" form: 08:00, 30 minutes, medium
    priority, repeating Monday to Friday.
    """

    title: str
    description: str = ""
    time: str = "08:00"  # HH:MM
    duration_minutes: int = Field(30, ge=1)
    priority: Priority = "medium"
    days_of_week: list[StrictInt] = Field(default_factory=lambda: list(WEEKDAYS))  # no bool or "1"

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        return v.strip()

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        # Normalise "8:05" to "08:05" so stored values sort and compare uniformly.
        return parse_time_of_day(v).strftime("%H:%M")

    @field_validator("days_of_week")
    @classmethod
    def validate_days_of_week(cls, v: list[int]) -> list[int]:
        if not v:
            raise ValueError("days_of_week must not be empty")
        for d in v:
            if not (0 <= d <= 6):
                raise ValueError(f"Invalid day {d}: must be 0 (Sun) - 6 (Sat)")
        return sorted(set(v))

    @property
    def time_of_day(self) -> _time_type:
        return parse_time_of_day(self.time)


class RoutineTask(TaskDraft):
    """Stored recurring task."""

    id: str
    created_at: str  # ISO datetime

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("id must not be empty")
        return v

    @field_validator("created_at")
    @classmethod
    def validate_created_at(cls, v: str) -> str:
        try:
            datetime.fromisoformat(v)
        except ValueError:
            raise ValueError(f"Invalid created_at {v!r}: expected ISO datetime")
        return v


class RoutinesFile(BaseModel):
    """tasks.json schema."""

    version: str = "1.0"
    tasks: list[RoutineTask] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "RoutinesFile":
        seen: set[str] = set()
        for task in self.tasks:
            if task.id in seen:
                raise ValueError(f"Duplicate task id {task.id!r}")
            seen.add(task.id)
        return self


# ============================================================================
# Completion Schemas
# ============================================================================


class CompletionsFile(BaseModel):
    """completions.json schema: day key (YYYY-MM-DD) -> completed task IDs."""

    version: str = "1.0"
    completions: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("completions")
    @classmethod
    def validate_completions(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        cleaned: dict[str, list[str]] = {}
        for key, ids in v.items():
            if normalize_iso_date(key) != key:
                raise ValueError(f"Invalid day key {key!r}: expected YYYY-MM-DD")
            # dict.fromkeys keeps first-seen order while collapsing duplicates
            cleaned[key] = list(dict.fromkeys(ids))
        return cleaned


# ============================================================================
# Validation Functions
# ============================================================================


def validate_tasks_file(data: dict) -> RoutinesFile:
    """Validate tasks.json."""
    return RoutinesFile(**data)


def validate_completions_file(data: dict) -> CompletionsFile:
    """Validate completions.json."""
    return CompletionsFile(**data)
