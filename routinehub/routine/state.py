"""In-memory routine state: task collection plus completion ledger.

A RoutineState is an explicit object handed to (or owned by) whoever serves a
session. There is no module-level store. Queries recompute on demand from the
current tasks, ledger and the reference instant supplied by the caller.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, NamedTuple
from uuid import uuid4

from loguru import logger

from routinehub.routine.ledger import DEFAULT_STREAK_LOOKBACK_DAYS, CompletionLedger, DaySummary
from routinehub.routine.resolver import (
    DEFAULT_IMMINENT_MINUTES,
    DEFAULT_WINDOW_MINUTES,
    Occurrence,
    OccurrenceStatus,
    UpcomingOccurrence,
    agenda_for,
    classify,
    count_tasks_by_day,
    list_agenda,
    occurrence_status,
    upcoming_within_window,
)
from routinehub.routine.schema import (
    RoutineTask,
    TaskDraft,
    validate_completions_file,
    validate_tasks_file,
)


def _generate_id(prefix: str) -> str:
    """Generate unique ID: {prefix}_xxxxxxxx."""
    return f"{prefix}_{str(uuid4())[:8]}"


class AgendaEntry(NamedTuple):
    task: RoutineTask
    scheduled: datetime
    completed: bool
    status: OccurrenceStatus
    minutes_until: int  # signed, negative once the slot has passed


@dataclass
class TodayView:
    """Everything the "today" screen needs, computed for one reference instant."""

    day: date
    entries: list[AgendaEntry] = field(default_factory=list)
    upcoming: list[UpcomingOccurrence] = field(default_factory=list)
    summary: DaySummary = DaySummary(0, 0, 0)
    streak: int = 0


class RoutineState:
    """Task definitions (in creation order) and the completion ledger."""

    def __init__(
        self,
        tasks: Iterable[RoutineTask] | None = None,
        ledger: CompletionLedger | None = None,
    ):
        self._tasks: list[RoutineTask] = list(tasks or [])
        self.ledger = ledger if ledger is not None else CompletionLedger()

    @property
    def tasks(self) -> list[RoutineTask]:
        return list(self._tasks)

    def get_task(self, task_id: str) -> RoutineTask | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    # =========================================================================
    # Mutators
    # =========================================================================

    def add_task(self, draft: TaskDraft | Mapping[str, Any], now: datetime) -> str:
        """Validate ``draft`` and append it as a new task. Returns the new ID.

        Raises pydantic.ValidationError for an invalid definition.
        """
        if not isinstance(draft, TaskDraft):
            draft = TaskDraft.model_validate(dict(draft))

        existing = {t.id for t in self._tasks}
        task_id = _generate_id("task")
        while task_id in existing:
            task_id = _generate_id("task")

        task = RoutineTask(id=task_id, created_at=now.isoformat(), **draft.model_dump())
        self._tasks.append(task)
        logger.info(f"[Routine] Added {task_id}: {task.title} at {task.time} on {task.days_of_week}")
        return task_id

    def delete_task(self, task_id: str) -> bool:
        """Remove a task definition. Its ledger entries are left in place.

        Returns False if no task has that ID.
        """
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                del self._tasks[i]
                logger.info(f"[Routine] Deleted {task_id}: {task.title}")
                return True
        logger.warning(f"[Routine] Delete ignored, unknown task {task_id}")
        return False

    def toggle_completion(self, task_id: str, day: date | datetime) -> bool:
        if self.get_task(task_id) is None:
            logger.debug(f"[Routine] Toggling completion for unknown task {task_id}")
        return self.ledger.toggle(task_id, day)

    # =========================================================================
    # Queries
    # =========================================================================

    def is_completed(self, task_id: str, day: date | datetime) -> bool:
        return self.ledger.is_completed(task_id, day)

    def current_streak(
        self,
        reference: date | datetime,
        lookback_days: int = DEFAULT_STREAK_LOOKBACK_DAYS,
    ) -> int:
        return self.ledger.current_streak(reference, lookback_days)

    def list_agenda(self, day_index: int, reference_date: date | datetime) -> list[Occurrence]:
        return list_agenda(self._tasks, day_index, reference_date)

    def agenda_for(self, day: date | datetime) -> list[Occurrence]:
        return agenda_for(self._tasks, day)

    def upcoming(
        self,
        reference: datetime,
        window_minutes: int = DEFAULT_WINDOW_MINUTES,
    ) -> list[UpcomingOccurrence]:
        return upcoming_within_window(self.agenda_for(reference), reference, window_minutes)

    def tasks_per_day(self) -> dict[int, int]:
        return count_tasks_by_day(self._tasks)

    def today(
        self,
        now: datetime,
        *,
        window_minutes: int = DEFAULT_WINDOW_MINUTES,
        imminent_minutes: int = DEFAULT_IMMINENT_MINUTES,
        lookback_days: int = DEFAULT_STREAK_LOOKBACK_DAYS,
    ) -> TodayView:
        """Agenda with statuses, upcoming reminders, completion summary and streak."""
        agenda = self.agenda_for(now)
        entries = []
        for task, scheduled in agenda:
            done = self.ledger.is_completed(task.id, now)
            entries.append(
                AgendaEntry(
                    task,
                    scheduled,
                    done,
                    occurrence_status(scheduled, now, done, imminent_minutes),
                    classify(scheduled, now, window_minutes).minutes_until,
                )
            )
        return TodayView(
            day=now.date(),
            entries=entries,
            upcoming=upcoming_within_window(agenda, now, window_minutes),
            summary=self.ledger.completion_summary(agenda, now),
            streak=self.ledger.current_streak(now, lookback_days),
        )

    # =========================================================================
    # File-level dicts (storage boundary)
    # =========================================================================

    def tasks_data(self) -> dict:
        return {"version": "1.0", "tasks": [t.model_dump() for t in self._tasks]}

    def completions_data(self) -> dict:
        return {"version": "1.0", "completions": self.ledger.to_dict()}

    @classmethod
    def from_data(cls, tasks_data: dict, completions_data: dict) -> RoutineState:
        """Build state from file-level dicts, validating them with the schemas."""
        tasks_file = validate_tasks_file(tasks_data)
        completions_file = validate_completions_file(completions_data)
        return cls(tasks_file.tasks, CompletionLedger(completions_file.completions))
