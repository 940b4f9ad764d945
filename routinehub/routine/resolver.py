"""Occurrence resolution: projecting recurring tasks onto concrete days.

Every function here is pure. The reference instant is always passed in by
the caller; nothing in this module reads the clock.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from enum import Enum
from typing import NamedTuple

from routinehub.routine.schema import RoutineTask, TaskDraft
from routinehub.routine.utils import (
    InvalidArgumentError,
    check_day_index,
    truncate_to_minute,
    weekday_index,
)

DEFAULT_WINDOW_MINUTES = 120
DEFAULT_IMMINENT_MINUTES = 45


class OccurrenceKind(str, Enum):
    """Position of a scheduled instant relative to a reference instant."""

    PAST = "past"
    DUE_NOW = "due_now"
    UPCOMING = "upcoming"
    FAR_FUTURE = "far_future"


class OccurrenceStatus(str, Enum):
    """Display status of an occurrence in today's list."""

    DONE = "done"
    MISSED = "missed"
    DUE_NOW = "due_now"
    STARTING_SOON = "starting_soon"
    SCHEDULED = "scheduled"


class Classification(NamedTuple):
    """Result of classify().

    ``minutes_until`` is the signed whole-minute distance from the reference
    minute to the scheduled minute (negative for past occurrences).
    """

    kind: OccurrenceKind
    minutes_until: int


class Occurrence(NamedTuple):
    task: RoutineTask
    scheduled: datetime


class UpcomingOccurrence(NamedTuple):
    task: RoutineTask
    scheduled: datetime
    minutes_until: int


def resolve(task: TaskDraft, target: date | datetime) -> datetime:
    """Concrete instant of ``task`` on the calendar day of ``target``.

    The target's time-of-day is discarded; the task's HH:MM is applied with
    seconds zeroed. A datetime target keeps its tzinfo.
    """
    if isinstance(target, datetime):
        return datetime.combine(target.date(), task.time_of_day, tzinfo=target.tzinfo)
    return datetime.combine(target, task.time_of_day)


def _minutes_between(reference: datetime, scheduled: datetime) -> int:
    delta = truncate_to_minute(scheduled) - truncate_to_minute(reference)
    return round(delta.total_seconds() / 60)


def classify(
    scheduled: datetime,
    reference: datetime,
    window_minutes: int = DEFAULT_WINDOW_MINUTES,
) -> Classification:
    """Classify ``scheduled`` against ``reference`` at whole-minute granularity.

    - past: scheduled minute is before the reference minute
    - due_now: same minute
    - upcoming: 0 < minutes_until < window_minutes
    - far_future: at or beyond the window
    """
    if window_minutes < 0:
        raise InvalidArgumentError(f"window_minutes must be >= 0, got {window_minutes}")

    minutes = _minutes_between(reference, scheduled)
    if minutes < 0:
        kind = OccurrenceKind.PAST
    elif minutes == 0:
        kind = OccurrenceKind.DUE_NOW
    elif minutes < window_minutes:
        kind = OccurrenceKind.UPCOMING
    else:
        kind = OccurrenceKind.FAR_FUTURE
    return Classification(kind, minutes)


def is_scheduled_on(task: TaskDraft, day_index: int) -> bool:
    return check_day_index(day_index) in task.days_of_week


def list_agenda(
    tasks: Iterable[RoutineTask],
    day_index: int,
    reference_date: date | datetime,
) -> list[Occurrence]:
    """All tasks repeating on ``day_index``, projected onto ``reference_date``.

    Sorted ascending by scheduled instant. ``sorted`` is stable, so tasks at
    the same instant keep their input (creation) order.

    Raises InvalidArgumentError if ``day_index`` is outside 0-6.
    """
    check_day_index(day_index)
    agenda = [
        Occurrence(task, resolve(task, reference_date))
        for task in tasks
        if day_index in task.days_of_week
    ]
    return sorted(agenda, key=lambda occ: occ.scheduled)


def agenda_for(tasks: Iterable[RoutineTask], day: date | datetime) -> list[Occurrence]:
    """Agenda of the calendar day containing ``day``."""
    return list_agenda(tasks, weekday_index(day), day)


def upcoming_within_window(
    agenda: Sequence[Occurrence],
    reference: datetime,
    window_minutes: int = DEFAULT_WINDOW_MINUTES,
) -> list[UpcomingOccurrence]:
    """Occurrences classified upcoming within the window, soonest first."""
    upcoming = []
    for task, scheduled in agenda:
        result = classify(scheduled, reference, window_minutes)
        if result.kind is OccurrenceKind.UPCOMING:
            upcoming.append(UpcomingOccurrence(task, scheduled, result.minutes_until))
    return sorted(upcoming, key=lambda item: item.minutes_until)


def occurrence_status(
    scheduled: datetime,
    reference: datetime,
    completed: bool,
    imminent_minutes: int = DEFAULT_IMMINENT_MINUTES,
) -> OccurrenceStatus:
    """Status shown next to an occurrence in today's list.

    Completion wins over timing: a finished task is done even if its slot
    has passed. An unfinished past occurrence is missed.
    """
    if completed:
        return OccurrenceStatus.DONE
    minutes = _minutes_between(reference, scheduled)
    if minutes < 0:
        return OccurrenceStatus.MISSED
    if minutes == 0:
        return OccurrenceStatus.DUE_NOW
    if minutes <= imminent_minutes:
        return OccurrenceStatus.STARTING_SOON
    return OccurrenceStatus.SCHEDULED


def count_tasks_by_day(tasks: Iterable[RoutineTask]) -> dict[int, int]:
    """Number of tasks repeating on each weekday index (0 = Sunday)."""
    counts = dict.fromkeys(range(7), 0)
    for task in tasks:
        for d in task.days_of_week:
            counts[d] += 1
    return counts
