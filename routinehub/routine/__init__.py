"""Recurrence resolution and completion tracking for daily routines."""

from routinehub.routine.ledger import CompletionLedger, DaySummary
from routinehub.routine.manager import RoutineManager, StorageError
from routinehub.routine.resolver import (
    Classification,
    Occurrence,
    OccurrenceKind,
    OccurrenceStatus,
    UpcomingOccurrence,
    agenda_for,
    classify,
    list_agenda,
    occurrence_status,
    resolve,
    upcoming_within_window,
)
from routinehub.routine.schema import RoutineTask, TaskDraft
from routinehub.routine.state import AgendaEntry, RoutineState, TodayView
from routinehub.routine.storage import JsonStorageBackend, MemoryStorageBackend, StorageBackend
from routinehub.routine.utils import InvalidArgumentError, day_key, weekday_index

__all__ = [
    "AgendaEntry",
    "Classification",
    "CompletionLedger",
    "DaySummary",
    "InvalidArgumentError",
    "JsonStorageBackend",
    "MemoryStorageBackend",
    "Occurrence",
    "OccurrenceKind",
    "OccurrenceStatus",
    "RoutineManager",
    "RoutineState",
    "RoutineTask",
    "StorageBackend",
    "StorageError",
    "TaskDraft",
    "TodayView",
    "UpcomingOccurrence",
    "agenda_for",
    "classify",
    "day_key",
    "list_agenda",
    "occurrence_status",
    "resolve",
    "upcoming_within_window",
    "weekday_index",
]
