"""Routine manager: owns a storage backend and applies mutations to it."""

from __future__ import annotations

import functools
import threading
from collections.abc import Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from loguru import logger

from routinehub.config.schema import RoutineConfig
from routinehub.routine.resolver import Occurrence, UpcomingOccurrence
from routinehub.routine.schema import RoutineTask, TaskDraft
from routinehub.routine.state import RoutineState, TodayView

if TYPE_CHECKING:
    from routinehub.routine.storage import StorageBackend


class StorageError(RuntimeError):
    """Raised when the backend rejects or fails a save."""


def with_routine_lock(fn):
    """Decorator that runs a manager method under the manager's lock.

    Makes each load-modify-save cycle atomic, so a toggle is a single
    read-modify-write and a delete cannot interleave with it.
    """

    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return fn(self, *args, **kwargs)

    return wrapper


class RoutineManager:
    """
    Controller for one routine store.

    Every call loads a fresh RoutineState from the backend, so several
    managers (or processes) sharing a workspace see each other's writes.
    Mutators persist before returning; a failed save raises StorageError.
    """

    def __init__(self, storage_backend: StorageBackend, config: RoutineConfig | None = None):
        self.storage_backend = storage_backend
        self.config = config or RoutineConfig()
        self._lock = threading.RLock()

    # =========================================================================
    # Load / save
    # =========================================================================

    def load_state(self) -> RoutineState:
        return RoutineState.from_data(
            self.storage_backend.load_tasks(),
            self.storage_backend.load_completions(),
        )

    def _save_tasks(self, state: RoutineState) -> None:
        success, message = self.storage_backend.save_tasks(state.tasks_data())
        if not success:
            raise StorageError(message)

    def _save_completions(self, state: RoutineState) -> None:
        success, message = self.storage_backend.save_completions(state.completions_data())
        if not success:
            raise StorageError(message)

    # =========================================================================
    # Mutators
    # =========================================================================

    @with_routine_lock
    def add_task(self, draft: TaskDraft | Mapping[str, Any], now: datetime) -> str:
        state = self.load_state()
        task_id = state.add_task(draft, now)
        self._save_tasks(state)
        return task_id

    @with_routine_lock
    def delete_task(self, task_id: str) -> bool:
        state = self.load_state()
        removed = state.delete_task(task_id)
        if removed:
            self._save_tasks(state)
        return removed

    @with_routine_lock
    def toggle_completion(self, task_id: str, day: date | datetime) -> bool:
        state = self.load_state()
        completed = state.toggle_completion(task_id, day)
        self._save_completions(state)
        return completed

    # =========================================================================
    # Queries
    # =========================================================================

    def tasks(self) -> list[RoutineTask]:
        return self.load_state().tasks

    def get_task(self, task_id: str) -> RoutineTask | None:
        return self.load_state().get_task(task_id)

    def is_completed(self, task_id: str, day: date | datetime) -> bool:
        return self.load_state().is_completed(task_id, day)

    def current_streak(self, reference: date | datetime, lookback_days: int | None = None) -> int:
        if lookback_days is None:
            lookback_days = self.config.streak_lookback_days
        return self.load_state().current_streak(reference, lookback_days)

    def list_agenda(self, day_index: int, reference_date: date | datetime) -> list[Occurrence]:
        return self.load_state().list_agenda(day_index, reference_date)

    def upcoming(self, now: datetime, window_minutes: int | None = None) -> list[UpcomingOccurrence]:
        if window_minutes is None:
            window_minutes = self.config.lookahead_minutes
        return self.load_state().upcoming(now, window_minutes)

    def today(self, now: datetime) -> TodayView:
        view = self.load_state().today(
            now,
            window_minutes=self.config.lookahead_minutes,
            imminent_minutes=self.config.imminent_minutes,
            lookback_days=self.config.streak_lookback_days,
        )
        logger.debug(
            f"[Routine] Today {view.day}: {view.summary.completed}/{view.summary.total} done, "
            f"streak {view.streak}"
        )
        return view
