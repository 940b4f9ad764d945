"""Completion ledger: which task IDs were completed on which calendar day."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, timedelta
from typing import NamedTuple

from loguru import logger

from routinehub.routine.resolver import Occurrence
from routinehub.routine.utils import InvalidArgumentError, day_key

DEFAULT_STREAK_LOOKBACK_DAYS = 30


class DaySummary(NamedTuple):
    """How complete a day's agenda is."""

    completed: int
    total: int
    ratio: int  # whole percent, 0 when the agenda is empty


class CompletionLedger:
    """
    Day key -> ordered set of completed task IDs.

    A (day, task) pair is either present or absent. Entries are never pruned
    here, and IDs of deleted tasks are kept as harmless orphans. Buckets that
    become empty are dropped, since an absent day behaves as an empty one.
    """

    def __init__(self, completions: Mapping[str, Iterable[str]] | None = None):
        self._days: dict[str, list[str]] = {}
        for key, ids in (completions or {}).items():
            bucket = list(dict.fromkeys(ids))
            if bucket:
                self._days[key] = bucket

    # =========================================================================
    # Mutation
    # =========================================================================

    def toggle(self, task_id: str, day: date | datetime) -> bool:
        """Flip completion of ``task_id`` on ``day``. Returns the new state."""
        key = day_key(day)
        bucket = self._days.get(key, [])
        if task_id in bucket:
            bucket.remove(task_id)
            if bucket:
                self._days[key] = bucket
            else:
                del self._days[key]
            logger.info(f"[Ledger] Unmarked {task_id} on {key}")
            return False

        self._days[key] = [*bucket, task_id]
        logger.info(f"[Ledger] Marked {task_id} done on {key}")
        return True

    # =========================================================================
    # Queries
    # =========================================================================

    def is_completed(self, task_id: str, day: date | datetime) -> bool:
        return task_id in self._days.get(day_key(day), ())

    def completed_on(self, day: date | datetime) -> list[str]:
        """IDs completed on ``day``, in the order they were marked."""
        return list(self._days.get(day_key(day), ()))

    def has_history(self) -> bool:
        return bool(self._days)

    def current_streak(
        self,
        reference: date | datetime,
        lookback_days: int = DEFAULT_STREAK_LOOKBACK_DAYS,
    ) -> int:
        """Consecutive days with at least one completion, ending at ``reference``'s day.

        Walks backward from the reference day (offset 0) for at most
        ``lookback_days`` days and stops at the first empty day. A reference
        day with no completions yields 0; yesterday is not consulted.
        Which task was completed, and whether it was scheduled that weekday,
        does not matter.
        """
        if lookback_days < 0:
            raise InvalidArgumentError(f"lookback_days must be >= 0, got {lookback_days}")
        if isinstance(reference, datetime):
            reference = reference.date()

        streak = 0
        for offset in range(lookback_days):
            if not self._days.get(day_key(reference - timedelta(days=offset))):
                break
            streak += 1
        return streak

    def completion_summary(self, agenda: Sequence[Occurrence], day: date | datetime) -> DaySummary:
        """Completed / total counts for ``agenda`` on ``day``.

        Only tasks on the agenda count, so orphaned IDs never inflate the ratio.
        """
        done = self._days.get(day_key(day), ())
        total = len(agenda)
        completed = sum(1 for occ in agenda if occ.task.id in done)
        ratio = 0 if total == 0 else round(completed / total * 100)
        return DaySummary(completed, total, ratio)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, list[str]]:
        return {key: list(ids) for key, ids in sorted(self._days.items())}

    @classmethod
    def from_dict(cls, data: Mapping[str, Iterable[str]]) -> CompletionLedger:
        return cls(data)

    def __len__(self) -> int:
        return len(self._days)

    def __repr__(self) -> str:
        return f"CompletionLedger(days={len(self._days)})"
