"""Tests for occurrence resolution and classification.

Reference week: Sunday 2026-03-01 ... Saturday 2026-03-07.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from routinehub.routine.resolver import (
    OccurrenceKind,
    OccurrenceStatus,
    agenda_for,
    classify,
    count_tasks_by_day,
    is_scheduled_on,
    list_agenda,
    occurrence_status,
    resolve,
    upcoming_within_window,
)
from routinehub.routine.schema import RoutineTask
from routinehub.routine.utils import InvalidArgumentError, weekday_index

MONDAY = date(2026, 3, 2)


def _make_task(task_id="task_r01", title="Daily Exercise", time="08:00", days=None, priority="medium"):
    return RoutineTask(
        id=task_id,
        title=title,
        time=time,
        duration_minutes=30,
        priority=priority,
        days_of_week=days if days is not None else list(range(7)),
        created_at="2026-03-01T00:00:00",
    )


def _at(hh, mm, ss=0, day=MONDAY):
    return datetime(day.year, day.month, day.day, hh, mm, ss)


# ============================================================================
# resolve
# ============================================================================


class TestResolve:
    def test_applies_time_of_day(self):
        assert resolve(_make_task(time="07:45"), MONDAY) == datetime(2026, 3, 2, 7, 45)

    def test_discards_target_time(self):
        target = datetime(2026, 3, 2, 22, 13, 59, 123456)
        assert resolve(_make_task(time="07:45"), target) == datetime(2026, 3, 2, 7, 45)

    def test_seconds_zeroed(self):
        result = resolve(_make_task(), datetime(2026, 3, 2, 8, 0, 30))
        assert result.second == 0
        assert result.microsecond == 0

    def test_deterministic(self):
        task = _make_task(time="19:10")
        for offset in range(14):
            day = MONDAY + timedelta(days=offset)
            assert resolve(task, day) == resolve(task, day)

    def test_independent_of_weekday_membership(self):
        # Speculative resolution on a non-scheduled day still yields an instant
        task = _make_task(days=[1])
        assert resolve(task, date(2026, 3, 4)) == datetime(2026, 3, 4, 8, 0)

    def test_keeps_tzinfo(self):
        target = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)
        result = resolve(_make_task(), target)
        assert result.tzinfo is timezone.utc
        assert result.hour == 8


# ============================================================================
# classify
# ============================================================================


class TestClassify:
    def test_boundaries_against_nine_oclock(self):
        ref = _at(9, 0)
        assert classify(_at(9, 0), ref).kind is OccurrenceKind.DUE_NOW
        assert classify(_at(8, 59), ref).kind is OccurrenceKind.PAST

        upcoming = classify(_at(10, 59), ref)
        assert upcoming.kind is OccurrenceKind.UPCOMING
        assert upcoming.minutes_until == 119

        assert classify(_at(11, 1), ref).kind is OccurrenceKind.FAR_FUTURE

    def test_window_end_is_exclusive(self):
        assert classify(_at(11, 0), _at(9, 0)).kind is OccurrenceKind.FAR_FUTURE

    def test_sub_minute_reference_is_due_now(self):
        assert classify(_at(8, 0), _at(8, 0, 30)).kind is OccurrenceKind.DUE_NOW
        assert classify(_at(8, 0), _at(8, 0, 59)).kind is OccurrenceKind.DUE_NOW

    def test_one_minute_ahead_is_upcoming(self):
        result = classify(_at(9, 0), _at(8, 59, 59))
        assert result.kind is OccurrenceKind.UPCOMING
        assert result.minutes_until == 1

    def test_past_minutes_are_negative(self):
        result = classify(_at(7, 30), _at(9, 0))
        assert result.kind is OccurrenceKind.PAST
        assert result.minutes_until == -90

    def test_custom_window(self):
        ref = _at(9, 0)
        assert classify(_at(9, 20), ref, window_minutes=30).kind is OccurrenceKind.UPCOMING
        assert classify(_at(9, 40), ref, window_minutes=30).kind is OccurrenceKind.FAR_FUTURE

    def test_zero_window_has_no_upcoming(self):
        assert classify(_at(9, 1), _at(9, 0), window_minutes=0).kind is OccurrenceKind.FAR_FUTURE

    def test_negative_window_rejected(self):
        with pytest.raises(InvalidArgumentError):
            classify(_at(9, 0), _at(9, 0), window_minutes=-1)

    def test_previous_day_is_past(self):
        yesterday = MONDAY - timedelta(days=1)
        assert classify(_at(23, 59, day=yesterday), _at(0, 0)).kind is OccurrenceKind.PAST


# ============================================================================
# list_agenda
# ============================================================================


class TestListAgenda:
    def test_weekday_filter_over_two_weeks(self):
        task = _make_task(days=[1, 3, 5])
        for offset in range(14):
            day = date(2026, 3, 1) + timedelta(days=offset)
            agenda = list_agenda([task], weekday_index(day), day)
            if weekday_index(day) in (1, 3, 5):
                assert [occ.task.id for occ in agenda] == ["task_r01"]
                assert agenda[0].scheduled == datetime(day.year, day.month, day.day, 8, 0)
            else:
                assert agenda == []

    def test_sorted_by_time(self):
        tasks = [
            _make_task("task_c", time="18:00"),
            _make_task("task_a", time="06:30"),
            _make_task("task_b", time="12:15"),
        ]
        agenda = list_agenda(tasks, 1, MONDAY)
        assert [occ.task.id for occ in agenda] == ["task_a", "task_b", "task_c"]

    def test_equal_times_keep_creation_order(self):
        tasks = [
            _make_task("task_first", time="09:00"),
            _make_task("task_early", time="07:00"),
            _make_task("task_second", time="09:00"),
            _make_task("task_third", time="09:00"),
        ]
        for _ in range(3):
            agenda = list_agenda(tasks, 1, MONDAY)
            assert [occ.task.id for occ in agenda] == [
                "task_early",
                "task_first",
                "task_second",
                "task_third",
            ]

    def test_projects_onto_reference_date(self):
        task = _make_task(days=[3])
        agenda = list_agenda([task], 3, date(2026, 3, 4))
        assert agenda[0].scheduled == datetime(2026, 3, 4, 8, 0)

    def test_empty_task_list(self):
        assert list_agenda([], 2, MONDAY) == []

    @pytest.mark.parametrize("day_index", [-1, 7, "1"])
    def test_invalid_day_index(self, day_index):
        with pytest.raises(InvalidArgumentError):
            list_agenda([_make_task()], day_index, MONDAY)

    def test_agenda_for_uses_day_weekday(self):
        weekday_task = _make_task("task_wk", days=[1, 2, 3, 4, 5])
        weekend_task = _make_task("task_we", days=[0, 6])
        assert [o.task.id for o in agenda_for([weekday_task, weekend_task], MONDAY)] == ["task_wk"]
        sunday = date(2026, 3, 1)
        assert [o.task.id for o in agenda_for([weekday_task, weekend_task], sunday)] == ["task_we"]

    def test_is_scheduled_on(self):
        task = _make_task(days=[0, 6])
        assert is_scheduled_on(task, 0)
        assert not is_scheduled_on(task, 1)
        with pytest.raises(InvalidArgumentError):
            is_scheduled_on(task, 8)


# ============================================================================
# upcoming_within_window
# ============================================================================


class TestUpcomingWithinWindow:
    def test_only_upcoming_sorted_by_countdown(self):
        tasks = [
            _make_task("task_past", time="08:30"),
            _make_task("task_now", time="09:00"),
            _make_task("task_far", time="12:00"),
            _make_task("task_late", time="10:45"),
            _make_task("task_soon", time="09:10"),
        ]
        agenda = list_agenda(tasks, 1, MONDAY)
        result = upcoming_within_window(agenda, _at(9, 0))
        assert [(u.task.id, u.minutes_until) for u in result] == [
            ("task_soon", 10),
            ("task_late", 105),
        ]
        assert result[0].scheduled == _at(9, 10)

    def test_custom_window(self):
        agenda = list_agenda([_make_task(time="09:40")], 1, MONDAY)
        assert upcoming_within_window(agenda, _at(9, 0), window_minutes=30) == []
        assert len(upcoming_within_window(agenda, _at(9, 0), window_minutes=60)) == 1

    def test_empty(self):
        assert upcoming_within_window([], _at(9, 0)) == []


# ============================================================================
# occurrence_status / count_tasks_by_day
# ============================================================================


class TestOccurrenceStatus:
    def test_completed_wins(self):
        assert occurrence_status(_at(7, 0), _at(9, 0), True) is OccurrenceStatus.DONE
        assert occurrence_status(_at(11, 0), _at(9, 0), True) is OccurrenceStatus.DONE

    def test_missed(self):
        assert occurrence_status(_at(8, 59), _at(9, 0), False) is OccurrenceStatus.MISSED

    def test_due_now(self):
        assert occurrence_status(_at(9, 0), _at(9, 0, 45), False) is OccurrenceStatus.DUE_NOW

    def test_starting_soon_inclusive(self):
        assert occurrence_status(_at(9, 45), _at(9, 0), False) is OccurrenceStatus.STARTING_SOON
        assert occurrence_status(_at(9, 46), _at(9, 0), False) is OccurrenceStatus.SCHEDULED

    def test_custom_imminent_window(self):
        status = occurrence_status(_at(9, 10), _at(9, 0), False, imminent_minutes=5)
        assert status is OccurrenceStatus.SCHEDULED


def test_count_tasks_by_day():
    tasks = [
        _make_task("task_a", days=[1, 2, 3, 4, 5]),
        _make_task("task_b", days=[0, 6]),
        _make_task("task_c", days=[1]),
    ]
    assert count_tasks_by_day(tasks) == {0: 1, 1: 2, 2: 1, 3: 1, 4: 1, 5: 1, 6: 1}
    assert count_tasks_by_day([]) == dict.fromkeys(range(7), 0)
