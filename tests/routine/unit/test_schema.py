"""Schema validation tests for task definitions and the completion file."""

from datetime import time

import pytest
from pydantic import ValidationError

from routinehub.routine.schema import (
    RoutineTask,
    TaskDraft,
    validate_completions_file,
    validate_tasks_file,
)


def _task_dict(task_id="task_a1", **overrides):
    data = {
        "id": task_id,
        "title": "Hydrate",
        "time": "08:00",
        "duration_minutes": 5,
        "priority": "low",
        "days_of_week": list(range(7)),
        "created_at": "2026-03-01T07:00:00",
    }
    data.update(overrides)
    return data


class TestTaskDraft:
    def test_defaults(self):
        draft = TaskDraft(title="Stretch")
        assert draft.time == "08:00"
        assert draft.duration_minutes == 30
        assert draft.priority == "medium"
        assert draft.days_of_week == [1, 2, 3, 4, 5]
        assert draft.description == ""

    def test_title_is_stripped(self):
        assert TaskDraft(title="  Journal  ").title == "Journal"

    @pytest.mark.parametrize("title", ["", "   "])
    def test_blank_title_rejected(self, title):
        with pytest.raises(ValidationError, match="title must not be empty"):
            TaskDraft(title=title)

    def test_time_normalized(self):
        draft = TaskDraft(title="Read", time="7:30")
        assert draft.time == "07:30"
        assert draft.time_of_day == time(7, 30)

    @pytest.mark.parametrize("value", ["25:00", "07:75", "7am", ""])
    def test_malformed_time_rejected(self, value):
        with pytest.raises(ValidationError):
            TaskDraft(title="Read", time=value)

    def test_days_deduplicated_and_sorted(self):
        draft = TaskDraft(title="Walk", days_of_week=[5, 1, 3, 1, 5])
        assert draft.days_of_week == [1, 3, 5]

    def test_empty_days_rejected(self):
        with pytest.raises(ValidationError, match="days_of_week must not be empty"):
            TaskDraft(title="Walk", days_of_week=[])

    @pytest.mark.parametrize("day", [-1, 7])
    def test_out_of_range_day_rejected(self, day):
        with pytest.raises(ValidationError, match="Invalid day"):
            TaskDraft(title="Walk", days_of_week=[1, day])

    @pytest.mark.parametrize("days", [[True], [1, False], ["1"]])
    def test_non_integer_day_rejected(self, days):
        with pytest.raises(ValidationError):
            TaskDraft(title="Walk", days_of_week=days)

    @pytest.mark.parametrize("duration", [0, -10])
    def test_non_positive_duration_rejected(self, duration):
        with pytest.raises(ValidationError):
            TaskDraft(title="Walk", duration_minutes=duration)

    def test_unknown_priority_rejected(self):
        with pytest.raises(ValidationError):
            TaskDraft(title="Walk", priority="urgent")


class TestRoutineTask:
    def test_valid(self):
        task = RoutineTask(**_task_dict())
        assert task.id == "task_a1"
        assert task.time_of_day == time(8, 0)

    def test_bad_created_at(self):
        with pytest.raises(ValidationError, match="created_at"):
            RoutineTask(**_task_dict(created_at="yesterday"))

    def test_empty_id(self):
        with pytest.raises(ValidationError):
            RoutineTask(**_task_dict(task_id=" "))


class TestFiles:
    def test_tasks_file_roundtrip_shape(self):
        parsed = validate_tasks_file({"version": "1.0", "tasks": [_task_dict()]})
        assert len(parsed.tasks) == 1

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate task id"):
            validate_tasks_file({"tasks": [_task_dict(), _task_dict(title="Other")]})

    def test_completions_file(self):
        parsed = validate_completions_file(
            {"completions": {"2026-03-02": ["task_a1", "task_b2", "task_a1"]}}
        )
        assert parsed.completions == {"2026-03-02": ["task_a1", "task_b2"]}

    @pytest.mark.parametrize("key", ["2026-3-2", "2026-02-30", "2026-03-02T08:00:00", "today"])
    def test_bad_day_key_rejected(self, key):
        with pytest.raises(ValidationError, match="Invalid day key"):
            validate_completions_file({"completions": {key: ["task_a1"]}})
