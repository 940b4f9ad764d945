"""Plain-text rendering of routine views (used by the CLI's --plain output)."""

from __future__ import annotations

from routinehub.routine.resolver import OccurrenceStatus
from routinehub.routine.state import AgendaEntry, TodayView
from routinehub.routine.utils import format_days, format_time_of_day


def describe_status(entry: AgendaEntry) -> str:
    """Short label for an agenda entry's status, e.g. ``Starts in 12 min``."""
    if entry.status is OccurrenceStatus.DONE:
        return "Done"
    if entry.status is OccurrenceStatus.MISSED:
        return "Missed"
    if entry.status is OccurrenceStatus.DUE_NOW:
        return "Due now"
    return f"Starts in {entry.minutes_until} min"


def get_today_summary(view: TodayView) -> str:
    """
    Render a TodayView as markdown-ish text.

    Sections:
    - header with date, completion count/ratio and streak
    - today's agenda in time order with statuses
    - reminders within the lookahead window
    """
    parts = []

    summary = view.summary
    parts.append(
        f"# {view.day.strftime('%A, %B')} {view.day.day}\n\n"
        f"Done today: {summary.completed}/{summary.total} ({summary.ratio}%)\n"
        f"Day streak: {view.streak}"
    )

    if view.entries:
        lines = ["## Today's focus\n"]
        for entry in view.entries:
            task = entry.task
            lines.append(f"**{task.id}**: {task.title}")
            lines.append(f"  - Time: {format_time_of_day(entry.scheduled.time())}")
            lines.append(f"  - Priority: {task.priority}")
            lines.append(f"  - Status: {describe_status(entry)}")
            lines.append(f"  - Repeats: {format_days(task.days_of_week)}")
            if task.description:
                lines.append(f"  - Notes: {task.description}")
            lines.append("")
        parts.append("\n".join(lines))
    else:
        parts.append("No routines scheduled today.")

    if view.upcoming:
        lines = ["## Next reminders\n"]
        for item in view.upcoming:
            lines.append(
                f"- {format_time_of_day(item.scheduled.time())} {item.task.title} "
                f"(in {item.minutes_until} min)"
            )
        parts.append("\n".join(lines))

    return "\n\n".join(parts)
