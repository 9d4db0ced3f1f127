"""Day, week and month summaries built from closed work sessions."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Tuple

from taskr.config import MINUTES_PER_HOUR
from taskr.dates import week_dates
from taskr.models import Task, WorkSession


@dataclass
class ReportEntry:
    """A closed session together with the task it belongs to."""

    task: Task
    session: WorkSession

    @property
    def minutes(self) -> int:
        return self.session.duration or 0


@dataclass
class DayReport:
    date: str                                  # YYYY-MM-DD
    entries: List[ReportEntry] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(entry.minutes for entry in self.entries)


@dataclass
class WeekReport:
    days: List[DayReport]                      # Sunday .. Saturday

    @property
    def start(self) -> str:
        return self.days[0].date

    @property
    def end(self) -> str:
        return self.days[-1].date

    @property
    def total(self) -> int:
        return sum(day.total for day in self.days)


@dataclass
class MonthGroup:
    """Sessions of every task sharing one name."""

    name: str
    sessions: int = 0
    minutes: int = 0
    percent: float = 0.0


@dataclass
class MonthReport:
    year: int
    month: int
    groups: List[MonthGroup]
    total: int
    average_per_day: float


def format_duration(minutes: int) -> str:
    """Render minutes as "45m", "2h" or "2h 5m"."""
    if minutes < MINUTES_PER_HOUR:
        return f"{minutes}m"
    hours, rest = divmod(minutes, MINUTES_PER_HOUR)
    if rest > 0:
        return f"{hours}h {rest}m"
    return f"{hours}h"


def _closed_sessions(tasks: List[Task]) -> List[Tuple[Task, WorkSession]]:
    """Every (task, session) pair whose session has been stopped, in collection order."""
    return [
        (task, session)
        for task in tasks
        for session in task.work_flow
        if session.stop is not None and session.duration is not None
    ]


def daily_total(tasks: List[Task], day: str) -> int:
    """Total closed minutes of sessions started on `day` (YYYY-MM-DD)."""
    return sum(
        session.duration
        for _, session in _closed_sessions(tasks)
        if session.day == day
    )


def day_report(tasks: List[Task], day: str) -> DayReport:
    """Closed sessions started on `day`, oldest first."""
    entries = [
        ReportEntry(task, session)
        for task, session in _closed_sessions(tasks)
        if session.day == day
    ]
    # sorted() is stable: equal starts keep collection order
    entries = sorted(entries, key=lambda entry: entry.session.started)
    return DayReport(date=day, entries=entries)


def week_report(tasks: List[Task], now: datetime) -> WeekReport:
    """Sunday-to-Saturday week containing `now`; empty days are kept."""
    return WeekReport(days=[day_report(tasks, d.isoformat()) for d in week_dates(now.date())])


def month_report(tasks: List[Task], now: datetime) -> MonthReport:
    """
    Time per task name for the calendar month containing `now`.

    Tasks sharing a name are merged into one group. Groups are ordered by
    minutes, largest first.
    """
    month_prefix = f"{now.year:04d}-{now.month:02d}"

    groups: Dict[str, MonthGroup] = {}
    for task, session in _closed_sessions(tasks):
        if not session.day.startswith(month_prefix):
            continue
        group = groups.setdefault(task.name, MonthGroup(name=task.name))
        group.sessions += 1
        group.minutes += session.duration

    total = sum(group.minutes for group in groups.values())
    ordered = sorted(groups.values(), key=lambda group: group.minutes, reverse=True)
    for group in ordered:
        group.percent = round(group.minutes / total * 100, 1) if total else 0.0

    return MonthReport(
        year=now.year,
        month=now.month,
        groups=ordered,
        total=total,
        average_per_day=total / now.day,
    )
