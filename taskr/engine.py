"""Task engine: lookup, session lifecycle, status changes and report entry points.

Every operation loads the whole collection from the store, applies a single
change and saves the whole collection back. Nothing is kept in memory
between calls.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Tuple

from taskr import reports
from taskr.config import CANONICAL_DATE_FORMAT
from taskr.dates import today
from taskr.errors import InvalidInput, NotFound
from taskr.models import Task, TaskStatus, WorkSession
from taskr.storage import TaskStore

logger = logging.getLogger(__name__)

# Passed as `schedule` to edit() when the schedule should stay as it is
UNCHANGED = object()


class Outcome(str, Enum):
    """What a start/stop call actually did."""
    STARTED = "started"
    ALREADY_RUNNING = "already_running"  # no-op
    STOPPED = "stopped"
    NOTHING_ACTIVE = "nothing_active"    # no-op


@dataclass
class StopResult:
    outcome: Outcome
    task: Optional[Task] = None
    session: Optional[WorkSession] = None


@dataclass
class StartResult:
    outcome: Outcome
    task: Task
    session: WorkSession                      # New session, or the one already running
    created: bool = False                     # Task was created by this call
    switched_from: Optional[StopResult] = None  # Timer stopped on another task first


@dataclass
class StatusChange:
    """Result of mark_done / mark_todo."""

    task: Task
    stopped: Optional[StopResult] = None


@dataclass
class ActiveTimer:
    task: Task
    session: WorkSession
    elapsed_minutes: int


def next_id(tasks: List[Task]) -> str:
    """Return max(numeric ids) + 1 as a string; "1" for an empty collection."""
    max_id = 0
    for task in tasks:
        try:
            current = int(task.id)
        except (TypeError, ValueError):
            continue
        if current > max_id:
            max_id = current
    return str(max_id + 1)


def resolve(token: str, tasks: List[Task]) -> Task:
    """
    Find a task by exact id, falling back to a fuzzy name match.

    The fuzzy match is bidirectional, case-insensitive containment: the
    token inside the name or the name inside the token. The first task in
    collection order wins.

    Raises:
        InvalidInput: the token is blank.
        NotFound: nothing matches.
    """
    token = (token or "").strip()
    if not token:
        # An empty token is contained in every name
        raise InvalidInput("A task id or name is required")

    for task in tasks:
        if task.id == token:
            return task

    needle = token.casefold()
    for task in tasks:
        name = task.name.casefold()
        if needle in name or name in needle:
            return task

    raise NotFound(token)


def find_open_session(tasks: List[Task]) -> Optional[Tuple[Task, WorkSession]]:
    """First (task, session) pair whose session is still running."""
    for task in tasks:
        session = task.open_session()
        if session is not None:
            return task, session
    return None


def _by_id(task_id: str, tasks: List[Task]) -> Task:
    for task in tasks:
        if task.id == task_id:
            return task
    raise NotFound(task_id)


def _check_schedule(schedule: Optional[str]) -> None:
    if schedule is None:
        return
    try:
        parsed = datetime.strptime(schedule, CANONICAL_DATE_FORMAT)
    except (TypeError, ValueError):
        parsed = None
    # strptime also accepts unpadded "2026-1-5"
    if parsed is None or parsed.strftime(CANONICAL_DATE_FORMAT) != schedule:
        raise InvalidInput(f"Invalid schedule {schedule!r}, expected YYYY-MM-DD")


def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise InvalidInput("Task name cannot be empty")
    return name


class TaskEngine:
    """Operations over the task collection held by a TaskStore."""

    def __init__(self, store: TaskStore, clock: Callable[[], datetime] = datetime.now):
        """
        Args:
            store: Collaborator that loads and saves the whole collection.
            clock: Returns the current local time; replaced in tests.
        """
        self.store = store
        self.clock = clock

    # ---- creation ----
    def create(self, name: str, schedule: Optional[str] = None) -> Task:
        """Append a new todo task and persist it. Duplicate names are allowed."""
        name = _clean_name(name)
        _check_schedule(schedule)

        tasks = self.store.load()
        task = Task(
            id=next_id(tasks),
            name=name,
            status=TaskStatus.TODO,
            created_at=self.clock().isoformat(),
            schedule=schedule,
        )
        tasks.append(task)
        self.store.save(tasks)
        logger.info("Created task #%s %r (schedule=%s)", task.id, task.name, schedule)
        return task

    # ---- time tracking ----
    def start(self, token: str, create_if_missing: bool = False) -> StartResult:
        """
        Start the timer on the task matching `token`.

        An unknown token creates a task of that name when `create_if_missing`
        is set. A timer running on another task is stopped first so that only
        one session is ever open.

        Raises:
            NotFound: unknown token and `create_if_missing` is False.
        """
        tasks = self.store.load()
        created = False
        try:
            task = resolve(token, tasks)
        except NotFound:
            if not create_if_missing:
                raise
            task = self.create(token)
            created = True
            tasks = self.store.load()
            task = _by_id(task.id, tasks)

        running = task.open_session()
        if running is not None:
            logger.info("Task #%s is already running since %s", task.id, running.start)
            return StartResult(Outcome.ALREADY_RUNNING, task, running, created=created)

        switched_from = None
        if find_open_session(tasks) is not None:
            switched_from = self.stop()
            # stop() saved its own copy of the collection
            tasks = self.store.load()
            task = _by_id(task.id, tasks)

        if task.status == TaskStatus.TODO:
            task.status = TaskStatus.IN_PROGRESS

        session = WorkSession(start=self.clock().isoformat())
        task.work_flow.append(session)
        self.store.save(tasks)
        logger.info("Started task #%s %r at %s", task.id, task.name, session.start)

        return StartResult(Outcome.STARTED, task, session, created=created, switched_from=switched_from)

    def stop(self) -> StopResult:
        """Stop the one running session, wherever it is. Status is left as is."""
        tasks = self.store.load()
        found = find_open_session(tasks)
        if found is None:
            logger.info("No active timer to stop")
            return StopResult(Outcome.NOTHING_ACTIVE)

        task, session = found
        duration = session.close(self.clock())
        self.store.save(tasks)
        logger.info("Stopped task #%s %r after %d min", task.id, task.name, duration)
        return StopResult(Outcome.STOPPED, task, session)

    def current_status(self) -> Optional[ActiveTimer]:
        """The running task and its elapsed minutes, or None."""
        found = find_open_session(self.store.load())
        if found is None:
            return None
        task, session = found
        return ActiveTimer(task, session, session.elapsed_minutes(self.clock()))

    # ---- status changes ----
    def _set_status(self, token: str, status: TaskStatus) -> StatusChange:
        tasks = self.store.load()
        task = resolve(token, tasks)

        stopped = None
        if task.open_session() is not None:
            stopped = self.stop()
            tasks = self.store.load()
            task = _by_id(task.id, tasks)

        task.status = status
        task.end_at = self.clock().isoformat() if status == TaskStatus.DONE else None
        self.store.save(tasks)
        logger.info("Task #%s %r is now %s", task.id, task.name, status.value)
        return StatusChange(task, stopped)

    def mark_done(self, token: str) -> StatusChange:
        """Stop the task's timer if it runs, then mark it done."""
        return self._set_status(token, TaskStatus.DONE)

    def mark_todo(self, token: str) -> StatusChange:
        """Reopen a task (stopping its timer if it runs). Past sessions are kept."""
        return self._set_status(token, TaskStatus.TODO)

    def edit(self, token: str, name: Optional[str] = None, schedule=UNCHANGED) -> Task:
        """
        Rename and/or reschedule a task.

        Args:
            token: Task id or name.
            name: New name, or None to keep the current one.
            schedule: New YYYY-MM-DD date, None to clear it, or UNCHANGED.
        """
        if name is not None:
            name = _clean_name(name)
        if schedule is not UNCHANGED:
            _check_schedule(schedule)

        tasks = self.store.load()
        task = resolve(token, tasks)
        if name is not None:
            task.name = name
        if schedule is not UNCHANGED:
            task.schedule = schedule
        self.store.save(tasks)
        logger.info("Edited task #%s: name=%r schedule=%s", task.id, task.name, task.schedule)
        return task

    # ---- read side ----
    def get(self, token: str) -> Task:
        return resolve(token, self.store.load())

    def list_tasks(self, include_done: bool = False, today_only: bool = False) -> List[Task]:
        """
        Tasks in collection order.

        Args:
            include_done: Keep tasks whose status is done.
            today_only: Keep only tasks scheduled for today.
        """
        tasks = self.store.load()
        if not include_done:
            tasks = [t for t in tasks if t.status != TaskStatus.DONE]
        if today_only:
            current = today(self.clock())
            tasks = [t for t in tasks if t.schedule == current]
        return tasks

    def today(self) -> str:
        return today(self.clock())

    def daily_total(self, day: Optional[str] = None) -> int:
        return reports.daily_total(self.store.load(), day or self.today())

    def day_report(self, day: Optional[str] = None) -> reports.DayReport:
        return reports.day_report(self.store.load(), day or self.today())

    def week_report(self) -> reports.WeekReport:
        return reports.week_report(self.store.load(), self.clock())

    def month_report(self) -> reports.MonthReport:
        return reports.month_report(self.store.load(), self.clock())
