"""Data models for taskr."""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import List, Optional
import logging
import math
import uuid

from taskr.dates import calendar_date, minutes_between, parse_timestamp

logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    """Task lifecycle states."""
    TODO = "todo"
    BLOCKED = "blocked"            # Reserved, no command moves a task here
    IN_PROGRESS = "in_progress"    # Has been started at least once
    DONE = "done"


@dataclass
class WorkSession:
    """One contiguous interval of tracked time."""

    id: str = ""                      # uuid4 string
    start: str = ""                   # ISO format timestamp
    stop: Optional[str] = None        # None while the session is running
    duration: Optional[int] = None    # Whole minutes, set together with stop

    def __post_init__(self):
        """Auto-generate ID and start, then check stop/duration agree."""
        if not self.id:
            self.id = str(uuid.uuid4())
        if not self.start:
            self.start = datetime.now().isoformat()
        if (self.stop is None) != (self.duration is None):
            raise ValueError(
                f"Work session {self.id}: stop and duration must be set together"
            )

    @property
    def is_open(self) -> bool:
        return self.stop is None

    @property
    def started(self) -> datetime:
        return parse_timestamp(self.start)

    @property
    def stopped(self) -> Optional[datetime]:
        return parse_timestamp(self.stop) if self.stop else None

    @property
    def day(self) -> str:
        """Calendar date (YYYY-MM-DD) the session was started on."""
        return calendar_date(self.start)

    def close(self, now: datetime) -> int:
        """Stop the session at `now` and return its duration in minutes."""
        duration = minutes_between(self.started, now)
        self.stop = now.isoformat()
        self.duration = duration
        return duration

    def elapsed_minutes(self, now: datetime) -> int:
        """Minutes tracked so far (duration once stopped, running time otherwise)."""
        if self.duration is not None:
            return self.duration
        return minutes_between(self.started, now)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> 'WorkSession':
        """Create WorkSession from dictionary, repairing older records."""
        d = dict(d)
        # Reject unreadable timestamps up front
        start = parse_timestamp(d['start'])
        stop = parse_timestamp(d['stop']) if d.get('stop') else None
        duration = d.get('duration')
        # Some files store the duration as a string or a float
        if isinstance(duration, str):
            duration = duration.strip() or None
        if duration is not None:
            duration = int(math.floor(float(duration) + 0.5))
        if stop is not None and duration is None:
            duration = minutes_between(start, stop)
        if stop is None:
            d['stop'] = None
            duration = None
        return cls(
            id=d.get('id') or "",
            start=d['start'],
            stop=d['stop'],
            duration=duration,
        )


@dataclass
class Note:
    """Free text attached to a task."""

    id: str = ""
    value: str = ""
    created_at: str = ""

    def __post_init__(self):
        if not self.id:
            self.id = str(uuid.uuid4())
        if not self.created_at:
            self.created_at = datetime.now().isoformat()

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> 'Note':
        return cls(
            id=d.get('id') or "",
            value=d.get('value') or "",
            created_at=d.get('created_at') or "",
        )


@dataclass
class Task:
    """Represents a single task and the time tracked against it."""

    id: str                                   # "1", "2", ... assigned by the engine
    name: str                                 # e.g., "write report"
    status: TaskStatus = TaskStatus.TODO
    created_at: str = ""                      # ISO format timestamp
    end_at: Optional[str] = None              # Set while status is DONE
    schedule: Optional[str] = None            # YYYY-MM-DD the task is planned for
    work_flow: List[WorkSession] = field(default_factory=list)
    task_notes: List[Note] = field(default_factory=list)

    def __post_init__(self):
        """Auto-generate timestamp if not provided."""
        if not self.created_at:
            self.created_at = datetime.now().isoformat()

    def open_session(self) -> Optional[WorkSession]:
        """Return the running session of this task, if any."""
        for session in self.work_flow:
            if session.is_open:
                return session
        return None

    def closed_sessions(self) -> List[WorkSession]:
        return [s for s in self.work_flow if not s.is_open]

    def to_dict(self) -> dict:
        """Convert Task to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'status': self.status.value,
            'created_at': self.created_at,
            'end_at': self.end_at,
            'name': self.name,
            'schedule': self.schedule,
            'work_flow': [s.to_dict() for s in self.work_flow],
            'task_notes': [n.to_dict() for n in self.task_notes],
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'Task':
        """Create Task from dictionary (JSON deserialization)."""
        if d.get('id') in (None, ""):
            raise ValueError("task record has no id")
        if not isinstance(d.get('name'), str):
            raise ValueError(f"task {d['id']} has no usable name: {d.get('name')!r}")
        try:
            status = TaskStatus(d.get('status') or TaskStatus.TODO.value)
        except ValueError:
            logger.warning("Task %s has unknown status %r, using todo", d.get('id'), d.get('status'))
            status = TaskStatus.TODO
        # Handle old data with null lists
        work_flow = d.get('work_flow') or []
        task_notes = d.get('task_notes') or []
        return cls(
            id=str(d['id']),
            name=d['name'],
            status=status,
            created_at=d.get('created_at') or "",
            end_at=d.get('end_at'),
            schedule=d.get('schedule'),
            work_flow=[WorkSession.from_dict(s) for s in work_flow],
            task_notes=[Note.from_dict(n) for n in task_notes],
        )
