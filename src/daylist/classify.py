"""
Turns the flat task collection into the sections a user sees.

Classification is a pure function of the tasks, the active priority filter and
the current local calendar day. The input is expected to be in store order and
that order is kept inside every section.
"""
from pydantic import BaseModel, Field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List, Tuple, Union

from .models import Priority, Task
from .recovery import ValidationError

class PriorityFilter(Enum):
    ALL = "all"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value) -> 'PriorityFilter':
        if isinstance(value, cls):
            return value
        if isinstance(value, Priority):
            return cls(value.value)
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValidationError(
            f"Unknown priority filter: {value!r} (expected one of {', '.join(f.value for f in cls)})"
        )

    def admits(self, task: Task) -> bool:
        return self is PriorityFilter.ALL or task.priority.value == self.value

class Bucket(Enum):
    OVERDUE = "overdue"
    TODAY = "today"
    TOMORROW = "tomorrow"
    FUTURE = "future"
    COMPLETED = "completed"

Instant = Union[date, datetime, None]

def local_day(now: Instant = None) -> date:
    """
    Truncate an instant to the local calendar day.

    Timezone-aware datetimes are converted to local time first, so a UTC
    timestamp late in the evening lands on the right day.
    """
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        if now.tzinfo is not None:
            now = now.astimezone()
        return now.date()
    return now

def day_after(day: date) -> date:
    return day + timedelta(days=1)

def bucket_for(task: Task, today: date) -> Bucket:
    if task.completed:
        return Bucket.COMPLETED
    if task.due_date is None:
        return Bucket.FUTURE
    if task.due_date < today:
        return Bucket.OVERDUE
    if task.due_date == today:
        return Bucket.TODAY
    if task.due_date == day_after(today):
        return Bucket.TOMORROW
    return Bucket.FUTURE

class Classification(BaseModel):
    """The five sections, each in store order."""

    overdue: List[Task] = Field(default_factory=list)
    today: List[Task] = Field(default_factory=list)
    tomorrow: List[Task] = Field(default_factory=list)
    future: List[Task] = Field(default_factory=list)
    completed: List[Task] = Field(default_factory=list)
    completed_count: int = 0

    def section(self, bucket: Bucket) -> List[Task]:
        return getattr(self, bucket.value)

    def sections(self) -> List[Tuple[Bucket, List[Task]]]:
        return [(b, self.section(b)) for b in Bucket]

def classify(tasks: Iterable[Task], filter_priority=PriorityFilter.ALL, today: Instant = None) -> Classification:
    """
    Distribute tasks over the five sections.

    The priority filter only hides pending tasks: completed tasks are always
    listed in the completed section whatever the filter is.
    """
    active_filter = PriorityFilter.parse(filter_priority)
    day = local_day(today)
    sections = {b: [] for b in Bucket}

    for task in tasks:
        if not task.completed and not active_filter.admits(task):
            continue
        sections[bucket_for(task, day)].append(task)

    return Classification(
        overdue=sections[Bucket.OVERDUE],
        today=sections[Bucket.TODAY],
        tomorrow=sections[Bucket.TOMORROW],
        future=sections[Bucket.FUTURE],
        completed=sections[Bucket.COMPLETED],
        completed_count=len(sections[Bucket.COMPLETED]),
    )

def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural

class DailySummary(BaseModel):
    """Counts behind the status line, computed over the unfiltered collection."""

    overdue_count: int = 0
    today_pending: int = 0
    today_done: int = 0

    @property
    def today_total(self) -> int:
        return self.today_pending + self.today_done

    @property
    def has_overdue(self) -> bool:
        return self.overdue_count > 0

    @property
    def has_today(self) -> bool:
        return self.today_total > 0

    @property
    def status_line(self) -> str:
        parts = []
        if self.has_overdue:
            parts.append(
                f"🚨 You have {self.overdue_count} "
                f"{_plural(self.overdue_count, 'overdue task', 'overdue tasks')}!"
            )
        if self.has_today:
            parts.append(
                f"Today: {self.today_pending} "
                f"{_plural(self.today_pending, 'pending task', 'pending tasks')} "
                f"and {self.today_done} done."
            )
        if not parts:
            return "Nothing due today!"
        return " ".join(parts)

def summarize(tasks: Iterable[Task], today: Instant = None) -> DailySummary:
    day = local_day(today)
    overdue = pending = done = 0
    for task in tasks:
        if task.due_date is None:
            continue
        if task.due_date < day and not task.completed:
            overdue += 1
        elif task.due_date == day:
            if task.completed:
                done += 1
            else:
                pending += 1
    return DailySummary(overdue_count=overdue, today_pending=pending, today_done=done)

class Board(BaseModel):
    """Everything the view needs for one full redraw."""

    day: date
    filter: PriorityFilter = PriorityFilter.ALL
    classification: Classification
    summary: DailySummary

def build_board(tasks: Iterable[Task], filter_priority=PriorityFilter.ALL, now: Instant = None) -> Board:
    tasks = list(tasks)
    day = local_day(now)
    active_filter = PriorityFilter.parse(filter_priority)
    return Board(
        day=day,
        filter=active_filter,
        classification=classify(tasks, active_filter, day),
        summary=summarize(tasks, day),
    )
