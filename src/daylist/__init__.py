"""
daylist - a to-do manager that sorts tasks by when they are due.

Tasks carry an optional due date and time, a priority and a checklist. The
board groups them into overdue, today, tomorrow, upcoming and completed
sections, optionally filtered by priority.
"""

from .version import VERSION, APP_SCHEMA_VERSION
from .models import (
    Priority,
    Subtask,
    Task,
    TaskField,
    TaskPatch,
)
from .classify import Bucket, PriorityFilter, classify, summarize
from .store import TaskStore
from .session import EditSession
from .data import DataCore, DaylistContext

__version__ = VERSION

__all__ = [
    "VERSION",
    "APP_SCHEMA_VERSION",
    "Priority",
    "Subtask",
    "Task",
    "TaskField",
    "TaskPatch",
    "Bucket",
    "PriorityFilter",
    "classify",
    "summarize",
    "TaskStore",
    "EditSession",
    "DataCore",
    "DaylistContext",
]
