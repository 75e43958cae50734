"""
Default ordering of tasks.

Tasks with a due date come first, earliest instant first; a date without a time
counts as the start of that day. Undated tasks follow. Ties are broken by
priority, high before low, and remaining ties keep their previous order.
"""
from datetime import datetime, time
from functools import cmp_to_key
from typing import List, Optional

from .models import Task

def effective_instant(task: Task) -> Optional[datetime]:
    """The moment a task is due, or None when it has no due date."""
    if task.due_date is None:
        return None
    return datetime.combine(task.due_date, task.due_time or time.min)

def compare_tasks(a: Task, b: Task) -> int:
    """Three-way comparison: negative when a sorts before b."""
    instant_a = effective_instant(a)
    instant_b = effective_instant(b)

    if instant_a is not None and instant_b is not None:
        if instant_a != instant_b:
            return -1 if instant_a < instant_b else 1
    elif instant_a is not None:
        return -1
    elif instant_b is not None:
        return 1

    return b.priority.weight - a.priority.weight

task_sort_key = cmp_to_key(compare_tasks)

def sort_tasks(tasks: List[Task]) -> List[Task]:
    """Sort in place (stable) and return the same list."""
    tasks.sort(key=task_sort_key)
    return tasks
