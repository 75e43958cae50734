"""
Terminal view of the task board.

Pure presentation: the functions here read a Board or a Task and return text.
ViewState holds the only UI state, whether the completed section is expanded.
"""
from datetime import date
from typing import List, Optional

import click
from pydantic import BaseModel

from .classify import Board, Bucket
from .models import Priority, Task

SECTION_TITLES = {
    Bucket.OVERDUE: "🚨 Overdue",
    Bucket.TODAY: "📅 Today",
    Bucket.TOMORROW: "🌅 Tomorrow",
    Bucket.FUTURE: "🗓️  Upcoming",
}

PRIORITY_COLOURS = {
    Priority.HIGH: "red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "green",
}

class ViewState(BaseModel):
    show_completed: bool = True

    def toggle_completed_section(self) -> bool:
        self.show_completed = not self.show_completed
        return self.show_completed

def _style(text: str, color: bool, **styles) -> str:
    return click.style(text, **styles) if color else text

def format_date(day: Optional[date]) -> str:
    """DD/MM/YYYY, or an empty string."""
    return day.strftime("%d/%m/%Y") if day else ""

def format_due(task: Task) -> str:
    if task.due_date and task.due_time:
        return f"due {format_date(task.due_date)} at {task.due_time.strftime('%H:%M')}"
    if task.due_date:
        return f"due {format_date(task.due_date)}"
    if task.due_time:
        return f"due {task.due_time.strftime('%H:%M')}"
    return ""

def render_task_line(task: Task, color: bool = True) -> str:
    box = "[x]" if task.completed else "[ ]"
    tag = _style(f"({task.priority.value})", color, fg=PRIORITY_COLOURS[task.priority])
    title = _style(task.title, color, bold=not task.completed, strikethrough=task.completed)
    line = f"  {box} #{task.id} {title} {tag}"

    due = format_due(task)
    if due:
        line += f" · {due}"
    if task.subtasks:
        done = sum(1 for s in task.subtasks if s.completed)
        line += f" · {done}/{len(task.subtasks)} subtasks"
    if task.description:
        line += "\n      " + _style(task.description, color, dim=True)
    return line

def render_board(board: Board, view: Optional[ViewState] = None, color: bool = True) -> str:
    view = view or ViewState()
    sections = board.classification
    lines: List[str] = [board.summary.status_line]

    if board.filter.value != "all":
        lines.append(_style(f"Filter: {board.filter.value} priority", color, dim=True))

    for bucket in (Bucket.OVERDUE, Bucket.TODAY, Bucket.TOMORROW, Bucket.FUTURE):
        tasks = sections.section(bucket)
        if not tasks:
            continue
        lines.append("")
        lines.append(_style(SECTION_TITLES[bucket], color, bold=True))
        lines.extend(render_task_line(t, color) for t in tasks)

    lines.append("")
    marker = "▾" if view.show_completed else "▸"
    lines.append(_style(f"{marker} ✅ Completed ({sections.completed_count})", color, bold=True))
    if view.show_completed:
        lines.extend(render_task_line(t, color) for t in sections.completed)

    return "\n".join(lines)

def render_task_detail(task: Task, color: bool = True) -> str:
    lines = [
        _style(f"#{task.id} {task.title}", color, bold=True),
        f"  Priority: {task.priority.value}",
        f"  Status: {'done' if task.completed else 'pending'}",
    ]
    due = format_due(task)
    if due:
        lines.append(f"  {due[0].upper()}{due[1:]}")
    if task.description:
        lines.append(f"  {task.description}")
    if task.subtasks:
        lines.append("  Checklist:")
        for number, subtask in enumerate(task.subtasks, start=1):
            box = "[x]" if subtask.completed else "[ ]"
            lines.append(f"    {number}. {box} {subtask.text}")
    return "\n".join(lines)
