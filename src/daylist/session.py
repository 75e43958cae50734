"""
EditSession - the single task currently open for editing.

The session references the same Task object the store holds. Field edits are
staged and only written back on close; checklist changes are applied to the
task immediately, and each one reconciles the staged fields through the store
so that store and session never disagree about what is saved.
"""
from typing import Any, Dict, Optional

from .logs import get_logger
from .models import Subtask, Task, TaskField, TaskPatch
from .recovery import SubtaskIndexError, ValidationError
from .store import TaskStore

log = get_logger("session")

class EditSession:

    def __init__(self, store: TaskStore):
        self.store = store
        self._task: Optional[Task] = None
        self._staged: Dict[TaskField, Any] = {}

    @property
    def is_open(self) -> bool:
        return self._task is not None

    @property
    def task(self) -> Optional[Task]:
        return self._task

    @property
    def staged(self) -> Dict[TaskField, Any]:
        return dict(self._staged)

    def _require_open(self) -> Task:
        if self._task is None:
            raise ValidationError("No task is open for editing")
        return self._task

    def open(self, task: Task) -> Task:
        """Open a task, reconciling and closing any task that was open before."""
        if self._task is not None:
            self.close()
        self._task = task
        self._staged = {f: getattr(task, f.attr) for f in TaskField}
        log.debug(f"Opened task {task.id}")
        return task

    def stage_field_edit(self, field, value) -> Any:
        """Stage a new value for title, description, dueDate or dueTime; returns the typed value."""
        self._require_open()
        field = TaskField.parse(field)
        normalized = TaskPatch.normalize(field, value)
        self._staged[field] = normalized
        return normalized

    def add_subtask(self, text: str) -> Subtask:
        task = self._require_open()
        text = (text or "").strip()
        if not text:
            raise ValidationError("Subtask text is required")
        subtask = Subtask(text=text)
        task.subtasks.append(subtask)
        log.info(f"Added subtask {len(task.subtasks)} to task {task.id}")
        self._reconcile()
        return subtask

    def toggle_subtask(self, index: int) -> Subtask:
        task = self._require_open()
        if not 0 <= index < len(task.subtasks):
            raise SubtaskIndexError(
                f"Task {task.id} has no subtask at position {index} ({len(task.subtasks)} subtask(s))"
            )
        subtask = task.subtasks[index]
        subtask.completed = not subtask.completed
        self._reconcile()
        return subtask

    def close(self) -> Optional[Task]:
        """Write staged edits back and close; does nothing when already closed."""
        if self._task is None:
            return None
        task = self._task
        self._reconcile()
        self._task = None
        self._staged = {}
        log.debug(f"Closed task {task.id}")
        return task

    def discard(self) -> Optional[Task]:
        """Close without writing staged field edits back."""
        task = self._task
        self._task = None
        self._staged = {}
        return task

    def _reconcile(self):
        patch = TaskPatch.from_values(self._staged)
        self.store.update(self._task.id, patch)
