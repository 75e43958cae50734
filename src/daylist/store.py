"""
TaskStore - the authoritative in-memory task collection.

Every mutating operation ends with a full save through the persistence gateway,
after the collection has been put back into default order. Operations that
name an unknown id do nothing (but still save) instead of raising.
"""
import time
from datetime import date, time as time_of_day
from typing import TYPE_CHECKING, Callable, Iterator, List, Optional, Sequence, Union

from .logs import get_logger
from .models import Priority, Task, TaskPatch, build_task
from .ordering import sort_tasks
from .recovery import ValidationError

if TYPE_CHECKING:
    from .data.gateway import PersistenceGateway

log = get_logger("store")

class TaskStore:

    def __init__(self, gateway: 'PersistenceGateway', tasks: Optional[Sequence[Task]] = None,
                 clock: Callable[[], float] = time.time):
        self.gateway = gateway
        self._tasks: List[Task] = list(tasks or [])
        self._clock = clock
        self._last_id = max((t.id for t in self._tasks), default=0)

    @classmethod
    def load(cls, gateway: 'PersistenceGateway', **kwargs) -> 'TaskStore':
        """Create a store holding whatever the gateway has saved."""
        store = cls(gateway, gateway.load_all(), **kwargs)
        log.info(f"Loaded store with {len(store)} task(s)")
        return store

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def _next_id(self) -> int:
        # Millisecond timestamp, bumped when the clock has not moved on
        candidate = int(self._clock() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def get(self, task_id: int) -> Optional[Task]:
        return next((t for t in self._tasks if t.id == task_id), None)

    def list(self) -> Sequence[Task]:
        """The live tasks in current order, as a read-only sequence."""
        return tuple(self._tasks)

    def create(self, title: str, description: str = "",
               due_date: Union[date, str, None] = None,
               due_time: Union[time_of_day, str, None] = None,
               priority: Union[Priority, str] = Priority.LOW) -> Task:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Task title is required")

        task = build_task(
            id=self._next_id(),
            title=title,
            description=(description or "").strip(),
            due_date=due_date,
            due_time=due_time,
            priority=priority,
        )
        self._tasks.append(task)
        log.info(f"Created task {task.id}: {task.title!r}")
        self.persist()
        return task

    def toggle_completed(self, task_id: int) -> Optional[Task]:
        task = self.get(task_id)
        if task is not None:
            task.completed = not task.completed
            log.info(f"Task {task_id} marked {'done' if task.completed else 'pending'}")
        else:
            log.debug(f"toggle_completed: no task {task_id}")
        self.persist()
        return task

    def delete(self, task_id: int) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        removed = len(self._tasks) != before
        if removed:
            log.info(f"Deleted task {task_id}")
        else:
            log.debug(f"delete: no task {task_id}")
        self.persist()
        return removed

    def update(self, task_id: int, patch: TaskPatch) -> Optional[Task]:
        """Apply the fields set on the patch to the task with this id."""
        task = self.get(task_id)
        if task is not None:
            patch.apply_to(task)
            log.info(f"Updated task {task_id}: {', '.join(f.value for f in patch.fields()) or 'no fields'}")
        else:
            log.debug(f"update: no task {task_id}")
        self.persist()
        return task

    def persist(self):
        sort_tasks(self._tasks)
        self.gateway.save_all(self._tasks)
        log.debug(f"Persisted {len(self._tasks)} task(s)")
