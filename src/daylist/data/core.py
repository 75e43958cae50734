"""
DataCore - paths and the application context for daylist.

DaylistContext is created once per run. Entering it loads the saved tasks,
leaving it closes any open edit session and saves everything, so the CLI (or
any other front end) only ever talks to one explicit object. Leaving because of
a recoverable error drops the open edit and does not save again.
"""
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Union

from daylist.classify import Board, PriorityFilter, build_board
from daylist.config import Settings, load_settings
from daylist.logs import get_logger
from daylist.models import Priority, Subtask, Task
from daylist.recovery import NotFoundError, RecoverableError
from daylist.render import ViewState
from daylist.session import EditSession
from daylist.store import TaskStore
from .gateway import JsonFileGateway, PersistenceGateway

log = get_logger("data")

class DaylistContext:
    """Main context object owning the task store, the edit session and the view state."""

    def __init__(self, gateway: PersistenceGateway, settings: Optional[Settings] = None, **store_options):
        self.gateway = gateway
        self.settings = settings or Settings()
        self.filter = self.settings.default_filter
        self.view = ViewState(show_completed=self.settings.show_completed)
        self._store_options = store_options
        self.store: Optional[TaskStore] = None
        self.session: Optional[EditSession] = None

    def __enter__(self):
        """Context manager entry - load saved tasks."""
        return self.init()

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - save all changes, unless a rejected action is unwinding."""
        rejected = exc_type is not None and issubclass(exc_type, RecoverableError)
        self.teardown(aborted=rejected)

    def init(self) -> 'DaylistContext':
        self.store = TaskStore.load(self.gateway, **self._store_options)
        self.session = EditSession(self.store)
        return self

    def teardown(self, aborted: bool = False):
        if self.store is None:
            return
        if aborted:
            # Accepted mutations were already saved by the store
            self.session.discard()
            return
        self.session.close()
        self.store.persist()

    # Intents coming from the view

    def create(self, title: str, description: str = "", due_date=None, due_time=None,
               priority: Union[Priority, str, None] = None) -> Task:
        if priority is None:
            priority = self.settings.default_priority
        return self.store.create(title, description, due_date, due_time, priority)

    def toggle_completed(self, task_id: int) -> Optional[Task]:
        return self.store.toggle_completed(task_id)

    def delete(self, task_id: int) -> bool:
        open_task = self.session.task
        removed = self.store.delete(task_id)
        if open_task is not None and open_task.id == task_id:
            self.session.discard()
        return removed

    def get(self, task_id: int) -> Task:
        task = self.store.get(task_id)
        if task is None:
            raise NotFoundError(f"No task with id {task_id}")
        return task

    def open_task(self, task_id: int) -> Task:
        return self.session.open(self.get(task_id))

    def close_task(self) -> Optional[Task]:
        return self.session.close()

    def cancel_edit(self) -> Optional[Task]:
        return self.session.discard()

    def stage_field_edit(self, field, value):
        return self.session.stage_field_edit(field, value)

    def add_subtask(self, text: str) -> Subtask:
        return self.session.add_subtask(text)

    def toggle_subtask(self, index: int) -> Subtask:
        return self.session.toggle_subtask(index)

    def set_filter(self, value) -> PriorityFilter:
        self.filter = PriorityFilter.parse(value)
        return self.filter

    def clear_filter(self) -> PriorityFilter:
        return self.set_filter(PriorityFilter.ALL)

    def toggle_completed_section_visibility(self) -> bool:
        return self.view.toggle_completed_section()

    def snapshot(self, now: Union[date, datetime, None] = None) -> Board:
        return build_board(self.store.list(), self.filter, now)

class DataCore:
    DATA_FILE_NAME = "tasks.json"

    @staticmethod
    def data_file(settings: Settings) -> Path:
        return Path(settings.data_dir) / DataCore.DATA_FILE_NAME

    @staticmethod
    def open_context(settings: Optional[Settings] = None) -> DaylistContext:
        """Context backed by the JSON file in the configured data directory (not yet loaded)."""
        settings = settings or load_settings()
        path = DataCore.data_file(settings)
        log.debug(f"Using task file {path}")
        return DaylistContext(JsonFileGateway(path), settings)
