"""
Persistence gateways: load-all / save-all of the task collection.

Stored data is a JSON array of task objects. Reading never fails: a missing,
unreadable or malformed collection is reported in the log and treated as
"no saved data".
"""
import abc
import json
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from daylist.logs import get_logger
from daylist.models import Task, TaskList
from daylist.recovery import CorruptionError, FileOperationError
from .io import atomic_write, load_json_file, DATA_JSON
from .validate import validate_tasks_payload

log = get_logger("data.gateway")

def dump_tasks(tasks: Sequence[Task]) -> List[dict]:
    return TaskList(list(tasks)).model_dump(mode='json', by_alias=True)

def parse_tasks(payload: Any) -> List[Task]:
    """Turn decoded JSON into tasks, raising CorruptionError when it is not a valid collection."""
    if not validate_tasks_payload(payload):
        raise CorruptionError("Stored tasks do not match the task schema")
    try:
        return TaskList.model_validate(payload).root
    except PydanticValidationError as e:
        raise CorruptionError(f"Stored tasks could not be parsed: {e}") from e

class PersistenceGateway(abc.ABC):
    """Durable medium for the whole task collection."""

    @abc.abstractmethod
    def save_all(self, tasks: Sequence[Task]) -> None:
        pass

    @abc.abstractmethod
    def load_all(self) -> List[Task]:
        pass

class JsonFileGateway(PersistenceGateway):
    """Keeps the collection in a single JSON file, rewritten atomically on every save."""

    def __init__(self, path: Union[Path, str]):
        self.path = Path(path)

    def save_all(self, tasks: Sequence[Task]) -> None:
        atomic_write(DATA_JSON, self.path, dump_tasks(tasks), create_dirs=True)
        log.debug(f"Saved {len(tasks)} task(s) to {self.path}")

    def load_all(self) -> List[Task]:
        try:
            payload = load_json_file(self.path)
            if payload is None:
                log.info(f"No saved tasks at {self.path}, starting empty")
                return []
            tasks = parse_tasks(payload)
        except (CorruptionError, FileOperationError) as e:
            log.warning(f"Ignoring saved tasks at {self.path}: {e}")
            return []
        log.debug(f"Loaded {len(tasks)} task(s) from {self.path}")
        return tasks

class MemoryGateway(PersistenceGateway):
    """Holds the serialized collection in memory; counts saves."""

    def __init__(self, text: Optional[str] = None):
        self.text = text
        self.save_count = 0

    def save_all(self, tasks: Sequence[Task]) -> None:
        self.text = json.dumps(dump_tasks(tasks), ensure_ascii=False)
        self.save_count += 1

    def load_all(self) -> List[Task]:
        if not self.text:
            return []
        try:
            return parse_tasks(json.loads(self.text))
        except (json.JSONDecodeError, CorruptionError) as e:
            log.warning(f"Ignoring saved tasks in memory: {e}")
            return []
