from pydantic import BaseModel, ConfigDict, Field, RootModel, WithJsonSchema, field_serializer, field_validator
from pydantic import ValidationError as PydanticValidationError
from datetime import date, time
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from .recovery import ValidationError

# Names used by the first release of the app, still found in old data files
_LEGACY_PRIORITIES = {
    "baixa": "low",
    "media": "medium",
    "média": "medium",
    "alta": "high",
}

_PRIORITY_WEIGHTS = {"low": 1, "medium": 2, "high": 3}

class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def weight(self) -> int:
        """Ordering weight, higher sorts first."""
        return _PRIORITY_WEIGHTS[self.value]

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            key = _LEGACY_PRIORITIES.get(key, key)
            for member in cls:
                if member.value == key:
                    return member
        return None

class TaskField(Enum):
    """The task fields that can be edited through an edit session."""
    TITLE = "title"
    DESCRIPTION = "description"
    DUE_DATE = "dueDate"
    DUE_TIME = "dueTime"

    @property
    def attr(self) -> str:
        return _FIELD_ATTRS[self.value]

    @classmethod
    def parse(cls, value) -> 'TaskField':
        """Accept a TaskField, its wire name ('dueDate') or its attribute name ('due_date')."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if value in (member.value, member.attr):
                return member
        raise ValidationError(f"Unknown task field: {value!r}")

_FIELD_ATTRS = {
    "title": "title",
    "description": "description",
    "dueDate": "due_date",
    "dueTime": "due_time",
}

def _blank_to_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v

def _hour_minute(v):
    if v is None:
        return v
    if v.tzinfo is not None:
        raise ValueError("Due time must be a local time of day without a UTC offset")
    return v.replace(second=0, microsecond=0)

def _text_or_empty(v):
    if v is None:
        return ""
    if isinstance(v, str):
        return v.strip()
    return v

class Subtask(BaseModel):
    """A checklist item owned by a single task."""

    model_config = ConfigDict(validate_assignment=True)

    text: str = Field(description="What needs to be done")
    completed: bool = Field(default=False, description="Whether the item is checked")

class Task(BaseModel):
    """A to-do item with optional due date/time, a priority and a checklist."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: int = Field(description="Unique identifier within the store")
    title: str = Field(description="Short human readable title")
    description: Annotated[str, WithJsonSchema({"type": ["string", "null"]})] = Field(
        default="",
        description="Free text notes"
    )
    due_date: Optional[date] = Field(default=None, alias="dueDate", description="Calendar day the task is due")
    due_time: Optional[time] = Field(default=None, alias="dueTime", description="Time of day the task is due")
    # Stored data may carry legacy priority names or null, so the schema only requires a string
    priority: Annotated[Priority, WithJsonSchema({"type": ["string", "null"]})] = Field(
        default=Priority.LOW,
        description="low, medium or high"
    )
    subtasks: List[Subtask] = Field(
        default_factory=list,
        description="Checklist items in display order"
    )
    completed: bool = Field(default=False, description="Whether the task is done")

    @field_validator('due_date', 'due_time', mode='before')
    @classmethod
    def empty_means_absent(cls, v):
        return _blank_to_none(v)

    @field_validator('due_time')
    @classmethod
    def due_time_is_hour_minute(cls, v):
        return _hour_minute(v)

    @field_validator('description', mode='before')
    @classmethod
    def description_defaults_to_empty(cls, v):
        return "" if v is None else v

    @field_validator('priority', mode='before')
    @classmethod
    def accept_legacy_priority(cls, v):
        if v is None:
            return Priority.LOW
        if isinstance(v, str):
            return Priority(v)
        return v

    @field_serializer('due_time', when_used='json')
    def serialize_due_time(self, v: Optional[time]):
        return v.strftime("%H:%M") if v is not None else None

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode='json', by_alias=True)

class TaskPatch(BaseModel):
    """
    Partial update of a task's editable fields.

    Only the fields explicitly set on the patch are applied, so a patch can clear
    a due date by setting it to None.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = Field(default=None, alias="dueDate")
    due_time: Optional[time] = Field(default=None, alias="dueTime")

    @field_validator('title', mode='before')
    @classmethod
    def title_not_blank(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Task title cannot be empty")
        return v.strip() if isinstance(v, str) else v

    @field_validator('description', mode='before')
    @classmethod
    def strip_description(cls, v):
        return _text_or_empty(v)

    @field_validator('due_date', 'due_time', mode='before')
    @classmethod
    def empty_means_absent(cls, v):
        return _blank_to_none(v)

    @field_validator('due_time')
    @classmethod
    def due_time_is_hour_minute(cls, v):
        return _hour_minute(v)

    @classmethod
    def from_edits(cls, edits: Dict[Any, Any]) -> 'TaskPatch':
        """Build a patch from {field: value} pairs, raising ValidationError on bad values."""
        values = {TaskField.parse(k).attr: v for k, v in edits.items()}
        try:
            return cls(**values)
        except PydanticValidationError as e:
            raise ValidationError(_first_error(e)) from e

    @classmethod
    def from_values(cls, values: Dict[TaskField, Any]) -> 'TaskPatch':
        """Build a patch from values that are already typed and checked."""
        return cls.model_construct(**{f.attr: v for f, v in values.items()})

    @classmethod
    def normalize(cls, field: TaskField, value: Any) -> Any:
        """Validate a single field value and return it in its typed form."""
        patch = cls.from_edits({field: value})
        return getattr(patch, field.attr)

    def fields(self) -> List[TaskField]:
        return [f for f in TaskField if f.attr in self.model_fields_set]

    def apply_to(self, task: Task) -> Task:
        for f in self.fields():
            setattr(task, f.attr, getattr(self, f.attr))
        return task

class TaskList(RootModel[List[Task]]):
    """The full task collection as it is stored."""
    root: List[Task] = Field(default_factory=list)

def _first_error(error: PydanticValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    where = ".".join(str(p) for p in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{where}: {message}" if where else message

def build_task(**values) -> Task:
    """Construct a Task, translating pydantic failures into ValidationError."""
    try:
        return Task(**values)
    except PydanticValidationError as e:
        raise ValidationError(_first_error(e)) from e
