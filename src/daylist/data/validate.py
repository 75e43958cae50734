"""
Schema checks for stored task data.

The JSON schema is generated from the pydantic models, so the file format and
the in-memory model cannot drift apart.
"""
from functools import lru_cache
from typing import Any

from jsonschema import validate, ValidationError, SchemaError

from daylist.logs import get_logger
from daylist.models import TaskList

log = get_logger("data.validate")

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"

@lru_cache(maxsize=1)
def tasks_schema() -> dict:
    """JSON schema of the stored task collection (a JSON array of tasks)."""
    schema = TaskList.model_json_schema(by_alias=True)
    schema["$schema"] = JSON_SCHEMA_DIALECT
    return schema

def validate_tasks_payload(data: Any) -> bool:
    """
    Check decoded JSON against the task collection schema.

    Returns:
        True if the payload is valid, False otherwise.
    """
    try:
        validate(instance=data, schema=tasks_schema())
        return True
    except ValidationError as e:
        path = "/".join(str(p) for p in e.absolute_path) or "<root>"
        log.warning(f"Stored tasks FAILED schema validation at {path}: {e.message}")
        return False
    except SchemaError as e:
        log.error(f"Validation failed: the task schema itself is invalid. Error: {e.message}")
        return False
