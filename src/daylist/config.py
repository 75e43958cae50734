"""
User configuration.

Settings come from a YAML file (``~/.config/daylist/config.yml`` or the path in
``DAYLIST_CONFIG``); ``DAYLIST_DATA_DIR`` overrides where tasks are stored.
A missing or broken file never stops the app, defaults are used instead.
"""
import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .classify import PriorityFilter
from .logs import get_logger
from .models import Priority

log = get_logger("config")

def default_config_path() -> Path:
    override = os.getenv('DAYLIST_CONFIG')
    if override:
        return Path(override)
    return Path.home() / ".config" / "daylist" / "config.yml"

def default_data_dir() -> Path:
    return Path.home() / ".local" / "share" / "daylist" / "data"

class Settings(BaseModel):
    data_dir: Path = Field(default_factory=default_data_dir, description="Directory holding tasks.json")
    default_priority: Priority = Field(default=Priority.LOW, description="Priority for new tasks when none is given")
    default_filter: PriorityFilter = Field(default=PriorityFilter.ALL, description="Priority filter applied on start")
    show_completed: bool = Field(default=True, description="Whether the completed section starts expanded")

    @field_validator('data_dir', mode='before')
    @classmethod
    def expand_user(cls, v):
        if isinstance(v, str):
            return Path(v).expanduser()
        return v

    def to_yaml_dict(self) -> dict:
        return self.model_dump(mode='json')

def load_settings(path: Optional[Union[Path, str]] = None) -> Settings:
    """Read settings from YAML, falling back to defaults on any problem."""
    path = Path(path) if path else default_config_path()
    data = {}

    if path.exists():
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, OSError) as e:
            log.warning(f"Could not read config {path}, using defaults: {e}")
            data = {}
        if not isinstance(data, dict):
            log.warning(f"Config {path} is not a mapping, using defaults")
            data = {}

    data_dir = os.getenv('DAYLIST_DATA_DIR')
    if data_dir:
        data['data_dir'] = data_dir

    try:
        return Settings(**data)
    except PydanticValidationError as e:
        log.warning(f"Invalid config {path}, using defaults: {e}")
        return Settings(data_dir=data_dir) if data_dir else Settings()
