"""
User configuration: keybindings, colours and session policy.

Read from ``~/.todo/config.yml``::

    autosave: true
    keys:
      quit: q
      focus: enter
    theme:
      priority.high: "#ff5f5f bold"

Anything left out keeps its default. A file that cannot be used is reported
and ignored.
"""
from pathlib import Path
from typing import Dict, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .data import DATA_DIR
from .recovery import ConfigError, FileOperationError
from .logs import get_logger

log = get_logger("config")

CONFIG_FILE = DATA_DIR / "config.yml"

class KeyBindings(BaseModel):
    """Key for each action, in prompt_toolkit key notation ("q", "up", "enter", "c-s")."""

    model_config = ConfigDict(extra='forbid')

    quit: str = Field(default="q", description="Quit yat")
    back: str = Field(default="b", description="Return focus to the top-level list")
    save: str = Field(default="w", description="Write the list to the save file")
    add: str = Field(default="a", description="Add a task to the active list")
    add_subtask: str = Field(default="A", description="Add a sub-task under the selected task")
    edit: str = Field(default="e", description="Edit the selected task")
    delete: str = Field(default="d", description="Delete the selected task")
    task_up: str = Field(default="u", description="Move the selected task up")
    task_down: str = Field(default="n", description="Move the selected task down")
    up: str = Field(default="up", description="Move the selection up")
    down: str = Field(default="down", description="Move the selection down")
    focus: str = Field(default="enter", description="Focus on the selected task's sub-tasks")
    complete: str = Field(default="space", description="Toggle completion")
    increase: str = Field(default=">", description="Raise priority")
    decrease: str = Field(default="<", description="Lower priority")
    sort: str = Field(default="s", description="Sort the active list by priority")

    @field_validator('*')
    @classmethod
    def validate_key(cls, v):
        if not v:
            raise ValueError("Key binding cannot be empty")
        return v

    @model_validator(mode='after')
    def validate_unique(self):
        seen = {}
        for action, key in self.model_dump().items():
            if key in seen:
                raise ValueError(f"Key '{key}' is bound to both {seen[key]} and {action}")
            seen[key] = action
        return self

class Config(BaseModel):
    """yat configuration."""

    model_config = ConfigDict(extra='forbid')

    autosave: bool = Field(default=True, description="Save on quit")
    keys: KeyBindings = Field(default_factory=KeyBindings, description="Keybindings")
    theme: Dict[str, str] = Field(
        default_factory=dict,
        description="prompt_toolkit style overrides keyed by style class"
    )

    @classmethod
    def from_yaml(cls, text: str) -> 'Config':
        """
        Parse configuration YAML.

        Raises:
            ConfigError: on invalid YAML or settings.
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Config is not valid YAML: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError("Config must be a mapping of settings")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid config: {e}") from e

def load_config(path: Union[Path, str, None] = None, strict: bool = False) -> Config:
    """
    Load the configuration file, falling back to defaults.

    Args:
        path: Config file to read; defaults to ``~/.todo/config.yml``.
        strict: Raise instead of falling back when the file is unusable.

    Raises:
        ConfigError, FileOperationError: only when strict is set.
    """
    path = Path(path) if path is not None else CONFIG_FILE
    if not path.exists():
        log.info(f"No config file at {path}; using defaults")
        return Config()

    try:
        try:
            text = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise FileOperationError(f"Unable to read {path}: {e}") from e
        config = Config.from_yaml(text)
    except (ConfigError, FileOperationError) as e:
        if strict:
            raise
        log.warning(f"Ignoring config file {path}: {e}")
        return Config()

    log.info(f"Configuration loaded from {path}")
    return config
