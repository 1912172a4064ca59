"""Configured key → abstract command."""
from typing import Dict, List, Optional, Tuple

from .config import KeyBindings
from .dispatch import CommandType

ACTIONS: Dict[str, CommandType] = {
    "quit": CommandType.QUIT,
    "back": CommandType.FOCUS_OUT,
    "save": CommandType.SAVE,
    "add": CommandType.ADD,
    "add_subtask": CommandType.ADD_SUBTASK,
    "edit": CommandType.EDIT,
    "delete": CommandType.DELETE,
    "task_up": CommandType.MOVE_TASK_UP,
    "task_down": CommandType.MOVE_TASK_DOWN,
    "up": CommandType.SELECT_UP,
    "down": CommandType.SELECT_DOWN,
    "focus": CommandType.FOCUS_IN,
    "complete": CommandType.TOGGLE_COMPLETE,
    "increase": CommandType.INCREASE_PRIORITY,
    "decrease": CommandType.DECREASE_PRIORITY,
    "sort": CommandType.SORT_BY_PRIORITY,
}

# Spellings that prompt_toolkit treats as the same key
KEY_ALIASES: Dict[str, str] = {
    "\n": "enter",
    "\r": "enter",
    "c-m": "enter",
    " ": "space",
    "\t": "tab",
    "c-i": "tab",
    "esc": "escape",
}

def normalize_key(key: str) -> str:
    return KEY_ALIASES.get(key, key)

class Keymap:
    """Lookup table from a key name to the command it triggers."""

    def __init__(self, bindings: Optional[KeyBindings] = None):
        bindings = bindings if bindings is not None else KeyBindings()
        self._by_key: Dict[str, CommandType] = {}
        for action, key in bindings.model_dump().items():
            self._by_key[normalize_key(key)] = ACTIONS[action]

    def lookup(self, key: str) -> Optional[CommandType]:
        return self._by_key.get(normalize_key(key))

    def bindings(self) -> List[Tuple[str, CommandType]]:
        return list(self._by_key.items())

    def key_for(self, command_type: CommandType) -> Optional[str]:
        return next((key for key, ct in self._by_key.items() if ct == command_type), None)
