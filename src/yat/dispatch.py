"""
Abstract commands and the dispatcher that applies them to a session.

Adapters translate raw input into ``Command`` values; the dispatcher derives
the target location from the session's navigation state and calls the
matching tree or navigation operation.
"""
from enum import Enum
from typing import Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .models import MoveResult
from .navigation import Direction
from .logs import get_logger

if TYPE_CHECKING:
    from .session import Session

log = get_logger("dispatch")

class CommandType(Enum):
    ADD = "add"
    ADD_SUBTASK = "add_subtask"
    EDIT = "edit"
    DELETE = "delete"
    MOVE_TASK_UP = "move_task_up"
    MOVE_TASK_DOWN = "move_task_down"
    SELECT_UP = "select_up"
    SELECT_DOWN = "select_down"
    FOCUS_IN = "focus_in"
    FOCUS_OUT = "focus_out"
    TOGGLE_COMPLETE = "toggle_complete"
    INCREASE_PRIORITY = "increase_priority"
    DECREASE_PRIORITY = "decrease_priority"
    SORT_BY_PRIORITY = "sort_by_priority"
    SAVE = "save"
    QUIT = "quit"

TEXT_COMMANDS = (CommandType.ADD, CommandType.ADD_SUBTASK, CommandType.EDIT)

class Command(BaseModel):
    """One abstract user action."""

    model_config = ConfigDict(frozen=True)

    type: CommandType = Field(description="Which operation to run")
    text: Optional[str] = Field(default=None, description="Task text for add and edit")

    @model_validator(mode='after')
    def validate_text(self):
        if self.type == CommandType.EDIT and self.text is None:
            raise ValueError("edit command needs text")
        if self.text is not None and self.type not in TEXT_COMMANDS:
            raise ValueError(f"{self.type.value} command takes no text")
        return self

class DispatchStatus(Enum):
    APPLIED = "applied"
    NOOP = "noop"

class DispatchResult(BaseModel):
    command: Command = Field(description="The command that was dispatched")
    status: DispatchStatus = Field(description="Whether anything changed")
    quit: bool = Field(default=False, description="The adapter should end its loop")
    data: Optional[bytes] = Field(default=None, description="Encoded save file bytes, after a save")

    @property
    def applied(self) -> bool:
        return self.status == DispatchStatus.APPLIED

class Dispatcher:
    """Applies commands to one session's tree and navigation state."""

    def __init__(self, session: 'Session'):
        self.session = session
        self._handlers = {
            CommandType.ADD: self._add,
            CommandType.ADD_SUBTASK: self._add_subtask,
            CommandType.EDIT: self._edit,
            CommandType.DELETE: self._delete,
            CommandType.MOVE_TASK_UP: lambda c: self._move(c, up=True),
            CommandType.MOVE_TASK_DOWN: lambda c: self._move(c, up=False),
            CommandType.SELECT_UP: lambda c: self._select(c, Direction.UP),
            CommandType.SELECT_DOWN: lambda c: self._select(c, Direction.DOWN),
            CommandType.FOCUS_IN: self._focus_in,
            CommandType.FOCUS_OUT: self._focus_out,
            CommandType.TOGGLE_COMPLETE: self._toggle_complete,
            CommandType.INCREASE_PRIORITY: lambda c: self._priority(c, +1),
            CommandType.DECREASE_PRIORITY: lambda c: self._priority(c, -1),
            CommandType.SORT_BY_PRIORITY: self._sort,
            CommandType.SAVE: self._save,
            CommandType.QUIT: self._quit,
        }

    @property
    def tree(self):
        return self.session.tree

    @property
    def nav(self):
        return self.session.navigation

    def dispatch(self, command: Command) -> DispatchResult:
        """
        Run one command.

        Raises:
            InvariantViolation: if navigation state pointed outside the tree.
            FileOperationError: if a save could not be written.
        """
        result = self._handlers[command.type](command)
        log.debug(f"{command.type.value}: {result.status.value}")
        return result

    @staticmethod
    def _done(command: Command, changed: bool = True, **kwargs) -> DispatchResult:
        status = DispatchStatus.APPLIED if changed else DispatchStatus.NOOP
        return DispatchResult(command=command, status=status, **kwargs)

    def _add(self, command):
        index = self.tree.add(command.text or "", parent=self.nav.focus)
        self.nav.select(index, self.tree)
        return self._done(command)

    def _add_subtask(self, command):
        parent = self.nav.selected_root
        if not self.nav.at_root or parent is None:
            return self._done(command, False)
        index = self.tree.add(command.text or "", parent=parent)
        self.nav.focus_in(self.tree)
        self.nav.select(index, self.tree)
        return self._done(command)

    def _edit(self, command):
        location = self.nav.location
        if location is None:
            return self._done(command, False)
        self.tree.edit(location, command.text)
        return self._done(command)

    def _delete(self, command):
        location = self.nav.location
        if location is None:
            return self._done(command, False)
        self.tree.delete(location)
        self.nav.reclamp(self.tree)
        return self._done(command)

    def _move(self, command, up: bool):
        location = self.nav.location
        if location is None:
            return self._done(command, False)
        if up:
            moved = self.tree.move_up(location)
        else:
            moved = self.tree.move_down(location)
        if moved == MoveResult.BOUNDARY:
            return self._done(command, False)
        self.nav.select(self.nav.active_index + (-1 if up else 1), self.tree)
        return self._done(command)

    def _select(self, command, direction: Direction):
        return self._done(command, self.nav.move_selection(direction, self.tree))

    def _focus_in(self, command):
        return self._done(command, self.nav.focus_in(self.tree))

    def _focus_out(self, command):
        return self._done(command, self.nav.focus_out())

    def _toggle_complete(self, command):
        location = self.nav.location
        if location is None:
            return self._done(command, False)
        self.tree.toggle_complete(location)
        return self._done(command)

    def _priority(self, command, delta: int):
        location = self.nav.location
        if location is None:
            return self._done(command, False)
        before = self.tree.get(location).priority
        return self._done(command, self.tree.set_priority(location, delta) != before)

    def _sort(self, command):
        sequence = self.nav.active_sequence(self.tree)
        if not sequence:
            return self._done(command, False)
        selected = sequence[self.nav.active_index]
        if not self.tree.sort_by_priority(self.nav.focus):
            return self._done(command, False)
        # Keep the same task selected
        index = next(i for i, task in enumerate(sequence) if task is selected)
        self.nav.select(index, self.tree)
        return self._done(command)

    def _save(self, command):
        return self._done(command, data=self.session.save())

    def _quit(self, command):
        data = self.session.save() if self.session.autosave else None
        return self._done(command, quit=True, data=data)
