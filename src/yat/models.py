from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum
from typing import Optional, List, Union

from .recovery import InvariantViolation
from .logs import get_logger

log = get_logger("models")

class Priority(Enum):
    """Task priority. Values are the letters used in the save file."""
    NONE = " "
    LOW = "C"
    MEDIUM = "B"
    HIGH = "A"

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)

    def step(self, delta: int) -> 'Priority':
        """Move up or down one level, saturating at NONE and HIGH."""
        members = list(type(self))
        index = max(0, min(self.rank + delta, len(members) - 1))
        return members[index]

    def __lt__(self, other):
        if self.__class__ is other.__class__:
            return self.rank < other.rank
        return NotImplemented

    def __le__(self, other):
        if self.__class__ is other.__class__:
            return self.rank <= other.rank
        return NotImplemented

    def __gt__(self, other):
        if self.__class__ is other.__class__:
            return self.rank > other.rank
        return NotImplemented

    def __ge__(self, other):
        if self.__class__ is other.__class__:
            return self.rank >= other.rank
        return NotImplemented

class MoveResult(Enum):
    MOVED = "moved"
    BOUNDARY = "boundary"

def _single_line(v: str) -> str:
    if "\n" in v or "\r" in v:
        raise ValueError("Task content must be a single line")
    return v

class Location(BaseModel):
    """Address of a task: a root index, or a (root index, child index) pair."""

    model_config = ConfigDict(frozen=True)

    root: int = Field(ge=0, description="Index into the root task sequence")
    child: Optional[int] = Field(default=None, ge=0, description="Index into the root task's sub-tasks")

    @property
    def is_child(self) -> bool:
        return self.child is not None

    def __str__(self) -> str:
        if not self.is_child:
            return f"{self.root}"
        return f"{self.root}/{self.child}"

class TaskTree(BaseModel):
    """The full todo list: an ordered sequence of top-level tasks."""

    tasks: List['TaskTree.Task'] = Field(
        default_factory=list,
        description="Top-level tasks in display order"
    )

    def _sequence(self, parent: Optional[int]) -> list:
        if parent is None:
            return self.tasks
        if not 0 <= parent < len(self.tasks):
            log.error(f"Parent index {parent} out of range (0..{len(self.tasks) - 1})")
            raise InvariantViolation(f"No top-level task at index {parent}")
        return self.tasks[parent].subtasks

    def _resolve(self, location: Location) -> tuple:
        """Return the sibling sequence holding `location` and the index within it."""
        if not location.is_child:
            sequence, index = self.tasks, location.root
        else:
            sequence, index = self._sequence(location.root), location.child
        if not 0 <= index < len(sequence):
            log.error(f"Location {location} out of range")
            raise InvariantViolation(f"No task at location {location}")
        return sequence, index

    def get(self, location: Location) -> Union['TaskTree.Task', 'TaskTree.SubTask']:
        """Find a task by its location."""
        sequence, index = self._resolve(location)
        return sequence[index]

    def siblings(self, parent: Optional[int] = None) -> list:
        """The root sequence, or the sub-tasks of root task `parent`."""
        return self._sequence(parent)

    def add(self, content: str, parent: Optional[int] = None) -> int:
        """Append a new task to the root sequence or to a parent's sub-tasks."""
        sequence = self._sequence(parent)
        if parent is None:
            sequence.append(TaskTree.Task(content=content))
        else:
            sequence.append(TaskTree.SubTask(content=content))
        log.debug(f"Added task {len(sequence) - 1} under parent {parent}")
        return len(sequence) - 1

    def edit(self, location: Location, content: str):
        self.get(location).content = content

    def delete(self, location: Location) -> Union['TaskTree.Task', 'TaskTree.SubTask']:
        """Remove a task; a top-level task takes its sub-tasks with it."""
        sequence, index = self._resolve(location)
        log.debug(f"Deleting task at {location}")
        return sequence.pop(index)

    def _swap(self, location: Location, offset: int) -> MoveResult:
        sequence, index = self._resolve(location)
        target = index + offset
        if not 0 <= target < len(sequence):
            return MoveResult.BOUNDARY
        sequence[index], sequence[target] = sequence[target], sequence[index]
        return MoveResult.MOVED

    def move_up(self, location: Location) -> MoveResult:
        return self._swap(location, -1)

    def move_down(self, location: Location) -> MoveResult:
        return self._swap(location, +1)

    def toggle_complete(self, location: Location) -> bool:
        task = self.get(location)
        task.completed = not task.completed
        return task.completed

    def set_priority(self, location: Location, delta: int) -> Priority:
        """Raise (+1) or lower (-1) a task's priority, saturating at the bounds."""
        if delta not in (1, -1):
            raise ValueError(f"Priority delta must be +1 or -1, got {delta}")
        task = self.get(location)
        task.priority = task.priority.step(delta)
        return task.priority

    def sort_by_priority(self, parent: Optional[int] = None) -> bool:
        """Stable sort of one sibling sequence, highest priority first.

        Returns True if the order changed.
        """
        sequence = self._sequence(parent)
        before = [id(task) for task in sequence]
        sequence.sort(key=lambda task: task.priority.rank, reverse=True)
        return before != [id(task) for task in sequence]

    def count(self) -> int:
        """Total number of tasks, sub-tasks included."""
        return sum(1 + len(task.subtasks) for task in self.tasks)

    class SubTask(BaseModel):
        model_config = ConfigDict(validate_assignment=True)

        content: str = Field(default="", description="The task text.")
        completed: bool = Field(default=False, description="Whether the sub-task is done.")
        priority: Priority = Field(default=Priority.NONE, description="Sub-task priority.")

        @field_validator('content')
        @classmethod
        def validate_content(cls, v):
            return _single_line(v)

    class Task(BaseModel):
        model_config = ConfigDict(validate_assignment=True)

        content: str = Field(default="", description="The task text.")
        completed: bool = Field(default=False, description="Whether the task is done.")
        priority: Priority = Field(default=Priority.NONE, description="Task priority.")
        subtasks: List['TaskTree.SubTask'] = Field(
            default_factory=list,
            description="Ordered sub-tasks; these cannot nest further"
        )

        @field_validator('content')
        @classmethod
        def validate_content(cls, v):
            return _single_line(v)

TaskTree.model_rebuild()
