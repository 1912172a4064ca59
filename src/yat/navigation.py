"""
Navigation and selection state for a task tree.

Focus is either the root sequence (``focus is None``) or the sub-tasks of one
root task (``focus`` holds its index). The selection is kept consistent with
the tree by calling ``reclamp()`` after every structural mutation.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .models import Location, TaskTree
from .logs import get_logger

log = get_logger("navigation")

class Direction(Enum):
    UP = -1
    DOWN = 1

class Navigation(BaseModel):
    """Which sequence is active and which item is selected in it."""

    focus: Optional[int] = Field(default=None, description="Root index of the focused parent, None at root level")
    selected_root: Optional[int] = Field(default=None, description="Selected index in the root sequence")
    selected_child: Optional[int] = Field(default=None, description="Selected index among the focused parent's sub-tasks")

    @classmethod
    def for_tree(cls, tree: TaskTree) -> 'Navigation':
        """Initial state: root focus, first task selected if there is one."""
        return cls(selected_root=0 if tree.tasks else None)

    @property
    def at_root(self) -> bool:
        return self.focus is None

    @property
    def active_index(self) -> Optional[int]:
        return self.selected_root if self.at_root else self.selected_child

    @property
    def location(self) -> Optional[Location]:
        """Location of the selected task in the active sequence, if any."""
        if self.at_root:
            if self.selected_root is None:
                return None
            return Location(root=self.selected_root)
        if self.selected_child is None:
            return None
        return Location(root=self.focus, child=self.selected_child)

    def active_sequence(self, tree: TaskTree) -> list:
        return tree.siblings(self.focus)

    def select(self, index: int, tree: TaskTree):
        """Point the active selection at `index`, clamped into range."""
        size = len(self.active_sequence(tree))
        if size == 0:
            self.reclamp(tree)
            return
        index = max(0, min(index, size - 1))
        if self.at_root:
            self.selected_root = index
        else:
            self.selected_child = index

    def move_selection(self, direction: Direction, tree: TaskTree) -> bool:
        """Step the active selection, saturating at both ends.

        Returns True if the selection moved.
        """
        current = self.active_index
        if current is None:
            return False
        before = current
        self.select(current + direction.value, tree)
        return self.active_index != before

    def focus_in(self, tree: TaskTree) -> bool:
        """Focus on the selected root task's sub-tasks, if it has any."""
        if not self.at_root:
            log.debug("Already focused on a sub-task list; cannot nest deeper")
            return False
        if self.selected_root is None or not tree.tasks[self.selected_root].subtasks:
            return False
        self.focus = self.selected_root
        self.selected_child = 0
        return True

    def focus_out(self) -> bool:
        if self.at_root:
            return False
        self.focus = None
        self.selected_child = None
        return True

    def reclamp(self, tree: TaskTree):
        """Pull every index back into range after the tree changed shape."""
        if not tree.tasks:
            if self.selected_root is not None or self.focus is not None:
                log.debug("Task list is empty; clearing selection")
            self.focus = None
            self.selected_root = None
            self.selected_child = None
            return

        size = len(tree.tasks)
        if self.selected_root is None:
            self.selected_root = 0
        elif self.selected_root >= size:
            self.selected_root = size - 1

        if self.focus is None:
            self.selected_child = None
            return

        if self.focus >= size:
            self.focus = size - 1
        self.selected_root = self.focus
        children = tree.tasks[self.focus].subtasks
        if not children:
            log.debug(f"Task {self.focus} has no sub-tasks left; returning to root")
            self.focus = None
            self.selected_child = None
        elif self.selected_child is None:
            self.selected_child = 0
        elif self.selected_child >= len(children):
            self.selected_child = len(children) - 1
