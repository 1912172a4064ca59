"""Read-only render snapshots of a session."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import Priority, TaskTree
from .navigation import Navigation
from .codec import COMPLETE, INCOMPLETE

PATH_SEPARATOR = ": "

class TaskRow(BaseModel):
    """One task as the panels display it."""

    model_config = ConfigDict(frozen=True)

    content: str
    completed: bool = False
    priority: Priority = Priority.NONE
    subtask_count: int = 0

    @property
    def check(self) -> str:
        return COMPLETE if self.completed else INCOMPLETE

    @classmethod
    def from_task(cls, task) -> 'TaskRow':
        return cls(
            content=task.content,
            completed=task.completed,
            priority=task.priority,
            subtask_count=len(getattr(task, "subtasks", ())),
        )

class SessionView(BaseModel):
    """Everything needed to draw the parent, tasks, sub-tasks and selection panels."""

    model_config = ConfigDict(frozen=True)

    parent: Optional[TaskRow] = Field(default=None, description="The focused parent task, None at root")
    path: str = Field(default="", description="Breadcrumb of the focused sequence")
    tasks: List[TaskRow] = Field(default_factory=list, description="The active sequence")
    selected: Optional[int] = Field(default=None, description="Selected index in tasks")
    subtasks: List[TaskRow] = Field(default_factory=list, description="Sub-tasks of the selected root task")
    selection_text: str = Field(default="", description="Full text of the selected task")

    @property
    def at_root(self) -> bool:
        return self.parent is None

def build_view(tree: TaskTree, navigation: Navigation) -> SessionView:
    """Snapshot the tree as seen through the current navigation state."""
    sequence = navigation.active_sequence(tree)
    selected = navigation.active_index
    rows = [TaskRow.from_task(task) for task in sequence]

    parent = None
    path = ""
    if not navigation.at_root:
        parent_task = tree.tasks[navigation.focus]
        parent = TaskRow.from_task(parent_task)
        path = parent_task.content

    subtasks = []
    selection_text = ""
    if selected is not None:
        selection_text = sequence[selected].content
        if navigation.at_root:
            subtasks = [TaskRow.from_task(sub) for sub in sequence[selected].subtasks]

    return SessionView(
        parent=parent,
        path=path,
        tasks=rows,
        selected=selected,
        subtasks=subtasks,
        selection_text=selection_text,
    )
