"""
Terminal user interface.

Draws four panels (parent, tasks, sub-tasks, selection) from a session view
and turns configured keys into commands. All state changes go through
``Session.dispatch``.
"""
from enum import Enum
from typing import List, Optional, Tuple

from prompt_toolkit.application import Application
from prompt_toolkit.application.current import get_app
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import ConditionalContainer, HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.widgets import Frame, TextArea
from wcwidth import wcwidth

from .config import Config
from .dispatch import Command, CommandType, TEXT_COMMANDS
from .keymap import Keymap
from .recovery import ConfigError, YatError
from .session import Session
from .theme import PRIORITY_STYLES, build_style
from .view import TaskRow
from .logs import get_logger

log = get_logger("tui")

ELLIPSIS = "..."
# Cursor, checkbox and padding in front of each task's text
ROW_PREFIX_WIDTH = 6

class Mode(Enum):
    NORMAL = "normal"
    INPUT = "input"
    CONFIRM = "confirm"

PROMPTS = {
    CommandType.ADD: "New Task:",
    CommandType.ADD_SUBTASK: "New Sub-task:",
    CommandType.EDIT: "Edit Task:",
}

def display_width(text: str) -> int:
    return sum(max(wcwidth(ch), 0) for ch in text)

def truncate(text: str, width: int) -> str:
    """Cut text to `width` terminal cells, ending in an ellipsis when cut."""
    if width <= 0:
        return ""
    if display_width(text) <= width:
        return text
    limit = width - len(ELLIPSIS) if width > len(ELLIPSIS) else width
    kept = []
    used = 0
    for ch in text:
        cells = max(wcwidth(ch), 0)
        if used + cells > limit:
            break
        kept.append(ch)
        used += cells
    if width > len(ELLIPSIS):
        kept.append(ELLIPSIS)
    return "".join(kept)

def render_rows(rows: List[TaskRow], selected: Optional[int], width: int) -> List[Tuple[str, str]]:
    """Formatted text for a list of tasks, marking the selected one."""
    if not rows:
        return [("class:empty", "  (no tasks)")]

    fragments = []
    for index, row in enumerate(rows):
        is_selected = index == selected
        fragments.append(("class:cursor", "> " if is_selected else "  "))
        fragments.append(("class:check.done" if row.completed else "", row.check))
        fragments.append(("", " "))
        style = PRIORITY_STYLES[row.priority]
        if is_selected:
            style = f"{style} class:selected".strip()
        fragments.append((style, truncate(row.content, width - ROW_PREFIX_WIDTH)))
        fragments.append(("", "\n"))
    return fragments

class TodoApp:
    """Full-screen prompt_toolkit front end for a session."""

    def __init__(self, session: Session, config: Optional[Config] = None, input=None, output=None):
        self.session = session
        self.config = config if config is not None else Config()
        self.keymap = Keymap(self.config.keys)
        self.mode = Mode.NORMAL
        self.pending: Optional[CommandType] = None
        self.status = ""
        self.status_error = False
        # Set when quitting could not save first
        self.exit_error: Optional[str] = None

        if session.load_errors:
            count = len(session.load_errors)
            self._set_status(
                f"{count} problem(s) loading the save file; the original is backed up on save",
                error=True,
            )
        elif not session.tree.tasks:
            self._set_status(f"Press {self.keymap.key_for(CommandType.ADD)} to add a task")

        self.input = TextArea(multiline=False, accept_handler=self._accept_input)
        self.tasks_window = Window(FormattedTextControl(self._tasks_text, focusable=True))
        self.app = Application(
            layout=self._build_layout(),
            key_bindings=self._build_key_bindings(),
            style=build_style(self.config.theme),
            full_screen=True,
            input=input,
            output=output,
        )

    def _set_status(self, text: str, error: bool = False):
        self.status = text
        self.status_error = error

    def _panel_width(self) -> int:
        columns = get_app().output.get_size().columns
        return max(columns // 2 - 2, 1)

    def _build_layout(self) -> Layout:
        inputting = Condition(lambda: self.mode == Mode.INPUT)

        parent = Frame(Window(FormattedTextControl(self._parent_text), height=1), title="Parent")
        panels = VSplit([
            Frame(self.tasks_window, title="Tasks"),
            Frame(Window(FormattedTextControl(self._subtasks_text)), title="Sub-tasks"),
        ])
        bottom = Frame(
            HSplit([
                ConditionalContainer(
                    Window(FormattedTextControl(self._selection_text), height=1),
                    filter=~inputting,
                ),
                ConditionalContainer(
                    VSplit([
                        Window(FormattedTextControl(self._prompt_text), dont_extend_width=True),
                        self.input,
                    ]),
                    filter=inputting,
                ),
            ]),
            title="Selection",
        )
        status = Window(FormattedTextControl(self._status_text), height=1)

        root = HSplit([parent, panels, bottom, status])
        return Layout(root, focused_element=self.tasks_window)

    def _build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()
        normal = Condition(lambda: self.mode == Mode.NORMAL)
        confirming = Condition(lambda: self.mode == Mode.CONFIRM)
        inputting = Condition(lambda: self.mode == Mode.INPUT)

        for key, command_type in self.keymap.bindings():
            try:
                kb.add(key, filter=normal)(self._handler(command_type))
            except ValueError as e:
                raise ConfigError(f"Invalid key binding '{key}': {e}") from e

        @kb.add("c-c")
        def _(event):
            self.run_command(CommandType.QUIT)

        @kb.add(Keys.Any, filter=confirming)
        def _(event):
            self.mode = Mode.NORMAL
            self._set_status("Delete cancelled")

        @kb.add("y", filter=confirming)
        def _(event):
            self.mode = Mode.NORMAL
            self.dispatch(Command(type=CommandType.DELETE))

        @kb.add("escape", filter=inputting)
        def _(event):
            self._end_input()
            self._set_status("Cancelled")

        return kb

    def _handler(self, command_type: CommandType):
        def handle(event):
            self.run_command(command_type)
        return handle

    def run_command(self, command_type: CommandType):
        """React to a bound key: prompt, confirm or dispatch straight away."""
        nav = self.session.navigation
        if command_type in TEXT_COMMANDS:
            if command_type == CommandType.EDIT and nav.location is None:
                return
            if command_type == CommandType.ADD_SUBTASK and (not nav.at_root or nav.selected_root is None):
                return
            self._start_input(command_type)
        elif command_type == CommandType.DELETE:
            if nav.location is not None:
                self.mode = Mode.CONFIRM
                self._set_status("Are you sure you want to delete this task? y/n")
        else:
            self.dispatch(Command(type=command_type))

    def dispatch(self, command: Command):
        try:
            result = self.session.dispatch(command)
        except YatError as e:
            log.error(f"{command.type.value} failed: {e}")
            if command.type == CommandType.QUIT:
                # The autosave failed; leave anyway and let the caller report it
                self.exit_error = str(e)
                self.app.exit()
                return
            self._set_status(f"Error: {e}", error=True)
            return

        if command.type == CommandType.SAVE:
            self._set_status(f"Saved to {self.session.store.path}" if self.session.store else "Nothing to save to")
        elif result.applied and not self.status_error:
            self._set_status("")
        if result.quit:
            self.app.exit()

    def _start_input(self, command_type: CommandType):
        self.pending = command_type
        text = ""
        if command_type == CommandType.EDIT:
            text = self.session.tree.get(self.session.navigation.location).content
        self.input.text = text
        self.input.buffer.cursor_position = len(text)
        self.mode = Mode.INPUT
        self.app.layout.focus(self.input)

    def _end_input(self):
        self.mode = Mode.NORMAL
        self.pending = None
        self.app.layout.focus(self.tasks_window)

    def _accept_input(self, buffer) -> bool:
        command_type = self.pending
        text = buffer.text
        self._end_input()
        if command_type != CommandType.EDIT and not text.strip():
            self._set_status("Cancelled")
            return False
        self.dispatch(Command(type=command_type, text=text))
        return False

    def _parent_text(self):
        view = self.session.view()
        if view.at_root:
            return FormattedText([("class:empty", "(top level)")])
        return FormattedText([("", truncate(view.path, self._panel_width() * 2))])

    def _tasks_text(self):
        view = self.session.view()
        return FormattedText(render_rows(view.tasks, view.selected, self._panel_width()))

    def _subtasks_text(self):
        view = self.session.view()
        if not view.subtasks:
            return FormattedText([])
        return FormattedText(render_rows(view.subtasks, None, self._panel_width()))

    def _selection_text(self):
        return FormattedText([("class:cursor", truncate(self.session.view().selection_text, self._panel_width() * 2))])

    def _prompt_text(self):
        return FormattedText([("class:prompt", PROMPTS.get(self.pending, "")), ("", " ")])

    def _status_text(self):
        style = "class:status.error" if self.status_error else "class:status"
        return FormattedText([(style, self.status)])

    def run(self):
        self.app.run()
