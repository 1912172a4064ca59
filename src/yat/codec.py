"""
Save file codec.

One task per line::

    [ ] ( ) Buy milk
    [X] (A) Finish report
    \t[ ] ( ) Draft outline

The first bracket is the completion flag, the second the priority letter
(``A`` is high, ``C`` is low, blank is none). A leading tab makes the line a
sub-task of the nearest preceding top-level line. Four leading spaces are
accepted as the same indent on input; output always uses a tab.
"""
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import Priority, TaskTree
from .recovery import CorruptionError, ParseError
from .logs import get_logger

log = get_logger("codec")

ENCODING = "utf-8"
INDENT = "\t"
ALT_INDENTS = ("\t", "    ")

COMPLETE = "[X]"
INCOMPLETE = "[ ]"

# Parse error reasons
UNKNOWN_COMPLETION = "unknown completion token"
MALFORMED_PRIORITY = "malformed priority token"
UNKNOWN_PRIORITY = "unknown priority letter"
MISSING_SEPARATOR = "missing content separator"
NO_PARENT = "indentation under no parent"
INVALID_INDENT = "invalid indentation"
INVALID_CONTENT = "invalid content"

PRIORITY_LETTERS = {priority.value: priority for priority in Priority}

class DecodeResult(BaseModel):
    """A best-effort tree plus one error per line that was left out."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    tree: TaskTree = Field(default_factory=TaskTree, description="Every line that parsed cleanly")
    errors: List[ParseError] = Field(default_factory=list, description="Malformed lines, in file order")

    @property
    def ok(self) -> bool:
        return not self.errors

def format_task(task: Union[TaskTree.Task, TaskTree.SubTask]) -> str:
    """Render a single task line without indent or terminator."""
    check = COMPLETE if task.completed else INCOMPLETE
    return f"{check} ({task.priority.value}) {task.content}"

def encode(tree: TaskTree) -> bytes:
    """Serialize a task tree into canonical save file bytes."""
    lines = []
    for task in tree.tasks:
        lines.append(format_task(task) + "\n")
        for subtask in task.subtasks:
            lines.append(INDENT + format_task(subtask) + "\n")
    return "".join(lines).encode(ENCODING)

def _split_indent(line: str) -> tuple:
    """Return (depth, rest), or (None, line) when the indentation is unusable."""
    for indent in ALT_INDENTS:
        if line.startswith(indent):
            rest = line[len(indent):]
            if rest[:1] in (" ", "\t"):
                return None, line
            return 1, rest
    if line[:1] in (" ", "\t"):
        return None, line
    return 0, line

def parse_line(text: str, number: int) -> TaskTree.SubTask:
    """Parse an unindented task line.

    Raises:
        ParseError: if the bracket tokens are malformed or the content
            holds a stray carriage return.
    """
    check = text[:3]
    if check == COMPLETE:
        completed = True
    elif check == INCOMPLETE:
        completed = False
    else:
        raise ParseError(number, UNKNOWN_COMPLETION)

    if text[3:4] != " ":
        raise ParseError(number, MISSING_SEPARATOR)

    token = text[4:7]
    if len(token) != 3 or token[0] != "(" or token[2] != ")":
        raise ParseError(number, MALFORMED_PRIORITY)
    priority = PRIORITY_LETTERS.get(token[1])
    if priority is None:
        raise ParseError(number, UNKNOWN_PRIORITY)

    # "[ ] ( )" with nothing after it is an empty task
    if len(text) > 7 and text[7] != " ":
        raise ParseError(number, MISSING_SEPARATOR)

    try:
        return TaskTree.SubTask(content=text[8:], completed=completed, priority=priority)
    except ValidationError as e:
        raise ParseError(number, INVALID_CONTENT) from e

def _lines(data: Union[bytes, str]) -> List[str]:
    if isinstance(data, bytes):
        try:
            data = data.decode(ENCODING)
        except UnicodeDecodeError as e:
            raise CorruptionError(f"Save file is not valid {ENCODING}: {e}") from e
    lines = data.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]

def decode(data: Union[bytes, str], strict: bool = False) -> DecodeResult:
    """
    Parse save file content into a task tree.

    Malformed lines are collected as ParseError entries and left out of the
    tree. Sub-tasks whose parent line was malformed are reported too, rather
    than attached to an earlier task.

    Args:
        data: Save file bytes (UTF-8) or already decoded text.
        strict: Raise the first ParseError instead of collecting it.

    Returns:
        DecodeResult with the tree and the collected errors.

    Raises:
        CorruptionError: if bytes are not valid UTF-8.
        ParseError: on the first malformed line when strict is set.
    """
    result = DecodeResult()
    parent: Optional[TaskTree.Task] = None

    for number, line in enumerate(_lines(data), start=1):
        if not line.strip():
            log.debug(f"Skipping blank line {number}")
            continue
        try:
            depth, text = _split_indent(line)
            if depth is None:
                raise ParseError(number, INVALID_INDENT)
            if depth == 1 and parent is None:
                raise ParseError(number, NO_PARENT)

            parsed = parse_line(text, number)
            if depth == 0:
                parent = TaskTree.Task(**parsed.model_dump())
                result.tree.tasks.append(parent)
            else:
                parent.subtasks.append(parsed)

        except ParseError as e:
            if strict:
                raise
            log.warning(f"Skipping malformed save file line {e.line}: {e.reason}")
            result.errors.append(e)
            if depth == 0 or (depth is None and not line.startswith(ALT_INDENTS)):
                # Following sub-tasks must not attach to an earlier task
                parent = None

    log.debug(f"Decoded {result.tree.count()} tasks with {len(result.errors)} errors")
    return result
