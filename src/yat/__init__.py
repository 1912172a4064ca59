"""
yat - a hierarchical todo list manager for the terminal.

Tasks nest one level deep (task → sub-task), carry a completion flag and a
four-level priority, and are saved to a plain text file.
"""

from .version import VERSION
from .recovery import (
    YatError,
    InvariantViolation,
    CorruptionError,
    ParseError,
    FileOperationError,
)
from .models import Priority, MoveResult, Location, TaskTree
from .navigation import Direction, Navigation
from .codec import DecodeResult, decode, encode
from .dispatch import Command, CommandType, DispatchResult, DispatchStatus, Dispatcher
from .session import Session

__version__ = VERSION

__all__ = [
    "VERSION",
    "YatError",
    "InvariantViolation",
    "CorruptionError",
    "ParseError",
    "FileOperationError",
    "Priority",
    "MoveResult",
    "Location",
    "TaskTree",
    "Direction",
    "Navigation",
    "DecodeResult",
    "decode",
    "encode",
    "Command",
    "CommandType",
    "DispatchResult",
    "DispatchStatus",
    "Dispatcher",
    "Session",
]
