"""
Data management submodule: save file location, atomic writes and backups.
"""

from .core import SaveStore, DATA_DIR, SAVE_FILENAME
from .backup import backup_bytes, list_backups
from .io import atomic_write, read_bytes

__all__ = [
    'SaveStore',
    'DATA_DIR',
    'SAVE_FILENAME',
    'backup_bytes',
    'list_backups',
    'atomic_write',
    'read_bytes',
]
