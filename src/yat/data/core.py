"""
SaveStore - Reads, writes and backs up the todo list save file.

The store pairs the byte codec with file I/O. A file that did not load
cleanly is copied to a backup before the first save overwrites it, so lines
the decoder had to drop are never lost silently.
"""
from pathlib import Path
from typing import Optional, Union

from yat.codec import DecodeResult, decode, encode
from yat.models import TaskTree
from yat.recovery import CorruptionError
from yat.logs import get_logger
from .io import atomic_write, read_bytes
from .backup import backup_bytes

log = get_logger("data")

DATA_DIR = Path.home() / ".todo"
SAVE_FILENAME = "save.txt"

class SaveStore:
    """Persistence for a single save file."""

    def __init__(self, path: Union[Path, str]):
        self.path = Path(path)
        # Original bytes of a file that loaded with errors
        self.pending_backup: Optional[bytes] = None

    @classmethod
    def locate(cls, path: Union[Path, str, None] = None, data_dir: Union[Path, str, None] = None) -> 'SaveStore':
        """
        Find the save file to use.

        An explicit path is used as-is, even if it does not exist yet.
        Otherwise the default ``save.txt`` in the data directory is used and
        the directory is created if needed.
        """
        if path is not None:
            store = cls(path)
            if not store.exists():
                log.warning(f"Save file {store.path} does not exist; it will be created on save")
            return store

        data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
        if not data_dir.exists():
            try:
                data_dir.mkdir(parents=True, exist_ok=True)
                log.info(f"Created data directory {data_dir}")
            except OSError as e:
                log.warning(f"Unable to create data directory {data_dir}: {e}")
        return cls(data_dir / SAVE_FILENAME)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self, strict: bool = False) -> DecodeResult:
        """
        Read and decode the save file.

        Returns:
            DecodeResult; an empty tree if the file does not exist.

        Raises:
            FileOperationError: if the file cannot be read.
            CorruptionError: if the file is not valid UTF-8.
            ParseError: on the first bad line when strict is set.
        """
        data = read_bytes(self.path)
        if data is None:
            log.info(f"No save file at {self.path}; starting a new list")
            return DecodeResult()

        try:
            result = decode(data, strict=strict)
        except CorruptionError:
            self.pending_backup = data
            raise

        if result.errors:
            log.warning(f"{len(result.errors)} line(s) of {self.path} could not be read")
            self.pending_backup = data
        else:
            log.info(f"Loaded {result.tree.count()} tasks from {self.path}")
        return result

    def save(self, tree: TaskTree) -> bytes:
        """
        Encode and atomically write the tree.

        Returns:
            The bytes written.

        Raises:
            FileOperationError: if the backup or the save file cannot be written.
        """
        data = encode(tree)
        if self.pending_backup is not None:
            backup_bytes(self.path, self.pending_backup, "unparsed")
            self.pending_backup = None
        atomic_write(self.path, data, create_dirs=True)
        log.info(f"Todo list saved to {self.path}")
        return data
