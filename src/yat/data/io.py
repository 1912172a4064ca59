import os
import tempfile
from pathlib import Path
from typing import Union, Optional

from yat.recovery import FileOperationError
from yat.logs import get_logger

log = get_logger("data.io")

def _cleanup(temp_path: Optional[str]):
    if temp_path is not None and os.path.exists(temp_path):
        try:
            os.unlink(temp_path)
            log.debug(f"Cleaned up temporary file: {temp_path}")
        except OSError as cleanup_error:
            log.warning(f"Could not clean up temp file {temp_path}: {cleanup_error}")

def _create_dirs(file_path: Path):
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        error_msg = f"Cannot create directory {file_path.parent}: {e}"
        log.error(error_msg)
        raise FileOperationError(error_msg) from e

def atomic_write(file_path: Union[Path, str], data: bytes, create_dirs: bool = False):
    """
    Write bytes to a file using atomic updates.

    The data goes to a temporary file in the target directory, is synced to
    disk, then replaces the target in one step.

    Raises:
        FileOperationError: on any I/O failure; the target is left untouched.
    """
    file_path = Path(file_path)
    temp_path = None

    if create_dirs:
        _create_dirs(file_path)

    try:
        with tempfile.NamedTemporaryFile(mode='wb', dir=file_path.parent, prefix=f".{file_path.name}.", suffix='.tmp', delete=False) as temp_file:
            temp_path = temp_file.name
            temp_file.write(data)
            temp_file.flush()
            os.fsync(temp_file.fileno())

        os.replace(temp_path, file_path)
        log.debug(f"Successfully saved file: {file_path}")

    except OSError as e:
        _cleanup(temp_path)
        error_msg = f"I/O error saving file {file_path}: {e}"
        log.error(error_msg)
        raise FileOperationError(error_msg) from e

def read_bytes(file_path: Union[Path, str]) -> Optional[bytes]:
    """
    Read a whole file.

    Returns:
        The file content, or None if the file doesn't exist.

    Raises:
        FileOperationError: if the file exists but cannot be read.
    """
    file_path = Path(file_path)
    if not file_path.exists():
        return None

    try:
        return file_path.read_bytes()
    except OSError as e:
        raise FileOperationError(f"Failed to read file {file_path}: {e}") from e
