from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .io import atomic_write
from yat.logs import get_logger

log = get_logger('data.backup')

def _generate_backup_id(custom_name: Optional[str] = None) -> str:
    """Generate a backup ID with timestamp and optional custom name"""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    if custom_name:
        # Sanitize custom name for filesystem
        safe_name = "".join(c for c in custom_name if c.isalnum() or c in ('-', '_')).strip()
        return f"{timestamp}_{safe_name}"
    return timestamp

def backup_bytes(file_path: Path, data: bytes, custom_name: Optional[str] = None) -> Path:
    """
    Keep a copy of `data` next to `file_path`.

    The copy is named ``<file>.<timestamp>[_name].bak``; an existing backup
    with the same name gets a numeric suffix instead of being overwritten.

    Returns:
        Path of the backup file.
    """
    file_path = Path(file_path)
    backup_id = _generate_backup_id(custom_name)
    backup_path = file_path.with_name(f"{file_path.name}.{backup_id}.bak")
    counter = 1
    while backup_path.exists():
        backup_path = file_path.with_name(f"{file_path.name}.{backup_id}.{counter}.bak")
        counter += 1

    atomic_write(backup_path, data)
    log.info(f"Backed up {file_path} to {backup_path}")
    return backup_path

def list_backups(file_path: Path) -> List[Path]:
    """All backups of `file_path`, oldest first."""
    file_path = Path(file_path)
    if not file_path.parent.exists():
        return []
    return sorted(file_path.parent.glob(f"{file_path.name}.*.bak"))
