"""
Timestamped backups of project files taken before they are overwritten.
"""
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_BACKUPS = 3


def backup_file(path: Path, max_backups: int = DEFAULT_MAX_BACKUPS) -> Optional[Path]:
    """Create a timestamped backup of *path*, keeping at most *max_backups*.

    The copy is written next to the original as ``<name>.bak.<YYYYmmdd_HHMMSS_ffffff>``;
    an existing backup is never overwritten.

    Returns:
        The ``Path`` of the new backup file, or ``None`` if the source
        file does not exist.
    """
    if not path.exists():
        return None

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    backup_path = path.parent / f"{path.name}.bak.{timestamp}"
    counter = 1
    while backup_path.exists():
        backup_path = path.parent / f"{path.name}.bak.{timestamp}-{counter}"
        counter += 1
    shutil.copy2(path, backup_path)
    logger.info(f"backup: {path} -> {backup_path.name}")

    for old in list_backups(path)[max_backups:]:
        try:
            old.unlink()
            logger.debug(f"backup: pruned old backup {old.name}")
        except OSError as e:
            logger.warning(f"backup: could not prune {old.name}: {e}")

    return backup_path


def list_backups(path: Path) -> List[Path]:
    """Backups of *path*, newest first."""
    return sorted(
        path.parent.glob(f"{path.name}.bak.*"),
        key=lambda p: p.name,
        reverse=True,
    )
