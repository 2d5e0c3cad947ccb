"""File management utilities."""

import shutil
import time
from pathlib import Path
from typing import Optional

import structlog

from vps_init.types import RollbackPoint

logger = structlog.get_logger()


class FileManager:
    """Manage file operations with backup and restore."""

    def backup_file(self, filepath: Path, timestamp: Optional[str] = None) -> RollbackPoint:
        """Copy ``filepath`` to ``<name>.bak.<timestamp>``.

        The returned point carries the exact backup path, so a later
        restore never has to recompute the timestamp.

        Args:
            filepath: Path to file to backup
            timestamp: Suffix to use; defaults to the current epoch seconds

        Returns:
            RollbackPoint describing the backup

        Raises:
            FileNotFoundError: If the source does not exist
        """
        if not filepath.exists():
            raise FileNotFoundError(f"Cannot back up missing file: {filepath}")

        if timestamp is None:
            timestamp = str(int(time.time()))
        backup_path = filepath.parent / f"{filepath.name}.bak.{timestamp}"

        shutil.copy2(filepath, backup_path)

        point = RollbackPoint(
            original_path=str(filepath),
            backup_path=str(backup_path),
            timestamp=timestamp,
        )
        logger.info("file_backed_up", original=str(filepath), backup=str(backup_path))
        return point

    def restore(self, point: RollbackPoint) -> None:
        """Restore a file from its rollback point.

        Raises:
            FileNotFoundError: If the backup is gone
        """
        backup_path = Path(point.backup_path)
        if not backup_path.exists():
            raise FileNotFoundError(f"Backup not found: {backup_path}")

        shutil.copy2(backup_path, point.original_path)
        logger.info("file_restored", original=point.original_path, backup=str(backup_path))

    def read_file(self, filepath: Path) -> str:
        """Read file content, or an empty string when it does not exist."""
        if not filepath.exists():
            return ""
        with open(filepath) as f:
            return f.read()

    def write_file(self, filepath: Path, content: str) -> None:
        """Write content to file, creating parent directories."""
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w") as f:
            f.write(content)

    def append_line(self, filepath: Path, line: str) -> None:
        """Append one line, adding a newline first if the file lacks one."""
        existing = self.read_file(filepath)
        prefix = "" if not existing or existing.endswith("\n") else "\n"
        with open(filepath, "a") as f:
            f.write(f"{prefix}{line}\n")
