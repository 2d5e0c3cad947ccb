"""Type definitions for VPS Init."""

from enum import Enum
from typing import NamedTuple


class PackageManager(str, Enum):
    """Supported package managers."""

    APT = "apt"
    NONE = "none"


class VerificationStatus(str, Enum):
    """Outcome of a post-apply check."""

    PASS = "PASS"
    FAIL = "FAIL"
    WARN = "WARN"


class CommandResult(NamedTuple):
    """Result of command execution."""

    success: bool
    stdout: str
    stderr: str
    return_code: int = 0


class RollbackPoint(NamedTuple):
    """Backup information for rollback."""

    original_path: str
    backup_path: str
    timestamp: str


class VerificationRecord(NamedTuple):
    """A single verification line."""

    component: str
    status: VerificationStatus
    message: str
