"""Custom exceptions for VPS Init."""

from typing import Optional


class InitError(Exception):
    """Base exception for all init errors."""

    exit_code = 1


class ConfigurationError(InitError):
    """Raised when configuration is invalid."""

    exit_code = 2


class ValidationError(ConfigurationError):
    """Raised when a user-supplied value fails validation."""

    pass


class SystemRequirementError(InitError):
    """Raised when system requirements are not met."""

    exit_code = 3


class InsufficientDiskSpaceError(InitError):
    """Raised when there is not enough free disk space for a step."""

    def __init__(self, required_mb: int, available_mb: int) -> None:
        super().__init__(
            f"Insufficient disk space: need {required_mb}MB, available {available_mb}MB"
        )
        self.required_mb = required_mb
        self.available_mb = available_mb


class CommandExecutionError(InitError):
    """Raised when command execution fails."""

    exit_code = 4

    def __init__(self, message: str, return_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.return_code = return_code


class ServiceControlError(InitError):
    """Raised when service control operation fails."""

    exit_code = 5


class RollbackError(InitError):
    """Raised when rollback operation fails."""

    exit_code = 6


class SSHConfigRollback(InitError):
    """Raised when a new sshd config was rejected and the backup restored."""

    pass


# Errors a single step reports and recovers from; the run moves on.
RECOVERABLE_ERRORS = (ValidationError, InsufficientDiskSpaceError, SSHConfigRollback)
