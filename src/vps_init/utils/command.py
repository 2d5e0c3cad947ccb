"""Command execution utilities."""

import shutil
import subprocess
from typing import Optional

import structlog

from vps_init.exceptions import CommandExecutionError
from vps_init.types import CommandResult

logger = structlog.get_logger()


class CommandExecutor:
    """Execute system commands and capture their output in the log."""

    def execute(
        self,
        cmd: str,
        check: bool = True,
        timeout: int = 60,
        input_text: Optional[str] = None,
    ) -> CommandResult:
        """Execute a shell command.

        Args:
            cmd: Command to execute; callers quote untrusted values
            check: Whether to raise exception on failure
            timeout: Command timeout in seconds
            input_text: Data piped to the command's stdin. Never logged.

        Returns:
            CommandResult with execution details

        Raises:
            CommandExecutionError: If command fails and check=True
        """
        logger.debug("command_start", cmd=cmd, stdin=input_text is not None)

        try:
            result = subprocess.run(
                cmd,
                shell=True,
                capture_output=True,
                text=True,
                timeout=timeout,
                input=input_text,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            error_msg = f"Command timed out after {timeout}s: {cmd}"
            logger.error("command_timeout", cmd=cmd, timeout=timeout)
            if check:
                raise CommandExecutionError(error_msg) from e
            return CommandResult(False, "", error_msg, -1)

        except OSError as e:
            error_msg = f"Command execution failed: {cmd}\nError: {e}"
            logger.error("command_error", cmd=cmd, error=str(e))
            if check:
                raise CommandExecutionError(error_msg) from e
            return CommandResult(False, "", error_msg, -1)

        cmd_result = CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout,
            stderr=result.stderr,
            return_code=result.returncode,
        )
        logger.info(
            "command_done",
            cmd=cmd,
            rc=result.returncode,
            stdout=result.stdout.strip(),
            stderr=result.stderr.strip(),
        )

        if check and not cmd_result.success:
            raise CommandExecutionError(
                f"Command failed: {cmd}\nError: {result.stderr.strip()}",
                return_code=result.returncode,
            )

        return cmd_result

    def check_command_available(self, command: str) -> bool:
        """Check if command is available on system."""
        return shutil.which(command) is not None
