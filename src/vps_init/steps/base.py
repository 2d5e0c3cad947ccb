"""Common base for provisioning steps."""

from abc import ABC, abstractmethod
from typing import Optional

import structlog

from vps_init.config import InitPlan, InitSettings
from vps_init.exceptions import SystemRequirementError
from vps_init.system_info import SystemInfo
from vps_init.types import VerificationRecord
from vps_init.utils.command import CommandExecutor
from vps_init.utils.file import FileManager


class Step(ABC):
    """One independent "ensure desired state" operation.

    A step is skipped unless :meth:`enabled` is true. :meth:`apply` may raise
    any error from :mod:`vps_init.exceptions`; the recoverable ones end only
    this step. :meth:`verify` re-reads live state after the run.
    """

    name = "step"

    def __init__(
        self,
        plan: InitPlan,
        settings: InitSettings,
        system: SystemInfo,
        executor: CommandExecutor,
        file_manager: FileManager,
    ) -> None:
        self.plan = plan
        self.settings = settings
        self.system = system
        self.executor = executor
        self.file_manager = file_manager
        self.log = structlog.get_logger().bind(step=self.name)

    @abstractmethod
    def enabled(self) -> bool:
        """Whether the plan asks for this step."""

    @abstractmethod
    def apply(self) -> None:
        """Bring the system to the requested state."""

    @abstractmethod
    def verify(self) -> Optional[VerificationRecord]:
        """Check live state; None when there is nothing to check."""

    def install_package(self, package: str) -> None:
        """Install ``package`` with the system package manager.

        Raises:
            CommandExecutionError: If the install fails
        """
        commands = self.system.get_package_install_commands(package)
        if not commands:
            raise SystemRequirementError("No supported package manager found")
        for cmd in commands:
            self.executor.execute(cmd, timeout=600)
