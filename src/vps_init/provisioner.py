"""Apply an InitPlan step by step, then verify."""

from typing import Dict, List, Optional

import structlog

from vps_init.config import InitPlan, InitSettings
from vps_init.console import print_error, print_info, print_section
from vps_init.exceptions import (
    RECOVERABLE_ERRORS,
    SystemRequirementError,
    ValidationError,
)
from vps_init.steps import STEP_CLASSES, Step
from vps_init.system_info import SystemInfo
from vps_init.utils.command import CommandExecutor
from vps_init.utils.file import FileManager
from vps_init.verifier import VerificationTally, Verifier

logger = structlog.get_logger()

APPLIED = "applied"
INVALID = "invalid"
FAILED = "failed"

_TITLES = {
    "hostname": "Configuring hostname...",
    "swap": "Configuring swap...",
    "ssh": "Configuring SSH...",
    "fail2ban": "Configuring fail2ban...",
}


def preflight_checks(system: SystemInfo) -> None:
    """Abort unless the tool can change system configuration.

    Raises:
        SystemRequirementError: If a requirement is not met
    """
    issues = system.check_requirements()
    if issues:
        raise SystemRequirementError("; ".join(issues))


class Provisioner:
    """Main provisioning orchestrator."""

    def __init__(
        self,
        plan: InitPlan,
        settings: InitSettings,
        executor: Optional[CommandExecutor] = None,
        system: Optional[SystemInfo] = None,
        file_manager: Optional[FileManager] = None,
    ) -> None:
        """Initialize the provisioner.

        Args:
            plan: Changes to apply
            settings: Paths and tuning
            executor: Command runner, shared by every step
            system: Live state reader
            file_manager: File editor used for backups and rewrites
        """
        self.plan = plan
        self.settings = settings
        self.executor = executor or CommandExecutor()
        self.system = system or SystemInfo(self.executor)
        self.file_manager = file_manager or FileManager()

        self.steps: List[Step] = [
            cls(plan, settings, self.system, self.executor, self.file_manager)
            for cls in STEP_CLASSES
        ]
        self.outcomes: Dict[str, str] = {}

    def apply(self) -> None:
        """Run every enabled step in order.

        Recoverable errors end only the failing step. Anything else
        propagates and ends the run.
        """
        print_info("\n>>> Applying configuration...")
        for step in self.steps:
            if not step.enabled():
                continue

            print_section(_TITLES.get(step.name, step.name))
            logger.info("step_start", step=step.name)
            try:
                step.apply()
            except RECOVERABLE_ERRORS as e:
                self.outcomes[step.name] = INVALID if isinstance(e, ValidationError) else FAILED
                logger.error("step_failed", step=step.name, error=str(e))
                print_error(str(e))
                continue

            self.outcomes[step.name] = APPLIED
            logger.info("step_done", step=step.name)

    def verify(self) -> VerificationTally:
        """Check every step that was configured; invalid requests are skipped."""
        configured = [s for s in self.steps if self.outcomes.get(s.name, INVALID) != INVALID]
        return Verifier().run(configured)

    def run(self) -> VerificationTally:
        logger.info("provisioning_start", plan=self.plan.summary_lines())
        self.apply()
        return self.verify()
