"""Fail2ban step."""

from typing import List, Optional

from vps_init.config import Fail2banSettings
from vps_init.console import print_error, print_success, spinner
from vps_init.exceptions import ServiceControlError
from vps_init.steps.base import Step
from vps_init.types import VerificationRecord, VerificationStatus

SERVICE = "fail2ban"


def render_jail(settings: Fail2banSettings, ports: List[int]) -> str:
    """Jail file protecting sshd on ``ports``."""
    port_list = ",".join(str(p) for p in ports)
    return f"""[DEFAULT]
bantime = {settings.bantime}
findtime = {settings.findtime}
maxretry = {settings.maxretry}
backend = {settings.backend}
ignoreip = {settings.ignoreip}

[sshd]
enabled = true
port = {port_list}
maxretry = {settings.maxretry}
"""


class Fail2banStep(Step):
    """Install fail2ban and enable an sshd jail."""

    name = "fail2ban"

    def enabled(self) -> bool:
        return self.plan.fail2ban_enabled

    def apply(self) -> None:
        with spinner("Installing fail2ban..."):
            self.install_package(SERVICE)

        ports = self.settings.protected_ports(self.plan)
        self.file_manager.write_file(
            self.settings.paths.jail_file, render_jail(self.settings.fail2ban, ports)
        )
        self.log.info("jail_written", path=str(self.settings.paths.jail_file), ports=ports)

        self._control_service("enable")
        self._control_service("restart")

        port_list = ",".join(str(p) for p in ports)
        if self.system.is_service_active(SERVICE):
            print_success(f"Fail2ban running, protected ports: {port_list}")
        else:
            self.log.error("service_inactive", service=SERVICE)
            print_error("Fail2ban failed to start")

    def _control_service(self, action: str) -> None:
        """Run a systemctl action on fail2ban.

        Raises:
            ServiceControlError: If the action fails
        """
        cmd = self.system.get_service_command(SERVICE, action)
        result = self.executor.execute(cmd, check=False)
        if not result.success:
            raise ServiceControlError(f"Service {action} failed: {result.stderr.strip()}")

    def verify(self) -> Optional[VerificationRecord]:
        if self.system.is_service_active(SERVICE):
            return VerificationRecord("Fail2ban", VerificationStatus.PASS, "service running")
        return VerificationRecord("Fail2ban", VerificationStatus.FAIL, "service not running")
