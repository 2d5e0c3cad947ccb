"""SSH port and password step."""

import re
import time
from typing import Optional

from vps_init.console import print_error, print_success, print_warning
from vps_init.exceptions import (
    RollbackError,
    ServiceControlError,
    SSHConfigRollback,
)
from vps_init.steps.base import Step
from vps_init.types import RollbackPoint, VerificationRecord, VerificationStatus

PORT_LINE = re.compile(r"^[#\s]*Port\s+")
SSHD_CANDIDATES = ("sshd", "/usr/sbin/sshd", "/usr/local/sbin/sshd")


def rewrite_port(content: str, port: int) -> str:
    """Drop every Port directive, commented or not, and append the new one."""
    lines = [line for line in content.splitlines() if not PORT_LINE.match(line)]
    lines.append(f"Port {port}")
    return "\n".join(lines) + "\n"


class SSHStep(Step):
    """Change the SSH root password and/or listening port."""

    name = "ssh"

    def enabled(self) -> bool:
        return self.plan.ssh_requested

    def apply(self) -> None:
        self.ensure_server_installed()

        if self.plan.ssh_password is not None:
            self.change_password()

        if self.plan.ssh_port is not None:
            self.change_port(self.plan.ssh_port)

    def ensure_server_installed(self) -> None:
        package = self.settings.ssh.package
        if self.system.is_package_installed(package):
            return
        self.log.info("package_install", package=package)
        self.install_package(package)

    def change_password(self) -> None:
        user = self.settings.ssh.password_user
        secret = self.plan.ssh_password.get_secret_value()
        self.executor.execute("chpasswd", input_text=f"{user}:{secret}\n")
        self.log.info("password_changed", user=user)
        print_success(f"{user} password updated")

    def change_port(self, port: int) -> None:
        """Rewrite the Port directive, keeping the old file if sshd rejects it.

        Raises:
            SSHConfigRollback: If ``sshd -t`` failed and the backup was restored
            RollbackError: If the backup could not be restored
        """
        sshd_config = self.settings.paths.sshd_config
        point = self.file_manager.backup_file(sshd_config, timestamp=str(int(time.time())))

        content = self.file_manager.read_file(sshd_config)
        self.file_manager.write_file(sshd_config, rewrite_port(content, port))

        error = self.validate_config()
        if error is not None:
            self.restore(point)
            print_error("SSH config test failed, previous configuration restored")
            raise SSHConfigRollback(f"sshd rejected the new config: {error}")

        self.restart_service()
        self.log.info("port_changed", port=port, backup=point.backup_path)
        print_success(f"SSH port changed to: {port}")
        print_warning("Remember the new port, the next connection needs it!")

    def validate_config(self) -> Optional[str]:
        """Run the daemon's syntax check; returns the error text on failure."""
        for sshd_cmd in SSHD_CANDIDATES:
            if self.executor.check_command_available(sshd_cmd):
                result = self.executor.execute(f"{sshd_cmd} -t", check=False)
                if not result.success:
                    return result.stderr.strip() or f"exit code {result.return_code}"
                self.log.info("sshd_config_validated")
                return None

        self.log.error("sshd_not_found", candidates=list(SSHD_CANDIDATES))
        return "sshd not found, cannot check the new config"

    def restore(self, point: RollbackPoint) -> None:
        try:
            self.file_manager.restore(point)
            self.restart_service()
        except (OSError, ServiceControlError) as e:
            raise RollbackError(f"Restoring {point.original_path} failed: {e}") from e
        self.log.warning("sshd_config_restored", backup=point.backup_path)

    def restart_service(self) -> None:
        service = self.settings.ssh.service_name
        result = self.executor.execute(
            self.system.get_service_command(service, "restart"), check=False
        )
        if not result.success:
            raise ServiceControlError(
                f"Service restart failed for {service}: {result.stderr.strip()}"
            )

    def verify(self) -> Optional[VerificationRecord]:
        if self.plan.ssh_port is None:
            return None
        active = self.system.configured_ssh_port(self.settings.paths.sshd_config)
        if active == self.plan.ssh_port:
            return VerificationRecord("SSH port", VerificationStatus.PASS, f"set to {active}")
        return VerificationRecord(
            "SSH port", VerificationStatus.FAIL, f"mismatch (config file: {active})"
        )
