"""System state introspection for VPS Init."""

import os
import re
import shlex
import sys
from pathlib import Path
from typing import List, Optional

from vps_init.types import PackageManager
from vps_init.utils.command import CommandExecutor

_PORT_DIRECTIVE = re.compile(r"^\s*Port\s+(\d+)\s*$")


class SystemInfo:
    """Detect system capabilities and read live state."""

    def __init__(self, executor: Optional[CommandExecutor] = None) -> None:
        """Initialize system information detection."""
        self.executor = executor or CommandExecutor()
        self.is_root = os.geteuid() == 0
        self.is_linux = sys.platform.startswith("linux")
        self.package_manager = self._detect_package_manager()

    def _detect_package_manager(self) -> PackageManager:
        """Detect available package manager."""
        if self.executor.check_command_available("apt-get"):
            return PackageManager.APT
        return PackageManager.NONE

    def check_requirements(self) -> List[str]:
        """Check if system meets minimum requirements."""
        issues: List[str] = []

        if not self.is_linux:
            issues.append("This tool only supports Linux systems")

        if not self.is_root:
            issues.append("Root privileges required (run with sudo or as root)")

        return issues

    def get_package_install_commands(self, package: str) -> List[str]:
        """Commands that refresh the index and install ``package``."""
        package = shlex.quote(package)
        if self.package_manager != PackageManager.APT:
            return []
        return ["apt-get update -qq", f"apt-get install -y {package}"]

    def is_package_installed(self, package: str) -> bool:
        """Ask the package database whether ``package`` is installed."""
        if self.package_manager != PackageManager.APT:
            return False
        return self.executor.execute(f"dpkg -s {shlex.quote(package)}", check=False).success

    def get_service_command(self, service: str, action: str) -> str:
        """Get service control command."""
        if action == "is-active":
            return f"systemctl is-active --quiet {service}"
        return f"systemctl {action} {service}"

    def is_service_active(self, service: str) -> bool:
        result = self.executor.execute(
            self.get_service_command(service, "is-active"), check=False
        )
        return result.success

    def current_hostname(self) -> str:
        """Live hostname as reported by the kernel."""
        result = self.executor.execute("hostname", check=False)
        return result.stdout.strip()

    def free_disk_mb(self, path: Path) -> int:
        """Free space in MB on the filesystem holding ``path``; 0 if unknown."""
        result = self.executor.execute(f"df -BM {shlex.quote(str(path))}", check=False)
        lines = result.stdout.strip().splitlines()
        if not result.success or len(lines) < 2:
            return 0
        fields = lines[1].split()
        if len(fields) < 4:
            return 0
        try:
            return int(fields[3].rstrip("M"))
        except ValueError:
            return 0

    @staticmethod
    def swap_total_mb(meminfo: Path) -> int:
        """SwapTotal from meminfo, rounded to the nearest MB."""
        if not meminfo.exists():
            return 0
        for line in meminfo.read_text().splitlines():
            if line.startswith("SwapTotal:"):
                kb = int(line.split()[1])
                return int(kb / 1024 + 0.5)
        return 0

    @staticmethod
    def configured_ssh_port(sshd_config: Path) -> Optional[int]:
        """Value of the last active ``Port`` directive, if any."""
        if not sshd_config.exists():
            return None
        port: Optional[int] = None
        for line in sshd_config.read_text().splitlines():
            match = _PORT_DIRECTIVE.match(line)
            if match:
                port = int(match.group(1))
        return port
