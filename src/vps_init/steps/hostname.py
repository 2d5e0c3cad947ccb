"""Hostname step."""

import shlex
from typing import Optional

from vps_init.console import print_success
from vps_init.steps.base import Step
from vps_init.types import VerificationRecord, VerificationStatus
from vps_init.utils.validation import Validator

LOOPBACK_ALIAS = "127.0.1.1"


def render_hosts(content: str, hostname: str) -> str:
    """Point every loopback alias line at ``hostname``, adding one if missing."""
    alias_line = f"{LOOPBACK_ALIAS}\t{hostname}"
    lines = content.splitlines()
    replaced = False
    for i, line in enumerate(lines):
        if line.startswith(LOOPBACK_ALIAS):
            lines[i] = alias_line
            replaced = True
    if not replaced:
        lines.append(alias_line)
    return "\n".join(lines) + "\n"


def has_alias(content: str, hostname: str) -> bool:
    for line in content.splitlines():
        fields = line.split()
        if fields and fields[0] == LOOPBACK_ALIAS and hostname in fields[1:]:
            return True
    return False


class HostnameStep(Step):
    """Set the system hostname and its loopback alias."""

    name = "hostname"

    def enabled(self) -> bool:
        return self.plan.hostname is not None

    def apply(self) -> None:
        # Plans built outside the collector still go through the same check.
        hostname = Validator.validate_hostname(self.plan.hostname or "")

        self.executor.execute(f"hostnamectl set-hostname {shlex.quote(hostname)}")

        hosts_file = self.settings.paths.hosts_file
        content = self.file_manager.read_file(hosts_file)
        self.file_manager.write_file(hosts_file, render_hosts(content, hostname))

        self.log.info("hostname_set", hostname=hostname)
        print_success(f"Hostname changed to: {hostname}")

    def verify(self) -> Optional[VerificationRecord]:
        wanted = self.plan.hostname or ""
        actual = self.system.current_hostname()
        if actual != wanted:
            return VerificationRecord(
                "Hostname", VerificationStatus.FAIL, f"not applied (current: {actual})"
            )

        hosts = self.file_manager.read_file(self.settings.paths.hosts_file)
        if not has_alias(hosts, wanted):
            return VerificationRecord(
                "Hostname",
                VerificationStatus.WARN,
                f"active ({actual}) but no {LOOPBACK_ALIAS} entry in hosts file",
            )
        return VerificationRecord("Hostname", VerificationStatus.PASS, f"active ({actual})")
