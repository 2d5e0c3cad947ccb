"""Pytest configuration and fixtures."""

import shlex
from pathlib import Path
from typing import Dict, List, Optional, Set

import pytest
import structlog

from vps_init.config import InitSettings
from vps_init.exceptions import CommandExecutionError
from vps_init.system_info import SystemInfo
from vps_init.types import CommandResult
from vps_init.utils.command import CommandExecutor
from vps_init.utils.file import FileManager

SSHD_CONFIG = """# sshd config
Include /etc/ssh/sshd_config.d/*.conf
#Port 22
PermitRootLogin yes
PasswordAuthentication yes
"""

HOSTS = """127.0.0.1\tlocalhost
127.0.1.1\told-host
::1\tip6-localhost ip6-loopback
"""


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(True, stdout, "", 0)


def failed(stderr: str = "", code: int = 1) -> CommandResult:
    return CommandResult(False, "", stderr, code)


class FakeHost(CommandExecutor):
    """Command executor simulating a small Debian VPS."""

    def __init__(self, meminfo: Path) -> None:
        self.meminfo = meminfo
        self.commands: List[str] = []
        self.inputs: List[str] = []
        self.hostname = "old-host"
        self.free_mb = 10000
        self.available: Set[str] = {"apt-get", "systemctl", "fallocate", "sshd"}
        self.installed: Set[str] = {"openssh-server"}
        self.active: Set[str] = {"sshd"}
        self.enabled: Set[str] = set()
        self.swap_sizes: Dict[str, int] = {}
        self.swapped_on: Dict[str, int] = {}
        self.sshd_valid = True
        self.failures: Dict[str, CommandResult] = {}
        self._write_meminfo()

    def execute(
        self,
        cmd: str,
        check: bool = True,
        timeout: int = 60,
        input_text: Optional[str] = None,
    ) -> CommandResult:
        self.commands.append(cmd)
        if input_text is not None:
            self.inputs.append(input_text)

        result = self._dispatch(cmd)
        if check and not result.success:
            raise CommandExecutionError(f"Command failed: {cmd}", return_code=result.return_code)
        return result

    def check_command_available(self, command: str) -> bool:
        return command in self.available

    def ran(self, prefix: str) -> List[str]:
        return [c for c in self.commands if c.startswith(prefix)]

    def _write_meminfo(self) -> None:
        total_kb = sum(self.swapped_on.values()) * 1024
        self.meminfo.write_text(
            f"MemTotal:        1009152 kB\nSwapTotal:       {total_kb} kB\nSwapFree:        {total_kb} kB\n"
        )

    def _dispatch(self, cmd: str) -> CommandResult:
        for prefix, result in self.failures.items():
            if cmd.startswith(prefix):
                return result

        args = shlex.split(cmd)
        name = args[0]

        if cmd == "hostname":
            return ok(self.hostname + "\n")
        if name == "hostnamectl":
            self.hostname = args[-1]
            return ok()
        if name == "df":
            return ok(
                "Filesystem     1M-blocks  Used Available Use% Mounted on\n"
                f"/dev/vda1         20000M 5000M    {self.free_mb}M  25% /\n"
            )
        if name == "dpkg":
            return ok() if args[-1] in self.installed else failed("not installed")
        if name == "apt-get" and "install" in args:
            self.installed.add(args[-1])
            return ok()
        if name == "fallocate":
            size = int(args[2].rstrip("M"))
            Path(args[3]).write_text("swap")
            self.swap_sizes[args[3]] = size
            return ok()
        if name == "dd":
            options = dict(a.split("=", 1) for a in args[1:])
            Path(options["of"]).write_text("swap")
            self.swap_sizes[options["of"]] = int(options["count"])
            return ok()
        if name == "swapon":
            self.swapped_on[args[1]] = self.swap_sizes[args[1]]
            self._write_meminfo()
            return ok()
        if name == "swapoff":
            if args[1] not in self.swapped_on:
                return failed("swapoff: not a swap file")
            del self.swapped_on[args[1]]
            self._write_meminfo()
            return ok()
        if name.endswith("sshd") and args[1:] == ["-t"]:
            return ok() if self.sshd_valid else failed("line 5: Bad configuration option", 255)
        if name == "systemctl":
            if args[1] == "is-active":
                return ok() if args[-1] in self.active else failed(code=3)
            if args[1] == "restart":
                self.active.add(args[-1])
            if args[1] == "enable":
                self.enabled.add(args[-1])
            return ok()
        return ok()


@pytest.fixture(autouse=True)
def reset_structlog():
    """Leave structlog at its defaults between tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings(tmp_path: Path) -> InitSettings:
    """Create test configuration pointing every path into tmp_path."""
    config = InitSettings.from_env()
    etc = tmp_path / "etc"
    (etc / "ssh").mkdir(parents=True)
    (etc / "fail2ban").mkdir()

    config.paths.hosts_file = etc / "hosts"
    config.paths.fstab = etc / "fstab"
    config.paths.sshd_config = etc / "ssh" / "sshd_config"
    config.paths.jail_file = etc / "fail2ban" / "jail.local"
    config.paths.swap_file = tmp_path / "swapfile"
    config.paths.meminfo = tmp_path / "meminfo"
    config.logging.file = None

    config.paths.hosts_file.write_text(HOSTS)
    config.paths.fstab.write_text("UUID=abcd / ext4 errors=remount-ro 0 1\n")
    config.paths.sshd_config.write_text(SSHD_CONFIG)
    return config


@pytest.fixture
def host(settings: InitSettings) -> FakeHost:
    return FakeHost(settings.paths.meminfo)


@pytest.fixture
def system(host: FakeHost) -> SystemInfo:
    return SystemInfo(host)


@pytest.fixture
def file_manager() -> FileManager:
    return FileManager()
