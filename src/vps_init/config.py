"""Configuration management for VPS Init."""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vps_init.exceptions import ValidationError
from vps_init.utils.validation import Validator

DEFAULT_SSH_PORT = 22


class InitPlan(BaseModel):
    """Changes requested by the administrator. ``None`` means leave as is."""

    hostname: Optional[str] = None
    swap_size_mb: Optional[int] = Field(default=None, gt=0)
    ssh_port: Optional[int] = Field(default=None, ge=1, le=65535)
    ssh_password: Optional[SecretStr] = None
    fail2ban_enabled: bool = False

    @field_validator("hostname")
    @classmethod
    def check_hostname(cls, v: Optional[str]) -> Optional[str]:
        """Reject hostnames that hostnamectl would mangle."""
        if v is None:
            return v
        try:
            return Validator.validate_hostname(v)
        except ValidationError as e:
            raise ValueError(str(e)) from e

    @field_validator("ssh_password", mode="before")
    @classmethod
    def empty_password_is_none(cls, v: object) -> object:
        if v == "":
            return None
        return v

    @property
    def ssh_requested(self) -> bool:
        return self.ssh_port is not None or self.ssh_password is not None

    def is_empty(self) -> bool:
        """True when no change at all was requested."""
        return (
            self.hostname is None
            and self.swap_size_mb is None
            and not self.ssh_requested
            and not self.fail2ban_enabled
        )

    def summary_lines(self) -> List[str]:
        """Human readable plan; the password is never shown."""
        lines: List[str] = []
        if self.hostname is not None:
            lines.append(f"Set hostname: {self.hostname}")
        if self.swap_size_mb is not None:
            lines.append(f"Configure swap: {self.swap_size_mb}MB")
        if self.ssh_port is not None:
            lines.append(f"Change SSH port: {self.ssh_port}")
        if self.ssh_password is not None:
            lines.append("Change password: (hidden)")
        if self.fail2ban_enabled:
            lines.append("Enable fail2ban")
        return lines


class PathsConfig(BaseSettings):
    """Locations of the system files the tool edits."""

    hosts_file: Path = Field(default=Path("/etc/hosts"))
    fstab: Path = Field(default=Path("/etc/fstab"))
    sshd_config: Path = Field(default=Path("/etc/ssh/sshd_config"))
    jail_file: Path = Field(default=Path("/etc/fail2ban/jail.local"))
    swap_file: Path = Field(default=Path("/swapfile"))
    disk_root: Path = Field(default=Path("/"))
    meminfo: Path = Field(default=Path("/proc/meminfo"))

    model_config = SettingsConfigDict(
        env_prefix="VPS_PATHS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class SSHSettings(BaseSettings):
    """SSH server settings."""

    password_user: str = Field(default="root")
    service_name: str = Field(default="sshd")
    package: str = Field(default="openssh-server")

    model_config = SettingsConfigDict(
        env_prefix="VPS_SSH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class SwapSettings(BaseSettings):
    """Swap provisioning settings."""

    headroom_mb: int = Field(default=100, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="VPS_SWAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class Fail2banSettings(BaseSettings):
    """Fail2ban jail settings."""

    bantime: int = Field(default=-1, description="-1 bans permanently")
    findtime: int = Field(default=300, ge=1)
    maxretry: int = Field(default=3, ge=1)
    backend: str = Field(default="systemd")
    ignoreip: str = Field(default="127.0.0.1/8")
    protect_default_port: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_prefix="VPS_FAIL2BAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO")
    file: Optional[Path] = Field(default=Path("/var/log/vps-mini-init.log"))

    model_config = SettingsConfigDict(
        env_prefix="VPS_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class InitSettings(BaseSettings):
    """Main configuration container."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    ssh: SSHSettings = Field(default_factory=SSHSettings)
    swap: SwapSettings = Field(default_factory=SwapSettings)
    fail2ban: Fail2banSettings = Field(default_factory=Fail2banSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def from_env(cls) -> "InitSettings":
        """Create configuration from environment variables."""
        return cls(
            paths=PathsConfig(),
            ssh=SSHSettings(),
            swap=SwapSettings(),
            fail2ban=Fail2banSettings(),
            logging=LoggingConfig(),
        )

    def protected_ports(self, plan: InitPlan) -> List[int]:
        """Ports the sshd jail watches, without duplicates."""
        ports: List[int] = []
        if self.fail2ban.protect_default_port or plan.ssh_port is None:
            ports.append(DEFAULT_SSH_PORT)
        if plan.ssh_port is not None and plan.ssh_port not in ports:
            ports.append(plan.ssh_port)
        return ports
