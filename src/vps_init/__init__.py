"""VPS Init - interactive one-shot VPS bootstrap tool."""

__version__ = "1.0.0"
__author__ = "DevOps Team"
__license__ = "MIT"

from vps_init.config import InitPlan, InitSettings
from vps_init.exceptions import (
    CommandExecutionError,
    ConfigurationError,
    InitError,
    SystemRequirementError,
    ValidationError,
)
from vps_init.provisioner import Provisioner
from vps_init.system_info import SystemInfo

__all__ = [
    "InitPlan",
    "InitSettings",
    "Provisioner",
    "SystemInfo",
    "InitError",
    "ConfigurationError",
    "SystemRequirementError",
    "ValidationError",
    "CommandExecutionError",
]
