"""Utility modules for VPS Init."""

from vps_init.utils.command import CommandExecutor
from vps_init.utils.file import FileManager
from vps_init.utils.validation import Validator

__all__ = ["CommandExecutor", "FileManager", "Validator"]
