"""Interactive collection of the InitPlan."""

import getpass
from typing import Callable, Dict, Optional

import structlog

from vps_init.config import InitPlan
from vps_init.console import console, print_warning
from vps_init.exceptions import ValidationError
from vps_init.utils.validation import Validator

logger = structlog.get_logger()

Reader = Callable[[str], str]


def _safe_read(reader: Reader, message: str) -> str:
    """Read one answer; EOF counts as an empty answer."""
    try:
        return reader(message).strip()
    except EOFError:
        console.print()
        return ""


class InputCollector:
    """Ask the four yes/no questions and validate answers as they arrive.

    Every answer is final: an invalid value prints a warning and leaves
    that setting unchanged.
    """

    def __init__(
        self, ask: Optional[Reader] = None, ask_secret: Optional[Reader] = None
    ) -> None:
        self.ask = ask or input
        self.ask_secret = ask_secret or getpass.getpass
        self.validator = Validator()

    def confirm(self, message: str) -> bool:
        return self.validator.parse_yes_no(_safe_read(self.ask, f"{message} [y/N] "))

    def collect(self) -> InitPlan:
        """Prompt for every setting and return the resulting plan."""
        console.print("[cyan]=== Enter the configuration below ===[/]")
        values: Dict[str, object] = {}

        console.print()
        if self.confirm("1. Change the hostname?"):
            hostname = self._read_valid(
                "   New hostname: ", self.validator.validate_hostname, "hostname"
            )
            if hostname is not None:
                values["hostname"] = hostname

        console.print()
        if self.confirm("2. Configure swap?"):
            size = self._read_valid(
                "   Swap size in MB (e.g. 1024, 2048): ",
                self.validator.validate_swap_size,
                "swap",
            )
            if size is not None:
                values["swap_size_mb"] = size

        console.print()
        if self.confirm("3. Change the SSH port or password?"):
            port = self._read_valid(
                "   New SSH port (empty to keep): ",
                self.validator.validate_port,
                "SSH port",
                optional=True,
            )
            if port is not None:
                values["ssh_port"] = port
            password = _safe_read(self.ask_secret, "   New root password (empty to keep): ")
            if password:
                values["ssh_password"] = password

        console.print()
        if self.confirm("4. Install and enable fail2ban?"):
            values["fail2ban_enabled"] = True

        plan = InitPlan(**values)
        logger.info("plan_collected", plan=plan.summary_lines())
        return plan

    def _read_valid(
        self,
        message: str,
        check: Callable[[str], object],
        label: str,
        optional: bool = False,
    ) -> Optional[object]:
        answer = _safe_read(self.ask, message)
        if optional and not answer:
            return None
        try:
            return check(answer)
        except ValidationError as e:
            logger.warning("input_rejected", setting=label, error=str(e))
            print_warning(f"{e}; skipping {label} configuration")
            return None
