"""Input validation utilities."""

import re
from typing import Optional

from vps_init.exceptions import ValidationError

HOSTNAME_PATTERN = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9-]*[A-Za-z0-9])?$")
HOSTNAME_MAX_LENGTH = 63


class Validator:
    """Validate user inputs."""

    @staticmethod
    def validate_hostname(hostname: str) -> str:
        """Validate a single-label hostname.

        Args:
            hostname: Hostname to validate

        Returns:
            The hostname, stripped of surrounding whitespace

        Raises:
            ValidationError: If hostname is invalid
        """
        hostname = hostname.strip()
        if not HOSTNAME_PATTERN.match(hostname) or len(hostname) > HOSTNAME_MAX_LENGTH:
            raise ValidationError(
                f"Invalid hostname: {hostname!r}. Use letters, digits and inner hyphens"
            )
        return hostname

    @staticmethod
    def validate_port(port: object) -> int:
        """Validate port number.

        Args:
            port: Port number (int or numeric string) to validate

        Returns:
            Port as integer

        Raises:
            ValidationError: If port is invalid
        """
        text = str(port).strip()
        if not (text.isascii() and text.isdigit()):
            raise ValidationError(f"Invalid port: {text!r}. Must be a number")

        value = int(text)
        if not (1 <= value <= 65535):
            raise ValidationError(f"Invalid port: {value}. Must be between 1-65535")
        return value

    @staticmethod
    def validate_swap_size(size: object) -> int:
        """Validate swap size in megabytes.

        Raises:
            ValidationError: If size is not a positive integer
        """
        text = str(size).strip()
        if not (text.isascii() and text.isdigit()) or int(text) == 0:
            raise ValidationError(f"Invalid swap size: {text!r}. Must be a positive number of MB")
        return int(text)

    @staticmethod
    def parse_yes_no(answer: Optional[str]) -> bool:
        """Interpret a [y/N] answer; anything but yes means no."""
        if not answer:
            return False
        return answer.strip().lower() in ("y", "yes")
