"""Swap file step."""

import shlex
from typing import Optional

from vps_init.console import print_info, print_success
from vps_init.exceptions import InsufficientDiskSpaceError
from vps_init.steps.base import Step
from vps_init.types import VerificationRecord, VerificationStatus


class SwapStep(Step):
    """Recreate the swap file at the requested size and persist it in fstab."""

    name = "swap"

    def enabled(self) -> bool:
        return self.plan.swap_size_mb is not None

    def check_disk_space(self, size_mb: int) -> None:
        """Raise InsufficientDiskSpaceError unless size plus headroom fits."""
        required = size_mb + self.settings.swap.headroom_mb
        available = self.system.free_disk_mb(self.settings.paths.disk_root)
        if available < required:
            raise InsufficientDiskSpaceError(required, available)

    def apply(self) -> None:
        size_mb = self.plan.swap_size_mb or 0
        self.check_disk_space(size_mb)

        swap_file = self.settings.paths.swap_file
        quoted = shlex.quote(str(swap_file))

        if swap_file.exists():
            self.log.info("swap_file_replaced", path=str(swap_file))
            self.executor.execute(f"swapoff {quoted}", check=False)
            swap_file.unlink()

        print_info(f"Creating {size_mb}MB swap file...")
        if self.executor.check_command_available("fallocate"):
            self.executor.execute(f"fallocate -l {size_mb}M {quoted}")
        else:
            self.executor.execute(
                f"dd if=/dev/zero of={quoted} bs=1M count={size_mb} status=none",
                timeout=1800,
            )

        self.executor.execute(f"chmod 600 {quoted}")
        self.executor.execute(f"mkswap {quoted}")
        self.executor.execute(f"swapon {quoted}")

        fstab = self.settings.paths.fstab
        if str(swap_file) not in self.file_manager.read_file(fstab):
            self.file_manager.append_line(fstab, f"{swap_file} none swap sw 0 0")
            self.log.info("fstab_entry_added", path=str(swap_file))

        self.log.info("swap_configured", size_mb=size_mb)
        print_success("Swap configured")

    def verify(self) -> Optional[VerificationRecord]:
        wanted = self.plan.swap_size_mb or 0
        total = self.system.swap_total_mb(self.settings.paths.meminfo)
        if total >= wanted:
            return VerificationRecord("Swap", VerificationStatus.PASS, f"enabled (total: {total}MB)")
        return VerificationRecord("Swap", VerificationStatus.FAIL, f"size mismatch (current: {total}MB)")
