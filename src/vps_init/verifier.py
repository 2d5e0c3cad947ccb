"""Post-run verification of live system state."""

from typing import Iterable, List

import structlog
from rich.markup import escape

from vps_init.console import console
from vps_init.steps.base import Step
from vps_init.types import VerificationRecord, VerificationStatus

logger = structlog.get_logger()

_MARKS = {
    VerificationStatus.PASS: "[green]✓[/]",
    VerificationStatus.FAIL: "[red]✗[/]",
    VerificationStatus.WARN: "[yellow]![/]",
}


class VerificationTally:
    """Pass/fail/warn counters plus the records behind them."""

    def __init__(self) -> None:
        self.passed = 0
        self.failed = 0
        self.warned = 0
        self.records: List[VerificationRecord] = []

    def record(self, record: VerificationRecord) -> None:
        self.records.append(record)
        if record.status == VerificationStatus.PASS:
            self.passed += 1
        elif record.status == VerificationStatus.FAIL:
            self.failed += 1
        else:
            self.warned += 1

    @property
    def is_empty(self) -> bool:
        return not self.records

    def summary(self) -> str:
        if self.is_empty:
            return "No changes made, nothing to verify."
        text = f"Verification summary: {self.passed} passed, {self.failed} failed"
        if self.warned:
            text += f", {self.warned} warnings"
        return text


class Verifier:
    """Re-query the system for every step that ran."""

    def run(self, steps: Iterable[Step]) -> VerificationTally:
        tally = VerificationTally()
        console.print("\n[bold yellow]=============== Final verification ===============[/]")

        for step in steps:
            record = step.verify()
            if record is None:
                continue
            tally.record(record)
            logger.info(
                "verification",
                component=record.component,
                status=record.status.value,
                detail=record.message,
            )
            console.print(
                f"    {_MARKS[record.status]} {record.component}: {escape(record.message)}"
            )

        console.print()
        console.print(f"[blue]{tally.summary()}[/]")
        logger.info(
            "verification_summary",
            passed=tally.passed,
            failed=tally.failed,
            warned=tally.warned,
        )
        return tally
