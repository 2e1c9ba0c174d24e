"""
Engine executor — the central orchestration loop.

Runs an ordered list of steps exactly once each, top to bottom, and
collects their receipts.  A step that raises a non-fatal error becomes
a failed receipt and the loop moves on; only FatalError subclasses
stop the run.

Flow:
    steps → run each (isolated) → collect receipts → report
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from dotstrap.adapters.base import CommandRunner
from dotstrap.core.errors import DotstrapError, FatalError
from dotstrap.core.models.config import BootstrapConfig
from dotstrap.core.models.platform import PlatformProfile
from dotstrap.core.models.receipt import Receipt
from dotstrap.core.services.choices import ChoiceProvider
from dotstrap.core.services.packages.installer import PackageInstaller

logger = logging.getLogger(__name__)


@dataclass
class StepContext:
    """Everything a step needs, passed explicitly.

    ``profile`` and ``config`` are frozen.  ``selections`` carries the
    few operator choices a later step depends on (the shell step reads
    the prompt style picked during the theme step).
    """

    profile: PlatformProfile
    config: BootstrapConfig
    runner: CommandRunner
    installer: PackageInstaller
    choices: ChoiceProvider
    selections: dict[str, Any] = field(default_factory=dict)

    @property
    def dry_run(self) -> bool:
        return self.config.dry_run

    def path(self, key: str) -> Path:
        return self.config.path(key)


StepFunc = Callable[[StepContext], Receipt]


@dataclass(frozen=True)
class Step:
    """A named, self-contained unit of the bootstrap flow."""

    name: str
    run: StepFunc
    description: str = ""


@dataclass
class RunReport:
    """Result of executing a list of steps."""

    operation_id: str = ""
    dry_run: bool = False
    receipts: list[Receipt] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.status == "skipped")

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0 or self.skipped > 0:
            return "partial"
        return "failed"

    def get(self, step: str) -> Receipt | None:
        """Receipt for a step by name."""
        for receipt in self.receipts:
            if receipt.step == step:
                return receipt
        return None

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "dry_run": self.dry_run,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


def run_step(step: Step, ctx: StepContext) -> Receipt:
    """Run one step, turning non-fatal errors into a failed receipt.

    Raises:
        FatalError: Propagated untouched so the run aborts.
    """
    start = time.monotonic()
    try:
        receipt = step.run(ctx)
    except FatalError:
        raise
    except DotstrapError as e:
        logger.error("%s: %s", step.name, e)
        receipt = Receipt.failure(step=step.name, error=str(e))
    except Exception as e:
        logger.exception("%s: unexpected error", step.name)
        receipt = Receipt.failure(step=step.name, error=f"Unexpected error: {e}")

    receipt.duration_ms = int((time.monotonic() - start) * 1000)
    return receipt


def execute_steps(
    steps: list[Step],
    ctx: StepContext,
    operation_id: str = "",
) -> RunReport:
    """Run every step once, in order.

    Args:
        steps: The ordered steps.
        ctx: Shared step context.
        operation_id: Identifier recorded on the report.

    Returns:
        RunReport with one receipt per step.
    """
    report = RunReport(operation_id=operation_id, dry_run=ctx.dry_run)

    for step in steps:
        if step.description:
            logger.info("%s", step.description)
        receipt = run_step(step, ctx)
        report.receipts.append(receipt)

        status_marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
        logger.debug("%s %s → %s", status_marker, step.name, receipt.status)

    return report


def generate_operation_id() -> str:
    """Generate a unique run ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"run-{now}-{short}"
