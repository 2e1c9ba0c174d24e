"""
Run ledger — one NDJSON line per bootstrap run, next to the installation log.

The log says what happened step by step; the ledger answers "how did the
last few runs go" without parsing it.  Lines are only ever appended.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, ValidationError

if TYPE_CHECKING:
    from dotstrap.core.engine.executor import RunReport

logger = logging.getLogger(__name__)


class LedgerEntry(BaseModel):
    """Summary of one run."""

    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    operation_id: str = ""
    platform: str = ""
    dry_run: bool = False
    status: str = ""               # ok, partial, failed
    steps_total: int = 0
    steps_succeeded: int = 0
    steps_failed: int = 0
    steps_skipped: int = 0
    duration_ms: int = 0
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def for_report(cls, report: RunReport, *, platform: str, duration_ms: int) -> LedgerEntry:
        """Entry for a run that reached the end of its steps."""
        return cls(
            operation_id=report.operation_id,
            platform=platform,
            dry_run=report.dry_run,
            status=report.status,
            steps_total=report.total,
            steps_succeeded=report.succeeded,
            steps_failed=report.failed,
            steps_skipped=report.skipped,
            duration_ms=duration_ms,
            errors=[f"{r.step}: {r.error}" for r in report.receipts if r.failed],
        )

    @classmethod
    def for_abort(
        cls,
        operation_id: str,
        error: Exception,
        *,
        platform: str,
        dry_run: bool,
        duration_ms: int,
    ) -> LedgerEntry:
        """Entry for a run stopped by a fatal error."""
        return cls(
            operation_id=operation_id,
            platform=platform,
            dry_run=dry_run,
            status="failed",
            duration_ms=duration_ms,
            errors=[str(error)],
        )


class RunLedger:
    """Appends entries to, and reads them back from, an NDJSON file."""

    def __init__(self, path: Path):
        self.path = path

    def write(self, entry: LedgerEntry) -> None:
        """Append one entry. A write failure is logged, never raised."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(entry.model_dump_json() + "\n")
        except OSError as e:
            logger.error("Could not record run %s in %s: %s", entry.operation_id, self.path, e)
            return
        logger.debug("Recorded run %s (%s)", entry.operation_id, entry.status)

    def read_all(self) -> list[LedgerEntry]:
        """Every readable entry, oldest first; corrupt lines are skipped."""
        try:
            lines = self.path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return []

        entries: list[LedgerEntry] = []
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                entries.append(LedgerEntry.model_validate(json.loads(line)))
            except (ValueError, ValidationError) as e:
                logger.warning("%s:%d: skipping unreadable entry (%s)", self.path.name, number, e)
        return entries
