"""
Subprocess runner — execute external commands for real.

This is the SINGLE PLACE where ``subprocess.run`` is called.  Commands
run synchronously and without a timeout: a package manager that hangs
on the network blocks the run until the operator interrupts it.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from collections.abc import Sequence

from dotstrap.adapters.base import CommandResult, CommandRunner

logger = logging.getLogger(__name__)

# Exit code a shell reports for "command not found".
NOT_FOUND_EXIT = 127


class SubprocessRunner(CommandRunner):
    """Run commands with :func:`subprocess.run` and capture their output."""

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: str | None = None,
        input: str | None = None,
        capture: bool = True,
    ) -> CommandResult:
        args = list(argv)
        logger.debug("Executing: %s (cwd=%s)", " ".join(args), cwd or ".")
        start = time.monotonic()

        try:
            result = subprocess.run(
                args,
                cwd=cwd,
                input=input,
                capture_output=capture,
                text=True,
            )
        except FileNotFoundError:
            return CommandResult(
                argv=args,
                returncode=NOT_FOUND_EXIT,
                stderr=f"{args[0]}: command not found",
            )
        except OSError as e:
            return CommandResult(
                argv=args,
                returncode=1,
                stderr=f"Command execution error: {e}",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        return CommandResult(
            argv=args,
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            duration_ms=elapsed_ms,
        )

    def which(self, name: str) -> str | None:
        return shutil.which(name)
