"""
Runner base — the contract between dotstrap and external commands.

Everything dotstrap does to the machine goes through a CommandRunner:
package managers, git, ssh-keygen, the bootstrap installers.  Services
never call ``subprocess`` themselves, which is what lets the tests swap
in the MockRunner and count exactly which commands a run issued.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from pydantic import BaseModel, Field


class CommandResult(BaseModel):
    """Outcome of one external command.

    Runners NEVER raise for a failing command — a non-zero exit code,
    a missing binary (127) or an OS error are all captured here.
    """

    argv: list[str] = Field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def error(self) -> str:
        """Best available error text for logs."""
        return self.stderr.strip() or f"{self.command} exited with code {self.returncode}"

    @property
    def command(self) -> str:
        return " ".join(self.argv)


class CommandRunner(ABC):
    """Abstract base class for command runners.

    To create a new runner:
        1. Subclass CommandRunner
        2. Implement run and which
    """

    @abstractmethod
    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: str | None = None,
        input: str | None = None,
        capture: bool = True,
    ) -> CommandResult:
        """Run a command to completion and return its result.

        ``capture=False`` lets the command talk to the terminal directly
        (used for the interactive bootstrap installers).

        MUST never raise for a failing command.
        """

    @abstractmethod
    def which(self, name: str) -> str | None:
        """Locate a binary on PATH, like ``shutil.which``."""

    def has(self, name: str) -> bool:
        return self.which(name) is not None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
