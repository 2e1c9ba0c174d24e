"""
Git adapter — the version-control operations the backup step needs.

Uses the git CLI through a CommandRunner — never a git library.
"""

from __future__ import annotations

import logging
from pathlib import Path

from dotstrap.adapters.base import CommandResult, CommandRunner
from dotstrap.core.errors import DotstrapError, PushFailure

logger = logging.getLogger(__name__)


class GitCommandError(DotstrapError):
    """A git command other than push failed."""


class GitRepository:
    """A working tree driven through the git CLI.

    Args:
        path: The working tree root.
        runner: Command runner used for every git invocation.
    """

    def __init__(self, path: Path, runner: CommandRunner):
        self.path = path
        self._runner = runner

    def __repr__(self) -> str:
        return f"<GitRepository path={str(self.path)!r}>"

    def is_repo(self) -> bool:
        return (self.path / ".git").is_dir()

    # ── Operations ──────────────────────────────────────────────

    def init(self) -> None:
        self._git(["init"])

    def add_remote(self, name: str, url: str) -> None:
        self._git(["remote", "add", name, url])

    def add_all(self) -> None:
        self._git(["add", "."])

    def has_changes(self) -> bool:
        """Whether the index or working tree differs from HEAD."""
        porcelain = self._git(["status", "--porcelain"]).stdout
        return bool(porcelain.strip())

    def commit(self, message: str) -> bool:
        """Commit everything staged.

        Returns:
            False when there was nothing to commit.
        """
        if not self.has_changes():
            return False
        self._git(["commit", "-m", message])
        return True

    def push(self, remote: str, branch: str) -> None:
        """Push ``branch`` to ``remote`` and set upstream.

        Raises:
            PushFailure: If git push exits non-zero.
        """
        result = self._runner.run(["git", "push", "-u", remote, branch], cwd=str(self.path))
        if not result.ok:
            raise PushFailure(
                f"Git push failed. Please check your remote repository settings: {result.error}"
            )

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, args: list[str]) -> CommandResult:
        """Run a git command in the working tree, raising on failure."""
        result = self._runner.run(["git", *args], cwd=str(self.path))
        if not result.ok:
            raise GitCommandError(result.stderr.strip() or f"git {args[0]} failed")
        return result
