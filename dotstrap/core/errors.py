"""
Error taxonomy.

Fatal errors abort the whole run.  Everything else is caught by the
step executor, logged at ERROR and recorded as a failed receipt so the
next independent step still runs.
"""

from __future__ import annotations


class DotstrapError(Exception):
    """Root of every error raised by dotstrap."""


class FatalError(DotstrapError):
    """An error that stops the run immediately."""


class UnsupportedPlatform(FatalError):
    """Neither macOS nor a readable Linux distribution identifier."""


class BackupDirectoryError(FatalError):
    """The backup staging directory could not be created or entered."""


class PackageManagerMissing(DotstrapError):
    """The selected backend binary is not on PATH."""

    def __init__(self, backend: str):
        super().__init__(f"Package manager '{backend}' is not installed")
        self.backend = backend


class InstallError(DotstrapError):
    """A package could not be installed."""

    def __init__(self, package: str, backend: str, detail: str = ""):
        message = f"Failed to install {package} via {backend}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.package = package
        self.backend = backend
        self.detail = detail


class PushFailure(DotstrapError):
    """git push to the backup remote failed."""


class MissingAnswer(DotstrapError):
    """A choice provider has no answer for a question."""


class UpgradeError(DotstrapError):
    """Refreshing or upgrading the installed packages failed."""
