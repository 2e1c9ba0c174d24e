"""
Package backends — one class per package manager.

Every backend answers the same four questions: is this package
present, install it, upgrade everything, list everything.  Presence
checks only ever query the local package database; nothing is
installed speculatively to find out.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod

from dotstrap.adapters.base import CommandResult, CommandRunner
from dotstrap.core.errors import DotstrapError, InstallError, UpgradeError
from dotstrap.core.models.package import PackageRequest
from dotstrap.core.models.platform import PackageManagerKind, PlatformProfile

logger = logging.getLogger(__name__)


class PackageBackend(ABC):
    """Abstract base class for package managers.

    Args:
        runner: Command runner for every invocation.
        use_sudo: Prefix privileged commands with ``sudo``.
            Defaults to True unless already running as root.
    """

    kind: PackageManagerKind
    binary: str

    def __init__(self, runner: CommandRunner, use_sudo: bool | None = None):
        self._runner = runner
        self._use_sudo = os.geteuid() != 0 if use_sudo is None else use_sudo

    @property
    def name(self) -> str:
        return self.kind.value

    def is_available(self) -> bool:
        """Whether the backend binary is on PATH."""
        return self._runner.has(self.binary)

    @abstractmethod
    def is_installed(self, request: PackageRequest) -> bool:
        """Query the local package database. Never mutates."""

    @abstractmethod
    def install(self, request: PackageRequest) -> None:
        """Install a package.

        Raises:
            InstallError: If the backend reports failure.
        """

    @abstractmethod
    def upgrade_commands(self) -> list[list[str]]:
        """Commands that refresh the index and upgrade everything."""

    @abstractmethod
    def list_command(self) -> list[str]:
        """Command that prints every installed package."""

    def upgrade_all(self) -> None:
        """Refresh and upgrade all installed packages.

        Raises:
            UpgradeError: On the first failing command.
        """
        for argv in self.upgrade_commands():
            result = self._runner.run(argv, capture=False)
            if not result.ok:
                raise UpgradeError(f"{self.name} upgrade failed: {result.error}")

    def list_installed(self) -> str:
        """Installed package listing as printed by the backend."""
        result = self._runner.run(self.list_command())
        if not result.ok:
            raise DotstrapError(f"Cannot list {self.name} packages: {result.error}")
        return result.stdout

    # ── Helpers ─────────────────────────────────────────────────

    def _privileged(self, argv: list[str]) -> list[str]:
        return ["sudo", *argv] if self._use_sudo else argv

    def _run(self, argv: list[str]) -> CommandResult:
        return self._runner.run(argv)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class BrewBackend(PackageBackend):
    """Homebrew, with the formula → cask fallback."""

    kind = PackageManagerKind.BREW
    binary = "brew"

    def is_installed(self, request: PackageRequest) -> bool:
        if self._run(["brew", "list", "--cask", request.name]).ok:
            return True
        return self._run(["brew", "list", request.name]).ok

    def install(self, request: PackageRequest) -> None:
        if request.cask:
            result = self._run(["brew", "install", "--cask", request.name])
            if not result.ok:
                raise InstallError(request.name, self.name, result.error)
            return

        result = self._run(["brew", "install", request.name])
        if result.ok:
            return

        # One retry as a cask, then give up.
        logger.warning("brew install %s failed, retrying as cask", request.name)
        fallback = self._run(["brew", "install", "--cask", request.name])
        if not fallback.ok:
            raise InstallError(request.name, self.name, fallback.error)

    def upgrade_commands(self) -> list[list[str]]:
        return [["brew", "update"], ["brew", "upgrade"]]

    def list_command(self) -> list[str]:
        return ["brew", "list"]


class AptBackend(PackageBackend):
    """apt on Debian/Ubuntu and the fallback for unknown distributions."""

    kind = PackageManagerKind.APT
    binary = "apt-get"

    def __init__(self, runner: CommandRunner, use_sudo: bool | None = None):
        super().__init__(runner, use_sudo)
        self._index_refreshed = False

    def is_installed(self, request: PackageRequest) -> bool:
        result = self._run(["dpkg-query", "-W", "-f=${Status}", request.name])
        return result.ok and "install ok installed" in result.stdout

    def install(self, request: PackageRequest) -> None:
        if not self._index_refreshed:
            update = self._run(self._privileged(["apt-get", "update"]))
            if not update.ok:
                raise InstallError(request.name, self.name, update.error)
            self._index_refreshed = True

        result = self._run(self._privileged(["apt-get", "install", "-y", request.name]))
        if not result.ok:
            raise InstallError(request.name, self.name, result.error)

    def upgrade_commands(self) -> list[list[str]]:
        return [
            self._privileged(["apt-get", "update"]),
            self._privileged(["apt-get", "upgrade", "-y"]),
        ]

    def list_command(self) -> list[str]:
        return ["dpkg", "--get-selections"]


class PacmanBackend(PackageBackend):
    kind = PackageManagerKind.PACMAN
    binary = "pacman"

    def is_installed(self, request: PackageRequest) -> bool:
        return self._run([self.binary, "-Q", request.name]).ok

    def install(self, request: PackageRequest) -> None:
        result = self._run(self._privileged(["pacman", "-Syu", "--noconfirm", request.name]))
        if not result.ok:
            raise InstallError(request.name, self.name, result.error)

    def upgrade_commands(self) -> list[list[str]]:
        return [self._privileged(["pacman", "-Syu", "--noconfirm"])]

    def list_command(self) -> list[str]:
        return [self.binary, "-Q"]


class YayBackend(PacmanBackend):
    """The yay AUR helper.  Runs unprivileged; it calls sudo itself."""

    kind = PackageManagerKind.YAY
    binary = "yay"

    def install(self, request: PackageRequest) -> None:
        result = self._run(["yay", "-S", "--noconfirm", request.name])
        if not result.ok:
            raise InstallError(request.name, self.name, result.error)

    def upgrade_commands(self) -> list[list[str]]:
        return [["yay", "-Syu", "--noconfirm"]]


BACKENDS: dict[PackageManagerKind, type[PackageBackend]] = {
    PackageManagerKind.BREW: BrewBackend,
    PackageManagerKind.APT: AptBackend,
    PackageManagerKind.PACMAN: PacmanBackend,
    PackageManagerKind.YAY: YayBackend,
}


def select_backend(
    profile: PlatformProfile,
    runner: CommandRunner,
    use_sudo: bool | None = None,
) -> PackageBackend:
    """Instantiate the backend the platform profile names."""
    return BACKENDS[profile.package_manager](runner, use_sudo=use_sudo)
