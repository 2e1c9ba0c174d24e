"""
PlatformProfile — which OS we are on and which backend serves it.

Built once by the platform detector and passed explicitly to every
step afterwards.  Frozen: nothing re-detects mid-run.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class OsKind(str, Enum):
    MACOS = "macos"
    DEBIAN_LIKE = "debian-like"
    ARCH_LIKE = "arch-like"


class PackageManagerKind(str, Enum):
    BREW = "brew"
    APT = "apt"
    PACMAN = "pacman"
    YAY = "yay"


class PlatformProfile(BaseModel):
    """Detected platform and its package backend."""

    model_config = ConfigDict(frozen=True)

    os_kind: OsKind
    package_manager: PackageManagerKind
    distro_id: str = ""

    @property
    def is_macos(self) -> bool:
        return self.os_kind is OsKind.MACOS

    def describe(self) -> str:
        """One-line summary for logs and the ``detect`` command."""
        os_label = self.distro_id or self.os_kind.value
        return f"OS: {os_label}, Package Manager: {self.package_manager.value}"
