"""
Package requests and install outcomes.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class PackageRequest(BaseModel):
    """A logical package to make present.

    ``cask`` marks packages that are GUI apps or fonts on Homebrew and
    must go straight to ``brew install --cask``.  Other backends ignore it.
    """

    name: str
    cask: bool = False


class InstallOutcome(str, Enum):
    INSTALLED = "installed"
    ALREADY_PRESENT = "already_present"
    DRY_RUN = "dry_run"            # counts as success, nothing mutated

    @property
    def changed(self) -> bool:
        return self is InstallOutcome.INSTALLED
