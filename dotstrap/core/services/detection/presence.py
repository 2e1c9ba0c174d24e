"""
Presence probes — is a tool already on this machine?

These functions READ system state but never WRITE.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from dotstrap.adapters.base import CommandRunner


def find_app_bundles(applications_dir: Path, name: str) -> list[Path]:
    """App bundles in ``applications_dir`` whose name starts with ``name``.

    Expands ``NAME*.app`` as a real glob so versioned bundles such as
    ``Hyper 3.app`` match as well as ``Hyper.app``.
    """
    if not applications_dir.is_dir():
        return []
    return sorted(p for p in applications_dir.glob(f"{name}*.app") if p.is_dir())


def find_installed_terminal(
    candidates: Iterable[str],
    runner: CommandRunner,
    applications_dir: Path,
) -> str | None:
    """First terminal emulator found on PATH or as an app bundle."""
    for name in candidates:
        if runner.has(name.lower()) or find_app_bundles(applications_dir, name):
            return name
    return None
