"""
Platform detection — pick the package backend for this machine.

Read-only: looks at the kernel name, ``/etc/os-release`` and PATH.
No network access.  Runs once per process; the resulting
PlatformProfile is passed everywhere else.
"""

from __future__ import annotations

import logging
import platform
import shutil
from collections.abc import Callable
from pathlib import Path

from dotstrap.core.errors import UnsupportedPlatform
from dotstrap.core.models.platform import OsKind, PackageManagerKind, PlatformProfile

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")

# distro ID → (os kind, backend).  Unknown Linux IDs fall back to apt.
_DISTRO_BACKENDS: dict[str, tuple[OsKind, PackageManagerKind]] = {
    "ubuntu": (OsKind.DEBIAN_LIKE, PackageManagerKind.APT),
    "debian": (OsKind.DEBIAN_LIKE, PackageManagerKind.APT),
    "arch": (OsKind.ARCH_LIKE, PackageManagerKind.PACMAN),
    "manjaro": (OsKind.ARCH_LIKE, PackageManagerKind.PACMAN),
}
_FALLBACK = (OsKind.DEBIAN_LIKE, PackageManagerKind.APT)

# AUR helper preferred over plain pacman when present.
AUR_HELPER = "yay"


def parse_os_release(text: str) -> dict[str, str]:
    """Parse ``KEY=value`` lines of an os-release file.

    Values may be single- or double-quoted; comments and blank lines
    are ignored.
    """
    fields: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        fields[key.strip()] = value
    return fields


def backend_for_distro(
    distro_id: str,
    *,
    aur_helper_present: bool = False,
) -> tuple[OsKind, PackageManagerKind]:
    """Map a Linux distribution ID to its OS kind and backend."""
    os_kind, backend = _DISTRO_BACKENDS.get(distro_id.lower(), _FALLBACK)
    if backend is PackageManagerKind.PACMAN and aur_helper_present:
        backend = PackageManagerKind.YAY
    return os_kind, backend


def detect_platform(
    system: str | None = None,
    os_release: Path = OS_RELEASE,
    which: Callable[[str], str | None] = shutil.which,
) -> PlatformProfile:
    """Detect the running platform.

    Args:
        system: Kernel name as reported by :func:`platform.system`
            (default: the running one).
        os_release: Distribution identifier file for Linux.
        which: PATH lookup used to spot the AUR helper.

    Returns:
        Frozen PlatformProfile.

    Raises:
        UnsupportedPlatform: Not macOS, or Linux without a readable
            os-release file.
    """
    system = system if system is not None else platform.system()
    logger.info("Detecting OS and package manager...")

    if system == "Darwin":
        profile = PlatformProfile(
            os_kind=OsKind.MACOS,
            package_manager=PackageManagerKind.BREW,
            distro_id="macos",
        )
    elif system == "Linux":
        if not os_release.is_file():
            raise UnsupportedPlatform("Cannot detect Linux distribution.")
        try:
            fields = parse_os_release(os_release.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise UnsupportedPlatform(f"Cannot read {os_release}: {e}") from e

        distro_id = fields.get("ID", "")
        os_kind, backend = backend_for_distro(
            distro_id,
            aur_helper_present=which(AUR_HELPER) is not None,
        )
        profile = PlatformProfile(
            os_kind=os_kind,
            package_manager=backend,
            distro_id=distro_id,
        )
    else:
        raise UnsupportedPlatform(f"Unsupported OS: {system or 'unknown'}")

    logger.info("Detected %s", profile.describe())
    return profile
