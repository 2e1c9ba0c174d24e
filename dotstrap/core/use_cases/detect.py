"""
Detection use case — report what a run would find, without changing it.

Ties together platform detection, backend selection and the presence
checks each feature step starts with.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from dotstrap.adapters.base import CommandRunner
from dotstrap.core.errors import UnsupportedPlatform
from dotstrap.core.models.config import BootstrapConfig
from dotstrap.core.models.platform import PlatformProfile
from dotstrap.core.services.detection import detect_platform, find_installed_terminal
from dotstrap.core.services.detection.platform import OS_RELEASE
from dotstrap.core.services.features.ssh import public_key_path
from dotstrap.core.services.features.terminal import TERMINAL_EMULATORS
from dotstrap.core.services.packages import select_backend

logger = logging.getLogger(__name__)

# Binaries the feature steps look for on PATH.
TOOLS = ("git", "zsh", "nvim", "curl")


@dataclass
class DetectResult:
    """Result of the detect use case."""

    profile: PlatformProfile | None = None
    backend_available: bool = False
    terminal: str | None = None
    tools: dict[str, bool] = field(default_factory=dict)
    files: dict[str, bool] = field(default_factory=dict)
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        assert self.profile is not None
        result["os"] = self.profile.os_kind.value
        result["distro"] = self.profile.distro_id
        result["package_manager"] = self.profile.package_manager.value
        result["package_manager_available"] = self.backend_available
        result["terminal"] = self.terminal
        result["tools"] = self.tools
        result["files"] = self.files
        return result


def run_detect(
    config: BootstrapConfig,
    runner: CommandRunner | None = None,
    system: str | None = None,
    os_release: Path = OS_RELEASE,
) -> DetectResult:
    """Detect the platform and the state of every managed tool.

    Args:
        config: Run configuration (paths to check).
        runner: Command runner (default: real subprocesses).
        system: Override the kernel name (for tests).
        os_release: Distribution identifier file.

    Returns:
        DetectResult; ``error`` is set when the platform is unsupported.
    """
    result = DetectResult()

    if runner is None:
        from dotstrap.adapters.shell.command import SubprocessRunner

        runner = SubprocessRunner()

    try:
        profile = detect_platform(system=system, os_release=os_release, which=runner.which)
    except UnsupportedPlatform as e:
        result.error = str(e)
        return result

    result.profile = profile
    result.backend_available = select_backend(profile, runner).is_available()
    result.terminal = find_installed_terminal(
        TERMINAL_EMULATORS,
        runner,
        config.path("applications"),
    )
    result.tools = {name: runner.has(name) for name in TOOLS}

    font_key = "mac_font" if profile.is_macos else "linux_font"
    result.files = {
        "terminal_config": config.path("terminal_config").is_file(),
        "nvim_init": config.path("nvim_init").is_file(),
        "zshrc": config.path("zshrc").is_file(),
        "zinit": config.path("zinit_home").is_dir(),
        "font": config.path(font_key).is_file(),
        "ssh_key": public_key_path(config.ssh_key).is_file(),
    }
    return result
