"""
JetBrains Mono Nerd Font.

Installed fonts are recognised by their font file, and on macOS also
by the Homebrew cask.  Linux distributions package the font under
different names, so each candidate is tried in order.
"""

from __future__ import annotations

import logging

from dotstrap.core.engine.executor import StepContext
from dotstrap.core.models.package import InstallOutcome, PackageRequest
from dotstrap.core.models.platform import PackageManagerKind
from dotstrap.core.models.receipt import Receipt
from dotstrap.core.services.features.base import install_receipt

logger = logging.getLogger(__name__)

STEP = "nerd-font"

MAC_FONT_CASK = PackageRequest(name="font-jetbrains-mono-nerd-font", cask=True)

LINUX_FONT_PACKAGES: dict[PackageManagerKind, list[str]] = {
    PackageManagerKind.APT: ["fonts-jetbrains-mono", "ttf-jetbrains-mono"],
    PackageManagerKind.PACMAN: ["ttf-jetbrains-mono", "fonts-jetbrains-mono"],
    PackageManagerKind.YAY: ["ttf-jetbrains-mono", "fonts-jetbrains-mono"],
}


def install_nerd_fonts(ctx: StepContext) -> Receipt:
    if ctx.profile.is_macos:
        font_file = ctx.path("mac_font")
        if font_file.is_file():
            logger.info("JetBrains Nerd Font Mono is already installed.")
            return install_receipt(STEP, MAC_FONT_CASK.name, InstallOutcome.ALREADY_PRESENT)

        outcome = ctx.installer.install(MAC_FONT_CASK)
        return install_receipt(STEP, MAC_FONT_CASK.name, outcome)

    font_file = ctx.path("linux_font")
    if font_file.is_file():
        logger.info("JetBrains Nerd Font Mono is already installed on Linux.")
        return Receipt.success(
            step=STEP,
            output="font already installed",
            metadata={"path": str(font_file), "outcome": InstallOutcome.ALREADY_PRESENT.value},
        )

    candidates = LINUX_FONT_PACKAGES[ctx.profile.package_manager]
    logger.info("Installing JetBrains Nerd Font Mono on Linux...")
    request, outcome = ctx.installer.install_first(candidates)
    return install_receipt(STEP, request.name, outcome)
