"""
Feature installers — the ordered steps of a bootstrap run.

Each step ensures one tool or config is present: detect, install if
absent, write its artifact.  ``BOOTSTRAP_STEPS`` is the full flow,
ending with the backup and housekeeping steps.
"""

from dotstrap.core.engine.executor import Step
from dotstrap.core.services.backup import backup_step
from dotstrap.core.services.features.editor import install_nvim_and_configure
from dotstrap.core.services.features.fonts import install_nerd_fonts
from dotstrap.core.services.features.package_manager import ensure_package_manager
from dotstrap.core.services.features.shell import install_and_configure_zsh
from dotstrap.core.services.features.ssh import check_git_and_ssh_key
from dotstrap.core.services.features.system import log_installed_apps, update_system_apps
from dotstrap.core.services.features.terminal import (
    check_terminal_emulator,
    setup_terminal_theme,
)
from dotstrap.core.services.housekeeping import clear_old_downloads

FEATURE_STEPS: list[Step] = [
    Step("package-manager", ensure_package_manager, "Checking for the package manager..."),
    Step("terminal-emulator", check_terminal_emulator, "Checking for terminal emulators..."),
    Step("terminal-theme", setup_terminal_theme, "Configuring terminal theme..."),
    Step("nerd-font", install_nerd_fonts, "Checking for JetBrains Nerd Font Mono..."),
    Step("system-update", update_system_apps, "Updating installed apps..."),
    Step("installed-apps", log_installed_apps, "Logging installed applications..."),
    Step("editor", install_nvim_and_configure, "Checking for Neovim..."),
    Step("shell", install_and_configure_zsh, "Checking for zsh..."),
    Step("git-ssh", check_git_and_ssh_key, "Checking for git..."),
]

BOOTSTRAP_STEPS: list[Step] = [
    *FEATURE_STEPS,
    Step("backup", backup_step),
    Step("housekeeping", clear_old_downloads),
]

__all__ = ["BOOTSTRAP_STEPS", "FEATURE_STEPS"]
