"""
BootstrapConfig — everything a run needs to know up front.

Loaded from ``dotstrap.yml`` (or all defaults when there is none) and
frozen afterwards.  Paths are stored as written in YAML (``~`` allowed)
and resolved against ``home`` on access so tests can point a whole run
at a temporary directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

LOG_FILE_NAME = "script.log"
INSTALLED_APPS_FILE_NAME = "installed_apps.txt"
LEDGER_FILE_NAME = "runs.ndjson"


class PathsConfig(BaseModel):
    """Well-known filesystem locations."""

    log_dir: str = "~/LOGS"
    terminal_config: str = "~/terminal_config.conf"
    nvim_init: str = "~/.config/nvim/init.lua"
    zshrc: str = "~/.zshrc"
    zinit_home: str = "~/.zinit"
    downloads: str = "~/Downloads"
    applications: str = "/Applications"
    mac_font: str = "~/Library/Fonts/JetBrainsMono Nerd Font Mono.ttf"
    linux_font: str = "/usr/share/fonts/truetype/jetbrains/JetBrainsMonoNL-Regular.ttf"


class BackupConfig(BaseModel):
    """Where generated configs are mirrored and pushed."""

    directory: str = "~/config_backup"
    remote: str = ""
    branch: str = "master"


class SshConfig(BaseModel):
    key_path: str = "~/.ssh/id_rsa"
    email: str = "your_email@example.com"
    key_type: str = "rsa"
    bits: int = 4096


class HousekeepingConfig(BaseModel):
    max_age_days: int = 7


class BootstrapConfig(BaseModel):
    """Root configuration for a bootstrap run."""

    model_config = ConfigDict(frozen=True)

    home: Path = Field(default_factory=Path.home)
    dry_run: bool = False
    source_path: Path | None = None   # the dotstrap.yml this came from

    paths: PathsConfig = Field(default_factory=PathsConfig)
    backup: BackupConfig = Field(default_factory=BackupConfig)
    ssh: SshConfig = Field(default_factory=SshConfig)
    housekeeping: HousekeepingConfig = Field(default_factory=HousekeepingConfig)

    # Upgrade every installed package as part of the flow.
    upgrade_packages: bool = False

    # Canned answers for the choice provider, keyed by question id.
    answers: dict[str, Any] = Field(default_factory=dict)

    def expand(self, raw: str) -> Path:
        """Resolve ``~`` against the configured home directory."""
        if raw == "~":
            return self.home
        if raw.startswith("~/"):
            return self.home / raw[2:]
        return Path(raw)

    def path(self, key: str) -> Path:
        """Resolve one of the ``paths`` entries by name."""
        return self.expand(getattr(self.paths, key))

    @property
    def log_dir(self) -> Path:
        return self.path("log_dir")

    @property
    def log_file(self) -> Path:
        return self.log_dir / LOG_FILE_NAME

    @property
    def installed_apps_file(self) -> Path:
        return self.log_dir / INSTALLED_APPS_FILE_NAME

    @property
    def ledger_file(self) -> Path:
        return self.log_dir / LEDGER_FILE_NAME

    @property
    def backup_dir(self) -> Path:
        return self.expand(self.backup.directory)

    @property
    def ssh_key(self) -> Path:
        return self.expand(self.ssh.key_path)
