"""
Domain models — Pydantic types for dotstrap.

All models are re-exported here for convenient access:

    from dotstrap.core.models import BootstrapConfig, PlatformProfile, Receipt
"""

from dotstrap.core.models.config import (
    BackupConfig,
    BootstrapConfig,
    HousekeepingConfig,
    PathsConfig,
    SshConfig,
)
from dotstrap.core.models.options import EditorOptions, ShellOptions, TerminalThemeOptions
from dotstrap.core.models.package import InstallOutcome, PackageRequest
from dotstrap.core.models.platform import OsKind, PackageManagerKind, PlatformProfile
from dotstrap.core.models.receipt import Receipt
from dotstrap.core.models.template import GeneratedFile

__all__ = [
    # config.py
    "BackupConfig",
    "BootstrapConfig",
    # options.py
    "EditorOptions",
    # template.py
    "GeneratedFile",
    "HousekeepingConfig",
    # package.py
    "InstallOutcome",
    # platform.py
    "OsKind",
    "PackageManagerKind",
    "PackageRequest",
    "PathsConfig",
    "PlatformProfile",
    # receipt.py
    "Receipt",
    "ShellOptions",
    "SshConfig",
    "TerminalThemeOptions",
]
