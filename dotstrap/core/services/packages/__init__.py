"""
Packages — backends and the idempotent installer.
"""

from dotstrap.core.services.packages.backends import (  # noqa: F401
    BACKENDS,
    AptBackend,
    BrewBackend,
    PackageBackend,
    PacmanBackend,
    YayBackend,
    select_backend,
)
from dotstrap.core.services.packages.installer import PackageInstaller  # noqa: F401
