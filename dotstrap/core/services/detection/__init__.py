"""
Detection — ``__init__.py`` re-exports all detection functions.

These functions READ system state but never WRITE.
"""

from dotstrap.core.services.detection.platform import (  # noqa: F401
    backend_for_distro,
    detect_platform,
    parse_os_release,
)
from dotstrap.core.services.detection.presence import (  # noqa: F401
    find_app_bundles,
    find_installed_terminal,
)
