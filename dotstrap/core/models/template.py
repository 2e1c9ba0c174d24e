"""
Generated file model — produced by every renderer.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class GeneratedFile(BaseModel):
    """A configuration artifact ready to be written.

    Attributes:
        path:     Absolute target path.
        content:  Full file content.
        backup:   Copy the previous version to ``<path>.bak`` first.
        reason:   Why this file was generated.
    """

    path: Path
    content: str
    backup: bool = False
    reason: str = ""
