"""Exceptions raised by parasurf.

Only genuinely fatal conditions raise.  Degenerate normals and evaluations
that land on a pole are absorbed into the mesh data (zero normals,
non-finite texture coordinates) and can be inspected with
:func:`parasurf.mesh.diagnose`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ParasurfError(Exception):
    """Base class for all parasurf errors."""


class InvalidDomain(ParasurfError, ValueError):
    """A parameter rectangle or grid resolution that cannot be sampled."""

    def __init__(self, message: str, *, start=None, end=None, resolution=None):
        super().__init__(message)
        self.start = start
        self.end = end
        self.resolution = resolution


class ConfigError(ParasurfError, ValueError):
    """A scene configuration that cannot be read or interpreted."""

    def __init__(self, message: str, *, path: Optional[Path] = None):
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class AssetLoadFailure(ParasurfError, RuntimeError):
    """An external asset (texture image) failed to load."""

    def __init__(self, path: Path | str, reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        msg = f"failed to load asset {self.path}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


__all__ = ["ParasurfError", "InvalidDomain", "ConfigError", "AssetLoadFailure"]
