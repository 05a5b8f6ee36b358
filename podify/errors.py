"""Exception hierarchy for the packaging pipeline.

Every fatal failure is a PackagingError carrying the pipeline stage that
failed (resolution, build, erase, copy, install) and, where known, the path
involved.  The CLI prints ``stage`` and the message; nothing is retried.
"""

from pathlib import Path
from typing import Optional, Union


class PackagingError(RuntimeError):
    """Base class for fatal packaging failures."""

    stage = "package"

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class ResolutionError(PackagingError):
    """A required dependency could not be resolved to a local file."""

    stage = "resolution"

    def __init__(self, message: str, coordinate: Optional[str] = None,
                 path: Optional[Union[str, Path]] = None):
        super().__init__(message, path)
        self.coordinate = coordinate


class ProfileError(PackagingError):
    """Profile algebra referenced an undeclared profile."""

    stage = "resolution"


class BuildError(PackagingError):
    """The primary artifact could not be produced or located."""

    stage = "build"


class EraseError(PackagingError):
    stage = "erase"


class CopyError(PackagingError):
    stage = "copy"


class InstallError(PackagingError):
    stage = "install"
