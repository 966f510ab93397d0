# fstree/errors.py

"""
Error taxonomy for tree rendering.

Only the root-level conditions (:class:`RootNotFound` and
:class:`RootNotADirectory`) escape the walker. Everything met mid-walk is
recovered locally and surfaced inline in the rendered tree.
"""


from __future__ import annotations

import os
from pathlib import Path


class TreeError(Exception):
    """Base class for all fstree errors."""


class RootNotFound(TreeError, FileNotFoundError):
    """The root path does not exist."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__(f"Path not found: {path}")


class RootNotADirectory(TreeError, NotADirectoryError):
    """The root path exists but is not a directory."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__(f"Not a directory: {path}")


class DirectoryUnreadable(TreeError, OSError):
    """
    A directory could not be listed.

    Raised by :func:`fstree.listing.list_children` when the directory cannot
    be opened: permission denied, vanished mid-walk, or not a directory.

    Parameters
    ----------
    path : pathlib.Path
        Directory that failed to open.
    cause : OSError
        Underlying error reported by the operating system.
    """

    def __init__(self, path: str | os.PathLike[str], cause: OSError) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Cannot read directory {path}: {cause.strerror or cause}")


class MetadataUnavailable(TreeError, OSError):
    """Metadata for a single entry could not be read."""

    def __init__(self, path: str | os.PathLike[str], cause: OSError) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Cannot stat {path}: {cause.strerror or cause}")
