# fstree/classify.py

"""
Entry classification.

Each filesystem entry is tagged with exactly one :class:`EntryKind`, which
the renderer uses to pick a color. Classification never follows symbolic
links, and a failed metadata lookup is reported as :attr:`EntryKind.OTHER`
instead of aborting the walk.
"""


from __future__ import annotations

import enum
import logging
import os
import stat
from pathlib import Path

from fstree.errors import MetadataUnavailable

logger = logging.getLogger(__name__)

EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class EntryKind(enum.Enum):
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    EXECUTABLE = "executable"
    REGULAR_FILE = "file"
    OTHER = "other"


def classify_mode(mode: int) -> EntryKind:
    """
    Map an ``st_mode`` value to its classification tag.

    Rules are applied in priority order: a symbolic link is ``SYMLINK``
    whatever it points to, a directory is ``DIRECTORY``, a regular file with
    any execute bit set is ``EXECUTABLE``, any other regular file is
    ``REGULAR_FILE``. Fifos, sockets and device nodes are ``OTHER``.

    Parameters
    ----------
    mode : int
        The ``st_mode`` field of an ``lstat`` result.

    Returns
    -------
    EntryKind
        The classification tag.
    """

    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISREG(mode):
        if mode & EXECUTE_BITS:
            return EntryKind.EXECUTABLE
        return EntryKind.REGULAR_FILE
    return EntryKind.OTHER


def entry_stat(target: str | os.PathLike[str] | os.DirEntry[str]) -> os.stat_result:
    """
    Read the metadata of one entry without following links.

    ``target`` is a path, or an object with a ``stat(follow_symlinks=...)``
    method such as ``os.DirEntry``, which reuses the metadata cached by
    ``os.scandir`` where the platform provides it.

    Raises
    ------
    MetadataUnavailable
        If the metadata cannot be read.
    """

    try:
        if not hasattr(target, "stat"):
            return os.lstat(target)
        return target.stat(follow_symlinks=False)
    except OSError as exc:
        raise MetadataUnavailable(getattr(target, "path", target), exc) from exc


def read_metadata(
    target: str | os.PathLike[str] | os.DirEntry[str],
) -> tuple[EntryKind, os.stat_result | None]:
    """
    Classify one entry and return the metadata it was classified from.

    A metadata failure is logged and mapped to ``(EntryKind.OTHER, None)``
    so that a single unreadable entry never stops a walk.
    """

    try:
        st = entry_stat(target)
    except MetadataUnavailable as exc:
        logger.debug("%s", exc)
        return EntryKind.OTHER, None
    return classify_mode(st.st_mode), st


def classify(path: str | os.PathLike[str]) -> EntryKind:
    """Classify ``path`` without following links; unreadable entries are ``OTHER``."""
    return read_metadata(path)[0]


def is_directory(path: Path) -> bool:
    """
    Safely determine whether a path refers to a directory, following links.

    Returns ``False`` when the directory status cannot be determined (e.g. a
    dangling link or a permission error on a parent).
    """

    try:
        return path.is_dir()
    except OSError:
        return False
