# fstree/listing.py

"""
Directory listing with a hidden-file visibility policy.

:func:`list_children` returns the immediate children of one directory as
classified :class:`Entry` records, in a deterministic order given by a
configurable sort key.
"""


from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from fstree.classify import EntryKind, read_metadata
from fstree.errors import DirectoryUnreadable

HIDDEN_PREFIX = "."

SortKey = Callable[[str], Any]


@dataclass(frozen=True)
class Entry:
    """One listed child of a directory plus the metadata captured with it."""

    name: str
    path: Path
    kind: EntryKind
    is_last: bool = True
    size: int | None = None
    mtime: float | None = None
    link_target: str | None = None


def is_hidden(name: str) -> bool:
    return name.startswith(HIDDEN_PREFIX)


def native_sort_key(name: str) -> tuple[str, str]:
    """
    Sort key matching the host filesystem's native name comparison.

    ``os.path.normcase`` leaves names untouched on POSIX (plain code-point
    order) and lower-cases them on Windows. The raw name breaks ties so the
    ordering stays total.
    """

    return (os.path.normcase(name), name)


def _read_link(path: str) -> str | None:
    try:
        return os.readlink(path)
    except OSError:
        return None


def _scan_entry(item: os.DirEntry[str]) -> tuple[str, Path, EntryKind, os.stat_result | None]:
    kind, st = read_metadata(item)
    return item.name, Path(item.path), kind, st


def list_children(
    directory: str | os.PathLike[str],
    *,
    show_hidden: bool = False,
    sort_key: SortKey | None = None,
) -> list[Entry]:
    """
    Return the immediate children of a directory in stable listing order.

    Hidden entries (names starting with ``HIDDEN_PREFIX``) are dropped unless
    ``show_hidden`` is set. The directory handle is closed before this
    function returns, whether or not listing succeeds.

    Parameters
    ----------
    directory : str | os.PathLike
        Directory whose children should be listed.
    show_hidden : bool, default=False
        Whether hidden entries are listed.
    sort_key : Callable[[str], Any] | None, optional
        Key applied to each child name to order the listing. Defaults to
        :func:`native_sort_key`.

    Returns
    -------
    list[Entry]
        Classified children. Only the final element has ``is_last`` set.

    Raises
    ------
    DirectoryUnreadable
        If the directory cannot be opened or read.
    """

    key = sort_key or native_sort_key
    try:
        with os.scandir(directory) as it:
            scanned = [
                _scan_entry(item)
                for item in it
                if show_hidden or not is_hidden(item.name)
            ]
    except OSError as exc:
        raise DirectoryUnreadable(directory, exc) from exc

    scanned.sort(key=lambda item: key(item[0]))
    last = len(scanned) - 1
    entries: list[Entry] = []
    for i, (name, path, kind, st) in enumerate(scanned):
        entries.append(
            Entry(
                name=name,
                path=path,
                kind=kind,
                is_last=i == last,
                size=st.st_size if st is not None else None,
                mtime=st.st_mtime if st is not None else None,
                link_target=_read_link(str(path)) if kind is EntryKind.SYMLINK else None,
            )
        )
    return entries
