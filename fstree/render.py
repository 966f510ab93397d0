# fstree/render.py

"""
Line rendering for tree diagrams.

A rendered line is a prefix of continuation columns, a branch glyph and the
entry label. Color is applied to the entry name only, never to the glyphs, so
stripping the escape codes from a colored line gives exactly the uncolored
line.
"""


from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import datetime

from fstree.classify import EntryKind
from fstree.listing import Entry

VERTICAL = "│   "
SPACE = "    "
BRANCH = "├── "
LAST = "└── "

ERROR_MARKER = "[error reading directory]"
UNRESOLVED_TARGET = "[unresolved]"

RESET = "\033[0m"
COLORS: dict[EntryKind, str] = {
    EntryKind.DIRECTORY: "\033[1;34m",
    EntryKind.EXECUTABLE: "\033[1;32m",
    EntryKind.SYMLINK: "\033[36m",
}

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")

TraversalState = tuple[bool, ...]


@dataclass(frozen=True)
class RenderedLine:
    """
    One finished output line.

    ``depth`` is the number of prefix columns before the branch glyph, or
    ``None`` for the root line. ``error`` marks a directory that could not
    be read, ``followed`` a symbolic link the walk descended into.
    """

    text: str
    kind: EntryKind
    depth: int | None = None
    error: bool = False
    followed: bool = False

    @property
    def plain(self) -> str:
        return strip_ansi(self.text)

    def __str__(self) -> str:
        return self.text


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from ``text``."""
    return ANSI_ESCAPE_RE.sub("", text)


def prefix(state: TraversalState) -> str:
    """Continuation columns for the ancestors recorded in ``state``."""
    return "".join(VERTICAL if more else SPACE for more in state)


def display_name(name: str) -> str:
    """
    Make a file name safe to print.

    Undecodable bytes in a POSIX file name reach Python as lone surrogates
    (``surrogateescape``); each is shown as U+FFFD. Other lone surrogates,
    as Windows can produce, are replaced the same way.
    """

    try:
        raw = name.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError:
        raw = name.encode("utf-8", errors="surrogatepass")
    return raw.decode("utf-8", errors="replace")


def colorize(name: str, kind: EntryKind, color: bool) -> str:
    code = COLORS.get(kind) if color else None
    if code is None:
        return name
    return f"{code}{name}{RESET}"


def format_details(entry: Entry) -> str:
    """
    Long-listing suffix for an entry: link target, size and modification time.

    The size and time are omitted when the entry's metadata could not be read.
    The timestamp is rendered in local time.
    """

    parts = []
    if entry.kind is EntryKind.SYMLINK:
        target = entry.link_target
        parts.append(f" -> {display_name(target) if target else UNRESOLVED_TARGET}")
    if entry.size is not None and entry.mtime is not None:
        modified = datetime.fromtimestamp(entry.mtime).strftime("%Y-%m-%d %H:%M:%S")
        parts.append(f" ({entry.size} bytes, modified: {modified})")
    return "".join(parts)


def render_line(
    state: TraversalState,
    entry: Entry,
    *,
    color: bool = False,
    details: bool = False,
    error: bool = False,
    followed: bool = False,
) -> RenderedLine:
    """
    Render one child entry as a tree line.

    Parameters
    ----------
    state : tuple[bool, ...]
        One flag per ancestor below the root; ``True`` when that ancestor has
        further siblings, which draws a continuation bar in its column.
    entry : Entry
        The entry to render. ``entry.is_last`` selects the branch glyph.
    color : bool, default=False
        Wrap the entry name in the color of its classification tag.
    details : bool, default=False
        Append the link target, size and modification time.
    error : bool, default=False
        Render the entry as an unreadable directory.
    followed : bool, default=False
        The entry is a symbolic link the walk descended into.

    Returns
    -------
    RenderedLine
        The rendered line, with ``depth == len(state)``.
    """

    glyph = LAST if entry.is_last else BRANCH
    label = colorize(display_name(entry.name), entry.kind, color)
    if error:
        label = f"{label} {ERROR_MARKER}"
    elif details:
        label += format_details(entry)
    return RenderedLine(
        text=prefix(state) + glyph + label,
        kind=entry.kind,
        depth=len(state),
        error=error,
        followed=followed,
    )


def render_root(
    root: str | os.PathLike[str],
    *,
    color: bool = False,
    error: bool = False,
) -> RenderedLine:
    """Render the root path exactly as given, unprefixed."""
    label = colorize(display_name(os.fspath(root)), EntryKind.DIRECTORY, color)
    if error:
        label = f"{label} {ERROR_MARKER}"
    return RenderedLine(text=label, kind=EntryKind.DIRECTORY, error=error)
