# fstree/output.py

"""
Output sinks for rendered trees.

Rendered lines go either to a terminal stream, where color codes are kept,
or to a file, where the caller usually strips them. The sink also tallies
the directories and files it writes for the ``tree``-style summary footer.
"""


from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, Iterator, TextIO

from fstree.classify import EntryKind
from fstree.render import RenderedLine


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


@dataclass
class TreeReport:
    """Running count of the directories and files in a rendered tree."""

    directories: int = 0
    files: int = 0

    def add(self, line: RenderedLine) -> None:
        # The root line is not counted; unreadable directories and followed
        # links to directories are.
        if line.depth is None:
            return
        if line.error or line.followed or line.kind is EntryKind.DIRECTORY:
            self.directories += 1
        else:
            self.files += 1

    def format(self) -> str:
        return (
            f"{_plural(self.directories, 'directory', 'directories')}, "
            f"{_plural(self.files, 'file', 'files')}"
        )


def summarize(lines: Iterable[RenderedLine]) -> TreeReport:
    report = TreeReport()
    for line in lines:
        report.add(line)
    return report


@contextmanager
def open_sink(
    destination: str | os.PathLike[str] | None = None,
    *,
    stream: TextIO | None = None,
) -> Iterator[TextIO]:
    """
    Yield a text stream to write a tree to.

    With no ``destination`` the given ``stream`` (default ``sys.stdout``) is
    yielded and left open. Otherwise ``destination`` is opened for writing as
    UTF-8 and closed when the block exits; characters UTF-8 cannot encode are
    replaced rather than aborting the write.

    Raises
    ------
    OSError
        If the destination file cannot be opened.
    """

    if destination is None:
        yield stream if stream is not None else sys.stdout
        return
    with open(destination, "w", encoding="utf-8", errors="replace") as f:
        yield f


def write_tree(
    lines: Iterable[RenderedLine],
    out: TextIO,
    *,
    strip_color: bool = False,
    report: bool = True,
) -> TreeReport:
    """
    Write rendered lines to ``out``, one per line, and return their tally.

    Parameters
    ----------
    lines : Iterable[RenderedLine]
        Lines to write, typically the lazy output of :func:`fstree.walk`.
    out : TextIO
        Destination stream.
    strip_color : bool, default=False
        Remove color codes before writing.
    report : bool, default=True
        Follow the tree with a blank line and the summary footer.

    Returns
    -------
    TreeReport
        Counts of the directories and files written.
    """

    tally = TreeReport()
    for line in lines:
        out.write((line.plain if strip_color else line.text) + "\n")
        tally.add(line)
    if report:
        out.write("\n" + tally.format() + "\n")
    return tally
