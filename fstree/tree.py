# fstree/tree.py

"""
Filesystem tree walking and rendering.

This module renders a directory structure as a Unicode tree, similar to the
Unix ``tree`` command.

Traversal is a depth-first pre-order walk. Children are listed in a
deterministic order, hidden entries are skipped unless requested, and a
depth limit bounds how far the walk descends. Every recursion frame carries
its own traversal state (one "more siblings follow" flag per ancestor), so
sibling subtrees never disturb each other's prefixes.

Mid-walk failures never abort the walk: an unreadable directory is rendered
as a single error line in place of its subtree. Only a missing root or a
root that is not a directory is fatal.

The main entry point is :func:`walk`, which lazily yields rendered lines.
:func:`path_tree` returns the tree as a string and :func:`build_tree` builds
an ``anytree`` model of the same walk.
"""


from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, TextIO

from anytree import ContStyle, Node, RenderTree

from fstree.classify import EntryKind, is_directory
from fstree.errors import DirectoryUnreadable, RootNotADirectory, RootNotFound
from fstree.listing import Entry, SortKey, list_children
from fstree.output import TreeReport, write_tree
from fstree.render import (
    ERROR_MARKER,
    RenderedLine,
    TraversalState,
    display_name,
    render_line,
    render_root,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalkStep:
    """
    One visited entry, before rendering.

    ``state`` is ``None`` for the root. ``error`` is set when the entry is a
    directory that could not be listed. ``followed`` is set for a symbolic
    link the walk descended into.
    """

    entry: Entry
    state: TraversalState | None = None
    error: DirectoryUnreadable | None = None
    followed: bool = False

    @property
    def is_root(self) -> bool:
        return self.state is None


def _check_root(root: str | os.PathLike[str]) -> Path:
    path = Path(root)
    if not path.exists():
        raise RootNotFound(root)
    if not path.is_dir():
        raise RootNotADirectory(root)
    return path


def iter_steps(
    root: str | os.PathLike[str],
    *,
    max_depth: int | None = None,
    show_hidden: bool = False,
    follow_symlinks: bool = False,
    sort_key: SortKey | None = None,
) -> Iterator[WalkStep]:
    """
    Walk a directory tree depth-first and yield one step per visible entry.

    The root is validated immediately, before the first step is requested.
    The root step comes first, then each child in listing order, each
    directory followed by its own subtree.

    Parameters
    ----------
    root : str | os.PathLike
        Root directory to walk.
    max_depth : int | None, optional
        Number of levels below the root to show. ``0`` shows the root only,
        ``1`` the root and its immediate children. ``None`` means unlimited.
    show_hidden : bool, default=False
        Whether hidden entries are listed and descended into.
    follow_symlinks : bool, default=False
        Whether symbolic links to directories are descended into. A link that
        resolves to one of its own ancestors is never descended into.
    sort_key : Callable[[str], Any] | None, optional
        Name ordering key passed to :func:`fstree.listing.list_children`.

    Returns
    -------
    Iterator[WalkStep]
        Lazy sequence of walk steps.

    Raises
    ------
    RootNotFound
        If ``root`` does not exist.
    RootNotADirectory
        If ``root`` is not a directory.
    ValueError
        If ``max_depth`` is negative.
    """

    if max_depth is not None and max_depth < 0:
        raise ValueError(f"max_depth must be >= 0, got {max_depth}")
    root_path = _check_root(root)

    def can_descend(entry: Entry, level: int) -> bool:
        if max_depth is not None and level >= max_depth:
            return False
        if entry.kind is EntryKind.DIRECTORY:
            return True
        return (
            follow_symlinks
            and entry.kind is EntryKind.SYMLINK
            and is_directory(entry.path)
        )

    def listing(d: Path) -> list[Entry]:
        return list_children(d, show_hidden=show_hidden, sort_key=sort_key)

    def rec(
        children: list[Entry],
        state: TraversalState,
        level: int,
        ancestors: frozenset[str],
    ) -> Iterator[WalkStep]:
        """
        Yield the steps for ``children`` (at ``level``) and their subtrees.

        ``ancestors`` holds the canonical paths of the directories above this
        frame and is only populated when symlinks are followed.
        """

        for child in children:
            if not can_descend(child, level):
                yield WalkStep(child, state)
                continue

            real = None
            if follow_symlinks:
                real = os.path.realpath(child.path)
                if real in ancestors:
                    logger.debug("Not following %s: it leads back to %s", child.path, real)
                    yield WalkStep(child, state)
                    continue

            followed = child.kind is EntryKind.SYMLINK
            try:
                grandchildren = listing(child.path)
            except DirectoryUnreadable as exc:
                logger.debug("%s", exc)
                yield WalkStep(child, state, error=exc, followed=followed)
                continue

            yield WalkStep(child, state, followed=followed)
            yield from rec(
                grandchildren,
                state + (not child.is_last,),
                level + 1,
                ancestors | {real} if real is not None else ancestors,
            )

    def steps() -> Iterator[WalkStep]:
        root_entry = Entry(name=os.fspath(root), path=root_path, kind=EntryKind.DIRECTORY)
        if max_depth == 0:
            yield WalkStep(root_entry)
            return
        try:
            children = listing(root_path)
        except DirectoryUnreadable as exc:
            logger.debug("%s", exc)
            yield WalkStep(root_entry, error=exc)
            return
        yield WalkStep(root_entry)
        ancestors = frozenset({os.path.realpath(root_path)}) if follow_symlinks else frozenset()
        yield from rec(children, (), 1, ancestors)

    return steps()


def _render_step(step: WalkStep, *, color: bool, details: bool) -> RenderedLine:
    error = step.error is not None
    if step.state is None:
        return render_root(step.entry.name, color=color, error=error)
    return render_line(
        step.state,
        step.entry,
        color=color,
        details=details,
        error=error,
        followed=step.followed,
    )


def walk(
    root: str | os.PathLike[str],
    *,
    max_depth: int | None = None,
    show_hidden: bool = False,
    color: bool = False,
    details: bool = False,
    follow_symlinks: bool = False,
    sort_key: SortKey | None = None,
) -> Iterator[RenderedLine]:
    """
    Lazily render a directory tree, one line per visible entry.

    The first line is the root path as given. Every following line is a
    prefix of continuation columns, a branch glyph (``├── `` or ``└── ``) and
    the entry name. Directories that cannot be read appear as one error line
    and their subtree is skipped.

    Parameters
    ----------
    root : str | os.PathLike
        Root directory to display.
    max_depth : int | None, optional
        Number of levels below the root to show; ``None`` means unlimited.
    show_hidden : bool, default=False
        Whether hidden entries are shown.
    color : bool, default=False
        Wrap entry names in ANSI color codes by classification.
    details : bool, default=False
        Append symlink targets, sizes and modification times.
    follow_symlinks : bool, default=False
        Whether symbolic links to directories are descended into.
    sort_key : Callable[[str], Any] | None, optional
        Name ordering key. Defaults to the host's native comparison.

    Returns
    -------
    Iterator[RenderedLine]
        Lazy sequence of rendered lines. Abandoning it early leaves no
        directory handle open.

    Raises
    ------
    RootNotFound
        If ``root`` does not exist.
    RootNotADirectory
        If ``root`` is not a directory.
    """

    steps = iter_steps(
        root,
        max_depth=max_depth,
        show_hidden=show_hidden,
        follow_symlinks=follow_symlinks,
        sort_key=sort_key,
    )
    return (_render_step(step, color=color, details=details) for step in steps)


def path_tree(
    root: str | os.PathLike[str],
    *,
    max_depth: int | None = None,
    show_hidden: bool = False,
    details: bool = False,
    follow_symlinks: bool = False,
    sort_key: SortKey | None = None,
    report: bool = False,
) -> str:
    """
    Render a directory tree as a plain Unicode string.

    Takes the same options as :func:`walk` (without color). When ``report``
    is set, the tree is followed by a blank line and a summary such as
    ``"2 directories, 3 files"``.
    """

    tally = TreeReport()
    lines: list[str] = []
    for line in walk(
        root,
        max_depth=max_depth,
        show_hidden=show_hidden,
        details=details,
        follow_symlinks=follow_symlinks,
        sort_key=sort_key,
    ):
        lines.append(line.text)
        tally.add(line)
    if report:
        lines.extend(["", tally.format()])
    return "\n".join(lines)


def print_tree(
    root: str | os.PathLike[str],
    *,
    file: TextIO | None = None,
    color: bool = False,
    report: bool = True,
    **options,
) -> TreeReport:
    """Write the tree of ``root`` to ``file`` (default stdout) and return its counts."""
    lines = walk(root, color=color, **options)
    return write_tree(lines, file if file is not None else sys.stdout, report=report)


def _node_label(step: WalkStep) -> str:
    name = display_name(step.entry.name)
    if step.error is not None:
        return f"{name} {ERROR_MARKER}"
    return name


def build_tree(
    root: str | os.PathLike[str],
    *,
    max_depth: int | None = None,
    show_hidden: bool = False,
    follow_symlinks: bool = False,
    sort_key: SortKey | None = None,
) -> Node:
    """
    Build an ``anytree`` model of the tree under ``root``.

    The model holds the same entries, in the same order, as :func:`walk`.
    Each node is named after its rendered label and carries:

    - ``fs_path``: the entry's path,
    - ``kind``: its :class:`~fstree.classify.EntryKind`,
    - ``is_dir``: whether it is a directory (links to directories included),
    - ``is_symlink``: whether it is a symbolic link,
    - ``error``: whether it is a directory that could not be read.

    Parameters
    ----------
    root : str | os.PathLike
        Root directory to model.
    max_depth, show_hidden, follow_symlinks, sort_key
        As for :func:`iter_steps`.

    Returns
    -------
    anytree.Node
        The root node.
    """

    stack: list[Node] = []
    for step in iter_steps(
        root,
        max_depth=max_depth,
        show_hidden=show_hidden,
        follow_symlinks=follow_symlinks,
        sort_key=sort_key,
    ):
        entry = step.entry
        node = Node(
            _node_label(step),
            fs_path=entry.path,
            kind=entry.kind,
            is_dir=entry.kind is EntryKind.DIRECTORY
            or (entry.kind is EntryKind.SYMLINK and is_directory(entry.path)),
            is_symlink=entry.kind is EntryKind.SYMLINK,
            error=step.error is not None,
        )
        if step.state is None:
            stack = [node]
            continue
        depth = len(step.state)
        del stack[depth + 1:]
        node.parent = stack[depth]
        stack.append(node)
    return stack[0]


def draw_tree(node: Node) -> str:
    """Draw an ``anytree`` model using the same glyphs as :func:`walk`."""
    return "\n".join(f"{pre}{n.name}" for pre, _, n in RenderTree(node, style=ContStyle()))
