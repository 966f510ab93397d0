"""
fstree — render directory hierarchies as indented trees.

This package provides a small, composable engine to:
- walk a directory depth-first with a hidden-file policy and a depth limit,
- classify entries (directory, symlink, executable, file, other),
- render ``tree``-style lines with optional ANSI color,
- write the result to a terminal or a file with a summary footer.

Lines are produced lazily by :func:`walk`; :func:`path_tree` returns the
whole tree as a string and :func:`build_tree` builds an ``anytree`` model.
"""

from __future__ import annotations

from .classify import EntryKind, classify
from .errors import (
    DirectoryUnreadable,
    MetadataUnavailable,
    RootNotADirectory,
    RootNotFound,
    TreeError,
)
from .listing import Entry, list_children
from .output import TreeReport, summarize, write_tree
from .render import RenderedLine, render_line, render_root, strip_ansi
from .tree import build_tree, draw_tree, iter_steps, path_tree, print_tree, walk

__version__ = "0.1.0"

__all__ = [
    "DirectoryUnreadable",
    "Entry",
    "EntryKind",
    "MetadataUnavailable",
    "RenderedLine",
    "RootNotADirectory",
    "RootNotFound",
    "TreeError",
    "TreeReport",
    "build_tree",
    "classify",
    "draw_tree",
    "iter_steps",
    "list_children",
    "path_tree",
    "print_tree",
    "render_line",
    "render_root",
    "strip_ansi",
    "summarize",
    "walk",
]
