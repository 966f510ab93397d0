# tests/test_listing.py
import logging
import os
import sys
from pathlib import Path

import pytest

from fstree import DirectoryUnreadable, EntryKind, list_children
from fstree.listing import is_hidden, native_sort_key


def _make_file(p: Path, content: str = "x"):
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")


def _names(entries):
    return [e.name for e in entries]


def test_hidden_entries_are_excluded_by_default(tmp_path: Path):
    for name in ["a.txt", ".secret", "b.txt"]:
        _make_file(tmp_path / name)

    assert _names(list_children(tmp_path, sort_key=str)) == ["a.txt", "b.txt"]


def test_hidden_entries_are_listed_when_enabled(tmp_path: Path):
    for name in ["a.txt", ".secret", "b.txt"]:
        _make_file(tmp_path / name)

    entries = list_children(tmp_path, show_hidden=True, sort_key=str)
    assert _names(entries) == [".secret", "a.txt", "b.txt"]


def test_ordering_is_lexicographic_and_ignores_kind(tmp_path: Path):
    # Unlike many tree helpers, directories are not grouped first.
    (tmp_path / "b_dir").mkdir()
    _make_file(tmp_path / "a.txt")
    _make_file(tmp_path / "c.txt")
    _make_file(tmp_path / "B.txt")

    assert _names(list_children(tmp_path, sort_key=str)) == ["B.txt", "a.txt", "b_dir", "c.txt"]


def test_sort_key_is_configurable(tmp_path: Path):
    for name in ["b.txt", "A.txt", "c.txt"]:
        _make_file(tmp_path / name)

    assert _names(list_children(tmp_path, sort_key=str)) == ["A.txt", "b.txt", "c.txt"]
    assert _names(list_children(tmp_path, sort_key=lambda n: n[::-1])) == ["A.txt", "b.txt", "c.txt"]
    reverse = list_children(tmp_path, sort_key=lambda n: [-ord(ch) for ch in n])
    assert _names(reverse) == ["c.txt", "b.txt", "A.txt"]


@pytest.mark.skipif(os.name != "posix", reason="normcase is the identity on POSIX only")
def test_native_sort_key_is_code_point_order_on_posix():
    assert sorted(["b", "B", "a", "_"], key=native_sort_key) == ["B", "_", "a", "b"]


def test_only_last_entry_is_marked_last(tmp_path: Path):
    for name in ["a", "b", "c"]:
        _make_file(tmp_path / name)

    entries = list_children(tmp_path)
    assert [e.is_last for e in entries] == [False, False, True]


def test_empty_directory_lists_nothing(tmp_path: Path):
    assert list_children(tmp_path) == []


def test_entries_carry_kind_path_and_metadata(tmp_path: Path):
    _make_file(tmp_path / "f.txt", "hello")
    (tmp_path / "d").mkdir()

    by_name = {e.name: e for e in list_children(tmp_path)}
    assert by_name["d"].kind is EntryKind.DIRECTORY
    assert by_name["f.txt"].kind is EntryKind.REGULAR_FILE
    assert by_name["f.txt"].path == tmp_path / "f.txt"
    assert by_name["f.txt"].size == 5
    assert by_name["f.txt"].mtime is not None
    assert by_name["f.txt"].link_target is None


@pytest.mark.skipif(sys.platform.startswith("win"), reason="Symlink creation needs privileges on Windows")
def test_symlink_target_is_captured(tmp_path: Path):
    _make_file(tmp_path / "data.txt")
    (tmp_path / "link").symlink_to("data.txt")

    link = next(e for e in list_children(tmp_path) if e.name == "link")
    assert link.kind is EntryKind.SYMLINK
    assert link.link_target == "data.txt"


def test_missing_directory_is_unreadable(tmp_path: Path):
    with pytest.raises(DirectoryUnreadable) as info:
        list_children(tmp_path / "gone")
    assert info.value.path == tmp_path / "gone"
    assert isinstance(info.value.cause, FileNotFoundError)


def test_file_is_not_listable(tmp_path: Path):
    _make_file(tmp_path / "f.txt")
    with pytest.raises(DirectoryUnreadable):
        list_children(tmp_path / "f.txt")


def test_permission_error_is_unreadable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    def deny(path):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr(os, "scandir", deny)
    with pytest.raises(DirectoryUnreadable) as info:
        list_children(tmp_path)
    assert isinstance(info.value.cause, PermissionError)


def test_stat_failure_maps_to_other(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
):
    _make_file(tmp_path / "broken")
    _make_file(tmp_path / "fine")
    real_scandir = os.scandir

    class BrokenEntry:
        def __init__(self, entry):
            self.name = entry.name
            self.path = entry.path

        def stat(self, *, follow_symlinks=True):
            raise PermissionError(13, "Permission denied", self.path)

    class Scanner:
        def __init__(self, path):
            self._it = real_scandir(path)

        def __enter__(self):
            return (BrokenEntry(e) if e.name == "broken" else e for e in self._it)

        def __exit__(self, *exc):
            self._it.close()

    monkeypatch.setattr(os, "scandir", Scanner)
    caplog.set_level(logging.DEBUG, logger="fstree.classify")
    by_name = {e.name: e for e in list_children(tmp_path)}
    assert by_name["broken"].kind is EntryKind.OTHER
    assert by_name["broken"].size is None
    assert by_name["fine"].kind is EntryKind.REGULAR_FILE
    # Recovered through the classifier as MetadataUnavailable.
    assert [r.getMessage() for r in caplog.records] == [f"Cannot stat {tmp_path / 'broken'}: Permission denied"]


def test_directory_handle_is_closed(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_file(tmp_path / "a")
    real_scandir = os.scandir
    handles = []

    def tracking(path):
        it = real_scandir(path)
        handles.append(it)
        return it

    monkeypatch.setattr(os, "scandir", tracking)
    list_children(tmp_path)

    assert len(handles) == 1
    # A closed scandir iterator is exhausted.
    assert list(handles[0]) == []


@pytest.mark.parametrize("name, hidden", [(".git", True), (".", True), ("a.txt", False), ("x.", False)])
def test_is_hidden(name: str, hidden: bool):
    assert is_hidden(name) is hidden
