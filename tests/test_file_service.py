import asyncio
import os

import pytest

from zipserve.core.exceptions import DirectoryReadError, InvalidInputError
from zipserve.services.file_service import FileService, extract_basename


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("/a.txt", "a.txt"),
        ("a.txt", "a.txt"),
        ("/sub/", "sub"),
        ("/../../etc/passwd", "passwd"),
        ("/deep/nested/dir/file.bin", "file.bin"),
        ("\\..\\..\\windows\\win.ini", "win.ini"),
        ("//double//slashes", "slashes"),
        ("/name with spaces.txt", "name with spaces.txt"),
    ],
)
def test_extract_basename_keeps_last_component(raw, expected):
    assert extract_basename(raw) == expected


@pytest.mark.parametrize("raw", ["", "/", "/..", "..", "/sub/..", ".", "/.", "/bad\x00name"])
def test_extract_basename_rejects_unusable_names(raw):
    with pytest.raises(InvalidInputError) as excinfo:
        extract_basename(raw)
    assert "re-check your input" in str(excinfo.value)


def test_extract_basename_rejects_non_strings():
    with pytest.raises(InvalidInputError):
        extract_basename(None)


@pytest.mark.parametrize(
    "raw", ["/../../etc/passwd", "/sub/../../../x", "/a/b/c/../../d", "\\..\\secret"]
)
def test_resolved_path_stays_directly_under_root(served_root, raw):
    entry = FileService(served_root).resolve_entry(raw)
    assert entry.path.parent == served_root
    assert entry.path.name == entry.name


def test_resolve_entry_does_not_check_existence(served_root):
    entry = FileService(served_root).resolve_entry("/missing")
    assert entry.path == served_root / "missing"
    assert not entry.path.exists()


def test_list_root_uses_enumeration_order(served_root):
    names = asyncio.run(FileService(served_root).list_root())
    assert names == os.listdir(served_root)
    assert sorted(names) == ["a.txt", "sub"]


def test_list_root_is_not_recursive(served_root):
    names = asyncio.run(FileService(served_root).list_root())
    assert "x.txt" not in names


def test_list_root_missing_directory(tmp_path):
    with pytest.raises(DirectoryReadError) as excinfo:
        asyncio.run(FileService(tmp_path / "gone").list_root())
    assert str(excinfo.value) == "Could not read the root directory"


def test_list_root_on_a_file(tmp_path):
    plain = tmp_path / "plain.txt"
    plain.write_text("not a directory")
    with pytest.raises(DirectoryReadError):
        asyncio.run(FileService(plain).list_root())
