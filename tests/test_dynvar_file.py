import gzip
import os

import pytest
from dynvar.dynvar_file import read_lines, resolve_locator, write_text


def test_resolve_locator_variants(tmp_path):
    base = str(tmp_path)

    # absolute path
    abs_path = str(tmp_path / "a.txt")
    assert resolve_locator(f"file://{abs_path}", base) == abs_path
    assert resolve_locator(abs_path, base) == abs_path

    # home path (~)
    home = os.path.expanduser("~")
    assert resolve_locator("file://~", base) == home
    assert resolve_locator("file://~/sub", base) == os.path.join(home, "sub")

    # ./ and ../
    assert resolve_locator("file://./file.txt", base) == os.path.join(base, "file.txt")
    assert resolve_locator("file://../up.txt", base) == os.path.normpath(os.path.join(base, "../up.txt"))

    # plain relative path and empty tail → base
    assert resolve_locator("rel.txt", base) == os.path.join(base, "rel.txt")
    assert resolve_locator("file://", base) == base


def test_read_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_lines(tmp_path / "nope.txt")


def test_write_creates_parent_directories(tmp_path):
    target = tmp_path / "a" / "b" / "vars.txt"
    write_text(target, "$x=1\n$y=2")
    assert target.read_text(encoding="utf-8") == "$x=1\n$y=2"
    assert read_lines(target) == ["$x=1", "$y=2"]


def test_write_replaces_existing_content(tmp_path):
    target = tmp_path / "vars.txt"
    write_text(target, "first=1\nsecond=2")
    write_text(target, "only=1")
    assert read_lines(target) == ["only=1"]


def test_gzip_round_trip(tmp_path):
    target = tmp_path / "vars.gz"
    write_text(target, "&a=b", gzip_mode=True)
    with gzip.open(target, "rt", encoding="utf-8") as f:
        assert f.read() == "&a=b"
    assert read_lines(target, gzip_mode=True) == ["&a=b"]


def test_base_dir_and_file_scheme(tmp_path):
    write_text("file://./inner/vars.txt", "k=v", base_dir=str(tmp_path))
    assert (tmp_path / "inner" / "vars.txt").exists()
    assert read_lines("inner/vars.txt", base_dir=str(tmp_path)) == ["k=v"]


def test_line_breaks_are_normalised(tmp_path):
    target = tmp_path / "mixed.txt"
    target.write_bytes(b"a=1\r\nb=2\rc=3\nd=\x1c4")
    assert read_lines(target) == ["a=1", "b=2", "c=3", "d=\x1c4"]


def test_empty_file_has_no_lines(tmp_path):
    target = tmp_path / "empty.txt"
    target.write_text("", encoding="utf-8")
    assert read_lines(target) == []
