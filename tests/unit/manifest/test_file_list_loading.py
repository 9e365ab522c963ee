from __future__ import annotations

from pathlib import Path

import pytest

from checksum_verifier.manifest import FatalIOError, load_file_list, parse_file_list


def test_file_list_is_trimmed_and_sorted() -> None:
    text = "  b.txt \n\na.txt\r\n\r\n   \n c/d.txt\n"
    assert parse_file_list(text) == ["a.txt", "b.txt", "c/d.txt"]


def test_file_list_keeps_duplicates_adjacent_after_sort() -> None:
    text = "z.txt\na.txt\nz.txt\n a.txt"
    assert parse_file_list(text) == ["a.txt", "a.txt", "z.txt", "z.txt"]


def test_file_list_accepts_old_mac_line_endings() -> None:
    assert parse_file_list("b\ra\r") == ["a", "b"]


def test_empty_file_list_yields_no_entries() -> None:
    assert parse_file_list("\n \n\t\n") == []


def test_load_file_list_reads_utf8(tmp_path: Path) -> None:
    list_path = tmp_path / "filesForCheck.txt"
    list_path.write_text("über.txt\nalpha.txt\n", encoding="utf-8")
    assert load_file_list(list_path) == ["alpha.txt", "über.txt"]


def test_missing_file_list_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(FatalIOError, match="Cannot read file list"):
        load_file_list(tmp_path / "absent.txt")


def test_undecodable_file_list_is_fatal(tmp_path: Path) -> None:
    list_path = tmp_path / "filesForCheck.txt"
    list_path.write_bytes(b"a\xff.txt\n")

    with pytest.raises(FatalIOError, match="not valid UTF-8"):
        load_file_list(list_path)
