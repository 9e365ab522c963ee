"""Declared file list loading."""

from __future__ import annotations

import re
from pathlib import Path

from checksum_verifier.manifest.errors import FatalIOError

_LINE_BREAKS = re.compile(r"[\r\n]+")


def parse_file_list(text: str) -> list[str]:
    """Return trimmed, non-empty entries sorted lexicographically.

    Duplicates are kept; they collapse later when records are mapped by path.
    """
    entries = [line.strip() for line in _LINE_BREAKS.split(text)]
    return sorted(entry for entry in entries if entry)


def load_file_list(path: Path) -> list[str]:
    """Load the newline-delimited list of files to fingerprint."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as error:
        raise FatalIOError(
            reason=f"Cannot read file list {path}: {error.strerror or error}.",
            hint="Create the file list with one path per line or pass --file-list.",
        ) from error
    except UnicodeDecodeError as error:
        raise FatalIOError(
            reason=f"File list {path} is not valid UTF-8 (byte offset {error.start}).",
            hint="Save the file list as UTF-8 text.",
        ) from error
    return parse_file_list(text)
