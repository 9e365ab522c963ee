"""Fatal error types for manifest workflows."""

from __future__ import annotations


class FatalIOError(Exception):
    """Raised when a required input or output cannot be read or written."""

    def __init__(self, reason: str, hint: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint


class ManifestParseError(FatalIOError):
    """Raised when a manifest line does not hold a path, hash and size."""

    def __init__(self, source: str, line_number: int, line: str) -> None:
        super().__init__(
            reason=f"Malformed manifest line {line_number} in {source}.",
            hint="Each line must be '<path>\\t<md5>\\t<size>'; regenerate the manifest.",
        )
        self.source = source
        self.line_number = line_number
        self.line = line
