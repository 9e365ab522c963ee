"""Typed models for fingerprint manifests."""

from __future__ import annotations

from dataclasses import dataclass

CHECKSUM_DIFFERS = "checksum differs"
SIZE_DIFFERS = "size differs"


@dataclass(slots=True, frozen=True)
class FingerprintRecord:
    """Content state of one listed file.

    ``size`` is the decimal byte count kept as text, matching the manifest
    format, so hash and size comparisons stay lexical.
    """

    path: str
    hash: str
    size: str

    @property
    def size_bytes(self) -> int:
        """Return the recorded size as an integer."""
        return int(self.size)


FingerprintSet = dict[str, FingerprintRecord]


@dataclass(slots=True, frozen=True)
class FingerprintRun:
    """Result of one fingerprint pass over a file list."""

    records: tuple[FingerprintRecord, ...]
    missing: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class Mismatch:
    """A path present in both sets whose hash or size diverged."""

    path: str
    checksum_differs: bool
    size_differs: bool
    expected: FingerprintRecord
    actual: FingerprintRecord

    @property
    def messages(self) -> tuple[str, ...]:
        output: list[str] = []
        if self.checksum_differs:
            output.append(CHECKSUM_DIFFERS)
        if self.size_differs:
            output.append(SIZE_DIFFERS)
        return tuple(output)


@dataclass(slots=True, frozen=True)
class Reconciliation:
    """Deterministic discrepancy classification between model and current sets."""

    missing_on_disk: tuple[str, ...]
    not_in_manifest: tuple[str, ...]
    mismatches: tuple[Mismatch, ...]

    @property
    def error_count(self) -> int:
        return len(self.missing_on_disk) + len(self.not_in_manifest) + len(self.mismatches)

    @property
    def ok(self) -> bool:
        return self.error_count == 0


def fingerprint_set(
    records: list[FingerprintRecord] | tuple[FingerprintRecord, ...],
) -> FingerprintSet:
    """Map records by path; a later duplicate path replaces an earlier one."""
    return {record.path: record for record in records}
