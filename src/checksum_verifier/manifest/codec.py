"""Flat TSV manifest storage with rotation of previous manifests."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path

from checksum_verifier.manifest.errors import FatalIOError, ManifestParseError
from checksum_verifier.manifest.models import FingerprintRecord, fingerprint_set

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "\t"
DEFAULT_ROTATION_TEMPLATE = "{stem}_{timestamp}.old"
_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(slots=True, frozen=True)
class RotationPolicy:
    """Backup naming for a manifest about to be replaced.

    ``template`` is formatted with ``stem``, ``suffix``, ``name`` and
    ``timestamp`` (unix milliseconds); the backup stays beside the manifest.
    """

    template: str = DEFAULT_ROTATION_TEMPLATE

    def backup_path(self, path: Path, now_ms: int) -> Path:
        name = self.template.format(
            stem=path.stem,
            suffix=path.suffix,
            name=path.name,
            timestamp=now_ms,
        )
        return path.with_name(name)


def format_manifest(records: list[FingerprintRecord] | tuple[FingerprintRecord, ...]) -> str:
    """Serialize records as path-sorted ``path\\thash\\tsize`` lines."""
    unique = fingerprint_set(records)
    lines = [
        FIELD_SEPARATOR.join((record.path, record.hash, record.size))
        for record in sorted(unique.values(), key=lambda item: item.path)
    ]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def parse_manifest(text: str, source: str = "<manifest>") -> list[FingerprintRecord]:
    """Parse manifest text into records sorted by line content."""
    numbered = [
        (number, line) for number, line in enumerate(_LINE_BREAK.split(text), start=1) if line
    ]
    numbered.sort(key=lambda item: item[1])
    records: list[FingerprintRecord] = []
    for number, line in numbered:
        fields = line.split(FIELD_SEPARATOR)
        if len(fields) != 3:
            raise ManifestParseError(source=source, line_number=number, line=line)
        path, content_hash, size = fields
        if not path or not (size.isascii() and size.isdigit()):
            raise ManifestParseError(source=source, line_number=number, line=line)
        records.append(FingerprintRecord(path=path, hash=content_hash, size=size))
    return records


def read_manifest(path: Path) -> list[FingerprintRecord]:
    """Load the recorded model fingerprints from ``path``."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as error:
        raise FatalIOError(
            reason=f"Cannot read manifest {path}: {error.strerror or error}.",
            hint="Run 'checksum-verifier generate' first or pass --manifest.",
        ) from error
    except UnicodeDecodeError as error:
        raise FatalIOError(
            reason=f"Manifest {path} is not valid UTF-8 (byte offset {error.start}).",
            hint="Regenerate the manifest with 'checksum-verifier generate'.",
        ) from error
    return parse_manifest(text, source=str(path))


def rotate_manifest(
    path: Path,
    rotation: RotationPolicy | None = None,
    now_ms: int | None = None,
) -> Path | None:
    """Rename an existing manifest to its backup name.

    The rename is attempted once; a missing source means nothing to rotate.
    An existing backup is never replaced: a numeric suffix is appended instead.
    """
    policy = rotation or RotationPolicy()
    stamp = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    backup = _unused_backup_path(policy.backup_path(path, stamp))
    try:
        path.rename(backup)
    except FileNotFoundError:
        return None
    except OSError as error:
        raise FatalIOError(
            reason=f"Cannot rotate manifest {path} to {backup.name}: {error.strerror or error}.",
            hint="Check write permissions on the data directory.",
        ) from error
    logger.info("rotated previous manifest to %s", backup)
    return backup


def _unused_backup_path(candidate: Path) -> Path:
    output = candidate
    counter = 1
    while output.exists():
        output = candidate.with_name(f"{candidate.name}.{counter}")
        counter += 1
    return output


def write_manifest(
    path: Path,
    records: list[FingerprintRecord] | tuple[FingerprintRecord, ...],
    *,
    rotation: RotationPolicy | None = None,
    now_ms: int | None = None,
) -> Path | None:
    """Write ``records`` to a temp file, rotate any previous manifest, then swap in.

    A failed write leaves the previous manifest in place. Returns the backup
    path when an existing manifest was rotated.
    """
    payload = format_manifest(records)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise FatalIOError(
            reason=f"Cannot create directory {path.parent}: {error.strerror or error}.",
            hint="Check write permissions or pass --data-dir.",
        ) from error
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        with tmp.open("w", encoding="utf-8", newline="\n") as handle:
            handle.write(payload)
    except OSError as error:
        _discard_temp(tmp)
        raise FatalIOError(
            reason=f"Cannot write manifest {path}: {error.strerror or error}.",
            hint="Check write permissions on the data directory.",
        ) from error
    try:
        backup = rotate_manifest(path, rotation=rotation, now_ms=now_ms)
    except FatalIOError:
        _discard_temp(tmp)
        raise
    try:
        tmp.replace(path)
    except OSError as error:
        _discard_temp(tmp)
        if backup is not None:
            backup.replace(path)
        raise FatalIOError(
            reason=f"Cannot write manifest {path}: {error.strerror or error}.",
            hint="Check write permissions on the data directory.",
        ) from error
    return backup


def _discard_temp(tmp: Path) -> None:
    if tmp.is_file():
        tmp.unlink()
