"""Sequential MD5 fingerprinting of listed files."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from checksum_verifier.manifest.errors import FatalIOError
from checksum_verifier.manifest.models import FingerprintRecord, FingerprintRun

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[FingerprintRecord], None]
MissingCallback = Callable[[tuple[str, ...]], None]


def compute_fingerprints(
    paths: Iterable[str],
    halt_on_missing: bool = False,
    *,
    base_dir: Path | None = None,
    progress: ProgressCallback | None = None,
    on_missing: MissingCallback | None = None,
) -> FingerprintRun:
    """Fingerprint each listed path in order, collecting the ones not found.

    Records keep the path exactly as listed; relative paths are resolved
    against ``base_dir`` (the working directory when omitted). With
    ``halt_on_missing`` set, ``on_missing`` receives the missing paths once
    the pass is complete.
    """
    root = base_dir if base_dir is not None else Path.cwd()
    records: list[FingerprintRecord] = []
    missing: list[str] = []
    for listed in paths:
        full_path = root / listed
        if not full_path.is_file():
            logger.debug("missing target %s", listed)
            missing.append(listed)
            continue
        content_hash, size = md5_file(full_path)
        record = FingerprintRecord(path=listed, hash=content_hash, size=size)
        records.append(record)
        if progress is not None:
            progress(record)

    if halt_on_missing and missing and on_missing is not None:
        on_missing(tuple(missing))
    return FingerprintRun(records=tuple(records), missing=tuple(missing))


def md5_file(path: Path) -> tuple[str, str]:
    """Return the lowercase MD5 hex digest and decimal byte size of a file."""
    try:
        content = path.read_bytes()
    except OSError as error:
        raise FatalIOError(
            reason=f"Cannot read {path}: {error.strerror or error}.",
            hint="Check file permissions; the file exists but could not be read.",
        ) from error
    return hashlib.md5(content).hexdigest(), str(len(content))
