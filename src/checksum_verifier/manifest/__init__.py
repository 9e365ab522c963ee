"""Fingerprinting, manifest storage and reconciliation."""

from .codec import (
    DEFAULT_ROTATION_TEMPLATE,
    RotationPolicy,
    format_manifest,
    parse_manifest,
    read_manifest,
    rotate_manifest,
    write_manifest,
)
from .errors import FatalIOError, ManifestParseError
from .filelist import load_file_list, parse_file_list
from .fingerprint import compute_fingerprints, md5_file
from .models import (
    CHECKSUM_DIFFERS,
    SIZE_DIFFERS,
    FingerprintRecord,
    FingerprintRun,
    FingerprintSet,
    Mismatch,
    Reconciliation,
    fingerprint_set,
)
from .reconcile import paths_only_in, reconcile, value_mismatches

__all__ = [
    "CHECKSUM_DIFFERS",
    "DEFAULT_ROTATION_TEMPLATE",
    "FatalIOError",
    "FingerprintRecord",
    "FingerprintRun",
    "FingerprintSet",
    "ManifestParseError",
    "Mismatch",
    "Reconciliation",
    "RotationPolicy",
    "SIZE_DIFFERS",
    "compute_fingerprints",
    "fingerprint_set",
    "format_manifest",
    "load_file_list",
    "md5_file",
    "parse_file_list",
    "parse_manifest",
    "paths_only_in",
    "read_manifest",
    "reconcile",
    "rotate_manifest",
    "value_mismatches",
    "write_manifest",
]
