"""Model versus current fingerprint set reconciliation."""

from __future__ import annotations

from collections.abc import Mapping

from checksum_verifier.manifest.models import FingerprintRecord, Mismatch, Reconciliation


def paths_only_in(
    a: Mapping[str, FingerprintRecord],
    b: Mapping[str, FingerprintRecord],
) -> tuple[str, ...]:
    """Return sorted paths of ``a`` that are absent from ``b``."""
    return tuple(sorted(set(a.keys()) - set(b.keys())))


def value_mismatches(
    model: Mapping[str, FingerprintRecord],
    current: Mapping[str, FingerprintRecord],
) -> tuple[Mismatch, ...]:
    """Compare hash and size for every path present in both sets."""
    output: list[Mismatch] = []
    for path in sorted(set(model.keys()) & set(current.keys())):
        expected = model[path]
        actual = current[path]
        checksum_differs = expected.hash != actual.hash
        size_differs = expected.size != actual.size
        if not checksum_differs and not size_differs:
            continue
        output.append(
            Mismatch(
                path=path,
                checksum_differs=checksum_differs,
                size_differs=size_differs,
                expected=expected,
                actual=actual,
            )
        )
    return tuple(output)


def reconcile(
    model: Mapping[str, FingerprintRecord],
    current: Mapping[str, FingerprintRecord],
) -> Reconciliation:
    """Classify every discrepancy between the recorded and current sets."""
    return Reconciliation(
        missing_on_disk=paths_only_in(model, current),
        not_in_manifest=paths_only_in(current, model),
        mismatches=value_mismatches(model, current),
    )
