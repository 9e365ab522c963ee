from __future__ import annotations

from checksum_verifier.manifest import (
    CHECKSUM_DIFFERS,
    SIZE_DIFFERS,
    FingerprintRecord,
    fingerprint_set,
    paths_only_in,
    reconcile,
    value_mismatches,
)


def _record(path: str, content_hash: str = "a" * 32, size: str = "1") -> FingerprintRecord:
    return FingerprintRecord(path=path, hash=content_hash, size=size)


def test_identical_sets_reconcile_cleanly() -> None:
    model = fingerprint_set([_record("a.txt"), _record("b.txt")])
    current = fingerprint_set([_record("b.txt"), _record("a.txt")])

    result = reconcile(model, current)

    assert result.ok
    assert result.error_count == 0
    assert result.missing_on_disk == ()
    assert result.not_in_manifest == ()
    assert result.mismatches == ()


def test_paths_only_in_is_sorted_set_difference() -> None:
    a = fingerprint_set([_record("z"), _record("m"), _record("a")])
    b = fingerprint_set([_record("m")])
    assert paths_only_in(a, b) == ("a", "z")
    assert paths_only_in(b, a) == ()


def test_deleted_file_counts_once_and_is_not_a_mismatch() -> None:
    model = fingerprint_set([_record("a.txt"), _record("b.txt")])
    current = fingerprint_set([_record("a.txt")])

    result = reconcile(model, current)

    assert result.missing_on_disk == ("b.txt",)
    assert result.not_in_manifest == ()
    assert result.mismatches == ()
    assert result.error_count == 1


def test_new_file_is_reported_as_not_in_manifest() -> None:
    model = fingerprint_set([_record("a.txt")])
    current = fingerprint_set([_record("a.txt"), _record("new.txt")])

    result = reconcile(model, current)

    assert result.not_in_manifest == ("new.txt",)
    assert result.error_count == 1


def test_same_size_content_change_reports_checksum_only() -> None:
    model = fingerprint_set([_record("a.txt", "a" * 32, "2")])
    current = fingerprint_set([_record("a.txt", "b" * 32, "2")])

    mismatches = value_mismatches(model, current)

    assert len(mismatches) == 1
    assert mismatches[0].messages == (CHECKSUM_DIFFERS,)
    assert mismatches[0].expected.hash == "a" * 32
    assert mismatches[0].actual.hash == "b" * 32


def test_content_and_size_change_counts_once_with_both_messages() -> None:
    model = fingerprint_set([_record("a.txt", "a" * 32, "2")])
    current = fingerprint_set([_record("a.txt", "b" * 32, "5")])

    result = reconcile(model, current)

    assert len(result.mismatches) == 1
    assert result.mismatches[0].messages == (CHECKSUM_DIFFERS, SIZE_DIFFERS)
    assert result.error_count == 1


def test_size_comparison_is_lexical() -> None:
    model = fingerprint_set([_record("a.txt", size="02")])
    current = fingerprint_set([_record("a.txt", size="2")])

    assert value_mismatches(model, current)[0].messages == (SIZE_DIFFERS,)


def test_total_error_count_sums_every_category() -> None:
    model = fingerprint_set(
        [_record("gone1"), _record("gone2"), _record("same"), _record("changed", size="1")]
    )
    current = fingerprint_set([_record("same"), _record("changed", size="9"), _record("extra")])

    result = reconcile(model, current)

    assert result.missing_on_disk == ("gone1", "gone2")
    assert result.not_in_manifest == ("extra",)
    assert [item.path for item in result.mismatches] == ["changed"]
    assert result.error_count == 4


def test_mismatches_are_sorted_by_path() -> None:
    model = fingerprint_set([_record("c", size="1"), _record("a", size="1"), _record("b")])
    current = fingerprint_set([_record("a", size="2"), _record("b"), _record("c", size="2")])

    assert [item.path for item in value_mismatches(model, current)] == ["a", "c"]


def test_fingerprint_set_last_write_wins() -> None:
    records = [_record("a.txt", size="1"), _record("a.txt", size="2")]
    assert fingerprint_set(records) == {"a.txt": _record("a.txt", size="2")}
