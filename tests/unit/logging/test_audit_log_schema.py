from __future__ import annotations

import json
from pathlib import Path

from checksum_verifier.logging import JsonlAuditLogger, RunEvent, new_run_id, utc_timestamp


def _event(timestamp: str, command: str = "verify", ok: bool = True) -> RunEvent:
    return RunEvent(
        timestamp=timestamp,
        run_id=new_run_id(),
        command=command,
        ok=ok,
        error_count=0 if ok else 2,
        error_code=None if ok else "DISCREPANCIES",
        metadata={"files": 3},
    )


def test_audit_log_writes_jsonl_schema(tmp_path: Path) -> None:
    logger = JsonlAuditLogger(tmp_path / "data" / "audit.jsonl")
    logger.append(_event(utc_timestamp()))

    lines = logger.path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    event = json.loads(lines[0])

    assert set(event.keys()) == {
        "command",
        "error_code",
        "error_count",
        "metadata",
        "ok",
        "run_id",
        "timestamp",
    }
    assert event["command"] == "verify"
    assert event["ok"] is True
    assert event["error_code"] is None
    assert event["timestamp"].endswith("Z")
    assert len(event["run_id"]) == 12


def test_read_filters_by_since_and_limit(tmp_path: Path) -> None:
    logger = JsonlAuditLogger(tmp_path / "audit.jsonl")
    logger.append(_event("2026-01-01T00:00:00.000Z", command="generate"))
    logger.append(_event("2026-02-01T00:00:00.000Z", ok=False))
    logger.append(_event("2026-03-01T00:00:00.000Z"))

    since = logger.read(since="2026-01-15T00:00:00.000Z")
    assert [entry["timestamp"] for entry in since] == [
        "2026-02-01T00:00:00.000Z",
        "2026-03-01T00:00:00.000Z",
    ]
    latest = logger.read(limit=1)
    assert [entry["timestamp"] for entry in latest] == ["2026-03-01T00:00:00.000Z"]
    assert logger.read(limit=0) == []


def test_read_skips_corrupt_lines(tmp_path: Path) -> None:
    path = tmp_path / "audit.jsonl"
    path.write_text('not json\n\n["list"]\n{"timestamp": "t", "command": "verify"}\n', "utf-8")

    assert JsonlAuditLogger(path).read() == [{"timestamp": "t", "command": "verify"}]


def test_read_of_missing_log_is_empty(tmp_path: Path) -> None:
    assert JsonlAuditLogger(tmp_path / "none.jsonl").read() == []
