"""Generation and verification workflows."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from checksum_verifier.config import ChecksumConfig
from checksum_verifier.manifest import (
    FingerprintRun,
    Reconciliation,
    RotationPolicy,
    compute_fingerprints,
    fingerprint_set,
    load_file_list,
    read_manifest,
    reconcile,
    write_manifest,
)
from checksum_verifier.report import ConsoleReporter

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class GenerationResult:
    """Outcome of writing a new manifest."""

    manifest_path: Path
    backup_path: Path | None
    run: FingerprintRun


@dataclass(slots=True, frozen=True)
class VerificationResult:
    """Outcome of checking the filesystem against a manifest."""

    manifest_path: Path
    model_count: int
    current_count: int
    reconciliation: Reconciliation

    @property
    def error_count(self) -> int:
        return self.reconciliation.error_count


class ChecksumRunner:
    """Runs workflows for one effective configuration."""

    def __init__(self, config: ChecksumConfig, reporter: ConsoleReporter | None = None) -> None:
        self._config = config
        self._reporter = reporter or ConsoleReporter()
        self._rotation = RotationPolicy(template=config.rotation_template)

    @property
    def config(self) -> ChecksumConfig:
        return self._config

    def generate(self, now_ms: int | None = None) -> GenerationResult:
        """Fingerprint the declared files and replace the manifest."""
        config = self._config
        self._reporter.generation_banner(config.file_list_path)
        paths = load_file_list(config.file_list_path)
        logger.debug("loaded %d entries from %s", len(paths), config.file_list_path)
        run = compute_fingerprints(
            paths,
            config.output.report_missing_on_generate,
            base_dir=config.base_dir,
            progress=self._reporter.file_processed if config.output.generate_verbose else None,
            on_missing=self._reporter.missing_targets,
        )
        if run.missing:
            logger.info("%d listed files were not found and are left out", len(run.missing))
        backup = write_manifest(
            config.manifest_path,
            run.records,
            rotation=self._rotation,
            now_ms=now_ms,
        )
        self._reporter.generation_complete(config.manifest_path, len(run.records), backup)
        return GenerationResult(manifest_path=config.manifest_path, backup_path=backup, run=run)

    def verify(self) -> VerificationResult:
        """Reconcile the recorded manifest with the current filesystem."""
        config = self._config
        self._reporter.verification_banner(config.file_list_path, config.manifest_path)
        model = fingerprint_set(read_manifest(config.manifest_path))
        paths = load_file_list(config.file_list_path)
        # Missing targets surface through the reconciliation, not the engine.
        run = compute_fingerprints(
            paths,
            False,
            base_dir=config.base_dir,
            progress=self._reporter.file_processed if config.output.verify_verbose else None,
        )
        current = fingerprint_set(run.records)
        result = reconcile(model, current)
        self._reporter.reconciliation(result)
        return VerificationResult(
            manifest_path=config.manifest_path,
            model_count=len(model),
            current_count=len(current),
            reconciliation=result,
        )
