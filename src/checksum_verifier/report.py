"""Human-readable rendering of fingerprint runs and reconciliation results."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from checksum_verifier.manifest.models import FingerprintRecord, Mismatch, Reconciliation

MISSING_ON_DISK_LABEL = "Files listed in the manifest but missing on disk"
NOT_IN_MANIFEST_LABEL = "Files present on disk but missing from the manifest"
MISMATCH_LABEL = "Files whose properties differ from the manifest"
MISSING_TARGETS_LABEL = "Files from the file list that were not found"
SUCCESS_MESSAGE = "Checksum verification passed. No discrepancies found."
FAILURE_MESSAGE = "Checksum verification finished. Discrepancies found: {count}"

STYLE_ERROR = "bold red"
STYLE_ITEM = "red"
STYLE_SUCCESS = "bold green"
STYLE_FILE = "cyan"
STYLE_PLAIN = ""


@dataclass(slots=True, frozen=True)
class ReportLine:
    """One styled line of console output."""

    style: str
    text: str


def format_mismatch(mismatch: Mismatch) -> str:
    """Render one mismatching path with all of its sub-messages."""
    return f'"{mismatch.path}": {"; ".join(mismatch.messages)}.'


def render_error_block(label: str, items: Sequence[str]) -> list[ReportLine]:
    """Render a labeled list of discrepancies; empty when there is nothing to report."""
    if not items:
        return []
    lines = [ReportLine(style=STYLE_ERROR, text=f"{label}:")]
    lines.extend(ReportLine(style=STYLE_ITEM, text=f"  {item}") for item in items)
    lines.append(ReportLine(style=STYLE_PLAIN, text=""))
    return lines


def render_summary(error_count: int) -> ReportLine:
    if error_count == 0:
        return ReportLine(style=STYLE_SUCCESS, text=SUCCESS_MESSAGE)
    return ReportLine(style=STYLE_ERROR, text=FAILURE_MESSAGE.format(count=error_count))


def render_reconciliation(result: Reconciliation) -> list[ReportLine]:
    """Render every discrepancy block followed by the summary line."""
    lines: list[ReportLine] = []
    lines.extend(render_error_block(MISSING_ON_DISK_LABEL, result.missing_on_disk))
    lines.extend(render_error_block(NOT_IN_MANIFEST_LABEL, result.not_in_manifest))
    lines.extend(
        render_error_block(MISMATCH_LABEL, [format_mismatch(item) for item in result.mismatches])
    )
    lines.append(render_summary(result.error_count))
    return lines


class ConsoleReporter:
    """Writes run banners, progress and results to a rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(highlight=False, soft_wrap=True)

    @property
    def console(self) -> Console:
        return self._console

    def emit(self, lines: Sequence[ReportLine]) -> None:
        for line in lines:
            if line.style:
                self._console.print(escape(line.text), style=line.style)
            else:
                self._console.print(escape(line.text))

    def generation_banner(self, file_list_path: Path) -> None:
        self._console.print("File checksum generation program.")
        self._console.print(
            f"The list of files is loaded from [{STYLE_FILE}]{escape(str(file_list_path))}[/]\n"
        )

    def verification_banner(self, file_list_path: Path, manifest_path: Path) -> None:
        self._console.print("File checksum verification program.")
        self._console.print(
            f"The list of files is [{STYLE_FILE}]{escape(str(file_list_path))}[/]"
        )
        self._console.print(
            f"The manifest is [{STYLE_FILE}]{escape(str(manifest_path))}[/]\n"
        )

    def file_processed(self, record: FingerprintRecord) -> None:
        self._console.print(
            f'Generated checksums for the file "{escape(record.path)}"'
            f"\t{record.hash}\t{record.size}"
        )

    def missing_targets(self, paths: Sequence[str]) -> None:
        self.emit(render_error_block(MISSING_TARGETS_LABEL, paths))

    def generation_complete(self, manifest_path: Path, count: int, backup: Path | None) -> None:
        if backup is not None:
            self._console.print(
                f"The previous manifest was renamed to [{STYLE_FILE}]{escape(str(backup))}[/]"
            )
        self._console.print(
            f"\nThe checksums of {count} files are calculated and written to the file "
            f"[{STYLE_FILE}]{escape(str(manifest_path))}[/]"
        )

    def reconciliation(self, result: Reconciliation) -> None:
        self.emit(render_reconciliation(result))

    def fatal(self, reason: str, hint: str) -> None:
        self._console.print(f"Error: {escape(reason)}", style=STYLE_ERROR)
        if hint:
            self._console.print(escape(hint))
