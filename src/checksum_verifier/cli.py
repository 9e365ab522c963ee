"""Command line entrypoint."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from checksum_verifier.config import ChecksumConfig, CliOverrides, load_effective_config
from checksum_verifier.logging import JsonlAuditLogger, RunEvent, new_run_id, utc_timestamp
from checksum_verifier.manifest import FatalIOError, ManifestParseError
from checksum_verifier.report import ConsoleReporter
from checksum_verifier.runner import ChecksumRunner

EXIT_OK = 0
EXIT_DISCREPANCIES = 1
EXIT_FATAL = 2

logger = logging.getLogger("checksum_verifier")


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for run configuration."""
    parser = argparse.ArgumentParser(
        prog="checksum-verifier",
        description="Record and verify MD5 fingerprints for a declared list of files.",
    )
    parser.add_argument("--config", default=None, help="Path to checksum_verifier.toml")
    parser.add_argument("--data-dir", default=None, help="Directory holding list and manifest")
    parser.add_argument("--file-list", default=None, help="File with one path per line")
    parser.add_argument("--manifest", default=None, help="Manifest file to write or check")
    parser.add_argument("--base-dir", default=None, help="Directory listed paths are relative to")
    parser.add_argument("--no-audit-log", action="store_true", help="Do not append to audit.jsonl")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Show every file")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Hide per-file progress")
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", help="Fingerprint listed files and write the manifest")
    generate.add_argument(
        "--report-missing",
        action="store_true",
        help="Report listed files that do not exist as an error block",
    )
    sub.add_parser("verify", help="Compare current files against the manifest")

    history = sub.add_parser("history", help="Show recent runs from the audit log")
    history.add_argument("--limit", type=int, default=20)
    history.add_argument("--since", default=None, help="ISO-8601 UTC lower bound")
    return parser


def configure_logging(console: Console, verbose: bool, quiet: bool) -> None:
    """Route diagnostics through a rich handler on the report console."""
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    if quiet:
        level = logging.WARNING
    handler = RichHandler(console=console, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(level)
    logger.propagate = False


def create_runner(
    working_dir: str = ".",
    cli_overrides: CliOverrides | None = None,
    config_path: str | None = None,
    reporter: ConsoleReporter | None = None,
) -> ChecksumRunner:
    """Create a runner for the effective configuration."""
    config = load_effective_config(
        working_dir=Path(working_dir).resolve(),
        overrides=cli_overrides,
        config_path=Path(config_path).resolve() if config_path is not None else None,
    )
    return ChecksumRunner(config=config, reporter=reporter)


def _overrides_from_args(args: argparse.Namespace) -> CliOverrides:
    verbose: bool | None = None
    if args.verbose:
        verbose = True
    if args.quiet:
        verbose = False
    return CliOverrides(
        data_dir=Path(args.data_dir) if args.data_dir is not None else None,
        file_list=Path(args.file_list) if args.file_list is not None else None,
        manifest=Path(args.manifest) if args.manifest is not None else None,
        base_dir=Path(args.base_dir) if args.base_dir is not None else None,
        verbose=verbose,
        report_missing_on_generate=True if getattr(args, "report_missing", False) else None,
        audit_log_enabled=False if args.no_audit_log else None,
    )


def _record_run(config: ChecksumConfig, event: RunEvent) -> None:
    if not config.audit_log_enabled:
        return
    try:
        JsonlAuditLogger(config.audit_log_path).append(event)
    except OSError as error:
        logger.warning("could not append to %s: %s", config.audit_log_path, error)


def _run_history(
    config: ChecksumConfig,
    reporter: ConsoleReporter,
    limit: int,
    since: str | None,
) -> int:
    entries = JsonlAuditLogger(config.audit_log_path).read(since=since, limit=limit)
    if not entries:
        reporter.console.print("No runs recorded.")
        return EXIT_OK
    for entry in entries:
        status = "ok" if entry.get("ok") else "failed"
        reporter.console.print(
            f"{entry.get('timestamp')}  {entry.get('command')}  {status}  "
            f"errors={entry.get('error_count')}  run={entry.get('run_id')}",
            highlight=False,
        )
    return EXIT_OK


def run_command(
    command: str,
    runner: ChecksumRunner,
    reporter: ConsoleReporter,
) -> int:
    """Execute generate or verify and record the outcome in the audit log."""
    config = runner.config
    run_id = new_run_id()
    try:
        if command == "generate":
            generated = runner.generate()
            _record_run(
                config,
                RunEvent(
                    timestamp=utc_timestamp(),
                    run_id=run_id,
                    command=command,
                    ok=True,
                    error_count=0,
                    error_code=None,
                    metadata={
                        "files": len(generated.run.records),
                        "missing": len(generated.run.missing),
                        "rotated": generated.backup_path is not None,
                    },
                ),
            )
            return EXIT_OK
        verified = runner.verify()
    except FatalIOError as error:
        reporter.fatal(error.reason, error.hint)
        code = "MANIFEST_PARSE" if isinstance(error, ManifestParseError) else "FATAL_IO"
        _record_run(
            config,
            RunEvent(
                timestamp=utc_timestamp(),
                run_id=run_id,
                command=command,
                ok=False,
                error_count=0,
                error_code=code,
                metadata={},
            ),
        )
        return EXIT_FATAL

    result = verified.reconciliation
    _record_run(
        config,
        RunEvent(
            timestamp=utc_timestamp(),
            run_id=run_id,
            command=command,
            ok=result.ok,
            error_count=result.error_count,
            error_code=None if result.ok else "DISCREPANCIES",
            metadata={
                "model_files": verified.model_count,
                "current_files": verified.current_count,
                "missing_on_disk": len(result.missing_on_disk),
                "not_in_manifest": len(result.not_in_manifest),
                "mismatches": len(result.mismatches),
            },
        ),
    )
    return EXIT_OK if result.ok else EXIT_DISCREPANCIES


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    """Entrypoint for the checksum-verifier process."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    reporter = ConsoleReporter(console)
    configure_logging(reporter.console, verbose=args.verbose, quiet=args.quiet)
    try:
        runner = create_runner(
            working_dir=".",
            cli_overrides=_overrides_from_args(args),
            config_path=args.config,
            reporter=reporter,
        )
    except ValueError as error:
        reporter.fatal(str(error), "Fix the configuration file or command line options.")
        return EXIT_FATAL
    except OSError as error:
        reporter.fatal(f"Cannot read configuration: {error}", "Check the --config path.")
        return EXIT_FATAL
    logger.debug("effective config %s", runner.config.to_public_dict())

    if args.command == "history":
        return _run_history(runner.config, reporter, limit=args.limit, since=args.since)
    return run_command(args.command, runner, reporter)
