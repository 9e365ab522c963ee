"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from checksum_verifier.manifest.codec import DEFAULT_ROTATION_TEMPLATE

CONFIG_FILE_NAME = "checksum_verifier.toml"
DEFAULT_DATA_DIR = Path("data")
DEFAULT_FILE_LIST_NAME = "filesForCheck.txt"
DEFAULT_MANIFEST_NAME = "checksum.txt"
AUDIT_LOG_NAME = "audit.jsonl"

_ROTATION_FIELDS = ("stem", "suffix", "name", "timestamp")


@dataclass(slots=True, frozen=True)
class OutputConfig:
    """Console verbosity per workflow."""

    generate_verbose: bool = True
    verify_verbose: bool = False
    report_missing_on_generate: bool = False


@dataclass(slots=True, frozen=True)
class ChecksumConfig:
    """Fully merged run configuration."""

    data_dir: Path
    file_list_path: Path
    manifest_path: Path
    base_dir: Path
    rotation_template: str
    output: OutputConfig
    audit_log_enabled: bool

    @property
    def audit_log_path(self) -> Path:
        return self.data_dir / AUDIT_LOG_NAME

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for logs."""
        return {
            "data_dir": str(self.data_dir),
            "file_list_path": str(self.file_list_path),
            "manifest_path": str(self.manifest_path),
            "base_dir": str(self.base_dir),
            "rotation_template": self.rotation_template,
            "output": {
                "generate_verbose": self.output.generate_verbose,
                "verify_verbose": self.output.verify_verbose,
                "report_missing_on_generate": self.output.report_missing_on_generate,
            },
            "audit_log_enabled": self.audit_log_enabled,
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    file_list: Path | None = None
    manifest: Path | None = None
    base_dir: Path | None = None
    verbose: bool | None = None
    report_missing_on_generate: bool | None = None
    audit_log_enabled: bool | None = None


def default_config(working_dir: Path) -> ChecksumConfig:
    """Build default config rooted at a working directory."""
    root = working_dir.resolve()
    data_dir = root / DEFAULT_DATA_DIR
    return ChecksumConfig(
        data_dir=data_dir,
        file_list_path=data_dir / DEFAULT_FILE_LIST_NAME,
        manifest_path=data_dir / DEFAULT_MANIFEST_NAME,
        base_dir=root,
        rotation_template=DEFAULT_ROTATION_TEMPLATE,
        output=OutputConfig(),
        audit_log_enabled=True,
    )


def load_config_file(config_path: Path) -> dict[str, object]:
    """Load an optional TOML config file."""
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{config_path.name} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _optional_str(value: object, name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    return value


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def _validate_rotation_template(template: str) -> str:
    if "{timestamp}" not in template:
        raise ValueError("Config field 'rotation.template' must contain '{timestamp}'.")
    try:
        rendered = template.format(**{field: "x" for field in _ROTATION_FIELDS})
    except (KeyError, IndexError, ValueError) as error:
        raise ValueError(
            "Config field 'rotation.template' may only use "
            "{stem}, {suffix}, {name} and {timestamp}."
        ) from error
    if "/" in rendered or "\\" in rendered:
        raise ValueError("Config field 'rotation.template' must name a file, not a path.")
    return template


def _resolve_under(base: Path, value: str | Path | None, default: Path) -> Path:
    if value is None:
        return default
    candidate = Path(value)
    if candidate.is_absolute():
        return candidate
    return (base / candidate).resolve()


def merge_config(
    base: ChecksumConfig, file_payload: dict[str, object], overrides: CliOverrides
) -> ChecksumConfig:
    """Merge defaults, config file, then CLI/startup overrides."""
    paths_payload = _get_table(file_payload, "paths")
    rotation_payload = _get_table(file_payload, "rotation")
    output_payload = _get_table(file_payload, "output")
    audit_payload = _get_table(file_payload, "audit")

    raw_data_dir = _optional_str(paths_payload.get("data_dir"), "paths.data_dir")
    raw_file_list = _optional_str(paths_payload.get("file_list"), "paths.file_list")
    raw_manifest = _optional_str(paths_payload.get("manifest"), "paths.manifest")
    raw_base_dir = _optional_str(paths_payload.get("base_dir"), "paths.base_dir")

    data_dir = _resolve_under(base.base_dir, raw_data_dir, base.data_dir)
    file_list_path = _resolve_under(data_dir, raw_file_list, data_dir / base.file_list_path.name)
    manifest_path = _resolve_under(data_dir, raw_manifest, data_dir / base.manifest_path.name)
    base_dir = _resolve_under(base.base_dir, raw_base_dir, base.base_dir)

    rotation_template = base.rotation_template
    raw_template = _optional_str(rotation_payload.get("template"), "rotation.template")
    if raw_template is not None:
        rotation_template = _validate_rotation_template(raw_template)

    output = OutputConfig(
        generate_verbose=_optional_bool(
            output_payload.get("generate_verbose"),
            "output.generate_verbose",
            base.output.generate_verbose,
        ),
        verify_verbose=_optional_bool(
            output_payload.get("verify_verbose"),
            "output.verify_verbose",
            base.output.verify_verbose,
        ),
        report_missing_on_generate=_optional_bool(
            output_payload.get("report_missing_on_generate"),
            "output.report_missing_on_generate",
            base.output.report_missing_on_generate,
        ),
    )
    audit_log_enabled = _optional_bool(
        audit_payload.get("enabled"), "audit.enabled", base.audit_log_enabled
    )

    merged = ChecksumConfig(
        data_dir=data_dir,
        file_list_path=file_list_path,
        manifest_path=manifest_path,
        base_dir=base_dir,
        rotation_template=rotation_template,
        output=output,
        audit_log_enabled=audit_log_enabled,
    )
    return apply_cli_overrides(merged, overrides)


def _move_under(path: Path, old_root: Path, new_root: Path) -> Path:
    if path.is_relative_to(old_root):
        return new_root / path.relative_to(old_root)
    return path


def apply_cli_overrides(config: ChecksumConfig, overrides: CliOverrides) -> ChecksumConfig:
    """Apply startup overrides at highest precedence.

    A data directory override also moves file list and manifest when they sit
    under the previous data directory. Paths configured elsewhere are kept.
    """
    cwd = Path.cwd()
    data_dir = config.data_dir
    file_list_path = config.file_list_path
    manifest_path = config.manifest_path
    if overrides.data_dir is not None:
        data_dir = _resolve_under(cwd, overrides.data_dir, data_dir)
        file_list_path = _move_under(file_list_path, config.data_dir, data_dir)
        manifest_path = _move_under(manifest_path, config.data_dir, data_dir)
    if overrides.file_list is not None:
        file_list_path = _resolve_under(cwd, overrides.file_list, file_list_path)
    if overrides.manifest is not None:
        manifest_path = _resolve_under(cwd, overrides.manifest, manifest_path)
    base_dir = config.base_dir
    if overrides.base_dir is not None:
        base_dir = _resolve_under(cwd, overrides.base_dir, base_dir)

    output = config.output
    if overrides.verbose is not None or overrides.report_missing_on_generate is not None:
        output = OutputConfig(
            generate_verbose=(
                overrides.verbose if overrides.verbose is not None else output.generate_verbose
            ),
            verify_verbose=(
                overrides.verbose if overrides.verbose is not None else output.verify_verbose
            ),
            report_missing_on_generate=(
                overrides.report_missing_on_generate
                if overrides.report_missing_on_generate is not None
                else output.report_missing_on_generate
            ),
        )
    audit_log_enabled = (
        overrides.audit_log_enabled
        if overrides.audit_log_enabled is not None
        else config.audit_log_enabled
    )
    return ChecksumConfig(
        data_dir=data_dir,
        file_list_path=file_list_path,
        manifest_path=manifest_path,
        base_dir=base_dir,
        rotation_template=config.rotation_template,
        output=output,
        audit_log_enabled=audit_log_enabled,
    )


def load_effective_config(
    working_dir: Path,
    overrides: CliOverrides | None = None,
    config_path: Path | None = None,
) -> ChecksumConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved_root = working_dir.resolve()
    base = default_config(resolved_root)
    payload = load_config_file(config_path or resolved_root / CONFIG_FILE_NAME)
    return merge_config(base, payload, overrides or CliOverrides())
