from __future__ import annotations

from pathlib import Path

import pytest

from checksum_verifier.config import load_effective_config


def _write_config(tmp_path: Path, *lines: str) -> None:
    (tmp_path / "checksum_verifier.toml").write_text("\n".join(lines), encoding="utf-8")


def test_invalid_section_type_raises_value_error(tmp_path: Path) -> None:
    _write_config(tmp_path, 'paths = "not-a-table"')

    with pytest.raises(ValueError, match="section 'paths'"):
        load_effective_config(tmp_path)


def test_invalid_path_type_raises_value_error(tmp_path: Path) -> None:
    _write_config(tmp_path, "[paths]", "data_dir = 3")

    with pytest.raises(ValueError, match="paths.data_dir"):
        load_effective_config(tmp_path)


def test_invalid_boolean_raises_value_error(tmp_path: Path) -> None:
    _write_config(tmp_path, "[output]", 'generate_verbose = "yes"')

    with pytest.raises(ValueError, match="output.generate_verbose"):
        load_effective_config(tmp_path)


@pytest.mark.parametrize(
    "template",
    ["checksum.old", "{stem}_{unknown}_{timestamp}.old", "backups/{stem}_{timestamp}.old"],
)
def test_invalid_rotation_template_raises_value_error(tmp_path: Path, template: str) -> None:
    _write_config(tmp_path, "[rotation]", f'template = "{template}"')

    with pytest.raises(ValueError, match="rotation.template"):
        load_effective_config(tmp_path)


def test_malformed_toml_raises_value_error(tmp_path: Path) -> None:
    _write_config(tmp_path, "[paths", "data_dir = ")

    with pytest.raises(ValueError):
        load_effective_config(tmp_path)
