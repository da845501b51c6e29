from __future__ import annotations

from pathlib import Path

import pytest

from issuegraph.config import ConfigValidationError, load_layout_options
from issuegraph.layout import ForceLayoutOptions


def _write_config(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "issuegraph.toml"
    path.write_text(body.strip() + "\n", encoding="utf-8")
    return path


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    assert load_layout_options(tmp_path / "absent.toml") == ForceLayoutOptions()


def test_missing_table_yields_defaults(tmp_path: Path) -> None:
    path = _write_config(tmp_path, '[other]\nkey = "value"')
    assert load_layout_options(path) == ForceLayoutOptions()


def test_layout_table_is_parsed(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path,
        """
[layout]
iterations = 120
repel_force = 6000
attract_force = 0.02
seed = 7
title = " Roadmap "
""",
    )
    opts = load_layout_options(path)
    assert opts.iterations == 120
    assert opts.repel_force == 6000.0
    assert isinstance(opts.repel_force, float)
    assert opts.attract_force == 0.02
    assert opts.seed == 7
    assert opts.title == "Roadmap"


def test_wrong_type_names_the_key(tmp_path: Path) -> None:
    path = _write_config(tmp_path, '[layout]\niterations = "many"')
    with pytest.raises(ConfigValidationError, match=r"\[layout\]\.iterations must be an integer"):
        load_layout_options(path)


def test_unknown_key_is_rejected(tmp_path: Path) -> None:
    path = _write_config(tmp_path, "[layout]\ngravity = 3")
    with pytest.raises(ConfigValidationError, match="unknown key in \\[layout\\]: 'gravity'"):
        load_layout_options(path)


def test_negative_value_is_rejected(tmp_path: Path) -> None:
    path = _write_config(tmp_path, "[layout]\ndamping = -0.5")
    with pytest.raises(ConfigValidationError, match="damping must be >= 0"):
        load_layout_options(path)


def test_invalid_toml_is_a_config_error(tmp_path: Path) -> None:
    path = _write_config(tmp_path, "[layout\niterations = 3")
    with pytest.raises(ConfigValidationError, match="invalid TOML"):
        load_layout_options(path)


def test_non_finite_value_is_rejected(tmp_path: Path) -> None:
    path = _write_config(tmp_path, "[layout]\nrepel_force = nan")
    with pytest.raises(ConfigValidationError, match="repel_force must be a finite number"):
        load_layout_options(path)
