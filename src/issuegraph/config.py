from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomllib

if TYPE_CHECKING:
    from .layout import ForceLayoutOptions


_LAYOUT_TABLE = "layout"
_FLOAT_KEYS = {
    "repel_force",
    "attract_force",
    "damping",
    "min_node_size",
    "max_node_size",
}
_INT_KEYS = {"iterations", "seed"}
_STR_KEYS = {"title"}


class ConfigValidationError(ValueError):
    pass


def _as_int(value: object, *, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigValidationError(f"{field} must be an integer")
    return value


def _as_float(value: object, *, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigValidationError(f"{field} must be a number")
    return float(value)


def _as_str(value: object, *, field: str) -> str:
    if not isinstance(value, str):
        raise ConfigValidationError(f"{field} must be a string")
    return value.strip()


def parse_layout_table(table: object) -> dict[str, Any]:
    """Validate a ``[layout]`` table and return option keyword arguments."""
    if table is None:
        return {}
    if not isinstance(table, dict):
        raise ConfigValidationError(f"[{_LAYOUT_TABLE}] must be a table")

    out: dict[str, Any] = {}
    for key, value in table.items():
        field = f"[{_LAYOUT_TABLE}].{key}"
        if key in _INT_KEYS:
            out[key] = _as_int(value, field=field)
        elif key in _FLOAT_KEYS:
            out[key] = _as_float(value, field=field)
        elif key in _STR_KEYS:
            out[key] = _as_str(value, field=field)
        else:
            raise ConfigValidationError(f"unknown key in [{_LAYOUT_TABLE}]: {key!r}")
    return out


def load_layout_options(path: Path) -> ForceLayoutOptions:
    """Read layout options from the ``[layout]`` table of a TOML file.

    A missing file yields default options. Values are checked for type
    here and for range by ``ForceLayoutOptions.resolved``.
    """
    from .layout import ForceLayoutOptions

    if not path.exists():
        return ForceLayoutOptions()
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigValidationError(f"invalid TOML in {path}: {exc}") from exc

    options = ForceLayoutOptions(**parse_layout_table(data.get(_LAYOUT_TABLE)))
    options.resolved()
    return options
