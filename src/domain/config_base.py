"""Shared config-loading and clamping utilities."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any
import tomllib


def load_toml_file(config_path: Path) -> dict[str, Any]:
    """Load one TOML config file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    if config_path.is_dir():
        raise IsADirectoryError(f"Config path is a directory, expected a .toml file: {config_path}")

    with config_path.open("rb") as file:
        return tomllib.load(file)


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except OverflowError:
        # Integers past the float range keep their sign and clamp to a bound.
        return math.inf if value > 0 else -math.inf
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def clamp_float(value: Any, lower: float, upper: float, fallback: float) -> float:
    """Coerce ``value`` to a float inside ``[lower, upper]``.

    Non-numeric input and NaN become ``fallback``; infinities and huge integers land on the nearest bound.
    """
    number = _to_float(value)
    if number is None:
        number = float(fallback)
    return min(upper, max(lower, number))


def clamp_int(value: Any, lower: int, upper: int, fallback: int) -> int:
    """Same as :func:`clamp_float`, truncated toward zero."""
    return math.trunc(clamp_float(value, lower, upper, fallback))


__all__ = ["clamp_float", "clamp_int", "load_toml_file"]
