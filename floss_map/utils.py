# floss_map/utils.py
from __future__ import annotations

"""
Shared utilities for floss_map.

Includes unique-colour helpers used by the matching pass, duration
formatting, and tidy print-based logging for the CLI.
"""

from typing import Any, Iterable, List, Tuple

import numpy as np

from .core_types import U8Image


#  Time formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Compact total duration: 'Mm Ss', 'Ss.s', or 'ms'."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        rem = int(round(seconds - 60 * minutes))
        return f"{minutes}m {rem}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


# Colour helpers


def unique_colours_with_inverse(
    rgb: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Unique RGB rows with counts and inverse index.

    Accepts any (..., 3) array; float input is kept as float so non-finite
    channels survive to the matcher.

    Returns:
      unique_rgb: [U,3]
      counts: int64 [U]
      inverse_idx: int64 [N], where unique_rgb[inverse_idx] rebuilds the flattened rows
    """
    flat = np.asarray(rgb).reshape(-1, 3)
    if flat.shape[0] == 0:
        return (
            np.zeros((0, 3), dtype=flat.dtype),
            np.zeros((0,), dtype=np.int64),
            np.zeros((0,), dtype=np.int64),
        )
    unique_rgb, inverse_idx, counts = np.unique(
        flat, axis=0, return_inverse=True, return_counts=True
    )
    return (
        unique_rgb,
        counts.astype(np.int64, copy=False),
        inverse_idx.reshape(-1).astype(np.int64, copy=False),
    )


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round to nearest integer with .5 going up (np.round rounds to even)."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def chunk_rows(rows: U8Image, chunk: int) -> Iterable[Tuple[int, np.ndarray]]:
    """Yield (offset, block) slices of at most `chunk` rows."""
    chunk = max(1, int(chunk))
    for start in range(0, rows.shape[0], chunk):
        yield start, rows[start : start + chunk]


#  CLI helpers


def enable_line_buffered_stdout() -> None:
    """
    Enable line-buffered stdout when supported.
    Helps live progress printing in terminals that expose .reconfigure().
    """
    import sys

    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (ValueError, OSError):
            pass


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1_234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [reduce] Strategy: anchored  Max colours: 15  Kept: 15
    Routes to debug() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    import sys

    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    # formatting
    "format_seconds_compact",
    "format_total_duration_compact",
    "format_bool_on_off",
    "format_number_compact",
    # colour helpers
    "unique_colours_with_inverse",
    "round_half_up",
    "chunk_rows",
    # logging / CLI
    "enable_line_buffered_stdout",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
