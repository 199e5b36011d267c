# floss_map/matching.py
from __future__ import annotations

"""
Nearest reference colour lookup.

Exports:
  match_nearest(palette, r, g, b) -> ReferenceColor
  match_nearest_grey(palette, r, g, b) -> ReferenceColor
  match_with_status(palette, r, g, b, mode="colour") -> MatchResult
  nearest_indices(pal_rgb, query_rgb, white_index=None) -> (indices, fallbacks)
  nearest_grey_indices(pal_rgb, query_rgb, white_index=None) -> (indices, fallbacks)

Notes:
  Distances are squared Euclidean in RGB; only relative order matters.
  Ties go to the first entry in store order (strict '<' while scanning,
  argmin's first-minimum rule in the vectorised path), so both paths agree.
  A non-finite or non-numeric channel never reaches a comparison: the query
  fails closed to the palette's white entry.
"""

import math
import numbers
from typing import Literal, NamedTuple, Optional, Tuple

import numpy as np

from .constants import MATCH_CHUNK_ROWS
from .core_types import ReferenceColor, luma, squared_distance
from .palette_data import ReferencePalette
from .utils import chunk_rows

MatchMode = Literal["colour", "grey"]


class MatchResult(NamedTuple):
    colour: ReferenceColor
    fell_back: bool


def _is_finite_channel(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def _scan_nearest(palette: ReferencePalette, r: float, g: float, b: float) -> ReferenceColor:
    query = (float(r), float(g), float(b))
    best = palette[0]
    best_d = math.inf
    for colour in palette:
        d = squared_distance(query, colour.rgb)
        if d < best_d:
            best, best_d = colour, d
    return best


def _scan_nearest_grey(palette: ReferencePalette, r: float, g: float, b: float) -> ReferenceColor:
    target = luma(float(r), float(g), float(b))
    best = palette[0]
    best_d = math.inf
    for colour in palette:
        d = abs(target - luma(colour.r, colour.g, colour.b))
        if d < best_d:
            best, best_d = colour, d
    return best


def match_with_status(
    palette: ReferencePalette, r: object, g: object, b: object, mode: MatchMode = "colour"
) -> MatchResult:
    """Match and report whether the white fallback was used."""
    if not (_is_finite_channel(r) and _is_finite_channel(g) and _is_finite_channel(b)):
        return MatchResult(palette.white(), True)
    scan = _scan_nearest_grey if mode == "grey" else _scan_nearest
    return MatchResult(scan(palette, r, g, b), False)  # type: ignore[arg-type]


def match_nearest(palette: ReferencePalette, r: object, g: object, b: object) -> ReferenceColor:
    """Closest reference colour by RGB distance; white for unusable input."""
    return match_with_status(palette, r, g, b).colour


def match_nearest_grey(palette: ReferencePalette, r: object, g: object, b: object) -> ReferenceColor:
    """Closest reference colour by luma only, ignoring hue and saturation."""
    return match_with_status(palette, r, g, b, mode="grey").colour


def _default_white_index(pal: np.ndarray) -> int:
    d = 255.0 - pal
    return int(np.argmin(np.sum(d * d, axis=1)))


def _split_finite(query_rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    q = np.asarray(query_rgb, dtype=np.float64).reshape(-1, 3)
    return q, np.isfinite(q).all(axis=1)


def nearest_indices(
    pal_rgb: np.ndarray, query_rgb: np.ndarray, white_index: Optional[int] = None
) -> Tuple[np.ndarray, int]:
    """
    Vectorised nearest-palette search for [N,3] query rows.
    Rows with a non-finite channel get `white_index` (default: the entry
    nearest to pure white).

    Returns (indices int32 [N], number of rows that fell back to white).
    """
    q, finite = _split_finite(query_rgb)
    pal = np.asarray(pal_rgb, dtype=np.float64).reshape(-1, 3)
    if white_index is None:
        white_index = _default_white_index(pal)
    out = np.full(q.shape[0], int(white_index), dtype=np.int32)
    rows = np.flatnonzero(finite)
    for _start, idx in chunk_rows(rows, MATCH_CHUNK_ROWS):
        block = q[idx]
        dr = block[:, None, 0] - pal[None, :, 0]
        dg = block[:, None, 1] - pal[None, :, 1]
        db = block[:, None, 2] - pal[None, :, 2]
        d2 = dr * dr + dg * dg + db * db
        out[idx] = np.argmin(d2, axis=1)
    return out, int(q.shape[0] - rows.size)


def nearest_grey_indices(
    pal_rgb: np.ndarray, query_rgb: np.ndarray, white_index: Optional[int] = None
) -> Tuple[np.ndarray, int]:
    """Vectorised luma-only search. Same return shape as nearest_indices."""
    q, finite = _split_finite(query_rgb)
    pal = np.asarray(pal_rgb, dtype=np.float64).reshape(-1, 3)
    if white_index is None:
        white_index = _default_white_index(pal)
    out = np.full(q.shape[0], int(white_index), dtype=np.int32)
    pal_luma = 0.299 * pal[:, 0] + 0.587 * pal[:, 1] + 0.114 * pal[:, 2]
    rows = np.flatnonzero(finite)
    for _start, idx in chunk_rows(rows, MATCH_CHUNK_ROWS):
        block = q[idx]
        q_luma = 0.299 * block[:, 0] + 0.587 * block[:, 1] + 0.114 * block[:, 2]
        out[idx] = np.argmin(np.abs(q_luma[:, None] - pal_luma[None, :]), axis=1)
    return out, int(q.shape[0] - rows.size)


def match_rows(
    palette: ReferencePalette, query_rgb: np.ndarray, mode: MatchMode = "colour"
) -> Tuple[np.ndarray, int]:
    """Palette indices for [N,3] rows using the store's arrays."""
    search = nearest_grey_indices if mode == "grey" else nearest_indices
    return search(palette.rgb_array(), query_rgb, palette.white_index)


__all__ = [
    "MatchMode",
    "MatchResult",
    "match_nearest",
    "match_nearest_grey",
    "match_with_status",
    "nearest_indices",
    "nearest_grey_indices",
    "match_rows",
]
