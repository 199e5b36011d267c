# floss_map/quantize.py
from __future__ import annotations

"""
Dominant-colour discovery by K-means over sampled pixels.

Seeding is deterministic: black, then white, then repeatedly the sample that
is farthest from every centroid chosen so far. The only random step is
re-seeding a centroid that lost all its samples; pass `rng` to make it
reproducible.
"""

from typing import List, Optional, Sequence, Union

import numpy as np

from .constants import DEFAULT_MAX_ITERATIONS, OPAQUE_ALPHA_MIN, SAMPLE_BUDGET
from .core_types import Centroid
from .utils import round_half_up

PixelInput = Union[bytes, bytearray, memoryview, Sequence[int], np.ndarray]

_BLACK = np.zeros(3, dtype=np.float64)
_WHITE = np.full(3, 255.0, dtype=np.float64)


def _as_rgba_rows(pixels: PixelInput) -> np.ndarray:
    """Flat RGBA bytes, [N,4] or [H,W,4] -> uint8 [N,4]."""
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        flat = np.frombuffer(bytes(pixels), dtype=np.uint8)
    else:
        arr = np.asarray(pixels)
        if arr.ndim >= 2 and arr.shape[-1] == 4:
            return arr.reshape(-1, 4).astype(np.uint8, copy=False)
        flat = arr.reshape(-1).astype(np.uint8, copy=False)
    if flat.size % 4 != 0:
        raise ValueError(f"RGBA buffer length {flat.size} is not a multiple of 4")
    return flat.reshape(-1, 4)


def _squared_distances(samples: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """[S,K] squared RGB distances."""
    diff = samples[:, None, :] - centroids[None, :, :]
    return np.sum(diff * diff, axis=2)


def sample_opaque_pixels(
    pixels: PixelInput,
    budget: int = SAMPLE_BUDGET,
    alpha_min: int = OPAQUE_ALPHA_MIN,
) -> np.ndarray:
    """
    Deterministic strided sample of opaque pixels.

    Every `max(1, N // budget)`-th pixel is visited; those with alpha <=
    alpha_min are skipped. Returns float64 [S,3].
    """
    rows = _as_rgba_rows(pixels)
    step = max(1, rows.shape[0] // max(1, int(budget)))
    picked = rows[::step]
    opaque = picked[:, 3] > alpha_min
    return picked[opaque, :3].astype(np.float64)


def farthest_point_seeds(samples: np.ndarray, k: int) -> np.ndarray:
    """
    Black, white, then farthest-point picks until k centroids exist.
    Ties in the farthest pick go to the lowest sample index.
    """
    if k < 1:
        return np.zeros((0, 3), dtype=np.float64)
    seeds: List[np.ndarray] = [_BLACK.copy()]
    if k >= 2:
        seeds.append(_WHITE.copy())
    if len(seeds) >= k or samples.shape[0] == 0:
        return np.array(seeds[:k], dtype=np.float64)

    min_d2 = _squared_distances(samples, np.array(seeds)).min(axis=1)
    while len(seeds) < k:
        j = int(np.argmax(min_d2))
        pick = samples[j].astype(np.float64, copy=True)
        seeds.append(pick)
        min_d2 = np.minimum(min_d2, _squared_distances(samples, pick[None, :])[:, 0])
    return np.array(seeds, dtype=np.float64)


def assign_to_centroids(samples: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Nearest centroid per sample, ties to the lowest index."""
    return np.argmin(_squared_distances(samples, centroids), axis=1)


def quantize(
    pixels: PixelInput,
    k: int,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    rng: Optional[np.random.Generator] = None,
) -> List[Centroid]:
    """
    Cluster sampled opaque pixels into at most k centroids.

    Args:
      pixels: RGBA data (flat bytes, [N,4] or [H,W,4])
      k: number of centroids
      max_iterations: refinement cap; 0 returns the seeds
      rng: generator used to re-seed orphaned centroids
    Returns:
      centroids in slot order; empty when nothing is opaque or k < 1
    """
    samples = sample_opaque_pixels(pixels)
    if samples.shape[0] == 0 or k < 1:
        return []
    if rng is None:
        rng = np.random.default_rng()

    centroids = farthest_point_seeds(samples, k)
    n_clusters = centroids.shape[0]

    for _ in range(max(0, int(max_iterations))):
        labels = assign_to_centroids(samples, centroids)
        counts = np.bincount(labels, minlength=n_clusters)
        sums = np.stack(
            [
                np.bincount(labels, weights=samples[:, c], minlength=n_clusters)
                for c in range(3)
            ],
            axis=1,
        )

        changed = False
        for i in range(n_clusters):
            if counts[i] == 0:
                centroids[i] = samples[int(rng.integers(samples.shape[0]))]
                changed = True
                continue
            new = round_half_up(sums[i] / counts[i])
            if not np.array_equal(new, centroids[i]):
                centroids[i] = new
                changed = True
        if not changed:
            break

    return [Centroid(float(r), float(g), float(b)) for r, g, b in centroids]


__all__ = [
    "sample_opaque_pixels",
    "farthest_point_seeds",
    "assign_to_centroids",
    "quantize",
]
