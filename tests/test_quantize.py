# tests/test_quantize.py
import numpy as np
import pytest

from floss_map.quantize import farthest_point_seeds, quantize, sample_opaque_pixels


def _rgba(rows):
    return np.array(rows, dtype=np.uint8).reshape(-1, 4)


def test_single_cluster_is_the_mean():
    pixels = _rgba([[10, 20, 30, 255], [30, 40, 50, 255]])
    centroids = quantize(pixels, 1)
    assert len(centroids) == 1
    assert (centroids[0].r, centroids[0].g, centroids[0].b) == (20.0, 30.0, 40.0)


def test_never_more_than_k_centroids():
    rng = np.random.default_rng(1)
    pixels = rng.integers(0, 256, size=(64, 64, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    assert len(quantize(pixels, 4, rng=np.random.default_rng(0))) <= 4


def test_all_transparent_gives_no_centroids():
    pixels = np.zeros((8, 8, 4), dtype=np.uint8)
    pixels[..., :3] = 200
    pixels[..., 3] = 128
    assert quantize(pixels, 3) == []


def test_zero_k_gives_no_centroids():
    assert quantize(_rgba([[1, 2, 3, 255]]), 0) == []


def test_flat_byte_buffer_is_accepted():
    buf = bytes([10, 20, 30, 255, 30, 40, 50, 255])
    centroids = quantize(buf, 1)
    assert centroids[0].rgb == (20, 30, 40)
    with pytest.raises(ValueError):
        quantize(buf[:-1], 1)


def test_sampling_stride_and_alpha_threshold():
    pixels = np.full((4000, 4), 255, dtype=np.uint8)
    assert sample_opaque_pixels(pixels).shape == (2000, 3)

    pixels[::2, 3] = 128  # every sampled pixel sits exactly on the threshold
    assert sample_opaque_pixels(pixels).shape == (0, 3)


def test_seeds_start_black_white_then_farthest():
    samples = np.array([[255.0, 0.0, 0.0], [0.0, 0.0, 255.0], [120.0, 120.0, 120.0]])
    seeds = farthest_point_seeds(samples, 4)
    assert seeds[0].tolist() == [0.0, 0.0, 0.0]
    assert seeds[1].tolist() == [255.0, 255.0, 255.0]
    # red and blue tie on distance; the lower sample index wins
    assert seeds[2].tolist() == [255.0, 0.0, 0.0]
    assert seeds[3].tolist() == [0.0, 0.0, 255.0]


def test_injected_rng_makes_runs_reproducible():
    rng = np.random.default_rng(9)
    pixels = rng.integers(0, 256, size=(40, 40, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    a = quantize(pixels, 6, rng=np.random.default_rng(42))
    b = quantize(pixels, 6, rng=np.random.default_rng(42))
    assert a == b


def test_orphaned_centroids_are_reseeded_from_samples():
    red, blue = (200, 0, 0), (0, 0, 200)
    pixels = _rgba([[*red, 255]] * 10 + [[*blue, 255]] * 10)
    a = quantize(pixels, 4, rng=np.random.default_rng(5))
    b = quantize(pixels, 4, rng=np.random.default_rng(5))
    assert len(a) == 4
    # black and white seeds attract no samples, so they must be redrawn
    assert all(c.rgb in (red, blue) for c in a)
    assert a == b
