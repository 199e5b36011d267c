# floss_map/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str
ColourId = str

U8Image = NDArray[np.uint8]  # (H, W, 3) or (N, 3)
U8Rgba = NDArray[np.uint8]  # (H, W, 4)

# Collections

CollapseMapping = Dict[ColourId, ColourId]  # source id -> target id

# Value objects


@dataclass(frozen=True)
class ReferenceColor:
    """One named thread colour from the reference catalogue."""

    id: ColourId
    r: int
    g: int
    b: int
    name: str

    @property
    def rgb(self) -> RGBTuple:
        return (self.r, self.g, self.b)

    @property
    def hex(self) -> HexStr:
        return rgb_to_hex(self.rgb)


@dataclass(frozen=True)
class HistogramEntry:
    """Usage count of one reference colour; rgb copied from the store."""

    id: ColourId
    r: int
    g: int
    b: int
    count: int

    @property
    def rgb(self) -> RGBTuple:
        return (self.r, self.g, self.b)

    @classmethod
    def from_reference(cls, colour: ReferenceColor, count: int) -> "HistogramEntry":
        return cls(colour.id, colour.r, colour.g, colour.b, int(count))


@dataclass
class Centroid:
    """Running mean colour of one cluster. Mutated while quantizing."""

    r: float
    g: float
    b: float

    @property
    def rgb(self) -> RGBTuple:
        return (int(round(self.r)), int(round(self.g)), int(round(self.b)))


# Small helpers


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb' or '#rrggbb' (case-insensitive) into an RGB tuple."""
    s = hex_str.strip().lower()
    if not s.startswith("#"):
        s = "#" + s
    if len(s) == 4:
        r, g, b = s[1], s[2], s[3]
        s = f"#{r}{r}{g}{g}{b}{b}"
    if len(s) != 7:
        raise ValueError(f"hex must be '#rrggbb' or '#rgb', got {hex_str!r}")
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def squared_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Squared Euclidean distance in RGB. Only relative order matters."""
    dr = a[0] - b[0]
    dg = a[1] - b[1]
    db = a[2] - b[2]
    return dr * dr + dg * dg + db * db


def luma(r: float, g: float, b: float) -> float:
    """Perceptual luma (Rec. 601 weights)."""
    return 0.299 * r + 0.587 * g + 0.114 * b


def assert_u8_image_rgba(image: np.ndarray) -> U8Rgba:
    """Validate a uint8 (H,W,4) image and return it typed as U8Rgba."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] != 4:
        raise TypeError("expected uint8 (H,W,4) image")
    return image  # type: ignore[return-value]


def rgba_from_buffer(data: Union[bytes, bytearray, Sequence[int], np.ndarray], width: int, height: int) -> U8Rgba:
    """
    View a flat row-major RGBA buffer (4 bytes per pixel) as a (H,W,4) array.
    Raises ValueError when the length does not match width x height.
    """
    if width < 0 or height < 0:
        raise ValueError("width and height must be non-negative")
    if isinstance(data, (bytes, bytearray, memoryview)):
        flat = np.frombuffer(bytes(data), dtype=np.uint8)
    else:
        flat = np.asarray(data, dtype=np.uint8).reshape(-1)
    expected = int(width) * int(height) * 4
    if flat.size != expected:
        raise ValueError(
            f"RGBA buffer has {flat.size} bytes, expected {expected} for {width}x{height}"
        )
    return flat.reshape(int(height), int(width), 4)


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "ColourId",
    "U8Image",
    "U8Rgba",
    "CollapseMapping",
    # value objects
    "ReferenceColor",
    "HistogramEntry",
    "Centroid",
    # helpers
    "rgb_to_hex",
    "hex_to_rgb",
    "squared_distance",
    "luma",
    "assert_u8_image_rgba",
    "rgba_from_buffer",
]
