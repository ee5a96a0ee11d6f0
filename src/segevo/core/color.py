"""Colour space helpers.

``rgb_to_hsb`` follows the HSB convention of ``java.awt.Color.RGBtoHSB``:
hue, saturation and brightness all lie in ``[0, 1]`` and hue is ``0`` for
achromatic colours.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def rgb_to_hsb(rgb: np.ndarray) -> np.ndarray:
    """Convert an ``(..., 3)`` array of 0-255 RGB values to HSB floats."""
    rgb = np.asarray(rgb, dtype=np.float64)
    if rgb.shape[-1] != 3:
        raise ValueError(f"Expected trailing dimension of size 3, got shape {rgb.shape}.")
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    cmax = rgb.max(axis=-1)
    cmin = rgb.min(axis=-1)
    delta = cmax - cmin

    brightness = cmax / 255.0
    saturation = np.divide(delta, cmax, out=np.zeros_like(cmax), where=cmax > 0)

    # Per-channel distance from the max, scaled by the chroma
    safe_delta = np.where(delta > 0, delta, 1.0)
    redc = (cmax - r) / safe_delta
    greenc = (cmax - g) / safe_delta
    bluec = (cmax - b) / safe_delta

    hue = np.where(
        r == cmax,
        bluec - greenc,
        np.where(g == cmax, 2.0 + redc - bluec, 4.0 + greenc - redc),
    )
    hue = hue / 6.0
    hue = np.where(hue < 0, hue + 1.0, hue)
    hue = np.where(saturation > 0, hue, 0.0)

    return np.stack([hue, saturation, brightness], axis=-1)


def euclidean_distance(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """Return the L2 distance between two equally long channel vectors.

    Works for integer (RGB) as well as real-valued (HSB) vectors and for any
    channel count >= 1.
    """
    arr_a = np.asarray(a, dtype=np.float64).ravel()
    arr_b = np.asarray(b, dtype=np.float64).ravel()
    if arr_a.size == 0:
        raise ValueError("Vectors must contain at least one channel.")
    if arr_a.shape != arr_b.shape:
        raise ValueError(f"Vector lengths differ: {arr_a.size} vs {arr_b.size}.")
    return float(np.sqrt(np.sum((arr_a - arr_b) ** 2)))
