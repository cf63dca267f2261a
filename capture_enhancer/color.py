"""RGB <-> YCbCr colour-space conversion.

The functions work on Python scalars and on numpy arrays alike, broadcasting
elementwise. Outputs are never clamped so chained stages keep full precision;
callers clip when a displayable pixel is required.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from .buffers import merge_planes, split_planes

_CHROMA_OFFSET = 128.0


def rgb_to_ycbcr(r, g, b) -> Tuple:
    """Convert RGB samples to full-range YCbCr (ITU-R BT.601)."""

    y = 0.299 * r + 0.587 * g + 0.114 * b
    cb = -0.168736 * r - 0.331264 * g + 0.5 * b + _CHROMA_OFFSET
    cr = 0.5 * r - 0.418688 * g - 0.081312 * b + _CHROMA_OFFSET
    return y, cb, cr


def ycbcr_to_rgb(y, cb, cr) -> Tuple:
    """Convert full-range YCbCr samples back to RGB."""

    cb_shift = cb - _CHROMA_OFFSET
    cr_shift = cr - _CHROMA_OFFSET
    r = y + 1.402 * cr_shift
    g = y - 0.344136 * cb_shift - 0.714136 * cr_shift
    b = y + 1.772 * cb_shift
    return r, g, b


def image_to_ycbcr(image: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return the Y, Cb and Cr planes of an RGB(A) image."""

    r, g, b = split_planes(image)
    return rgb_to_ycbcr(r, g, b)


def ycbcr_to_image(
    y: np.ndarray, cb: np.ndarray, cr: np.ndarray, *, clip: bool = True
) -> np.ndarray:
    """Merge Y, Cb and Cr planes into an ``(H, W, 3)`` float image."""

    image = merge_planes(ycbcr_to_rgb(y, cb, cr))
    if clip:
        np.clip(image, 0.0, 255.0, out=image)
    return image
