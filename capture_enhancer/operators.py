"""Pixel operators composed by the enhancement pipelines.

Every operator takes a float plane ``(H, W)`` or image ``(H, W, C)`` and
returns a freshly allocated float64 array of the same shape. Only the colour
channels are transformed; a fourth (alpha) channel is copied through.
"""

from __future__ import annotations

import cv2
import numpy as np

from .errors import InvalidDimensionsError, InvalidParameterError


def _as_float(signal: np.ndarray) -> np.ndarray:
    return np.asarray(signal, dtype=np.float64)


def _split_alpha(image: np.ndarray):
    if image.ndim == 3 and image.shape[-1] == 4:
        return np.ascontiguousarray(image[..., :3]), image[..., 3]
    return np.ascontiguousarray(image), None


def _restore_alpha(colour: np.ndarray, alpha) -> np.ndarray:
    if alpha is None:
        return colour
    return np.concatenate([colour, alpha[..., None]], axis=-1)


def channel_mean(plane: np.ndarray) -> float:
    """Arithmetic mean over every sample of ``plane``."""

    plane = _as_float(plane)
    if plane.size == 0:
        raise InvalidDimensionsError("Cannot compute statistics of an empty channel")
    return float(plane.mean())


def apply_contrast(plane: np.ndarray, factor: float) -> np.ndarray:
    """Rescale samples around the channel mean and clip to [0, 255]."""

    if factor < 0:
        raise InvalidParameterError(f"contrast factor must be >= 0, got {factor}")
    plane = _as_float(plane)
    mean = channel_mean(plane)
    return np.clip(mean + factor * (plane - mean), 0.0, 255.0)


def apply_rgb_contrast(image: np.ndarray, factor: float) -> np.ndarray:
    """Apply :func:`apply_contrast` to R, G and B independently."""

    colour, alpha = _split_alpha(_as_float(image))
    channels = [apply_contrast(colour[..., idx], factor) for idx in range(3)]
    return _restore_alpha(np.stack(channels, axis=-1), alpha)


def gaussian_blur(signal: np.ndarray, radius: float) -> np.ndarray:
    """Gaussian smoothing with ``sigma = radius`` and replicated borders.

    A radius of zero or less returns an unmodified copy.
    """

    signal = _as_float(signal)
    if radius <= 0:
        return signal.copy()
    if signal.size == 0:
        raise InvalidDimensionsError("Cannot blur an empty signal")
    colour, alpha = _split_alpha(signal)
    blurred = cv2.GaussianBlur(
        colour, (0, 0), sigmaX=float(radius), borderType=cv2.BORDER_REPLICATE
    )
    return _restore_alpha(blurred.astype(np.float64), alpha)


def unsharp_mask(
    signal: np.ndarray,
    radius: float,
    amount: float,
    threshold: float = 0.0,
) -> np.ndarray:
    """Sharpen ``signal`` by amplifying its difference from a blurred copy.

    Samples whose mask magnitude falls below ``threshold`` (8-bit scale) are
    left untouched.
    """

    if radius < 0 or amount < 0 or threshold < 0:
        raise InvalidParameterError(
            "unsharp radius, amount and threshold must be >= 0, "
            f"got {radius}, {amount}, {threshold}"
        )
    original = _as_float(signal)
    colour, alpha = _split_alpha(original)
    mask = colour - gaussian_blur(colour, radius)
    sharpened = np.clip(colour + amount * mask, 0.0, 255.0)
    result = np.where(np.abs(mask) < threshold, colour, sharpened)
    return _restore_alpha(result, alpha)


def scale_brightness(image: np.ndarray, factor: float) -> np.ndarray:
    """Ratio-preserving brightness scaling capped at white.

    Each pixel is scaled by ``min(255, m * factor) / m`` where ``m`` is its
    largest colour sample, so hue is kept while nothing clips independently.
    Black pixels stay black.
    """

    if factor <= 0:
        raise InvalidParameterError(f"brightness factor must be > 0, got {factor}")
    colour, alpha = _split_alpha(_as_float(image))
    peak = colour.max(axis=-1, keepdims=True)
    lit = peak > 0
    safe_peak = np.where(lit, peak, 1.0)
    scale = np.where(lit, np.minimum(255.0, safe_peak * factor) / safe_peak, 0.0)
    return _restore_alpha(np.minimum(colour * scale, 255.0), alpha)


def blend(base: np.ndarray, overlay: np.ndarray, opacity: float) -> np.ndarray:
    """Mix ``base`` towards the average of ``base`` and ``overlay``.

    ``opacity == 1`` yields ``(base + overlay) / 2``, not ``overlay``.
    """

    if not 0.0 <= opacity <= 1.0:
        raise InvalidParameterError(f"opacity must be within [0, 1], got {opacity}")
    base = _as_float(base)
    overlay = _as_float(overlay)
    if base.shape[:2] != overlay.shape[:2]:
        raise InvalidDimensionsError(
            f"Cannot blend images of shapes {base.shape} and {overlay.shape}"
        )
    base_colour, alpha = _split_alpha(base)
    overlay_colour, _ = _split_alpha(overlay)
    mixed = base_colour * (1.0 - opacity) + ((base_colour + overlay_colour) / 2.0) * opacity
    return _restore_alpha(mixed, alpha)


def finalize(image: np.ndarray) -> np.ndarray:
    """Round and clip to uint8; alpha, when present, becomes fully opaque."""

    colour, alpha = _split_alpha(_as_float(image))
    out = np.clip(np.rint(colour), 0, 255).astype(np.uint8)
    if alpha is not None:
        opaque = np.full(alpha.shape + (1,), 255, dtype=np.uint8)
        out = np.concatenate([out, opaque], axis=-1)
    return out
