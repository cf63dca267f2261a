"""Pixel buffer and result containers exchanged with the enhancement core."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidDimensionsError

SUPPORTED_CHANNELS = (3, 4)


@dataclass(frozen=True)
class PixelBuffer:
    """Row-major RGB or RGBA samples with an explicit geometry.

    ``data`` is a flat array of ``width * height * channels`` samples in the
    8-bit range. Buffers are treated as immutable: operators always allocate
    a fresh array for their output.
    """

    width: int
    height: int
    channels: int
    data: np.ndarray

    def validate(self) -> None:
        """Raise :class:`InvalidDimensionsError` when the geometry is inconsistent."""

        if self.width <= 0 or self.height <= 0:
            raise InvalidDimensionsError(
                f"Buffer dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.channels not in SUPPORTED_CHANNELS:
            raise InvalidDimensionsError(
                f"Buffer must have 3 or 4 channels, got {self.channels}"
            )
        expected = self.width * self.height * self.channels
        actual = int(np.asarray(self.data).size)
        if actual != expected:
            raise InvalidDimensionsError(
                f"Buffer holds {actual} samples, expected {expected} "
                f"({self.width}x{self.height}x{self.channels})"
            )

    @property
    def has_alpha(self) -> bool:
        return self.channels == 4

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self.height, self.width, self.channels

    def as_array(self) -> np.ndarray:
        """Return the samples reshaped to ``(height, width, channels)``."""

        self.validate()
        return np.asarray(self.data).reshape(self.shape)

    @classmethod
    def from_array(cls, image: np.ndarray) -> "PixelBuffer":
        """Wrap an ``(H, W, C)`` array, copying it into a flat buffer."""

        image = np.asarray(image)
        if image.ndim != 3:
            raise InvalidDimensionsError(
                f"Expected an (H, W, C) array, got shape {image.shape}"
            )
        height, width, channels = image.shape
        buffer = cls(width, height, channels, image.reshape(-1).copy())
        buffer.validate()
        return buffer

    @classmethod
    def from_samples(
        cls, width: int, height: int, channels: int, samples: Sequence[float]
    ) -> "PixelBuffer":
        """Build a buffer from a flat sequence of samples."""

        buffer = cls(width, height, channels, np.asarray(samples, dtype=np.float64))
        buffer.validate()
        return buffer


def split_planes(image: np.ndarray) -> List[np.ndarray]:
    """Split the colour channels of an ``(H, W, C)`` image into float64 planes."""

    return [image[..., idx].astype(np.float64) for idx in range(3)]


def merge_planes(
    planes: Sequence[np.ndarray], alpha: Optional[np.ndarray] = None
) -> np.ndarray:
    """Stack three planes (and an optional alpha plane) into an image."""

    stacked = list(planes)
    if alpha is not None:
        stacked.append(alpha.astype(np.float64))
    return np.stack(stacked, axis=-1).astype(np.float64)


def alpha_plane(image: np.ndarray) -> Optional[np.ndarray]:
    """Return the alpha plane of ``image`` or ``None`` for RGB input."""

    if image.shape[-1] == 4:
        return image[..., 3].astype(np.float64)
    return None


@dataclass
class EnhancementResult:
    """Output of a single enhancement invocation."""

    buffer: PixelBuffer
    workflow: str
    stages: List[str] = field(default_factory=list)
    elapsed_s: float = 0.0
    fallback: bool = False

    def as_array(self) -> np.ndarray:
        return self.buffer.as_array()
