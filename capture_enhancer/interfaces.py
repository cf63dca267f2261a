"""Core protocol interfaces used across the package."""

from __future__ import annotations

from typing import Dict, Iterator, Protocol, Tuple

from .buffers import EnhancementResult, PixelBuffer


class IImageSource(Protocol):
    """Supplies raw captured frames."""

    def info(self) -> Dict[str, float]:
        """Return metadata about the source such as the number of images."""

    def images(self) -> Iterator[Tuple[str, PixelBuffer]]:
        """Yield tuples of (image name, raw RGB(A) pixel buffer)."""


class IEnhancer(Protocol):
    """Turns one raw pixel buffer into an enhanced one."""

    def enhance(self, buffer: PixelBuffer) -> EnhancementResult:
        """Return the enhanced image and its diagnostics."""


class IImageSink(Protocol):
    """Receives processed images for preview, download or storage."""

    def write(
        self,
        name: str,
        original: PixelBuffer,
        result: EnhancementResult,
    ) -> None:
        """Persist the provided image data."""

    def close(self) -> None:
        """Finalize the sink, flushing any buffered data."""
