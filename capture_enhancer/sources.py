"""Capture source implementations."""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import cv2
import numpy as np

from .buffers import PixelBuffer
from .interfaces import IImageSource

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff", ".webp"}


def downscaled_size(width: int, height: int, max_width: Optional[int]) -> Tuple[int, int]:
    """Return ``(width, height)`` fitted to ``max_width``, keeping aspect ratio.

    Images already narrower than ``max_width`` are never upscaled.
    """

    if max_width is None or width <= max_width:
        return width, height
    aspect = height / width
    return max_width, max(1, int(round(max_width * aspect)))


def _to_rgb(frame: np.ndarray) -> np.ndarray:
    if frame.ndim == 2:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2RGB)
    if frame.shape[2] == 4:
        return cv2.cvtColor(frame, cv2.COLOR_BGRA2RGBA)
    return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)


class ImageFileSource(IImageSource):
    """Read captured frames from an image file or a directory of images."""

    def __init__(self, path: Path, max_width: Optional[int] = None) -> None:
        if not path.exists():
            raise FileNotFoundError(f"Input not found: {path}")
        if max_width is not None and max_width <= 0:
            raise ValueError("max_width must be > 0")
        self._path = path
        self._max_width = max_width
        self._files = self._discover(path)
        self._names = self._unique_names(self._files)

    @staticmethod
    def _discover(path: Path) -> List[Path]:
        if path.is_file():
            return [path]
        files = [
            p
            for p in sorted(path.iterdir())
            if p.is_file() and p.suffix.lower() in SUPPORTED_IMAGE_SUFFIXES
        ]
        if not files:
            raise ValueError(f"No supported images found in {path}")
        return files

    @staticmethod
    def _unique_names(files: List[Path]) -> List[str]:
        """Name images by stem, keeping the suffix when stems collide."""

        stems = Counter(p.stem for p in files)
        return [
            f"{p.stem}_{p.suffix.lstrip('.')}" if stems[p.stem] > 1 else p.stem
            for p in files
        ]

    def info(self) -> Dict[str, float]:
        return {
            "image_count": float(len(self._files)),
            "max_width": float(self._max_width or 0),
        }

    def _prepare(self, frame: np.ndarray) -> np.ndarray:
        if frame.dtype == np.uint16:
            frame = (frame / 257.0).round().astype(np.uint8)
        rgb = _to_rgb(frame)
        height, width = rgb.shape[:2]
        new_w, new_h = downscaled_size(width, height, self._max_width)
        if (new_w, new_h) != (width, height):
            rgb = cv2.resize(rgb, (new_w, new_h), interpolation=cv2.INTER_AREA)
        return rgb

    def images(self) -> Iterator[Tuple[str, PixelBuffer]]:
        read = 0
        for name, image_path in zip(self._names, self._files):
            frame = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)
            if frame is None:
                logger.warning("Skipping unreadable image %s", image_path)
                continue
            read += 1
            yield name, PixelBuffer.from_array(self._prepare(frame))
        if not read:
            raise ValueError(f"No readable images found in {self._path}")
