"""Image sink implementations."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Union

import cv2
import numpy as np
import pandas as pd

from .buffers import EnhancementResult, PixelBuffer
from .interfaces import IImageSink


def _to_bgr(rgb: np.ndarray) -> np.ndarray:
    rgb = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    if rgb.shape[2] == 4:
        return cv2.cvtColor(rgb, cv2.COLOR_RGBA2BGRA)
    return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)


class DiskImageSink(IImageSink):
    """Write enhanced images and per-image metadata to disk."""

    def __init__(
        self,
        out_dir: Path,
        image_format: str = "png",
        jpg_quality: int = 95,
        write_original: bool = False,
    ) -> None:
        self._out = out_dir
        self._out.mkdir(parents=True, exist_ok=True)
        self._fmt = image_format.lower()
        self._jpg_quality = jpg_quality
        self._write_original = write_original
        self._rows: List[Dict[str, Union[float, str, bool]]] = []

    def _imwrite(self, path: Path, rgb: np.ndarray) -> None:
        bgr = _to_bgr(rgb)
        if self._fmt in ("jpg", "jpeg"):
            if bgr.shape[2] == 4:
                bgr = np.ascontiguousarray(bgr[..., :3])
            ok = cv2.imwrite(
                str(path),
                bgr,
                [int(cv2.IMWRITE_JPEG_QUALITY), self._jpg_quality],
            )
        else:
            ok = cv2.imwrite(str(path), bgr)
        if not ok:
            raise IOError(f"Failed to write image {path}")

    def write(
        self,
        name: str,
        original: PixelBuffer,
        result: EnhancementResult,
    ) -> None:
        enhanced_path = self._out / f"{name}_ENH.{self._fmt}"
        self._imwrite(enhanced_path, result.as_array())
        if self._write_original:
            self._imwrite(self._out / f"{name}_ORIG.{self._fmt}", original.as_array())
        self._rows.append(
            {
                "name": name,
                "width": float(result.buffer.width),
                "height": float(result.buffer.height),
                "workflow": result.workflow,
                "stages": "|".join(result.stages),
                "elapsed_s": float(result.elapsed_s),
                "fallback": bool(result.fallback),
            }
        )

    def close(self) -> None:
        if not self._rows:
            return
        df = pd.DataFrame(self._rows)
        df.sort_values(by=["name"], inplace=True)
        df.to_csv(self._out / "enhancement_metadata.csv", index=False)
