"""Drive captured frames through the enhancer and into a sink."""

from __future__ import annotations

import logging
import time
from typing import Dict, Optional

from .buffers import EnhancementResult, PixelBuffer
from .errors import EnhancementError
from .interfaces import IEnhancer, IImageSink, IImageSource

logger = logging.getLogger(__name__)


class CaptureSession:
    """Coordinate reading, enhancing and writing captured images.

    When ``fallback_to_original`` is set, an image the enhancer rejects is
    passed to the sink unprocessed and flagged as a fallback instead of
    aborting the session.
    """

    def __init__(
        self,
        source: IImageSource,
        enhancer: IEnhancer,
        sink: IImageSink,
        fallback_to_original: bool = True,
        max_images: Optional[int] = None,
    ) -> None:
        self._source = source
        self._enhancer = enhancer
        self._sink = sink
        self._fallback = fallback_to_original
        self._max_images = max_images

    def enhance_one(self, buffer: PixelBuffer) -> EnhancementResult:
        """Enhance a single buffer, applying the fallback policy."""

        try:
            return self._enhancer.enhance(buffer)
        except EnhancementError as exc:
            if not self._fallback:
                raise
            logger.warning("Enhancement failed (%s), returning original image", exc)
            return EnhancementResult(
                buffer=buffer,
                workflow="none",
                stages=[],
                elapsed_s=0.0,
                fallback=True,
            )

    def run(self) -> Dict[str, float]:
        info = self._source.info()
        read = 0
        enhanced = 0
        fallbacks = 0
        start = time.time()
        try:
            for name, buffer in self._source.images():
                if self._max_images is not None and read >= self._max_images:
                    break
                read += 1
                result = self.enhance_one(buffer)
                if result.fallback:
                    fallbacks += 1
                else:
                    enhanced += 1
                self._sink.write(name, buffer, result)
        finally:
            self._sink.close()
        elapsed = time.time() - start
        return {
            "images_available": float(info.get("image_count", 0.0)),
            "images_read": float(read),
            "images_enhanced": float(enhanced),
            "images_fallback": float(fallbacks),
            "elapsed_s": float(elapsed),
        }
