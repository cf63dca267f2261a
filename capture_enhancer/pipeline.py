"""Enhancement orchestration."""

from __future__ import annotations

import logging
import time
from typing import List, Optional, Union

import numpy as np

from .buffers import EnhancementResult, PixelBuffer, alpha_plane, merge_planes, split_planes
from .color import image_to_ycbcr, ycbcr_to_image
from .config import ProcessingParameters, Workflow
from .interfaces import IEnhancer
from .operators import (
    apply_contrast,
    apply_rgb_contrast,
    blend,
    finalize,
    scale_brightness,
    unsharp_mask,
)

logger = logging.getLogger(__name__)


class _StageLog:
    """Ordered record of the stages that ran during one invocation."""

    def __init__(self, workflow: Workflow) -> None:
        self._workflow = workflow
        self.names: List[str] = []

    def mark(self, name: str) -> None:
        logger.debug("[%s] stage %d: %s", self._workflow.value, len(self.names) + 1, name)
        self.names.append(name)


class EnhancementPipeline(IEnhancer):
    """Canonical single-pass enhancement.

    Sharpens luma only, scales brightness without shifting hue, flattens luma
    contrast to tame sharpening halos and finally punches up RGB contrast.
    The output keeps the input channel count: RGB stays RGB, RGBA comes back
    with alpha forced to 255.
    """

    workflow = Workflow.CANONICAL

    def __init__(self, params: Optional[ProcessingParameters] = None) -> None:
        self._params = params or ProcessingParameters.defaults()
        self._params.validate()

    @property
    def params(self) -> ProcessingParameters:
        return self._params

    def enhance(self, buffer: PixelBuffer) -> EnhancementResult:
        buffer.validate()
        start = time.time()
        image = buffer.as_array().astype(np.float64)
        stages = _StageLog(self.workflow)
        output = self._run(image, stages)
        elapsed = time.time() - start
        logger.info(
            "Enhanced %dx%d image (%s) in %.3fs",
            buffer.width,
            buffer.height,
            self.workflow.value,
            elapsed,
        )
        return EnhancementResult(
            buffer=PixelBuffer.from_array(output),
            workflow=self.workflow.value,
            stages=stages.names,
            elapsed_s=elapsed,
        )

    def _run(self, image: np.ndarray, stages: _StageLog) -> np.ndarray:
        p = self._params
        alpha = alpha_plane(image)

        y, cb, cr = image_to_ycbcr(image)
        stages.mark("decompose")

        y = unsharp_mask(y, p.unsharp_radius, p.unsharp_strength, p.unsharp_threshold)
        stages.mark("sharpen_luma")

        rgb = ycbcr_to_image(y, cb, cr)
        stages.mark("recombine_chroma")

        rgb = scale_brightness(rgb, p.brightness_factor)
        stages.mark("scale_brightness")

        y, cb, cr = image_to_ycbcr(rgb)
        stages.mark("rederive_ycbcr")

        y = apply_contrast(y, p.y_contrast_factor)
        stages.mark("contrast_luma")

        rgb = ycbcr_to_image(y, cb, cr)
        stages.mark("recombine_contrast")

        rgb = apply_rgb_contrast(rgb, p.rgb_contrast_factor)
        stages.mark("contrast_rgb")

        if alpha is not None:
            rgb = merge_planes(split_planes(rgb), alpha)
        out = finalize(rgb)
        stages.mark("finalize")
        return out


class LegacyEnhancementPipeline(EnhancementPipeline):
    """Earlier two-variant workflow kept for comparison.

    Sharpens the full RGB image, restores the original chroma, derives a
    contrast-shaped variant and blends both. No brightness scaling is applied.
    """

    workflow = Workflow.LEGACY

    def _run(self, image: np.ndarray, stages: _StageLog) -> np.ndarray:
        p = self._params
        alpha = alpha_plane(image)
        colour = merge_planes(split_planes(image))

        sharpened = unsharp_mask(
            colour, p.unsharp_radius, p.unsharp_percent / 100.0, p.unsharp_threshold
        )
        stages.mark("sharpen_rgb")

        _, cb, cr = image_to_ycbcr(colour)
        sharp_y, _, _ = image_to_ycbcr(sharpened)
        restored = ycbcr_to_image(sharp_y, cb, cr)
        stages.mark("restore_chroma")

        y, cb2, cr2 = image_to_ycbcr(restored)
        shaped = ycbcr_to_image(apply_contrast(y, p.y_contrast_factor), cb2, cr2)
        shaped = apply_rgb_contrast(shaped, p.rgb_contrast_factor)
        stages.mark("contrast_variant")

        mixed = blend(restored, shaped, p.blend_opacity)
        stages.mark("blend_variants")

        if alpha is not None:
            mixed = merge_planes(split_planes(mixed), alpha)
        out = finalize(mixed)
        stages.mark("finalize")
        return out


def build_enhancer(
    workflow: Union[Workflow, str] = Workflow.CANONICAL,
    params: Optional[ProcessingParameters] = None,
) -> EnhancementPipeline:
    """Create the enhancer for ``workflow``."""

    if Workflow(workflow) is Workflow.LEGACY:
        return LegacyEnhancementPipeline(params)
    return EnhancementPipeline(params)
