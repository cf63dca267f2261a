"""Factory helpers for assembling a capture session from configuration."""

from __future__ import annotations

from .config import EnhancerConfig
from .pipeline import EnhancementPipeline, build_enhancer
from .session import CaptureSession
from .sinks import DiskImageSink
from .sources import ImageFileSource


def build_pipeline(cfg: EnhancerConfig) -> EnhancementPipeline:
    """Instantiate the enhancer selected by ``cfg.workflow``."""

    return build_enhancer(cfg.workflow, cfg.params)


def build_session(cfg: EnhancerConfig) -> CaptureSession:
    """Assemble the full :class:`CaptureSession`."""

    enhancer = build_pipeline(cfg)
    source = ImageFileSource(cfg.input_path, max_width=cfg.max_width)
    sink = DiskImageSink(
        cfg.output_dir,
        cfg.image_format,
        cfg.jpg_quality,
        cfg.write_original,
    )
    return CaptureSession(
        source,
        enhancer,
        sink,
        fallback_to_original=cfg.fallback_to_original,
    )
