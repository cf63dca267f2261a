"""Capture enhancer package."""

from .buffers import EnhancementResult, PixelBuffer
from .config import EnhancerConfig, ProcessingParameters, Workflow
from .errors import EnhancementError, InvalidDimensionsError, InvalidParameterError
from .pipeline import EnhancementPipeline, LegacyEnhancementPipeline, build_enhancer
from .session import CaptureSession
from .cli import main

__all__ = [
    "PixelBuffer",
    "EnhancementResult",
    "ProcessingParameters",
    "EnhancerConfig",
    "Workflow",
    "EnhancementError",
    "InvalidDimensionsError",
    "InvalidParameterError",
    "EnhancementPipeline",
    "LegacyEnhancementPipeline",
    "build_enhancer",
    "CaptureSession",
    "main",
]
