"""Configuration models for the capture enhancement pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import InvalidParameterError


class Workflow(str, Enum):
    """Supported enhancement workflows."""

    CANONICAL = "canonical"
    LEGACY = "legacy"  # unsharp on RGB, averaged variants


@dataclass(frozen=True)
class ProcessingParameters:
    """Immutable set of knobs consumed by one enhancement invocation."""

    # Unsharp mask
    unsharp_radius: float = 2.0
    unsharp_strength: float = 1.0
    unsharp_threshold: float = 0.0

    # Brightness
    brightness_factor: float = 1.0

    # Contrast
    y_contrast_factor: float = 0.4
    rgb_contrast_factor: float = 2.0

    # Blend (legacy workflow only)
    blend_opacity: float = 1.0

    @classmethod
    def defaults(cls) -> "ProcessingParameters":
        return cls()

    @property
    def unsharp_percent(self) -> float:
        """Unsharp strength expressed as a percentage."""

        return self.unsharp_strength * 100.0

    def validate(self) -> None:
        """Raise :class:`InvalidParameterError` for out-of-range values."""

        for name in (
            "unsharp_radius",
            "unsharp_strength",
            "unsharp_threshold",
            "brightness_factor",
            "y_contrast_factor",
            "rgb_contrast_factor",
            "blend_opacity",
        ):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InvalidParameterError(f"{name} must be finite, got {value}")
            if value < 0:
                raise InvalidParameterError(f"{name} must be >= 0, got {value}")
        if self.brightness_factor <= 0:
            raise InvalidParameterError(
                f"brightness_factor must be > 0, got {self.brightness_factor}"
            )
        if self.blend_opacity > 1:
            raise InvalidParameterError(
                f"blend_opacity must be within [0, 1], got {self.blend_opacity}"
            )

    def with_unsharp(
        self,
        *,
        radius: Optional[float] = None,
        strength: Optional[float] = None,
        threshold: Optional[float] = None,
    ) -> "ProcessingParameters":
        """Return a copy with updated unsharp-mask settings."""

        return self._updated(
            unsharp_radius=self.unsharp_radius if radius is None else float(radius),
            unsharp_strength=self.unsharp_strength if strength is None else float(strength),
            unsharp_threshold=self.unsharp_threshold if threshold is None else float(threshold),
        )

    def with_brightness(self, factor: float) -> "ProcessingParameters":
        """Return a copy with a new brightness factor."""

        return self._updated(brightness_factor=float(factor))

    def with_contrast(
        self, *, y_factor: Optional[float] = None, rgb_factor: Optional[float] = None
    ) -> "ProcessingParameters":
        """Return a copy with updated luma and/or RGB contrast factors."""

        return self._updated(
            y_contrast_factor=self.y_contrast_factor if y_factor is None else float(y_factor),
            rgb_contrast_factor=self.rgb_contrast_factor if rgb_factor is None else float(rgb_factor),
        )

    def with_blend(self, opacity: float) -> "ProcessingParameters":
        """Return a copy with a new blend opacity."""

        return self._updated(blend_opacity=float(opacity))

    def _updated(self, **changes: float) -> "ProcessingParameters":
        updated = replace(self, **changes)
        updated.validate()
        return updated


@dataclass(frozen=True)
class EnhancerConfig:
    """Immutable container with run-level options."""

    # IO
    input_path: Path
    output_dir: Path

    # Processing
    workflow: Workflow = Workflow.CANONICAL
    params: ProcessingParameters = field(default_factory=ProcessingParameters)

    # Capture
    max_width: Optional[int] = None

    # Export
    image_format: str = "png"
    jpg_quality: int = 95
    write_original: bool = False

    # Failure policy
    fallback_to_original: bool = True
