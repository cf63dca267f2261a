"""Command line entry point for the capture enhancer."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .builders import build_session
from .config import EnhancerConfig, ProcessingParameters, Workflow

_DEFAULTS = ProcessingParameters.defaults()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Create the CLI parser and return parsed arguments."""

    parser = argparse.ArgumentParser(description="Captured photo enhancement pipeline")
    parser.add_argument("input", type=Path)
    parser.add_argument("-o", "--out", type=Path, required=True)
    parser.add_argument(
        "--workflow",
        type=str,
        default=Workflow.CANONICAL.value,
        choices=[w.value for w in Workflow],
    )
    parser.add_argument("--fmt", type=str, default="png", choices=["png", "jpg"])
    parser.add_argument("--jpgq", type=int, default=95)
    parser.add_argument("--max-width", type=int, default=None)
    parser.add_argument("--orig-too", action="store_true")
    parser.add_argument("--strict", action="store_true")
    parser.add_argument("--log-level", type=str, default="INFO")

    sharpen_group = parser.add_argument_group("Sharpening", "Unsharp mask options")
    sharpen_group.add_argument("--radius", type=float, default=_DEFAULTS.unsharp_radius)
    sharpen_group.add_argument("--strength", type=float, default=_DEFAULTS.unsharp_strength)
    sharpen_group.add_argument("--threshold", type=float, default=_DEFAULTS.unsharp_threshold)

    tone_group = parser.add_argument_group("Tone", "Brightness, contrast and blend options")
    tone_group.add_argument("--brightness", type=float, default=_DEFAULTS.brightness_factor)
    tone_group.add_argument("--y-contrast", type=float, default=_DEFAULTS.y_contrast_factor)
    tone_group.add_argument("--rgb-contrast", type=float, default=_DEFAULTS.rgb_contrast_factor)
    tone_group.add_argument("--opacity", type=float, default=_DEFAULTS.blend_opacity)

    return parser.parse_args(argv)


def params_from_args(args: argparse.Namespace) -> ProcessingParameters:
    """Build validated :class:`ProcessingParameters` from CLI arguments."""

    return (
        ProcessingParameters.defaults()
        .with_unsharp(radius=args.radius, strength=args.strength, threshold=args.threshold)
        .with_brightness(args.brightness)
        .with_contrast(y_factor=args.y_contrast, rgb_factor=args.rgb_contrast)
        .with_blend(args.opacity)
    )


def config_from_args(args: argparse.Namespace) -> EnhancerConfig:
    """Convert CLI arguments into :class:`EnhancerConfig`."""

    return EnhancerConfig(
        input_path=args.input,
        output_dir=args.out,
        workflow=Workflow(args.workflow),
        params=params_from_args(args),
        max_width=args.max_width,
        image_format=args.fmt,
        jpg_quality=args.jpgq,
        write_original=bool(args.orig_too),
        fallback_to_original=not bool(args.strict),
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point used by ``python -m capture_enhancer`` and scripts."""

    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cfg = config_from_args(args)
    session = build_session(cfg)
    stats = session.run()
    print(f"Done. Stats: {stats}")


if __name__ == "__main__":  # pragma: no cover
    main()
