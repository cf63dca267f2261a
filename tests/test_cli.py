from pathlib import Path

import cv2
import numpy as np
import pandas as pd
import pytest

from capture_enhancer.cli import config_from_args, main, parse_args
from capture_enhancer.config import ProcessingParameters, Workflow
from capture_enhancer.errors import InvalidParameterError


def test_config_from_args_defaults(tmp_path: Path) -> None:
    args = parse_args([str(tmp_path / "in.png"), "-o", str(tmp_path / "out")])
    cfg = config_from_args(args)
    assert cfg.workflow is Workflow.CANONICAL
    assert cfg.params == ProcessingParameters.defaults()
    assert cfg.fallback_to_original
    assert not cfg.write_original


def test_config_from_args_maps_every_knob(tmp_path: Path) -> None:
    args = parse_args(
        [
            str(tmp_path / "in"),
            "-o",
            str(tmp_path / "out"),
            "--workflow",
            "legacy",
            "--radius",
            "3",
            "--strength",
            "0.5",
            "--threshold",
            "4",
            "--brightness",
            "1.2",
            "--y-contrast",
            "0.6",
            "--rgb-contrast",
            "1.5",
            "--opacity",
            "0.3",
            "--fmt",
            "jpg",
            "--jpgq",
            "70",
            "--max-width",
            "800",
            "--orig-too",
            "--strict",
        ]
    )
    cfg = config_from_args(args)
    assert cfg.workflow is Workflow.LEGACY
    assert cfg.params == ProcessingParameters(3.0, 0.5, 4.0, 1.2, 0.6, 1.5, 0.3)
    assert cfg.image_format == "jpg"
    assert cfg.jpg_quality == 70
    assert cfg.max_width == 800
    assert cfg.write_original
    assert not cfg.fallback_to_original


def test_invalid_cli_parameters_are_rejected(tmp_path: Path) -> None:
    args = parse_args([str(tmp_path), "-o", str(tmp_path), "--brightness", "0"])
    with pytest.raises(InvalidParameterError):
        config_from_args(args)


def test_main_enhances_directory(tmp_path: Path, capsys) -> None:
    src = tmp_path / "captures"
    src.mkdir()
    rng = np.random.default_rng(5)
    cv2.imwrite(str(src / "frame.png"), rng.integers(0, 256, size=(6, 9, 3), dtype=np.uint8))
    out = tmp_path / "out"

    main([str(src), "-o", str(out), "--log-level", "WARNING"])

    enhanced = cv2.imread(str(out / "frame_ENH.png"))
    assert enhanced.shape == (6, 9, 3)
    metadata = pd.read_csv(out / "enhancement_metadata.csv")
    assert metadata.loc[0, "workflow"] == "canonical"
    assert "Done. Stats" in capsys.readouterr().out


def test_main_keeps_images_with_the_same_stem_apart(tmp_path: Path) -> None:
    src = tmp_path / "captures"
    src.mkdir()
    image = np.full((4, 4, 3), 120, dtype=np.uint8)
    cv2.imwrite(str(src / "shot.png"), image)
    cv2.imwrite(str(src / "shot.jpg"), image)
    out = tmp_path / "out"

    main([str(src), "-o", str(out), "--log-level", "WARNING"])

    assert (out / "shot_png_ENH.png").exists()
    assert (out / "shot_jpg_ENH.png").exists()
    metadata = pd.read_csv(out / "enhancement_metadata.csv")
    assert sorted(metadata["name"]) == ["shot_jpg", "shot_png"]
