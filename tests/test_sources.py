from pathlib import Path

import cv2
import numpy as np
import pytest

from capture_enhancer.sources import ImageFileSource, downscaled_size


def _write_bgr(path: Path, width: int = 8, height: int = 4) -> None:
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[..., 0] = 255  # blue in BGR order
    assert cv2.imwrite(str(path), image)


def test_downscaled_size_keeps_aspect_ratio() -> None:
    assert downscaled_size(1280, 720, 800) == (800, 450)
    assert downscaled_size(640, 480, 800) == (640, 480)
    assert downscaled_size(640, 480, None) == (640, 480)


def test_single_file_is_converted_to_rgb(tmp_path) -> None:
    path = tmp_path / "capture.png"
    _write_bgr(path)
    source = ImageFileSource(path)
    assert source.info()["image_count"] == 1
    items = list(source.images())
    assert len(items) == 1
    name, buffer = items[0]
    assert name == "capture"
    assert (buffer.width, buffer.height, buffer.channels) == (8, 4, 3)
    np.testing.assert_array_equal(buffer.as_array()[0, 0], [0, 0, 255])


def test_directory_source_downscales_and_skips_unreadable(tmp_path) -> None:
    _write_bgr(tmp_path / "a.png", width=40, height=20)
    _write_bgr(tmp_path / "b.png", width=6, height=6)
    (tmp_path / "broken.png").write_bytes(b"fake")
    (tmp_path / "notes.txt").write_text("ignored")

    source = ImageFileSource(tmp_path, max_width=10)
    assert source.info()["image_count"] == 3
    items = dict(source.images())
    assert sorted(items) == ["a", "b"]
    assert (items["a"].width, items["a"].height) == (10, 5)
    assert (items["b"].width, items["b"].height) == (6, 6)


def test_source_missing_path(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        ImageFileSource(tmp_path / "missing.png")


def test_source_empty_directory(tmp_path) -> None:
    with pytest.raises(ValueError):
        ImageFileSource(tmp_path)


def test_source_rejects_invalid_max_width(tmp_path) -> None:
    path = tmp_path / "capture.png"
    _write_bgr(path)
    with pytest.raises(ValueError):
        ImageFileSource(path, max_width=0)


def test_directory_with_only_unreadable_images_raises(tmp_path) -> None:
    (tmp_path / "broken.png").write_bytes(b"fake")
    source = ImageFileSource(tmp_path)
    with pytest.raises(ValueError):
        list(source.images())


def test_colliding_stems_keep_their_suffix(tmp_path) -> None:
    _write_bgr(tmp_path / "shot.png")
    _write_bgr(tmp_path / "shot.jpg")
    _write_bgr(tmp_path / "other.png")
    names = [name for name, _ in ImageFileSource(tmp_path).images()]
    assert names == ["other", "shot_jpg", "shot_png"]
