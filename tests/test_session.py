from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

import numpy as np
import pytest

from capture_enhancer.buffers import EnhancementResult, PixelBuffer
from capture_enhancer.errors import InvalidParameterError
from capture_enhancer.session import CaptureSession


@dataclass
class FakeSource:
    items: List[Tuple[str, PixelBuffer]]

    def info(self) -> Dict[str, float]:
        return {"image_count": float(len(self.items))}

    def images(self) -> Iterator[Tuple[str, PixelBuffer]]:
        for item in self.items:
            yield item


class InvertingEnhancer:
    def enhance(self, buffer: PixelBuffer) -> EnhancementResult:
        inverted = 255 - buffer.as_array()
        return EnhancementResult(PixelBuffer.from_array(inverted), "invert", ["invert"])


class RejectingEnhancer:
    def enhance(self, buffer: PixelBuffer) -> EnhancementResult:
        raise InvalidParameterError("bad knob")


class RecordingSink:
    def __init__(self) -> None:
        self.records: List[Tuple[str, PixelBuffer, EnhancementResult]] = []
        self.closed = False

    def write(self, name: str, original: PixelBuffer, result: EnhancementResult) -> None:
        self.records.append((name, original, result))

    def close(self) -> None:
        self.closed = True


def _items(count: int) -> List[Tuple[str, PixelBuffer]]:
    return [
        (f"img{idx}", PixelBuffer.from_array(np.full((2, 2, 3), idx, dtype=np.uint8)))
        for idx in range(count)
    ]


def test_session_enhances_and_records_images() -> None:
    sink = RecordingSink()
    session = CaptureSession(FakeSource(_items(2)), InvertingEnhancer(), sink)
    stats = session.run()
    assert sink.closed
    assert [r[0] for r in sink.records] == ["img0", "img1"]
    np.testing.assert_array_equal(sink.records[1][2].as_array(), np.full((2, 2, 3), 254))
    assert stats["images_read"] == 2
    assert stats["images_enhanced"] == 2
    assert stats["images_fallback"] == 0
    assert stats["images_available"] == 2


def test_session_falls_back_to_original() -> None:
    sink = RecordingSink()
    session = CaptureSession(FakeSource(_items(1)), RejectingEnhancer(), sink)
    stats = session.run()
    name, original, result = sink.records[0]
    assert result.fallback
    assert result.buffer is original
    assert result.stages == []
    assert stats["images_fallback"] == 1
    assert stats["images_enhanced"] == 0


def test_strict_session_raises_and_still_closes_sink() -> None:
    sink = RecordingSink()
    session = CaptureSession(
        FakeSource(_items(1)), RejectingEnhancer(), sink, fallback_to_original=False
    )
    with pytest.raises(InvalidParameterError):
        session.run()
    assert sink.closed
    assert sink.records == []


def test_session_respects_max_images() -> None:
    sink = RecordingSink()
    session = CaptureSession(FakeSource(_items(3)), InvertingEnhancer(), sink, max_images=1)
    stats = session.run()
    assert len(sink.records) == 1
    assert stats["images_read"] == 1
