from __future__ import annotations

from collections import namedtuple
from typing import Any

import numpy as np
import pytest


_Sizes = namedtuple(
    "_Sizes",
    "raw_height raw_width height width top_margin left_margin iheight iwidth pixel_aspect flip",
)


class FakeRaw:
    """Stand-in for ``rawpy.RawPy`` with an RGGB sensor."""

    def __init__(self, visible: np.ndarray, rgb: np.ndarray | None = None) -> None:
        h, w = visible.shape
        self.raw_image_visible = visible
        self.raw_pattern = np.array([[0, 1], [3, 2]], dtype=np.uint8)
        self.color_desc = b"RGBG"
        self.num_colors = 3
        self.white_level = 4095
        self.black_level_per_channel = [256, 258, 256, 258]
        self.camera_whitebalance = [2.0, 1.0, 1.5, 0.0]
        self.sizes = _Sizes(h, w, h, w, 0, 0, h, w, 1.0, 0)
        self.rgb = rgb if rgb is not None else np.zeros((h, w, 3), dtype=np.uint8)
        self.postprocess_calls: list[dict[str, Any]] = []
        self.closed = False

    def postprocess(self, **kwargs: Any) -> np.ndarray:
        self.postprocess_calls.append(kwargs)
        return self.rgb

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_raw() -> FakeRaw:
    visible = np.array(
        [
            [4095, 2048, 4095, 2048],
            [1024, 0, 1024, 0],
            [4095, 2048, 4095, 2048],
            [1024, 0, 1024, 0],
        ],
        dtype=np.uint16,
    )
    rgb = np.array(
        [
            [[200, 40, 40], [40, 200, 40]],
            [[40, 40, 200], [128, 128, 128]],
        ],
        dtype=np.uint8,
    )
    return FakeRaw(visible, rgb=rgb)
