from __future__ import annotations

import numpy as np

from rawprep.color.hsl import hsl_to_rgb, rgb_to_hsl
from rawprep.utils.numeric import u8_to_unit, unit_to_u8


def test_rgb_hsl_roundtrip_within_one_code_value() -> None:
    rng = np.random.default_rng(1234)
    samples = rng.integers(0, 256, size=(1000, 3), dtype=np.uint8)
    fixed = np.array(
        [
            [255, 0, 0],
            [0, 255, 0],
            [0, 0, 255],
            [128, 128, 128],
            [0, 0, 0],
            [255, 255, 255],
        ],
        dtype=np.uint8,
    )
    rgb = np.concatenate([samples, fixed], axis=0)

    back = unit_to_u8(hsl_to_rgb(rgb_to_hsl(u8_to_unit(rgb))))
    diff = np.abs(back.astype(np.int16) - rgb.astype(np.int16))
    assert int(diff.max()) <= 1


def test_rgb_to_hsl_primaries() -> None:
    hsl = rgb_to_hsl(np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]], dtype=np.float32))
    assert np.allclose(hsl[:, 0], [0.0, 1.0 / 3.0, 2.0 / 3.0], atol=1e-6)
    assert np.allclose(hsl[:, 1], 1.0)
    assert np.allclose(hsl[:, 2], 0.5)


def test_rgb_to_hsl_achromatic_has_zero_hue_and_saturation() -> None:
    grey = np.array([[0.25, 0.25, 0.25], [0.0, 0.0, 0.0], [1.0, 1.0, 1.0]], dtype=np.float32)
    hsl = rgb_to_hsl(grey)
    assert np.all(hsl[:, 0] == 0.0)
    assert np.all(hsl[:, 1] == 0.0)
    assert np.allclose(hsl[:, 2], [0.25, 0.0, 1.0])


def test_rgb_to_hsl_hue_wraps_below_one() -> None:
    # Red maximum with blue above green lands in the last sector.
    hsl = rgb_to_hsl(np.array([1.0, 0.0, 0.2], dtype=np.float32))
    assert 0.9 < float(hsl[0]) < 1.0


def test_saturation_uses_high_lightness_branch() -> None:
    hsl = rgb_to_hsl(np.array([1.0, 0.6, 0.6], dtype=np.float32))
    # l = 0.8, delta = 0.4, s = 0.4 / (2 - 1.6)
    assert np.isclose(float(hsl[2]), 0.8)
    assert np.isclose(float(hsl[1]), 1.0, atol=1e-6)


def test_hsl_to_rgb_zero_saturation_is_grey() -> None:
    rgb = hsl_to_rgb(np.array([[0.4, 0.0, 0.3]], dtype=np.float32))
    assert np.allclose(rgb, 0.3)
