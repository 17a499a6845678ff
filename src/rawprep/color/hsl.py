from __future__ import annotations

import numpy as np


_ONE_THIRD = np.float32(1.0 / 3.0)


def rgb_to_hsl(rgb: np.ndarray) -> np.ndarray:
    """Convert RGB in [0, 1] to HSL, all channels in [0, 1].

    Works on any leading shape; the last axis holds R, G, B. Achromatic
    inputs (max == min) get hue 0 and saturation 0.
    """

    x = np.asarray(rgb, dtype=np.float32)
    r, g, b = x[..., 0], x[..., 1], x[..., 2]

    cmax = np.maximum(np.maximum(r, g), b)
    cmin = np.minimum(np.minimum(r, g), b)
    lightness = (cmax + cmin) / np.float32(2.0)
    delta = cmax - cmin
    chromatic = delta > 0

    safe_delta = np.where(chromatic, delta, np.float32(1.0))
    denom = np.where(lightness > 0.5, np.float32(2.0) - cmax - cmin, cmax + cmin)
    saturation = np.where(chromatic, delta / np.where(chromatic, denom, np.float32(1.0)), np.float32(0.0))

    # Channel priority R, G, B when several equal the maximum.
    hue = np.select(
        [cmax == r, cmax == g],
        [
            (g - b) / safe_delta + np.where(g < b, np.float32(6.0), np.float32(0.0)),
            (b - r) / safe_delta + np.float32(2.0),
        ],
        default=(r - g) / safe_delta + np.float32(4.0),
    )
    hue = np.where(chromatic, np.mod(hue / np.float32(6.0), np.float32(1.0)), np.float32(0.0))

    return np.stack([hue, saturation, lightness], axis=-1).astype(np.float32, copy=False)


def _hue_to_channel(p: np.ndarray, q: np.ndarray, t: np.ndarray) -> np.ndarray:
    t = np.where(t < 0.0, t + np.float32(1.0), t)
    t = np.where(t > 1.0, t - np.float32(1.0), t)
    return np.select(
        [t < 1.0 / 6.0, t < 0.5, t < 2.0 / 3.0],
        [
            p + (q - p) * np.float32(6.0) * t,
            q,
            p + (q - p) * (np.float32(2.0 / 3.0) - t) * np.float32(6.0),
        ],
        default=p,
    )


def hsl_to_rgb(hsl: np.ndarray) -> np.ndarray:
    """Inverse of :func:`rgb_to_hsl`; returns RGB floats in [0, 1]."""

    x = np.asarray(hsl, dtype=np.float32)
    h, s, l = x[..., 0], x[..., 1], x[..., 2]

    q = np.where(l < 0.5, l * (np.float32(1.0) + s), l + s - l * s)
    p = np.float32(2.0) * l - q

    rgb = np.stack(
        [
            _hue_to_channel(p, q, h + _ONE_THIRD),
            _hue_to_channel(p, q, h),
            _hue_to_channel(p, q, h - _ONE_THIRD),
        ],
        axis=-1,
    )
    grey = np.repeat(l[..., None], 3, axis=-1)
    return np.where((s == 0.0)[..., None], grey, rgb).astype(np.float32, copy=False)
