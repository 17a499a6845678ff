from __future__ import annotations

import numpy as np


def clamp_unit(x: np.ndarray) -> np.ndarray:
    return np.clip(x, 0.0, 1.0)


def normalize_samples(samples: np.ndarray, maximum: float, black: float = 0.0) -> np.ndarray:
    """Scale integer samples into [0, 1] against ``black``..``maximum``.

    A range that collapses (maximum <= black) falls back to plain division by
    ``maximum`` so a bad black level never becomes the denominator.
    """

    span = float(maximum) - float(black)
    if span <= 0.0:
        black, span = 0.0, float(maximum)
    x = (np.asarray(samples, dtype=np.float32) - np.float32(black)) / np.float32(span)
    return clamp_unit(x).astype(np.float32, copy=False)


def u8_to_unit(samples: np.ndarray) -> np.ndarray:
    return np.asarray(samples, dtype=np.float32) / np.float32(255.0)


def unit_to_u8(x: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(np.asarray(x, dtype=np.float32) * np.float32(255.0)), 0, 255).astype(np.uint8)
