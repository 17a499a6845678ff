from __future__ import annotations

import numpy as np

from rawprep.types import CfaDescriptor, RawMosaicPlane


def channel_index_map(cfa: CfaDescriptor, height: int, width: int) -> np.ndarray:
    """Per-photosite channel index, tiling the CFA pattern over the plane."""

    rows, cols = cfa.pattern.shape
    reps = (-(-height // rows), -(-width // cols))
    return np.tile(cfa.pattern, reps)[:height, :width]


def split_cfa_channels(plane: RawMosaicPlane, cfa: CfaDescriptor) -> np.ndarray:
    """Full-resolution four-channel view of a mosaic.

    Returns ``(len(color_desc), height, width)`` with each photosite's value
    in its own channel and zero in all others.
    """

    index = channel_index_map(cfa, plane.height, plane.width)
    out = np.zeros((len(cfa.color_desc), plane.height, plane.width), dtype=plane.data.dtype)
    for c in range(len(cfa.color_desc)):
        mask = index == c
        out[c][mask] = plane.data[mask]
    return out
