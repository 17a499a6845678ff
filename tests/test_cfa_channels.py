from __future__ import annotations

import numpy as np

from rawprep.mosaic import channel_index_map, split_cfa_channels
from rawprep.types import CfaDescriptor, RawMosaicPlane


def test_channel_index_map_tiles_pattern() -> None:
    cfa = CfaDescriptor(color_desc="RGBG", pattern=np.array([[0, 1], [3, 2]]))
    index = channel_index_map(cfa, 3, 5)
    assert index.shape == (3, 5)
    assert index.tolist() == [
        [0, 1, 0, 1, 0],
        [3, 2, 3, 2, 3],
        [0, 1, 0, 1, 0],
    ]


def test_split_cfa_channels_places_each_sample_once() -> None:
    cfa = CfaDescriptor(color_desc="RGBG", pattern=np.array([[0, 1], [3, 2]]))
    raw = np.arange(1, 17, dtype=np.uint16).reshape(4, 4)
    channels = split_cfa_channels(RawMosaicPlane(raw), cfa)

    assert channels.shape == (4, 4, 4)
    assert channels.dtype == np.uint16
    assert np.array_equal(channels.sum(axis=0), raw)
    assert channels[0, 0, 0] == 1  # R
    assert channels[1, 0, 1] == 2  # G
    assert channels[3, 1, 0] == 5  # second G
    assert channels[2, 1, 1] == 6  # B
    assert channels[2, 0, 0] == 0
