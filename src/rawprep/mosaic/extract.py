from __future__ import annotations

import logging

import numpy as np

from rawprep.errors import UnsupportedCFAError
from rawprep.types import CalibrationConstants, CfaDescriptor, NormalizedTensor, RawMosaicPlane
from rawprep.utils.numeric import normalize_samples


logger = logging.getLogger(__name__)


class MosaicExtractor:
    """Split an RGGB mosaic into normalized R, G1, G2, B planes.

    Each disjoint 2x2 tile becomes one output sample per plane; there is no
    interpolation. An odd trailing row or column is dropped.
    """

    def __init__(self, subtract_black: bool = False) -> None:
        self.subtract_black = subtract_black

    def extract(
        self,
        plane: RawMosaicPlane,
        cfa: CfaDescriptor,
        calib: CalibrationConstants,
    ) -> NormalizedTensor:
        if not cfa.is_rggb():
            raise UnsupportedCFAError(f"unsupported CFA pattern {cfa.tile_labels()}; only RGGB is supported")

        out_h = plane.height // 2
        out_w = plane.width // 2
        raw = plane.data[: out_h * 2, : out_w * 2]

        tiles = np.stack(
            [
                raw[0::2, 0::2],
                raw[0::2, 1::2],
                raw[1::2, 0::2],
                raw[1::2, 1::2],
            ],
            axis=0,
        )
        black = float(calib.black_level) if self.subtract_black else 0.0
        planes = normalize_samples(tiles, calib.effective_maximum, black=black)

        logger.debug(
            "extracted bayer channels %dx%d -> %dx%d (max=%.1f black=%.1f)",
            plane.width,
            plane.height,
            out_w,
            out_h,
            calib.effective_maximum,
            black,
        )
        return NormalizedTensor(planes)


def extract_bayer_channels(
    plane: RawMosaicPlane,
    cfa: CfaDescriptor,
    calib: CalibrationConstants,
    subtract_black: bool = False,
) -> NormalizedTensor:
    return MosaicExtractor(subtract_black=subtract_black).extract(plane, cfa, calib)
