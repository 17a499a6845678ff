from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np

from rawprep.types import CalibrationConstants, CfaDescriptor, RawMosaicPlane


@dataclass
class RawMetadata:
    source_path: Path | None
    camera_make: str | None
    camera_model: str | None
    timestamp: str | None
    iso: float | None
    shutter_s: float | None
    aperture_f: float | None
    focal_length_mm: float | None
    raw_width: int
    raw_height: int
    width: int
    height: int
    iwidth: int
    iheight: int
    flip: int
    num_colors: int
    color_desc: str
    cfa_pattern: str | None
    black_level: int
    black_level_per_channel: tuple[int, int, int, int] | None
    white_level: int
    camera_wb: tuple[float, float, float, float]


@dataclass
class RawMosaic:
    plane: RawMosaicPlane
    cfa: CfaDescriptor
    calibration: CalibrationConstants


@dataclass
class Thumbnail:
    format: str
    width: int | None
    height: int | None
    data: bytes | np.ndarray
