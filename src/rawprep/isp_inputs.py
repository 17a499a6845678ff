from __future__ import annotations

from dataclasses import asdict, dataclass
import logging
from typing import Any

import numpy as np

from rawprep.decode import RawFile, RawMetadata
from rawprep.mosaic import MosaicExtractor
from rawprep.types import NormalizedTensor


logger = logging.getLogger(__name__)

# Device ids the downstream ISP model was trained with.
DEVICE_PIXEL = 0
DEVICE_SAMSUNG = 1
DEVICE_IPHONE = 2
DEVICE_UNKNOWN = -1


def device_id_for_model(model: str | None) -> int:
    if not model:
        return DEVICE_UNKNOWN
    if "iPhone" in model:
        return DEVICE_IPHONE
    if "Samsung" in model or "Galaxy" in model:
        return DEVICE_SAMSUNG
    if "Pixel" in model:
        return DEVICE_PIXEL
    return DEVICE_UNKNOWN


@dataclass
class IspMetadata:
    iso: float | None
    exposure: float | None
    aperture: float | None
    focal_length: float | None
    wb_coeffs: tuple[float, float, float, float]
    camera_make: str | None
    camera_model: str | None
    device_id: int
    raw_width: int
    raw_height: int
    width: int
    height: int
    black_level: int
    maximum: int
    cfa_pattern: str | None

    def to_json_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["wb_coeffs"] = [float(v) for v in self.wb_coeffs]
        return data


def build_isp_metadata(meta: RawMetadata) -> IspMetadata:
    return IspMetadata(
        iso=meta.iso,
        exposure=meta.shutter_s,
        aperture=meta.aperture_f,
        focal_length=meta.focal_length_mm,
        wb_coeffs=meta.camera_wb,
        camera_make=meta.camera_make,
        camera_model=meta.camera_model,
        device_id=device_id_for_model(meta.camera_model),
        raw_width=meta.raw_width,
        raw_height=meta.raw_height,
        width=meta.width,
        height=meta.height,
        black_level=meta.black_level,
        maximum=meta.white_level,
        cfa_pattern=meta.cfa_pattern,
    )


@dataclass
class IspInputs:
    tensor: NormalizedTensor
    metadata: IspMetadata
    rgb: np.ndarray | None = None


def prepare_isp_inputs(
    raw_file: RawFile,
    extractor: MosaicExtractor | None = None,
    include_rgb: bool = False,
) -> IspInputs:
    """Packed Bayer tensor, camera metadata and optional bilinear RGB.

    The RGB planes are the full-resolution reference the ISP model takes as
    its second input.
    """

    extractor = extractor or MosaicExtractor()
    mosaic = raw_file.mosaic()
    tensor = extractor.extract(mosaic.plane, mosaic.cfa, mosaic.calibration)
    metadata = build_isp_metadata(raw_file.metadata())
    rgb = raw_file.bilinear_rgb() if include_rgb else None

    logger.info(
        "prepared ISP inputs %dx%d device=%d cfa=%s",
        tensor.width,
        tensor.height,
        metadata.device_id,
        metadata.cfa_pattern,
    )
    return IspInputs(tensor=tensor, metadata=metadata, rgb=rgb)
