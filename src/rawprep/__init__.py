from __future__ import annotations

__version__ = "0.3.0"

from .color import ColorAdjuster, ColorAdjustment, adjust_colors
from .errors import (
    DecodeError,
    MissingDependencyError,
    RawPrepError,
    UnsupportedCFAError,
    UnsupportedFormatError,
)
from .mosaic import MosaicExtractor, extract_bayer_channels
from .types import CalibrationConstants, CfaDescriptor, NormalizedTensor, PixelBuffer, RawMosaicPlane

__all__ = [
    "__version__",
    "ColorAdjuster",
    "ColorAdjustment",
    "adjust_colors",
    "DecodeError",
    "MissingDependencyError",
    "RawPrepError",
    "UnsupportedCFAError",
    "UnsupportedFormatError",
    "MosaicExtractor",
    "extract_bayer_channels",
    "CalibrationConstants",
    "CfaDescriptor",
    "NormalizedTensor",
    "PixelBuffer",
    "RawMosaicPlane",
]
