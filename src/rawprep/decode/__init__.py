from .base import DecodeError, Decoder, MissingDependencyError, RawSource, UnsupportedFormatError
from .exif_metadata import ExifMetadata, extract_exif_metadata
from .libraw_decoder import LibRawDecoder, RawFile, libraw_version, postprocess_kwargs
from .types import RawMetadata, RawMosaic, Thumbnail

__all__ = [
    "DecodeError",
    "Decoder",
    "MissingDependencyError",
    "RawSource",
    "UnsupportedFormatError",
    "ExifMetadata",
    "extract_exif_metadata",
    "LibRawDecoder",
    "RawFile",
    "libraw_version",
    "postprocess_kwargs",
    "RawMetadata",
    "RawMosaic",
    "Thumbnail",
]
