from .image_writer import write_image, write_thumbnail_bitmap
from .manifests import ExtractionRecord, utc_now_iso, write_extraction_record
from .tensor_writer import read_tensor_npz, write_tensor_npz

__all__ = [
    "write_image",
    "write_thumbnail_bitmap",
    "ExtractionRecord",
    "utc_now_iso",
    "write_extraction_record",
    "read_tensor_npz",
    "write_tensor_npz",
]
