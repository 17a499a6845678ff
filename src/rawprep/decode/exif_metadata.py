from __future__ import annotations

from dataclasses import dataclass
import io
import json
import logging
from pathlib import Path
import shutil
import subprocess
from typing import Any


logger = logging.getLogger(__name__)

# exifread is not reliable on ISO BMFF containers such as .CR3.
_EXIFREAD_SUFFIXES = {".cr2", ".dng", ".nef", ".arw", ".rw2", ".orf", ".pef", ".srw", ".tif", ".tiff"}


@dataclass
class ExifMetadata:
    camera_make: str | None = None
    camera_model: str | None = None
    timestamp: str | None = None
    iso: float | None = None
    shutter_s: float | None = None
    aperture_f: float | None = None
    focal_length_mm: float | None = None

    def is_empty(self) -> bool:
        return all(v is None for v in vars(self).values())


def _ratio_like_to_float(value: Any) -> float | None:
    if value is None:
        return None

    # exifread stores most values in a list-like container.
    if isinstance(value, (list, tuple)) and len(value) > 0:
        value = value[0]
    values = getattr(value, "values", None)
    if isinstance(values, (list, tuple)) and len(values) > 0:
        value = values[0]

    if hasattr(value, "num") and hasattr(value, "den"):
        den = float(getattr(value, "den", 0) or 0)
        if den == 0.0:
            return None
        return float(getattr(value, "num", 0)) / den

    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _positive(value: float | None) -> float | None:
    if value is None or value <= 0:
        return None
    return value


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip().strip("\x00").strip()
    return text or None


def _from_tags(tags: dict[str, Any]) -> ExifMetadata:
    return ExifMetadata(
        camera_make=_text(tags.get("Image Make")),
        camera_model=_text(tags.get("Image Model")),
        timestamp=_text(tags.get("EXIF DateTimeOriginal") or tags.get("Image DateTime")),
        iso=_positive(_ratio_like_to_float(tags.get("EXIF ISOSpeedRatings") or tags.get("EXIF PhotographicSensitivity"))),
        shutter_s=_positive(_ratio_like_to_float(tags.get("EXIF ExposureTime"))),
        aperture_f=_positive(_ratio_like_to_float(tags.get("EXIF FNumber"))),
        focal_length_mm=_positive(_ratio_like_to_float(tags.get("EXIF FocalLength"))),
    )


def _extract_with_exifread(stream: io.BufferedIOBase | io.BytesIO) -> ExifMetadata:
    try:
        import exifread  # type: ignore
    except Exception:
        return ExifMetadata()

    try:
        tags = exifread.process_file(stream, details=False)
    except Exception as exc:
        logger.debug("exifread failed: %s", exc)
        return ExifMetadata()
    return _from_tags(tags)


def _extract_with_exiftool(path: Path) -> ExifMetadata:
    exiftool = shutil.which("exiftool")
    if exiftool is None:
        return ExifMetadata()

    try:
        proc = subprocess.run(
            [
                exiftool,
                "-j",
                "-n",
                "-Make",
                "-Model",
                "-DateTimeOriginal",
                "-ISO",
                "-ExposureTime",
                "-FNumber",
                "-FocalLength",
                str(path),
            ],
            capture_output=True,
            text=True,
            check=False,
        )
        if proc.returncode != 0:
            return ExifMetadata()
        rows = json.loads(proc.stdout)
    except (OSError, ValueError) as exc:
        logger.debug("exiftool failed for %s: %s", path, exc)
        return ExifMetadata()

    if not rows:
        return ExifMetadata()
    row = rows[0]
    return ExifMetadata(
        camera_make=_text(row.get("Make")),
        camera_model=_text(row.get("Model")),
        timestamp=_text(row.get("DateTimeOriginal")),
        iso=_positive(_ratio_like_to_float(row.get("ISO"))),
        shutter_s=_positive(_ratio_like_to_float(row.get("ExposureTime"))),
        aperture_f=_positive(_ratio_like_to_float(row.get("FNumber"))),
        focal_length_mm=_positive(_ratio_like_to_float(row.get("FocalLength"))),
    )


def extract_exif_metadata(source: Path | bytes | bytearray) -> ExifMetadata:
    """Camera and exposure fields from a RAW file or in-memory RAW bytes.

    Paths try exifread for TIFF-based RAW families, then the exiftool CLI.
    In-memory sources only go through exifread.
    """

    if isinstance(source, (bytes, bytearray)):
        return _extract_with_exifread(io.BytesIO(bytes(source)))

    if source.suffix.lower() in _EXIFREAD_SUFFIXES:
        with source.open("rb") as f:
            md = _extract_with_exifread(f)
        if not md.is_empty():
            return md

    return _extract_with_exiftool(source)
