from __future__ import annotations

from pathlib import Path

import numpy as np

from rawprep.types import PixelBuffer


_TIFF_SUFFIXES = {".tif", ".tiff"}


def write_image(path: Path, buffer: PixelBuffer) -> None:
    """Write a decoded buffer. TIFF keeps 16-bit samples; PNG/JPEG need 8-bit."""

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in _TIFF_SUFFIXES:
        _write_tiff(path, buffer.data)
        return

    if buffer.bits_per_channel != 8:
        raise ValueError(f"{path.suffix or 'this format'} output needs 8-bit samples; write .tiff for 16-bit")
    try:
        from PIL import Image
    except Exception as exc:  # pragma: no cover - optional dependency
        raise RuntimeError("Pillow is required for PNG/JPEG output. Install with: pip install Pillow") from exc

    if buffer.channel_count not in (3, 4):
        raise ValueError(f"cannot write {buffer.channel_count}-channel buffer to {path.suffix}")
    Image.fromarray(np.ascontiguousarray(buffer.data)).save(path)


def write_thumbnail_bitmap(path: Path, rgb: np.ndarray) -> None:
    write_image(path, PixelBuffer(np.asarray(rgb)))


def _write_tiff(path: Path, data: np.ndarray) -> None:
    try:
        import tifffile  # type: ignore
    except Exception as exc:  # pragma: no cover - optional dependency
        raise RuntimeError("tifffile is required for TIFF output. Install with: pip install tifffile") from exc

    photometric = "rgb" if data.shape[2] in (3, 4) else "minisblack"
    tifffile.imwrite(str(path), np.ascontiguousarray(data), photometric=photometric)
