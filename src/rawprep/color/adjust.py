from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np

from rawprep.errors import UnsupportedFormatError
from rawprep.types import PixelBuffer
from rawprep.utils.numeric import clamp_unit, u8_to_unit, unit_to_u8

from .hsl import hsl_to_rgb, rgb_to_hsl


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColorAdjustment:
    """Saturation and vibrance, each nominally in [-1, 1].

    Out-of-range values are accepted; the per-pixel math clamps the result.
    """

    saturation: float = 0.0
    vibrance: float = 0.0

    @classmethod
    def from_user_scale(cls, saturation: float = 0.0, vibrance: float = 0.0) -> ColorAdjustment:
        """Build from the -100..100 knobs shown to users."""

        return cls(saturation=float(saturation) / 100.0, vibrance=float(vibrance) / 100.0)

    @property
    def is_identity(self) -> bool:
        return self.saturation == 0.0 and self.vibrance == 0.0


def adjust_saturation(s: np.ndarray, saturation: float, vibrance: float) -> np.ndarray:
    """Apply the saturation scale, then vibrance, to HSL saturation values.

    Vibrance is weighted by ``1 - s`` after the saturation step, so pixels that
    are already vivid receive almost no extra boost.
    """

    out = np.asarray(s, dtype=np.float32)
    if saturation != 0.0:
        out = clamp_unit(out * np.float32(1.0 + saturation))
    if vibrance != 0.0:
        amount = np.float32(vibrance) * (np.float32(1.0) - out)
        out = clamp_unit(out * (np.float32(1.0) + amount))
    return out.astype(np.float32, copy=False)


def _check_format(buffer: PixelBuffer) -> None:
    if buffer.channel_count < 3:
        raise UnsupportedFormatError(f"color adjustment needs at least 3 channels, got {buffer.channel_count}")
    if buffer.bits_per_channel != 8:
        raise UnsupportedFormatError(
            f"color adjustment supports 8-bit samples only, got {buffer.bits_per_channel}-bit"
        )


class ColorAdjuster:
    """Saturation/vibrance engine for decoded 8-bit RGB(A) buffers.

    Every pixel is independent, so the work is done as whole-array numpy
    operations. ``rows_per_chunk`` bounds the float temporaries on very large
    frames without changing the result.
    """

    def __init__(self, adjustment: ColorAdjustment, rows_per_chunk: int | None = None) -> None:
        if rows_per_chunk is not None and rows_per_chunk <= 0:
            raise ValueError("rows_per_chunk must be positive")
        self.adjustment = adjustment
        self.rows_per_chunk = rows_per_chunk

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        _check_format(buffer)
        if self.adjustment.is_identity:
            return buffer.copy()

        out = buffer.data.copy()
        step = self.rows_per_chunk or max(buffer.height, 1)
        for start in range(0, buffer.height, step):
            rows = out[start : start + step]
            rows[..., :3] = self._transform_rgb(rows[..., :3])

        logger.debug(
            "adjusted %dx%d buffer saturation=%.3f vibrance=%.3f",
            buffer.width,
            buffer.height,
            self.adjustment.saturation,
            self.adjustment.vibrance,
        )
        return PixelBuffer(out)

    def _transform_rgb(self, rgb_u8: np.ndarray) -> np.ndarray:
        hsl = rgb_to_hsl(u8_to_unit(rgb_u8))
        hsl[..., 1] = adjust_saturation(hsl[..., 1], self.adjustment.saturation, self.adjustment.vibrance)
        return unit_to_u8(hsl_to_rgb(hsl))


def adjust_colors(buffer: PixelBuffer, adjustment: ColorAdjustment) -> PixelBuffer:
    return ColorAdjuster(adjustment).apply(buffer)
