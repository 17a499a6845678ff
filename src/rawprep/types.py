from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np


_DTYPE_FOR_BITS = {8: np.uint8, 16: np.uint16}


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Interleaved pixel samples laid out as (height, width, channels)."""

    data: np.ndarray

    def __post_init__(self) -> None:
        arr = np.asarray(self.data)
        if arr.ndim != 3:
            raise ValueError(f"pixel buffer must be (height, width, channels), got shape {arr.shape}")
        object.__setattr__(self, "data", arr)

    @classmethod
    def from_interleaved(
        cls,
        data: bytes | bytearray | Sequence[int] | np.ndarray,
        width: int,
        height: int,
        channels: int,
        bits_per_channel: int = 8,
    ) -> PixelBuffer:
        dtype = _DTYPE_FOR_BITS.get(int(bits_per_channel))
        if dtype is None:
            raise ValueError(f"unsupported bits per channel: {bits_per_channel}")
        if isinstance(data, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(data, dtype=dtype)
        else:
            flat = np.asarray(data, dtype=dtype).reshape(-1)
        expected = int(width) * int(height) * int(channels)
        if flat.size != expected:
            raise ValueError(f"expected {expected} samples for {width}x{height}x{channels}, got {flat.size}")
        return cls(flat.reshape(int(height), int(width), int(channels)).copy())

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def channel_count(self) -> int:
        return int(self.data.shape[2])

    @property
    def bits_per_channel(self) -> int:
        return int(self.data.dtype.itemsize * 8)

    def copy(self) -> PixelBuffer:
        return PixelBuffer(self.data.copy())

    def tobytes(self) -> bytes:
        return np.ascontiguousarray(self.data).tobytes()


@dataclass(frozen=True, eq=False)
class RawMosaicPlane:
    """Single-channel raw sensor readings, one sample per photosite."""

    data: np.ndarray

    def __post_init__(self) -> None:
        arr = np.asarray(self.data)
        if arr.ndim != 2:
            raise ValueError(f"raw plane must be (height, width), got shape {arr.shape}")
        if arr.dtype.kind not in "ui":
            raise TypeError(f"raw plane samples must be integers, got {arr.dtype}")
        object.__setattr__(self, "data", arr)

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])


@dataclass(frozen=True, eq=False)
class CfaDescriptor:
    """Color filter array layout as LibRaw reports it.

    ``color_desc`` names each channel index (``"RGBG"`` for Bayer sensors) and
    ``pattern`` is the repeating tile of channel indices.
    """

    color_desc: str
    pattern: np.ndarray

    def __post_init__(self) -> None:
        tile = np.asarray(self.pattern, dtype=np.int64)
        if tile.ndim != 2 or tile.size == 0:
            raise ValueError(f"CFA pattern must be a non-empty 2-D tile, got shape {tile.shape}")
        if int(tile.min()) < 0 or int(tile.max()) >= len(self.color_desc):
            raise ValueError(f"CFA pattern {tile.tolist()} references channels outside {self.color_desc!r}")
        object.__setattr__(self, "pattern", tile)

    @classmethod
    def from_labels(cls, labels: str) -> CfaDescriptor:
        """Build a 2x2 descriptor from a tile string such as ``"RGGB"``."""

        labels = labels.upper()
        if len(labels) != 4:
            raise ValueError(f"expected four tile labels, got {labels!r}")
        desc = ""
        indices = []
        for ch in labels:
            # LibRaw numbers the second green as its own channel.
            if ch in desc and not (ch == "G" and desc.count("G") == 1):
                indices.append(desc.rindex(ch))
                continue
            desc += ch
            indices.append(len(desc) - 1)
        return cls(color_desc=desc, pattern=np.array(indices, dtype=np.int64).reshape(2, 2))

    def channel(self, row: int, col: int) -> int:
        rows, cols = self.pattern.shape
        return int(self.pattern[row % rows, col % cols])

    def label(self, row: int, col: int) -> str:
        return self.color_desc[self.channel(row, col)]

    def tile_labels(self) -> str:
        return "".join(self.label(r, c) for r in range(2) for c in range(2))

    def is_rggb(self) -> bool:
        return self.pattern.shape == (2, 2) and self.tile_labels() == "RGGB"


@dataclass(frozen=True)
class CalibrationConstants:
    sensor_maximum: int = 0
    black_level: int = 0

    @property
    def effective_maximum(self) -> float:
        # 0 means the decoder has not computed a maximum yet.
        return float(self.sensor_maximum) if self.sensor_maximum > 0 else 65535.0


@dataclass(frozen=True, eq=False)
class NormalizedTensor:
    """Four float32 planes in R, G1, G2, B order, each at half sensor resolution."""

    CHANNEL_ORDER = ("R", "G1", "G2", "B")

    planes: np.ndarray

    def __post_init__(self) -> None:
        arr = np.asarray(self.planes, dtype=np.float32)
        if arr.ndim != 3 or arr.shape[0] != len(self.CHANNEL_ORDER):
            raise ValueError(f"tensor must be (4, height, width), got shape {arr.shape}")
        object.__setattr__(self, "planes", arr)

    @property
    def width(self) -> int:
        return int(self.planes.shape[2])

    @property
    def height(self) -> int:
        return int(self.planes.shape[1])

    def channel(self, name: str) -> np.ndarray:
        return self.planes[self.CHANNEL_ORDER.index(name.upper())]

    def to_planar(self) -> np.ndarray:
        return np.ascontiguousarray(self.planes).reshape(-1)
