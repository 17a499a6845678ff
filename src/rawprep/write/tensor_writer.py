from __future__ import annotations

from pathlib import Path

import numpy as np

from rawprep.types import NormalizedTensor


def write_tensor_npz(path: Path, tensor: NormalizedTensor, rgb: np.ndarray | None = None) -> None:
    """Store the planes with their dimensions; the planes carry no header of their own."""

    path.parent.mkdir(parents=True, exist_ok=True)
    arrays: dict[str, np.ndarray] = {
        "planes": tensor.planes,
        "width": np.array(tensor.width, dtype=np.int64),
        "height": np.array(tensor.height, dtype=np.int64),
        "channel_order": np.array(NormalizedTensor.CHANNEL_ORDER),
    }
    if rgb is not None:
        arrays["rgb"] = np.asarray(rgb, dtype=np.float32)
    np.savez_compressed(path, **arrays)


def read_tensor_npz(path: Path) -> tuple[NormalizedTensor, np.ndarray | None]:
    with np.load(path) as data:
        tensor = NormalizedTensor(data["planes"])
        rgb = data["rgb"] if "rgb" in data.files else None
    return tensor, rgb
