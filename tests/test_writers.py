from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from rawprep.types import NormalizedTensor, PixelBuffer
from rawprep.write import ExtractionRecord, read_tensor_npz, write_extraction_record, write_image, write_tensor_npz


def test_tensor_npz_keeps_planes_and_rgb(tmp_path: Path) -> None:
    planes = np.linspace(0.0, 1.0, 4 * 3 * 5, dtype=np.float32).reshape(4, 3, 5)
    rgb = np.full((3, 6, 10), 0.5, dtype=np.float32)
    out = tmp_path / "nested" / "frame.npz"

    write_tensor_npz(out, NormalizedTensor(planes), rgb=rgb)
    tensor, loaded_rgb = read_tensor_npz(out)

    assert np.array_equal(tensor.planes, planes)
    assert loaded_rgb is not None and np.array_equal(loaded_rgb, rgb)
    with np.load(out) as data:
        assert int(data["width"]) == 5
        assert int(data["height"]) == 3
        assert data["channel_order"].tolist() == ["R", "G1", "G2", "B"]


def test_tensor_npz_without_rgb(tmp_path: Path) -> None:
    out = tmp_path / "frame.npz"
    write_tensor_npz(out, NormalizedTensor(np.zeros((4, 1, 1), dtype=np.float32)))
    _, rgb = read_tensor_npz(out)
    assert rgb is None


def test_extraction_record_json(tmp_path: Path) -> None:
    record = ExtractionRecord(
        source_filename="IMG_0001.DNG",
        tensor_filename="IMG_0001.npz",
        width=2000,
        height=1500,
        channel_order=("R", "G1", "G2", "B"),
        subtract_black=False,
        includes_rgb=True,
        metadata={"iso": 100.0},
        tool_version="0.3.0",
        created_at_utc="2024-01-01T00:00:00+00:00",
    )
    out = tmp_path / "IMG_0001.json"
    write_extraction_record(out, record)

    text = out.read_text(encoding="utf-8")
    assert text.endswith("\n")
    data = json.loads(text)
    assert data["channel_order"] == ["R", "G1", "G2", "B"]
    assert data["width"] == 2000
    assert data["metadata"] == {"iso": 100.0}


def test_write_png_roundtrip(tmp_path: Path) -> None:
    data = np.arange(2 * 3 * 4, dtype=np.uint8).reshape(2, 3, 4)
    out = tmp_path / "out.png"
    write_image(out, PixelBuffer(data))
    with Image.open(out) as img:
        assert img.mode == "RGBA"
        assert np.array_equal(np.asarray(img), data)


def test_write_png_rejects_sixteen_bit(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="8-bit"):
        write_image(tmp_path / "out.png", PixelBuffer(np.zeros((2, 2, 3), dtype=np.uint16)))


def test_write_tiff_keeps_sixteen_bit(tmp_path: Path) -> None:
    tifffile = pytest.importorskip("tifffile")
    data = np.full((2, 2, 3), 40000, dtype=np.uint16)
    out = tmp_path / "out.tiff"
    write_image(out, PixelBuffer(data))
    assert np.array_equal(tifffile.imread(str(out)), data)
