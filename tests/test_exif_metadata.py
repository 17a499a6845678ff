from __future__ import annotations

from pathlib import Path

from rawprep.decode import exif_metadata
from rawprep.decode.exif_metadata import ExifMetadata, _from_tags, _ratio_like_to_float, extract_exif_metadata


class _Ratio:
    def __init__(self, num: int, den: int) -> None:
        self.num = num
        self.den = den


class _Tag:
    def __init__(self, *values: object) -> None:
        self.values = list(values)

    def __str__(self) -> str:
        return str(self.values[0])


def test_ratio_like_to_float_ratio_object() -> None:
    assert _ratio_like_to_float(_Ratio(1, 50)) == 0.02


def test_ratio_like_to_float_list_wrapper() -> None:
    assert _ratio_like_to_float([_Ratio(4, 1)]) == 4.0
    assert _ratio_like_to_float(_Tag(_Ratio(28, 10))) == 2.8


def test_ratio_like_to_float_bad_values() -> None:
    assert _ratio_like_to_float("200") == 200.0
    assert _ratio_like_to_float(_Ratio(1, 0)) is None
    assert _ratio_like_to_float("n/a") is None
    assert _ratio_like_to_float(None) is None


def test_from_tags_maps_exifread_names() -> None:
    md = _from_tags(
        {
            "Image Make": "Google ",
            "Image Model": "Pixel 7\x00",
            "EXIF DateTimeOriginal": "2024:05:01 10:11:12",
            "EXIF ISOSpeedRatings": _Tag(400),
            "EXIF ExposureTime": _Tag(_Ratio(1, 125)),
            "EXIF FNumber": _Tag(_Ratio(185, 100)),
            "EXIF FocalLength": _Tag(_Ratio(0, 1)),
        }
    )
    assert md.camera_make == "Google"
    assert md.camera_model == "Pixel 7"
    assert md.timestamp == "2024:05:01 10:11:12"
    assert md.iso == 400.0
    assert md.shutter_s == 0.008
    assert md.aperture_f == 1.85
    assert md.focal_length_mm is None
    assert not md.is_empty()


def test_extract_falls_back_to_exiftool(tmp_path: Path, monkeypatch) -> None:
    src = tmp_path / "frame.cr3"
    src.write_bytes(b"\x00" * 16)
    calls: list[Path] = []

    def fake_exiftool(path: Path) -> ExifMetadata:
        calls.append(path)
        return ExifMetadata(camera_make="Canon")

    monkeypatch.setattr(exif_metadata, "_extract_with_exiftool", fake_exiftool)
    assert extract_exif_metadata(src).camera_make == "Canon"
    assert calls == [src]


def test_extract_from_garbage_bytes_is_empty() -> None:
    assert extract_exif_metadata(b"not a raw file").is_empty()
