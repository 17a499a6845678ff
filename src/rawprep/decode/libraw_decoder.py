from __future__ import annotations

from dataclasses import asdict, replace
import io
import logging
from pathlib import Path
from typing import Any

import numpy as np

from rawprep.color import ColorAdjuster, ColorAdjustment
from rawprep.config import DecodeParams
from rawprep.errors import UnsupportedCFAError
from rawprep.mosaic import split_cfa_channels
from rawprep.types import CalibrationConstants, CfaDescriptor, PixelBuffer, RawMosaicPlane

from .base import DecodeError, MissingDependencyError, RawSource
from .exif_metadata import ExifMetadata, extract_exif_metadata
from .types import RawMetadata, RawMosaic, Thumbnail


try:
    import rawpy  # type: ignore
except Exception:  # pragma: no cover - dependency is optional
    rawpy = None


logger = logging.getLogger(__name__)


def libraw_version() -> str:
    if rawpy is None:
        raise MissingDependencyError("rawpy is required for RAW decode: pip install rawpy")
    return ".".join(str(v) for v in rawpy.libraw_version)


def postprocess_kwargs(params: DecodeParams) -> dict[str, Any]:
    """Translate DecodeParams into rawpy ``postprocess`` keyword arguments."""

    kwargs: dict[str, Any] = {
        "use_camera_wb": params.use_camera_wb,
        "use_auto_wb": params.use_auto_wb,
        "output_color": rawpy.ColorSpace[params.output_color],
        "output_bps": params.output_bps,
        "bright": params.bright,
        "demosaic_algorithm": rawpy.DemosaicAlgorithm[params.demosaic.upper()],
        "half_size": params.half_size,
        "highlight_mode": int(params.highlight_mode),
        "gamma": tuple(params.gamma),
        "median_filter_passes": params.median_passes,
        "no_auto_bright": params.no_auto_bright,
        "four_color_rgb": params.four_color_rgb,
        "dcb_iterations": params.dcb_iterations,
        "dcb_enhance": params.dcb_enhance,
    }
    if params.user_wb is not None:
        kwargs["user_wb"] = [float(v) for v in params.user_wb]
    if params.noise_threshold is not None:
        kwargs["noise_thr"] = params.noise_threshold
    if params.exp_shift is not None:
        kwargs["exp_shift"] = params.exp_shift
        kwargs["exp_preserve_highlights"] = params.exp_preserve_highlights
    if params.auto_bright_threshold is not None:
        kwargs["auto_bright_thr"] = params.auto_bright_threshold
    if params.user_black is not None:
        kwargs["user_black"] = params.user_black
    if params.chromatic_aberration is not None:
        kwargs["chromatic_aberration"] = tuple(params.chromatic_aberration)
    if params.user_flip is not None:
        kwargs["user_flip"] = params.user_flip
    return kwargs


def _normalize_wb(values: Any) -> tuple[float, float, float, float]:
    raw = [float(v) for v in list(values if values is not None else [1.0, 1.0, 1.0, 1.0])]
    if len(raw) >= 4:
        return (raw[0], raw[1], raw[2], raw[3])
    if len(raw) == 3:
        return (raw[0], raw[1], raw[2], raw[1])
    return (1.0, 1.0, 1.0, 1.0)


def _black_levels(raw: Any) -> tuple[int, int, int, int] | None:
    black = getattr(raw, "black_level_per_channel", None)
    if black is None:
        return None
    values = [int(v) for v in list(black)[:4]]
    if len(values) == 3:
        values.append(values[1])
    if len(values) != 4:
        return None
    return (values[0], values[1], values[2], values[3])


def _color_desc(raw: Any) -> str:
    desc = raw.color_desc
    if isinstance(desc, bytes):
        return desc.decode("ascii", errors="replace")
    return str(desc)


def _cfa_descriptor(raw: Any) -> CfaDescriptor | None:
    pattern = getattr(raw, "raw_pattern", None)
    if pattern is None:
        return None
    return CfaDescriptor(color_desc=_color_desc(raw), pattern=np.asarray(pattern))


class RawFile:
    """An opened RAW file. Use as a context manager so LibRaw memory is freed."""

    def __init__(self, raw: Any, params: DecodeParams, source: RawSource | None = None) -> None:
        self._raw = raw
        self.params = params
        self._source = source
        self._exif: ExifMetadata | None = None

    def __enter__(self) -> RawFile:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        close = getattr(self._raw, "close", None)
        if close is not None:
            close()

    @property
    def source_path(self) -> Path | None:
        if isinstance(self._source, (str, Path)):
            return Path(self._source)
        return None

    def _exif_metadata(self) -> ExifMetadata:
        if self._exif is None:
            if isinstance(self._source, (bytes, bytearray)):
                self._exif = extract_exif_metadata(self._source)
            elif self.source_path is not None and self.source_path.exists():
                self._exif = extract_exif_metadata(self.source_path)
            else:
                self._exif = ExifMetadata()
        return self._exif

    def metadata(self) -> RawMetadata:
        raw = self._raw
        sizes = raw.sizes
        exif = self._exif_metadata()
        cfa = _cfa_descriptor(raw)
        black = _black_levels(raw)
        return RawMetadata(
            source_path=self.source_path,
            camera_make=exif.camera_make,
            camera_model=exif.camera_model,
            timestamp=exif.timestamp,
            iso=exif.iso,
            shutter_s=exif.shutter_s,
            aperture_f=exif.aperture_f,
            focal_length_mm=exif.focal_length_mm,
            raw_width=int(sizes.raw_width),
            raw_height=int(sizes.raw_height),
            width=int(sizes.width),
            height=int(sizes.height),
            iwidth=int(sizes.iwidth),
            iheight=int(sizes.iheight),
            flip=int(sizes.flip),
            num_colors=int(raw.num_colors),
            color_desc=_color_desc(raw),
            cfa_pattern=cfa.tile_labels() if cfa is not None else None,
            black_level=min(black) if black is not None else 0,
            black_level_per_channel=black,
            white_level=int(raw.white_level or 0),
            camera_wb=_normalize_wb(raw.camera_whitebalance),
        )

    def render(
        self,
        params: DecodeParams | None = None,
        adjustment: ColorAdjustment | None = None,
        rows_per_chunk: int | None = None,
    ) -> PixelBuffer:
        """Demosaic through LibRaw and apply saturation/vibrance."""

        effective = params or self.params
        kwargs = postprocess_kwargs(effective)
        logger.debug("postprocess parameters: %s", asdict(effective))
        try:
            rgb = self._raw.postprocess(**kwargs)
        except Exception as exc:
            raise DecodeError(f"processing failed for {self._describe()}: {exc}") from exc

        buffer = PixelBuffer(np.asarray(rgb))
        logger.debug(
            "rendered image %dx%d, %d colors, %d bits",
            buffer.width,
            buffer.height,
            buffer.channel_count,
            buffer.bits_per_channel,
        )
        if adjustment is None or adjustment.is_identity:
            return buffer
        return ColorAdjuster(adjustment, rows_per_chunk=rows_per_chunk).apply(buffer)

    def mosaic(self) -> RawMosaic:
        """Visible sensor area with its CFA layout and calibration."""

        raw = self._raw
        cfa = _cfa_descriptor(raw)
        if cfa is None:
            raise UnsupportedCFAError(f"{self._describe()} has no color filter array pattern")
        black = _black_levels(raw)
        plane = RawMosaicPlane(np.array(raw.raw_image_visible, copy=True))
        calibration = CalibrationConstants(
            sensor_maximum=int(raw.white_level or 0),
            black_level=min(black) if black is not None else 0,
        )
        logger.debug(
            "raw mosaic %dx%d cfa=%s max=%d black=%d",
            plane.width,
            plane.height,
            cfa.tile_labels(),
            calibration.sensor_maximum,
            calibration.black_level,
        )
        return RawMosaic(plane=plane, cfa=cfa, calibration=calibration)

    def cfa_channels(self) -> np.ndarray:
        mosaic = self.mosaic()
        return split_cfa_channels(mosaic.plane, mosaic.cfa)

    def bilinear_rgb(self) -> np.ndarray:
        """Linear, bilinear-demosaiced sRGB as float32 planes ``(3, H, W)`` in [0, 1]."""

        linear_params = replace(
            self.params,
            half_size=False,
            use_camera_wb=True,
            use_auto_wb=False,
            output_color="sRGB",
            output_bps=16,
            gamma=(1.0, 1.0),
            demosaic="LINEAR",
            no_auto_bright=True,
        )
        buffer = self.render(linear_params)
        rgb = buffer.data[..., :3].astype(np.float32) / np.float32(65535.0)
        return np.ascontiguousarray(np.moveaxis(rgb, -1, 0))

    def thumbnail(self) -> Thumbnail | None:
        try:
            thumb = self._raw.extract_thumb()
        except (rawpy.LibRawNoThumbnailError, rawpy.LibRawUnsupportedThumbnailError):
            logger.debug("no usable thumbnail in %s", self._describe())
            return None

        if thumb.format == rawpy.ThumbFormat.JPEG:
            data = bytes(thumb.data)
            width, height = _jpeg_size(data)
            return Thumbnail(format="jpeg", width=width, height=height, data=data)
        arr = np.asarray(thumb.data)
        return Thumbnail(format="bitmap", width=int(arr.shape[1]), height=int(arr.shape[0]), data=arr)

    def processing_info(self) -> dict[str, Any]:
        meta = self.metadata()
        return {
            "camera_make": meta.camera_make,
            "camera_model": meta.camera_model,
            "raw_width": meta.raw_width,
            "raw_height": meta.raw_height,
            "width": meta.width,
            "height": meta.height,
            "iwidth": meta.iwidth,
            "iheight": meta.iheight,
            "colors": meta.num_colors,
            "cfa_pattern": meta.cfa_pattern,
            "color": {
                "black": meta.black_level,
                "maximum": meta.white_level,
                "cam_mul": list(meta.camera_wb),
            },
        }

    def _describe(self) -> str:
        return str(self.source_path) if self.source_path is not None else "<memory>"


def _jpeg_size(data: bytes) -> tuple[int | None, int | None]:
    try:
        from PIL import Image
    except Exception:
        return None, None
    try:
        with Image.open(io.BytesIO(data)) as img:
            return int(img.width), int(img.height)
    except OSError:
        return None, None


class LibRawDecoder:
    """RAW decoder using rawpy (LibRaw backend)."""

    def __init__(self, params: DecodeParams | None = None) -> None:
        if rawpy is None:
            raise MissingDependencyError("rawpy is required for RAW decode: pip install rawpy")
        self.params = params or DecodeParams()

    def open(self, source: RawSource) -> RawFile:
        if isinstance(source, (bytes, bytearray)):
            target: Any = io.BytesIO(bytes(source))
            label = f"<{len(source)} bytes>"
        else:
            target = str(Path(source).expanduser())
            label = target

        kwargs: dict[str, Any] = {}
        if self.params.shot_select:
            kwargs["shot_select"] = self.params.shot_select

        logger.debug("loading %s", label)
        try:
            raw = rawpy.imread(target, **kwargs)
        except Exception as exc:
            raise DecodeError(f"open failed for {label}: {exc}") from exc

        sizes = raw.sizes
        logger.debug("loaded %s: raw %dx%d, colors=%s", label, sizes.raw_width, sizes.raw_height, raw.num_colors)
        return RawFile(raw, self.params, source=source)

    def decode(self, source: RawSource, adjustment: ColorAdjustment | None = None) -> PixelBuffer:
        with self.open(source) as raw_file:
            return raw_file.render(adjustment=adjustment)
