from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any


DEMOSAIC_ALGORITHMS = ("LINEAR", "VNG", "PPG", "AHD", "DCB", "DHT", "AAHD")
OUTPUT_COLOR_SPACES = ("raw", "sRGB", "Adobe", "Wide", "ProPhoto", "XYZ", "ACES", "P3D65", "Rec2020")


@dataclass(frozen=True)
class DecodeParams:
    """LibRaw processing parameters for one decode.

    Passed explicitly into every render call; nothing is kept as mutable
    decoder state between calls.
    """

    use_camera_wb: bool = True
    use_auto_wb: bool = False
    user_wb: tuple[float, float, float, float] | None = None
    output_color: str = "sRGB"
    output_bps: int = 8
    bright: float = 1.0
    demosaic: str = "AHD"
    half_size: bool = False
    highlight_mode: int = 0
    gamma: tuple[float, float] = (2.4, 12.92)
    noise_threshold: float | None = None
    median_passes: int = 0
    exp_shift: float | None = None
    exp_preserve_highlights: float = 0.0
    no_auto_bright: bool = False
    auto_bright_threshold: float | None = None
    four_color_rgb: bool = False
    dcb_iterations: int = 0
    dcb_enhance: bool = False
    user_black: int | None = None
    chromatic_aberration: tuple[float, float] | None = None
    user_flip: int | None = None
    shot_select: int = 0

    def __post_init__(self) -> None:
        if self.demosaic.upper() not in DEMOSAIC_ALGORITHMS:
            raise ValueError(f"unknown demosaic algorithm: {self.demosaic}")
        if self.output_color not in OUTPUT_COLOR_SPACES:
            raise ValueError(f"unknown output color space: {self.output_color}")
        if self.output_bps not in (8, 16):
            raise ValueError("output_bps must be 8 or 16")
        if not 0 <= int(self.highlight_mode) <= 9:
            raise ValueError("highlight_mode must be in 0..9")
        if self.user_flip is not None and self.user_flip not in (0, 3, 5, 6):
            raise ValueError("user_flip must be one of 0, 3, 5, 6")


@dataclass
class AdjustConfig:
    saturation: float = 0.0
    vibrance: float = 0.0
    rows_per_chunk: int | None = None


@dataclass
class ExtractConfig:
    subtract_black: bool = False
    include_rgb: bool = False


@dataclass
class AppConfig:
    decode: DecodeParams = field(default_factory=DecodeParams)
    adjust: AdjustConfig = field(default_factory=AdjustConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    log_level: str = "INFO"
    log_file: Path | None = None


def _as_float_tuple(raw: Any, length: int, key: str) -> tuple[float, ...] | None:
    if raw is None:
        return None
    values = list(raw)
    if len(values) != length:
        raise ValueError(f"{key} must have {length} values")
    return tuple(float(v) for v in values)


def _optional(raw: dict[str, Any], key: str, cast: Any) -> Any:
    value = raw.get(key)
    if value is None:
        return None
    return cast(value)


def _expand_path(value: str | None, base: Path) -> Path | None:
    if value in (None, ""):
        return None
    path = Path(value)
    if not path.is_absolute():
        path = (base / path).resolve()
    return path


def _check_keys(section: str, raw: dict[str, Any], allowed: set[str]) -> None:
    unknown = sorted(set(raw) - allowed)
    if unknown:
        raise ValueError(f"unknown {section} config keys: {', '.join(unknown)}")


def parse_decode_params(raw: dict[str, Any]) -> DecodeParams:
    defaults = DecodeParams()
    _check_keys("decode", raw, {f.name for f in fields(DecodeParams)})
    return DecodeParams(
        use_camera_wb=bool(raw.get("use_camera_wb", defaults.use_camera_wb)),
        use_auto_wb=bool(raw.get("use_auto_wb", defaults.use_auto_wb)),
        user_wb=_as_float_tuple(raw.get("user_wb"), 4, "decode.user_wb"),
        output_color=str(raw.get("output_color", defaults.output_color)),
        output_bps=int(raw.get("output_bps", defaults.output_bps)),
        bright=float(raw.get("bright", defaults.bright)),
        demosaic=str(raw.get("demosaic", defaults.demosaic)).upper(),
        half_size=bool(raw.get("half_size", defaults.half_size)),
        highlight_mode=int(raw.get("highlight_mode", defaults.highlight_mode)),
        gamma=_as_float_tuple(raw.get("gamma", list(defaults.gamma)), 2, "decode.gamma"),
        noise_threshold=_optional(raw, "noise_threshold", float),
        median_passes=int(raw.get("median_passes", defaults.median_passes)),
        exp_shift=_optional(raw, "exp_shift", float),
        exp_preserve_highlights=float(raw.get("exp_preserve_highlights", defaults.exp_preserve_highlights)),
        no_auto_bright=bool(raw.get("no_auto_bright", defaults.no_auto_bright)),
        auto_bright_threshold=_optional(raw, "auto_bright_threshold", float),
        four_color_rgb=bool(raw.get("four_color_rgb", defaults.four_color_rgb)),
        dcb_iterations=int(raw.get("dcb_iterations", defaults.dcb_iterations)),
        dcb_enhance=bool(raw.get("dcb_enhance", defaults.dcb_enhance)),
        user_black=_optional(raw, "user_black", int),
        chromatic_aberration=_as_float_tuple(raw.get("chromatic_aberration"), 2, "decode.chromatic_aberration"),
        user_flip=_optional(raw, "user_flip", int),
        shot_select=int(raw.get("shot_select", defaults.shot_select)),
    )


def load_config(path: str | Path | None = None) -> AppConfig:
    if path is None:
        return AppConfig()

    try:
        import yaml  # type: ignore
    except Exception as exc:
        raise RuntimeError("PyYAML is required for config loading. Install with: pip install PyYAML") from exc

    cfg_path = Path(path).expanduser().resolve()
    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    base = cfg_path.parent
    _check_keys("top-level", raw, {"decode", "adjust", "extract", "log_level", "log_file"})
    adjust_raw = raw.get("adjust") or {}
    extract_raw = raw.get("extract") or {}
    _check_keys("adjust", adjust_raw, {"saturation", "vibrance", "rows_per_chunk"})
    _check_keys("extract", extract_raw, {"subtract_black", "include_rgb"})

    adjust = AdjustConfig(
        saturation=float(adjust_raw.get("saturation", 0.0)),
        vibrance=float(adjust_raw.get("vibrance", 0.0)),
        rows_per_chunk=_optional(adjust_raw, "rows_per_chunk", int),
    )
    extract = ExtractConfig(
        subtract_black=bool(extract_raw.get("subtract_black", False)),
        include_rgb=bool(extract_raw.get("include_rgb", False)),
    )

    return AppConfig(
        decode=parse_decode_params(raw.get("decode") or {}),
        adjust=adjust,
        extract=extract,
        log_level=str(raw.get("log_level", "INFO")),
        log_file=_expand_path(raw.get("log_file"), base),
    )
