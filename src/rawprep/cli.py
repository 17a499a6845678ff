from __future__ import annotations

import argparse
from dataclasses import asdict, replace
import json
import logging
from pathlib import Path
import sys
from typing import Any

from rawprep import __version__
from rawprep.color import ColorAdjustment
from rawprep.config import AppConfig, load_config
from rawprep.decode import LibRawDecoder, RawMetadata, libraw_version
from rawprep.isp_inputs import prepare_isp_inputs
from rawprep.mosaic import MosaicExtractor
from rawprep.utils.formatting import aperture_to_text, dimensions_to_text, shutter_seconds_to_fraction
from rawprep.utils.logging_utils import configure_logging
from rawprep.write import (
    ExtractionRecord,
    utc_now_iso,
    write_extraction_record,
    write_image,
    write_tensor_npz,
    write_thumbnail_bitmap,
)


logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=None, help="Optional path to YAML config")
    common.add_argument("--debug", action="store_true", help="Log decoder internals at DEBUG level")

    parser = argparse.ArgumentParser(prog="rawprep")
    sub = parser.add_subparsers(dest="command", required=True)

    info = sub.add_parser("info", parents=[common], help="Show RAW metadata and calibration")
    info.add_argument("input", help="Input RAW file")
    info.add_argument("--json", action="store_true", help="Emit machine-readable JSON")

    render = sub.add_parser("render", parents=[common], help="Decode a RAW file with saturation/vibrance")
    render.add_argument("input", help="Input RAW file")
    render.add_argument("--out", required=True, help="Output image path (.png, .jpg, .tiff)")
    render.add_argument("--saturation", type=float, default=None, help="Saturation, -100..100")
    render.add_argument("--vibrance", type=float, default=None, help="Vibrance, -100..100")
    render.add_argument("--half-size", action="store_true", help="Decode at half resolution")
    render.add_argument("--output-bps", type=int, choices=(8, 16), default=None, help="Output bits per sample")

    extract = sub.add_parser("extract", parents=[common], help="Write normalized RGGB planes for an ISP model")
    extract.add_argument("input", help="Input RAW file")
    extract.add_argument("--out", required=True, help="Output .npz path")
    extract.add_argument("--subtract-black", action="store_true", help="Normalize between black level and maximum")
    extract.add_argument("--with-rgb", action="store_true", help="Also store bilinear linear RGB planes")
    extract.add_argument("--json", action="store_true", help="Emit machine-readable JSON report")

    thumb = sub.add_parser("thumbnail", parents=[common], help="Write the embedded thumbnail")
    thumb.add_argument("input", help="Input RAW file")
    thumb.add_argument("--out", required=True, help="Output path (.jpg for JPEG thumbnails)")

    version = sub.add_parser("version", parents=[common], help="Show tool and LibRaw versions")
    version.add_argument("--json", action="store_true", help="Emit machine-readable JSON")

    return parser


def _setup(args: argparse.Namespace) -> AppConfig:
    config = load_config(args.config)
    configure_logging(config.log_level, config.log_file, debug=bool(args.debug))
    return config


def _metadata_payload(meta: RawMetadata) -> dict[str, Any]:
    data = asdict(meta)
    data["source_path"] = str(meta.source_path) if meta.source_path is not None else None
    data["shutter"] = shutter_seconds_to_fraction(meta.shutter_s)
    return data


def _cmd_info(args: argparse.Namespace) -> int:
    config = _setup(args)
    decoder = LibRawDecoder(config.decode)
    with decoder.open(Path(args.input).expanduser().resolve()) as raw_file:
        meta = raw_file.metadata()
        info = raw_file.processing_info()

    if args.json:
        print(json.dumps({"metadata": _metadata_payload(meta), "processing": info}, indent=2))
        return 0

    camera_text = " ".join(v for v in [meta.camera_make, meta.camera_model] if v) or "unknown"
    print(f"Input RAW: {meta.source_path}")
    print(f"Camera: {camera_text}")
    print(f"Raw size: {dimensions_to_text(meta.raw_width, meta.raw_height)}")
    print(f"Image size: {dimensions_to_text(meta.width, meta.height)} (flip={meta.flip})")
    print(f"CFA: {meta.cfa_pattern or 'none'} ({meta.color_desc}, {meta.num_colors} colors)")
    print(f"Black level: {meta.black_level}  White level: {meta.white_level}")
    print(f"Camera WB: {', '.join(f'{v:.4f}' for v in meta.camera_wb)}")
    exposure = [
        f"ISO {meta.iso:g}" if meta.iso else None,
        shutter_seconds_to_fraction(meta.shutter_s),
        aperture_to_text(meta.aperture_f),
        f"{meta.focal_length_mm:g}mm" if meta.focal_length_mm else None,
    ]
    print(f"Exposure: {' '.join(v for v in exposure if v) or 'unknown'}")
    return 0


def _cmd_render(args: argparse.Namespace) -> int:
    config = _setup(args)

    params = config.decode
    if args.half_size:
        params = replace(params, half_size=True)
    if args.output_bps is not None:
        params = replace(params, output_bps=args.output_bps)

    saturation = config.adjust.saturation if args.saturation is None else args.saturation
    vibrance = config.adjust.vibrance if args.vibrance is None else args.vibrance
    adjustment = ColorAdjustment.from_user_scale(saturation, vibrance)

    out_path = Path(args.out).expanduser().resolve()
    decoder = LibRawDecoder(params)
    with decoder.open(Path(args.input).expanduser().resolve()) as raw_file:
        buffer = raw_file.render(adjustment=adjustment, rows_per_chunk=config.adjust.rows_per_chunk)

    write_image(out_path, buffer)
    logger.info("wrote %s (%dx%d, %d-bit)", out_path, buffer.width, buffer.height, buffer.bits_per_channel)
    print(str(out_path))
    return 0


def _cmd_extract(args: argparse.Namespace) -> int:
    config = _setup(args)

    subtract_black = bool(args.subtract_black or config.extract.subtract_black)
    include_rgb = bool(args.with_rgb or config.extract.include_rgb)
    input_path = Path(args.input).expanduser().resolve()
    out_path = Path(args.out).expanduser().resolve()

    decoder = LibRawDecoder(config.decode)
    with decoder.open(input_path) as raw_file:
        inputs = prepare_isp_inputs(
            raw_file,
            extractor=MosaicExtractor(subtract_black=subtract_black),
            include_rgb=include_rgb,
        )

    write_tensor_npz(out_path, inputs.tensor, rgb=inputs.rgb)
    record = ExtractionRecord(
        source_filename=input_path.name,
        tensor_filename=out_path.name,
        width=inputs.tensor.width,
        height=inputs.tensor.height,
        channel_order=inputs.tensor.CHANNEL_ORDER,
        subtract_black=subtract_black,
        includes_rgb=inputs.rgb is not None,
        metadata=inputs.metadata.to_json_dict(),
        tool_version=__version__,
        created_at_utc=utc_now_iso(),
    )
    record_path = out_path.with_suffix(".json")
    write_extraction_record(record_path, record)

    if args.json:
        payload = asdict(record)
        payload["tensor_path"] = str(out_path)
        payload["record_path"] = str(record_path)
        print(json.dumps(payload, indent=2))
        return 0

    print(f"Tensor: {out_path} ({dimensions_to_text(record.width, record.height)} x {len(record.channel_order)})")
    print(f"Record: {record_path}")
    return 0


def _cmd_thumbnail(args: argparse.Namespace) -> int:
    config = _setup(args)
    out_path = Path(args.out).expanduser().resolve()

    decoder = LibRawDecoder(config.decode)
    with decoder.open(Path(args.input).expanduser().resolve()) as raw_file:
        thumb = raw_file.thumbnail()

    if thumb is None:
        print("error: no usable thumbnail", file=sys.stderr)
        return 1

    if thumb.format == "jpeg":
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(thumb.data)
    else:
        write_thumbnail_bitmap(out_path, thumb.data)
    print(str(out_path))
    return 0


def _cmd_version(args: argparse.Namespace) -> int:
    _setup(args)
    payload = {"rawprep": __version__, "libraw": libraw_version()}
    if args.json:
        print(json.dumps(payload, indent=2))
        return 0
    print(f"rawprep {payload['rawprep']} (LibRaw {payload['libraw']})")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "info":
            return _cmd_info(args)
        if args.command == "render":
            return _cmd_render(args)
        if args.command == "extract":
            return _cmd_extract(args)
        if args.command == "thumbnail":
            return _cmd_thumbnail(args)
        if args.command == "version":
            return _cmd_version(args)

        parser.error(f"unknown command: {args.command}")
        return 2
    except Exception as exc:
        logger.exception("fatal error")
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
