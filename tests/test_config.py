from __future__ import annotations

from pathlib import Path

import pytest

from rawprep.config import DecodeParams, load_config, parse_decode_params


def test_load_config_defaults_without_path() -> None:
    cfg = load_config(None)
    assert cfg.decode == DecodeParams()
    assert cfg.adjust.saturation == 0.0
    assert cfg.extract.subtract_black is False
    assert cfg.log_file is None


def test_load_config_reads_sections(tmp_path: Path) -> None:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(
        """
log_level: DEBUG
log_file: ./logs/rawprep.log
decode:
  demosaic: dcb
  output_bps: 16
  gamma: [1.0, 1.0]
  user_wb: [2.0, 1.0, 1.5, 1.0]
  noise_threshold: 100
adjust:
  saturation: 20
  vibrance: -10
  rows_per_chunk: 64
extract:
  subtract_black: true
""",
        encoding="utf-8",
    )

    cfg = load_config(cfg_file)
    assert cfg.log_level == "DEBUG"
    assert cfg.log_file == (tmp_path / "logs" / "rawprep.log").resolve()
    assert cfg.decode.demosaic == "DCB"
    assert cfg.decode.output_bps == 16
    assert cfg.decode.gamma == (1.0, 1.0)
    assert cfg.decode.user_wb == (2.0, 1.0, 1.5, 1.0)
    assert cfg.decode.noise_threshold == 100.0
    assert cfg.decode.exp_shift is None
    assert cfg.adjust.saturation == 20.0
    assert cfg.adjust.vibrance == -10.0
    assert cfg.adjust.rows_per_chunk == 64
    assert cfg.extract.subtract_black is True
    assert cfg.extract.include_rgb is False


def test_load_config_empty_file(tmp_path: Path) -> None:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("", encoding="utf-8")
    assert load_config(cfg_file).decode == DecodeParams()


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("decode:\n  demosiac: AHD\n", encoding="utf-8")
    with pytest.raises(ValueError, match="demosiac"):
        load_config(cfg_file)

    cfg_file.write_text("watch:\n  source_dir: ./in\n", encoding="utf-8")
    with pytest.raises(ValueError, match="watch"):
        load_config(cfg_file)


def test_decode_params_validation() -> None:
    with pytest.raises(ValueError):
        parse_decode_params({"demosaic": "bogus"})
    with pytest.raises(ValueError):
        parse_decode_params({"output_bps": 12})
    with pytest.raises(ValueError):
        parse_decode_params({"gamma": [2.2]})
    with pytest.raises(ValueError):
        DecodeParams(user_flip=2)
    with pytest.raises(ValueError):
        DecodeParams(output_color="CMYK")


def test_decode_params_are_immutable() -> None:
    params = DecodeParams()
    with pytest.raises(AttributeError):
        params.half_size = True  # type: ignore[misc]
