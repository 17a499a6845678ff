from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
import json
from pathlib import Path
from typing import Any


@dataclass
class ExtractionRecord:
    source_filename: str | None
    tensor_filename: str
    width: int
    height: int
    channel_order: tuple[str, ...]
    subtract_black: bool
    includes_rgb: bool
    metadata: dict[str, Any]
    tool_version: str
    created_at_utc: str


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def write_extraction_record(path: Path, record: ExtractionRecord) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(asdict(record), f, indent=2, sort_keys=True)
        f.write("\n")
