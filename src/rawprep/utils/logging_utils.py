from __future__ import annotations

import logging
from pathlib import Path


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str, log_file: Path | None = None, debug: bool = False) -> None:
    resolved_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=resolved_level, format=LOG_FORMAT, handlers=handlers, force=True)
    # exifread warns about every maker note it cannot parse.
    logging.getLogger("exifread").setLevel(logging.DEBUG if debug else logging.WARNING)
