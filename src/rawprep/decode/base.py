from __future__ import annotations

from pathlib import Path
from typing import Protocol, Union

from rawprep.errors import DecodeError, MissingDependencyError, UnsupportedFormatError

from .types import RawMetadata


RawSource = Union[str, Path, bytes, bytearray]


class RawHandle(Protocol):
    def metadata(self) -> RawMetadata:
        ...

    def close(self) -> None:
        ...


class Decoder(Protocol):
    def open(self, source: RawSource) -> RawHandle:
        ...


__all__ = [
    "DecodeError",
    "Decoder",
    "MissingDependencyError",
    "RawHandle",
    "RawSource",
    "UnsupportedFormatError",
]
