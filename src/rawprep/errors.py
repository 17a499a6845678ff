from __future__ import annotations


class RawPrepError(RuntimeError):
    pass


class UnsupportedFormatError(RawPrepError):
    """Pixel buffer layout the color adjuster cannot process."""


class UnsupportedCFAError(RawPrepError):
    """Sensor mosaic layout other than RGGB."""


class DecodeError(RawPrepError):
    pass


class MissingDependencyError(DecodeError):
    pass
