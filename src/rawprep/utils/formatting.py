from __future__ import annotations

from fractions import Fraction


def shutter_seconds_to_fraction(value: float | None, max_denominator: int = 1000000) -> str | None:
    if value is None or value <= 0:
        return None
    if value >= 1.0:
        return f"{value:g}"

    frac = Fraction(value).limit_denominator(max_denominator)
    return f"{frac.numerator}/{frac.denominator}"


def aperture_to_text(value: float | None) -> str | None:
    if value is None or value <= 0:
        return None
    return f"f/{value:.1f}"


def dimensions_to_text(width: int, height: int) -> str:
    return f"{int(width)}x{int(height)}"
