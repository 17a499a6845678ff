from .adjust import ColorAdjuster, ColorAdjustment, adjust_colors, adjust_saturation
from .hsl import hsl_to_rgb, rgb_to_hsl

__all__ = [
    "ColorAdjuster",
    "ColorAdjustment",
    "adjust_colors",
    "adjust_saturation",
    "hsl_to_rgb",
    "rgb_to_hsl",
]
