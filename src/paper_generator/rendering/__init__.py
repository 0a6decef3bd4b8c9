"""Math typesetting for the preview and answers."""

from .math import (
    MathRenderError,
    MathSegment,
    clean_for_mathtext,
    contains_math,
    render_math_png,
    split_math_segments,
)

__all__ = [
    "MathRenderError",
    "MathSegment",
    "clean_for_mathtext",
    "contains_math",
    "render_math_png",
    "split_math_segments",
]
