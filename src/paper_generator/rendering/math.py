"""
Module: rendering.math

Purpose:
    Math typesetting for the preview. Splits model output into plain text
    and $...$ / $$...$$ math segments and renders math segments to PNG with
    matplotlib's mathtext engine.

Key Functions:
    - split_math_segments(): Tokenize text into text/inline/display segments
    - render_math_png(): Render one expression to PNG bytes (cached)
    - clean_for_mathtext(): Drop LaTeX macros mathtext does not support

Key Classes:
    - MathSegment: One segment of the tokenized text
    - MathRenderError: Expression could not be typeset

Dependencies:
    - matplotlib (Agg): mathtext rendering

Used By:
    - gui.widgets.paper_preview: Typeset preview
    - gui.widgets.answer_display: Typeset answers
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import List

import matplotlib
matplotlib.use("Agg")
from matplotlib import mathtext
from matplotlib.font_manager import FontProperties

logger = logging.getLogger(__name__)

TEXT = "text"
INLINE = "inline"
DISPLAY = "display"

_UNSUPPORTED_MACROS = re.compile(r"\\(displaystyle|left|right)(?![A-Za-z])")
_BOXED = re.compile(r"\\boxed\{(.*?)\}")


class MathRenderError(Exception):
    """mathtext could not parse or draw an expression."""
    pass


@dataclass(frozen=True)
class MathSegment:
    """A run of plain text or a single math expression (without delimiters)."""

    kind: str
    content: str

    @property
    def is_math(self) -> bool:
        return self.kind != TEXT


def _find_closing(text: str, delim: str, start: int) -> int:
    """Index of the next unescaped delim at or after start, or -1."""
    i = start
    while True:
        i = text.find(delim, i)
        if i == -1:
            return -1
        if i > 0 and text[i - 1] == "\\":
            i += 1
            continue
        return i


def split_math_segments(text: str) -> List[MathSegment]:
    """
    Tokenize text into plain and math segments.

    $$...$$ is display math, $...$ is inline math. An escaped \\$ becomes a
    literal $ in plain text, and an opening $ without a matching close stays
    plain text. Adjacent text is merged into one segment.

    Example:
        >>> [s.kind for s in split_math_segments("Solve $x^2 = 4$.")]
        ['text', 'inline', 'text']
    """
    segments: List[MathSegment] = []
    buffer: List[str] = []

    def flush() -> None:
        if buffer:
            segments.append(MathSegment(TEXT, "".join(buffer)))
            buffer.clear()

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\" and i + 1 < n and text[i + 1] == "$":
            buffer.append("$")
            i += 2
            continue
        if ch != "$":
            buffer.append(ch)
            i += 1
            continue

        if text.startswith("$$", i):
            end = _find_closing(text, "$$", i + 2)
            if end != -1 and text[i + 2:end].strip():
                flush()
                segments.append(MathSegment(DISPLAY, text[i + 2:end].strip()))
                i = end + 2
                continue
        else:
            end = _find_closing(text, "$", i + 1)
            if end != -1 and text[i + 1:end].strip() and "\n\n" not in text[i + 1:end]:
                flush()
                segments.append(MathSegment(INLINE, text[i + 1:end].strip()))
                i = end + 1
                continue

        buffer.append(ch)
        i += 1

    flush()
    return segments


def contains_math(text: str) -> bool:
    return any(s.is_math for s in split_math_segments(text))


def clean_for_mathtext(expr: str) -> str:
    s = _BOXED.sub(r"\1", expr.strip())
    s = _UNSUPPORTED_MACROS.sub("", s)
    return s.strip()


@lru_cache(maxsize=512)
def render_math_png(expr: str, *, font_size: float = 12, dpi: int = 150, display: bool = False) -> bytes:
    """
    Render one expression to a transparent PNG.

    Args:
        expr: Expression without surrounding dollar signs
        font_size: Font size in points
        dpi: Output resolution
        display: Display math is drawn 20% larger

    Returns:
        PNG bytes

    Raises:
        MathRenderError: If mathtext cannot parse the expression
    """
    size = font_size * 1.2 if display else font_size
    buf = io.BytesIO()
    try:
        mathtext.math_to_image(
            f"${clean_for_mathtext(expr)}$",
            buf,
            prop=FontProperties(size=size),
            dpi=dpi,
            format="png",
        )
    except (ValueError, RuntimeError) as e:
        logger.warning(f"Could not typeset {expr!r}: {e}")
        raise MathRenderError(f"Could not typeset {expr!r}: {e}") from e
    return buf.getvalue()
