"""
Module: export.slicer

Purpose:
    Plan how a tall rendered bitmap is cut into page-sized horizontal
    slices. Pure arithmetic plus a PIL crop; no PDF code here.

Key Functions:
    - plan_slices(): Slice boundaries in source pixels and page points
    - crop_slice(): Crop one planned slice from the bitmap

Key Classes:
    - PageSlice: One planned slice

Algorithm:
    1. width_ratio = content_width / bitmap_width (points per pixel)
    2. slice_height = content_height / width_ratio (pixels per page)
    3. slice i starts at round(i * slice_height); the last one ends exactly
       at bitmap_height, so every boundary is a whole pixel
    4. dest_height = source_height * width_ratio

Dependencies:
    - PIL: Cropping

Used By:
    - export.renderer: PDF packaging
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List

from PIL import Image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageSlice:
    """
    One horizontal slice of the bitmap mapped onto one page (immutable).

    Attributes:
        index: 0-based page index
        source_y: Top edge in bitmap pixels
        source_height: Height in bitmap pixels
        dest_width: Drawn width in points
        dest_height: Drawn height in points

    Example:
        >>> s = plan_slices(100, 250, 50, 50)[2]
        >>> (s.source_y, s.source_height, s.dest_height)
        (200.0, 50.0, 25.0)
    """

    index: int
    source_y: float
    source_height: float
    dest_width: float
    dest_height: float

    @property
    def source_bottom(self) -> float:
        return self.source_y + self.source_height


def plan_slices(
    bitmap_width: int,
    bitmap_height: int,
    content_width: float,
    content_height: float,
) -> List[PageSlice]:
    """
    Compute the page slices for a bitmap.

    Boundaries are computed from the index rather than accumulated, so
    there is no floating-point drift across many pages, and are rounded
    to whole pixels so every slice crops cleanly.

    Args:
        bitmap_width: Bitmap width in pixels
        bitmap_height: Bitmap height in pixels
        content_width: Page content box width in points
        content_height: Page content box height in points

    Returns:
        Slices in top-to-bottom order, ceil(H / slice_height) of them unless
        the remainder is under half a pixel

    Raises:
        ValueError: If any dimension is not positive
    """
    if bitmap_width <= 0 or bitmap_height <= 0:
        raise ValueError(f"Bitmap must have positive size, got {bitmap_width}x{bitmap_height}")
    if content_width <= 0 or content_height <= 0:
        raise ValueError(f"Content box must have positive size, got {content_width}x{content_height}")

    width_ratio = content_width / bitmap_width
    slice_height = content_height / width_ratio

    # Whole-pixel tops; a tail under half a pixel rounds onto the bitmap
    # bottom and is folded into the previous slice.
    tops = [round(i * slice_height) for i in range(math.ceil(bitmap_height / slice_height))]
    tops = [top for top in tops if top < bitmap_height]
    bottoms = tops[1:] + [bitmap_height]

    slices: List[PageSlice] = []
    for index, (top, bottom) in enumerate(zip(tops, bottoms)):
        height = float(bottom - top)
        slices.append(PageSlice(
            index=index,
            source_y=float(top),
            source_height=height,
            dest_width=content_width,
            dest_height=height * width_ratio,
        ))

    logger.debug(
        f"Planned {len(slices)} slice(s) for {bitmap_width}x{bitmap_height} bitmap "
        f"({slice_height:.1f}px per page)"
    )
    return slices


def crop_slice(bitmap: Image.Image, page_slice: PageSlice) -> Image.Image:
    """
    Crop a full-width slice from the bitmap.

    Fractional boundaries are rounded to whole pixels; the crop is always at
    least one pixel tall.

    Raises:
        ValueError: If the slice lies outside the bitmap
    """
    top = int(round(page_slice.source_y))
    bottom = min(int(round(page_slice.source_bottom)), bitmap.height)
    if top < 0 or top >= bitmap.height:
        raise ValueError(f"Slice {page_slice.index} starts outside bitmap: y={page_slice.source_y}")
    bottom = max(bottom, top + 1)
    return bitmap.crop((0, top, bitmap.width, bottom))
