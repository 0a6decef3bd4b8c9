"""
Module: export.renderer

Purpose:
    Package a rendered bitmap into a paginated A4 PDF using ReportLab.
    Each planned slice becomes one page, drawn inside the page margins at
    the full content width.

Key Functions:
    - render_bitmap_to_pdf(): Slice a bitmap and write the PDF

Key Classes:
    - PageGeometry: Page size and margin in points
    - RenderResult: Page count and whether the fallback was used
    - ExportStage: Progress stages reported to callers

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - export.slicer: Slice planning and cropping

Used By:
    - export.controller: Export pipeline
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from paper_generator.common.constants import EXPORT_DEFAULTS

from .slicer import PageSlice, crop_slice, plan_slices

logger = logging.getLogger(__name__)

A4_WIDTH_PT, A4_HEIGHT_PT = A4


class ExportStage(str, Enum):
    """Export progress, in the order stages are entered."""

    IDLE = "idle"
    CAPTURING = "capturing"
    SLICING = "slicing"
    PACKAGING = "packaging"
    SAVED = "saved"
    FAILED = "failed"


StageCallback = Callable[[ExportStage], None]


@dataclass(frozen=True)
class PageGeometry:
    """
    Output page geometry in points.

    Attributes:
        page_width: Page width (A4 by default)
        page_height: Page height (A4 by default)
        margin: Padding on every side of the content box
    """

    page_width: float = A4_WIDTH_PT
    page_height: float = A4_HEIGHT_PT
    margin: float = EXPORT_DEFAULTS.margin_pt

    def __post_init__(self) -> None:
        if self.content_width <= 0 or self.content_height <= 0:
            raise ValueError(f"Margin {self.margin} leaves no room on a {self.page_width}x{self.page_height} page")

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def content_height(self) -> float:
        return self.page_height - 2 * self.margin


@dataclass(frozen=True)
class RenderResult:
    """Outcome of one render: pages written and whether slicing fell back."""

    page_count: int
    degraded: bool = False


def render_bitmap_to_pdf(
    bitmap: Image.Image,
    output_path: Path,
    geometry: Optional[PageGeometry] = None,
    on_stage: Optional[StageCallback] = None,
) -> RenderResult:
    """
    Render a bitmap to a paginated PDF.

    The first slice goes on the first page and every later slice on a new
    page, each drawn at the top-left of the content box. The file is only
    written once every page is drawn; if writing fails any partial file is
    removed.

    Args:
        bitmap: Rendered document (RGB or RGBA)
        output_path: Path to write PDF
        geometry: Page geometry, A4 with 35 pt margins by default
        on_stage: Called with SLICING then PACKAGING

    Returns:
        RenderResult

    Raises:
        ValueError: If the bitmap has no area
        OSError: If the PDF cannot be written

    Example:
        >>> render_bitmap_to_pdf(Image.new("RGB", (794 * 3, 5000), "white"), Path("paper.pdf"))
        RenderResult(page_count=2, degraded=False)
    """
    geometry = geometry or PageGeometry()
    output_path = Path(output_path)

    if on_stage:
        on_stage(ExportStage.SLICING)
    slices = plan_slices(bitmap.width, bitmap.height, geometry.content_width, geometry.content_height)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    c = canvas.Canvas(str(output_path), pagesize=(geometry.page_width, geometry.page_height))

    page_count = 0
    degraded = False
    for page_slice in slices:
        if page_count > 0:
            c.showPage()
        try:
            piece = crop_slice(bitmap, page_slice)
        except (OSError, ValueError, MemoryError) as e:
            # NOTE: The fallback draws the WHOLE unsliced bitmap on one page
            # at full-bitmap scale and stops slicing. Content below the first
            # page height is clipped.
            logger.warning(f"Could not crop slice {page_slice.index}: {e}. Drawing unsliced bitmap instead")
            _draw_unsliced(c, bitmap, geometry)
            page_count += 1
            degraded = True
            break
        _draw_slice(c, piece, page_slice, geometry)
        page_count += 1

    if on_stage:
        on_stage(ExportStage.PACKAGING)
    try:
        c.showPage()
        c.save()
    except Exception:
        output_path.unlink(missing_ok=True)
        raise

    logger.info(f"Rendered {page_count} page(s) to {output_path}")
    return RenderResult(page_count=page_count, degraded=degraded)


def _draw_slice(
    c: canvas.Canvas,
    piece: Image.Image,
    page_slice: PageSlice,
    geometry: PageGeometry,
) -> None:
    # ReportLab's origin is bottom-left
    y_pt = geometry.page_height - geometry.margin - page_slice.dest_height
    c.drawImage(
        _pil_to_reader(piece),
        geometry.margin,
        y_pt,
        width=page_slice.dest_width,
        height=page_slice.dest_height,
    )


def _draw_unsliced(c: canvas.Canvas, bitmap: Image.Image, geometry: PageGeometry) -> None:
    width_ratio = geometry.content_width / bitmap.width
    full_height = bitmap.height * width_ratio
    c.drawImage(
        _pil_to_reader(bitmap),
        geometry.margin,
        geometry.page_height - geometry.margin - full_height,
        width=geometry.content_width,
        height=full_height,
    )


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """Convert a PIL image to a ReportLab ImageReader via an in-memory PNG."""
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)
