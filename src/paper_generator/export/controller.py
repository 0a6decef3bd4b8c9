"""
Module: export.controller

Purpose:
    Orchestrate one export: capture the preview to a bitmap, slice it into
    pages and write the PDF. Capture -> Slice -> Package -> Saved.

Key Functions:
    - export_paper(): Main entry point for exporting the preview

Key Classes:
    - ExportResult: Path, page count and fallback flag
    - ExportError: Exception for capture or packaging failures

Dependencies:
    - export.renderer: PDF packaging
    - PIL: Captured bitmap

Used By:
    - gui.main_window: Download PDF button
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from PIL import Image

from .renderer import ExportStage, PageGeometry, StageCallback, render_bitmap_to_pdf

logger = logging.getLogger(__name__)

CaptureFn = Callable[[], Image.Image]


class ExportError(Exception):
    """Error during capture or PDF packaging."""
    pass


@dataclass(frozen=True)
class ExportResult:
    """
    Completed export (immutable).

    Attributes:
        path: Written PDF
        page_count: Pages in the PDF
        degraded: True when slicing fell back to the unsliced bitmap
    """

    path: Path
    page_count: int
    degraded: bool = False


def export_paper(
    capture: CaptureFn,
    output_path: Path,
    *,
    geometry: Optional[PageGeometry] = None,
    on_stage: Optional[StageCallback] = None,
) -> ExportResult:
    """
    Export the captured preview to a PDF.

    Pipeline:
    1. Capture the document to a bitmap
    2. Plan and crop page slices
    3. Draw pages and write the file

    Failures are terminal: FAILED is reported and ExportError raised; the
    caller decides whether to try again.

    Args:
        capture: Returns the rendered document as a PIL image
        output_path: Destination PDF
        geometry: Page geometry (A4, 35 pt margin by default)
        on_stage: Progress callback receiving ExportStage values

    Returns:
        ExportResult

    Raises:
        ExportError: If capture or packaging fails

    Example:
        >>> result = export_paper(lambda: bitmap, Path("My_School_QuestionPaper.pdf"))
        >>> result.page_count
        3
    """
    def report(stage: ExportStage) -> None:
        if on_stage:
            on_stage(stage)

    start_time = time.perf_counter()
    output_path = Path(output_path)

    report(ExportStage.CAPTURING)
    try:
        bitmap = capture()
    except Exception as e:
        report(ExportStage.FAILED)
        logger.error(f"Capture failed: {e}")
        raise ExportError(f"Failed to capture the preview: {e}") from e

    if bitmap is None or bitmap.width <= 0 or bitmap.height <= 0:
        report(ExportStage.FAILED)
        raise ExportError("Failed to capture the preview: the rendered document is empty.")

    try:
        result = render_bitmap_to_pdf(bitmap, output_path, geometry, report)
    except (OSError, ValueError, MemoryError) as e:
        report(ExportStage.FAILED)
        logger.error(f"PDF packaging failed: {e}")
        raise ExportError(f"Failed to generate PDF: {e}") from e

    report(ExportStage.SAVED)
    elapsed = time.perf_counter() - start_time
    logger.info(f"Exported {result.page_count} page(s) to {output_path} in {elapsed:.2f}s")
    if result.degraded:
        logger.warning("Export used the unsliced fallback; the PDF may be missing content")
    return ExportResult(path=output_path, page_count=result.page_count, degraded=result.degraded)
