"""
Module: export

Purpose:
    Turn the rendered question paper preview into a paginated A4 PDF.

Key Functions:
    - export_paper(): Capture, slice and package
    - plan_slices(): Page slice arithmetic

Dependencies:
    - reportlab: PDF generation
    - PIL: Bitmaps

Used By:
    - gui.main_window: Download PDF button
"""

from .slicer import PageSlice, plan_slices, crop_slice
from .renderer import ExportStage, PageGeometry, RenderResult, render_bitmap_to_pdf
from .controller import ExportError, ExportResult, export_paper

__all__ = [
    # Slicing
    "PageSlice",
    "plan_slices",
    "crop_slice",
    # Rendering
    "ExportStage",
    "PageGeometry",
    "RenderResult",
    "render_bitmap_to_pdf",
    # Controller
    "ExportError",
    "ExportResult",
    "export_paper",
]
