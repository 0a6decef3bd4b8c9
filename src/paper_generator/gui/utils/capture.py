"""
Rasterize a QTextDocument into a PIL image for PDF export.

Runs on the main thread (QTextDocument painting is not thread-safe). The
document is drawn on a white background at `scale` times its logical size.
"""
from __future__ import annotations

import io
import logging
import math

from PIL import Image
from PySide6.QtCore import QBuffer, QIODevice
from PySide6.QtGui import QColor, QImage, QPainter, QTextDocument

from paper_generator.common.constants import EXPORT_DEFAULTS

logger = logging.getLogger(__name__)


def render_document(
    document: QTextDocument,
    *,
    width_px: int = EXPORT_DEFAULTS.preview_width_px,
    scale: int = EXPORT_DEFAULTS.capture_scale,
) -> QImage:
    """Paint the whole document (full scroll height) into a QImage."""
    document.setTextWidth(width_px)
    height_px = max(1, math.ceil(document.size().height()))

    image = QImage(width_px * scale, height_px * scale, QImage.Format.Format_RGB32)
    image.fill(QColor("white"))

    painter = QPainter(image)
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setRenderHint(QPainter.RenderHint.TextAntialiasing)
        painter.scale(scale, scale)
        document.drawContents(painter)
    finally:
        painter.end()
    return image


def qimage_to_pil(image: QImage) -> Image.Image:
    """Convert a QImage to an RGB PIL image via an in-memory PNG."""
    buffer = QBuffer()
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    if not image.save(buffer, "PNG"):
        raise OSError("Could not encode captured image")
    data = bytes(buffer.data())
    buffer.close()
    with Image.open(io.BytesIO(data)) as pil:
        return pil.convert("RGB")


def capture_document(
    document: QTextDocument,
    *,
    width_px: int = EXPORT_DEFAULTS.preview_width_px,
    scale: int = EXPORT_DEFAULTS.capture_scale,
) -> Image.Image:
    """Render a document to a PIL bitmap at `scale`x."""
    image = render_document(document, width_px=width_px, scale=scale)
    logger.info(f"Captured document at {scale}x: {image.width()}x{image.height()} px")
    return qimage_to_pil(image)
