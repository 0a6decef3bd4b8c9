"""
Builds the QTextDocument shown in the paper preview and answer panel.

The same builder produces the on-screen document and the document that is
captured for PDF export, so what is exported is what the preview shows.
Math segments are typeset with rendering.math and registered as image
resources on the document; when typesetting fails the raw LaTeX is shown.
"""
from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import List, Optional

from PySide6.QtCore import QUrl
from PySide6.QtGui import QFont, QImage, QTextDocument

from paper_generator.common.constants import EXPORT_DEFAULTS
from paper_generator.core.models import GenerationConfig
from paper_generator.gui.styles.theme import Colors, Fonts
from paper_generator.rendering import MathRenderError, render_math_png, split_math_segments
from paper_generator.rendering.math import DISPLAY

logger = logging.getLogger(__name__)

# Math PNGs are rendered at the capture scale so they stay sharp in the PDF
MATH_DPI = 96 * EXPORT_DEFAULTS.capture_scale
DOCUMENT_MARGIN_PX = 24


@dataclass(frozen=True)
class DocumentOptions:
    font_size_pt: float
    typeset: bool = False
    header_title: Optional[str] = None
    header_details: Optional[str] = None

    @classmethod
    def for_paper(cls, config: GenerationConfig, *, typeset: bool) -> "DocumentOptions":
        return cls(
            font_size_pt=config.font_size_pt,
            typeset=typeset and config.is_math_paper,
            header_title=config.institution_name if config.show_paper_header else None,
            header_details=paper_details(config) if config.show_paper_header else None,
        )

    @classmethod
    def for_answers(cls, config: GenerationConfig, *, typeset: bool) -> "DocumentOptions":
        return cls(font_size_pt=config.font_size_pt, typeset=typeset and config.is_math_paper)


class _MathImages:
    """Registers rendered math as numbered image resources on one document."""

    def __init__(self, document: QTextDocument, font_size_pt: float) -> None:
        self.document = document
        self.font_size_pt = font_size_pt
        self.count = 0
        self.failures = 0

    def tag(self, expr: str, display: bool) -> Optional[str]:
        try:
            png = render_math_png(expr, font_size=self.font_size_pt, dpi=MATH_DPI, display=display)
        except MathRenderError:
            self.failures += 1
            return None
        image = QImage.fromData(png, "PNG")
        if image.isNull():
            self.failures += 1
            return None
        name = f"math:{self.count}"
        self.count += 1
        self.document.addResource(QTextDocument.ResourceType.ImageResource, QUrl(name), image)
        # Logical size: the PNG holds capture_scale pixels per screen pixel
        scale = EXPORT_DEFAULTS.capture_scale
        return (
            f'<img src="{name}" width="{image.width() // scale}" '
            f'height="{image.height() // scale}" style="vertical-align: middle;"/>'
        )


def _escape_text(text: str) -> str:
    return html.escape(text).replace("\n", "<br/>")


def body_html(text: str, images: Optional[_MathImages]) -> str:
    """HTML for one block of model output, with math typeset when images is given."""
    parts: List[str] = []
    for segment in split_math_segments(text):
        if not segment.is_math:
            parts.append(_escape_text(segment.content))
            continue
        display = segment.kind == DISPLAY
        tag = images.tag(segment.content, display) if images else None
        if tag is None:
            delim = "$$" if display else "$"
            parts.append(_escape_text(f"{delim}{segment.content}{delim}"))
        elif display:
            parts.append(f'<br/><span style="display: block;">{tag}</span><br/>')
        else:
            parts.append(tag)
    return "".join(parts)


def paper_details(config: GenerationConfig) -> str:
    return (
        f"Subject: Based on Uploaded Chapter | Type: {config.question_type.value} | "
        f"Total Questions: {config.num_questions}"
    )


def header_html(title: str, details: Optional[str] = None) -> str:
    details_html = f'<br/><span style="font-size: 0.9em;">{html.escape(details)}</span>' if details else ""
    return (
        f'<div align="center"><span style="font-size: 1.6em; font-weight: bold;">{html.escape(title)}</span>'
        f'<br/><span style="font-size: 1.1em;">Question Paper</span>{details_html}</div>'
        f'<hr style="color: {Colors.PAPER_TEXT};"/>'
    )


def build_document(
    text: str,
    options: DocumentOptions,
    *,
    width_px: int = EXPORT_DEFAULTS.preview_width_px,
) -> QTextDocument:
    """
    Build a document for the given text.

    Args:
        text: Questions or answers text
        options: Font size, typesetting and optional header
        width_px: Layout width in logical pixels

    Returns:
        A laid-out QTextDocument (black on white)
    """
    document = QTextDocument()
    document.setDocumentMargin(DOCUMENT_MARGIN_PX)
    font = QFont(Fonts.PAPER_FONT.split(",")[0].strip(" '\""))
    font.setPointSizeF(options.font_size_pt)
    document.setDefaultFont(font)
    document.setDefaultStyleSheet(f"body {{ color: {Colors.PAPER_TEXT}; }}")

    images = _MathImages(document, options.font_size_pt) if options.typeset else None
    parts = []
    if options.header_title:
        parts.append(header_html(options.header_title, options.header_details))
    parts.append(f"<div>{body_html(text, images)}</div>")
    document.setHtml(f"<body>{''.join(parts)}</body>")
    document.setTextWidth(width_px)

    if images and images.failures:
        logger.warning(f"{images.failures} math expression(s) could not be typeset; showing raw LaTeX")
    return document
