"""
Question paper preview: a white A4-width page that mirrors the export.
"""
import logging
from typing import Optional

from PySide6.QtCore import QTimer, Signal
from PySide6.QtGui import QTextDocument
from PySide6.QtWidgets import QTextBrowser

from paper_generator.common.constants import EXPORT_DEFAULTS
from paper_generator.core.models import GenerationConfig
from paper_generator.gui.styles.theme import get_colors
from paper_generator.gui.utils.paper_document import DocumentOptions, build_document

logger = logging.getLogger(__name__)

EMPTY_PREVIEW_TEXT = "Your generated question paper will appear here."


class PaperPreview(QTextBrowser):
    """
    Shows the questions segment as the paper will be exported.

    Content updates show the raw text at once; for math papers a debounced
    re-typeset follows `typeset_debounce_ms` after the last update.
    `typesettingChanged(bool)` brackets each typesetting pass.
    """

    typesettingChanged = Signal(bool)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._text = ""
        self._config = GenerationConfig()
        self._typeset = False
        self._document: Optional[QTextDocument] = None

        self.setOpenLinks(False)
        self.setMinimumWidth(EXPORT_DEFAULTS.preview_width_px // 2)

        self._typeset_timer = QTimer(self)
        self._typeset_timer.setSingleShot(True)
        self._typeset_timer.setInterval(EXPORT_DEFAULTS.typeset_debounce_ms)
        self._typeset_timer.timeout.connect(self.typeset_now)

        self.update_theme()
        self._render()

    @property
    def text(self) -> str:
        return self._text

    @property
    def has_content(self) -> bool:
        return bool(self._text.strip())

    @property
    def is_typeset(self) -> bool:
        return self._typeset

    @property
    def typeset_pending(self) -> bool:
        return self._typeset_timer.isActive()

    def set_content(self, text: str, config: GenerationConfig) -> None:
        """Show new questions text; schedule typesetting for math papers."""
        self._text = text
        self._config = config
        self._typeset = False
        self._render()
        if config.is_math_paper and self.has_content:
            self._typeset_timer.start()
        else:
            self._typeset_timer.stop()

    def set_config(self, config: GenerationConfig) -> None:
        self.set_content(self._text, config)

    def clear_content(self) -> None:
        self.set_content("", self._config)

    def typeset_now(self) -> None:
        """Render math in the current content immediately."""
        self._typeset_timer.stop()
        if not (self._config.is_math_paper and self.has_content):
            return
        self.typesettingChanged.emit(True)
        try:
            self._typeset = True
            self._render()
        finally:
            self.typesettingChanged.emit(False)

    def export_document(self) -> QTextDocument:
        """A fresh document of the current content, typeset when math is on."""
        options = DocumentOptions.for_paper(self._config, typeset=True)
        return build_document(self._text, options)

    def _render(self) -> None:
        if self.has_content:
            options = DocumentOptions.for_paper(self._config, typeset=self._typeset)
            document = build_document(self._text, options)
        else:
            document = QTextDocument()
            document.setPlainText(EMPTY_PREVIEW_TEXT)
        document.setParent(self)
        old = self._document
        self._document = document
        self.setDocument(document)
        if old is not None:
            old.deleteLater()

    def update_theme(self):
        C = get_colors()
        self.setStyleSheet(f"""
            QTextBrowser {{
                background-color: {C.PAPER_BG};
                color: {C.PAPER_TEXT};
                border: 1px solid {C.BORDER};
                border-radius: 4px;
            }}
        """)
