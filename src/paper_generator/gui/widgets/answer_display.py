"""
Answer key panel shown under the Generate button.
"""
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QTextDocument
from PySide6.QtWidgets import QGroupBox, QLabel, QTextBrowser, QVBoxLayout

from paper_generator.common.constants import ANSWERS_PLACEHOLDER
from paper_generator.core.models import GenerationConfig
from paper_generator.gui.styles.theme import get_colors
from paper_generator.gui.utils.icons import MaterialIcons
from paper_generator.gui.utils.paper_document import DocumentOptions, build_document

NO_ANSWERS_TEXT = "No answers to display yet, or AI did not provide answers."


class AnswerDisplay(QGroupBox):
    """Displays the answers segment; math is typeset along with the preview."""

    def __init__(self, parent=None):
        super().__init__("Answers", parent)
        self._text = ""
        self._config = GenerationConfig()
        self._document: Optional[QTextDocument] = None

        layout = QVBoxLayout(self)
        header = QLabel()
        header.setPixmap(MaterialIcons.lightbulb().pixmap(18, 18))
        header.setAlignment(Qt.AlignmentFlag.AlignLeft)
        self._icon_label = header
        layout.addWidget(header)

        self.browser = QTextBrowser()
        self.browser.setMinimumHeight(140)
        layout.addWidget(self.browser)

        self.update_theme()
        self.set_content("", self._config)

    @property
    def text(self) -> str:
        return self._text

    @property
    def is_placeholder(self) -> bool:
        return self._text == ANSWERS_PLACEHOLDER

    def set_content(self, text: str, config: GenerationConfig, *, typeset: bool = False) -> None:
        self._text = text
        self._config = config
        if not text.strip():
            self.browser.setPlainText(NO_ANSWERS_TEXT)
            return
        if self.is_placeholder:
            self.browser.setPlainText(text)
            return
        # Answers are laid out to the panel width, not the A4 page width
        width = max(200, self.browser.viewport().width())
        document = build_document(text, DocumentOptions.for_answers(config, typeset=typeset), width_px=width)
        document.setParent(self)
        old = self._document
        self._document = document
        self.browser.setDocument(document)
        if old is not None:
            old.deleteLater()

    def typeset_now(self) -> None:
        if self._config.is_math_paper:
            self.set_content(self._text, self._config, typeset=True)

    def update_theme(self):
        C = get_colors()
        self._icon_label.setPixmap(MaterialIcons.lightbulb().pixmap(18, 18))
        self.setStyleSheet(f"QGroupBox::title {{ color: {C.ANSWERS_ACCENT}; }}")
        self.browser.setStyleSheet(f"""
            QTextBrowser {{
                background-color: {C.PAPER_BG};
                color: {C.PAPER_TEXT};
                border: 1px solid {C.BORDER};
            }}
        """)
