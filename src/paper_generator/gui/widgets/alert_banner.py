"""
Inline alert banner shown under the header.
"""
from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QToolButton, QVBoxLayout

from paper_generator.gui.styles.theme import get_colors
from paper_generator.gui.utils.icons import MaterialIcons

LEVEL_ERROR = "error"
LEVEL_WARNING = "warning"


class AlertBanner(QFrame):
    """
    A single-message banner.

    Dismissable banners carry a close button and hide on click; persistent
    banners (missing credential) can only be hidden in code.
    """

    dismissed = Signal()

    def __init__(self, level: str = LEVEL_ERROR, persistent: bool = False, parent=None):
        super().__init__(parent)
        self.level = level
        self.persistent = persistent

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 8, 8)

        self.icon_label = QLabel()
        layout.addWidget(self.icon_label, 0, Qt.AlignmentFlag.AlignTop)

        text_col = QVBoxLayout()
        self.title_label = QLabel(level.capitalize())
        self.title_label.setStyleSheet("font-weight: 600;")
        self.message_label = QLabel("")
        self.message_label.setWordWrap(True)
        self.message_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        text_col.addWidget(self.title_label)
        text_col.addWidget(self.message_label)
        layout.addLayout(text_col, 1)

        self.close_btn = QToolButton()
        self.close_btn.setAutoRaise(True)
        self.close_btn.setToolTip("Dismiss")
        self.close_btn.clicked.connect(self.dismiss)
        self.close_btn.setVisible(not persistent)
        layout.addWidget(self.close_btn, 0, Qt.AlignmentFlag.AlignTop)

        self.update_theme()
        self.hide()

    @property
    def message(self) -> str:
        return self.message_label.text()

    def show_message(self, message: str) -> None:
        self.message_label.setText(message)
        self.show()

    def dismiss(self) -> None:
        self.message_label.setText("")
        self.hide()
        self.dismissed.emit()

    def update_theme(self):
        C = get_colors()
        fg, bg = (C.ERROR, C.ERROR_BG) if self.level == LEVEL_ERROR else (C.WARNING, C.WARNING_BG)
        self.icon_label.setPixmap(MaterialIcons.alert(fg).pixmap(20, 20))
        self.close_btn.setIcon(MaterialIcons.close())
        self.setStyleSheet(f"""
            AlertBanner {{
                background-color: {bg};
                border: 1px solid {fg};
                border-radius: 6px;
            }}
            QLabel {{
                color: {fg};
            }}
        """)
