"""
Console widget for displaying generation and export logs.
"""
from datetime import datetime
from pathlib import Path
from typing import Set

from PySide6.QtCore import Slot
from PySide6.QtGui import QColor, QFont, QTextCharFormat, QTextCursor
from PySide6.QtWidgets import (
    QApplication, QFileDialog, QGroupBox, QMenu, QPlainTextEdit, QSizePolicy, QVBoxLayout
)

from paper_generator.gui.styles.theme import Fonts, get_colors
from paper_generator.gui.utils.icons import MaterialIcons

# Levels hidden from the console. INFO is noisy during streaming
# (one line per milestone); warnings and errors always show.
CONSOLE_SUPPRESSED_LEVELS: Set[str] = {"info"}

MAX_CONSOLE_LINES = 1000

_ERROR_LEVELS = ("error", "critical", "stderr")
_WARNING_LEVELS = ("warning", "warn")
_SUCCESS_LEVELS = ("success", "ok")


class ConsoleWidget(QGroupBox):
    def __init__(self, parent=None):
        super().__init__("Console Log", parent)

        # Per-instance override: console.suppressed_levels = set()
        self.suppressed_levels: Set[str] = CONSOLE_SUPPRESSED_LEVELS.copy()

        # Keep the title bar visible when the splitter collapses the console
        self.setMinimumHeight(40)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.text_edit = QPlainTextEdit()
        self.text_edit.setReadOnly(True)
        self.text_edit.setLineWrapMode(QPlainTextEdit.LineWrapMode.WidgetWidth)
        font = QFont(Fonts.MONO_FONT.split(',')[0])
        font.setPointSize(int(Fonts.CONSOLE.replace("pt", "")))
        self.text_edit.setFont(font)
        layout.addWidget(self.text_edit)

        self.format_info = QTextCharFormat()
        self.format_error = QTextCharFormat()
        self.format_warning = QTextCharFormat()
        self.format_success = QTextCharFormat()
        self.update_theme()

    def _format_for(self, level: str) -> QTextCharFormat:
        if level in _ERROR_LEVELS:
            return self.format_error
        if level in _WARNING_LEVELS:
            return self.format_warning
        if level in _SUCCESS_LEVELS:
            return self.format_success
        return self.format_info

    @Slot(str, str)
    def append_log(self, level: str, message: str):
        """Append a timestamped, colour-coded line unless its level is suppressed."""
        key = level.lower()
        if key in self.suppressed_levels:
            return

        cursor = self.text_edit.textCursor()
        cursor.movePosition(QTextCursor.MoveOperation.End)
        timestamp = datetime.now().strftime("%H:%M:%S")
        cursor.insertText(f"[{timestamp}] [{level.upper()}] {message}\n", self._format_for(key))
        self.text_edit.setTextCursor(cursor)
        self.text_edit.ensureCursorVisible()

        doc = self.text_edit.document()
        if doc.lineCount() > MAX_CONSOLE_LINES:
            cursor = self.text_edit.textCursor()
            cursor.movePosition(QTextCursor.MoveOperation.Start)
            cursor.movePosition(
                QTextCursor.MoveOperation.Down,
                QTextCursor.MoveMode.KeepAnchor,
                doc.lineCount() - MAX_CONSOLE_LINES,
            )
            cursor.removeSelectedText()

    def contextMenuEvent(self, event):
        menu = QMenu(self)
        copy_action = menu.addAction(MaterialIcons.content_copy(), "Copy")
        copy_all_action = menu.addAction(MaterialIcons.content_copy(), "Copy All")
        menu.addSeparator()
        save_action = menu.addAction(MaterialIcons.content_save(), "Save to File...")
        menu.addSeparator()
        clear_action = menu.addAction(MaterialIcons.delete(), "Clear")

        action = menu.exec(event.globalPos())
        if action == copy_action:
            cursor = self.text_edit.textCursor()
            if cursor.hasSelection():
                QApplication.clipboard().setText(cursor.selectedText())
        elif action == copy_all_action:
            QApplication.clipboard().setText(self.text_edit.toPlainText())
        elif action == save_action:
            self._save_to_file()
        elif action == clear_action:
            self.clear()

    def _save_to_file(self):
        filename, _ = QFileDialog.getSaveFileName(
            self, "Save Log", "console_log.txt", "Text Files (*.txt);;All Files (*)"
        )
        if filename:
            self.save_to(Path(filename))

    def save_to(self, path: Path) -> bool:
        try:
            path.write_text(self.text_edit.toPlainText(), encoding="utf-8")
        except OSError as e:
            self.append_log("ERROR", f"Failed to save log: {e}")
            return False
        return True

    def clear(self):
        self.text_edit.clear()

    def update_theme(self):
        """Update styles when theme changes."""
        C = get_colors()
        self.setStyleSheet(f"""
            QGroupBox {{
                background-color: {C.SURFACE};
                border-top: 1px solid {C.BORDER};
                border-bottom: 1px solid {C.BORDER};
                border-left: none;
                border-right: none;
                border-radius: 0px;
                margin-top: 24px;
            }}
            QGroupBox::title {{
                subcontrol-origin: margin;
                left: 8px;
                padding: 0 4px;
                background-color: {C.BACKGROUND};
                color: {C.TEXT_PRIMARY};
            }}
        """)
        self.text_edit.setStyleSheet(f"""
            QPlainTextEdit {{
                border: none;
                background-color: {C.SURFACE};
                padding: 0px;
                border-radius: 0px;
            }}
        """)
        self.format_info.setForeground(QColor(C.TEXT_PRIMARY))
        self.format_error.setForeground(QColor(C.ERROR))
        self.format_warning.setForeground(QColor(C.WARNING))
        self.format_success.setForeground(QColor(C.SUCCESS))
