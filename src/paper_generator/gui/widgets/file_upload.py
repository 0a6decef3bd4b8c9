"""
Upload button for local PDF or image files.
"""
import logging
from pathlib import Path
from typing import Iterable, Optional

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QFileDialog, QHBoxLayout, QPushButton, QVBoxLayout, QWidget

from paper_generator.gui.utils.icons import MaterialIcons
from paper_generator.sources import ExtractionError, SourceInputError, SourceSelection

logger = logging.getLogger(__name__)

FILE_FILTER = "PDF or images (*.pdf *.png *.jpg *.jpeg *.gif *.webp);;All Files (*)"


class FileUpload(QWidget):
    """
    Multi-select file picker feeding the shared SourceSelection.

    Signals:
        sourceChanged: The selection was replaced or cleared
        errorOccurred(str): A user-facing message for a rejected selection
    """

    sourceChanged = Signal()
    errorOccurred = Signal(str)

    def __init__(self, selection: SourceSelection, parent=None):
        super().__init__(parent)
        self.selection = selection
        self._last_dir: Optional[str] = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        row = QHBoxLayout()
        self.upload_btn = QPushButton("Upload PDF(s) / Image(s)")
        self.upload_btn.setIcon(MaterialIcons.upload())
        self.upload_btn.setToolTip("Select one or more PDF files, or one or more images (not both)")
        self.upload_btn.clicked.connect(self._browse)
        row.addWidget(self.upload_btn)
        row.addStretch(1)
        layout.addLayout(row)

    def _browse(self):
        files, _ = QFileDialog.getOpenFileNames(self, "Select Source Files", self._last_dir or "", FILE_FILTER)
        if files:
            self._last_dir = str(Path(files[0]).parent)
        self.load_paths(Path(f) for f in files)

    def load_paths(self, paths: Iterable[Path]) -> bool:
        """
        Replace the active source with `paths`.

        Returns:
            True when a source is now active
        """
        try:
            source = self.selection.select_files(paths)
        except (SourceInputError, ExtractionError) as e:
            logger.error(str(e))
            self.sourceChanged.emit()
            self.errorOccurred.emit(str(e))
            return False
        self.sourceChanged.emit()
        return source is not None

    def set_locked(self, locked: bool):
        self.upload_btn.setEnabled(not locked)

    def update_theme(self):
        self.upload_btn.setIcon(MaterialIcons.upload())
