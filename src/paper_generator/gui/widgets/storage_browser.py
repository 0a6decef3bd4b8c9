"""
Browser for the built-in sample storage (chapter PDFs and question paper images).
"""
import logging
from typing import List, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QButtonGroup, QHBoxLayout, QPushButton, QRadioButton, QTreeWidget, QTreeWidgetItem,
    QVBoxLayout, QWidget
)

from paper_generator.core.models import SourceMaterial
from paper_generator.gui.utils.icons import MaterialIcons
from paper_generator.sources import (
    SAMPLE_STORAGE,
    SourceInputError,
    SourceSelection,
    StorageCatalog,
    StorageFile,
    image_source_from_files,
    text_source_from_pdfs,
)

logger = logging.getLogger(__name__)

MODE_PDF = "pdf"
MODE_IMAGE = "image"

PATH_ROLE = Qt.ItemDataRole.UserRole


class StorageBrowser(QWidget):
    """
    Tree of the sample catalog with a PDF mode and an image mode.

    Only files of the current mode are listed. Switching mode clears the
    active source; "Use Selected" replaces it with the checked files.
    """

    sourceChanged = Signal()
    errorOccurred = Signal(str)

    def __init__(self, selection: SourceSelection, catalog: StorageCatalog = SAMPLE_STORAGE, parent=None):
        super().__init__(parent)
        self.selection = selection
        self.catalog = catalog
        self._mode = MODE_PDF

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        mode_row = QHBoxLayout()
        self.pdf_radio = QRadioButton("Chapter PDFs")
        self.image_radio = QRadioButton("Question Paper Images")
        self.pdf_radio.setChecked(True)
        self._mode_group = QButtonGroup(self)
        self._mode_group.addButton(self.pdf_radio)
        self._mode_group.addButton(self.image_radio)
        self.pdf_radio.toggled.connect(self._on_mode_toggled)
        mode_row.addWidget(self.pdf_radio)
        mode_row.addWidget(self.image_radio)
        mode_row.addStretch(1)
        layout.addLayout(mode_row)

        self.tree = QTreeWidget()
        self.tree.setHeaderHidden(True)
        self.tree.setMinimumHeight(160)
        layout.addWidget(self.tree)

        button_row = QHBoxLayout()
        button_row.addStretch(1)
        self.use_btn = QPushButton("Use Selected")
        self.use_btn.setIcon(MaterialIcons.database())
        self.use_btn.clicked.connect(self.confirm_selection)
        button_row.addWidget(self.use_btn)
        layout.addLayout(button_row)

        self._populate()

    @property
    def mode(self) -> str:
        return self._mode

    def set_mode(self, mode: str) -> None:
        if mode not in (MODE_PDF, MODE_IMAGE):
            raise ValueError(f"Unknown storage mode: {mode!r}")
        # Radio toggles route back through _on_mode_toggled
        (self.pdf_radio if mode == MODE_PDF else self.image_radio).setChecked(True)

    def _on_mode_toggled(self, pdf_checked: bool) -> None:
        mode = MODE_PDF if pdf_checked else MODE_IMAGE
        if mode == self._mode:
            return
        self._mode = mode
        self.selection.clear()
        logger.info(f"Storage mode switched to {mode}; active source cleared")
        self._populate()
        self.sourceChanged.emit()

    def _populate(self) -> None:
        self.tree.clear()
        if self._mode == MODE_PDF:
            for cls in self.catalog.classes:
                cls_item = self._branch(self.tree, cls.name)
                for subject in cls.subjects:
                    subject_item = self._branch(cls_item, subject.name)
                    for chapter in subject.chapters:
                        self._leaf(subject_item, chapter)
        else:
            for folder in self.catalog.image_folders:
                folder_item = self._branch(self.tree, folder.name)
                for image in folder.images:
                    self._leaf(folder_item, image)
        self.tree.expandAll()

    def _branch(self, parent, name: str) -> QTreeWidgetItem:
        item = QTreeWidgetItem(parent, [name])
        item.setIcon(0, MaterialIcons.folder())
        item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable | Qt.ItemFlag.ItemIsAutoTristate)
        item.setCheckState(0, Qt.CheckState.Unchecked)
        return item

    def _leaf(self, parent: QTreeWidgetItem, f: StorageFile) -> QTreeWidgetItem:
        item = QTreeWidgetItem(parent, [f.name])
        item.setIcon(0, MaterialIcons.file_pdf() if f.kind == "pdf" else MaterialIcons.file_image())
        item.setData(0, PATH_ROLE, f.path)
        item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
        item.setCheckState(0, Qt.CheckState.Unchecked)
        return item

    def _leaves(self) -> List[QTreeWidgetItem]:
        leaves = []
        stack = [self.tree.topLevelItem(i) for i in range(self.tree.topLevelItemCount())]
        while stack:
            item = stack.pop(0)
            if item.data(0, PATH_ROLE):
                leaves.append(item)
            stack.extend(item.child(i) for i in range(item.childCount()))
        return leaves

    def set_checked(self, path: str, checked: bool = True) -> None:
        for item in self._leaves():
            if item.data(0, PATH_ROLE) == path:
                item.setCheckState(0, Qt.CheckState.Checked if checked else Qt.CheckState.Unchecked)
                return
        raise KeyError(path)

    def checked_files(self) -> List[StorageFile]:
        files = []
        for item in self._leaves():
            if item.checkState(0) == Qt.CheckState.Checked:
                f = self.catalog.find(item.data(0, PATH_ROLE))
                if f is not None:
                    files.append(f)
        return files

    def confirm_selection(self) -> Optional[SourceMaterial]:
        """Replace the active source with the checked files of the current mode."""
        files = self.checked_files()
        self.selection.clear()
        try:
            if self._mode == MODE_PDF:
                source = text_source_from_pdfs(files)
            else:
                source = image_source_from_files(files)
        except SourceInputError as e:
            logger.error(str(e))
            self.sourceChanged.emit()
            self.errorOccurred.emit(str(e))
            return None
        self.selection.set_source(source)
        self.sourceChanged.emit()
        return source

    def set_locked(self, locked: bool):
        for widget in (self.pdf_radio, self.image_radio, self.tree, self.use_btn):
            widget.setEnabled(not locked)

    def update_theme(self):
        self.use_btn.setIcon(MaterialIcons.database())
