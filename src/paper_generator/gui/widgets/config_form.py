"""
Paper settings form: every GenerationConfig field, persisted on change.
"""
import logging
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QIntValidator
from PySide6.QtWidgets import (
    QComboBox, QGroupBox, QHBoxLayout, QLabel, QLineEdit, QPlainTextEdit, QSpinBox,
    QVBoxLayout, QWidget
)

from paper_generator.common.constants import MAX_PDF_FONT_SIZE, MIN_PDF_FONT_SIZE, SUPPORTED_LANGUAGES
from paper_generator.core.models import GenerationConfig, ObjectiveLayout, QuestionType
from paper_generator.gui.models.settings import SettingsStore
from paper_generator.gui.styles.theme import get_styles
from paper_generator.gui.widgets.toggle_switch import ToggleSwitch

logger = logging.getLogger(__name__)

LABEL_WIDTH = 150


class ConfigForm(QGroupBox):
    """
    Form for the paper settings.

    `configChanged` carries the new GenerationConfig after every edit that
    yields a valid configuration; invalid intermediate input (an empty
    question count, say) is reported by validation_error() instead.
    """

    configChanged = Signal(object)

    def __init__(self, settings: Optional[SettingsStore] = None, parent=None):
        super().__init__("Paper Settings", parent)
        self.settings = settings
        self._loading = False
        self._locked = False

        layout = QVBoxLayout(self)
        layout.setSpacing(8)

        self.institution_edit = self._add_line_row(layout, "Institution Name:")
        self.num_questions_edit = self._add_line_row(layout, "Number of Questions:")
        self.num_questions_edit.setValidator(QIntValidator(1, 999, self))

        self.language_combo = self._add_combo_row(layout, "Language:")
        for language in SUPPORTED_LANGUAGES:
            self.language_combo.addItem(language, language)

        self.question_type_combo = self._add_combo_row(layout, "Question Type:")
        for qtype in QuestionType:
            self.question_type_combo.addItem(qtype.value, qtype.value)

        self.layout_combo = self._add_combo_row(layout, "Objective Layout:")
        for option in ObjectiveLayout:
            self.layout_combo.addItem(option.value, option.value)

        self.font_size_spin = QSpinBox()
        self.font_size_spin.setRange(MIN_PDF_FONT_SIZE, MAX_PDF_FONT_SIZE)
        self.font_size_spin.setSuffix(" pt")
        self._add_row(layout, "PDF Font Size:", self.font_size_spin)

        self.header_toggle = self._add_toggle_row(layout, "Show Paper Header")
        self.math_toggle = self._add_toggle_row(layout, "Math Paper (LaTeX)")

        prompt_label = QLabel("Custom Instructions:")
        layout.addWidget(prompt_label)
        self.custom_prompt_edit = QPlainTextEdit()
        self.custom_prompt_edit.setFixedHeight(72)
        layout.addWidget(self.custom_prompt_edit)

        initial = settings.get_form_settings() if settings else GenerationConfig()
        self.set_config(initial)

        self.institution_edit.textChanged.connect(self._on_changed)
        self.num_questions_edit.textChanged.connect(self._on_changed)
        self.language_combo.currentIndexChanged.connect(self._on_changed)
        self.question_type_combo.currentIndexChanged.connect(self._on_changed)
        self.layout_combo.currentIndexChanged.connect(self._on_changed)
        self.font_size_spin.valueChanged.connect(self._on_changed)
        self.header_toggle.toggled.connect(self._on_changed)
        self.math_toggle.toggled.connect(self._on_changed)
        self.custom_prompt_edit.textChanged.connect(self._on_changed)

        self.update_theme()

    # ------------------------------------------------------------------ rows

    def _add_row(self, layout, label: str, field: QWidget) -> QWidget:
        row = QWidget()
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(0, 0, 0, 0)
        lbl = QLabel(label)
        lbl.setFixedWidth(LABEL_WIDTH)
        row_layout.addWidget(lbl)
        row_layout.addWidget(field, 1)
        layout.addWidget(row)
        return field

    def _add_line_row(self, layout, label: str) -> QLineEdit:
        entry = QLineEdit()
        entry.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter)
        return self._add_row(layout, label, entry)

    def _add_combo_row(self, layout, label: str) -> QComboBox:
        return self._add_row(layout, label, QComboBox())

    def _add_toggle_row(self, layout, label: str) -> ToggleSwitch:
        row = QWidget()
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(0, 0, 0, 0)
        row_layout.setSpacing(6)
        lbl = QLabel(label)
        lbl.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter)
        row_layout.addWidget(lbl)
        row_layout.addStretch(1)
        toggle = ToggleSwitch()
        row_layout.addWidget(toggle)
        layout.addWidget(row)
        return toggle

    # ----------------------------------------------------------------- state

    def set_config(self, config: GenerationConfig) -> None:
        """Load a configuration into the widgets without emitting changes."""
        self._loading = True
        try:
            self.institution_edit.setText(config.institution_name)
            self.num_questions_edit.setText(config.num_questions)
            self.language_combo.setCurrentIndex(self.language_combo.findData(config.language))
            self.question_type_combo.setCurrentIndex(self.question_type_combo.findData(config.question_type.value))
            self.layout_combo.setCurrentIndex(self.layout_combo.findData(config.objective_layout.value))
            self.font_size_spin.setValue(int(round(config.font_size_pt)))
            self.header_toggle.setChecked(config.show_paper_header)
            self.math_toggle.setChecked(config.is_math_paper)
            self.custom_prompt_edit.setPlainText(config.custom_prompt)
        finally:
            self._loading = False
        self._sync_layout_enabled()

    def config(self) -> GenerationConfig:
        """Current form values. Raises ValueError when they do not validate."""
        return GenerationConfig(
            institution_name=self.institution_edit.text(),
            num_questions=self.num_questions_edit.text(),
            language=self.language_combo.currentData(),
            question_type=self.question_type_combo.currentData(),
            objective_layout=self.layout_combo.currentData(),
            custom_prompt=self.custom_prompt_edit.toPlainText(),
            pdf_font_size=str(self.font_size_spin.value()),
            show_paper_header=self.header_toggle.isChecked(),
            is_math_paper=self.math_toggle.isChecked(),
        )

    def validation_error(self) -> Optional[str]:
        try:
            self.config()
        except ValueError as e:
            return str(e)
        return None

    def _sync_layout_enabled(self) -> None:
        qtype = self.question_type_combo.currentData()
        self.layout_combo.setEnabled(
            not self._locked and qtype in (QuestionType.OBJECTIVE.value, QuestionType.MIXED.value)
        )

    def _on_changed(self, *args) -> None:
        self._sync_layout_enabled()
        if self._loading:
            return
        try:
            config = self.config()
        except ValueError as e:
            logger.debug(f"Form not valid yet: {e}")
            return
        if self.settings:
            self.settings.set_form_settings(config)
        self.configChanged.emit(config)

    def set_locked(self, locked: bool) -> None:
        """Lock or unlock the inputs while a long operation runs."""
        self._locked = locked
        for widget in (
            self.institution_edit, self.num_questions_edit, self.language_combo,
            self.question_type_combo, self.font_size_spin, self.header_toggle,
            self.math_toggle, self.custom_prompt_edit,
        ):
            widget.setEnabled(not locked)
        self._sync_layout_enabled()

    def update_theme(self):
        styles = get_styles()
        for widget in (self.institution_edit, self.num_questions_edit, self.custom_prompt_edit):
            widget.setStyleSheet(styles.INPUT_FIELD)
        self.header_toggle.update_theme()
        self.math_toggle.update_theme()
