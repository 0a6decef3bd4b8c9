"""
Main Window for the AI Question Paper Generator.
"""
import logging
import queue
import threading
from pathlib import Path
from typing import Callable, Optional

from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QApplication, QFileDialog, QGroupBox, QHBoxLayout, QLabel, QMainWindow, QMessageBox,
    QPushButton, QScrollArea, QSplitter, QStatusBar, QVBoxLayout, QWidget
)

from paper_generator import __version__
from paper_generator.common.constants import (
    API_KEY_ERROR_MESSAGE,
    APP_TITLE,
    EXPORT_DEFAULTS,
    get_model_name,
)
from paper_generator.core.models import GenerationConfig, StreamedResult
from paper_generator.export import ExportError, ExportStage, export_paper
from paper_generator.generation import (
    GeminiStreamClient,
    GenerationError,
    MissingCredentialError,
    build_request,
    load_api_key,
)
from paper_generator.gui.models.busy import BusyGuard, BusyState
from paper_generator.gui.models.settings import SettingsStore
from paper_generator.gui.styles.theme import apply_theme, get_colors, get_styles, set_dark_mode
from paper_generator.gui.utils.capture import capture_document
from paper_generator.gui.utils.icons import MaterialIcons
from paper_generator.gui.utils.logging_utils import attach_queue_handler, detach_queue_handler, drain_queue
from paper_generator.gui.utils.paths import get_default_export_dir, get_settings_path
from paper_generator.gui.widgets.alert_banner import LEVEL_ERROR, AlertBanner
from paper_generator.gui.widgets.answer_display import AnswerDisplay
from paper_generator.gui.widgets.config_form import ConfigForm
from paper_generator.gui.widgets.console_widget import ConsoleWidget
from paper_generator.gui.widgets.file_upload import FileUpload
from paper_generator.gui.widgets.paper_preview import PaperPreview
from paper_generator.gui.widgets.storage_browser import StorageBrowser
from paper_generator.sources import NO_SOURCE_MESSAGE, SourceSelection

logger = logging.getLogger(__name__)

NO_CONTENT_MESSAGE = "No question paper content to download."
GENERATE_TEXT = "Generate Questions & Answers"
GENERATING_TEXT = "Generating..."

ClientFactory = Callable[[str], GeminiStreamClient]


def _default_client_factory(api_key: str) -> GeminiStreamClient:
    return GeminiStreamClient(api_key, model=get_model_name())


class MainWindow(QMainWindow):
    chunk_received = Signal(str)
    generation_finished = Signal(bool, object)

    def __init__(
        self,
        settings: Optional[SettingsStore] = None,
        api_key: Optional[str] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        super().__init__()
        self.setWindowTitle(APP_TITLE)
        self.resize(1375, 900)
        self.setMinimumSize(1100, 700)

        self.settings = settings or SettingsStore(get_settings_path())
        if api_key is None:
            try:
                api_key = load_api_key()
            except MissingCredentialError:
                # Generation stays disabled; the credential banner explains why
                api_key = ""
        self.api_key = api_key
        self._client_factory = client_factory or _default_client_factory

        # Set dark mode state BEFORE creating widgets (so they initialize with correct colors)
        set_dark_mode(self.settings.get_dark_mode())

        self.selection = SourceSelection()
        self.result = StreamedResult()
        self.busy = BusyGuard()
        self.busy.stateChanged.connect(self._on_busy_changed)
        self._config: GenerationConfig = self.settings.get_form_settings()
        self._generation_thread: Optional[threading.Thread] = None
        self._export_handler = None

        self._build_menus()

        # Logging: worker threads log into the queue, the timer drains it
        self.log_queue = queue.Queue()
        self.log_timer = QTimer(self)
        self.log_timer.timeout.connect(self._drain_log_queue)
        self.log_timer.start(100)

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.main_layout = QVBoxLayout(self.central_widget)
        self.main_layout.setContentsMargins(0, 0, 0, 0)
        self.main_layout.setSpacing(0)

        self._build_header()

        # --- Alerts ---
        alerts = QWidget()
        alerts_layout = QVBoxLayout(alerts)
        alerts_layout.setContentsMargins(16, 8, 16, 0)
        self.error_banner = AlertBanner(LEVEL_ERROR)
        self.credential_banner = AlertBanner(LEVEL_ERROR, persistent=True)
        alerts_layout.addWidget(self.error_banner)
        alerts_layout.addWidget(self.credential_banner)
        self.main_layout.addWidget(alerts)

        # --- Main Content Splitter ---
        self.splitter = QSplitter(Qt.Orientation.Vertical)
        self.splitter.setHandleWidth(8)
        self.splitter.setChildrenCollapsible(False)

        content = QWidget()
        content_layout = QHBoxLayout(content)
        content_layout.setContentsMargins(16, 12, 16, 12)
        content_layout.setSpacing(16)
        content_layout.addWidget(self._build_left_column(), 4)
        content_layout.addWidget(self._build_right_column(), 8)

        self.console = ConsoleWidget()
        self.splitter.addWidget(content)
        self.splitter.addWidget(self.console)

        splitter_state = self.settings.get_splitter_state()
        if not (splitter_state and self.splitter.restoreState(bytes.fromhex(splitter_state))):
            self.splitter.setStretchFactor(0, 1)
            self.splitter.setStretchFactor(1, 0)
            self.splitter.setSizes([99999, 0])
        self.main_layout.addWidget(self.splitter)

        # --- Status Bar ---
        self.status_bar = QStatusBar()
        self.status_bar.showMessage("Ready")
        self.busy_indicator = QPushButton()
        self.busy_indicator.setFlat(True)
        self.busy_indicator.setEnabled(False)
        self.busy_indicator.setIcon(MaterialIcons.spinner(self.busy_indicator))
        self.busy_indicator.hide()
        self.status_bar.addPermanentWidget(self.busy_indicator)
        self.setStatusBar(self.status_bar)

        self.chunk_received.connect(self._on_chunk)
        self.generation_finished.connect(self._finish_generation)

        if not self.api_key:
            self.credential_banner.show_message(API_KEY_ERROR_MESSAGE)
            logger.error(API_KEY_ERROR_MESSAGE)

        is_dark = self.settings.get_dark_mode()
        self.dark_mode_action.setChecked(is_dark)
        self._apply_theme(is_dark)
        self._refresh_sections(generating=False)
        self._update_source_label()
        self._update_actions()

    # ------------------------------------------------------------------ layout

    def _build_menus(self):
        self.menu_bar = self.menuBar()

        file_menu = self.menu_bar.addMenu("File")
        exit_action = QAction("Quit", self)
        exit_action.setShortcut(QKeySequence.StandardKey.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        settings_menu = self.menu_bar.addMenu("Settings")
        self.dark_mode_action = QAction("Dark Mode", self)
        self.dark_mode_action.setCheckable(True)
        self.dark_mode_action.triggered.connect(self._toggle_theme)
        settings_menu.addAction(self.dark_mode_action)

        settings_menu.addSeparator()
        reset_settings_action = QAction("Reset GUI Settings...", self)
        reset_settings_action.triggered.connect(self._reset_gui_settings)
        settings_menu.addAction(reset_settings_action)

        help_menu = self.menu_bar.addMenu("Help")
        about_action = QAction("About", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)

    def _build_header(self):
        self.header = QWidget()
        self.header.setObjectName("mainHeader")
        self.header.setFixedHeight(72)
        header_layout = QVBoxLayout(self.header)
        header_layout.setContentsMargins(24, 10, 24, 10)
        self.title_label = QLabel(APP_TITLE)
        self.title_label.setObjectName("mainTitle")
        self.title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        subtitle = QLabel(f"Question papers and answer keys from your chapters, powered by {get_model_name()}")
        subtitle.setObjectName("mainSubtitle")
        subtitle.setAlignment(Qt.AlignmentFlag.AlignCenter)
        header_layout.addWidget(self.title_label)
        header_layout.addWidget(subtitle)
        self.main_layout.addWidget(self.header)

    def _build_left_column(self) -> QWidget:
        column = QWidget()
        layout = QVBoxLayout(column)
        layout.setContentsMargins(0, 0, 8, 0)
        layout.setSpacing(12)

        self.config_form = ConfigForm(self.settings)
        self.config_form.configChanged.connect(self._on_config_changed)
        layout.addWidget(self.config_form)

        self.source_group = QGroupBox("Content Source")
        source_layout = QVBoxLayout(self.source_group)
        self.file_upload = FileUpload(self.selection)
        self.storage_browser = StorageBrowser(self.selection)
        self.source_label = QLabel("")
        self.source_label.setWordWrap(True)
        source_layout.addWidget(self.file_upload)
        source_layout.addWidget(QLabel("Or choose from storage:"))
        source_layout.addWidget(self.storage_browser)
        source_layout.addWidget(self.source_label)
        for widget in (self.file_upload, self.storage_browser):
            widget.sourceChanged.connect(self._on_source_changed)
            widget.errorOccurred.connect(self._show_error)
        layout.addWidget(self.source_group)

        self.generate_btn = QPushButton(GENERATE_TEXT)
        self.generate_btn.setMinimumHeight(44)
        self.generate_btn.clicked.connect(self._on_generate_clicked)
        layout.addWidget(self.generate_btn)

        self.answer_display = AnswerDisplay()
        layout.addWidget(self.answer_display)
        layout.addStretch(1)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QScrollArea.Shape.NoFrame)
        scroll.setWidget(column)
        self.left_column = scroll
        return scroll

    def _build_right_column(self) -> QWidget:
        column = QWidget()
        layout = QVBoxLayout(column)
        layout.setContentsMargins(0, 0, 0, 0)

        title_row = QHBoxLayout()
        preview_title = QLabel("Question Paper Preview")
        preview_title.setStyleSheet("font-size: 15pt; font-weight: 600;")
        title_row.addWidget(preview_title)
        title_row.addStretch(1)
        self.typesetting_label = QLabel("Typesetting math...")
        self.typesetting_label.hide()
        title_row.addWidget(self.typesetting_label)
        self.download_btn = QPushButton("Download PDF")
        self.download_btn.setToolTip("Download question paper as PDF")
        self.download_btn.clicked.connect(self._on_download_clicked)
        title_row.addWidget(self.download_btn)
        layout.addLayout(title_row)

        self.preview = PaperPreview()
        self.preview.typesettingChanged.connect(self._on_typesetting_changed)
        layout.addWidget(self.preview, 1)
        self.right_panel = column
        return column

    # ------------------------------------------------------------------ state

    def _drain_log_queue(self):
        drain_queue(self.log_queue, self.console.append_log)

    def _show_error(self, message: str):
        self.error_banner.show_message(message)
        self.console.append_log("ERROR", message)

    def _on_busy_changed(self, state: BusyState):
        busy = state is not BusyState.IDLE
        self.config_form.set_locked(busy)
        self.file_upload.set_locked(busy)
        self.storage_browser.set_locked(busy)
        self.busy_indicator.setVisible(busy)
        self.generate_btn.setText(GENERATING_TEXT if state is BusyState.GENERATING else GENERATE_TEXT)
        self._update_actions()

    def _update_actions(self):
        idle = self.busy.is_idle
        self.generate_btn.setEnabled(idle and bool(self.api_key) and self.selection.has_source)
        self.download_btn.setEnabled(idle and self.preview.has_content)

    def _update_source_label(self):
        self.source_label.setText(self.selection.description)
        self.source_label.setVisible(self.selection.has_source)

    def _on_source_changed(self):
        if self.selection.has_source:
            self.error_banner.dismiss()
        self._update_source_label()
        self._update_actions()

    def _on_config_changed(self, config: GenerationConfig):
        self._config = config
        self._refresh_sections(generating=self.busy.state is BusyState.GENERATING)

    def _refresh_sections(self, generating: bool):
        sections = self.result.sections(generating)
        self.preview.set_content(sections.questions, self._config)
        self.answer_display.set_content(sections.answers, self._config)
        self._update_actions()

    def _on_typesetting_changed(self, active: bool):
        self.typesetting_label.setVisible(active)
        if not active:
            self.answer_display.typeset_now()

    # ------------------------------------------------------------- generation

    def _on_generate_clicked(self):
        """Validate, then stream a new paper on a worker thread."""
        source = self.selection.source
        if source is None:
            self._show_error(NO_SOURCE_MESSAGE)
            return
        if not self.api_key:
            self._show_error(API_KEY_ERROR_MESSAGE)
            return
        try:
            config = self.config_form.config()
        except ValueError as e:
            self._show_error(f"Configuration Error: {e}")
            return
        if not self.busy.try_acquire(BusyState.GENERATING):
            return

        self._config = config
        self.error_banner.dismiss()
        self.result.reset()
        self._refresh_sections(generating=True)
        self.status_bar.showMessage("Generating...")
        self.console.append_log("INFO", f"Starting generation: {config.num_questions} {config.question_type.value} question(s)")

        def run_generation(source, config, api_key):
            success = False
            error: Optional[str] = None
            handler = None
            try:
                handler = attach_queue_handler(self.log_queue)
                client = self._client_factory(api_key)
                client.stream(build_request(source, config), self.chunk_received.emit)
                success = True
            except (GenerationError, MissingCredentialError) as e:
                error = str(e)
            except Exception as e:
                logger.exception("Unexpected error during generation")
                error = f"Unexpected error: {e}"
            finally:
                if handler:
                    detach_queue_handler(handler)
                # Always emit so the main thread restores the UI
                self.generation_finished.emit(success, error)

        self._generation_thread = threading.Thread(
            target=run_generation, args=(source, config, self.api_key), daemon=True
        )
        self._generation_thread.start()

    def _on_chunk(self, chunk: str):
        self.result.append(chunk)
        self._refresh_sections(generating=True)

    def _finish_generation(self, success: bool, error: Optional[str]) -> None:
        """Restore UI state after generation."""
        if not success:
            message = error or "An unknown error occurred during generation."
            self.result.annotate_error(message)
            self._show_error(message)
            self.status_bar.showMessage("Generation failed")
        else:
            sections = self.result.sections()
            if sections.has_answers:
                self.console.append_log("SUCCESS", "Question paper and answers generated.")
            else:
                self.console.append_log("WARNING", "Generation finished without an answer section.")
            self.status_bar.showMessage("Ready")
        self.busy.release()
        self._refresh_sections(generating=False)

    # ----------------------------------------------------------------- export

    def _default_export_path(self, config: GenerationConfig) -> Path:
        folder = self.settings.get_export_dir()
        directory = Path(folder) if folder else get_default_export_dir()
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create export folder {directory}: {e}")
        return directory / config.export_filename()

    def _ask_export_path(self, config: GenerationConfig) -> Optional[Path]:
        filename, _ = QFileDialog.getSaveFileName(
            self, "Save Question Paper", str(self._default_export_path(config)), "PDF Files (*.pdf)"
        )
        return Path(filename) if filename else None

    def _on_download_clicked(self):
        if not self.preview.has_content:
            self._show_error(NO_CONTENT_MESSAGE)
            return
        path = self._ask_export_path(self._config)
        if path is None:
            return
        self.start_export(path)

    def start_export(self, path: Path) -> bool:
        """
        Export the current preview to `path`.

        Math papers are typeset first and given the settle delay before the
        capture; everything else is captured immediately.

        Returns:
            False when another long operation is running
        """
        if not self.busy.try_acquire(BusyState.EXPORTING):
            return False
        self.status_bar.showMessage("Exporting PDF...")
        self._export_handler = attach_queue_handler(self.log_queue)
        if self._config.is_math_paper:
            self.preview.typeset_now()
            self.typesetting_label.show()
            QTimer.singleShot(EXPORT_DEFAULTS.typeset_settle_ms, lambda: self._run_export(path))
        else:
            self._run_export(path)
        return True

    def _on_export_stage(self, stage: ExportStage):
        self.status_bar.showMessage(f"Exporting PDF: {stage.value}")

    def _run_export(self, path: Path):
        self.typesetting_label.hide()
        try:
            result = export_paper(
                lambda: capture_document(self.preview.export_document()),
                path,
                on_stage=self._on_export_stage,
            )
        except ExportError as e:
            self._show_error(str(e))
            self.status_bar.showMessage("Export failed")
        else:
            self.settings.set_export_dir(str(path.parent))
            self.console.append_log("SUCCESS", f"Saved {result.page_count} page(s) to {result.path}")
            if result.degraded:
                self.console.append_log("WARNING", "Page slicing failed; the PDF holds the unsliced preview.")
            self.status_bar.showMessage(f"Saved {result.path.name}")
        finally:
            if self._export_handler:
                detach_queue_handler(self._export_handler)
                self._export_handler = None
            self.busy.release()

    # ------------------------------------------------------------------ theme

    def _toggle_theme(self, checked: bool):
        self.settings.set_dark_mode(checked)
        self._apply_theme(checked)

    def _apply_theme(self, is_dark: bool):
        app = QApplication.instance()
        if app:
            apply_theme(app, is_dark)
        else:
            set_dark_mode(is_dark)
        C = get_colors()
        styles = get_styles()
        self.generate_btn.setStyleSheet(styles.BUTTON_PRIMARY)
        self.generate_btn.setIcon(MaterialIcons.magic())
        self.download_btn.setStyleSheet(styles.BUTTON_EXPORT)
        self.download_btn.setIcon(MaterialIcons.download())
        self.source_label.setStyleSheet(f"color: {C.SUCCESS};")
        self.typesetting_label.setStyleSheet(f"color: {C.WARNING};")
        self.busy_indicator.setIcon(MaterialIcons.spinner(self.busy_indicator))
        self.dark_mode_action.setIcon(MaterialIcons.theme())
        self.status_bar.setStyleSheet(f"background-color: {C.SURFACE}; color: {C.TEXT_SECONDARY};")
        for widget in (
            self.console, self.config_form, self.file_upload, self.storage_browser,
            self.preview, self.answer_display, self.error_banner, self.credential_banner,
        ):
            widget.update_theme()

    # ------------------------------------------------------------------- misc

    def _reset_gui_settings(self):
        reply = QMessageBox.question(
            self,
            "Reset GUI Settings",
            "Reset all saved form values and preferences to defaults?",
        )
        if reply != QMessageBox.StandardButton.Yes:
            return
        self.settings.reset()
        self.config_form.set_config(self.settings.get_form_settings())
        self._on_config_changed(self.config_form.config())
        self.console.append_log("INFO", "GUI settings reset to defaults.")

    def _show_about(self):
        QMessageBox.about(
            self,
            f"About {APP_TITLE}",
            f"<b>{APP_TITLE}</b> v{__version__}<br><br>"
            "Generates question papers and answer keys from chapter PDFs or "
            "question paper images, and exports them as A4 PDFs.",
        )

    def closeEvent(self, event):
        self.settings.set_splitter_state(self.splitter.saveState().toHex().data().decode())
        self.log_timer.stop()
        super().closeEvent(event)
