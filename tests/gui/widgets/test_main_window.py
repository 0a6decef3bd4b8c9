"""Unit tests for MainWindow wiring: gating, streaming updates, errors and export."""

from pathlib import Path
from unittest.mock import MagicMock

import fitz
import pytest

from paper_generator.common.constants import ANSWERS_PLACEHOLDER, API_KEY_ERROR_MESSAGE, ERROR_MARKER
from paper_generator.core.models import TextSource
from paper_generator.generation import QuotaExceededError
from paper_generator.gui.main_window import NO_CONTENT_MESSAGE, MainWindow
from paper_generator.gui.models.busy import BusyState
from paper_generator.gui.models.settings import SettingsStore
from paper_generator.sources import NO_SOURCE_MESSAGE


class FakeStreamClient:
    """Feeds canned chunks to the callback, then optionally raises."""

    def __init__(self, chunks, error=None):
        self.chunks = chunks
        self.error = error
        self.requests = []

    def stream(self, request, on_chunk):
        self.requests.append(request)
        for chunk in self.chunks:
            on_chunk(chunk)
        if self.error is not None:
            raise self.error
        return "".join(self.chunks)


@pytest.fixture
def settings(tmp_path):
    return SettingsStore(tmp_path / "test_settings.json")


def _window(qtbot, settings, client=None, api_key="test-key"):
    factory = (lambda key: client) if client is not None else None
    window = MainWindow(settings, api_key=api_key, client_factory=factory)
    qtbot.addWidget(window)
    return window


class TestGating:
    def test_init_when_no_api_key_then_banner_and_generate_disabled(self, qtbot, settings):
        window = _window(qtbot, settings, api_key="")
        window.selection.set_source(TextSource(text="x"))
        window._on_source_changed()

        assert not window.credential_banner.isHidden()
        assert window.credential_banner.message == API_KEY_ERROR_MESSAGE
        assert not window.generate_btn.isEnabled()

    def test_init_when_no_source_then_generate_disabled(self, qtbot, settings):
        window = _window(qtbot, settings)
        assert not window.generate_btn.isEnabled()
        assert not window.download_btn.isEnabled()

    def test_source_when_selected_then_generate_enabled(self, qtbot, settings):
        window = _window(qtbot, settings)
        window.selection.set_source(TextSource(text="Photosynthesis is..."))
        window._on_source_changed()
        assert window.generate_btn.isEnabled()

    def test_generate_when_no_source_then_error_shown(self, qtbot, settings):
        window = _window(qtbot, settings)
        window._on_generate_clicked()
        assert window.error_banner.message == NO_SOURCE_MESSAGE

    def test_generate_when_config_invalid_then_configuration_error(self, qtbot, settings):
        window = _window(qtbot, settings)
        window.selection.set_source(TextSource(text="x"))
        window.config_form.num_questions_edit.setText("")

        window._on_generate_clicked()

        assert window.error_banner.message.startswith("Configuration Error:")
        assert window.busy.is_idle

    def test_download_when_preview_empty_then_no_content_error(self, qtbot, settings):
        window = _window(qtbot, settings)
        window._on_download_clicked()
        assert window.error_banner.message == NO_CONTENT_MESSAGE


class TestGeneration:
    def test_generate_when_stream_succeeds_then_sections_split(self, qtbot, settings):
        # Arrange
        client = FakeStreamClient(["1. What is it?\n", "---ANSWERS---\n", "1. A"])
        window = _window(qtbot, settings, client)
        window.selection.set_source(TextSource(text="Photosynthesis is..."))

        # Act
        with qtbot.waitSignal(window.generation_finished, timeout=5000):
            window._on_generate_clicked()

        # Assert
        assert window.busy.is_idle
        assert window.preview.text == "1. What is it?"
        assert window.answer_display.text == "1. A"
        assert window.download_btn.isEnabled()
        assert len(client.requests) == 1

    def test_generate_when_no_delimiter_then_answers_empty_after_finish(self, qtbot, settings):
        client = FakeStreamClient(["1. Only questions"])
        window = _window(qtbot, settings, client)
        window.selection.set_source(TextSource(text="x"))

        with qtbot.waitSignal(window.generation_finished, timeout=5000):
            window._on_generate_clicked()

        assert window.preview.text == "1. Only questions"
        assert window.answer_display.text == ""
        assert "without an answer section" in window.console.text_edit.toPlainText()

    def test_chunk_when_generating_without_delimiter_then_placeholder(self, qtbot, settings):
        window = _window(qtbot, settings)
        window.busy.try_acquire(BusyState.GENERATING)

        window._on_chunk("1. Partial")

        assert window.answer_display.text == ANSWERS_PLACEHOLDER
        assert not window.download_btn.isEnabled()

    def test_generate_when_stream_fails_then_partial_kept_with_error(self, qtbot, settings):
        # Arrange
        error = QuotaExceededError("Gemini API Error: Quota exceeded. Details: slow down")
        client = FakeStreamClient(["1. Partial question"], error=error)
        window = _window(qtbot, settings, client)
        window.selection.set_source(TextSource(text="x"))

        # Act
        with qtbot.waitSignal(window.generation_finished, timeout=5000) as blocker:
            window._on_generate_clicked()

        # Assert
        assert blocker.args[0] is False
        assert window.busy.is_idle
        assert window.error_banner.message == str(error)
        assert window.preview.text.startswith("1. Partial question")
        assert ERROR_MARKER in window.preview.text

    def test_generate_when_unexpected_exception_then_reported(self, qtbot, settings):
        client = MagicMock()
        client.stream.side_effect = KeyError("boom")
        window = _window(qtbot, settings, client)
        window.selection.set_source(TextSource(text="x"))

        with qtbot.waitSignal(window.generation_finished, timeout=5000):
            window._on_generate_clicked()

        assert window.error_banner.message.startswith("Unexpected error:")

    def test_generate_when_busy_then_second_request_ignored(self, qtbot, settings):
        window = _window(qtbot, settings, FakeStreamClient(["x"]))
        window.selection.set_source(TextSource(text="x"))
        window.busy.try_acquire(BusyState.EXPORTING)

        window._on_generate_clicked()

        assert window.busy.state is BusyState.EXPORTING
        assert window._generation_thread is None


class TestExport:
    def test_start_export_when_content_then_pdf_written(self, qtbot, settings, tmp_path):
        # Arrange
        window = _window(qtbot, settings)
        window.result.append("1. What is photosynthesis?\n---ANSWERS---\n1. A")
        window._refresh_sections(generating=False)
        output = tmp_path / "out" / "My_School_QuestionPaper.pdf"

        # Act
        assert window.start_export(output) is True

        # Assert
        assert window.busy.is_idle
        with fitz.open(str(output)) as pdf:
            assert pdf.page_count == 1
        assert settings.get_export_dir() == str(output.parent)

    def test_start_export_when_math_paper_then_waits_for_settle(self, qtbot, settings, tmp_path):
        # Arrange
        window = _window(qtbot, settings)
        window.config_form.math_toggle.setChecked(True)
        window.result.append("Solve $x^2 = 4$")
        window._refresh_sections(generating=False)
        output = tmp_path / "math.pdf"

        # Act
        window.start_export(output)

        # Assert
        assert window.busy.state is BusyState.EXPORTING
        assert window.preview.is_typeset
        qtbot.waitUntil(lambda: window.busy.is_idle, timeout=5000)
        assert output.exists()

    def test_start_export_when_busy_then_refused(self, qtbot, settings, tmp_path):
        window = _window(qtbot, settings)
        window.busy.try_acquire(BusyState.GENERATING)
        assert window.start_export(tmp_path / "x.pdf") is False

    def test_download_when_dialog_cancelled_then_nothing_exported(self, qtbot, settings, monkeypatch):
        window = _window(qtbot, settings)
        window.result.append("1. Q")
        window._refresh_sections(generating=False)
        monkeypatch.setattr(window, "_ask_export_path", lambda config: None)
        start = MagicMock()
        monkeypatch.setattr(window, "start_export", start)

        window._on_download_clicked()

        start.assert_not_called()

    def test_default_export_path_when_institution_then_filename_from_name(self, qtbot, settings, tmp_path):
        settings.set_export_dir(str(tmp_path))
        window = _window(qtbot, settings)
        window.config_form.institution_edit.setText("Elite  Academy")

        path = window._default_export_path(window._config)

        assert path == Path(tmp_path) / "Elite_Academy_QuestionPaper.pdf"
