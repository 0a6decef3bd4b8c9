"""Unit tests for the question paper preview and the answer panel."""

import pytest

from paper_generator.common.constants import ANSWERS_PLACEHOLDER
from paper_generator.core.models import GenerationConfig
from paper_generator.gui.utils.paper_document import (
    DocumentOptions,
    body_html,
    build_document,
    paper_details,
)
from paper_generator.gui.widgets.answer_display import NO_ANSWERS_TEXT, AnswerDisplay
from paper_generator.gui.widgets.paper_preview import EMPTY_PREVIEW_TEXT, PaperPreview

MATH_CONFIG = GenerationConfig(is_math_paper=True)


@pytest.fixture
def preview(qtbot):
    widget = PaperPreview()
    qtbot.addWidget(widget)
    return widget


class TestPaperPreview:
    """Tests for PaperPreview content and typesetting."""

    def test_init_when_empty_then_shows_placeholder(self, preview):
        assert preview.has_content is False
        assert preview.toPlainText() == EMPTY_PREVIEW_TEXT

    def test_set_content_when_text_then_shown_with_header(self, preview):
        config = GenerationConfig(institution_name="Elite Academy")
        preview.set_content("1. What is photosynthesis?", config)

        shown = preview.toPlainText()
        assert "Elite Academy" in shown
        assert "1. What is photosynthesis?" in shown
        assert preview.has_content

    def test_set_content_when_header_off_then_no_header(self, preview):
        config = GenerationConfig(institution_name="Elite Academy", show_paper_header=False)
        preview.set_content("1. Q", config)
        assert "Elite Academy" not in preview.toPlainText()

    def test_set_content_when_plain_paper_then_no_typeset_scheduled(self, preview):
        preview.set_content("Solve $x^2$", GenerationConfig())
        assert preview.typeset_pending is False
        assert "$x^2$" in preview.toPlainText()

    def test_set_content_when_math_paper_then_typeset_debounced(self, qtbot, preview):
        preview.set_content("Solve $x^2 = 4$", MATH_CONFIG)
        assert preview.typeset_pending is True

        with qtbot.waitSignal(preview.typesettingChanged, timeout=2000) as blocker:
            pass
        assert blocker.args == [True]
        qtbot.waitUntil(lambda: preview.is_typeset, timeout=2000)

    def test_typeset_now_when_math_then_brackets_with_signals(self, preview):
        states = []
        preview.typesettingChanged.connect(states.append)
        preview.set_content("Solve $x^2 = 4$", MATH_CONFIG)

        preview.typeset_now()

        assert states == [True, False]
        assert preview.is_typeset
        assert preview.typeset_pending is False
        assert "$x^2 = 4$" not in preview.toPlainText()

    def test_typeset_now_when_not_math_then_no_signal(self, qtbot, preview):
        preview.set_content("Plain", GenerationConfig())
        with qtbot.assertNotEmitted(preview.typesettingChanged):
            preview.typeset_now()

    def test_set_content_when_streaming_updates_then_typeset_reset(self, preview):
        preview.set_content("Solve $x$", MATH_CONFIG)
        preview.typeset_now()
        preview.set_content("Solve $x$ and $y$", MATH_CONFIG)
        assert preview.is_typeset is False

    def test_export_document_when_content_then_matches_preview_text(self, preview):
        preview.set_content("1. Define osmosis.", GenerationConfig())
        document = preview.export_document()
        assert "1. Define osmosis." in document.toPlainText()

    def test_clear_content_when_called_then_placeholder(self, preview):
        preview.set_content("x", GenerationConfig())
        preview.clear_content()
        assert preview.toPlainText() == EMPTY_PREVIEW_TEXT


class TestAnswerDisplay:
    def test_init_when_empty_then_no_answers_text(self, qtbot):
        panel = AnswerDisplay()
        qtbot.addWidget(panel)
        assert panel.browser.toPlainText() == NO_ANSWERS_TEXT

    def test_set_content_when_placeholder_then_shown_verbatim(self, qtbot):
        panel = AnswerDisplay()
        qtbot.addWidget(panel)
        panel.set_content(ANSWERS_PLACEHOLDER, GenerationConfig())
        assert panel.is_placeholder
        assert panel.browser.toPlainText() == ANSWERS_PLACEHOLDER

    def test_set_content_when_answers_then_shown(self, qtbot):
        panel = AnswerDisplay()
        qtbot.addWidget(panel)
        panel.set_content("1. A\n2. B", GenerationConfig())
        assert panel.browser.toPlainText() == "1. A\n2. B"


class TestPaperDocument:
    def test_body_html_when_special_chars_then_escaped(self):
        assert body_html("a < b\nc", None) == "a &lt; b<br/>c"

    def test_body_html_when_not_typeset_then_raw_latex_kept(self):
        assert body_html("Find $x$", None) == "Find $x$"

    def test_paper_details_when_config_then_lists_type_and_count(self):
        details = paper_details(GenerationConfig(num_questions="12"))
        assert details == "Subject: Based on Uploaded Chapter | Type: Objective | Total Questions: 12"

    def test_build_document_when_typeset_fails_then_raw_latex_shown(self, qapp):
        options = DocumentOptions(font_size_pt=12, typeset=True)
        document = build_document("Broken $\\frac{a}{$ here", options)
        assert "$\\frac{a}{$" in document.toPlainText()

    def test_for_paper_when_not_math_then_never_typeset(self):
        options = DocumentOptions.for_paper(GenerationConfig(), typeset=True)
        assert options.typeset is False
