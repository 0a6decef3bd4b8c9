"""
Unit Tests for file selection and the active-source holder.
"""

import pytest

from paper_generator.core.models import ImageSource, TextSource
from paper_generator.sources.pdf_text import ExtractionError
from paper_generator.sources.selection import (
    MIXED_SELECTION_MESSAGE,
    NO_SOURCE_MESSAGE,
    SourceInputError,
    SourceSelection,
    classify_files,
    describe_selection,
    guess_mime_type,
    load_files,
)


class TestClassifyFiles:
    def test_classify_when_all_pdfs_then_pdf(self, tmp_path):
        assert classify_files([tmp_path / "a.pdf", tmp_path / "b.PDF"]) == "pdf"

    def test_classify_when_all_images_then_image(self, tmp_path):
        paths = [tmp_path / "a.png", tmp_path / "b.jpg", tmp_path / "c.gif", tmp_path / "d.webp"]
        assert classify_files(paths) == "image"

    def test_classify_when_mixed_then_raises_mixed_message(self, tmp_path):
        with pytest.raises(SourceInputError) as exc_info:
            classify_files([tmp_path / "a.pdf", tmp_path / "b.png"])
        assert str(exc_info.value) == MIXED_SELECTION_MESSAGE

    def test_classify_when_unsupported_type_then_rejected(self, tmp_path):
        with pytest.raises(SourceInputError):
            classify_files([tmp_path / "notes.txt"])

    def test_classify_when_empty_then_raises_no_source(self):
        with pytest.raises(SourceInputError, match="upload"):
            classify_files([])

    def test_guess_mime_type_when_webp_then_known(self, tmp_path):
        assert guess_mime_type(tmp_path / "x.webp") == "image/webp"


class TestDescribeSelection:
    def test_describe_when_short_names_then_lists_them(self):
        assert describe_selection(["a.pdf", "b.pdf"]) == "2 file(s) selected: a.pdf, b.pdf..."

    def test_describe_when_long_names_then_cut_at_limit(self):
        names = ["x" * 80, "y" * 80]
        description = describe_selection(names)
        listed = description[len("2 file(s) selected: "):-len("...")]
        assert len(listed) == 100


class TestLoadFiles:
    def test_load_when_pdfs_then_text_source(self, make_pdf):
        path = make_pdf("bio.pdf", ["Photosynthesis is the process"])
        source = load_files([path])
        assert isinstance(source, TextSource)
        assert source.text == "Photosynthesis is the process\n"
        assert source.description == "Uploaded: 1 file(s) selected: bio.pdf..."

    def test_load_when_images_then_attachments_in_order(self, sample_image, tmp_path):
        # Arrange
        second = tmp_path / "second.png"
        second.write_bytes(sample_image.read_bytes())

        # Act
        source = load_files([sample_image, second])

        # Assert
        assert isinstance(source, ImageSource)
        assert [img.name for img in source.images] == ["sample.png", "second.png"]
        assert source.images[0].mime_type == "image/png"

    def test_load_when_image_missing_then_source_input_error(self, tmp_path):
        with pytest.raises(SourceInputError, match="Could not read image"):
            load_files([tmp_path / "gone.png"])

    def test_load_when_empty_image_file_then_source_input_error(self, tmp_path):
        empty = tmp_path / "empty.png"
        empty.write_bytes(b"")
        with pytest.raises(SourceInputError, match="no data"):
            load_files([empty])


class TestSourceSelection:
    """Tests for the single active source."""

    def test_select_when_valid_files_then_replaces_source(self, make_pdf, sample_image):
        # Arrange
        selection = SourceSelection()
        selection.select_files([sample_image])
        assert selection.source.kind == "image"

        # Act
        selection.select_files([make_pdf("n.pdf", ["Text"])])

        # Assert
        assert selection.source.kind == "text"

    def test_select_when_zero_files_then_clears(self, sample_image):
        selection = SourceSelection()
        selection.select_files([sample_image])

        result = selection.select_files([])

        assert result is None
        assert selection.has_source is False
        assert selection.description == ""

    def test_select_when_mixed_then_clears_and_raises(self, sample_image, make_pdf):
        # Arrange
        selection = SourceSelection()
        selection.select_files([sample_image])

        # Act / Assert
        with pytest.raises(SourceInputError):
            selection.select_files([sample_image, make_pdf("x.pdf", ["x"])])
        assert selection.source is None

    def test_select_when_corrupt_pdf_then_clears_and_raises(self, tmp_path):
        bad = tmp_path / "bad.pdf"
        bad.write_bytes(b"not a pdf")
        selection = SourceSelection()
        selection.set_source(TextSource(text="previous"))

        with pytest.raises(ExtractionError):
            selection.select_files([bad])
        assert selection.has_source is False

    def test_no_source_message_when_shown_then_mentions_storage(self):
        assert "Storage" in NO_SOURCE_MESSAGE
