"""
Unit Tests for PDF text extraction.
"""

import pytest

from paper_generator.sources.pdf_text import (
    ExtractionError,
    extract_batch,
    extract_pdf_text,
    extract_pdf_text_from_bytes,
)


class TestExtractPdfText:
    def test_extract_when_single_page_then_words_joined_with_newline(self, make_pdf):
        path = make_pdf("notes.pdf", ["Photosynthesis is the process"])
        assert extract_pdf_text(path) == "Photosynthesis is the process\n"

    def test_extract_when_multiple_pages_then_one_line_per_page(self, make_pdf):
        path = make_pdf("chapter.pdf", ["Page one text", "Page two text"])
        assert extract_pdf_text(path) == "Page one text\nPage two text\n"

    def test_extract_when_page_has_no_text_then_empty_line(self, make_pdf):
        path = make_pdf("blank.pdf", [""])
        assert extract_pdf_text(path) == "\n"

    def test_extract_when_missing_file_then_raises_extraction_error(self, tmp_path):
        with pytest.raises(ExtractionError, match="Error processing PDF"):
            extract_pdf_text(tmp_path / "missing.pdf")

    def test_extract_from_bytes_when_corrupt_then_raises_extraction_error(self):
        with pytest.raises(ExtractionError, match="broken.pdf"):
            extract_pdf_text_from_bytes(b"this is not a pdf", name="broken.pdf")


class TestExtractBatch:
    def test_batch_when_several_files_then_concatenated_in_order(self, make_pdf):
        first = make_pdf("a.pdf", ["Alpha"])
        second = make_pdf("b.pdf", ["Beta"])
        assert extract_batch([first, second]) == "Alpha\nBeta\n"

    def test_batch_when_one_file_corrupt_then_whole_batch_fails(self, make_pdf, tmp_path):
        # Arrange
        good = make_pdf("good.pdf", ["Fine"])
        bad = tmp_path / "bad.pdf"
        bad.write_bytes(b"%PDF-garbage")

        # Act / Assert
        with pytest.raises(ExtractionError):
            extract_batch([good, bad])
