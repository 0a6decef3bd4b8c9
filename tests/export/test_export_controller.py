"""
Unit Tests for the export pipeline controller.
"""

import pytest
from PIL import Image

from paper_generator.export import renderer
from paper_generator.export.controller import ExportError, export_paper
from paper_generator.export.renderer import ExportStage


class TestExportPaper:
    """Tests for export_paper()."""

    def test_export_when_successful_then_stages_in_order(self, tmp_path, tall_bitmap):
        # Arrange
        stages = []
        output = tmp_path / "My_School_QuestionPaper.pdf"

        # Act
        result = export_paper(lambda: tall_bitmap, output, on_stage=stages.append)

        # Assert
        assert stages == [
            ExportStage.CAPTURING,
            ExportStage.SLICING,
            ExportStage.PACKAGING,
            ExportStage.SAVED,
        ]
        assert result.path == output
        assert result.page_count == 3
        assert output.exists()

    def test_export_when_capture_raises_then_failed_and_export_error(self, tmp_path):
        # Arrange
        stages = []

        def broken_capture():
            raise RuntimeError("renderer crashed")

        # Act / Assert
        with pytest.raises(ExportError, match="Failed to capture the preview: renderer crashed"):
            export_paper(broken_capture, tmp_path / "x.pdf", on_stage=stages.append)
        assert stages == [ExportStage.CAPTURING, ExportStage.FAILED]
        assert not (tmp_path / "x.pdf").exists()

    def test_export_when_capture_returns_none_then_export_error(self, tmp_path):
        with pytest.raises(ExportError, match="empty"):
            export_paper(lambda: None, tmp_path / "none.pdf")

    def test_export_when_packaging_fails_then_failed_and_no_file(self, tmp_path, monkeypatch):
        # Arrange
        stages = []

        def failing_render(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr("paper_generator.export.controller.render_bitmap_to_pdf", failing_render)

        # Act / Assert
        with pytest.raises(ExportError, match="Failed to generate PDF: disk full"):
            export_paper(lambda: Image.new("RGB", (10, 10)), tmp_path / "y.pdf", on_stage=stages.append)
        assert stages[-1] is ExportStage.FAILED
        assert not (tmp_path / "y.pdf").exists()

    def test_export_when_crop_fails_then_result_marked_degraded(self, tmp_path, tall_bitmap, monkeypatch):
        def failing_crop(bitmap, page_slice):
            raise ValueError("bad crop")

        monkeypatch.setattr(renderer, "crop_slice", failing_crop)
        result = export_paper(lambda: tall_bitmap, tmp_path / "z.pdf")
        assert result.degraded is True
        assert result.page_count == 1
