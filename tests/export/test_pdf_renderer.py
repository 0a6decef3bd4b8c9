"""
Unit Tests for bitmap-to-PDF rendering.

Written PDFs are reopened with PyMuPDF to check the page count and size.
"""

import fitz
import pytest
from PIL import Image

from paper_generator.export import renderer
from paper_generator.export.renderer import (
    A4_HEIGHT_PT,
    A4_WIDTH_PT,
    ExportStage,
    PageGeometry,
    render_bitmap_to_pdf,
)


def _page_sizes(path):
    with fitz.open(str(path)) as doc:
        return [(round(p.rect.width, 1), round(p.rect.height, 1)) for p in doc]


class TestPageGeometry:
    def test_geometry_when_default_then_a4_with_35pt_margin(self):
        geometry = PageGeometry()
        assert geometry.content_width == pytest.approx(A4_WIDTH_PT - 70)
        assert geometry.content_height == pytest.approx(A4_HEIGHT_PT - 70)

    def test_geometry_when_margin_too_large_then_raises_error(self):
        with pytest.raises(ValueError):
            PageGeometry(margin=400)


class TestRenderBitmapToPdf:
    """Tests for render_bitmap_to_pdf()."""

    def test_render_when_short_bitmap_then_single_a4_page(self, tmp_path):
        # Arrange
        output = tmp_path / "paper.pdf"
        bitmap = Image.new("RGB", (794 * 3, 800), "white")

        # Act
        result = render_bitmap_to_pdf(bitmap, output)

        # Assert
        assert result.page_count == 1
        assert result.degraded is False
        assert _page_sizes(output) == [(round(A4_WIDTH_PT, 1), round(A4_HEIGHT_PT, 1))]

    def test_render_when_tall_bitmap_then_page_per_slice(self, tmp_path, tall_bitmap):
        output = tmp_path / "tall.pdf"
        result = render_bitmap_to_pdf(tall_bitmap, output)
        assert result.page_count == 3
        assert len(_page_sizes(output)) == 3

    def test_render_when_stage_callback_then_slicing_before_packaging(self, tmp_path):
        stages = []
        render_bitmap_to_pdf(Image.new("RGB", (100, 100), "white"), tmp_path / "s.pdf", on_stage=stages.append)
        assert stages == [ExportStage.SLICING, ExportStage.PACKAGING]

    def test_render_when_output_dir_missing_then_created(self, tmp_path):
        output = tmp_path / "nested" / "dir" / "paper.pdf"
        render_bitmap_to_pdf(Image.new("RGB", (50, 50), "white"), output)
        assert output.exists()

    def test_render_when_rgba_bitmap_then_written(self, tmp_path):
        output = tmp_path / "rgba.pdf"
        result = render_bitmap_to_pdf(Image.new("RGBA", (300, 300), (255, 255, 255, 0)), output)
        assert result.page_count == 1

    def test_render_when_crop_fails_then_unsliced_fallback(self, tmp_path, tall_bitmap, monkeypatch):
        # Arrange
        def failing_crop(bitmap, page_slice):
            raise MemoryError("out of memory")

        monkeypatch.setattr(renderer, "crop_slice", failing_crop)
        output = tmp_path / "fallback.pdf"

        # Act
        result = render_bitmap_to_pdf(tall_bitmap, output)

        # Assert
        assert result.degraded is True
        assert result.page_count == 1
        assert len(_page_sizes(output)) == 1

    def test_render_when_empty_bitmap_then_raises_error(self, tmp_path):
        with pytest.raises(ValueError):
            render_bitmap_to_pdf(Image.new("RGB", (0, 0)), tmp_path / "empty.pdf")
