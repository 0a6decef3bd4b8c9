"""
Unit Tests for the sample storage catalog.
"""

import pytest

from paper_generator.sources.selection import SourceInputError
from paper_generator.sources.storage import (
    PDF_TEXT_SEPARATOR,
    SAMPLE_STORAGE,
    StorageCatalog,
    StorageFile,
    StorageImageFolder,
    image_source_from_files,
    text_source_from_pdfs,
    validate_catalog,
)


class TestSampleCatalog:
    def test_catalog_when_loaded_then_has_expected_classes(self):
        assert [c.name for c in SAMPLE_STORAGE.classes] == ["Class 10", "Class 12"]
        assert [f.name for f in SAMPLE_STORAGE.image_folders] == [
            "Model Question Papers",
            "Previous Year Question Papers",
        ]

    def test_catalog_when_loaded_then_paths_unique(self):
        paths = [f.path for f in SAMPLE_STORAGE.all_pdfs() + SAMPLE_STORAGE.all_images()]
        assert len(paths) == len(set(paths))

    def test_find_when_known_path_then_returns_file(self):
        first = SAMPLE_STORAGE.all_pdfs()[0]
        assert SAMPLE_STORAGE.find(first.path) is first

    def test_find_when_unknown_path_then_none(self):
        assert SAMPLE_STORAGE.find("storage/nowhere.pdf") is None

    def test_validate_when_duplicate_paths_then_raises(self):
        dup = StorageFile(name="a.png", kind="image", path="p/a.png", image_data_b64="AA==", mime_type="image/png")
        catalog = StorageCatalog(classes=(), image_folders=(StorageImageFolder("F", "p/", (dup, dup)),))
        with pytest.raises(ValueError, match="Duplicate storage path"):
            validate_catalog(catalog)

    def test_storage_file_when_unknown_kind_then_raises(self):
        with pytest.raises(ValueError):
            StorageFile(name="x", kind="video", path="x")


class TestStorageSources:
    def test_text_source_when_two_chapters_then_joined_with_separator(self):
        # Arrange
        first, second = SAMPLE_STORAGE.all_pdfs()[:2]

        # Act
        source = text_source_from_pdfs([first, second])

        # Assert
        assert source.text == f"{first.pdf_text}{PDF_TEXT_SEPARATOR}{second.pdf_text}"
        assert source.description.startswith("2 PDF(s) from storage: ")

    def test_text_source_when_nothing_selected_then_raises(self):
        with pytest.raises(SourceInputError):
            text_source_from_pdfs([])

    def test_image_source_when_samples_then_decoded_in_order(self):
        files = SAMPLE_STORAGE.all_images()
        source = image_source_from_files(files)
        assert [img.name for img in source.images] == [f.name for f in files]
        assert source.images[0].data.startswith(b"\x89PNG")
        assert source.images[1].data.startswith(b"\xff\xd8")

    def test_image_source_when_payload_missing_then_raises(self):
        broken = StorageFile(name="x.png", kind="image", path="x.png", mime_type="image/png")
        with pytest.raises(SourceInputError, match="missing its image data"):
            image_source_from_files([broken])

    def test_image_source_when_pdf_given_then_raises(self):
        with pytest.raises(SourceInputError):
            image_source_from_files([SAMPLE_STORAGE.all_pdfs()[0]])
