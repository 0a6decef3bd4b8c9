"""
Module: sources

Purpose:
    Everything that produces source material for a generation call:
    uploaded files (PDF text or images) and the built-in sample storage.

Key Classes:
    - SourceSelection: The single active source
    - StorageCatalog: Sample storage tree

Dependencies:
    - fitz (PyMuPDF): PDF text extraction

Used By:
    - gui.widgets.file_upload
    - gui.widgets.storage_browser
"""

from .pdf_text import ExtractionError, extract_batch, extract_pdf_text, extract_pdf_text_from_bytes
from .selection import (
    MIXED_SELECTION_MESSAGE,
    NO_SOURCE_MESSAGE,
    SourceInputError,
    SourceSelection,
    classify_files,
    describe_selection,
    guess_mime_type,
    load_files,
)
from .storage import (
    SAMPLE_STORAGE,
    StorageCatalog,
    StorageClass,
    StorageFile,
    StorageImageFolder,
    StorageSubject,
    image_source_from_files,
    text_source_from_pdfs,
    validate_catalog,
)

__all__ = [
    # PDF text
    "ExtractionError",
    "extract_batch",
    "extract_pdf_text",
    "extract_pdf_text_from_bytes",
    # Selection
    "MIXED_SELECTION_MESSAGE",
    "NO_SOURCE_MESSAGE",
    "SourceInputError",
    "SourceSelection",
    "classify_files",
    "describe_selection",
    "guess_mime_type",
    "load_files",
    # Storage
    "SAMPLE_STORAGE",
    "StorageCatalog",
    "StorageClass",
    "StorageFile",
    "StorageImageFolder",
    "StorageSubject",
    "image_source_from_files",
    "text_source_from_pdfs",
    "validate_catalog",
]
