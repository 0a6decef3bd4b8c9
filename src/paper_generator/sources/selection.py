"""
Module: sources.selection

Purpose:
    Turn a user's file selection into source material and hold the single
    active source for the session. Only all-PDF or all-image selections are
    accepted; selecting a new source always replaces the previous one.

Key Functions:
    - guess_mime_type(): MIME type from the file extension
    - classify_files(): "pdf" or "image" for a homogeneous selection
    - load_files(): Read a selection into a TextSource or ImageSource

Key Classes:
    - SourceSelection: Mutable holder of the active source
    - SourceInputError: Invalid or empty selection

Dependencies:
    - mimetypes (std)
    - sources.pdf_text: PDF text extraction

Used By:
    - gui.widgets.file_upload: Upload button
    - gui.widgets.storage_browser: Sample storage selections
    - gui.main_window: Generation precondition
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from paper_generator.common.constants import ALLOWED_IMAGE_TYPES, ALLOWED_PDF_TYPE
from paper_generator.core.models import ImageAttachment, ImageSource, SourceMaterial, TextSource

from .pdf_text import extract_batch

logger = logging.getLogger(__name__)

MIXED_SELECTION_MESSAGE = (
    "Invalid file selection. Please upload only PDF files or only image files "
    "(JPEG, PNG, GIF, WebP). Mixed types are not supported."
)
NO_SOURCE_MESSAGE = "Please upload PDF(s)/Image(s) or select from Storage first."

# Names in the description are cut at this many characters
_DESCRIPTION_NAMES_LIMIT = 100

# mimetypes does not know webp on every platform
mimetypes.add_type("image/webp", ".webp")


class SourceInputError(Exception):
    """The selection cannot be used as source material."""
    pass


def guess_mime_type(path: Path) -> Optional[str]:
    mime, _ = mimetypes.guess_type(str(path))
    return mime


def classify_files(paths: Sequence[Path]) -> str:
    """
    Classify a selection as all-PDF or all-image.

    Returns:
        "pdf" or "image"

    Raises:
        SourceInputError: Empty, mixed or unsupported selection
    """
    if not paths:
        raise SourceInputError(NO_SOURCE_MESSAGE)
    types = [guess_mime_type(p) for p in paths]
    if all(t == ALLOWED_PDF_TYPE for t in types):
        return "pdf"
    if all(t in ALLOWED_IMAGE_TYPES for t in types):
        return "image"
    raise SourceInputError(MIXED_SELECTION_MESSAGE)


def describe_selection(names: Sequence[str]) -> str:
    """Short summary such as '2 file(s) selected: a.pdf, b.pdf...'."""
    joined = ", ".join(names)[:_DESCRIPTION_NAMES_LIMIT]
    return f"{len(names)} file(s) selected: {joined}..."


def load_files(paths: Sequence[Path]) -> SourceMaterial:
    """
    Read a homogeneous selection into source material.

    PDFs are extracted to text (all files concatenated); images are read as
    raw bytes in selection order.

    Raises:
        SourceInputError: Invalid selection or unreadable image
        ExtractionError: A PDF could not be read
    """
    paths = [Path(p) for p in paths]
    kind = classify_files(paths)
    description = f"Uploaded: {describe_selection([p.name for p in paths])}"

    if kind == "pdf":
        text = extract_batch(paths)
        return TextSource(text=text, description=description)

    images: List[ImageAttachment] = []
    for path in paths:
        try:
            data = path.read_bytes()
        except OSError as e:
            raise SourceInputError(f"Could not read image {path.name}: {e}") from e
        try:
            images.append(ImageAttachment(name=path.name, mime_type=guess_mime_type(path), data=data))
        except ValueError as e:
            raise SourceInputError(str(e)) from e
    return ImageSource(images=tuple(images), description=description)


class SourceSelection:
    """
    The one active source of the session.

    Holds either a TextSource or an ImageSource, never both. Every
    successful selection replaces what was there; every failed selection
    leaves the holder empty.
    """

    def __init__(self) -> None:
        self._source: Optional[SourceMaterial] = None

    @property
    def source(self) -> Optional[SourceMaterial]:
        return self._source

    @property
    def has_source(self) -> bool:
        return self._source is not None

    @property
    def description(self) -> str:
        if self._source is None:
            return ""
        return self._source.default_description()

    def set_source(self, source: SourceMaterial) -> None:
        self._source = source
        logger.info(f"Active source: {self.description}")

    def clear(self) -> None:
        if self._source is not None:
            logger.debug("Cleared active source")
        self._source = None

    def select_files(self, paths: Iterable[Path]) -> Optional[SourceMaterial]:
        """
        Replace the active source with the given files.

        An empty selection just clears the holder. A failed selection clears
        it and re-raises the error.
        """
        paths = list(paths)
        self.clear()
        if not paths:
            return None
        source = load_files(paths)
        self.set_source(source)
        return source
