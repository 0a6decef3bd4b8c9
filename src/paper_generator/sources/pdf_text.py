"""
Module: sources.pdf_text

Purpose:
    Extract plain text from uploaded PDFs. Each page contributes its words
    joined by single spaces followed by a newline; the pages of every file
    are concatenated in order.

Key Functions:
    - extract_pdf_text(): Text of one PDF on disk
    - extract_pdf_text_from_bytes(): Text of one in-memory PDF
    - extract_batch(): All-or-nothing extraction of several PDFs

Dependencies:
    - fitz (PyMuPDF): PDF parsing

Used By:
    - sources.selection: PDF uploads
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

import fitz

logger = logging.getLogger(__name__)

# Index of the word string in a page.get_text("words") tuple
_WORD_TEXT = 4


class ExtractionError(Exception):
    """A PDF could not be opened or its text layer could not be read."""
    pass


def _page_text(page: fitz.Page) -> str:
    words = page.get_text("words")
    return " ".join(w[_WORD_TEXT] for w in words) + "\n"


def _document_text(doc: fitz.Document) -> str:
    return "".join(_page_text(page) for page in doc)


def extract_pdf_text_from_bytes(data: bytes, *, name: str = "<memory>") -> str:
    """
    Extract text from PDF bytes.

    Raises:
        ExtractionError: If the data is not a readable PDF
    """
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            text = _document_text(doc)
    except (RuntimeError, ValueError) as e:
        raise ExtractionError(f"Error processing PDF(s): {name}: {e}") from e
    logger.debug(f"Extracted {len(text)} characters from {name}")
    return text


def extract_pdf_text(path: Path) -> str:
    """
    Extract text from a PDF file.

    Args:
        path: PDF file on disk

    Returns:
        One line per page, words separated by single spaces

    Raises:
        ExtractionError: If the file is missing or not a readable PDF

    Example:
        >>> extract_pdf_text(Path("notes.pdf"))
        'Photosynthesis is the process ...\\n'
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ExtractionError(f"Error processing PDF(s): {path.name}: {e}") from e
    return extract_pdf_text_from_bytes(data, name=path.name)


def extract_batch(paths: Iterable[Path]) -> str:
    """
    Extract and concatenate the text of several PDFs.

    Any failure aborts the whole batch; no partial text is returned.
    """
    parts: List[str] = []
    for path in paths:
        parts.append(extract_pdf_text(path))
    text = "".join(parts)
    logger.info(f"Extracted {len(text)} characters from {len(parts)} PDF(s)")
    return text
