"""
Module: sources.storage

Purpose:
    Built-in sample storage: a small catalog of class/subject/chapter PDFs
    (held as pre-extracted text) and folders of sample question-paper
    images. The storage browser turns a checked subset into a source.

Key Functions:
    - validate_catalog(): Reject duplicate paths within a parent
    - text_source_from_pdfs(): Combine selected chapter texts
    - image_source_from_files(): Decode selected sample images

Key Classes:
    - StorageFile, StorageSubject, StorageClass, StorageImageFolder
    - StorageCatalog: Root of the tree

Dependencies:
    - base64 (std)

Used By:
    - gui.widgets.storage_browser: Catalog tree
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from paper_generator.core.models import ImageAttachment, ImageSource, TextSource

from .selection import SourceInputError

logger = logging.getLogger(__name__)

PDF_TEXT_SEPARATOR = "\n\n---\n\n"


@dataclass(frozen=True)
class StorageFile:
    """
    One file in sample storage.

    Attributes:
        name: Display name
        kind: "pdf" or "image"
        path: Unique path inside storage
        pdf_text: Pre-extracted text (pdf files)
        image_data_b64: Base64 image payload (image files)
        mime_type: Image MIME type (image files)
    """

    name: str
    kind: str
    path: str
    pdf_text: Optional[str] = None
    image_data_b64: Optional[str] = None
    mime_type: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind not in ("pdf", "image"):
            raise ValueError(f"Unknown storage file kind: {self.kind!r}")


@dataclass(frozen=True)
class StorageSubject:
    name: str
    chapters: Tuple[StorageFile, ...]


@dataclass(frozen=True)
class StorageClass:
    name: str
    subjects: Tuple[StorageSubject, ...]


@dataclass(frozen=True)
class StorageImageFolder:
    name: str
    path_prefix: str
    images: Tuple[StorageFile, ...]


@dataclass(frozen=True)
class StorageCatalog:
    """Root of the sample storage tree."""

    classes: Tuple[StorageClass, ...]
    image_folders: Tuple[StorageImageFolder, ...]

    def all_pdfs(self) -> Tuple[StorageFile, ...]:
        return tuple(
            chapter
            for cls in self.classes
            for subject in cls.subjects
            for chapter in subject.chapters
        )

    def all_images(self) -> Tuple[StorageFile, ...]:
        return tuple(img for folder in self.image_folders for img in folder.images)

    def find(self, path: str) -> Optional[StorageFile]:
        for f in self.all_pdfs() + self.all_images():
            if f.path == path:
                return f
        return None


def _check_unique(paths: Iterable[str], parent: str) -> None:
    seen = set()
    for path in paths:
        if path in seen:
            raise ValueError(f"Duplicate storage path in {parent}: {path}")
        seen.add(path)


def validate_catalog(catalog: StorageCatalog) -> StorageCatalog:
    """
    Check that file paths are unique within their parent.

    Raises:
        ValueError: On the first duplicate found
    """
    for cls in catalog.classes:
        for subject in cls.subjects:
            _check_unique((c.path for c in subject.chapters), f"{cls.name}/{subject.name}")
    for folder in catalog.image_folders:
        _check_unique((i.path for i in folder.images), folder.name)
    return catalog


def text_source_from_pdfs(files: Sequence[StorageFile]) -> TextSource:
    """
    Combine the text of the selected storage PDFs.

    Raises:
        SourceInputError: Nothing selected or a file without text
    """
    if not files:
        raise SourceInputError("Please select at least one PDF from storage.")
    texts = []
    for f in files:
        if f.kind != "pdf" or f.pdf_text is None:
            raise SourceInputError(f"Storage file {f.name} has no PDF text content.")
        texts.append(f.pdf_text)
    names = ", ".join(f.name for f in files)
    return TextSource(
        text=PDF_TEXT_SEPARATOR.join(texts),
        description=f"{len(files)} PDF(s) from storage: {names}",
    )


def image_source_from_files(files: Sequence[StorageFile]) -> ImageSource:
    """
    Decode the selected storage images.

    Raises:
        SourceInputError: Nothing selected, or a file missing its payload or MIME type
    """
    if not files:
        raise SourceInputError("Please select at least one image from storage.")
    images = []
    for f in files:
        if f.kind != "image" or not f.image_data_b64 or not f.mime_type:
            raise SourceInputError(f"Storage image {f.name} is missing its image data or MIME type.")
        try:
            data = base64.b64decode(f.image_data_b64, validate=True)
            images.append(ImageAttachment(name=f.name, mime_type=f.mime_type, data=data))
        except (binascii.Error, ValueError) as e:
            raise SourceInputError(f"Storage image {f.name} could not be decoded: {e}") from e
    names = ", ".join(f.name for f in files)
    return ImageSource(
        images=tuple(images),
        description=f"{len(files)} image(s) from storage: {names}",
    )


# ---------------------------------------------------------------------------
# Built-in sample catalog
# ---------------------------------------------------------------------------

# Tiny placeholder images (1x1 PNG, 16x16 JPEG)
_TINY_PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
_TINY_JPG_B64 = (
    "/9j/4AAQSkZJRgABAQEAAQABAAD/2wBDAAMCAgICAgMCAgIDAwMDBAYEBAQEBAgGBgUGCQgKCgkICQkKDA8MCgsOCwkJDRENDg8QEBEQCgwSExIQEw8QEBD/"
    "2wBDAQMDAwQDBAgEBAgQCwkLEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBD/wAARCAAQABADASIAAhEBAxEB/8QA"
    "FgABAQEAAAAAAAAAAAAAAAAABwQF/8QAJBAAAQQBBAICAwAAAAAAAAAAAQIDBAYFBwgSExEiABQJMTL/xAAVAQEBAAAAAAAAAAAAAAAAAAAABv/EACMRAAEC"
    "BQMFAAAAAAAAAAAAAAECEQMEBQYhABIxFRZhgeH/2gAMAwEAAhEDEQA/ABSm0mobc8HmExLUlRzzEWPkJWW+ulrsaUVAseUgslSlH9LKuPryIKuWPZdskzXm"
    "m3fX5m2nF4GlVxx/HOpx4ks51+MiU/Iaad7UcUo4tILoS4kqcWkezS0hO/HvuRp0rO6hWnWO1UisZVuFi4GFeyEpmGepa5S5SWVPuciFKRFLgSrwetnyPIB+"
    "Vb4N9mKhQMzo5po9XLdDs9d6ZVix2VEhiL9kuNPxw2gEKcDQ/rs8AuA8VAe0vdl7VOYn+27flGAUgmITjbhSmCg3BYlyeWDkMolvw4KOp1KM6iCNvngZHwet"
    "f//Z"
)


def _chapter(cls: str, subject: str, name: str, filename: str, text: str) -> StorageFile:
    return StorageFile(name=name, kind="pdf", path=f"storage/{cls}/{subject}/{filename}", pdf_text=text)


def _image(prefix: str, name: str, data: str, mime_type: str) -> StorageFile:
    return StorageFile(
        name=name, kind="image", path=f"{prefix}{name}", image_data_b64=data, mime_type=mime_type
    )


SAMPLE_STORAGE = validate_catalog(StorageCatalog(
    classes=(
        StorageClass("Class 10", (
            StorageSubject("Mathematics", (
                _chapter(
                    "Class 10", "Mathematics",
                    "Chapter 1 - Real Numbers.pdf", "Chapter 1 - Real Numbers.pdf",
                    "This is the simulated text content for Class 10 Mathematics, Chapter 1: Real Numbers. "
                    "It covers topics like Euclid's division lemma, fundamental theorem of arithmetic, "
                    "irrational numbers, and decimal expansions of rational numbers.",
                ),
                _chapter(
                    "Class 10", "Mathematics",
                    "Chapter 2 - Polynomials.pdf", "Chapter 2 - Polynomials.pdf",
                    "Simulated content for Class 10 Mathematics, Chapter 2: Polynomials. This includes degree "
                    "of a polynomial, zeroes of a polynomial, relationship between zeroes and coefficients, "
                    "and division algorithm for polynomials.",
                ),
            )),
            StorageSubject("Science", (
                _chapter(
                    "Class 10", "Science",
                    "Chapter 1 - Chemical Reactions and Equations.pdf", "Chapter 1 - Chemical Reactions.pdf",
                    "Simulated text for Class 10 Science, Chapter 1: Chemical Reactions and Equations. Topics "
                    "include chemical equations, balancing chemical equations, types of chemical reactions "
                    "(combination, decomposition, displacement, double displacement, oxidation and reduction).",
                ),
                _chapter(
                    "Class 10", "Science",
                    "Chapter 6 - Life Processes.pdf", "Chapter 6 - Life Processes.pdf",
                    "Simulated text for Class 10 Science, Chapter 6: Life Processes. This chapter explores "
                    "nutrition, respiration, transportation, and excretion in living organisms.",
                ),
            )),
        )),
        StorageClass("Class 12", (
            StorageSubject("Physics", (
                _chapter(
                    "Class 12", "Physics",
                    "Chapter 1 - Electric Charges and Fields.pdf", "Chapter 1 - Electric Charges.pdf",
                    "Simulated content for Class 12 Physics, Chapter 1: Electric Charges and Fields. Covers "
                    "electric charge, Coulomb's law, electric field, electric field lines, electric flux, "
                    "Gauss's law and its applications.",
                ),
            )),
            StorageSubject("Chemistry", (
                _chapter(
                    "Class 12", "Chemistry",
                    "Chapter 1 - The Solid State.pdf", "Chapter 1 - The Solid State.pdf",
                    "Simulated content for Class 12 Chemistry, Chapter 1: The Solid State. Discusses "
                    "classification of solids, crystal lattices, unit cells, packing in solids, imperfections "
                    "in solids, electrical and magnetic properties of solids.",
                ),
            )),
        )),
    ),
    image_folders=(
        StorageImageFolder("Model Question Papers", "storage/model_paper/", (
            _image("storage/model_paper/", "MQ_Physics_SetA_Page1.png", _TINY_PNG_B64, "image/png"),
            _image("storage/model_paper/", "MQ_Math_SetB_Diagram.jpg", _TINY_JPG_B64, "image/jpeg"),
        )),
        StorageImageFolder("Previous Year Question Papers", "storage/previous_year_question_paper/", (
            _image(
                "storage/previous_year_question_paper/", "PYQ_Chemistry_2023_Q5.png",
                _TINY_PNG_B64, "image/png",
            ),
        )),
    ),
))
