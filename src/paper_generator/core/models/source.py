"""
Module: core.models.source

Purpose:
    Source material for a generation call. Exactly one kind of source can
    be active at a time, so the two kinds form a tagged union rather than
    two independently nullable fields.

Key Classes:
    - ImageAttachment: One binary image with its MIME type
    - TextSource: Extracted plain text (from PDFs or sample storage)
    - ImageSource: Ordered, non-empty list of image attachments
    - SourceMaterial: Union[TextSource, ImageSource]

Dependencies:
    - dataclasses (std)

Used By:
    - generation.prompt: Payload shape depends on the source kind
    - sources.selection: Produces sources from uploaded files
    - sources.storage: Produces sources from the sample catalog
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from paper_generator.common.constants import ALLOWED_IMAGE_TYPES


@dataclass(frozen=True)
class ImageAttachment:
    """
    A single image file held in memory.

    Attributes:
        name: Original filename (for descriptions and logs)
        mime_type: One of ALLOWED_IMAGE_TYPES
        data: Raw file bytes
    """

    name: str
    mime_type: str
    data: bytes

    def __post_init__(self) -> None:
        if self.mime_type not in ALLOWED_IMAGE_TYPES:
            raise ValueError(f"Unsupported image MIME type for {self.name}: {self.mime_type!r}")
        if not self.data:
            raise ValueError(f"Image {self.name} has no data")

    def __repr__(self) -> str:
        return f"ImageAttachment(name={self.name!r}, mime_type={self.mime_type!r}, size={len(self.data)})"


@dataclass(frozen=True)
class TextSource:
    """Plain text extracted from PDF(s)."""

    text: str
    description: str = ""

    @property
    def kind(self) -> str:
        return "text"

    def default_description(self) -> str:
        return self.description or f"PDF text loaded ({len(self.text)} characters)."


@dataclass(frozen=True)
class ImageSource:
    """Ordered image attachments; never empty."""

    images: Tuple[ImageAttachment, ...]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.images:
            raise ValueError("ImageSource requires at least one image")
        if not isinstance(self.images, tuple):
            object.__setattr__(self, "images", tuple(self.images))

    @property
    def kind(self) -> str:
        return "image"

    def default_description(self) -> str:
        return self.description or f"{len(self.images)} image file(s) loaded."


SourceMaterial = Union[TextSource, ImageSource]
