"""
Core Models Package

Immutable data models passed between the GUI, the prompt builder and the
exporter. Everything except StreamedResult is a frozen dataclass, so a
generation call always works on a snapshot of the form.
"""

from .config import GenerationConfig, QuestionType, ObjectiveLayout
from .source import ImageAttachment, TextSource, ImageSource, SourceMaterial
from .result import PaperSections, StreamedResult, split_sections

__all__ = [
    "GenerationConfig",
    "QuestionType",
    "ObjectiveLayout",
    "ImageAttachment",
    "TextSource",
    "ImageSource",
    "SourceMaterial",
    "PaperSections",
    "StreamedResult",
    "split_sections",
]
