"""
Module: core.models.config

Purpose:
    Provides the GenerationConfig dataclass - the user's paper settings,
    passed by value into the prompt builder for one generation call.

Key Classes:
    - QuestionType: Objective / Subjective / Mixed
    - ObjectiveLayout: Single-line or multi-line option layout
    - GenerationConfig: Immutable, validated form values

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - generation.prompt: System instruction and payload construction
    - gui.widgets.config_form: Form state
    - gui.main_window: Export filename
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

from paper_generator.common.constants import (
    DEFAULT_CUSTOM_PROMPT,
    DEFAULT_INSTITUTION_NAME,
    DEFAULT_IS_MATH_PAPER,
    DEFAULT_LANGUAGE,
    DEFAULT_NUM_QUESTIONS,
    DEFAULT_PDF_FONT_SIZE,
    DEFAULT_SHOW_PAPER_HEADER,
    MAX_PDF_FONT_SIZE,
    MIN_PDF_FONT_SIZE,
    SUPPORTED_LANGUAGES,
)

_WHITESPACE_RE = re.compile(r"\s+")


class QuestionType(str, Enum):
    """Kind of questions requested from the model."""

    OBJECTIVE = "Objective"
    SUBJECTIVE = "Subjective"
    MIXED = "Mixed (Objective & Subjective)"


class ObjectiveLayout(str, Enum):
    """How a multiple-choice question's options are laid out."""

    SINGLE_LINE = "Single Line (Question & Options)"
    MULTI_LINE = "Multi-line (Options below Question)"


@dataclass(frozen=True)
class GenerationConfig:
    """
    Configuration for one question paper generation (immutable).

    Numeric fields are kept as strings because they come straight from
    text inputs and are interpolated into the prompt verbatim; they are
    validated on construction.

    Attributes:
        institution_name: Printed in the paper header and used for the filename
        num_questions: Positive integer as a string
        language: One of SUPPORTED_LANGUAGES
        question_type: Objective, Subjective or Mixed
        objective_layout: Option layout (only used for Objective/Mixed)
        custom_prompt: Free-text extra instructions for the model
        pdf_font_size: Preview/export font size in points, "8".."24"
        show_paper_header: Whether the preview shows the institution header
        is_math_paper: Request LaTeX math and typeset it in the preview

    Example:
        >>> config = GenerationConfig(num_questions="5", question_type=QuestionType.OBJECTIVE)
        >>> config.includes_objective
        True
    """

    institution_name: str = DEFAULT_INSTITUTION_NAME
    num_questions: str = DEFAULT_NUM_QUESTIONS
    language: str = DEFAULT_LANGUAGE
    question_type: QuestionType = QuestionType.OBJECTIVE
    objective_layout: ObjectiveLayout = ObjectiveLayout.SINGLE_LINE
    custom_prompt: str = DEFAULT_CUSTOM_PROMPT
    pdf_font_size: str = DEFAULT_PDF_FONT_SIZE
    show_paper_header: bool = DEFAULT_SHOW_PAPER_HEADER
    is_math_paper: bool = DEFAULT_IS_MATH_PAPER

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        num = self.num_questions.strip()
        if not num.isdigit() or int(num) <= 0:
            raise ValueError(f"num_questions must be a positive integer: {self.num_questions!r}")
        if self.language not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language: {self.language!r}")
        try:
            font_size = float(self.pdf_font_size)
        except ValueError:
            raise ValueError(f"pdf_font_size must be numeric: {self.pdf_font_size!r}") from None
        if not MIN_PDF_FONT_SIZE <= font_size <= MAX_PDF_FONT_SIZE:
            raise ValueError(
                f"pdf_font_size must be between {MIN_PDF_FONT_SIZE} and {MAX_PDF_FONT_SIZE}: "
                f"{self.pdf_font_size}"
            )
        # Accept raw enum values from persisted settings
        if not isinstance(self.question_type, QuestionType):
            object.__setattr__(self, "question_type", QuestionType(self.question_type))
        if not isinstance(self.objective_layout, ObjectiveLayout):
            object.__setattr__(self, "objective_layout", ObjectiveLayout(self.objective_layout))

    @property
    def includes_objective(self) -> bool:
        """True when the paper contains multiple-choice questions."""
        return self.question_type in (QuestionType.OBJECTIVE, QuestionType.MIXED)

    @property
    def font_size_pt(self) -> float:
        return float(self.pdf_font_size)

    def export_filename(self) -> str:
        """Download filename: institution name with whitespace runs collapsed to '_'."""
        stem = _WHITESPACE_RE.sub("_", self.institution_name)
        return f"{stem}_QuestionPaper.pdf"

    def with_changes(self, **changes) -> "GenerationConfig":
        """Return a copy with the given fields replaced (re-validated)."""
        return replace(self, **changes)
