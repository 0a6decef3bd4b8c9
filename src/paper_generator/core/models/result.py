"""
Module: core.models.result

Purpose:
    The streamed model output and its split into a questions segment and an
    answers segment around the answer delimiter.

Key Functions:
    - split_sections(): Split accumulated text on the first delimiter

Key Classes:
    - PaperSections: Questions/answers pair for display
    - StreamedResult: Append-only accumulator fed by stream chunks

Used By:
    - gui.main_window: Preview and answer panels
    - generation.client: Final text assembly
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from paper_generator.common.constants import ANSWER_DELIMITER, ANSWERS_PLACEHOLDER, ERROR_MARKER


@dataclass(frozen=True)
class PaperSections:
    """Display-ready questions and answers."""

    questions: str
    answers: str

    @property
    def has_answers(self) -> bool:
        return bool(self.answers) and self.answers != ANSWERS_PLACEHOLDER


def split_sections(text: str, *, generating: bool = False) -> PaperSections:
    """
    Split accumulated output into questions and answers.

    Everything before the first delimiter is the questions segment and
    everything after it is the answers segment, both trimmed. Without a
    delimiter the whole text is the questions segment; the answers segment
    is a placeholder while generation is still running.

    Args:
        text: Accumulated stream text
        generating: Whether the stream is still in flight

    Returns:
        PaperSections

    Example:
        >>> split_sections("1. Q?\\n---ANSWERS---\\n1. A").answers
        '1. A'
    """
    questions, found, answers = text.partition(ANSWER_DELIMITER)
    if found:
        return PaperSections(questions=questions.strip(), answers=answers.strip())
    placeholder = ANSWERS_PLACEHOLDER if generating and text else ""
    return PaperSections(questions=questions.strip(), answers=placeholder)


class StreamedResult:
    """
    Append-only accumulation of stream chunks.

    Only append() and annotate_error() mutate the text; readers call
    sections() to get the split view.
    """

    def __init__(self) -> None:
        self._chunks: List[str] = []

    def append(self, chunk: str) -> None:
        if chunk:
            self._chunks.append(chunk)

    def annotate_error(self, message: str) -> None:
        """Keep partial output and mark where the stream failed."""
        self._chunks.append(f"\n\n{ERROR_MARKER}\n{message}")

    def reset(self) -> None:
        self._chunks.clear()

    @property
    def text(self) -> str:
        return "".join(self._chunks)

    @property
    def chunk_count(self) -> int:
        return len(self._chunks)

    @property
    def has_delimiter(self) -> bool:
        return ANSWER_DELIMITER in self.text

    def sections(self, generating: bool = False) -> PaperSections:
        return split_sections(self.text, generating=generating)
