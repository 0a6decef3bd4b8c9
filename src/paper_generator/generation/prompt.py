"""
Module: generation.prompt

Purpose:
    Build the system instruction and the request payload for one
    generation call from the source material and the form config.

Key Functions:
    - build_system_instruction(): Formatting rules for the model
    - build_request_payload(): Text or multi-part payload
    - build_request(): Both of the above plus the model id

Key Classes:
    - TextPayload: Single text block
    - MultiPartPayload: Inline image attachments then one instruction part
    - GenerationRequest: Everything the stream client needs

Dependencies:
    - base64 (std)
    - core.models: GenerationConfig, SourceMaterial

Used By:
    - generation.client: Converts requests to SDK contents
    - gui.main_window: Starts generation
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from textwrap import dedent
from typing import Optional, Tuple, Union

from paper_generator.common.constants import ANSWER_DELIMITER, GEMINI_MODEL_NAME, MAX_SOURCE_CHARS, get_model_name
from paper_generator.core.models import (
    GenerationConfig,
    ImageAttachment,
    ImageSource,
    ObjectiveLayout,
    SourceMaterial,
    TextSource,
)

logger = logging.getLogger(__name__)


SINGLE_LINE_BLOCK = dedent("""\
    For ALL objective questions:
    - Present the question number, the full question text, and ALL its options (e.g., A, B, C, D) STRICTLY on the SAME SINGLE LINE.
    - DO NOT wrap the question or options onto new lines. Keep each question concise enough to fit.
    - Each new objective question (number, question, and its options) MUST start on a new line.
    - Example for single-line objective questions:
      1. What is the capital of France? A) London B) Paris C) Berlin D) Rome
      2. Which gas do plants absorb? A) Oxygen B) Carbon Dioxide C) Nitrogen D) Hydrogen
    """)

MULTI_LINE_BLOCK = dedent("""\
    For ALL objective questions:
    - Present the question number and the full question text on one line.
    - Present EACH option (e.g., A, B, C, D) on a SEPARATE new line directly below the question.
    - Each new objective question (number and question) MUST start on a new line.
    - Example for multi-line objective questions:
      1. What is the capital of France?
         A) London
         B) Paris
         C) Berlin
         D) Rome
      2. Which gas do plants absorb?
         A) Oxygen
         B) Carbon Dioxide
         C) Nitrogen
         D) Hydrogen
    """)

MATH_BLOCK = dedent(r"""
    MATHEMATICS CONTENT INSTRUCTIONS:
    - For ALL mathematical expressions, equations, fractions, exponents, roots, integrals, summations, Greek letters, and special mathematical symbols, you MUST use LaTeX syntax.
    - Enclose inline mathematical expressions in single dollar signs (e.g., $x^2 + y^2 = z^2$).
    - Enclose display mathematical expressions (equations on their own line) in double dollar signs (e.g., $$ \int_{a}^{b} f(x) dx = F(b) - F(a) $$).
    - Examples of LaTeX usage:
      - Fraction: $\frac{a}{b}$
      - Exponent: $x^n$
      - Square root: $\sqrt{x+y}$
      - Integral: $\int x^2 dx$
      - Summation: $\sum_{i=1}^{n} i = \frac{n(n+1)}{2}$
      - Common symbols: $\pm, \times, \div, \approx, \le, \ge, \rightarrow, \infty, \alpha, \beta, \theta$
    - Ensure that LaTeX is correctly formatted and complete so it can be typeset.
    - For example, a math question could be: "Solve the equation $x^2 - 5x + 6 = 0$." Or for a more complex one: "Calculate the value of $$ \lim_{x \to 0} \frac{\sin(x)}{x} $$"
    """)

_SYSTEM_TEMPLATE = dedent("""\
    You are an expert AI Question Paper Generator. Your task is to create a high-quality question paper and a separate list of answers.

    QUESTION PAPER REQUIREMENTS:
    - Institution: {institution}
    - Number of Questions: {num_questions}
    - Language: {language}
    - Question Type: {question_type}
    - Specific Instructions from user: {custom_prompt}

    {objective_block}
    {math_block}

    For subjective questions (if any):
    - Simply list the question number and the question text. Each new subjective question should start on a new line. If it's a math paper, use LaTeX for math within subjective questions as well.

    General Formatting for Questions:
    - Ensure questions are diverse and cover different aspects of the provided text or image(s).
    - Format the output clearly, with numbering for each question.
    - Output ONLY the questions themselves in the question paper section. Do not include answers or correct options within the question paper.
    - Adhere strictly to the formatting guidelines provided, especially for objective questions and LaTeX for math if applicable.

    ANSWER SECTION REQUIREMENTS:
    - After generating ALL questions, you MUST provide a separate section for answers.
    - This section MUST start with the exact delimiter: {delimiter}
    - After the delimiter, list the answers for all questions in the same order. For objective questions, clearly indicate the correct option (e.g., "1. B", "2. A) Paris"). For subjective questions, provide a concise model answer. If it's a math paper, use LaTeX for math within answers as well.
    - Example Answer Section:
      {delimiter}
      1. B
      2. A) Paris
      3. (Model answer for a subjective question... for math, e.g., The solution is $x=2$ or $x=3$.)

    Based on the following text content or image(s), generate the question paper first, then the answer section.
    The entire output (questions, then delimiter, then answers) should be in {language}.
    """)

_TEXT_PROMPT_TEMPLATE = dedent("""\
    Text Content to use for generating questions and answers:
    ---
    {source}
    ---

    Please generate the question paper and then the answer section according to ALL system instructions.
    Strictly adhere to the requested number of questions ({num_questions}), formatting guidelines (including LaTeX if this is a math paper), and the answer section delimiter ({delimiter}).
    Output everything in {language}.
    """)

_IMAGE_PROMPT_TEMPLATE = dedent("""\
    Please generate the question paper and then the answer section according to ALL system instructions.
    The questions should be based on the content of the provided image(s).
    Strictly adhere to the requested number of questions ({num_questions}), formatting guidelines (including LaTeX if this is a math paper), and the answer section delimiter ({delimiter}).
    Output everything in {language}.
    """)


@dataclass(frozen=True)
class TextPart:
    """Instruction text inside a multi-part payload."""

    text: str


@dataclass(frozen=True)
class InlineAttachment:
    """
    Inline binary attachment as sent on the wire.

    Attributes:
        mime_type: MIME type of the image
        data: Base64-encoded file contents
    """

    mime_type: str
    data: str

    def decoded(self) -> bytes:
        return base64.b64decode(self.data)


@dataclass(frozen=True)
class TextPayload:
    """Plain-text request body."""

    text: str


@dataclass(frozen=True)
class MultiPartPayload:
    """Attachments in input order followed by exactly one trailing TextPart."""

    parts: Tuple[Union[InlineAttachment, TextPart], ...]

    def __post_init__(self):
        if not self.parts or not isinstance(self.parts[-1], TextPart):
            raise ValueError("Multi-part payload must end with a TextPart instruction")
        if not all(isinstance(p, InlineAttachment) for p in self.parts[:-1]):
            raise ValueError("Only attachments may precede the trailing instruction")

    @property
    def attachments(self) -> Tuple[InlineAttachment, ...]:
        return tuple(p for p in self.parts if isinstance(p, InlineAttachment))

    @property
    def instruction(self) -> TextPart:
        return self.parts[-1]


RequestPayload = Union[TextPayload, MultiPartPayload]


@dataclass(frozen=True)
class GenerationRequest:
    """
    A complete, SDK-independent generation request (immutable).

    Attributes:
        system_instruction: Formatting rules
        payload: TextPayload or MultiPartPayload
        model: Model identifier
    """

    system_instruction: str
    payload: RequestPayload
    model: str = GEMINI_MODEL_NAME


def objective_block_for(config: GenerationConfig) -> str:
    """Return the objective layout block, or "" when the paper has no objective questions."""
    if not config.includes_objective:
        return ""
    if config.objective_layout is ObjectiveLayout.SINGLE_LINE:
        return SINGLE_LINE_BLOCK
    return MULTI_LINE_BLOCK


def build_system_instruction(config: GenerationConfig) -> str:
    """
    Build the system instruction for a generation call.

    Includes at most one objective layout block (only for Objective/Mixed),
    the math block iff config.is_math_paper, and always the answer
    section rules with the delimiter.

    Args:
        config: Form configuration

    Returns:
        System instruction text
    """
    return _SYSTEM_TEMPLATE.format(
        institution=config.institution_name,
        num_questions=config.num_questions,
        language=config.language,
        question_type=config.question_type.value,
        custom_prompt=config.custom_prompt,
        objective_block=objective_block_for(config),
        math_block=MATH_BLOCK if config.is_math_paper else "",
        delimiter=ANSWER_DELIMITER,
    )


def truncate_source_text(text: str, limit: int = MAX_SOURCE_CHARS) -> str:
    """Keep only the first `limit` characters; longer input is dropped silently."""
    if len(text) <= limit:
        return text
    # TODO: surface truncation to the user once the preview has a status line for it
    logger.warning(f"Source text truncated from {len(text)} to {limit} characters")
    return text[:limit]


def encode_attachment(image: ImageAttachment) -> InlineAttachment:
    """Base64-encode one image into an inline attachment."""
    return InlineAttachment(
        mime_type=image.mime_type,
        data=base64.b64encode(image.data).decode("ascii"),
    )


def build_request_payload(source: SourceMaterial, config: GenerationConfig) -> RequestPayload:
    """
    Build the request payload for the given source kind.

    Text sources become a single text block containing the (capped) source
    plus a restated instruction. Image sources become one inline attachment
    per image in input order, followed by one instruction part.

    Raises:
        TypeError: If source is neither TextSource nor ImageSource
    """
    if isinstance(source, TextSource):
        text = _TEXT_PROMPT_TEMPLATE.format(
            source=truncate_source_text(source.text),
            num_questions=config.num_questions,
            delimiter=ANSWER_DELIMITER,
            language=config.language,
        )
        return TextPayload(text=text)

    if isinstance(source, ImageSource):
        attachments = [encode_attachment(img) for img in source.images]
        instruction = TextPart(text=_IMAGE_PROMPT_TEMPLATE.format(
            num_questions=config.num_questions,
            delimiter=ANSWER_DELIMITER,
            language=config.language,
        ))
        return MultiPartPayload(parts=(*attachments, instruction))

    raise TypeError(f"Unsupported source material: {type(source).__name__}")


def build_request(
    source: SourceMaterial,
    config: GenerationConfig,
    *,
    model: Optional[str] = None,
) -> GenerationRequest:
    """Build a complete GenerationRequest; model defaults to get_model_name()."""
    request = GenerationRequest(
        system_instruction=build_system_instruction(config),
        payload=build_request_payload(source, config),
        model=model or get_model_name(),
    )
    if isinstance(request.payload, MultiPartPayload):
        logger.info(f"Built multi-part request with {len(request.payload.attachments)} image(s)")
    else:
        logger.info(f"Built text request ({len(request.payload.text)} characters)")
    return request
