"""Centralized constants for the question paper generator.

Model identifiers, form defaults, MIME allow-lists and the export/typesetting
numbers all live here so the GUI, the builder and the exporter agree on them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

APP_TITLE = "AI Question Paper Generator"

# Model
GEMINI_MODEL_NAME = "gemini-2.5-pro"
MODEL_ENV_VAR = "PAPER_GENERATOR_MODEL"


def get_model_name(environ: Optional[Mapping[str, str]] = None) -> str:
    """Model identifier from PAPER_GENERATOR_MODEL, else the default."""
    env = os.environ if environ is None else environ
    return (env.get(MODEL_ENV_VAR) or "").strip() or GEMINI_MODEL_NAME


# Credential
API_KEY_ENV_VARS: Tuple[str, ...] = ("GEMINI_API_KEY", "API_KEY")
API_KEY_ERROR_MESSAGE = (
    "Gemini API Key (GEMINI_API_KEY) is not configured. "
    "Please set it up to use the application."
)

# Stream output convention
ANSWER_DELIMITER = "---ANSWERS---"
ANSWERS_PLACEHOLDER = "Answers will appear here after questions..."
ERROR_MARKER = "--- ERROR ENCOUNTERED ---"

# Hard cap on source text sent to the model (characters)
MAX_SOURCE_CHARS = 150_000

SUPPORTED_LANGUAGES: Tuple[str, ...] = (
    "English",
    "Hindi",
    "Spanish",
    "French",
    "German",
    "Japanese",
    "Bengali",
    "Telugu",
    "Marathi",
    "Tamil",
    "Urdu",
)

# Form defaults
DEFAULT_INSTITUTION_NAME = "My School/Coaching"
DEFAULT_NUM_QUESTIONS = "10"
DEFAULT_LANGUAGE = SUPPORTED_LANGUAGES[0]
DEFAULT_CUSTOM_PROMPT = (
    "Ensure questions cover a range of topics from the provided text. "
    "For objective questions, avoid ambiguity in options."
)
DEFAULT_PDF_FONT_SIZE = "8"
DEFAULT_SHOW_PAPER_HEADER = True
DEFAULT_IS_MATH_PAPER = False

MIN_PDF_FONT_SIZE = 8
MAX_PDF_FONT_SIZE = 24

# File selection
ALLOWED_PDF_TYPE = "application/pdf"
ALLOWED_IMAGE_TYPES: Tuple[str, ...] = ("image/jpeg", "image/png", "image/gif", "image/webp")


@dataclass(frozen=True)
class ExportDefaults:
    """Numbers used by the preview capture and PDF export."""

    margin_pt: float = 35.0  # Padding around the content box on every page
    capture_scale: int = 3  # Preview is rasterized at 3x for text quality
    preview_width_px: int = 794  # A4 width at 96 DPI
    preview_height_px: int = 1123  # A4 height at 96 DPI
    typeset_settle_ms: int = 700  # Wait after typesetting before capture
    typeset_debounce_ms: int = 300  # Delay before re-typesetting streamed content


EXPORT_DEFAULTS = ExportDefaults()
