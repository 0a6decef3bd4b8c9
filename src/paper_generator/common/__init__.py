"""Constants shared across the generator."""

from __future__ import annotations

from .constants import (
    APP_TITLE,
    GEMINI_MODEL_NAME,
    get_model_name,
    ANSWER_DELIMITER,
    ANSWERS_PLACEHOLDER,
    MAX_SOURCE_CHARS,
    SUPPORTED_LANGUAGES,
    ALLOWED_PDF_TYPE,
    ALLOWED_IMAGE_TYPES,
    EXPORT_DEFAULTS,
)

__all__ = [
    "APP_TITLE",
    "GEMINI_MODEL_NAME",
    "get_model_name",
    "ANSWER_DELIMITER",
    "ANSWERS_PLACEHOLDER",
    "MAX_SOURCE_CHARS",
    "SUPPORTED_LANGUAGES",
    "ALLOWED_PDF_TYPE",
    "ALLOWED_IMAGE_TYPES",
    "EXPORT_DEFAULTS",
]
