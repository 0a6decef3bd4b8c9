"""
Module: generation

Purpose:
    Turn a source and a form configuration into a Gemini request and stream
    the model's question paper back chunk by chunk.

Key Functions:
    - build_request(): System instruction + payload
    - stream_generation(): Build and stream in one call
    - load_api_key(): Credential lookup

Key Classes:
    - GenerationRequest: SDK-independent request
    - GeminiStreamClient: Streaming wrapper around google.genai

Dependencies:
    - google-genai: Gemini SDK

Used By:
    - gui.main_window: Generate button handler
"""

from .prompt import (
    GenerationRequest,
    TextPayload,
    MultiPartPayload,
    InlineAttachment,
    TextPart,
    build_request,
    build_request_payload,
    build_system_instruction,
    truncate_source_text,
    encode_attachment,
)
from .client import (
    GeminiStreamClient,
    GenerationError,
    InvalidCredentialError,
    MissingCredentialError,
    PermissionDeniedError,
    QuotaExceededError,
    describe_api_error,
    load_api_key,
    stream_generation,
)

__all__ = [
    # Prompt
    "GenerationRequest",
    "TextPayload",
    "MultiPartPayload",
    "InlineAttachment",
    "TextPart",
    "build_request",
    "build_request_payload",
    "build_system_instruction",
    "truncate_source_text",
    "encode_attachment",
    # Client
    "GeminiStreamClient",
    "GenerationError",
    "InvalidCredentialError",
    "MissingCredentialError",
    "PermissionDeniedError",
    "QuotaExceededError",
    "describe_api_error",
    "load_api_key",
    "stream_generation",
]
