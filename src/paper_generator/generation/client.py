"""
Module: generation.client

Purpose:
    Stream a question paper from the Gemini API. Converts a
    GenerationRequest into SDK contents, forwards each text chunk to a
    callback in arrival order and maps SDK failures onto user-facing
    error messages.

Key Functions:
    - load_api_key(): Read the credential from the environment
    - describe_api_error(): Map an APIError to a GenerationError subclass
    - stream_generation(): Build a request and stream it in one call

Key Classes:
    - GeminiStreamClient: Thin wrapper around google.genai.Client
    - MissingCredentialError / GenerationError (+ subclasses)

Dependencies:
    - google-genai: Gemini SDK
    - generation.prompt: Request objects

Used By:
    - gui.main_window: Generation worker thread
"""

from __future__ import annotations

import logging
import os
from typing import Callable, List, Mapping, Optional

from google import genai
from google.genai import errors, types

from paper_generator.common.constants import API_KEY_ENV_VARS, API_KEY_ERROR_MESSAGE, get_model_name
from paper_generator.core.models import GenerationConfig, SourceMaterial

from .prompt import GenerationRequest, InlineAttachment, MultiPartPayload, TextPart, build_request

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[str], None]

INVALID_KEY_MESSAGE = (
    "The provided Gemini API Key is invalid or has expired. "
    "Please check your .env file or environment configuration."
)
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred while communicating with the Gemini API."


class MissingCredentialError(Exception):
    """No API key is configured."""
    pass


class GenerationError(Exception):
    """Error while calling the generation service."""
    pass


class InvalidCredentialError(GenerationError):
    """The service rejected the API key."""
    pass


class PermissionDeniedError(GenerationError):
    """The key is valid but not allowed to use the model."""
    pass


class QuotaExceededError(GenerationError):
    """Rate limit or quota exhausted."""
    pass


def load_api_key(environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Read the Gemini API key from the environment.

    GEMINI_API_KEY wins over API_KEY when both are set.

    Raises:
        MissingCredentialError: If neither variable holds a non-blank value
    """
    env = os.environ if environ is None else environ
    for name in API_KEY_ENV_VARS:
        value = (env.get(name) or "").strip()
        if value:
            return value
    raise MissingCredentialError(API_KEY_ERROR_MESSAGE)


def describe_api_error(exc: errors.APIError) -> GenerationError:
    """Translate an SDK APIError into the matching GenerationError."""
    message = getattr(exc, "message", None) or str(exc)
    status = (getattr(exc, "status", None) or "").upper()
    code = getattr(exc, "code", None)

    if "API_KEY_INVALID" in message or "API key not valid" in message:
        return InvalidCredentialError(INVALID_KEY_MESSAGE)
    if code == 403 or status == "PERMISSION_DENIED" or "permission" in message.lower():
        return PermissionDeniedError(
            "Gemini API Error: Permission denied. This might be due to an invalid API key "
            f"or incorrect project setup. Details: {message}"
        )
    if code == 429 or status == "RESOURCE_EXHAUSTED":
        return QuotaExceededError(f"Gemini API Error: Quota exceeded. Details: {message}")
    return GenerationError(f"Gemini API Error: {message}")


def to_contents(request: GenerationRequest):
    """Convert a request payload into what generate_content_stream accepts."""
    payload = request.payload
    if not isinstance(payload, MultiPartPayload):
        return payload.text

    parts: List[types.Part] = []
    for part in payload.parts:
        if isinstance(part, InlineAttachment):
            parts.append(types.Part.from_bytes(data=part.decoded(), mime_type=part.mime_type))
        elif isinstance(part, TextPart):
            parts.append(types.Part.from_text(text=part.text))
    return [types.Content(role="user", parts=parts)]


class GeminiStreamClient:
    """
    Streaming client for one API key.

    Args:
        api_key: Gemini API key
        model: Model identifier used when the request does not name one
        client: Pre-built genai.Client (tests pass a mock)
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: Optional[str] = None,
        client: Optional[genai.Client] = None,
    ) -> None:
        if client is None:
            if not api_key:
                raise MissingCredentialError(API_KEY_ERROR_MESSAGE)
            client = genai.Client(api_key=api_key)
        self._client = client
        self.model = model or get_model_name()

    def stream(self, request: GenerationRequest, on_chunk: ChunkCallback) -> str:
        """
        Run one streaming call.

        Each non-empty chunk is passed to on_chunk in arrival order. Once an
        error is raised no further chunks are delivered.

        Returns:
            The concatenated text of all delivered chunks

        Raises:
            GenerationError: On any service or transport failure
        """
        model = request.model or self.model
        config = types.GenerateContentConfig(system_instruction=request.system_instruction)
        received: List[str] = []

        logger.info(f"Starting stream from {model}")
        try:
            stream = self._client.models.generate_content_stream(
                model=model,
                contents=to_contents(request),
                config=config,
            )
            for chunk in stream:
                text = getattr(chunk, "text", None)
                if not text:
                    continue
                received.append(text)
                on_chunk(text)
        except errors.APIError as e:
            error = describe_api_error(e)
            logger.error(f"Generation failed after {len(received)} chunk(s): {error}")
            raise error from e
        except GenerationError:
            raise
        except Exception as e:
            detail = str(e) or UNKNOWN_ERROR_MESSAGE
            logger.error(f"Generation failed after {len(received)} chunk(s): {detail}")
            raise GenerationError(f"Gemini API Error: {detail}") from e

        logger.info(f"Stream complete: {len(received)} chunk(s), {sum(map(len, received))} characters")
        return "".join(received)


def stream_generation(
    source: SourceMaterial,
    config: GenerationConfig,
    api_key: str,
    on_chunk: ChunkCallback,
    *,
    client: Optional[genai.Client] = None,
) -> str:
    """Build the request for source/config and stream it."""
    request = build_request(source, config)
    return GeminiStreamClient(api_key, model=request.model, client=client).stream(request, on_chunk)
