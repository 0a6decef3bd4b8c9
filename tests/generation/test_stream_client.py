"""
Unit Tests for the Gemini streaming client.

The SDK client is replaced with a MagicMock; generate_content_stream
returns plain objects carrying a .text attribute.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from dotenv import load_dotenv
from google.genai import errors

from paper_generator.common.constants import API_KEY_ERROR_MESSAGE, GEMINI_MODEL_NAME, MODEL_ENV_VAR, get_model_name
from paper_generator.core.models import GenerationConfig, ImageAttachment, ImageSource, TextSource
from paper_generator.generation.client import (
    INVALID_KEY_MESSAGE,
    GeminiStreamClient,
    GenerationError,
    InvalidCredentialError,
    MissingCredentialError,
    PermissionDeniedError,
    QuotaExceededError,
    describe_api_error,
    load_api_key,
    stream_generation,
    to_contents,
)
from paper_generator.generation.prompt import build_request


def _api_error(code, message, status):
    return errors.APIError(code, {"error": {"code": code, "message": message, "status": status}})


def _mock_client(chunks=(), error=None):
    """SDK stand-in whose stream yields `chunks` then optionally raises `error`."""

    def _stream(**kwargs):
        for text in chunks:
            yield SimpleNamespace(text=text)
        if error is not None:
            raise error

    client = MagicMock()
    client.models.generate_content_stream.side_effect = _stream
    return client


@pytest.fixture
def text_request():
    return build_request(TextSource(text="Photosynthesis is..."), GenerationConfig(), model="gemini-test")


class TestLoadApiKey:
    def test_load_when_gemini_key_set_then_preferred(self):
        env = {"GEMINI_API_KEY": "primary", "API_KEY": "fallback"}
        assert load_api_key(env) == "primary"

    def test_load_when_only_fallback_set_then_used(self):
        assert load_api_key({"API_KEY": "fallback"}) == "fallback"

    def test_load_when_blank_values_then_raises_missing(self):
        with pytest.raises(MissingCredentialError) as exc_info:
            load_api_key({"GEMINI_API_KEY": "  ", "API_KEY": ""})
        assert str(exc_info.value) == API_KEY_ERROR_MESSAGE

    def test_load_when_environment_used_then_reads_os_environ(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("API_KEY", "from-env")
        assert load_api_key() == "from-env"


class TestModelName:
    def test_get_when_unset_then_default(self):
        assert get_model_name({}) == GEMINI_MODEL_NAME

    def test_get_when_blank_then_default(self):
        assert get_model_name({MODEL_ENV_VAR: "  "}) == GEMINI_MODEL_NAME

    def test_get_when_dotenv_loaded_after_import_then_override_used(self, monkeypatch, tmp_path):
        # Arrange: variable absent, restored on teardown
        monkeypatch.setenv(MODEL_ENV_VAR, "placeholder")
        monkeypatch.delenv(MODEL_ENV_VAR)
        env_file = tmp_path / ".env"
        env_file.write_text(f"{MODEL_ENV_VAR}=gemini-from-dotenv\n", encoding="utf-8")

        # Act
        load_dotenv(env_file, override=False)

        # Assert
        assert get_model_name() == "gemini-from-dotenv"
        assert build_request(TextSource(text="x"), GenerationConfig()).model == "gemini-from-dotenv"
        assert GeminiStreamClient("key", client=MagicMock()).model == "gemini-from-dotenv"

    def test_get_when_real_environment_set_then_dotenv_does_not_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv(MODEL_ENV_VAR, "gemini-from-shell")
        env_file = tmp_path / ".env"
        env_file.write_text(f"{MODEL_ENV_VAR}=gemini-from-dotenv\n", encoding="utf-8")

        load_dotenv(env_file, override=False)

        assert get_model_name() == "gemini-from-shell"


class TestDescribeApiError:
    def test_describe_when_key_invalid_then_invalid_credential(self):
        error = describe_api_error(_api_error(400, "API key not valid. Please pass a valid API key.", "INVALID_ARGUMENT"))
        assert isinstance(error, InvalidCredentialError)
        assert str(error) == INVALID_KEY_MESSAGE

    def test_describe_when_403_then_permission_denied(self):
        error = describe_api_error(_api_error(403, "Caller lacks access", "PERMISSION_DENIED"))
        assert isinstance(error, PermissionDeniedError)
        assert "Permission denied" in str(error)
        assert "Caller lacks access" in str(error)

    def test_describe_when_429_then_quota_exceeded(self):
        error = describe_api_error(_api_error(429, "Resource has been exhausted", "RESOURCE_EXHAUSTED"))
        assert isinstance(error, QuotaExceededError)
        assert str(error).startswith("Gemini API Error: Quota exceeded.")

    def test_describe_when_other_then_generic_with_message(self):
        error = describe_api_error(_api_error(500, "Internal error", "INTERNAL"))
        assert type(error) is GenerationError
        assert str(error) == "Gemini API Error: Internal error"


class TestGeminiStreamClient:
    """Tests for GeminiStreamClient.stream()."""

    def test_init_when_no_key_and_no_client_then_raises_missing(self):
        with pytest.raises(MissingCredentialError):
            GeminiStreamClient("")

    def test_stream_when_chunks_then_forwarded_in_order(self, text_request):
        # Arrange
        sdk = _mock_client(["1. What", "", " is it?\n---ANSWERS---\n", "1. A"])
        received = []

        # Act
        text = GeminiStreamClient("key", client=sdk).stream(text_request, received.append)

        # Assert
        assert received == ["1. What", " is it?\n---ANSWERS---\n", "1. A"]
        assert text == "1. What is it?\n---ANSWERS---\n1. A"

    def test_stream_when_called_then_passes_model_and_system_instruction(self, text_request):
        sdk = _mock_client(["x"])
        GeminiStreamClient("key", client=sdk).stream(text_request, lambda _: None)

        kwargs = sdk.models.generate_content_stream.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == text_request.payload.text
        assert kwargs["config"].system_instruction == text_request.system_instruction

    def test_stream_when_api_error_mid_stream_then_stops_and_maps(self, text_request):
        # Arrange
        sdk = _mock_client(["partial"], error=_api_error(429, "slow down", "RESOURCE_EXHAUSTED"))
        received = []

        # Act / Assert
        with pytest.raises(QuotaExceededError):
            GeminiStreamClient("key", client=sdk).stream(text_request, received.append)
        assert received == ["partial"]

    def test_stream_when_transport_error_then_generation_error(self, text_request):
        sdk = _mock_client(error=ConnectionError("network unreachable"))
        with pytest.raises(GenerationError, match="Gemini API Error: network unreachable"):
            GeminiStreamClient("key", client=sdk).stream(text_request, lambda _: None)

    def test_stream_when_error_without_text_then_unknown_message(self, text_request):
        sdk = _mock_client(error=RuntimeError())
        with pytest.raises(GenerationError, match="unknown error"):
            GeminiStreamClient("key", client=sdk).stream(text_request, lambda _: None)


class TestContents:
    def test_to_contents_when_images_then_parts_in_order_with_trailing_text(self):
        # Arrange
        images = (
            ImageAttachment(name="a.png", mime_type="image/png", data=b"aaa"),
            ImageAttachment(name="b.jpg", mime_type="image/jpeg", data=b"bbb"),
        )
        request = build_request(ImageSource(images=images), GenerationConfig())

        # Act
        contents = to_contents(request)

        # Assert
        parts = contents[0].parts
        assert len(parts) == 3
        assert parts[0].inline_data.data == b"aaa"
        assert parts[1].inline_data.mime_type == "image/jpeg"
        assert parts[2].text == request.payload.instruction.text

    def test_stream_generation_when_text_source_then_returns_full_text(self):
        sdk = _mock_client(["Q", "---ANSWERS---", "A"])
        chunks = []
        text = stream_generation(TextSource(text="t"), GenerationConfig(), "key", chunks.append, client=sdk)
        assert text == "Q---ANSWERS---A"
        assert chunks == ["Q", "---ANSWERS---", "A"]
