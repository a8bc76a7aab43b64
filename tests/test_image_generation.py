import asyncio
import base64
from types import SimpleNamespace

import pytest
from unittest.mock import AsyncMock, patch

from poetry_wrappers.exceptions import CredentialError, NoImageError, ProviderError
from poetry_wrappers.image_generation import GeminiImageGenerationTool, extract_image

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def part(inline=None, text=None):
    inline_data = SimpleNamespace(data=inline, mime_type="image/png") if inline is not None else None
    return SimpleNamespace(inline_data=inline_data, text=text)


def response(*parts):
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


class TestExtractImage:
    def test_first_inline_part_wins(self):
        image = extract_image(response(part(text="Here is your image"), part(inline=PNG_BYTES), part(inline=b"other")))

        assert image.to_bytes() == PNG_BYTES
        assert image.data_uri == "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()

    def test_base64_text_payload_is_kept(self):
        encoded = base64.b64encode(PNG_BYTES).decode()

        assert extract_image(response(part(inline=encoded))).data == encoded

    def test_text_only_is_no_image(self):
        with pytest.raises(NoImageError):
            extract_image(response(part(text="I cannot draw that")))

    def test_no_candidates_is_no_image(self):
        with pytest.raises(NoImageError):
            extract_image(SimpleNamespace(candidates=None))

    def test_candidate_without_content_is_skipped(self):
        blocked = SimpleNamespace(content=None)
        good = SimpleNamespace(content=SimpleNamespace(parts=[part(inline=PNG_BYTES)]))

        assert extract_image(SimpleNamespace(candidates=[blocked, good])).to_bytes() == PNG_BYTES


class TestGeminiImageGenerationTool:
    def test_missing_key_is_credential_error(self):
        with pytest.raises(CredentialError):
            GeminiImageGenerationTool(api_key=None).run("a foggy harbour")

    @patch("poetry_wrappers.image_generation.genai.Client")
    def test_run_returns_image(self, mock_client_cls):
        client = mock_client_cls.return_value
        client.models.generate_content.return_value = response(part(inline=PNG_BYTES))

        image = GeminiImageGenerationTool(api_key="test-key").run("a foggy harbour")

        mock_client_cls.assert_called_once_with(api_key="test-key")
        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash-image"
        assert kwargs["contents"] == "a foggy harbour"
        assert image.to_bytes() == PNG_BYTES

    @patch("poetry_wrappers.image_generation.genai.Client")
    def test_arun_uses_async_client(self, mock_client_cls):
        client = mock_client_cls.return_value
        client.aio.models.generate_content = AsyncMock(return_value=response(part(inline=PNG_BYTES)))

        image = asyncio.run(GeminiImageGenerationTool(api_key="test-key").arun("a foggy harbour"))

        assert image.mime_type == "image/png"
        client.aio.models.generate_content.assert_awaited_once()

    @patch("poetry_wrappers.image_generation.genai.Client")
    def test_remote_failure_is_provider_error(self, mock_client_cls):
        mock_client_cls.return_value.models.generate_content.side_effect = RuntimeError("429 RESOURCE_EXHAUSTED")

        with pytest.raises(ProviderError, match="RESOURCE_EXHAUSTED"):
            GeminiImageGenerationTool(api_key="test-key").run("a foggy harbour")

    @patch("poetry_wrappers.image_generation.genai.Client")
    def test_text_only_answer_is_no_image(self, mock_client_cls):
        mock_client_cls.return_value.models.generate_content.return_value = response(part(text="no"))

        with pytest.raises(NoImageError):
            GeminiImageGenerationTool(api_key="test-key").run("a foggy harbour")
