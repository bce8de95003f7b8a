"""Unit tests for the Gemini provider's model chain and error mapping."""

import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from google.genai import errors as genai_errors

import common.ai.gemini as gemini_module
from common.ai.base import AIProviderError
from common.ai.gemini import GeminiProvider
from config.ai_config import AI_ERROR_MESSAGES, AI_INVALID_IMAGE_MESSAGE


NOT_FOUND_MESSAGE = dict(AI_ERROR_MESSAGES)["NOT_FOUND"]
UNPARSEABLE_MESSAGE = dict(AI_ERROR_MESSAGES)["extract text"]


def not_found_error(model):
    return genai_errors.ClientError(404, {
        "error": {"code": 404, "message": f"models/{model} is not found", "status": "NOT_FOUND"},
    })


def make_sdk_client():
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    return client


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def sdk_clients():
    return {"v1beta": make_sdk_client(), "v1": make_sdk_client()}


@pytest.fixture
def provider(monkeypatch, sdk_clients):
    monkeypatch.setattr(GeminiProvider, "_client", lambda self, api_version: sdk_clients[api_version])
    return GeminiProvider(api_key="test-key", models=[("v1beta", "model-a"), ("v1", "model-b")])


# ─────────────────────────────────────────────────────────────────
# Client setup
# ─────────────────────────────────────────────────────────────────


class TestClients:
    def test_missing_key_is_rejected(self):
        with pytest.raises(AIProviderError):
            GeminiProvider(api_key="")

    def test_one_client_per_api_version(self, monkeypatch):
        created = []

        def fake_client(**kwargs):
            created.append(kwargs)
            return MagicMock()

        monkeypatch.setattr(gemini_module.genai, "Client", fake_client)
        provider = GeminiProvider(api_key="test-key", timeout=30)

        provider._client("v1beta")
        provider._client("v1")
        provider._client("v1beta")

        assert [kwargs["http_options"].api_version for kwargs in created] == ["v1beta", "v1"]
        assert created[0]["api_key"] == "test-key"
        assert created[0]["http_options"].timeout == 30000


# ─────────────────────────────────────────────────────────────────
# Model chain
# ─────────────────────────────────────────────────────────────────


class TestModelChain:
    @pytest.mark.asyncio
    async def test_first_model_answers(self, provider, sdk_clients):
        sdk_clients["v1beta"].aio.models.generate_content.return_value = SimpleNamespace(text="Breathe slowly.")

        result = await provider.chat("Help me relax", system_prompt="You are a calm guide.")

        assert result == "Breathe slowly."
        kwargs = sdk_clients["v1beta"].aio.models.generate_content.call_args[1]
        assert kwargs["model"] == "model-a"
        assert kwargs["contents"][-1].parts[0].text == "You are a calm guide.\n\nHelp me relax"
        sdk_clients["v1"].aio.models.generate_content.assert_not_called()

    @pytest.mark.asyncio
    async def test_falls_through_to_next_version(self, provider, sdk_clients):
        sdk_clients["v1beta"].aio.models.generate_content.side_effect = not_found_error("model-a")
        sdk_clients["v1"].aio.models.generate_content.return_value = SimpleNamespace(text="Try box breathing.")

        result = await provider.chat("Help me focus")

        assert result == "Try box breathing."
        assert sdk_clients["v1"].aio.models.generate_content.call_args[1]["model"] == "model-b"

    @pytest.mark.asyncio
    async def test_all_models_failing_maps_error(self, provider, sdk_clients):
        sdk_clients["v1beta"].aio.models.generate_content.side_effect = not_found_error("model-a")
        sdk_clients["v1"].aio.models.generate_content.side_effect = not_found_error("model-b")

        with pytest.raises(AIProviderError) as exc_info:
            await provider.chat("Hi")

        assert str(exc_info.value) == NOT_FOUND_MESSAGE

    @pytest.mark.asyncio
    async def test_empty_answer_is_unparseable(self, provider, sdk_clients):
        sdk_clients["v1beta"].aio.models.generate_content.return_value = SimpleNamespace(text=None)

        with pytest.raises(AIProviderError) as exc_info:
            await provider.chat("Hi")

        assert str(exc_info.value) == UNPARSEABLE_MESSAGE


class TestAnalyzeImage:
    @pytest.mark.asyncio
    async def test_sends_inline_image(self, provider, sdk_clients):
        sdk_clients["v1beta"].aio.models.generate_content.return_value = SimpleNamespace(text='{"foodName": "Salad"}')

        result = await provider.analyze_image("What is this?", "QUJD", mime_type="image/png")

        assert result == '{"foodName": "Salad"}'
        parts = sdk_clients["v1beta"].aio.models.generate_content.call_args[1]["contents"][0].parts
        assert parts[0].text == "What is this?"
        assert parts[1].inline_data.data == b"ABC"
        assert parts[1].inline_data.mime_type == "image/png"

    @pytest.mark.asyncio
    async def test_undecodable_image(self, provider, sdk_clients):
        with pytest.raises(AIProviderError) as exc_info:
            await provider.analyze_image("What is this?", "QUJ")

        assert str(exc_info.value) == AI_INVALID_IMAGE_MESSAGE
        sdk_clients["v1beta"].aio.models.generate_content.assert_not_called()
