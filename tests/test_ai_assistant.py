"""Unit tests for AI response parsing and the assistant's fallbacks."""

import pytest
from unittest.mock import AsyncMock

from common.ai.base import AIProviderError
from common.utils.exceptions import InternalServerException
from rats.services.ai.assistant_service import (
    AIAssistantService,
    GUIDANCE_FALLBACK_SUGGESTIONS,
    PROGRESS_FALLBACK,
    SLEEP_STORY_FALLBACK,
    build_guidance_prompt,
    parse_ai_json,
    split_data_url,
    strip_json_fences,
)


@pytest.fixture
def mock_provider():
    return AsyncMock()


@pytest.fixture
def assistant(mock_provider):
    return AIAssistantService(ai_provider=mock_provider)


# ─────────────────────────────────────────────────────────────────
# Parsing helpers
# ─────────────────────────────────────────────────────────────────


class TestJsonHelpers:
    def test_strips_code_fences(self):
        assert strip_json_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_parses_fenced_json(self):
        assert parse_ai_json('```json\n{"calories": 250}\n```') == {"calories": 250}

    def test_invalid_json_raises_value_error(self):
        with pytest.raises(ValueError):
            parse_ai_json("Sure! Here are some ideas.")

    def test_splits_data_url(self):
        assert split_data_url("data:image/png;base64,AAAA") == ("AAAA", "image/png")

    def test_plain_base64_defaults_to_jpeg(self):
        assert split_data_url("AAAA") == ("AAAA", "image/jpeg")


class TestGuidancePrompt:
    def test_includes_context(self):
        prompt = build_guidance_prompt("Help me relax", {
            "userMood": "anxious",
            "timeOfDay": "evening",
            "userGoals": ["sleep better", "less stress"],
        })

        assert "The user is feeling anxious today." in prompt
        assert "It's currently evening." in prompt
        assert "sleep better, less stress" in prompt
        assert "Respond in JSON format" in prompt

    def test_without_context(self):
        prompt = build_guidance_prompt("Help me focus")

        assert prompt.startswith("As a meditation guide, provide personalized guidance. Help me focus")


# ─────────────────────────────────────────────────────────────────
# AIAssistantService
# ─────────────────────────────────────────────────────────────────


class TestAssistant:
    @pytest.mark.asyncio
    async def test_unconfigured_provider_is_server_error(self):
        assistant = AIAssistantService(ai_provider=None)

        with pytest.raises(InternalServerException) as exc_info:
            await assistant.generate_ai_response("How much water should I drink?")

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_provider_error_is_server_error(self, assistant, mock_provider):
        mock_provider.chat.side_effect = AIProviderError("rate limited")

        with pytest.raises(InternalServerException):
            await assistant.generate_ai_response("Hi")

    @pytest.mark.asyncio
    async def test_food_text_parses_json(self, assistant, mock_provider):
        mock_provider.chat.return_value = '```json\n{"foodName": "Oatmeal", "calories": 150}\n```'

        result = await assistant.analyze_food_text("a bowl of oatmeal")

        assert result == {"foodName": "Oatmeal", "calories": 150}
        assert "a bowl of oatmeal" in mock_provider.chat.call_args[0][0]

    @pytest.mark.asyncio
    async def test_food_text_bad_json_is_server_error(self, assistant, mock_provider):
        mock_provider.chat.return_value = "I think that is about 150 calories."

        with pytest.raises(InternalServerException):
            await assistant.analyze_food_text("a bowl of oatmeal")

    @pytest.mark.asyncio
    async def test_food_image_passes_payload_and_mime(self, assistant, mock_provider):
        mock_provider.analyze_image.return_value = '{"foodName": "Salad", "calories": 220}'

        result = await assistant.analyze_food_image("data:image/png;base64,QUJD")

        assert result["foodName"] == "Salad"
        args, kwargs = mock_provider.analyze_image.call_args
        assert args[1] == "QUJD"
        assert kwargs["mime_type"] == "image/png"

    @pytest.mark.asyncio
    async def test_guidance_falls_back_to_raw_text(self, assistant, mock_provider):
        mock_provider.chat.return_value = "Breathe in slowly and relax your shoulders."

        result = await assistant.meditation_guidance("Help me relax", {"userMood": "tired"})

        assert result["text"] == "Breathe in slowly and relax your shoulders."
        assert result["mood"] == "tired"
        assert result["suggestions"] == GUIDANCE_FALLBACK_SUGGESTIONS

    @pytest.mark.asyncio
    async def test_progress_falls_back_to_default_analysis(self, assistant, mock_provider):
        mock_provider.chat.return_value = "Great job!"

        result = await assistant.analyze_progress({"totalSessions": 3})

        assert result == PROGRESS_FALLBACK

    @pytest.mark.asyncio
    async def test_sleep_story_fallback_has_five_ideas(self, assistant, mock_provider):
        mock_provider.chat.return_value = "Here are some stories..."

        result = await assistant.sleep_story_ideas()

        assert len(result["ideas"]) == 5
        assert result["ideas"][0]["title"] == SLEEP_STORY_FALLBACK[0]["title"]
        assert "feeling tired" in mock_provider.chat.call_args[0][0]

    @pytest.mark.asyncio
    async def test_meditation_script_is_raw_text(self, assistant, mock_provider):
        mock_provider.chat.return_value = "Close your eyes..."

        result = await assistant.generate_meditation_script("gratitude", 10, "breath")

        assert result == {"script": "Close your eyes..."}
