"""
AI assistant pipeline functions.
"""

import logging
from typing import Optional, Dict, Any

from common.utils.exceptions import BadRequestException
from rats.services.ai.assistant_service import AIAssistantService

logger = logging.getLogger(__name__)


def _require(value: Optional[str], message: str) -> str:
    if not value or not value.strip():
        raise BadRequestException(message=message, code="VALIDATION_ERROR")
    return value


async def chat_pipeline(assistant: AIAssistantService, query: Optional[str]) -> Dict[str, str]:
    query = _require(query, "Query is required")
    return {"response": await assistant.generate_ai_response(query)}


async def analyze_food_image_pipeline(assistant: AIAssistantService, image: Optional[str]) -> Dict[str, Any]:
    image = _require(image, "Image data is required")
    return await assistant.analyze_food_image(image)


async def analyze_food_text_pipeline(assistant: AIAssistantService, text: Optional[str]) -> Dict[str, Any]:
    text = _require(text, "Food description is required")
    return await assistant.analyze_food_text(text)


async def meditation_guidance_pipeline(
    assistant: AIAssistantService,
    prompt: Optional[str],
    context: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    prompt = _require(prompt, "Prompt is required")
    return await assistant.meditation_guidance(prompt, context)


async def meditation_script_pipeline(
    assistant: AIAssistantService,
    theme: str,
    duration: int,
    focus: str
) -> Dict[str, str]:
    logger.info(f"Generating {duration}-minute meditation script on '{theme}'")
    return await assistant.generate_meditation_script(theme, duration, focus)


async def analyze_progress_pipeline(assistant: AIAssistantService, progress_data: Any) -> Dict[str, Any]:
    if not progress_data:
        raise BadRequestException(message="Progress data is required", code="VALIDATION_ERROR")
    return await assistant.analyze_progress(progress_data)


async def sleep_story_ideas_pipeline(assistant: AIAssistantService, mood: Optional[str] = None) -> Dict[str, Any]:
    return await assistant.sleep_story_ideas(mood)
