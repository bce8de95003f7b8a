"""
FastAPI router for AI assistant endpoints.

Every endpoint answers 500 when no AI provider is configured.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from common.utils import success_response
from rats.dependencies import require_auth, get_assistant_service
from rats.pipelines import ai as pipelines
from rats.schemas.ai import (
    ChatRequest,
    MeditationGuidanceRequest,
    GenerateMeditationRequest,
    AnalyzeProgressRequest,
    SleepStoryIdeasRequest,
)
from rats.schemas.nutrition import AnalyzeImageRequest, AnalyzeTextRequest
from rats.services.ai.assistant_service import AIAssistantService

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/chat")
async def chat(
    body: ChatRequest,
    user: Annotated[dict, Depends(require_auth)],
    assistant: Annotated[AIAssistantService, Depends(get_assistant_service)],
):
    """Free-form wellness question."""
    result = await pipelines.chat_pipeline(assistant=assistant, query=body.query)
    return success_response(result)


@router.post("/analyze-image")
async def analyze_image(
    body: AnalyzeImageRequest,
    user: Annotated[dict, Depends(require_auth)],
    assistant: Annotated[AIAssistantService, Depends(get_assistant_service)],
):
    """Estimate calories and macros from a food photo."""
    result = await pipelines.analyze_food_image_pipeline(assistant=assistant, image=body.image)
    return success_response(result)


@router.post("/analyze-text")
async def analyze_text(
    body: AnalyzeTextRequest,
    user: Annotated[dict, Depends(require_auth)],
    assistant: Annotated[AIAssistantService, Depends(get_assistant_service)],
):
    result = await pipelines.analyze_food_text_pipeline(assistant=assistant, text=body.text)
    return success_response(result)


@router.post("/meditation-guidance")
async def meditation_guidance(
    body: MeditationGuidanceRequest,
    user: Annotated[dict, Depends(require_auth)],
    assistant: Annotated[AIAssistantService, Depends(get_assistant_service)],
):
    context = body.context.model_dump(exclude_none=True) if body.context else None
    result = await pipelines.meditation_guidance_pipeline(
        assistant=assistant,
        prompt=body.prompt,
        context=context,
    )
    return success_response(result)


@router.post("/generate-meditation")
async def generate_meditation(
    body: GenerateMeditationRequest,
    user: Annotated[dict, Depends(require_auth)],
    assistant: Annotated[AIAssistantService, Depends(get_assistant_service)],
):
    result = await pipelines.meditation_script_pipeline(
        assistant=assistant,
        theme=body.theme,
        duration=body.duration,
        focus=body.focus,
    )
    return success_response(result)


@router.post("/analyze-progress")
async def analyze_progress(
    body: AnalyzeProgressRequest,
    user: Annotated[dict, Depends(require_auth)],
    assistant: Annotated[AIAssistantService, Depends(get_assistant_service)],
):
    result = await pipelines.analyze_progress_pipeline(assistant=assistant, progress_data=body.progressData)
    return success_response(result)


@router.post("/sleep-story-ideas")
async def sleep_story_ideas(
    body: SleepStoryIdeasRequest,
    user: Annotated[dict, Depends(require_auth)],
    assistant: Annotated[AIAssistantService, Depends(get_assistant_service)],
):
    result = await pipelines.sleep_story_ideas_pipeline(assistant=assistant, mood=body.mood)
    return success_response(result)
