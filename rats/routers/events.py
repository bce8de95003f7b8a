"""
FastAPI router for special event endpoints.

Event CRUD, AI message/plan regeneration, test messages and due reminders.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from common.utils import success_response
from rats.dependencies import (
    require_auth,
    get_event_service,
    get_event_content_generator,
    get_user_service,
    get_instagram_service,
)
from rats.pipelines import events as pipelines
from rats.schemas.events import CreateEventRequest, UpdateEventRequest, TestMessageRequest
from rats.services.events.event_content_generator import EventContentGenerator
from rats.services.events.event_service import EventService
from rats.services.social.instagram_service import InstagramService
from rats.services.user.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event(
    body: CreateEventRequest,
    user: Annotated[dict, Depends(require_auth)],
    event_service: Annotated[EventService, Depends(get_event_service)],
    content_generator: Annotated[EventContentGenerator, Depends(get_event_content_generator)],
):
    """
    Create an event.

    Future events get an AI-generated message and celebration plan.
    """
    result = await pipelines.create_event_pipeline(
        event_service=event_service,
        content_generator=content_generator,
        user_id=str(user["_id"]),
        data=body.model_dump(exclude_none=True),
    )
    return success_response(result)


@router.get("")
async def list_events(
    user: Annotated[dict, Depends(require_auth)],
    event_service: Annotated[EventService, Depends(get_event_service)],
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1970),
    upcoming: bool = Query(False, description="Next 30 days"),
):
    result = await pipelines.list_events_pipeline(
        event_service=event_service,
        user_id=str(user["_id"]),
        month=month,
        year=year,
        upcoming=upcoming,
    )
    return success_response(result)


@router.get("/reminders")
async def get_reminders(
    user: Annotated[dict, Depends(require_auth)],
    event_service: Annotated[EventService, Depends(get_event_service)],
):
    """Active events whose reminder falls on today."""
    result = await pipelines.get_reminders_pipeline(
        event_service=event_service,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.get("/{event_id}")
async def get_event(
    event_id: str,
    user: Annotated[dict, Depends(require_auth)],
    event_service: Annotated[EventService, Depends(get_event_service)],
):
    result = await pipelines.get_event_pipeline(
        event_service=event_service,
        event_id=event_id,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.put("/{event_id}")
async def update_event(
    event_id: str,
    body: UpdateEventRequest,
    user: Annotated[dict, Depends(require_auth)],
    event_service: Annotated[EventService, Depends(get_event_service)],
    content_generator: Annotated[EventContentGenerator, Depends(get_event_content_generator)],
):
    result = await pipelines.update_event_pipeline(
        event_service=event_service,
        content_generator=content_generator,
        event_id=event_id,
        user_id=str(user["_id"]),
        fields=body.model_dump(exclude_none=True),
    )
    return success_response(result)


@router.delete("/{event_id}")
async def delete_event(
    event_id: str,
    user: Annotated[dict, Depends(require_auth)],
    event_service: Annotated[EventService, Depends(get_event_service)],
):
    result = await pipelines.delete_event_pipeline(
        event_service=event_service,
        event_id=event_id,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.post("/{event_id}/regenerate")
async def regenerate_content(
    event_id: str,
    user: Annotated[dict, Depends(require_auth)],
    event_service: Annotated[EventService, Depends(get_event_service)],
    content_generator: Annotated[EventContentGenerator, Depends(get_event_content_generator)],
):
    """Generate a fresh message and plan."""
    result = await pipelines.regenerate_content_pipeline(
        event_service=event_service,
        content_generator=content_generator,
        event_id=event_id,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.post("/{event_id}/test-message")
async def send_test_message(
    event_id: str,
    body: TestMessageRequest,
    user: Annotated[dict, Depends(require_auth)],
    event_service: Annotated[EventService, Depends(get_event_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    instagram_service: Annotated[InstagramService, Depends(get_instagram_service)],
):
    """Send the event message on one platform, or simulate sending it."""
    result = await pipelines.send_test_message_pipeline(
        event_service=event_service,
        user_service=user_service,
        instagram_service=instagram_service,
        event_id=event_id,
        user_id=str(user["_id"]),
        platform=body.platform,
    )
    return success_response(result)
