"""
Event pipeline functions.

CRUD orchestration around EventService plus AI content generation and
the test-message flow.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from common.utils.dates import ensure_utc
from common.utils.exceptions import BadRequestException
from common.utils.serialization import serialize_document
from config.social_config import OAUTH_PLATFORMS, DIRECT_PLATFORMS
from rats.services.events.event_content_generator import EventContentGenerator
from rats.services.events.event_service import EventService
from rats.services.social.instagram_service import InstagramService, is_platform_connected
from rats.services.user.user_service import UserService

logger = logging.getLogger(__name__)


REGENERATE_FIELDS = ("eventType", "recipientName", "recipientRelation", "notes")


async def _apply_generated_content(
    event_service: EventService,
    content_generator: EventContentGenerator,
    event: dict
) -> dict:
    message, plan = await content_generator.generate_for_event(event)
    return await event_service.update_event(
        event["_id"],
        {"aiGeneratedMessage": message, "aiGeneratedPlan": plan}
    )


async def create_event_pipeline(
    event_service: EventService,
    content_generator: EventContentGenerator,
    user_id: str,
    data: Dict[str, Any],
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Create an event and, for future dates, generate its message and plan.

    A generation failure leaves the event without AI content.
    """
    now = now or datetime.now(timezone.utc)
    event = await event_service.create_event(user_id, data)

    if ensure_utc(event["date"]) > now:
        try:
            event = await _apply_generated_content(event_service, content_generator, event) or event
        except Exception as e:
            logger.error(f"Error generating AI content for event {event['_id']}: {e}")

    return serialize_document(event)


async def list_events_pipeline(
    event_service: EventService,
    user_id: str,
    month: Optional[int] = None,
    year: Optional[int] = None,
    upcoming: bool = False
) -> List[Dict[str, Any]]:
    events = await event_service.list_events(user_id, month=month, year=year, upcoming=upcoming)
    return [serialize_document(e) for e in events]


async def get_event_pipeline(event_service: EventService, event_id: str, user_id: str) -> Dict[str, Any]:
    return serialize_document(await event_service.get_owned_event(event_id, user_id))


async def update_event_pipeline(
    event_service: EventService,
    content_generator: EventContentGenerator,
    event_id: str,
    user_id: str,
    fields: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Apply a partial update; regenerate AI content when the recipient or
    occasion details were supplied.
    """
    event = await event_service.get_owned_event(event_id, user_id, action="update")

    updates = {key: value for key, value in fields.items() if value is not None}
    updated = await event_service.update_event(event["_id"], updates) if updates else event

    if any(fields.get(key) for key in REGENERATE_FIELDS):
        try:
            updated = await _apply_generated_content(event_service, content_generator, updated) or updated
        except Exception as e:
            logger.error(f"Error regenerating AI content for event {event['_id']}: {e}")

    return serialize_document(updated)


async def delete_event_pipeline(event_service: EventService, event_id: str, user_id: str) -> Dict[str, Any]:
    event = await event_service.get_owned_event(event_id, user_id, action="delete")
    await event_service.delete_event(event["_id"])
    return {"message": "Event removed"}


async def regenerate_content_pipeline(
    event_service: EventService,
    content_generator: EventContentGenerator,
    event_id: str,
    user_id: str
) -> Dict[str, Any]:
    event = await event_service.get_owned_event(event_id, user_id)
    logger.info(f"Regenerating AI content for event {event['_id']}")

    updated = await _apply_generated_content(event_service, content_generator, event)
    return {"message": updated["aiGeneratedMessage"], "plan": updated["aiGeneratedPlan"]}


def _platform_handle(event: Dict[str, Any], platform: str) -> str:
    if platform == "email":
        return (event.get("recipientContact") or {}).get("email") or ""
    return (event.get("socialMediaHandles") or {}).get(platform) or ""


async def send_test_message_pipeline(
    event_service: EventService,
    user_service: UserService,
    instagram_service: InstagramService,
    event_id: str,
    user_id: str,
    platform: str
) -> Dict[str, Any]:
    """
    Send (or simulate sending) an event's message on one platform.

    Instagram posts for real when connected; everything else returns a
    simulation payload.

    Raises:
        BadRequestException: No generated message, or the Instagram post failed
    """
    event = await event_service.get_owned_event(event_id, user_id)

    message = event.get("aiGeneratedMessage")
    if not message:
        raise BadRequestException(
            message="No AI-generated message available for this event",
            code="NO_AI_MESSAGE"
        )

    logger.info(f"Test message requested for event {event['_id']} on {platform}")

    user = await user_service.get_user_by_id(user_id) or {}
    if platform in OAUTH_PLATFORMS:
        connected = is_platform_connected(user, platform)
    else:
        connected = platform in DIRECT_PLATFORMS

    recipient_info = {
        "name": event["recipientName"],
        "platform": platform,
        "handle": _platform_handle(event, platform),
    }

    if platform == "instagram" and connected:
        result = await instagram_service.post_to_instagram(user_id, message, event_id=event["_id"])
        if not result["success"]:
            raise BadRequestException(
                message=result.get("error") or "Failed to post to Instagram",
                code="INSTAGRAM_POST_FAILED"
            )
        return {
            "success": True,
            "message": "Message posted to Instagram successfully!",
            "postId": result["postId"],
            "content": message,
            "recipientInfo": recipient_info,
        }

    response: Dict[str, Any] = {
        "success": True,
        "message": f"SIMULATION: Test message would be sent to {event['recipientName']} via {platform}",
        "content": message,
        "simulation": True,
        "connected": connected,
        "recipientInfo": recipient_info,
    }
    if not connected:
        response["connectionInstructions"] = (
            f"To send real messages via {platform}, please connect your account "
            "in Settings > Social Media Accounts."
        )
    return response


async def get_reminders_pipeline(event_service: EventService, user_id: str) -> List[Dict[str, Any]]:
    events = await event_service.get_due_reminders(user_id)
    return [serialize_document(e) for e in events]
