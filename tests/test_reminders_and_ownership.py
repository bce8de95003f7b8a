"""Unit tests for the reminder engine and owner-only access checks."""

import pytest
from datetime import timedelta
from unittest.mock import AsyncMock
from bson import ObjectId

from common.ai.base import AIProviderError
from common.utils.exceptions import BadRequestException, ForbiddenException, NotFoundException
from rats.pipelines.events import create_event_pipeline, send_test_message_pipeline
from rats.services.events.event_service import EventService, add_one_year
from rats.services.events.reminder_service import ReminderService
from rats.services.meditation.custom_meditation_service import CustomMeditationService
from rats.services.tasks.task_service import TaskService


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def owner_id():
    return ObjectId()


@pytest.fixture
def mock_event_service():
    return AsyncMock()


@pytest.fixture
def mock_user_service(owner_id):
    service = AsyncMock()
    service.get_user_by_id.return_value = {"_id": owner_id, "email": "owner@example.com"}
    return service


@pytest.fixture
def mock_email_service():
    service = AsyncMock()
    service.send_event_reminder.return_value = {"success": True}
    service.send_event_greeting.return_value = {"success": True}
    return service


@pytest.fixture
def reminder_service(mock_event_service, mock_user_service, mock_email_service):
    return ReminderService(
        event_service=mock_event_service,
        user_service=mock_user_service,
        email_service=mock_email_service,
    )


def _event(owner_id, date, **fields):
    event = {
        "_id": ObjectId(),
        "user": owner_id,
        "title": "Mom's birthday",
        "date": date,
        "recipientName": "Mom",
        "reminderDays": [1, 7],
        "isRecurring": False,
        "isActive": True,
        "recipientContact": {},
        "socialMediaHandles": {},
        "aiGeneratedMessage": None,
        "lastMessageSent": None,
    }
    event.update(fields)
    return event


# ─────────────────────────────────────────────────────────────────
# ReminderService
# ─────────────────────────────────────────────────────────────────


class TestProcessReminders:
    @pytest.mark.asyncio
    async def test_sends_reminder_on_reminder_day(
        self, reminder_service, mock_event_service, mock_email_service, owner_id, now,
    ):
        event = _event(owner_id, now + timedelta(days=7))
        mock_event_service.get_active_events.return_value = [event]

        results = await reminder_service.process_reminders(now=now)

        assert results["remindersSent"] == 1
        mock_email_service.send_event_reminder.assert_awaited_once_with("owner@example.com", event, 7)

    @pytest.mark.asyncio
    async def test_no_reminder_on_other_days(
        self, reminder_service, mock_event_service, mock_email_service, owner_id, now,
    ):
        mock_event_service.get_active_events.return_value = [_event(owner_id, now + timedelta(days=5))]

        results = await reminder_service.process_reminders(now=now)

        assert results["remindersSent"] == 0
        mock_email_service.send_event_reminder.assert_not_called()

    @pytest.mark.asyncio
    async def test_sends_greeting_on_event_day(
        self, reminder_service, mock_event_service, mock_email_service, owner_id, now,
    ):
        event = _event(
            owner_id, now,
            aiGeneratedMessage="Happy birthday, Mom!",
            recipientContact={"email": "mom@example.com"},
        )
        mock_event_service.get_active_events.return_value = [event]

        results = await reminder_service.process_reminders(now=now)

        assert results["greetingsSent"] == 1
        mock_email_service.send_event_greeting.assert_awaited_once_with("mom@example.com", event)
        mock_event_service.mark_message_sent.assert_awaited_once_with(event["_id"], now)

    @pytest.mark.asyncio
    async def test_greeting_only_once_per_day(
        self, reminder_service, mock_event_service, mock_email_service, owner_id, now,
    ):
        event = _event(
            owner_id, now,
            aiGeneratedMessage="Happy birthday, Mom!",
            recipientContact={"email": "mom@example.com"},
            lastMessageSent=now - timedelta(hours=1),
        )
        mock_event_service.get_active_events.return_value = [event]

        results = await reminder_service.process_reminders(now=now)

        assert results["greetingsSent"] == 0
        mock_email_service.send_event_greeting.assert_not_called()

    @pytest.mark.asyncio
    async def test_greeting_needs_generated_message(
        self, reminder_service, mock_event_service, mock_email_service, owner_id, now,
    ):
        event = _event(owner_id, now, recipientContact={"email": "mom@example.com"})
        mock_event_service.get_active_events.return_value = [event]

        results = await reminder_service.process_reminders(now=now)

        assert results["greetingsSent"] == 0
        mock_event_service.mark_message_sent.assert_not_called()

    @pytest.mark.asyncio
    async def test_social_handle_counts_as_delivery(
        self, reminder_service, mock_event_service, owner_id, now,
    ):
        event = _event(
            owner_id, now,
            aiGeneratedMessage="Happy anniversary!",
            socialMediaHandles={"instagram": "@mom"},
        )
        mock_event_service.get_active_events.return_value = [event]

        results = await reminder_service.process_reminders(now=now)

        assert results["greetingsSent"] == 1

    @pytest.mark.asyncio
    async def test_recurring_past_event_moves_to_next_year(
        self, reminder_service, mock_event_service, owner_id, now,
    ):
        past = now - timedelta(days=3)
        event = _event(owner_id, past, isRecurring=True)
        mock_event_service.get_active_events.return_value = [event]

        results = await reminder_service.process_reminders(now=now)

        assert results["eventsRescheduled"] == 1
        mock_event_service.reschedule.assert_awaited_once_with(event["_id"], add_one_year(past))

    @pytest.mark.asyncio
    async def test_one_failing_event_does_not_stop_the_run(
        self, reminder_service, mock_event_service, mock_user_service, owner_id, now,
    ):
        failing = _event(owner_id, now + timedelta(days=1))
        healthy = _event(owner_id, now + timedelta(days=7))
        mock_event_service.get_active_events.return_value = [failing, healthy]
        mock_user_service.get_user_by_id.side_effect = [
            RuntimeError("connection reset"),
            {"_id": owner_id, "email": "owner@example.com"},
        ]

        results = await reminder_service.process_reminders(now=now)

        assert results["eventsChecked"] == 2
        assert results["remindersSent"] == 1
        assert results["errors"] == [{"eventId": str(failing["_id"]), "error": "connection reset"}]


# ─────────────────────────────────────────────────────────────────
# Ownership checks
# ─────────────────────────────────────────────────────────────────


class TestEventOwnership:
    @pytest.mark.asyncio
    async def test_owner_gets_event(self, mock_db, collections, owner_id):
        service = EventService(mock_db)
        event = {"_id": ObjectId(), "user": owner_id}
        collections["events"].find_one.return_value = event

        assert await service.get_owned_event(str(event["_id"]), str(owner_id)) == event

    @pytest.mark.asyncio
    async def test_other_user_is_forbidden(self, mock_db, collections, owner_id):
        service = EventService(mock_db)
        collections["events"].find_one.return_value = {"_id": ObjectId(), "user": owner_id}

        with pytest.raises(ForbiddenException) as exc_info:
            await service.get_owned_event(str(ObjectId()), str(ObjectId()), action="update")

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Not authorized to update this event"

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, mock_db, owner_id):
        service = EventService(mock_db)

        with pytest.raises(NotFoundException):
            await service.get_owned_event("not-an-id", str(owner_id))


class TestCustomMeditationOwnership:
    @pytest.mark.asyncio
    async def test_delete_by_other_user_is_forbidden(self, mock_db, collections, owner_id):
        service = CustomMeditationService(mock_db)
        collections["customMeditations"].find_one.return_value = {"_id": ObjectId(), "user": owner_id}

        with pytest.raises(ForbiddenException):
            await service.delete(str(ObjectId()), str(ObjectId()))

        collections["customMeditations"].delete_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_skips_missing_fields(self, mock_db, collections, owner_id):
        service = CustomMeditationService(mock_db)
        doc = {"_id": ObjectId(), "user": owner_id}
        collections["customMeditations"].find_one.return_value = doc

        await service.update(str(doc["_id"]), str(owner_id), {"name": "Evening calm", "duration": None})

        update = collections["customMeditations"].find_one_and_update.call_args[0][1]
        assert update["$set"]["name"] == "Evening calm"
        assert "duration" not in update["$set"]


class TestTaskPermissions:
    @pytest.mark.asyncio
    async def test_stranger_cannot_update(self, mock_db, collections, owner_id):
        service = TaskService(mock_db)
        collections["tasks"].find_one.return_value = {"_id": ObjectId(), "owner": owner_id, "collaborators": []}

        with pytest.raises(ForbiddenException):
            await service.update_task(str(ObjectId()), str(ObjectId()), is_completed=True)

    @pytest.mark.asyncio
    async def test_collaborator_completes_but_cannot_edit_content(self, mock_db, collections, owner_id):
        service = TaskService(mock_db)
        collaborator = ObjectId()
        task = {"_id": ObjectId(), "owner": owner_id, "collaborators": [collaborator], "isCompleted": False}
        collections["tasks"].find_one.return_value = task
        collections["tasks"].find_one_and_update.return_value = {**task, "isCompleted": True}

        updated, just_completed = await service.update_task(
            str(task["_id"]), str(collaborator), content="Hijacked", is_completed=True
        )

        assert just_completed is True
        assert updated["isCompleted"] is True
        set_fields = collections["tasks"].find_one_and_update.call_args[0][1]["$set"]
        assert "content" not in set_fields

    @pytest.mark.asyncio
    async def test_completing_twice_is_not_a_new_completion(self, mock_db, collections, owner_id):
        service = TaskService(mock_db)
        task = {"_id": ObjectId(), "owner": owner_id, "collaborators": [], "isCompleted": True}
        collections["tasks"].find_one.return_value = task
        collections["tasks"].find_one_and_update.side_effect = [None, task]

        updated, just_completed = await service.update_task(str(task["_id"]), str(owner_id), is_completed=True)

        assert just_completed is False
        assert updated == task

    @pytest.mark.asyncio
    async def test_completion_is_decided_by_the_update(self, mock_db, collections, owner_id):
        service = TaskService(mock_db)
        # Read as open, but a concurrent request completes it before our update
        task = {"_id": ObjectId(), "owner": owner_id, "collaborators": [], "isCompleted": False}
        collections["tasks"].find_one.return_value = task
        collections["tasks"].find_one_and_update.side_effect = [None, {**task, "isCompleted": True}]

        updated, just_completed = await service.update_task(str(task["_id"]), str(owner_id), is_completed=True)

        assert just_completed is False
        assert updated["isCompleted"] is True
        first, second = collections["tasks"].find_one_and_update.call_args_list
        assert first[0][0] == {"_id": task["_id"], "isCompleted": {"$ne": True}}
        assert second[0][0] == {"_id": task["_id"]}

    @pytest.mark.asyncio
    async def test_reopening_does_not_count_as_completion(self, mock_db, collections, owner_id):
        service = TaskService(mock_db)
        task = {"_id": ObjectId(), "owner": owner_id, "collaborators": [], "isCompleted": True}
        collections["tasks"].find_one.return_value = task
        collections["tasks"].find_one_and_update.return_value = {**task, "isCompleted": False}

        _, just_completed = await service.update_task(str(task["_id"]), str(owner_id), is_completed=False)

        assert just_completed is False
        assert collections["tasks"].find_one_and_update.call_args[0][0] == {"_id": task["_id"]}

    @pytest.mark.asyncio
    async def test_only_owner_deletes(self, mock_db, collections, owner_id):
        service = TaskService(mock_db)
        collections["tasks"].find_one.return_value = {"_id": ObjectId(), "owner": owner_id}

        with pytest.raises(ForbiddenException):
            await service.delete_task(str(ObjectId()), str(ObjectId()))

    @pytest.mark.asyncio
    async def test_cannot_join_private_task(self, mock_db, collections, owner_id):
        service = TaskService(mock_db)
        collections["tasks"].find_one.return_value = {"_id": ObjectId(), "owner": owner_id, "visibility": "private"}

        with pytest.raises(Exception) as exc_info:
            await service.join_public(str(ObjectId()), str(ObjectId()))

        assert exc_info.value.status_code == 400


# ─────────────────────────────────────────────────────────────────
# Event pipelines
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_instagram_service():
    service = AsyncMock()
    service.post_to_instagram.return_value = {"success": True, "postId": "17890001"}
    return service


class TestCreateEventPipeline:
    @pytest.mark.asyncio
    async def test_ai_failure_still_returns_event(self, mock_event_service, owner_id, now):
        event = _event(owner_id, now + timedelta(days=10))
        mock_event_service.create_event.return_value = event
        generator = AsyncMock()
        generator.generate_for_event.side_effect = AIProviderError("Failed to generate AI content. Please try again later.")

        result = await create_event_pipeline(mock_event_service, generator, str(owner_id), {"title": "Mom's birthday"}, now=now)

        assert result["_id"] == str(event["_id"])
        assert result["title"] == "Mom's birthday"
        assert "aiGeneratedMessage" not in result
        mock_event_service.update_event.assert_not_called()

    @pytest.mark.asyncio
    async def test_future_event_gets_generated_content(self, mock_event_service, owner_id, now):
        event = _event(owner_id, now + timedelta(days=10))
        mock_event_service.create_event.return_value = event
        mock_event_service.update_event.return_value = {**event, "aiGeneratedMessage": "Happy birthday, Mom!"}
        generator = AsyncMock()
        generator.generate_for_event.return_value = ("Happy birthday, Mom!", "Book a table")

        result = await create_event_pipeline(mock_event_service, generator, str(owner_id), {}, now=now)

        assert result["aiGeneratedMessage"] == "Happy birthday, Mom!"
        mock_event_service.update_event.assert_awaited_once_with(
            event["_id"], {"aiGeneratedMessage": "Happy birthday, Mom!", "aiGeneratedPlan": "Book a table"}
        )

    @pytest.mark.asyncio
    async def test_past_event_skips_generation(self, mock_event_service, owner_id, now):
        mock_event_service.create_event.return_value = _event(owner_id, now - timedelta(days=3))
        generator = AsyncMock()

        await create_event_pipeline(mock_event_service, generator, str(owner_id), {}, now=now)

        generator.generate_for_event.assert_not_called()


class TestSendTestMessagePipeline:
    @pytest.mark.asyncio
    async def test_requires_generated_message(
        self, mock_event_service, mock_user_service, mock_instagram_service, owner_id, now
    ):
        mock_event_service.get_owned_event.return_value = _event(owner_id, now, aiGeneratedMessage=None)

        with pytest.raises(BadRequestException) as exc_info:
            await send_test_message_pipeline(
                mock_event_service, mock_user_service, mock_instagram_service,
                str(ObjectId()), str(owner_id), "email"
            )

        assert exc_info.value.message == "No AI-generated message available for this event"

    @pytest.mark.asyncio
    async def test_unconnected_platform_is_simulated_with_instructions(
        self, mock_event_service, mock_user_service, mock_instagram_service, owner_id, now
    ):
        event = _event(owner_id, now, aiGeneratedMessage="Happy birthday!", recipientName="Mom",
                       socialMediaHandles={"facebook": "mom.fb"})
        mock_event_service.get_owned_event.return_value = event

        result = await send_test_message_pipeline(
            mock_event_service, mock_user_service, mock_instagram_service,
            str(event["_id"]), str(owner_id), "facebook"
        )

        assert result["simulation"] is True
        assert result["connected"] is False
        assert result["content"] == "Happy birthday!"
        assert result["message"] == "SIMULATION: Test message would be sent to Mom via facebook"
        assert "facebook" in result["connectionInstructions"]
        assert result["recipientInfo"] == {"name": "Mom", "platform": "facebook", "handle": "mom.fb"}

    @pytest.mark.asyncio
    async def test_direct_platform_counts_as_connected(
        self, mock_event_service, mock_user_service, mock_instagram_service, owner_id, now
    ):
        event = _event(owner_id, now, aiGeneratedMessage="Happy birthday!", recipientName="Mom",
                       recipientContact={"email": "mom@example.com"})
        mock_event_service.get_owned_event.return_value = event

        result = await send_test_message_pipeline(
            mock_event_service, mock_user_service, mock_instagram_service,
            str(event["_id"]), str(owner_id), "email"
        )

        assert result["simulation"] is True
        assert result["connected"] is True
        assert "connectionInstructions" not in result
        assert result["recipientInfo"]["handle"] == "mom@example.com"

    @pytest.mark.asyncio
    async def test_connected_instagram_posts_for_real(
        self, mock_event_service, mock_user_service, mock_instagram_service, owner_id, now
    ):
        event = _event(owner_id, now, aiGeneratedMessage="Happy birthday!", recipientName="Mom")
        mock_event_service.get_owned_event.return_value = event
        mock_user_service.get_user_by_id.return_value = {
            "_id": owner_id,
            "socialMediaAuth": {"instagram": {"accessToken": "ig-token"}},
        }

        result = await send_test_message_pipeline(
            mock_event_service, mock_user_service, mock_instagram_service,
            str(event["_id"]), str(owner_id), "instagram"
        )

        assert result["postId"] == "17890001"
        assert result["message"] == "Message posted to Instagram successfully!"
        assert "simulation" not in result
        mock_instagram_service.post_to_instagram.assert_awaited_once_with(
            str(owner_id), "Happy birthday!", event_id=event["_id"]
        )

    @pytest.mark.asyncio
    async def test_failed_instagram_post_is_bad_request(
        self, mock_event_service, mock_user_service, mock_instagram_service, owner_id, now
    ):
        mock_event_service.get_owned_event.return_value = _event(owner_id, now, aiGeneratedMessage="Hi!")
        mock_user_service.get_user_by_id.return_value = {
            "_id": owner_id,
            "socialMediaAuth": {"instagram": {"accessToken": "ig-token"}},
        }
        mock_instagram_service.post_to_instagram.return_value = {"success": False, "error": "Media upload failed"}

        with pytest.raises(BadRequestException) as exc_info:
            await send_test_message_pipeline(
                mock_event_service, mock_user_service, mock_instagram_service,
                str(ObjectId()), str(owner_id), "instagram"
            )

        assert exc_info.value.message == "Media upload failed"
