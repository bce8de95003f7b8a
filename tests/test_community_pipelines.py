"""Unit tests for task and community post pipeline functions."""

import pytest
from unittest.mock import AsyncMock
from bson import ObjectId

from common.utils.exceptions import BadRequestException, ForbiddenException, NotFoundException
from rats.pipelines.posts import (
    create_post_pipeline,
    toggle_save_pipeline,
    share_post_pipeline,
    delete_post_pipeline,
)
from rats.pipelines.tasks import (
    update_task_pipeline,
    invite_pipeline,
    delete_task_pipeline,
    reject_invite_pipeline,
)
from rats.services.community.post_service import PostService


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_task_service():
    service = AsyncMock()
    service.expand.side_effect = lambda tasks: tasks
    return service


@pytest.fixture
def mock_post_service():
    return AsyncMock()


@pytest.fixture
def mock_user_service():
    return AsyncMock()


@pytest.fixture
def mock_badge_service():
    service = AsyncMock()
    service.check_and_award.return_value = []
    return service


@pytest.fixture
def sample_task():
    return {
        "_id": ObjectId(),
        "owner": ObjectId(),
        "content": "Walk 10k steps",
        "visibility": "private",
        "isCompleted": True,
        "collaborators": [ObjectId(), ObjectId()],
        "pendingInvitations": [],
    }


# ─────────────────────────────────────────────────────────────────
# Tasks
# ─────────────────────────────────────────────────────────────────


class TestUpdateTaskPipeline:
    @pytest.mark.asyncio
    async def test_completion_rewards_owner_and_collaborators(
        self, mock_task_service, mock_user_service, mock_badge_service, sample_task,
    ):
        mock_task_service.update_task.return_value = (sample_task, True)
        badge = {"name": "Task Taker", "description": "Completed your first task."}
        mock_badge_service.check_and_award.return_value = [badge]

        result = await update_task_pipeline(
            task_service=mock_task_service,
            user_service=mock_user_service,
            badge_service=mock_badge_service,
            task_id=str(sample_task["_id"]),
            user_id=str(sample_task["owner"]),
            is_completed=True,
            owner_xp=10,
            collaborator_xp=5,
        )

        mock_user_service.add_xp.assert_awaited_once_with(sample_task["owner"], 10)
        mock_user_service.add_xp_many.assert_awaited_once_with(sample_task["collaborators"], 5)
        mock_badge_service.check_and_award.assert_awaited_once_with(sample_task["owner"])
        assert result["newBadges"] == [badge]
        assert result["updatedTask"]["_id"] == str(sample_task["_id"])

    @pytest.mark.asyncio
    async def test_edit_without_completion_gives_no_xp(
        self, mock_task_service, mock_user_service, mock_badge_service, sample_task,
    ):
        mock_task_service.update_task.return_value = (sample_task, False)

        result = await update_task_pipeline(
            task_service=mock_task_service,
            user_service=mock_user_service,
            badge_service=mock_badge_service,
            task_id=str(sample_task["_id"]),
            user_id=str(sample_task["owner"]),
            content="Walk 12k steps",
        )

        mock_user_service.add_xp.assert_not_called()
        mock_user_service.add_xp_many.assert_not_called()
        assert result["newBadges"] == []


class TestTaskMembershipPipelines:
    @pytest.mark.asyncio
    async def test_invite_unknown_username(self, mock_task_service, mock_user_service, sample_task):
        mock_user_service.get_user_by_username.return_value = None

        with pytest.raises(NotFoundException) as exc_info:
            await invite_pipeline(
                mock_task_service, mock_user_service,
                str(sample_task["_id"]), str(sample_task["owner"]), "ghost",
            )

        assert exc_info.value.message == "User 'ghost' not found."
        mock_task_service.invite.assert_not_called()

    @pytest.mark.asyncio
    async def test_invite_message_names_invitee(self, mock_task_service, mock_user_service, sample_task):
        invitee = {"_id": ObjectId(), "username": "alex"}
        mock_user_service.get_user_by_username.return_value = invitee
        mock_task_service.invite.return_value = sample_task

        result = await invite_pipeline(
            mock_task_service, mock_user_service,
            str(sample_task["_id"]), str(sample_task["owner"]), "alex",
        )

        assert result["message"] == "Invitation sent to alex"
        mock_task_service.invite.assert_awaited_once_with(
            str(sample_task["_id"]), str(sample_task["owner"]), invitee
        )

    @pytest.mark.asyncio
    async def test_delete_and_reject_messages(self, mock_task_service, sample_task):
        task_id = str(sample_task["_id"])

        deleted = await delete_task_pipeline(mock_task_service, task_id, str(sample_task["owner"]))
        rejected = await reject_invite_pipeline(mock_task_service, task_id, str(ObjectId()))

        assert deleted == {"id": task_id, "message": "Task removed"}
        assert rejected == {"message": "Invitation rejected.", "success": True}


# ─────────────────────────────────────────────────────────────────
# Posts
# ─────────────────────────────────────────────────────────────────


class TestPostPipelines:
    @pytest.mark.asyncio
    async def test_create_post_awards_xp_and_checks_badges(
        self, mock_post_service, mock_user_service, mock_badge_service, sample_user_id,
    ):
        post = {"_id": ObjectId(), "content": "Hit my goal today!", "author": ObjectId(sample_user_id)}
        mock_post_service.create_post.return_value = post

        result = await create_post_pipeline(
            post_service=mock_post_service,
            user_service=mock_user_service,
            badge_service=mock_badge_service,
            user_id=sample_user_id,
            data={"content": "Hit my goal today!"},
            xp_reward=15,
        )

        mock_user_service.add_xp.assert_awaited_once_with(sample_user_id, 15)
        mock_badge_service.check_and_award.assert_awaited_once_with(sample_user_id)
        assert result["post"]["_id"] == str(post["_id"])
        assert result["newBadges"] == []

    @pytest.mark.asyncio
    async def test_toggle_save_returns_string_ids(self, mock_post_service, mock_user_service, sample_user_id):
        post_oid = ObjectId()
        mock_post_service.exists.return_value = post_oid
        mock_user_service.toggle_saved_post.return_value = [post_oid]

        result = await toggle_save_pipeline(mock_post_service, mock_user_service, str(post_oid), sample_user_id)

        assert result == {"savedPosts": [str(post_oid)]}
        mock_user_service.toggle_saved_post.assert_awaited_once_with(sample_user_id, post_oid)

    @pytest.mark.asyncio
    async def test_share_records_on_profile(self, mock_post_service, mock_user_service, sample_user_id):
        shared = {"_id": ObjectId(), "sharedFrom": ObjectId()}
        mock_post_service.share_post.return_value = shared

        await share_post_pipeline(mock_post_service, mock_user_service, str(shared["sharedFrom"]), sample_user_id)

        mock_user_service.add_shared_post.assert_awaited_once_with(sample_user_id, shared["_id"])

    @pytest.mark.asyncio
    async def test_delete_cleans_up_references(self, mock_post_service, mock_user_service, sample_user_id):
        deleted_ids = [ObjectId(), ObjectId()]
        mock_post_service.delete_post.return_value = deleted_ids
        mock_user_service.remove_post_references.return_value = 3

        result = await delete_post_pipeline(mock_post_service, mock_user_service, str(deleted_ids[0]), sample_user_id)

        mock_user_service.remove_post_references.assert_awaited_once_with(deleted_ids)
        assert result == {"message": "Post deleted successfully"}


# ─────────────────────────────────────────────────────────────────
# PostService rules
# ─────────────────────────────────────────────────────────────────


class TestPostServiceRules:
    @pytest.mark.asyncio
    async def test_cannot_share_own_post(self, mock_db, collections, sample_user_id):
        service = PostService(mock_db)
        collections["posts"].find_one.return_value = {
            "_id": ObjectId(), "author": ObjectId(sample_user_id), "content": "Mine",
        }

        with pytest.raises(BadRequestException) as exc_info:
            await service.share_post(str(ObjectId()), sample_user_id)

        assert exc_info.value.message == "You cannot share your own post."

    @pytest.mark.asyncio
    async def test_only_author_deletes(self, mock_db, collections, sample_user_id):
        service = PostService(mock_db)
        collections["posts"].find_one.return_value = {"_id": ObjectId(), "author": ObjectId()}

        with pytest.raises(ForbiddenException):
            await service.delete_post(str(ObjectId()), sample_user_id)

        collections["posts"].delete_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_removes_shares_too(self, mock_db, collections, cursor_of, sample_user_id):
        service = PostService(mock_db)
        post = {"_id": ObjectId(), "author": ObjectId(sample_user_id)}
        share_ids = [ObjectId(), ObjectId()]
        collections["posts"].find_one.return_value = post
        collections["posts"].find.return_value = cursor_of([{"_id": oid} for oid in share_ids])

        deleted = await service.delete_post(str(post["_id"]), sample_user_id)

        assert deleted == [post["_id"], *share_ids]
        collections["posts"].delete_many.assert_awaited_once_with({"sharedFrom": post["_id"]})

    @pytest.mark.asyncio
    async def test_empty_comment_rejected(self, mock_db, collections, sample_user_id):
        service = PostService(mock_db)
        collections["posts"].find_one.return_value = {"_id": ObjectId(), "author": ObjectId()}

        with pytest.raises(BadRequestException):
            await service.add_comment(str(ObjectId()), sample_user_id, "   ")
