"""Unit tests for Instagram helpers, scheduled publishing and social pipelines."""

import base64
import json

import httpx
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock
from bson import ObjectId

from common.utils.exceptions import BadRequestException
from config.social_config import INSTAGRAM_HASHTAGS, INSTAGRAM_MAX_CAPTION_LENGTH
from rats.pipelines.social import (
    oauth_callback_pipeline,
    connected_accounts_pipeline,
    schedule_post_pipeline,
)
from rats.services.social.instagram_service import (
    InstagramService,
    InstagramAuthError,
    NOT_CONNECTED_ERROR,
    format_instagram_message,
    encode_state,
    decode_state,
)


CLIENT_URL = "http://localhost:3000"


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_user_service():
    return AsyncMock()


@pytest.fixture
def mock_social_post_service():
    return AsyncMock()


@pytest.fixture
def instagram_service(mock_user_service, mock_social_post_service):
    return InstagramService(
        user_service=mock_user_service,
        social_post_service=mock_social_post_service,
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri="http://localhost:5001/api/social-auth/instagram/callback",
    )


# ─────────────────────────────────────────────────────────────────
# format_instagram_message
# ─────────────────────────────────────────────────────────────────


class TestFormatInstagramMessage:
    def test_appends_hashtags(self):
        assert format_instagram_message("Happy birthday!") == "Happy birthday!" + INSTAGRAM_HASHTAGS

    def test_collapses_blank_line_runs(self):
        assert format_instagram_message("Hi\n\n\n\nthere") == "Hi\n\nthere" + INSTAGRAM_HASHTAGS

    def test_long_message_fits_caption_limit(self):
        caption = format_instagram_message("x" * 3000)

        assert len(caption) == INSTAGRAM_MAX_CAPTION_LENGTH
        assert caption.endswith("..." + INSTAGRAM_HASHTAGS)


# ─────────────────────────────────────────────────────────────────
# OAuth state
# ─────────────────────────────────────────────────────────────────


class TestOAuthState:
    def test_state_carries_user_id(self, sample_user_id):
        assert decode_state(encode_state(sample_user_id)) == sample_user_id

    def test_garbage_state_is_rejected(self):
        with pytest.raises(InstagramAuthError):
            decode_state("not a state!")

    def test_state_without_user_id_is_rejected(self):
        with pytest.raises(InstagramAuthError):
            decode_state("e30=")  # base64 of "{}"

    def test_state_with_malformed_user_id_is_rejected(self):
        with pytest.raises(InstagramAuthError):
            decode_state(encode_state("not-an-object-id"))

    def test_auth_url_contains_state(self, instagram_service, sample_user_id):
        url = instagram_service.get_auth_url(sample_user_id)

        assert url.startswith("https://api.instagram.com/oauth/authorize?")
        assert "client_id=client-id" in url
        assert "response_type=code" in url

    @pytest.mark.asyncio
    async def test_complete_oauth_stores_long_lived_token(
        self, instagram_service, mock_user_service, sample_user_id,
    ):
        instagram_service.exchange_code = AsyncMock(return_value={"access_token": "short", "user_id": 1784})
        instagram_service.get_long_lived_token = AsyncMock(return_value="long-lived")

        user_id = await instagram_service.complete_oauth("code", encode_state(sample_user_id))

        assert user_id == sample_user_id
        instagram_service.get_long_lived_token.assert_awaited_once_with("short")
        args = mock_user_service.set_social_auth.call_args[0]
        assert args[0] == sample_user_id
        assert args[1] == "instagram"
        assert args[2]["userId"] == "1784"
        assert args[2]["accessToken"] == "long-lived"
        assert args[2]["tokenExpiry"] > datetime.now(timezone.utc)


# ─────────────────────────────────────────────────────────────────
# Scheduled publishing
# ─────────────────────────────────────────────────────────────────


class TestProcessScheduledPosts:
    @pytest.mark.asyncio
    async def test_publishes_due_posts_and_marks_failures(
        self, instagram_service, mock_social_post_service,
    ):
        ok_post = {"_id": ObjectId(), "platform": "instagram"}
        failing_post = {"_id": ObjectId(), "platform": "instagram"}
        mock_social_post_service.get_due_scheduled.return_value = [ok_post, failing_post]
        mock_social_post_service.mark_published.side_effect = [{}, RuntimeError("Graph API down")]

        results = await instagram_service.process_scheduled_posts()

        assert results["processed"] == 2
        assert results["published"] == 1
        assert results["failed"] == 1
        mock_social_post_service.mark_failed.assert_awaited_once_with(failing_post["_id"], "Graph API down")
        platform_post_id = mock_social_post_service.mark_published.call_args_list[0][0][1]
        assert platform_post_id.startswith("ig_")

    @pytest.mark.asyncio
    async def test_skips_other_platforms(self, instagram_service, mock_social_post_service):
        mock_social_post_service.get_due_scheduled.return_value = [{"_id": ObjectId(), "platform": "facebook"}]

        results = await instagram_service.process_scheduled_posts()

        assert results["processed"] == 1
        assert results["published"] == 0
        mock_social_post_service.mark_published.assert_not_called()

    @pytest.mark.asyncio
    async def test_scheduling_requires_connection(
        self, instagram_service, mock_user_service, mock_social_post_service, sample_user_id,
    ):
        mock_user_service.get_user_by_id.return_value = {"_id": ObjectId(sample_user_id), "socialMediaAuth": {}}

        result = await instagram_service.schedule_instagram_post(
            sample_user_id, "Hello", datetime(2030, 1, 1, tzinfo=timezone.utc)
        )

        assert result == {"success": False, "error": NOT_CONNECTED_ERROR}
        mock_social_post_service.record_scheduled.assert_not_called()


# ─────────────────────────────────────────────────────────────────
# Pipelines
# ─────────────────────────────────────────────────────────────────


class TestOAuthCallbackPipeline:
    @pytest.mark.asyncio
    async def test_success_redirects_with_connected(self, sample_user_id):
        service = AsyncMock()
        service.complete_oauth.return_value = sample_user_id

        url = await oauth_callback_pipeline(service, CLIENT_URL, "code", "state")

        assert url == f"{CLIENT_URL}/settings/social-accounts?connected=instagram"

    @pytest.mark.asyncio
    async def test_failure_redirects_with_error(self):
        service = AsyncMock()
        service.complete_oauth.side_effect = InstagramAuthError("bad code")

        url = await oauth_callback_pipeline(service, CLIENT_URL + "/", "code", "state")

        assert url == f"{CLIENT_URL}/settings/social-accounts?error=instagram_auth_failed"

    @pytest.mark.asyncio
    async def test_missing_code_skips_exchange(self):
        service = AsyncMock()

        url = await oauth_callback_pipeline(service, CLIENT_URL, None, "state")

        assert url.endswith("?error=instagram_auth_failed")
        service.complete_oauth.assert_not_called()


class TestConnectedAccountsPipeline:
    @pytest.mark.asyncio
    async def test_reports_each_oauth_platform(self, sample_user_id):
        user_service = AsyncMock()
        user_service.get_user_by_id.return_value = {
            "_id": ObjectId(sample_user_id),
            "socialMediaAuth": {"instagram": {"accessToken": "token"}, "facebook": {}},
        }

        result = await connected_accounts_pipeline(user_service, sample_user_id)

        assert result == {
            "success": True,
            "connectedAccounts": {"instagram": True, "facebook": False, "twitter": False},
        }


class TestSchedulePostPipeline:
    @pytest.mark.asyncio
    async def test_rejects_unsupported_platform(self, sample_user_id):
        service = AsyncMock()

        with pytest.raises(BadRequestException) as exc_info:
            await schedule_post_pipeline(
                service, sample_user_id, "twitter", "Hi", datetime(2030, 1, 1, tzinfo=timezone.utc)
            )

        assert exc_info.value.status_code == 400
        service.schedule_instagram_post.assert_not_called()

    @pytest.mark.asyncio
    async def test_not_connected_is_bad_request(self, sample_user_id):
        service = AsyncMock()
        service.schedule_instagram_post.return_value = {"success": False, "error": NOT_CONNECTED_ERROR}

        with pytest.raises(BadRequestException) as exc_info:
            await schedule_post_pipeline(
                service, sample_user_id, "instagram", "Hi", datetime(2030, 1, 1, tzinfo=timezone.utc)
            )

        assert exc_info.value.message == NOT_CONNECTED_ERROR

    @pytest.mark.asyncio
    async def test_returns_schedule_id(self, sample_user_id):
        service = AsyncMock()
        service.schedule_instagram_post.return_value = {"success": True, "scheduleId": "abc"}

        result = await schedule_post_pipeline(
            service, sample_user_id, "instagram", "Hi", datetime(2030, 1, 1)
        )

        assert result == {"success": True, "scheduleId": "abc"}
        scheduled_for = service.schedule_instagram_post.call_args[0][2]
        assert scheduled_for.tzinfo is not None


class TestOAuthCallbackFailures:
    @pytest.mark.asyncio
    async def test_malformed_user_id_in_state_redirects_with_error(
        self, instagram_service, mock_user_service,
    ):
        state = base64.b64encode(json.dumps({"userId": "not-an-object-id"}).encode()).decode()

        url = await oauth_callback_pipeline(instagram_service, CLIENT_URL, "code", state)

        assert url.endswith("?error=instagram_auth_failed")
        mock_user_service.set_social_auth.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_json_token_response_redirects_with_error(
        self, instagram_service, mock_user_service, sample_user_id, monkeypatch,
    ):
        def handler(request):
            return httpx.Response(200, text="<html>Service unavailable</html>")

        real_client = httpx.AsyncClient
        monkeypatch.setattr(
            httpx, "AsyncClient",
            lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
        )

        url = await oauth_callback_pipeline(
            instagram_service, CLIENT_URL, "code", encode_state(sample_user_id)
        )

        assert url.endswith("?error=instagram_auth_failed")
        mock_user_service.set_social_auth.assert_not_called()

    @pytest.mark.asyncio
    async def test_unexpected_error_redirects_with_error(self):
        service = AsyncMock()
        service.complete_oauth.side_effect = RuntimeError("database unavailable")

        url = await oauth_callback_pipeline(service, CLIENT_URL, "code", "state")

        assert url == f"{CLIENT_URL}/settings/social-accounts?error=instagram_auth_failed"
