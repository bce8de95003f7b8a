"""
Instagram integration.

OAuth connection (authorization URL, code exchange, long-lived token),
caption formatting and simulated publishing. Media publishing is not
performed against the Graph API; posts are recorded as if published.
"""

import base64
import json
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any
from urllib.parse import urlencode

import httpx
from bson import ObjectId

from config.social_config import (
    INSTAGRAM_AUTHORIZE_URL,
    INSTAGRAM_TOKEN_URL,
    INSTAGRAM_LONG_LIVED_TOKEN_URL,
    INSTAGRAM_SCOPES,
    INSTAGRAM_TOKEN_LIFETIME_DAYS,
    INSTAGRAM_MAX_CAPTION_LENGTH,
    INSTAGRAM_HASHTAGS,
)
from rats.services.social.social_post_service import (
    SocialPostService,
    generate_platform_post_id,
    simulated_metrics,
)
from rats.services.user.user_service import UserService

logger = logging.getLogger(__name__)


NOT_CONNECTED_ERROR = "Instagram not connected. Please connect your Instagram account."


class InstagramAuthError(Exception):
    """Raised when the OAuth callback cannot be completed."""


def format_instagram_message(message: str) -> str:
    """
    Fit a message into an Instagram caption.

    Truncates to 2200 characters, collapses runs of 3+ newlines to 2 and
    appends the RATS hashtags, keeping the whole caption within 2200.
    """
    if len(message) > INSTAGRAM_MAX_CAPTION_LENGTH:
        message = message[:INSTAGRAM_MAX_CAPTION_LENGTH - 3] + "..."

    message = re.sub(r"\n{3,}", "\n\n", message)

    max_length = INSTAGRAM_MAX_CAPTION_LENGTH - len(INSTAGRAM_HASHTAGS)
    if len(message) > max_length:
        message = message[:max_length - 3] + "..."

    return message + INSTAGRAM_HASHTAGS


def encode_state(user_id: str) -> str:
    return base64.b64encode(json.dumps({"userId": user_id}).encode()).decode()


def decode_state(state: str) -> str:
    """
    Recover the user id from an OAuth state value.

    Raises:
        InstagramAuthError: Malformed state
    """
    try:
        payload = json.loads(base64.b64decode(state).decode())
        user_id = str(payload["userId"])
    except (ValueError, KeyError, TypeError) as e:
        raise InstagramAuthError(f"Invalid OAuth state: {e}")

    if not ObjectId.is_valid(user_id):
        raise InstagramAuthError(f"Invalid user id in OAuth state: {user_id}")
    return user_id


def is_platform_connected(user: Dict[str, Any], platform: str) -> bool:
    auth = (user.get("socialMediaAuth") or {}).get(platform) or {}
    return bool(auth.get("accessToken"))


class InstagramService:
    """
    Instagram OAuth and post handling for one app registration.
    """

    def __init__(
        self,
        user_service: UserService,
        social_post_service: SocialPostService,
        client_id: Optional[str],
        client_secret: Optional[str],
        redirect_uri: str,
        timeout: float = 30.0,
    ):
        """
        Initialize InstagramService.

        Args:
            user_service: For reading and storing credentials
            social_post_service: For recording posts
            client_id: Instagram app client id
            client_secret: Instagram app secret
            redirect_uri: OAuth callback URL registered with Instagram
            timeout: HTTP timeout in seconds
        """
        self._user_service = user_service
        self._social_post_service = social_post_service
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._timeout = timeout

    # ─────────────────────────────────────────────────────────────────
    # OAuth
    # ─────────────────────────────────────────────────────────────────

    def get_auth_url(self, user_id: str) -> str:
        """Authorization URL carrying the user id in the state parameter."""
        params = {
            "client_id": self._client_id or "",
            "redirect_uri": self._redirect_uri,
            "scope": INSTAGRAM_SCOPES,
            "response_type": "code",
            "state": encode_state(user_id),
        }
        return f"{INSTAGRAM_AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> Dict[str, Any]:
        """
        Exchange an authorization code for a short-lived token.

        Returns:
            {"access_token": ..., "user_id": ...}
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    INSTAGRAM_TOKEN_URL,
                    data={
                        "client_id": self._client_id,
                        "client_secret": self._client_secret,
                        "grant_type": "authorization_code",
                        "redirect_uri": self._redirect_uri,
                        "code": code,
                    },
                )
                response.raise_for_status()
                return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error exchanging Instagram code: {e}")
            raise InstagramAuthError("Failed to exchange Instagram authorization code")

    async def get_long_lived_token(self, short_lived_token: str) -> str:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(
                    INSTAGRAM_LONG_LIVED_TOKEN_URL,
                    params={
                        "grant_type": "ig_exchange_token",
                        "client_secret": self._client_secret,
                        "access_token": short_lived_token,
                    },
                )
                response.raise_for_status()
                return response.json()["access_token"]
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error(f"Error getting long-lived token: {e}")
            raise InstagramAuthError("Failed to get long-lived Instagram token")

    async def complete_oauth(self, code: str, state: str) -> str:
        """
        Finish the OAuth flow and store the credentials.

        Returns:
            The user id the account was connected for

        Raises:
            InstagramAuthError: Any step of the exchange failed
        """
        user_id = decode_state(state)

        token_data = await self.exchange_code(code)
        try:
            short_lived = token_data["access_token"]
            instagram_user_id = str(token_data["user_id"])
        except (KeyError, TypeError):
            raise InstagramAuthError("Instagram token response missing fields")

        long_lived = await self.get_long_lived_token(short_lived)

        await self._user_service.set_social_auth(user_id, "instagram", {
            "userId": instagram_user_id,
            "accessToken": long_lived,
            "tokenExpiry": datetime.now(timezone.utc) + timedelta(days=INSTAGRAM_TOKEN_LIFETIME_DAYS),
        })
        return user_id

    async def disconnect(self, user_id: str) -> None:
        await self._user_service.clear_social_auth(user_id, "instagram")

    # ─────────────────────────────────────────────────────────────────
    # Posting
    # ─────────────────────────────────────────────────────────────────

    async def _is_connected(self, user_id: str) -> bool:
        user = await self._user_service.get_user_by_id(user_id)
        return bool(user) and is_platform_connected(user, "instagram")

    async def post_to_instagram(
        self,
        user_id: str,
        message: str,
        image_url: Optional[str] = None,
        event_id: Optional[Any] = None
    ) -> Dict[str, Any]:
        """
        Publish a caption (simulated) and record the post.

        Returns:
            {"success": True, "postId": ...} or {"success": False, "error": ...}
        """
        if not await self._is_connected(user_id):
            return {"success": False, "error": NOT_CONNECTED_ERROR}

        caption = format_instagram_message(message)
        post_id = generate_platform_post_id("ig")

        await self._social_post_service.record_published(
            user_id, "instagram", caption, post_id, image_url=image_url, event_id=event_id
        )

        logger.info(f"Instagram post {post_id} published for user {user_id}")
        return {"success": True, "postId": post_id}

    async def schedule_instagram_post(
        self,
        user_id: str,
        message: str,
        scheduled_for: datetime,
        image_url: Optional[str] = None,
        event_id: Optional[Any] = None
    ) -> Dict[str, Any]:
        """
        Record a post to be published by the scheduled posts job.

        Returns:
            {"success": True, "scheduleId": ...} or {"success": False, "error": ...}
        """
        if not await self._is_connected(user_id):
            return {"success": False, "error": NOT_CONNECTED_ERROR}

        post = await self._social_post_service.record_scheduled(
            user_id,
            "instagram",
            format_instagram_message(message),
            scheduled_for,
            image_url=image_url,
            event_id=event_id,
        )
        return {"success": True, "scheduleId": str(post["_id"])}

    async def get_post_metrics(self, user_id: str, platform_post_id: str) -> Dict[str, Any]:
        """
        Refresh engagement metrics for a published post (simulated).

        Returns:
            {"success": True, "metrics": {...}} or {"success": False, "error": "Post not found"}
        """
        post = await self._social_post_service.find_by_platform_id(user_id, platform_post_id)
        if not post:
            return {"success": False, "error": "Post not found"}

        metrics = simulated_metrics()
        await self._social_post_service.set_metrics(post["_id"], metrics)
        return {"success": True, "metrics": metrics}

    async def process_scheduled_posts(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Publish every scheduled post that is due.

        A failure marks that post failed and the run continues.
        """
        now = now or datetime.now(timezone.utc)
        results: Dict[str, Any] = {"processed": 0, "published": 0, "failed": 0, "errors": []}

        due_posts: List[dict] = await self._social_post_service.get_due_scheduled(now)
        logger.info(f"Processing {len(due_posts)} scheduled social media posts")

        for post in due_posts:
            results["processed"] += 1
            if post.get("platform") != "instagram":
                continue
            try:
                await self._social_post_service.mark_published(
                    post["_id"], generate_platform_post_id("ig"), now
                )
                results["published"] += 1
                logger.info(f"Published scheduled Instagram post: {post['_id']}")
            except Exception as e:
                logger.error(f"Error publishing scheduled post {post['_id']}: {e}")
                await self._social_post_service.mark_failed(post["_id"], str(e) or "Unknown error occurred")
                results["failed"] += 1
                results["errors"].append({"postId": str(post["_id"]), "error": str(e)})

        return results
