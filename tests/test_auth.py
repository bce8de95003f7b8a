"""Unit tests for token auth: middleware checks and register/login pipelines."""

import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from common.auth import JWTAuth
from common.utils.exceptions import UnauthorizedException
from rats.middleware.auth import AuthMiddleware, NO_TOKEN_MESSAGE, TOKEN_FAILED_MESSAGE
from rats.pipelines.auth import register_pipeline, login_pipeline, INVALID_CREDENTIALS_MESSAGE


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def jwt_auth():
    return JWTAuth(secret="test-secret", access_token_expire_minutes=60)


@pytest.fixture
def mock_user_service():
    return AsyncMock()


@pytest.fixture
def middleware(jwt_auth, mock_user_service):
    return AuthMiddleware(jwt_auth=jwt_auth, user_service=mock_user_service)


@pytest.fixture
def sample_user(sample_user_id):
    return {"_id": ObjectId(sample_user_id), "email": "sam@example.com", "username": "sam"}


def make_request(authorization=None):
    request = MagicMock()
    request.headers = {"Authorization": authorization} if authorization else {}
    request.state = SimpleNamespace()
    return request


# ─────────────────────────────────────────────────────────────────
# AuthMiddleware
# ─────────────────────────────────────────────────────────────────


class TestRequireAuth:
    @pytest.mark.asyncio
    async def test_valid_token_attaches_user(
        self, middleware, jwt_auth, mock_user_service, sample_user, sample_user_id,
    ):
        mock_user_service.get_user_by_id.return_value = sample_user
        token = await jwt_auth.create_token(sample_user_id)
        request = make_request(f"Bearer {token}")

        user = await middleware.require_auth(request)

        assert user == sample_user
        assert request.state.user == sample_user
        mock_user_service.get_user_by_id.assert_awaited_once_with(sample_user_id)

    @pytest.mark.asyncio
    async def test_missing_header(self, middleware):
        with pytest.raises(UnauthorizedException) as exc_info:
            await middleware.require_auth(make_request())

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == NO_TOKEN_MESSAGE

    @pytest.mark.asyncio
    async def test_non_bearer_scheme(self, middleware):
        with pytest.raises(UnauthorizedException) as exc_info:
            await middleware.require_auth(make_request("Basic dXNlcjpwYXNz"))

        assert exc_info.value.message == NO_TOKEN_MESSAGE

    @pytest.mark.asyncio
    async def test_invalid_token(self, middleware, mock_user_service):
        with pytest.raises(UnauthorizedException) as exc_info:
            await middleware.require_auth(make_request("Bearer not.a.token"))

        assert exc_info.value.message == TOKEN_FAILED_MESSAGE
        mock_user_service.get_user_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_token_signed_with_other_secret(self, middleware, sample_user_id):
        other = JWTAuth(secret="another-secret")
        token = await other.create_token(sample_user_id)

        with pytest.raises(UnauthorizedException):
            await middleware.require_auth(make_request(f"Bearer {token}"))

    @pytest.mark.asyncio
    async def test_deleted_user(self, middleware, jwt_auth, mock_user_service, sample_user_id):
        mock_user_service.get_user_by_id.return_value = None
        token = await jwt_auth.create_token(sample_user_id)

        with pytest.raises(UnauthorizedException) as exc_info:
            await middleware.require_auth(make_request(f"Bearer {token}"))

        assert exc_info.value.message == TOKEN_FAILED_MESSAGE


# ─────────────────────────────────────────────────────────────────
# Pipelines
# ─────────────────────────────────────────────────────────────────


class TestRegisterAndLogin:
    @pytest.mark.asyncio
    async def test_register_returns_verifiable_token(self, jwt_auth, mock_user_service, sample_user):
        mock_user_service.create_user.return_value = sample_user

        result = await register_pipeline(
            user_service=mock_user_service,
            jwt_auth=jwt_auth,
            email="sam@example.com",
            password="hunter22",
            username="sam",
        )

        assert result["_id"] == str(sample_user["_id"])
        assert result["username"] == "sam"
        claims = await jwt_auth.verify_token(result["token"])
        assert claims["sub"] == str(sample_user["_id"])

        password_hash = mock_user_service.create_user.call_args[1]["password_hash"]
        assert password_hash != "hunter22"
        assert jwt_auth.verify_password("hunter22", password_hash)

    @pytest.mark.asyncio
    async def test_login_with_correct_password(self, jwt_auth, mock_user_service, sample_user):
        mock_user_service.get_user_by_email.return_value = {
            **sample_user,
            "password": jwt_auth.hash_password("hunter22"),
        }

        result = await login_pipeline(mock_user_service, jwt_auth, "sam@example.com", "hunter22")

        assert result["email"] == "sam@example.com"
        assert "password" not in result
        assert result["token"]

    @pytest.mark.asyncio
    async def test_login_with_wrong_password(self, jwt_auth, mock_user_service, sample_user):
        mock_user_service.get_user_by_email.return_value = {
            **sample_user,
            "password": jwt_auth.hash_password("hunter22"),
        }

        with pytest.raises(UnauthorizedException) as exc_info:
            await login_pipeline(mock_user_service, jwt_auth, "sam@example.com", "wrong")

        assert exc_info.value.message == INVALID_CREDENTIALS_MESSAGE

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, jwt_auth, mock_user_service):
        mock_user_service.get_user_by_email.return_value = None

        with pytest.raises(UnauthorizedException):
            await login_pipeline(mock_user_service, jwt_auth, "nobody@example.com", "hunter22")
