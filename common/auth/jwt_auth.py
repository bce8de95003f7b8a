"""
JWT + bcrypt authentication helpers.

Handles stateless bearer tokens and password hashing:
- JWT tokens signed with a shared secret (python-jose)
- bcrypt with SHA-256 pre-hashing for passwords

Example:
    auth = JWTAuth(
        secret="your-secret-key",
        access_token_expire_minutes=60 * 24 * 30,
    )

    password_hash = auth.hash_password("password123")
    token = await auth.create_token(user_id)

    claims = await auth.verify_token(token)
    print(claims["sub"])  # user_id
"""

import base64
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

import bcrypt as bcrypt_lib
from jose import jwt, JWTError


class JWTAuth:
    """
    JWT + bcrypt authentication provider.

    User storage lives in the user service; this class only issues and
    verifies credentials.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 60 * 24 * 30,
    ):
        """
        Initialize JWT auth provider.

        Args:
            secret: Secret key for JWT signing
            algorithm: JWT algorithm (default: HS256)
            access_token_expire_minutes: Token expiration time (default: 30 days)
        """
        self.secret = secret
        self.algorithm = algorithm
        self.access_token_expire = timedelta(minutes=access_token_expire_minutes)

    def _prehash_password(self, password: str) -> str:
        """
        Pre-hash password with SHA-256 before bcrypt.

        This handles bcrypt's 72-byte limit and ensures consistent
        behavior across all password lengths.
        """
        sha256_hash = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(sha256_hash).decode("utf-8")

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with SHA-256 pre-hashing."""
        prehashed = self._prehash_password(password)
        salt = bcrypt_lib.gensalt()
        return bcrypt_lib.hashpw(prehashed.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """
        Verify a password against its hash.

        Accepts both pre-hashed and plain bcrypt hashes so accounts
        created by the previous Node backend keep working.
        """
        if not hashed:
            return False

        hashed_bytes = hashed.encode("utf-8")

        prehashed = self._prehash_password(password)
        try:
            if bcrypt_lib.checkpw(prehashed.encode("utf-8"), hashed_bytes):
                return True
        except ValueError:
            pass

        try:
            return bcrypt_lib.checkpw(password.encode("utf-8"), hashed_bytes)
        except ValueError:
            # Password too long for direct bcrypt
            return False

    async def create_token(
        self,
        user_id: str,
        **claims: Any,
    ) -> str:
        """Create a JWT token for the user."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "exp": now + self.access_token_expire,
            "iat": now,
            **claims,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    async def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Raises:
            ValueError: If the token is malformed, tampered with or expired
        """
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
            )
        except JWTError as e:
            raise ValueError(f"Invalid token: {e}")
