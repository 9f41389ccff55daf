import asyncio
import logging
from datetime import timedelta
from typing import Optional

import bcrypt

from tasknest.config import settings
from tasknest.auth.models import User
from tasknest.auth.repository import UserRepositoryInterface, UsernameTakenError
from tasknest.auth.tokens import TokenCodec

logger = logging.getLogger(__name__)


class AuthService:
    """Authentication service with password hashing and token issuance."""

    def __init__(self, repository: UserRepositoryInterface, codec: TokenCodec):
        self.repository = repository
        self.codec = codec

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt."""
        password_bytes = password.encode("utf-8")
        salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        password_bytes = plain_password.encode("utf-8")
        hashed_bytes = hashed_password.encode("utf-8")
        try:
            return bcrypt.checkpw(password_bytes, hashed_bytes)
        except ValueError:
            # Stored hash is not a bcrypt digest, or the password exceeds bcrypt's input limit
            logger.warning("[AuthService] Password check failed on an unusable hash or input")
            return False

    def create_access_token(self, username: str, expires_delta: Optional[timedelta] = None) -> str:
        """Create a signed access token for the user."""
        return self.codec.encode(username, expires_delta)

    async def register_user(self, username: str, password: str) -> Optional[User]:
        """Register a new user. Returns None if username exists."""
        if await self.repository.exists_by_username(username):
            logger.info(f"[AuthService] Registration rejected, username taken: {username}")
            return None

        # bcrypt is deliberately slow; keep it off the event loop
        password_hash = await asyncio.to_thread(self.hash_password, password)
        user = User.create(username=username, password_hash=password_hash)
        try:
            return await self.repository.create(user)
        except UsernameTakenError:
            # Lost a race with a concurrent registration of the same name
            logger.info(f"[AuthService] Registration rejected, username taken: {username}")
            return None

    async def authenticate_user(self, username: str, password: str) -> Optional[User]:
        """Authenticate user by username and password."""
        user = await self.repository.get_by_username(username)
        if user is None:
            logger.info(f"[AuthService] Login failed for unknown user: {username}")
            return None
        if not await asyncio.to_thread(self.verify_password, password, user.password_hash):
            logger.info(f"[AuthService] Login failed for user: {username}")
            return None
        return user

    async def get_user(self, username: str) -> Optional[User]:
        """Get user by username."""
        return await self.repository.get_by_username(username)
