"""
TaskNest API - Bearer Tokens

Signs and verifies JWT bearer tokens carrying the username as identity claim.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from tasknest.config import settings

logger = logging.getLogger(__name__)


class TokenCodec:
    """Issue and verify signed access tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 60):
        if not secret:
            raise ValueError("A signing secret is required")
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def encode(self, username: str, expires_delta: Optional[timedelta] = None) -> str:
        """Create a signed token for ``username``."""
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.expire_minutes)

        now = datetime.now(timezone.utc)
        to_encode = {
            "username": username,
            "sub": username,
            "iat": now,
            "exp": now + expires_delta,
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Optional[str]:
        """Decode and validate a token. Returns the username if valid."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"[TokenCodec] Rejected token: {e}")
            return None

        username = payload.get("username")
        if not isinstance(username, str) or not username:
            logger.debug("[TokenCodec] Rejected token without identity claim")
            return None
        return username


def get_token_codec() -> TokenCodec:
    """Dependency to get a TokenCodec configured from settings."""
    return TokenCodec(
        secret=settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        expire_minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES,
    )
