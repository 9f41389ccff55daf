import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tasknest.storage import JsonDocument, get_users_document
from tasknest.auth.repository import JsonUserRepository
from tasknest.auth.service import AuthService
from tasknest.auth.tokens import TokenCodec, get_token_codec

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme - auto_error=False to handle missing tokens ourselves
bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(
    document: Annotated[JsonDocument, Depends(get_users_document)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> AuthService:
    """Dependency to get AuthService instance with the JSON user repository."""
    return AuthService(JsonUserRepository(document), codec)


async def get_current_identity(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> str:
    """
    Resolve the caller's identity from the bearer token.

    No Authorization header at all is 401; a header that does not carry a
    valid, unexpired token is 403. Only the token is consulted, never the
    request body.
    """
    if not request.headers.get("Authorization"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    forbidden = HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Invalid or expired token",
    )

    if credentials is None:
        logger.warning("[Auth] Malformed Authorization header")
        raise forbidden

    username = codec.decode(credentials.credentials)
    if username is None:
        logger.warning("[Auth] Token verification failed")
        raise forbidden

    return username


# Type alias for cleaner dependency injection
CurrentIdentity = Annotated[str, Depends(get_current_identity)]
