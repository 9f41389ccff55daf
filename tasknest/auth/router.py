"""
TaskNest API - Authentication Router

Endpoints for user registration, login, and current user info.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from tasknest.auth.schemas import (
    UserRegisterRequest,
    UserLoginRequest,
    UserResponse,
    TokenResponse,
    MessageResponse,
)
from tasknest.auth.service import AuthService
from tasknest.auth.dependencies import CurrentIdentity, get_auth_service


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    request: UserRegisterRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    """
    Register a new user with username and password.

    Usernames are unique and case-sensitive.
    """
    user = await auth_service.register_user(
        username=request.username,
        password=request.password,
    )

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already exists",
        )

    return MessageResponse(message="User registered successfully")


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login and get access token",
)
async def login(
    request: UserLoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """
    Authenticate user and return a bearer token valid for one hour.

    Use the returned token in the Authorization header:
    `Authorization: Bearer <token>`
    """
    user = await auth_service.authenticate_user(
        username=request.username,
        password=request.password,
    )

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return TokenResponse(token=auth_service.create_access_token(user.username))


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user info",
)
async def get_me(
    identity: CurrentIdentity,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserResponse:
    """Get the current authenticated user's public information."""
    user = await auth_service.get_user(identity)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return UserResponse(username=user.username, created_at=user.created_at)
