"""
TaskNest API - Authentication Schemas

Pydantic models for authentication requests and responses.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# bcrypt only consumes the first 72 bytes of its input
BCRYPT_MAX_PASSWORD_BYTES = 72


class UserRegisterRequest(BaseModel):
    """Request schema for user registration."""

    username: str = Field(..., min_length=1, max_length=128)
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        return value


class UserLoginRequest(BaseModel):
    """Request schema for user login."""

    username: str
    password: str


class UserResponse(BaseModel):
    """Public user information response."""

    username: str
    created_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    """Response schema for successful authentication."""

    token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
