"""
Pydantic models for user data.

``UserRecord`` is the stored representation and carries the credential
secret (hashed or plain, depending on the configured hasher).  It must
never leave the service layer: ``UserRead`` is the redacted view
returned through the API.
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, Field

from .base import ApiModel


class UserBase(ApiModel):
    email: str = Field(..., examples=["ana@example.com"])
    name: str = Field(..., examples=["Ana"])
    avatar: Optional[str] = None
    join_date: datetime
    trip_count: int = 0


class UserRecord(UserBase):
    """Stored user, including the credential secret."""

    id: str
    password: str
    created_at: datetime
    updated_at: datetime

    def to_public(self) -> "UserRead":
        return UserRead.model_validate(self.model_dump(exclude={"password"}))


class UserRead(UserBase):
    """Schema for reading a user from the API (secret redacted)."""

    id: str
    created_at: datetime
    updated_at: datetime


class UserSignup(ApiModel):
    """Signup payload.

    Fields are optional at the schema level so that the auth service can
    report missing values with a single, human-readable message.
    """

    name: Optional[str] = Field(None, examples=["Ana"])
    email: Optional[str] = Field(None, examples=["ana@example.com"])
    password: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("password", "secret"),
        examples=["abcdef"],
    )


class UserLogin(ApiModel):
    email: Optional[str] = Field(None, examples=["ana@example.com"])
    password: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("password", "secret"),
        examples=["abcdef"],
    )


class AuthResponse(ApiModel):
    success: bool = True
    user: UserRead
    session_token: str


class UserResponse(ApiModel):
    success: bool = True
    user: UserRead


class MessageResponse(ApiModel):
    success: bool = True
    message: str
