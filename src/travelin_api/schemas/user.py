"""User and auth schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from travelin_api.schemas.common import ApiModel


class UserRecord(BaseModel):
    """Immutable view of a stored user (never carries the password hash)."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    created_at: datetime


class UserBase(ApiModel):
    """Base user schema."""

    email: EmailStr


class UserCreate(UserBase):
    """User registration request."""

    password: str = Field(..., min_length=6, max_length=255)
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)


class UserLogin(UserBase):
    """User login request."""

    password: str


class UserUpdate(ApiModel):
    """Profile update request. Omitted fields are left unchanged."""

    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6, max_length=255)
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)


class UserResponse(UserBase):
    """User response schema."""

    id: UUID
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    created_at: datetime


class UserEnvelope(ApiModel):
    user: UserResponse


class UserEnvelopeResponse(ApiModel):
    data: UserEnvelope


class SessionResponse(ApiModel):
    """Session response schema."""

    token: str
    expires_at: datetime


class AuthData(ApiModel):
    user: UserResponse
    session: SessionResponse


class AuthResponse(ApiModel):
    """Authentication response with user and session."""

    data: AuthData
