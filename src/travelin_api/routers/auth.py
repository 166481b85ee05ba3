"""Authentication router."""

import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import Annotated

import bcrypt
from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from travelin_api.config import settings
from travelin_api.database import get_db
from travelin_api.dependencies import bearer_token, get_current_user_record
from travelin_api.errors import NotFoundError, UnauthorizedError, ValidationError
from travelin_api.repositories import user as user_repo
from travelin_api.schemas import (
    AuthData,
    AuthResponse,
    MessageData,
    MessageResponse,
    SessionResponse,
    UserCreate,
    UserEnvelope,
    UserEnvelopeResponse,
    UserLogin,
    UserRecord,
    UserResponse,
    UserUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.api_prefix}/auth", tags=["auth"])


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(password.encode(), password_hash.encode())


def generate_session_token() -> str:
    """Generate a secure random session token."""
    return secrets.token_hex(32)


def _user_response(user: UserRecord) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        created_at=user.created_at,
    )


def _email_in_use(message: str) -> ValidationError:
    return ValidationError(message, {"parameter": "email"})


async def _open_session(db: AsyncSession, user: UserRecord) -> AuthResponse:
    token = generate_session_token()
    expires_at = datetime.now(UTC) + timedelta(days=settings.session_expire_days)
    await user_repo.create_session(db, user.id, token, expires_at)
    return AuthResponse(
        data=AuthData(
            user=_user_response(user),
            session=SessionResponse(token=token, expires_at=expires_at),
        )
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Register a new user and open a session for them."""
    email = user_data.email.strip()
    if await user_repo.email_taken(db, email):
        raise _email_in_use("User with this email already exists")

    try:
        user = await user_repo.create_user(
            db,
            email=email,
            password_hash=hash_password(user_data.password),
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            phone=user_data.phone,
        )
        user_id = user.id
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise _email_in_use("User with this email already exists") from None

    record = await user_repo.get_user(db, user_id)
    logger.info("User registered: user_id=%s", user_id)
    return await _open_session(db, record)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Login with email and password."""
    user = await user_repo.get_user_by_email(db, credentials.email.strip())
    if user is None or not verify_password(credentials.password, user.password_hash):
        raise UnauthorizedError("Invalid email or password")

    record = await user_repo.get_user(db, user.id)
    return await _open_session(db, record)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    authorization: Annotated[str | None, Header()] = None,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Logout and invalidate the current session."""
    token = bearer_token(authorization)
    if not await user_repo.delete_session(db, token):
        raise UnauthorizedError("Invalid session token")


@router.get("/me", response_model=UserEnvelopeResponse)
async def get_me(
    current_user: Annotated[UserRecord, Depends(get_current_user_record)],
) -> UserEnvelopeResponse:
    """Get the current authenticated user."""
    return UserEnvelopeResponse(data=UserEnvelope(user=_user_response(current_user)))


@router.patch("/me", response_model=UserEnvelopeResponse)
async def update_me(
    update: UserUpdate,
    current_user: Annotated[UserRecord, Depends(get_current_user_record)],
    db: AsyncSession = Depends(get_db),
) -> UserEnvelopeResponse:
    """Update the current user's profile. Only fields present in the body change."""
    provided = update.model_fields_set

    email = None
    if update.email is not None:
        email = update.email.strip()
        if await user_repo.email_taken(db, email, exclude_user_id=current_user.id):
            raise _email_in_use("Email is already in use")

    password_hash = hash_password(update.password) if update.password is not None else None
    fields = {
        name: getattr(update, name)
        for name in ("first_name", "last_name", "phone")
        if name in provided
    }

    try:
        user = await user_repo.update_user(
            db, current_user.id, email=email, password_hash=password_hash, fields=fields
        )
    except IntegrityError:
        await db.rollback()
        raise _email_in_use("Email is already in use") from None
    if user is None:
        raise NotFoundError("User not found")

    return UserEnvelopeResponse(data=UserEnvelope(user=_user_response(user)))


@router.delete("/me", response_model=MessageResponse)
async def delete_me(
    current_user: Annotated[UserRecord, Depends(get_current_user_record)],
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Delete the current user together with their sessions, favorites and bookings."""
    if not await user_repo.delete_user(db, current_user.id):
        raise NotFoundError("User not found")
    logger.info("User deleted: user_id=%s", current_user.id)
    return MessageResponse(data=MessageData(message="Account deleted successfully"))
