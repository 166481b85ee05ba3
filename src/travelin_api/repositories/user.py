"""User repository - data access for user accounts and sessions."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from travelin_api.models import Booking, Session, UserFavorite
from travelin_api.models import User as UserModel
from travelin_api.schemas import UserRecord


def _ensure_utc(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware (UTC). SQLite returns naive datetimes."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


async def get_user(db: AsyncSession, user_id: UUID) -> UserRecord | None:
    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        return None
    return _to_schema(user)


async def get_user_by_email(db: AsyncSession, email: str) -> UserModel | None:
    """Get a user by email (returns SQLAlchemy model for password checks)."""
    result = await db.execute(select(UserModel).where(UserModel.email == email))
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    *,
    email: str,
    password_hash: str,
    first_name: str | None = None,
    last_name: str | None = None,
    phone: str | None = None,
) -> UserModel:
    """Add a user to the session and flush. The caller commits."""
    user = UserModel(
        email=email,
        password_hash=password_hash,
        first_name=first_name or None,
        last_name=last_name or None,
        phone=phone or None,
    )
    db.add(user)
    await db.flush()
    return user


async def create_session(
    db: AsyncSession, user_id: UUID, token: str, expires_at: datetime
) -> None:
    db.add(Session(user_id=user_id, token=token, expires_at=expires_at))
    await db.commit()


async def get_session_user_id(db: AsyncSession, token: str) -> UUID | None:
    """User owning an unexpired session token."""
    result = await db.execute(
        select(Session.user_id)
        .where(Session.token == token)
        .where(Session.expires_at > datetime.now(UTC))
    )
    return result.scalar_one_or_none()


async def delete_session(db: AsyncSession, token: str) -> bool:
    result = await db.execute(delete(Session).where(Session.token == token))
    await db.commit()
    return result.rowcount > 0


async def email_taken(db: AsyncSession, email: str, exclude_user_id: UUID | None = None) -> bool:
    query = select(UserModel.id).where(UserModel.email == email)
    if exclude_user_id is not None:
        query = query.where(UserModel.id != exclude_user_id)
    result = await db.execute(query)
    return result.scalar_one_or_none() is not None


async def update_user(
    db: AsyncSession,
    user_id: UUID,
    *,
    email: str | None = None,
    password_hash: str | None = None,
    fields: dict[str, str | None] | None = None,
) -> UserRecord | None:
    """Update profile fields. ``fields`` holds first_name/last_name/phone to set."""
    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        return None

    if email is not None:
        user.email = email
    if password_hash is not None:
        user.password_hash = password_hash
    for name, value in (fields or {}).items():
        setattr(user, name, value or None)
    user.updated_at = datetime.now(UTC)

    await db.commit()
    await db.refresh(user)
    return _to_schema(user)


async def delete_user(db: AsyncSession, user_id: UUID) -> bool:
    """Delete a user together with their sessions, favorites and bookings."""
    await db.execute(delete(Booking).where(Booking.user_id == user_id))
    await db.execute(delete(UserFavorite).where(UserFavorite.user_id == user_id))
    await db.execute(delete(Session).where(Session.user_id == user_id))
    result = await db.execute(delete(UserModel).where(UserModel.id == user_id))
    await db.commit()
    return result.rowcount > 0


def _to_schema(user: UserModel) -> UserRecord:
    return UserRecord(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        created_at=_ensure_utc(user.created_at),
    )
