"""User favorite model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from travelin_api.database import Base

if TYPE_CHECKING:
    from travelin_api.models.poi import PointOfInterest
    from travelin_api.models.user import User


class UserFavorite(Base):
    """A POI saved by a user."""

    __tablename__ = "user_favorites"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    poi_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("points_of_interest.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="favorites")
    poi: Mapped["PointOfInterest"] = relationship("PointOfInterest", back_populates="favorites")

    __table_args__ = (
        UniqueConstraint("user_id", "poi_id", name="uq_user_favorite_poi"),
        Index("ix_user_favorites_user_id", "user_id"),
        Index("ix_user_favorites_poi_id", "poi_id"),
    )
