"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # Users table
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"])

    # Sessions table
    op.create_table(
        "sessions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("token", sa.String(64), unique=True, nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_sessions_token", "sessions", ["token"])
    op.create_index("ix_sessions_user_id", "sessions", ["user_id"])
    op.create_index("ix_sessions_expires_at", "sessions", ["expires_at"])

    # Points of interest
    op.create_table(
        "points_of_interest",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("type", sa.String(32), nullable=False, server_default="location"),
        sa.Column(
            "sub_type", sa.String(32), nullable=False, server_default="POINT_OF_INTEREST"
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("rank", sa.Integer, nullable=False, server_default="100"),
        sa.Column("tags", postgresql.JSONB, nullable=False, server_default="[]"),
        sa.Column("pictures", postgresql.JSONB, nullable=False, server_default="[]"),
        *_timestamps(),
        sa.CheckConstraint("rank >= 1", name="ck_poi_rank_positive"),
        sa.CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_poi_latitude_range"),
        sa.CheckConstraint(
            "longitude >= -180 AND longitude <= 180", name="ck_poi_longitude_range"
        ),
    )
    op.create_index("idx_poi_coordinates", "points_of_interest", ["latitude", "longitude"])
    op.create_index("idx_poi_category", "points_of_interest", ["category"])
    op.create_index("idx_poi_rank", "points_of_interest", ["rank"])
    op.create_index("idx_poi_category_rank", "points_of_interest", ["category", "rank"])

    # User favorites
    op.create_table(
        "user_favorites",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "poi_id",
            sa.String(64),
            sa.ForeignKey("points_of_interest.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("user_id", "poi_id", name="uq_user_favorite_poi"),
    )
    op.create_index("ix_user_favorites_user_id", "user_favorites", ["user_id"])
    op.create_index("ix_user_favorites_poi_id", "user_favorites", ["poi_id"])

    # Bookings
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "poi_id",
            sa.String(64),
            sa.ForeignKey("points_of_interest.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        *_timestamps(),
        sa.CheckConstraint("end_date > start_date", name="ck_booking_dates_ordered"),
    )
    op.create_index("idx_bookings_user", "bookings", ["user_id"])
    op.create_index("idx_bookings_poi", "bookings", ["poi_id"])
    op.create_index("idx_bookings_poi_dates", "bookings", ["poi_id", "start_date", "end_date"])


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("user_favorites")
    op.drop_table("points_of_interest")
    op.drop_table("sessions")
    op.drop_table("users")
