#!/usr/bin/env python3
"""Create all missing tables in the target database."""

import os
import re

from sqlalchemy import create_engine

from travelin_api.database import Base
from travelin_api.models import (  # noqa: F401
    Booking,
    PointOfInterest,
    Session,
    User,
    UserFavorite,
)


def transform_url(url: str) -> str:
    """Transform async URL to sync."""
    url = url.replace("postgresql+asyncpg://", "postgresql://")
    url = url.replace("sqlite+aiosqlite://", "sqlite://")
    url = re.sub(r"ssl=(\w+)", r"sslmode=\1", url)
    return url


def main():
    url = os.environ.get("DATABASE_URL", "")
    if not url:
        print("DATABASE_URL not set")
        return

    engine = create_engine(transform_url(url))
    Base.metadata.create_all(engine)
    for table in Base.metadata.sorted_tables:
        print(f"✓ {table.name} table")
    engine.dispose()

    print("\n✅ All tables created successfully!")


if __name__ == "__main__":
    main()
