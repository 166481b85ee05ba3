#!/usr/bin/env python3
"""Load points of interest from a JSON file.

Usage: seed_pois.py [path/to/pois.json]

The file holds a list of objects with the POICreate fields (camelCase or
snake_case). POIs whose id already exists are skipped.
"""

import asyncio
import json
import sys
from pathlib import Path

from pydantic import TypeAdapter

from travelin_api.database import get_session_factory
from travelin_api.repositories import poi as poi_repo
from travelin_api.schemas import POICreate

DEFAULT_DATA_FILE = Path(__file__).parent / "data" / "pois.json"


def load_pois(path: Path) -> list[POICreate]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    return TypeAdapter(list[POICreate]).validate_python(raw)


async def seed(path: Path) -> int:
    pois = load_pois(path)
    session_factory = get_session_factory()
    async with session_factory() as db:
        new = [p for p in pois if not await poi_repo.poi_exists(db, p.id)]
        if new:
            await poi_repo.create_pois_bulk(db, new)
    print(f"Loaded {len(pois)} POIs from {path}, inserted {len(new)}")
    return len(new)


def main():
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_DATA_FILE
    asyncio.run(seed(path))


if __name__ == "__main__":
    main()
