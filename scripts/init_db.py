#!/usr/bin/env python
"""Initialize the database, optionally seeding users from a JSON file."""

import asyncio
import json
import sys
from pathlib import Path

from sqlalchemy import select

from codeboard.core.config import settings
from codeboard.db.database import async_session_maker, init_db
from codeboard.db.models.user import Platform, User


def _empty_platforms() -> dict:
    return {platform.value: {"username": None, "score": 0} for platform in Platform}


async def seed_users(path: Path) -> None:
    """Insert users listed in ``path`` that are not already present (by email)."""
    records = json.loads(path.read_text(encoding="utf-8"))

    async with async_session_maker() as session:
        result = await session.execute(select(User.email))
        existing = set(result.scalars().all())

        added = 0
        for record in records:
            if record["email"] in existing:
                continue

            platforms = _empty_platforms()
            for platform, username in (record.get("platforms") or {}).items():
                platforms[Platform(platform).value]["username"] = username or None

            session.add(
                User(
                    email=record["email"],
                    name=record["name"],
                    rollno=record.get("rollno"),
                    department=record.get("department"),
                    section=record.get("section"),
                    platforms=platforms,
                )
            )
            added += 1

        await session.commit()
        print(f"Seeded {added} users ({len(records) - added} already present)")


async def main() -> None:
    """Main initialization function."""
    print(f"Initializing database: {settings.database_url}")

    # Create tables
    await init_db()
    print("Database tables created")

    if len(sys.argv) > 1:
        await seed_users(Path(sys.argv[1]))

    print("Database initialization complete!")


if __name__ == "__main__":
    asyncio.run(main())
