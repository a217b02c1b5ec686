#!/usr/bin/env python
"""Run one leaderboard refresh in-process, without Celery.

Usage: python scripts/refresh_leaderboard.py [--no-stagger]
"""

import asyncio
import sys

import httpx

from codeboard.core.config import settings
from codeboard.db.database import async_session_maker
from codeboard.platforms import build_fetchers
from codeboard.services.refresh_service import RefreshService
from codeboard.services.user_store import UserStore


async def main(stagger: bool) -> None:
    store = UserStore(async_session_maker)

    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        service = RefreshService(
            store,
            build_fetchers(client),
            update_interval=None if stagger else 0,
            settle_delay=None if stagger else 0,
        )
        report = await service.refresh()

    print("=" * 60)
    print("LEADERBOARD REFRESH COMPLETE")
    print("=" * 60)
    for key, value in report.to_dict().items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    asyncio.run(main(stagger="--no-stagger" not in sys.argv))
