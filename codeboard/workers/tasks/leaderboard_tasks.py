import asyncio
import sys

import structlog

from codeboard.db.database import create_worker_session_maker
from codeboard.services.refresh_service import refresh_time_limits, run_refresh
from codeboard.services.user_store import UserStore
from codeboard.workers.celery_app import celery_app

logger = structlog.get_logger()

# Windows requires the selector loop for asyncpg
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


def run_async(coro):
    """Run async code in sync context."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        pending = asyncio.all_tasks(loop)
        for task in pending:
            task.cancel()
        loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
        loop.close()


@celery_app.task
def refresh_leaderboard() -> dict:
    """
    Refresh every user's platform scores and recompute ranks.

    Queued by ``schedule_refresh``, which the beat schedule and the manual
    refresh endpoint both call. Both go through the same ``run_refresh``
    entry point.
    """
    return run_async(_refresh_leaderboard_async())


async def _refresh_leaderboard_async() -> dict:
    logger.info("Starting leaderboard refresh")
    store = UserStore(create_worker_session_maker())

    try:
        report = await run_refresh(store)
    except Exception as e:
        logger.error("Leaderboard refresh failed", error=str(e))
        raise

    return {"status": "completed", **report.to_dict()}


@celery_app.task
def schedule_refresh() -> dict:
    """
    Queue ``refresh_leaderboard`` with time limits sized to the roster.

    The staggered batches alone take ``ceil(users / batch_size)`` update
    intervals, so a fixed limit would cancel large refreshes before ranks
    are recomputed.
    """
    num_users = run_async(_count_users_async())
    soft_limit, hard_limit = refresh_time_limits(num_users)

    result = refresh_leaderboard.apply_async(
        soft_time_limit=soft_limit,
        time_limit=hard_limit,
    )
    logger.info(
        "Leaderboard refresh queued",
        task_id=result.id,
        users=num_users,
        soft_time_limit=soft_limit,
    )

    return {
        "status": "scheduled",
        "task_id": result.id,
        "users": num_users,
        "soft_time_limit": soft_limit,
        "time_limit": hard_limit,
    }


async def _count_users_async() -> int:
    store = UserStore(create_worker_session_maker())
    return await store.count()
