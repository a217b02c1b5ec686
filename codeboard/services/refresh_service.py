import asyncio
import math
from dataclasses import asdict, dataclass

import httpx
import structlog

from codeboard.core.config import settings
from codeboard.db.models.user import Platform
from codeboard.platforms import build_fetchers
from codeboard.platforms.base import StatFetcher
from codeboard.services.batch_scheduler import BatchScheduler
from codeboard.services.rank_service import RankService
from codeboard.services.score_aggregator import ScoreAggregator
from codeboard.services.user_store import UserStore

logger = structlog.get_logger()


@dataclass
class RefreshReport:
    users: int = 0
    batches: int = 0
    updated: int = 0
    failed: int = 0
    ranked: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def rank_offset(
    num_users: int,
    batch_size: int,
    update_interval: float,
    settle_delay: float,
) -> float:
    num_batches = math.ceil(num_users / batch_size)
    return num_batches * update_interval + settle_delay


def refresh_time_limits(num_users: int) -> tuple[int, int]:
    """Soft and hard Celery time limits for refreshing ``num_users`` users.

    The staggered schedule alone lasts ``rank_offset`` seconds, so the limits
    grow with the roster and never drop below the worker-wide limits.
    """
    expected = rank_offset(
        num_users,
        settings.refresh_batch_size,
        settings.refresh_update_interval,
        settings.refresh_settle_delay,
    )
    soft_limit = max(
        settings.job_default_timeout - 60,
        math.ceil(expected) + settings.refresh_time_headroom,
    )
    return soft_limit, soft_limit + 60


class RefreshService:
    """Runs one full leaderboard refresh: staggered score batches, then ranks."""

    def __init__(
        self,
        store: UserStore,
        fetchers: dict[Platform, StatFetcher],
        batch_size: int | None = None,
        update_interval: float | None = None,
        settle_delay: float | None = None,
    ) -> None:
        self.store = store
        self.scheduler = BatchScheduler(
            ScoreAggregator(fetchers),
            store,
            batch_size=batch_size,
            update_interval=update_interval,
        )
        self.ranks = RankService(store)
        self.settle_delay = (
            settings.refresh_settle_delay if settle_delay is None else settle_delay
        )

    def rank_offset(self, num_users: int) -> float:
        """Seconds after scheduling by which every batch is expected to have started."""
        return rank_offset(
            num_users,
            self.scheduler.batch_size,
            self.scheduler.update_interval,
            self.settle_delay,
        )

    async def refresh(self) -> RefreshReport:
        """
        Refresh every user's scores, then recompute all ranks.

        Rank recomputation waits for every batch task to finish, so it never
        reads a half-updated leaderboard from this cycle. Failures listing the
        users propagate; per-user and per-batch failures are logged and counted.
        """
        users = await self.store.find_all()
        tasks = self.scheduler.schedule(users)
        report = RefreshReport(users=len(users), batches=len(tasks))

        logger.info(
            "Leaderboard refresh scheduled",
            users=report.users,
            batches=report.batches,
            expected_rank_offset=self.rank_offset(len(users)),
        )

        outcomes = await asyncio.gather(*tasks, return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                logger.error("Batch aborted", error=str(outcome) or type(outcome).__name__)
                continue
            report.updated += outcome.updated
            report.failed += outcome.failed

        if self.settle_delay > 0:
            await asyncio.sleep(self.settle_delay)

        report.ranked = await self.ranks.recompute_ranks()
        logger.info("Leaderboard refresh completed", **report.to_dict())
        return report


async def run_refresh(store: UserStore) -> RefreshReport:
    """Single entry point shared by the daily schedule and manual triggers."""
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        service = RefreshService(store, build_fetchers(client))
        return await service.refresh()
