import asyncio
from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from codeboard.core.config import settings
from codeboard.db.models.user import User
from codeboard.services.score_aggregator import ScoreAggregator
from codeboard.services.user_store import UserStore

logger = structlog.get_logger()


@dataclass
class BatchOutcome:
    batch_index: int
    updated: int = 0
    failed: int = 0


class BatchScheduler:
    """Staggers score updates across fixed-size batches of users.

    Batch ``i`` starts ``i * update_interval`` seconds after ``schedule`` is
    called, which keeps outbound request volume to roughly one batch at a
    time. Users inside a batch are processed one after another.
    """

    def __init__(
        self,
        aggregator: ScoreAggregator,
        store: UserStore,
        batch_size: int | None = None,
        update_interval: float | None = None,
    ) -> None:
        self.aggregator = aggregator
        self.store = store
        self.batch_size = settings.refresh_batch_size if batch_size is None else batch_size
        self.update_interval = (
            settings.refresh_update_interval if update_interval is None else update_interval
        )
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.update_interval < 0:
            raise ValueError("update_interval must not be negative")

    def partition(self, users: Sequence[User]) -> list[list[User]]:
        """Split ``users`` into consecutive, order-preserving batches."""
        return [
            list(users[start:start + self.batch_size])
            for start in range(0, len(users), self.batch_size)
        ]

    def delay_for(self, batch_index: int) -> float:
        return batch_index * self.update_interval

    def schedule(self, users: Sequence[User]) -> list[asyncio.Task[BatchOutcome]]:
        """Start one delayed task per batch and return without waiting."""
        return [
            asyncio.create_task(
                self._run_batch(index, batch),
                name=f"leaderboard-batch-{index}",
            )
            for index, batch in enumerate(self.partition(users))
        ]

    async def _run_batch(self, batch_index: int, batch: list[User]) -> BatchOutcome:
        delay = self.delay_for(batch_index)
        if delay > 0:
            await asyncio.sleep(delay)

        logger.info("Batch started", batch_index=batch_index, users=len(batch))
        outcome = BatchOutcome(batch_index=batch_index)

        for user in batch:
            try:
                score_update = await self.aggregator.aggregate(user)
                saved = await self.store.update_scores(
                    score_update.user_id,
                    score_update.scores,
                    score_update.total_score,
                )
            except Exception as e:
                logger.error(
                    "Failed to update user scores, skipping",
                    user_id=user.id,
                    batch_index=batch_index,
                    error=str(e) or type(e).__name__,
                )
                outcome.failed += 1
                continue

            if not saved:
                logger.warning("User disappeared before update", user_id=user.id)
                outcome.failed += 1
                continue
            outcome.updated += 1

        logger.info(
            "Batch completed",
            batch_index=batch_index,
            updated=outcome.updated,
            failed=outcome.failed,
        )
        return outcome
