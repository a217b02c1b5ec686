from collections.abc import Iterable

import structlog

from codeboard.db.models.user import User
from codeboard.services.user_store import UserStore

logger = structlog.get_logger()


def assign_ranks(users: Iterable[User]) -> list[tuple[int, int]]:
    """Return ``(user_id, rank)`` pairs with contiguous 1-based ranks.

    Higher total score ranks first; equal totals are ordered by user id.
    """
    ordered = sorted(users, key=lambda user: (-(user.total_score or 0), user.id))
    return [(user.id, rank) for rank, user in enumerate(ordered, start=1)]


class RankService:
    """Re-derives every user's rank from the stored total scores."""

    def __init__(self, store: UserStore) -> None:
        self.store = store

    async def recompute_ranks(self) -> int:
        """Persist fresh ranks one user at a time. Returns how many were written."""
        users = await self.store.list_by_score()

        ranked = 0
        for user_id, rank in assign_ranks(users):
            try:
                await self.store.update_rank(user_id, rank)
            except Exception as e:
                logger.error(
                    "Failed to persist rank",
                    user_id=user_id,
                    rank=rank,
                    error=str(e) or type(e).__name__,
                )
                continue
            ranked += 1

        logger.info("Ranks recomputed", users=len(users), ranked=ranked)
        return ranked
