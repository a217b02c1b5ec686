import asyncio
from dataclasses import dataclass

import structlog

from codeboard.db.models.user import Platform, User
from codeboard.platforms.base import StatFetcher

logger = structlog.get_logger()


@dataclass
class ScoreUpdate:
    """Fresh per-platform scores and total for one user, ready to persist."""

    user_id: int
    scores: dict[Platform, int]
    total_score: int


class ScoreAggregator:
    """Collects a user's platform scores into a single total."""

    def __init__(self, fetchers: dict[Platform, StatFetcher]) -> None:
        self.fetchers = fetchers

    async def aggregate(self, user: User) -> ScoreUpdate:
        """
        Score every platform for ``user`` and sum the results.

        Platforms without a registered username keep their previous score.
        Lookups run concurrently and are isolated from each other: a failure
        on one platform yields that platform's previous score only.
        """
        platforms = list(Platform)
        results = await asyncio.gather(
            *(self._score_platform(user, platform) for platform in platforms)
        )
        scores = dict(zip(platforms, results, strict=True))
        return ScoreUpdate(
            user_id=user.id,
            scores=scores,
            total_score=sum(scores.values()),
        )

    async def _score_platform(self, user: User, platform: Platform) -> int:
        previous = user.platform_score(platform)
        username = user.platform_username(platform)
        fetcher = self.fetchers.get(platform)
        if not username or fetcher is None:
            return previous

        try:
            result = await fetcher.fetch(username, previous)
        except Exception as e:
            logger.error(
                "Platform lookup raised, keeping previous score",
                user_id=user.id,
                platform=platform.value,
                error=str(e) or type(e).__name__,
            )
            return previous
        return result.score
