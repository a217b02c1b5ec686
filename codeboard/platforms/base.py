import asyncio
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from codeboard.core.config import settings
from codeboard.db.models.user import Platform

logger = structlog.get_logger()


@dataclass(frozen=True)
class StatResult:
    """Score produced by one platform lookup."""

    score: int


def coerce_score(value: Any) -> int:
    """Convert a payload value to a non-negative integer score."""
    if value is None:
        return 0
    return max(int(value), 0)


class StatFetcher:
    """Base class for platform stat lookups.

    Subclasses implement ``_fetch_score``, which may raise on any failure or
    return ``None`` when the platform reports an unsuccessful lookup. ``fetch``
    never raises: both cases resolve to the caller's previous score.

    All outbound requests of a fetcher share one semaphore, which bounds the
    number of in-flight requests to the platform.
    """

    platform: Platform

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        max_concurrency: int | None = None,
    ) -> None:
        self.client = client
        self.base_url = base_url.rstrip("/")
        self._semaphore = asyncio.Semaphore(
            max_concurrency or settings.platform_max_concurrency
        )

    async def fetch(self, identifier: str | None, previous_score: int) -> StatResult:
        """Look up the current score, falling back to ``previous_score``."""
        try:
            score = await self._fetch_score(identifier, previous_score)
        except Exception as e:
            logger.warning(
                "Platform stat fetch failed, keeping previous score",
                platform=self.platform.value,
                identifier=identifier,
                previous_score=previous_score,
                error=str(e) or type(e).__name__,
            )
            return StatResult(score=previous_score)

        if score is None:
            logger.info(
                "Platform reported unsuccessful lookup, keeping previous score",
                platform=self.platform.value,
                identifier=identifier,
                previous_score=previous_score,
            )
            return StatResult(score=previous_score)

        return StatResult(score=score)

    @staticmethod
    def extract_score(stats: dict) -> int:
        """Score a successful stats payload for this platform."""
        raise NotImplementedError

    async def _fetch_score(self, identifier: str | None, previous_score: int) -> int | None:
        raise NotImplementedError

    async def _get_json(
        self,
        url: str,
        params: dict | None = None,
        headers: dict | None = None,
    ) -> Any:
        async with self._semaphore:
            response = await self.client.get(url, params=params, headers=headers)
        response.raise_for_status()
        return response.json()
