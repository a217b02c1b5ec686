import httpx

from codeboard.core.config import settings
from codeboard.db.models.user import Platform
from codeboard.platforms.base import StatFetcher, coerce_score


class LeetCodeFetcher(StatFetcher):
    """Scores LeetCode users by total problems solved."""

    platform = Platform.LEETCODE

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        super().__init__(client, base_url or settings.leetcode_api_url, max_concurrency)

    @staticmethod
    def extract_score(stats: dict) -> int:
        return coerce_score(stats.get("totalSolved"))

    async def _fetch_score(self, identifier: str | None, previous_score: int) -> int | None:
        data = await self._get_json(f"{self.base_url}/{identifier}")
        if data.get("status") != "success":
            return None
        return self.extract_score(data)
