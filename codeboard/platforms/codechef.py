import httpx

from codeboard.core.config import settings
from codeboard.db.models.user import Platform
from codeboard.platforms.base import StatFetcher


class CodeChefFetcher(StatFetcher):
    """Scores CodeChef users by the number of active days on their heatmap."""

    platform = Platform.CODECHEF

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        super().__init__(client, base_url or settings.codechef_api_url, max_concurrency)

    @staticmethod
    def extract_score(stats: dict) -> int:
        return len(stats.get("heatMap") or [])

    async def _fetch_score(self, identifier: str | None, previous_score: int) -> int | None:
        data = await self._get_json(f"{self.base_url}/handle/{identifier}")
        if not data.get("success"):
            return None
        return self.extract_score(data)
