import httpx

from codeboard.core.config import settings
from codeboard.db.models.user import Platform
from codeboard.platforms.base import StatFetcher, coerce_score


class CodeforcesFetcher(StatFetcher):
    """Scores Codeforces users by their community contribution."""

    platform = Platform.CODEFORCES

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        super().__init__(client, base_url or settings.codeforces_api_url, max_concurrency)

    @staticmethod
    def extract_score(stats: dict) -> int:
        # Contribution can go negative upstream; stored scores cannot.
        return coerce_score(stats.get("contribution"))

    async def _fetch_score(self, identifier: str | None, previous_score: int) -> int | None:
        data = await self._get_json(
            f"{self.base_url}/user.info",
            params={"handles": identifier},
        )
        if data.get("status") != "OK":
            return None
        return self.extract_score(data["result"][0])
