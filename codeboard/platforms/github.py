import asyncio

import httpx
import structlog

from codeboard.core.config import settings
from codeboard.db.models.user import Platform
from codeboard.platforms.base import StatFetcher, coerce_score

logger = structlog.get_logger()

GITHUB_API_VERSION = "2022-11-28"


class GitHubFetcher(StatFetcher):
    """Scores GitHub users by commits across their public repositories.

    Commit lists for every repository are requested concurrently. A failing
    repository counts as zero commits instead of failing the whole lookup.
    """

    platform = Platform.GITHUB

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str | None = None,
        max_concurrency: int | None = None,
        token: str | None = None,
    ) -> None:
        super().__init__(client, base_url or settings.github_api_base_url, max_concurrency)
        self.headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        token = token or settings.github_token
        if token:
            self.headers["Authorization"] = f"token {token}"

    @staticmethod
    def extract_score(stats: dict) -> int:
        return coerce_score(stats.get("totalCommits"))

    async def _fetch_score(self, identifier: str | None, previous_score: int) -> int | None:
        if not identifier:
            return previous_score

        repos = await self._get_json(
            f"{self.base_url}/users/{identifier}/repos",
            params={"per_page": 100},
            headers=self.headers,
        )
        if not repos:
            return previous_score

        counts = await asyncio.gather(
            *(self._count_commits(identifier, repo["name"]) for repo in repos)
        )
        return sum(counts)

    async def _count_commits(self, owner: str, repo: str) -> int:
        try:
            commits = await self._get_json(
                f"{self.base_url}/repos/{owner}/{repo}/commits",
                params={"per_page": 100},
                headers=self.headers,
            )
        except Exception as e:
            logger.warning(
                "Failed to fetch repository commits",
                owner=owner,
                repo=repo,
                error=str(e) or type(e).__name__,
            )
            return 0
        return len(commits or [])
