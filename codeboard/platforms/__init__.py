import httpx

from codeboard.db.models.user import Platform
from codeboard.platforms.base import StatFetcher, StatResult
from codeboard.platforms.codechef import CodeChefFetcher
from codeboard.platforms.codeforces import CodeforcesFetcher
from codeboard.platforms.github import GitHubFetcher
from codeboard.platforms.leetcode import LeetCodeFetcher

FETCHER_CLASSES: dict[Platform, type[StatFetcher]] = {
    Platform.CODECHEF: CodeChefFetcher,
    Platform.CODEFORCES: CodeforcesFetcher,
    Platform.LEETCODE: LeetCodeFetcher,
    Platform.GITHUB: GitHubFetcher,
}


def build_fetchers(
    client: httpx.AsyncClient,
    max_concurrency: int | None = None,
) -> dict[Platform, StatFetcher]:
    """Create one fetcher per platform, all sharing ``client``.

    Fetchers hold per-platform semaphores, so build a fresh set inside each
    event loop that runs a refresh.
    """
    return {
        platform: fetcher_cls(client, max_concurrency=max_concurrency)
        for platform, fetcher_cls in FETCHER_CLASSES.items()
    }


__all__ = [
    "FETCHER_CLASSES",
    "CodeChefFetcher",
    "CodeforcesFetcher",
    "GitHubFetcher",
    "LeetCodeFetcher",
    "StatFetcher",
    "StatResult",
    "build_fetchers",
]
