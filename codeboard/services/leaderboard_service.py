import structlog

from codeboard.db.models.user import Platform, User
from codeboard.platforms import FETCHER_CLASSES
from codeboard.services.user_store import UserStore

logger = structlog.get_logger()


class LeaderboardService:
    """Service for reading the leaderboard and applying user-supplied stats."""

    def __init__(self, store: UserStore) -> None:
        self.store = store

    async def get_leaderboard(self) -> list[dict]:
        """Get every user's public projection, ordered by rank."""
        users = await self.store.list_by_rank()
        return [self._format_entry(user) for user in users]

    async def update_platform_stats(
        self,
        email: str,
        platform: Platform,
        username: str,
        stats: dict,
    ) -> bool:
        """Set one platform's username and score for the user with ``email``.

        Returns False when no user matches. Raises ValueError or TypeError when
        ``stats`` cannot be scored.
        """
        user = await self.store.find_by_email(email)
        if not user:
            return False

        score = FETCHER_CLASSES[platform].extract_score(stats)

        updated = await self.store.update_platform(user.id, platform, username, score)
        if updated:
            logger.info(
                "Platform stats updated",
                user_id=user.id,
                platform=platform.value,
                score=score,
            )
        return updated

    @staticmethod
    def _format_entry(user: User) -> dict:
        return {
            "name": user.name,
            "email": user.email,
            "total_score": user.total_score or 0,
            "rollno": user.rollno,
            "department": user.department,
            "section": user.section,
            "platforms": {
                platform.value: {
                    "username": user.platform_username(platform),
                    "score": user.platform_score(platform),
                }
                for platform in Platform
            },
            "rank": user.rank,
        }
