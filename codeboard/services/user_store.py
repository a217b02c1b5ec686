from typing import Any

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from codeboard.db.database import async_session_maker
from codeboard.db.models.user import Platform, User

logger = structlog.get_logger()


class UserStore:
    """Persistent user store backed by SQLAlchemy.

    Every operation opens its own session and commits it, so a failed write
    for one user never rolls back writes made for another.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.session_maker = session_maker

    async def find_all(self) -> list[User]:
        """All users in retrieval (id) order."""
        async with self.session_maker() as session:
            result = await session.execute(select(User).order_by(User.id))
            return list(result.scalars().all())

    async def count(self) -> int:
        async with self.session_maker() as session:
            result = await session.execute(select(func.count(User.id)))
            return result.scalar_one()

    async def find_by_id(self, user_id: int) -> User | None:
        async with self.session_maker() as session:
            return await session.get(User, user_id)

    async def find_by_email(self, email: str) -> User | None:
        async with self.session_maker() as session:
            result = await session.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def update_by_id(self, user_id: int, values: dict[str, Any]) -> bool:
        """Apply a partial column update. Returns False if no user matched."""
        async with self.session_maker() as session:
            result = await session.execute(
                update(User).where(User.id == user_id).values(**values)
            )
            await session.commit()
            return result.rowcount > 0

    async def update_scores(
        self,
        user_id: int,
        scores: dict[Platform, int],
        total_score: int,
    ) -> bool:
        """Write per-platform scores and the total, leaving usernames intact."""
        async with self.session_maker() as session:
            user = await session.get(User, user_id, with_for_update=True)
            if not user:
                return False

            platforms = {key: dict(entry) for key, entry in (user.platforms or {}).items()}
            for platform, score in scores.items():
                platforms.setdefault(platform.value, {})["score"] = score

            user.platforms = platforms
            user.total_score = total_score
            await session.commit()
            return True

    async def update_platform(
        self,
        user_id: int,
        platform: Platform,
        username: str,
        score: int,
    ) -> bool:
        """Replace one platform's username and score."""
        async with self.session_maker() as session:
            user = await session.get(User, user_id, with_for_update=True)
            if not user:
                return False

            platforms = {key: dict(entry) for key, entry in (user.platforms or {}).items()}
            platforms[platform.value] = {"username": username, "score": score}

            user.platforms = platforms
            await session.commit()
            return True

    async def update_rank(self, user_id: int, rank: int) -> bool:
        return await self.update_by_id(user_id, {"rank": rank})

    async def list_by_score(self) -> list[User]:
        """Users ordered by total score descending, ties by ascending id."""
        async with self.session_maker() as session:
            result = await session.execute(
                select(User).order_by(User.total_score.desc(), User.id)
            )
            return list(result.scalars().all())

    async def list_by_rank(self) -> list[User]:
        """Users ordered by rank; users never ranked come last."""
        async with self.session_maker() as session:
            result = await session.execute(
                select(User).order_by(User.rank.asc().nulls_last(), User.id)
            )
            return list(result.scalars().all())


def get_user_store() -> UserStore:
    """FastAPI dependency returning a store bound to the API session maker."""
    return UserStore(async_session_maker)
