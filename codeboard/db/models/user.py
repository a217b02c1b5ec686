from enum import Enum

from sqlalchemy import Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from codeboard.db.models.base import Base, TimestampMixin


class Platform(str, Enum):
    CODECHEF = "codechef"
    CODEFORCES = "codeforces"
    LEETCODE = "leetcode"
    GITHUB = "github"


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    rollno: Mapped[str | None] = mapped_column(String(64))
    department: Mapped[str | None] = mapped_column(String(128))
    section: Mapped[str | None] = mapped_column(String(32))

    # {"codechef": {"username": "...", "score": 0}, ...}
    platforms: Mapped[dict] = mapped_column(JSONB, default=dict, nullable=False)
    total_score: Mapped[int] = mapped_column(default=0)
    rank: Mapped[int | None] = mapped_column()

    __table_args__ = (
        Index("idx_users_email", "email"),
        Index("idx_users_total_score", "total_score"),
        Index("idx_users_rank", "rank"),
    )

    def platform_username(self, platform: Platform) -> str | None:
        entry = (self.platforms or {}).get(platform.value) or {}
        return entry.get("username") or None

    def platform_score(self, platform: Platform) -> int:
        entry = (self.platforms or {}).get(platform.value) or {}
        return entry.get("score") or 0

    def __repr__(self) -> str:
        return f"<User {self.email} rank={self.rank}>"
