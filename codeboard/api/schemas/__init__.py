from codeboard.api.schemas.leaderboard import LeaderboardEntry, PlatformEntry
from codeboard.api.schemas.user import (
    CodeforcesStatsUpdate,
    MessageResponse,
    PlatformStatsUpdate,
)

__all__ = [
    "LeaderboardEntry",
    "PlatformEntry",
    "PlatformStatsUpdate",
    "CodeforcesStatsUpdate",
    "MessageResponse",
]
