from codeboard.services.batch_scheduler import BatchOutcome, BatchScheduler
from codeboard.services.leaderboard_service import LeaderboardService
from codeboard.services.rank_service import RankService, assign_ranks
from codeboard.services.refresh_service import (
    RefreshReport,
    RefreshService,
    refresh_time_limits,
    run_refresh,
)
from codeboard.services.score_aggregator import ScoreAggregator, ScoreUpdate
from codeboard.services.user_store import UserStore, get_user_store

__all__ = [
    "BatchOutcome",
    "BatchScheduler",
    "LeaderboardService",
    "RankService",
    "RefreshReport",
    "RefreshService",
    "ScoreAggregator",
    "ScoreUpdate",
    "UserStore",
    "assign_ranks",
    "get_user_store",
    "refresh_time_limits",
    "run_refresh",
]
