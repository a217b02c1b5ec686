import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from codeboard.api.schemas.leaderboard import LeaderboardEntry
from codeboard.core.config import settings
from codeboard.services.leaderboard_service import LeaderboardService
from codeboard.services.refresh_service import run_refresh
from codeboard.services.user_store import UserStore, get_user_store
from codeboard.workers.tasks.leaderboard_tasks import schedule_refresh as refresh_task

logger = structlog.get_logger()

router = APIRouter()


@router.get(
    "",
    response_model=list[LeaderboardEntry],
    summary="Get leaderboard",
)
async def get_leaderboard(
    store: UserStore = Depends(get_user_store),
) -> list[LeaderboardEntry]:
    """Get every user ordered by rank, without refreshing."""
    service = LeaderboardService(store)
    try:
        entries = await service.get_leaderboard()
    except Exception as e:
        logger.error("Error fetching leaderboard", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e
    return [LeaderboardEntry.model_validate(e) for e in entries]


@router.post(
    "/refresh",
    response_model=list[LeaderboardEntry],
    summary="Refresh leaderboard",
)
async def refresh_leaderboard(
    synchronous: bool = Query(
        settings.refresh_synchronous_default,
        description="Wait for scores and ranks to be recomputed before responding",
    ),
    store: UserStore = Depends(get_user_store),
) -> list[LeaderboardEntry]:
    """Trigger a leaderboard refresh and return the leaderboard.

    Without ``synchronous`` the refresh is queued and the response holds the
    leaderboard as it stands before the refresh completes.
    """
    service = LeaderboardService(store)
    try:
        if synchronous:
            report = await run_refresh(store)
            logger.info("Manual refresh completed", **report.to_dict())
        else:
            result = refresh_task.delay()
            logger.info("Manual refresh queued", task_id=result.id)
        entries = await service.get_leaderboard()
    except Exception as e:
        logger.error("Error refreshing leaderboard", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e
    return [LeaderboardEntry.model_validate(e) for e in entries]
