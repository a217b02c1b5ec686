import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from codeboard.api.schemas.user import (
    CodeforcesStatsUpdate,
    MessageResponse,
    PlatformStatsUpdate,
)
from codeboard.db.models.user import Platform
from codeboard.services.leaderboard_service import LeaderboardService
from codeboard.services.user_store import UserStore, get_user_store

logger = structlog.get_logger()

router = APIRouter()


async def _apply_platform_update(
    store: UserStore,
    platform: Platform,
    email: str | None,
    username: str | None,
    stats: dict | None,
) -> MessageResponse:
    if not email or not username or stats is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields",
        )

    service = LeaderboardService(store)
    try:
        updated = await service.update_platform_stats(email, platform, username, stats)
    except (ValueError, TypeError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {platform.value} stats: {e}",
        ) from e

    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return MessageResponse(message="User stats updated successfully")


@router.post(
    "/platforms/{platform}",
    response_model=MessageResponse,
    summary="Update one platform's stats",
)
async def update_platform_stats(
    platform: str,
    payload: PlatformStatsUpdate,
    store: UserStore = Depends(get_user_store),
) -> MessageResponse:
    """Set a user's username and score for a single platform."""
    try:
        platform_enum = Platform(platform)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Platform {platform} not found",
        ) from None

    return await _apply_platform_update(
        store, platform_enum, payload.email, payload.username, payload.stats
    )


@router.post(
    "/update-codeforces-stats",
    response_model=MessageResponse,
    summary="Update Codeforces stats",
)
async def update_codeforces_stats(
    payload: CodeforcesStatsUpdate,
    store: UserStore = Depends(get_user_store),
) -> MessageResponse:
    """Legacy form of the Codeforces platform update."""
    return await _apply_platform_update(
        store, Platform.CODEFORCES, payload.email, payload.username, payload.stats
    )
