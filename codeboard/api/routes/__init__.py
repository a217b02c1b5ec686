from fastapi import APIRouter

from codeboard.api.routes.leaderboard import router as leaderboard_router
from codeboard.api.routes.users import router as users_router

router = APIRouter()

router.include_router(leaderboard_router, prefix="/leaderboard", tags=["leaderboard"])
router.include_router(users_router, prefix="/users", tags=["users"])
