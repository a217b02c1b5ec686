from pydantic import BaseModel


class PlatformEntry(BaseModel):
    username: str | None = None
    score: int = 0


class LeaderboardEntry(BaseModel):
    name: str
    email: str
    total_score: int
    rollno: str | None
    department: str | None
    section: str | None
    platforms: dict[str, PlatformEntry]
    rank: int | None

    model_config = {"from_attributes": True}
