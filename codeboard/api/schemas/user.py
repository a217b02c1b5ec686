from pydantic import BaseModel, ConfigDict, Field


class PlatformStatsUpdate(BaseModel):
    # Fields are optional so missing ones surface as a 400, not a 422.
    email: str | None = None
    username: str | None = None
    stats: dict | None = None


class CodeforcesStatsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    username: str | None = Field(None, alias="codeforcesUsername")
    stats: dict | None = None


class MessageResponse(BaseModel):
    message: str
