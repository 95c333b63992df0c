from datetime import datetime
from pydantic import field_validator
from app.schemas.common import ApiModel, OwnerOut, not_blank
from app.schemas.video import VideoResponse


class PlaylistCreate(ApiModel):
    name: str
    description: str = ""

    @field_validator("name")
    @classmethod
    def _name(cls, v):
        return not_blank(v, "name")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return (v or "").strip()


class PlaylistUpdate(ApiModel):
    """Omitted field = unchanged. Name cannot be blank or null; description "" or null clears it."""
    name: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v):
        if v is None:
            raise ValueError("name cannot be null")
        return not_blank(v, "name")


class PlaylistSummaryResponse(ApiModel):
    id: str
    name: str
    description: str
    total_videos: int
    created_at: datetime
    updated_at: datetime


class PlaylistDetailResponse(ApiModel):
    id: str
    name: str
    description: str
    owner: OwnerOut | None
    videos: list[VideoResponse]
    total_videos: int
    created_at: datetime
    updated_at: datetime
