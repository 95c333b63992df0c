from datetime import datetime
from pydantic import field_validator
from app.schemas.common import ApiModel, OwnerOut, not_blank


class VideoResponse(ApiModel):
    id: str
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    owner: OwnerOut | None
    created_at: datetime
    updated_at: datetime


class VideoDetailResponse(VideoResponse):
    likes_count: int
    is_liked: bool = False


class VideoUpdate(ApiModel):
    """Omitted field = unchanged. Title cannot be blank; description "" or null clears it."""
    title: str | None = None
    description: str | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, v):
        return not_blank(v, "title")
