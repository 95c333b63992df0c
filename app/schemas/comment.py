from datetime import datetime
from pydantic import field_validator
from app.schemas.common import ApiModel, OwnerOut, not_blank


class CommentBody(ApiModel):
    content: str

    @field_validator("content")
    @classmethod
    def _content(cls, v):
        return not_blank(v, "content")


class CommentResponse(ApiModel):
    id: str
    content: str
    video_id: str
    owner: OwnerOut | None
    likes_count: int = 0
    created_at: datetime
    updated_at: datetime
