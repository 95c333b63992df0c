from datetime import datetime
from app.schemas.common import ApiModel
from app.schemas.video import VideoResponse


class LikedVideoResponse(ApiModel):
    id: str
    liked_by_id: str
    video: VideoResponse
    created_at: datetime
