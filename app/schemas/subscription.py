from datetime import datetime
from app.schemas.common import ApiModel, PublicUserOut


class SubscriberResponse(ApiModel):
    id: str
    subscriber: PublicUserOut | None
    created_at: datetime


class SubscribedChannelResponse(ApiModel):
    id: str
    channel: PublicUserOut | None
    created_at: datetime
