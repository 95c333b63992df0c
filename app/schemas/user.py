from datetime import datetime
from pydantic import BaseModel, model_validator
from app.schemas.common import ApiModel, PublicUserOut


class UserResponse(ApiModel):
    id: str
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str | None = None
    created_at: datetime
    updated_at: datetime


class ChannelProfileResponse(PublicUserOut):
    email: str
    cover_image: str | None = None
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool
    created_at: datetime


class TokenPayload(BaseModel):
    sub: str  # user id
    exp: int
    type: str = "access"


class LoginRequest(ApiModel):
    """Login with email or username."""
    email: str | None = None
    username: str | None = None
    password: str

    @model_validator(mode="after")
    def _identifier_required(self):
        if not (self.email or "").strip() and not (self.username or "").strip():
            raise ValueError("username or email is required")
        return self


class RefreshRequest(ApiModel):
    refresh_token: str | None = None


class TokenResponse(ApiModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse | None = None
