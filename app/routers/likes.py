"""Like toggles for videos, comments and tweets. Each returns {active: bool} only."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.auth import get_current_user
from app.core.responses import respond
from app.database import get_db
from app.models.like import LikeTarget
from app.models.user import User
from app.query import feeds
from app.query.options import ListOptions, list_options
from app.query.pagination import paginate
from app.schemas.common import ToggleState
from app.schemas.like import LikedVideoResponse
from app.services.toggle_service import toggle_like

router = APIRouter(prefix="/api/v1/likes", tags=["likes"])


def _toggled(state: dict, label: str):
    verb = "liked" if state["active"] else "unliked"
    return respond(ToggleState(**state), f"{label} {verb} successfully")


@router.post("/toggle/v/{video_id}")
def toggle_video_like(video_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _toggled(toggle_like(db, user, LikeTarget.VIDEO, video_id), "Video")


@router.post("/toggle/c/{comment_id}")
def toggle_comment_like(comment_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _toggled(toggle_like(db, user, LikeTarget.COMMENT, comment_id), "Comment")


@router.post("/toggle/t/{tweet_id}")
def toggle_tweet_like(tweet_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _toggled(toggle_like(db, user, LikeTarget.TWEET, tweet_id), "Tweet")


@router.get("/videos")
def get_liked_videos(
    options: ListOptions = Depends(list_options),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Videos the requester liked, most recently liked first."""
    page = paginate(
        db,
        feeds.liked_videos(user.id),
        options.page,
        options.limit,
        serialize=LikedVideoResponse.model_validate,
    )
    return respond(page, "Liked videos fetched successfully")
