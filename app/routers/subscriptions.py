from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.auth import get_current_user
from app.core.responses import respond
from app.database import get_db
from app.models.user import User
from app.query import feeds
from app.query.options import ListOptions, list_options
from app.query.pagination import paginate
from app.repositories.entity_repository import get_or_404
from app.schemas.common import ToggleState
from app.schemas.subscription import SubscribedChannelResponse, SubscriberResponse
from app.services.toggle_service import toggle_subscription

router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])


@router.post("/c/{channel_id}")
def toggle_channel_subscription(
    channel_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    state = toggle_subscription(db, user, channel_id)
    message = "Subscribed successfully" if state["active"] else "Unsubscribed successfully"
    return respond(ToggleState(**state), message)


@router.get("/c/subscribers/{channel_id}")
def get_channel_subscribers(
    channel_id: str,
    options: ListOptions = Depends(list_options),
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    channel = get_or_404(db, User, channel_id, "Channel")
    page = paginate(
        db,
        feeds.channel_subscribers(channel.id),
        options.page,
        options.limit,
        serialize=SubscriberResponse.model_validate,
    )
    return respond(page, "Subscribers fetched successfully")


@router.get("/u/subscribed-channels/{subscriber_id}")
def get_subscribed_channels(
    subscriber_id: str,
    options: ListOptions = Depends(list_options),
    _user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    subscriber = get_or_404(db, User, subscriber_id, "Subscriber")
    page = paginate(
        db,
        feeds.subscribed_channels(subscriber.id),
        options.page,
        options.limit,
        serialize=SubscribedChannelResponse.model_validate,
    )
    return respond(page, "Subscribed channels fetched successfully")
