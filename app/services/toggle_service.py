"""
Boundary around relation toggles: id format, target existence and the self-subscription
rule are checked here, and the edge is always attributed to the authenticated user.
"""
from sqlalchemy.orm import Session

from app.core.errors import AuthorizationError
from app.models.like import LikeTarget
from app.models.user import User
from app.repositories.entity_repository import get_or_404, get_visible_video
from app.repositories.relation_repository import SubscriptionStore, likes, subscriptions
from app.utils.ids import parse_id


def toggle_like(db: Session, user: User, target: LikeTarget, raw_target_id: str) -> dict:
    model, label = likes.targets[target.value]
    if target is LikeTarget.VIDEO:
        item = get_visible_video(db, raw_target_id, user.id)
    else:
        item = get_or_404(db, model, raw_target_id, label)
    return {"active": likes.toggle(db, user.id, target, item.id)}


def toggle_subscription(db: Session, user: User, raw_channel_id: str) -> dict:
    channel_id = parse_id(raw_channel_id, "channel")
    if channel_id == user.id:
        raise AuthorizationError("You cannot subscribe to yourself")
    channel = get_or_404(db, User, channel_id, "Channel")
    return {"active": subscriptions.toggle(db, user.id, SubscriptionStore.CHANNEL, channel.id)}
