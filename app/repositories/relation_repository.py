"""
Relation edges (likes, subscriptions). Edge existence is the liked/subscribed state.

Uniqueness is enforced by the table's unique constraint, not by locking: toggle() reads,
then deletes or creates, and a duplicate-key failure on create means a concurrent request
already turned the edge on, so toggle() reports active instead of failing.
"""
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.models.comment import Comment
from app.models.like import Like, LikeTarget
from app.models.subscription import Subscription
from app.models.tweet import Tweet
from app.models.user import User
from app.models.video import Video

logger = logging.getLogger(__name__)


class RelationStore:
    model: type
    # target type -> (model, label used in NotFound messages)
    targets: dict[str, tuple[type, str]] = {}

    def _key(self, subject_id: str, target_type: str, target_id: str) -> dict:
        raise NotImplementedError

    def _check(self, subject_id: str, target_type: str, target_id: str) -> None:
        """Hook for edge kinds with extra rules; runs before any lookup."""

    def _target(self, target_type) -> tuple[str, type, str]:
        target_type = getattr(target_type, "value", target_type)
        if target_type not in self.targets:
            raise ValidationError(f"Unsupported target type: {target_type}")
        model, label = self.targets[target_type]
        return target_type, model, label

    def find(self, db: Session, subject_id: str, target_type, target_id: str):
        target_type, _, _ = self._target(target_type)
        return db.query(self.model).filter_by(**self._key(subject_id, target_type, target_id)).first()

    def exists(self, db: Session, subject_id: str, target_type, target_id: str) -> bool:
        return self.find(db, subject_id, target_type, target_id) is not None

    def create(self, db: Session, subject_id: str, target_type, target_id: str) -> str:
        """Insert the edge. ConflictError if it already exists, NotFoundError if the target is gone."""
        target_type, model, label = self._target(target_type)
        self._check(subject_id, target_type, target_id)
        if db.query(model.id).filter(model.id == target_id).first() is None:
            raise NotFoundError(f"{label} not found")
        edge_id = str(uuid.uuid4())
        db.add(self.model(id=edge_id, **self._key(subject_id, target_type, target_id)))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError(f"{self.model.__name__} already exists")
        return edge_id

    def delete(self, db: Session, edge_id: str) -> None:
        db.query(self.model).filter(self.model.id == edge_id).delete(synchronize_session=False)
        db.commit()

    def toggle(self, db: Session, subject_id: str, target_type, target_id: str) -> bool:
        """Flip the edge. Returns the resulting state (True = edge exists)."""
        target_type, _, _ = self._target(target_type)
        self._check(subject_id, target_type, target_id)
        edge = self.find(db, subject_id, target_type, target_id)
        if edge is not None:
            self.delete(db, edge.id)
            return False
        try:
            self.create(db, subject_id, target_type, target_id)
        except ConflictError:
            logger.info(
                "%s toggle lost a race for subject %s target %s:%s; already active",
                self.model.__name__, subject_id, target_type, target_id,
            )
        return True


class LikeStore(RelationStore):
    model = Like
    targets = {
        LikeTarget.VIDEO.value: (Video, "Video"),
        LikeTarget.COMMENT.value: (Comment, "Comment"),
        LikeTarget.TWEET.value: (Tweet, "Tweet"),
    }

    def _key(self, subject_id, target_type, target_id):
        return {"liked_by_id": subject_id, "target_type": target_type, "target_id": target_id}

    def clear(self, db: Session, target_type, target_ids) -> int:
        """Delete every like on the given targets. Left uncommitted for the caller's delete."""
        target_type, _, _ = self._target(target_type)
        target_ids = list(target_ids)
        if not target_ids:
            return 0
        return (
            db.query(Like)
            .filter(Like.target_type == target_type, Like.target_id.in_(target_ids))
            .delete(synchronize_session=False)
        )


class SubscriptionStore(RelationStore):
    CHANNEL = "channel"

    model = Subscription
    targets = {CHANNEL: (User, "Channel")}

    def _key(self, subject_id, target_type, target_id):
        return {"subscriber_id": subject_id, "channel_id": target_id}

    def _check(self, subject_id, target_type, target_id):
        if subject_id == target_id:
            raise AuthorizationError("You cannot subscribe to yourself")


likes = LikeStore()
subscriptions = SubscriptionStore()
