"""Lookups shared by the entity routers: id format, existence, and owner gate."""
from sqlalchemy.orm import Session

from app.core.errors import AuthorizationError, NotFoundError
from app.models.video import Video
from app.utils.ids import parse_id


def get_or_404(db: Session, model: type, raw_id: str | None, label: str):
    """Validate the id format (400), then load the row (404)."""
    entity_id = parse_id(raw_id, label.lower())
    entity = db.query(model).filter(model.id == entity_id).first()
    if entity is None:
        raise NotFoundError(f"{label} not found")
    return entity


def get_visible_video(db: Session, raw_id: str | None, viewer_id: str) -> Video:
    """Like get_or_404, but another user's unpublished video is reported as not found."""
    video = get_or_404(db, Video, raw_id, "Video")
    if not video.is_published and video.owner_id != viewer_id:
        raise NotFoundError("Video not found")
    return video


def require_owner(entity, user_id: str, action: str) -> None:
    if entity.owner_id != user_id:
        raise AuthorizationError(f"You can only {action}")


def update_owned(db: Session, model: type, entity_id: str, owner_id: str, values: dict) -> int:
    """Single filter-based UPDATE keyed by (id, owner). Returns rows changed."""
    changed = (
        db.query(model)
        .filter(model.id == entity_id, model.owner_id == owner_id)
        .update(values, synchronize_session=False)
    )
    db.commit()
    return changed


def delete_owned(db: Session, model: type, entity_id: str, owner_id: str) -> int:
    deleted = (
        db.query(model)
        .filter(model.id == entity_id, model.owner_id == owner_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted
