"""
Playlists and their ordered membership. Adding appends at the end; a video is in a
playlist at most once, which the (playlist_id, video_id) unique constraint enforces.
"""
import logging
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.auth import get_current_user
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.responses import respond
from app.database import get_db
from app.models.playlist import Playlist, PlaylistVideo
from app.models.user import User
from app.models.video import Video
from app.query import feeds
from app.query.options import ListOptions, list_options
from app.query.pagination import paginate
from app.query.pipeline import first
from app.repositories.entity_repository import (
    delete_owned,
    get_or_404,
    get_visible_video,
    require_owner,
    update_owned,
)
from app.schemas.playlist import (
    PlaylistCreate,
    PlaylistDetailResponse,
    PlaylistSummaryResponse,
    PlaylistUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/playlists", tags=["playlists"])


def _detail(db: Session, playlist_id: str, user: User) -> PlaylistDetailResponse:
    doc = first(db, feeds.playlist_detail(playlist_id, user.id))
    if doc is None:
        raise NotFoundError("Playlist not found")
    return PlaylistDetailResponse.model_validate(doc)


def _owned_playlist(db: Session, raw_id: str, user: User, action: str) -> Playlist:
    playlist = get_or_404(db, Playlist, raw_id, "Playlist")
    require_owner(playlist, user.id, action)
    return playlist


def _touch(db: Session, playlist_id: str) -> None:
    db.query(Playlist).filter(Playlist.id == playlist_id).update(
        {Playlist.updated_at: datetime.utcnow()}, synchronize_session=False
    )


@router.post("")
def create_playlist(
    body: PlaylistCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    playlist = Playlist(name=body.name, description=body.description, owner_id=user.id)
    db.add(playlist)
    db.commit()
    db.refresh(playlist)
    return respond(_detail(db, playlist.id, user), "Playlist created successfully", status.HTTP_201_CREATED)


@router.get("/user/{user_id}")
def get_user_playlists(
    user_id: str,
    options: ListOptions = Depends(list_options),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    owner = get_or_404(db, User, user_id, "User")
    page = paginate(
        db,
        feeds.user_playlists(owner.id, user.id),
        options.page,
        options.limit,
        serialize=PlaylistSummaryResponse.model_validate,
    )
    return respond(page, "Playlists fetched successfully")


@router.get("/{playlist_id}")
def get_playlist(
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    playlist = get_or_404(db, Playlist, playlist_id, "Playlist")
    return respond(_detail(db, playlist.id, user), "Playlist fetched successfully")


@router.patch("/add/{video_id}/{playlist_id}")
def add_video_to_playlist(
    video_id: str,
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    playlist = _owned_playlist(db, playlist_id, user, "add videos to your own playlists")
    video = get_visible_video(db, video_id, user.id)

    exists = (
        db.query(PlaylistVideo.id)
        .filter(PlaylistVideo.playlist_id == playlist.id, PlaylistVideo.video_id == video.id)
        .first()
    )
    if exists:
        raise ConflictError("Video already in playlist")

    last = (
        db.query(func.max(PlaylistVideo.position))
        .filter(PlaylistVideo.playlist_id == playlist.id)
        .scalar()
    )
    db.add(PlaylistVideo(
        id=str(uuid.uuid4()),
        playlist_id=playlist.id,
        video_id=video.id,
        position=(last or 0) + 1,
    ))
    _touch(db, playlist.id)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Concurrent add of video %s to playlist %s", video.id, playlist.id)
        raise ConflictError("Video already in playlist")
    return respond(_detail(db, playlist.id, user), "Video added to playlist successfully")


@router.patch("/remove/{video_id}/{playlist_id}")
def remove_video_from_playlist(
    video_id: str,
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    playlist = _owned_playlist(db, playlist_id, user, "remove videos from your own playlists")
    video = get_or_404(db, Video, video_id, "Video")
    removed = (
        db.query(PlaylistVideo)
        .filter(PlaylistVideo.playlist_id == playlist.id, PlaylistVideo.video_id == video.id)
        .delete(synchronize_session=False)
    )
    if not removed:
        db.rollback()
        raise ValidationError("Video not in playlist")
    _touch(db, playlist.id)
    db.commit()
    return respond(_detail(db, playlist.id, user), "Video removed from playlist successfully")


@router.patch("/{playlist_id}")
def update_playlist(
    playlist_id: str,
    body: PlaylistUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """JSON: name and/or description. Omitted fields are left unchanged."""
    playlist = _owned_playlist(db, playlist_id, user, "update your own playlists")
    values = {}
    if "name" in body.model_fields_set:
        values[Playlist.name] = body.name
    if "description" in body.model_fields_set:
        values[Playlist.description] = (body.description or "").strip()
    if not values:
        raise ValidationError("At least one field is required to update")
    update_owned(db, Playlist, playlist.id, user.id, values)
    return respond(_detail(db, playlist.id, user), "Playlist updated successfully")


@router.delete("/{playlist_id}")
def delete_playlist(
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    playlist = _owned_playlist(db, playlist_id, user, "delete your own playlists")
    db.query(PlaylistVideo).filter(PlaylistVideo.playlist_id == playlist.id).delete(synchronize_session=False)
    delete_owned(db, Playlist, playlist.id, user.id)
    return respond({}, "Playlist deleted successfully")
