"""
Video feed, publishing and owner-only mutations.
Fetching a video by id bumps its view counter with one atomic UPDATE before the read.
"""
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy import not_, or_
from sqlalchemy.orm import Session
from app.auth import get_current_user
from app.core.errors import NotFoundError, ValidationError
from app.core.responses import respond
from app.database import get_db
from app.models.comment import Comment
from app.models.like import LikeTarget
from app.models.playlist import PlaylistVideo
from app.models.user import User
from app.models.video import Video
from app.query import feeds
from app.query.options import ListOptions, list_options
from app.query.pagination import paginate
from app.query.pipeline import first
from app.repositories.entity_repository import delete_owned, get_or_404, require_owner, update_owned
from app.repositories.relation_repository import likes
from app.schemas.video import VideoDetailResponse, VideoResponse, VideoUpdate
from app.services.media_upload import MediaUploader, get_media_uploader
from app.utils.ids import parse_id

router = APIRouter(prefix="/api/v1/videos", tags=["videos"])


def _detail(db: Session, video_id: str, user: User) -> VideoDetailResponse:
    doc = first(db, feeds.video_detail(video_id, user.id))
    if doc is None:
        raise NotFoundError("Video not found")
    doc["is_liked"] = likes.exists(db, user.id, LikeTarget.VIDEO, video_id)
    return VideoDetailResponse.model_validate(doc)


def _owned_video(db: Session, raw_id: str, user: User, action: str) -> Video:
    video = get_or_404(db, Video, raw_id, "Video")
    require_owner(video, user.id, action)
    return video


@router.get("")
def list_videos(
    options: ListOptions = Depends(list_options),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Feed. ?query searches title and description; ?userId scopes to one channel."""
    page = paginate(
        db,
        feeds.video_feed(options, user.id),
        options.page,
        options.limit,
        serialize=VideoResponse.model_validate,
    )
    return respond(page, "Videos fetched successfully")


@router.post("")
def publish_video(
    title: str = Form(""),
    description: str = Form(""),
    video_file: UploadFile | None = File(None, alias="videoFile"),
    thumbnail: UploadFile | None = File(None),
    uploader: MediaUploader = Depends(get_media_uploader),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Multipart: title, description, videoFile, thumbnail."""
    if not title.strip():
        raise ValidationError("Title is required")
    if not video_file or not video_file.filename:
        raise ValidationError("Video file is required")
    if not thumbnail or not thumbnail.filename:
        raise ValidationError("Thumbnail is required")

    video_media, thumbnail_media = uploader.upload_files([(video_file, "video"), (thumbnail, "image")])

    video = Video(
        video_file=video_media.url,
        thumbnail=thumbnail_media.url,
        title=title.strip(),
        description=description.strip(),
        duration=video_media.duration or 0.0,
        owner_id=user.id,
    )
    db.add(video)
    db.commit()
    db.refresh(video)
    return respond(_detail(db, video.id, user), "Video uploaded successfully", status.HTTP_201_CREATED)


@router.get("/{video_id}")
def get_video(
    video_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    video_id = parse_id(video_id, "video")
    # Every fetch counts as a view, including the owner's and repeats
    db.query(Video).filter(
        Video.id == video_id,
        or_(Video.is_published == True, Video.owner_id == user.id),  # noqa: E712
    ).update({Video.views: Video.views + 1}, synchronize_session=False)
    db.commit()
    return respond(_detail(db, video_id, user), "Video fetched successfully")


@router.patch("/toggle/publish/{video_id}")
def toggle_publish_status(
    video_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    video = _owned_video(db, video_id, user, "toggle publish status of your own videos")
    update_owned(db, Video, video.id, user.id, {Video.is_published: not_(Video.is_published)})
    detail = _detail(db, video.id, user)
    state = "published" if detail.is_published else "unpublished"
    return respond(detail, f"Video {state} successfully")


@router.patch("/{video_id}")
def update_video(
    video_id: str,
    body: VideoUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """JSON: title and/or description. Omitted fields are left unchanged."""
    video = _owned_video(db, video_id, user, "update your own videos")
    values = {}
    if "title" in body.model_fields_set:
        if body.title is None:
            raise ValidationError("title cannot be null")
        values[Video.title] = body.title
    if "description" in body.model_fields_set:
        values[Video.description] = (body.description or "").strip()
    if not values:
        raise ValidationError("At least one field is required to update")
    update_owned(db, Video, video.id, user.id, values)
    return respond(_detail(db, video.id, user), "Video updated successfully")


@router.patch("/{video_id}/thumbnail")
def update_video_thumbnail(
    video_id: str,
    thumbnail: UploadFile | None = File(None),
    uploader: MediaUploader = Depends(get_media_uploader),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    video = _owned_video(db, video_id, user, "update your own videos")
    if not thumbnail or not thumbnail.filename:
        raise ValidationError("Thumbnail file is required")
    media = uploader.upload_file(thumbnail, "image")
    update_owned(db, Video, video.id, user.id, {Video.thumbnail: media.url})
    return respond(_detail(db, video.id, user), "Thumbnail updated successfully")


@router.delete("/{video_id}")
def delete_video(
    video_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    video = _owned_video(db, video_id, user, "delete your own videos")
    comment_ids = [row.id for row in db.query(Comment.id).filter(Comment.video_id == video.id)]
    likes.clear(db, LikeTarget.COMMENT, comment_ids)
    likes.clear(db, LikeTarget.VIDEO, [video.id])
    db.query(Comment).filter(Comment.video_id == video.id).delete(synchronize_session=False)
    db.query(PlaylistVideo).filter(PlaylistVideo.video_id == video.id).delete(synchronize_session=False)
    delete_owned(db, Video, video.id, user.id)
    return respond({}, "Video deleted successfully")
