from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.auth import get_current_user
from app.core.errors import NotFoundError
from app.core.responses import respond
from app.database import get_db
from app.models.comment import Comment
from app.models.like import LikeTarget
from app.models.user import User
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
from app.repositories.relation_repository import likes
from app.schemas.comment import CommentBody, CommentResponse

router = APIRouter(prefix="/api/v1/comments", tags=["comments"])


def _comment(db: Session, comment_id: str) -> CommentResponse:
    doc = first(db, feeds.comment_detail(comment_id))
    if doc is None:
        raise NotFoundError("Comment not found")
    return CommentResponse.model_validate(doc)


@router.get("/{video_id}")
def list_video_comments(
    video_id: str,
    options: ListOptions = Depends(list_options),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Comments on a video, newest first. Only page and limit apply."""
    video = get_visible_video(db, video_id, user.id)
    page = paginate(
        db,
        feeds.video_comments(video.id),
        options.page,
        options.limit,
        serialize=CommentResponse.model_validate,
    )
    return respond(page, "Comments fetched successfully")


@router.post("/{video_id}")
def add_comment(
    video_id: str,
    body: CommentBody,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    video = get_visible_video(db, video_id, user.id)
    comment = Comment(content=body.content, video_id=video.id, owner_id=user.id)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return respond(_comment(db, comment.id), "Comment added successfully", status.HTTP_201_CREATED)


@router.patch("/c/{comment_id}")
def update_comment(
    comment_id: str,
    body: CommentBody,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    comment = get_or_404(db, Comment, comment_id, "Comment")
    require_owner(comment, user.id, "update your own comments")
    update_owned(db, Comment, comment.id, user.id, {Comment.content: body.content})
    return respond(_comment(db, comment.id), "Comment updated successfully")


@router.delete("/c/{comment_id}")
def delete_comment(
    comment_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    comment = get_or_404(db, Comment, comment_id, "Comment")
    require_owner(comment, user.id, "delete your own comments")
    likes.clear(db, LikeTarget.COMMENT, [comment.id])
    delete_owned(db, Comment, comment.id, user.id)
    return respond({}, "Comment deleted successfully")
