"""
Like edge as a tagged variant: (liked_by, target_type, target_id).
A single composite unique constraint makes "liked" a pure function of edge existence.
"""
import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Index
from app.database import Base


class LikeTarget(str, enum.Enum):
    VIDEO = "video"
    COMMENT = "comment"
    TWEET = "tweet"


class Like(Base):
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("liked_by_id", "target_type", "target_id", name="uq_likes_subject_target"),
        Index("ix_likes_target", "target_type", "target_id"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    liked_by_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    target_type = Column(String(16), nullable=False)
    target_id = Column(String(36), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
