"""Published video. The file and thumbnail live in the media store; only their URLs are kept here."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, Float, Integer, Boolean, DateTime, ForeignKey
from app.database import Base


class Video(Base):
    __tablename__ = "videos"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    video_file = Column(String(512), nullable=False)
    thumbnail = Column(String(512), nullable=False)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    duration = Column(Float, nullable=False, default=0.0)  # seconds
    views = Column(Integer, nullable=False, default=0)
    is_published = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
