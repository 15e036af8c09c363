import enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from content_empire.db.base import Base


class PostStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    published = "published"


class Decision(str, enum.Enum):
    """Moderation outcomes an operator may record for a pending post."""
    approved = "approved"
    rejected = "rejected"


class SourceCategory(str, enum.Enum):
    news = "news"
    tech = "tech"
    business = "business"
    crypto = "crypto"
    entertainment = "entertainment"
    other = "other"


QUEUE_PLATFORM = "telegram"


class Post(Base):
    __tablename__ = "posts"
    id = Column(Integer, primary_key=True, index=True)
    source = Column(String(256), nullable=True)  # originating channel, e.g. '@news_feed'
    text = Column(Text)
    media_url = Column(String(1024), nullable=True)
    status = Column(String(32), default=PostStatus.pending.value, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "source": self.source,
            "text": self.text,
            "media_url": self.media_url,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Source(Base):
    __tablename__ = "sources"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(256), nullable=False)  # always '@'-prefixed
    category = Column(String(64), default=SourceCategory.news.value)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "category": self.category,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class QueueEntry(Base):
    __tablename__ = "queue"
    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    platform = Column(String(32), default=QUEUE_PLATFORM)
    scheduled_for = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
