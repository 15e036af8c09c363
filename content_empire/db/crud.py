from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from content_empire.db import models

def normalize_username(username: str) -> str:
    username = username.strip()
    return username if username.startswith("@") else "@" + username

def count_posts(db: Session, status: Optional[str] = None) -> int:
    q = db.query(func.count(models.Post.id))
    if status is not None:
        q = q.filter(models.Post.status == status)
    return q.scalar() or 0

def list_posts_by_status(db: Session, status: str, limit: int = 20) -> List[models.Post]:
    return (
        db.query(models.Post)
        .filter(models.Post.status == status)
        .order_by(models.Post.created_at.desc())
        .limit(limit)
        .all()
    )

def set_post_status(db: Session, post_id: int, status: str) -> int:
    # no existence check; returns the number of rows touched
    return (
        db.query(models.Post)
        .filter(models.Post.id == post_id)
        .update({models.Post.status: status}, synchronize_session=False)
    )

def enqueue_post(db: Session, post_id: int, delay_seconds: int = 60,
                 platform: str = models.QUEUE_PLATFORM) -> models.QueueEntry:
    row = models.QueueEntry(
        post_id=post_id,
        platform=platform,
        scheduled_for=datetime.now(timezone.utc) + timedelta(seconds=delay_seconds),
    )
    db.add(row)
    return row

def create_source(db: Session, username: str, category: str) -> models.Source:
    obj = models.Source(username=normalize_username(username), category=category, is_active=True)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj

def list_sources(db: Session) -> List[models.Source]:
    return db.query(models.Source).order_by(models.Source.id).all()

def count_due_queue(db: Session, now: datetime) -> int:
    return (
        db.query(func.count(models.QueueEntry.id))
        .filter(models.QueueEntry.scheduled_for <= now)
        .scalar()
    ) or 0
