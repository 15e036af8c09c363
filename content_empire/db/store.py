import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, NamedTuple, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from content_empire.db import crud, models

logger = logging.getLogger(__name__)


class Outcome(NamedTuple):
    ok: bool
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(True, value, None)

    @classmethod
    def failure(cls, error: str) -> "Outcome":
        return cls(False, None, error or "unknown datastore error")


class ContentStore:
    def __init__(self, session_factory: sessionmaker, queue_delay_seconds: int = 60):
        self.session_factory = session_factory
        self.queue_delay_seconds = queue_delay_seconds

    def _run(self, op: str, fn: Callable[[Session], Any]) -> Outcome:
        # each call gets its own session
        db = self.session_factory()
        try:
            return Outcome.success(fn(db))
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("store operation %s failed", op)
            return Outcome.failure(str(e))
        finally:
            db.close()

    def count_posts(self, status: Optional[str] = None) -> Outcome:
        return self._run("count_posts", lambda db: crud.count_posts(db, status))

    def post_counts(self) -> Outcome:
        def _counts(db: Session) -> Tuple[int, int]:
            return (
                crud.count_posts(db),
                crud.count_posts(db, models.PostStatus.published.value),
            )
        return self._run("post_counts", _counts)

    def pending_posts(self, limit: int = 20) -> Outcome:
        def _pending(db: Session) -> List[dict]:
            rows = crud.list_posts_by_status(db, models.PostStatus.pending.value, limit=limit)
            return [r.to_dict() for r in rows]
        return self._run("pending_posts", _pending)

    def decide(self, post_id: int, decision: str) -> Outcome:
        def _decide(db: Session) -> int:
            touched = crud.set_post_status(db, post_id, decision)
            if decision == models.Decision.approved.value:
                crud.enqueue_post(db, post_id, delay_seconds=self.queue_delay_seconds)
            db.commit()
            return touched
        return self._run("decide", _decide)

    def add_source(self, username: str, category: str = models.SourceCategory.news.value) -> Outcome:
        return self._run(
            "add_source",
            lambda db: crud.create_source(db, username, category).to_dict(),
        )

    def list_sources(self) -> Outcome:
        return self._run("list_sources", lambda db: [s.to_dict() for s in crud.list_sources(db)])

    def count_due_queue(self, now: Optional[datetime] = None) -> Outcome:
        now = now or datetime.now(timezone.utc)
        return self._run("count_due_queue", lambda db: crud.count_due_queue(db, now))
