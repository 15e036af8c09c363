from fastapi import Request
from sqlalchemy.engine import Engine

from content_empire.db.base import Base
from content_empire.db import models  # noqa: F401  registers tables on Base.metadata
from content_empire.db.store import ContentStore
from content_empire.services.scheduler import QueueTrigger

def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)

def get_store(request: Request) -> ContentStore:
    return request.app.state.store

def get_trigger(request: Request) -> QueueTrigger | None:
    return request.app.state.trigger

def get_pending_limit(request: Request) -> int:
    return request.app.state.pending_limit
