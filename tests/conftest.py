from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from content_empire.config import Settings
from content_empire.db.base import Base, make_engine, make_session_factory
from content_empire.db import models
from content_empire.db.store import ContentStore
from content_empire.main import create_app
from content_empire.services.scheduler import QueueTrigger


class FakeRelay:
    def __init__(self, updates=None):
        self.sent = []
        self.updates = list(updates or [])
        self.offsets = []

    def send_message(self, chat_id, text, parse_mode=None):
        self.sent.append({"chat_id": chat_id, "text": text, "parse_mode": parse_mode})
        return {"message_id": len(self.sent)}

    def get_updates(self, offset=None, timeout=None):
        self.offsets.append(offset)
        batch, self.updates = self.updates, []
        return batch


def _memory_engine():
    return make_engine("sqlite://", poolclass=StaticPool)


@pytest.fixture
def engine():
    eng = _memory_engine()
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def store(session_factory):
    return ContentStore(session_factory, queue_delay_seconds=60)


@pytest.fixture
def broken_store():
    # no tables: every query fails with OperationalError
    eng = _memory_engine()
    yield ContentStore(make_session_factory(eng))
    eng.dispose()


@pytest.fixture
def test_settings():
    s = Settings()
    s.bot_token = ""
    s.bot_username = "empire_bot"
    s.pending_limit = 20
    s.cors_origins = "*"
    return s


@pytest.fixture
def drain_calls():
    return []


@pytest.fixture
def make_client(test_settings, drain_calls):
    def _make(store):
        trigger = QueueTrigger(lambda: drain_calls.append(1) or 0)
        return TestClient(create_app(settings=test_settings, store=store, trigger=trigger))
    return _make


@pytest.fixture
def client(make_client, store):
    return make_client(store)


@pytest.fixture
def broken_client(make_client, broken_store):
    return make_client(broken_store)


@pytest.fixture
def add_post(session_factory):
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def _add(status="pending", minutes=0, text="hello"):
        db = session_factory()
        try:
            p = models.Post(source="@news_feed", text=text, status=status,
                            created_at=base + timedelta(minutes=minutes))
            db.add(p)
            db.commit()
            db.refresh(p)
            return p.id
        finally:
            db.close()
    return _add


@pytest.fixture
def relay():
    return FakeRelay()


@pytest.fixture
def make_relay():
    return FakeRelay
