from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from content_empire.db import models
from content_empire.services.scheduler import QueueTrigger, report_due_entries


def _queue(session_factory, post_id, offset_seconds):
    db = session_factory()
    try:
        db.add(models.QueueEntry(
            post_id=post_id,
            platform=models.QUEUE_PLATFORM,
            scheduled_for=datetime.now(timezone.utc) + timedelta(seconds=offset_seconds),
        ))
        db.commit()
    finally:
        db.close()


def test_run_once_calls_drain():
    drain = MagicMock(return_value=3)
    trigger = QueueTrigger(drain)
    assert trigger.run_once() == 3
    drain.assert_called_once_with()


def test_invalid_cron_is_rejected():
    with pytest.raises(ValueError):
        QueueTrigger(MagicMock(), cron="not a cron")


def test_start_and_stop():
    trigger = QueueTrigger(MagicMock())
    trigger.start()
    try:
        assert trigger.running
        trigger.start()  # idempotent
        assert trigger.running
    finally:
        trigger.stop()
    assert not trigger.running


def test_report_due_entries_counts_only_due(store, session_factory, add_post):
    post_id = add_post(status="approved")
    _queue(session_factory, post_id, -120)
    _queue(session_factory, post_id, -1)
    _queue(session_factory, post_id, 3600)

    assert report_due_entries(store) == 2


def test_report_due_entries_on_store_failure(broken_store):
    assert report_due_entries(broken_store) is None


def test_scheduler_endpoints(client, drain_calls):
    assert client.get("/scheduler/status").json() == {"running": False, "cron": "* * * * *"}

    resp = client.post("/scheduler/run")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "due": 0}
    assert drain_calls == [1]
