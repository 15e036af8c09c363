import logging
from typing import Any, Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from content_empire.db.store import ContentStore

logger = logging.getLogger(__name__)

JOB_ID = "queue_check"


def report_due_entries(store: ContentStore) -> Optional[int]:
    """Queue check wired into the trigger: reports due entries, publishes nothing."""
    res = store.count_due_queue()
    if not res.ok:
        logger.warning("queue check: store unavailable (%s)", res.error)
        return None
    logger.info("queue check: %d entries due", res.value)
    return res.value


class QueueTrigger:
    """Runs the injected drain callback on a cron schedule (every minute by default)."""

    def __init__(self, drain: Callable[[], Any], cron: str = "* * * * *", timezone: str = "UTC"):
        self.drain = drain
        self.cron = cron
        self.timezone = timezone
        self._trigger = CronTrigger.from_crontab(cron, timezone=timezone)
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return bool(self._scheduler and self._scheduler.running)

    def run_once(self) -> Any:
        return self.drain()

    def start(self) -> None:
        if self.running:
            return
        self._scheduler = BackgroundScheduler(timezone=self.timezone)
        self._scheduler.add_job(self.run_once, self._trigger, id=JOB_ID,
                                replace_existing=True, max_instances=1, coalesce=True)
        self._scheduler.start()
        logger.info("queue trigger started (cron=%s)", self.cron)

    def stop(self) -> None:
        if self.running:
            self._scheduler.shutdown(wait=False)
            logger.info("queue trigger stopped")
        self._scheduler = None
