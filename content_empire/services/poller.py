import logging
import threading
from typing import Any, Dict, Optional

from content_empire.services.commands import CommandHandler
from content_empire.services.telegram_api import TelegramClient, TelegramError

logger = logging.getLogger(__name__)

POLL_ERROR_DELAY = 5.0  # seconds to wait after a failed getUpdates


class BotPoller:
    def __init__(self, relay: TelegramClient, handler: CommandHandler, timeout: int = 30,
                 error_delay: float = POLL_ERROR_DELAY):
        self.relay = relay
        self.handler = handler
        self.timeout = timeout
        self.error_delay = error_delay
        self.offset: Optional[int] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def start(self) -> None:
        # a thread still finishing a long poll counts as running
        if self.running:
            logger.warning("bot poller already running")
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="bot-poller", daemon=True)
        self._thread.start()
        logger.info("bot poller started")

    def stop(self, join_timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(join_timeout)
            if self._thread.is_alive():
                logger.info("bot poller stopping after the current long poll")
                return
            self._thread = None
        logger.info("bot poller stopped")

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                self.poll_once()
            except TelegramError as e:
                logger.warning("getUpdates failed: %s", e)
                self._stop.wait(self.error_delay)
            except Exception:
                logger.exception("bot poll failed")
                self._stop.wait(self.error_delay)

    def poll_once(self, timeout: Optional[int] = None) -> int:
        updates = self.relay.get_updates(
            offset=self.offset,
            timeout=self.timeout if timeout is None else timeout,
        )
        for update in updates:
            update_id = update.get("update_id")
            if update_id is not None:
                self.offset = update_id + 1
            self.dispatch(update)
        return len(updates)

    def dispatch(self, update: Dict[str, Any]) -> None:
        message = update.get("message")
        if not message:
            return
        try:
            self.handler.handle(message)
        except Exception:
            # a single bad update must not stop the loop
            logger.exception("failed to handle update %s", update.get("update_id"))
