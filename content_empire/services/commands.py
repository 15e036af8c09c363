import logging
from typing import Any, Dict, Optional, Protocol

from content_empire.db.store import ContentStore

logger = logging.getLogger(__name__)


class Relay(Protocol):
    def send_message(self, chat_id: int | str, text: str, parse_mode: Optional[str] = None) -> Any: ...


PARSE_ACK = "🔍 Parsing started..."
STATS_TEMPLATE = "📊 Total posts: {total}"
STATS_UNAVAILABLE = "📊 Statistics are unavailable right now, try again later."


def welcome_text(bot_username: str) -> str:
    return (
        "🤖 <b>AI Content Empire</b>\n\n"
        "Manage content from the web app:\n"
        f"https://t.me/{bot_username}/app\n\n"
        "Or use the commands:\n"
        "/parse - start parsing\n"
        "/stats - statistics"
    )


def parse_command(text: str) -> Optional[str]:
    """'/stats@my_bot extra' -> 'stats'; None for anything that is not a command."""
    text = (text or "").strip()
    if not text.startswith("/"):
        return None
    head = text.split(maxsplit=1)[0][1:]
    return head.split("@", 1)[0] or None


class CommandHandler:
    def __init__(self, store: ContentStore, relay: Relay, bot_username: str):
        self.store = store
        self.relay = relay
        self.bot_username = bot_username
        self._handlers = {
            "start": self.on_start,
            "parse": self.on_parse,
            "stats": self.on_stats,
        }

    def handle(self, message: Dict[str, Any]) -> bool:
        """Dispatches one inbound message. Returns True when a command was handled."""
        command = parse_command(message.get("text", ""))
        chat_id = (message.get("chat") or {}).get("id")
        fn = self._handlers.get(command) if command else None
        if fn is None or chat_id is None:
            return False
        logger.info("chat %s: /%s", chat_id, command)
        fn(chat_id)
        return True

    def on_start(self, chat_id: int) -> None:
        self.relay.send_message(chat_id, welcome_text(self.bot_username), parse_mode="HTML")

    def on_parse(self, chat_id: int) -> None:
        # parsing itself is not implemented
        self.relay.send_message(chat_id, PARSE_ACK)

    def on_stats(self, chat_id: int) -> None:
        res = self.store.count_posts()
        text = STATS_TEMPLATE.format(total=res.value) if res.ok else STATS_UNAVAILABLE
        self.relay.send_message(chat_id, text)
