import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.telegram.org"


class TelegramError(RuntimeError):
    pass


class TelegramClient:
    """Minimal Bot API client: outbound messages and long-poll updates."""

    def __init__(self, token: str, api_base: str = DEFAULT_API_BASE, poll_timeout: int = 30,
                 transport: Optional[httpx.BaseTransport] = None):
        if not token:
            raise RuntimeError("BOT_TOKEN is not set. Put it in .env or set it in the environment.")
        self.poll_timeout = poll_timeout
        self.base_url = f"{api_base.rstrip('/')}/bot{token}"
        # read timeout must outlast the long poll
        self.client = httpx.Client(
            timeout=httpx.Timeout(poll_timeout + 10, connect=5),
            transport=transport,
        )

    def _call(self, method: str, payload: Dict[str, Any]) -> Any:
        try:
            r = self.client.post(f"{self.base_url}/{method}", json=payload)
        except httpx.RequestError as e:
            raise TelegramError(f"Telegram {method} request failed: {e}") from e
        try:
            data = r.json()
        except ValueError:
            data = {}
        if r.status_code != 200 or not data.get("ok"):
            detail = data.get("description") or r.text[:500]
            raise TelegramError(f"Telegram API error {r.status_code} on {method}: {detail}")
        return data.get("result")

    def send_message(self, chat_id: int | str, text: str, parse_mode: Optional[str] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode
        return self._call("sendMessage", payload)

    def get_updates(self, offset: Optional[int] = None, timeout: Optional[int] = None) -> List[Dict[str, Any]]:
        payload: Dict[str, Any] = {
            "timeout": self.poll_timeout if timeout is None else timeout,
            "allowed_updates": ["message"],
        }
        if offset is not None:
            payload["offset"] = offset
        return self._call("getUpdates", payload) or []

    def close(self) -> None:
        self.client.close()
