import threading
from unittest.mock import MagicMock

from content_empire.services.poller import BotPoller
from content_empire.services.telegram_api import TelegramError


def _update(update_id, text="/parse", chat_id=7):
    return {"update_id": update_id, "message": {"chat": {"id": chat_id}, "text": text}}


def test_poll_once_dispatches_in_order_and_advances_offset(make_relay):
    relay = make_relay(updates=[_update(10, "/start"), _update(11, "/stats")])
    handler = MagicMock()
    poller = BotPoller(relay, handler, timeout=0)

    assert poller.poll_once() == 2
    assert [c.args[0]["text"] for c in handler.handle.call_args_list] == ["/start", "/stats"]
    assert poller.offset == 12

    assert poller.poll_once() == 0
    assert relay.offsets == [None, 12]


def test_handler_failure_does_not_stop_batch(make_relay):
    relay = make_relay(updates=[_update(1), _update(2)])
    handler = MagicMock()
    handler.handle.side_effect = [RuntimeError("boom"), True]
    poller = BotPoller(relay, handler, timeout=0)

    assert poller.poll_once() == 2
    assert handler.handle.call_count == 2
    assert poller.offset == 3


def test_updates_without_message_are_skipped(make_relay):
    relay = make_relay(updates=[{"update_id": 5, "edited_message": {"text": "/start"}}])
    handler = MagicMock()
    poller = BotPoller(relay, handler, timeout=0)

    poller.poll_once()
    handler.handle.assert_not_called()
    assert poller.offset == 6


def test_loop_survives_poll_errors_and_stops():
    relay = MagicMock()
    handler = MagicMock()
    poller = BotPoller(relay, handler, timeout=0, error_delay=0.01)

    def _fail(**kwargs):
        poller._stop.set()
        raise TelegramError("network down")

    relay.get_updates.side_effect = _fail
    poller.start()
    poller.stop(join_timeout=2)

    assert not poller.running
    assert relay.get_updates.called


def test_update_without_id_keeps_offset(make_relay):
    relay = make_relay(updates=[{"message": {"chat": {"id": 7}, "text": "/parse"}}])
    handler = MagicMock()
    poller = BotPoller(relay, handler, timeout=0)
    poller.offset = 4

    assert poller.poll_once() == 1
    handler.handle.assert_called_once()
    assert poller.offset == 4


def test_loop_survives_unexpected_errors():
    relay = MagicMock()
    calls = []

    def _get_updates(**kwargs):
        calls.append(kwargs)
        if len(calls) == 1:
            raise KeyError("update_id")
        poller._stop.set()
        return []

    relay.get_updates.side_effect = _get_updates
    poller = BotPoller(relay, MagicMock(), timeout=0, error_delay=0.01)
    poller.start()
    poller._thread.join(2)

    assert len(calls) == 2
    assert not poller.running


def test_stop_keeps_thread_until_long_poll_returns():
    relay = MagicMock()
    release = threading.Event()
    entered = threading.Event()

    def _blocking_poll(**kwargs):
        entered.set()
        release.wait(5)
        return []

    relay.get_updates.side_effect = _blocking_poll
    poller = BotPoller(relay, MagicMock(), timeout=0)
    poller.start()
    assert entered.wait(2)

    poller.stop(join_timeout=0.05)
    assert poller.running

    poller.start()
    assert [t.name for t in threading.enumerate()].count("bot-poller") == 1

    release.set()
    poller.stop(join_timeout=2)
    assert not poller.running
