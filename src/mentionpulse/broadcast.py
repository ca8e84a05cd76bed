"""Broadcast channels that push pipeline events to observers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)

NEW_MENTION = "new_mention"
SPIKE_ALERT = "spike_alert"
KEYWORDS_UPDATED = "keywords_updated"
FEED_STATE = "feed_state"
INIT = "init"

Subscriber = Callable[[str, Any], None]


class BroadcastChannel(Protocol):
    """Fire-and-forget event sink. Implementations must not raise into the caller."""

    def emit(self, event: str, payload: Any) -> None: ...


class LoggingChannel:
    """Writes every event to the log; used by the CLI."""

    def emit(self, event: str, payload: Any) -> None:
        if event == SPIKE_ALERT:
            logger.warning("[%s] %s", event, payload)
        else:
            logger.info("[%s] %s", event, payload)


class FanoutChannel:
    """Delivers each event to every registered subscriber.

    A subscriber that raises is logged and skipped; the remaining subscribers
    still receive the event.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber, init: Callable[[], Any] | None = None) -> None:
        """Register *subscriber*; when *init* is given, send it ``init()`` first."""
        if init is not None:
            self._deliver(subscriber, INIT, init())
        self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: Subscriber) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    def emit(self, event: str, payload: Any) -> None:
        for subscriber in list(self._subscribers):
            self._deliver(subscriber, event, payload)

    @staticmethod
    def _deliver(subscriber: Subscriber, event: str, payload: Any) -> None:
        try:
            subscriber(event, payload)
        except Exception:
            logger.exception("Subscriber %r failed on %s", subscriber, event)
