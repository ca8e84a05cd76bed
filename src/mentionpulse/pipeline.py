"""Ingestion pipeline: wires source → score → store → spike check → broadcast."""

from __future__ import annotations

import itertools
import logging
import time
from collections import Counter
from collections.abc import Callable, Sequence
from typing import Any

import requests

from mentionpulse import config
from mentionpulse.broadcast import (
    FEED_STATE,
    KEYWORDS_UPDATED,
    NEW_MENTION,
    SPIKE_ALERT,
    BroadcastChannel,
)
from mentionpulse.cluster import cluster_mentions
from mentionpulse.keywords import parse_keywords
from mentionpulse.models import (
    Analytics,
    InitSnapshot,
    Mention,
    MentionPayload,
    MentionsPage,
    SpikeAlert,
)
from mentionpulse.sentiment import score
from mentionpulse.sources import MentionSource, XSourceError
from mentionpulse.spike import detect_spike
from mentionpulse.store import MentionStore
from mentionpulse.utils import now_ms

logger = logging.getLogger(__name__)


class MentionPipeline:
    """Owns the mention store, keyword set and feed toggle for one process.

    ``ingest`` is the only mutator of the store. Queries read snapshots.
    """

    def __init__(
        self,
        channel: BroadcastChannel,
        *,
        max_store: int = config.MAX_STORE,
        spike_window_ms: int = config.SPIKE_WINDOW_MS,
        spike_multiplier: float = config.SPIKE_THRESHOLD_MULTIPLIER,
        keywords: Sequence[str] | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._channel = channel
        self._store = MentionStore(max_store)
        self._spike_window_ms = spike_window_ms
        self._spike_multiplier = spike_multiplier
        self._keywords: list[str] = list(
            config.DEFAULT_KEYWORDS if keywords is None else keywords
        )
        self._clock = clock
        self._ids = itertools.count(1)
        self._feed_running = True

    # ── ingestion ───────────────────────────────────────────────────────

    def create_mention(self, payload: MentionPayload) -> Mention:
        """Assign the next id and score *payload* into an immutable Mention."""
        return Mention(
            id=str(next(self._ids)),
            source=payload.source,
            platform=payload.platform,
            text=payload.text,
            timestamp=payload.timestamp if payload.timestamp is not None else self._clock(),
            sentiment_score=score(payload.text),
        )

    def ingest(self, mention: Mention) -> None:
        """Store *mention*, broadcast it, then check the post-trim history for a spike."""
        history = self._store.append(mention)
        self._channel.emit(NEW_MENTION, mention.model_dump(mode="json"))

        if detect_spike(
            history,
            self._clock(),
            window_ms=self._spike_window_ms,
            multiplier=self._spike_multiplier,
        ):
            alert = SpikeAlert(timestamp=self._clock())
            logger.warning("Spike detected after mention %s", mention.id)
            self._channel.emit(SPIKE_ALERT, alert.model_dump())

    def submit(self, payload: MentionPayload) -> Mention:
        mention = self.create_mention(payload)
        self.ingest(mention)
        return mention

    def seed(
        self,
        source: MentionSource,
        count: int = config.SEED_COUNT,
        spacing_ms: int = 1200,
    ) -> int:
        """Ingest *count* mentions back-dated at *spacing_ms* intervals ending now."""
        seeded = 0
        for i in range(count):
            payload = source.next(self.keywords)
            if payload is None:
                break
            ts = self._clock() - (count - i) * spacing_ms
            self.submit(payload.model_copy(update={"timestamp": ts}))
            seeded += 1
        logger.info("Seeded %d mentions", seeded)
        return seeded

    # ── queries ─────────────────────────────────────────────────────────

    def fetch_mentions(
        self,
        q: str | None = None,
        limit: int = config.MAX_RETURNED,
        cluster_window: int = config.CLUSTER_WINDOW,
    ) -> MentionsPage:
        """Filtered mentions (newest first) plus topics over the newest of them."""
        snapshot = self._store.snapshot()
        needle = (q or "").lower()
        filtered = [m for m in snapshot if needle in m.text.lower()] if needle else list(snapshot)

        recent = filtered[-cluster_window:] if cluster_window > 0 else []
        return MentionsPage(
            total=len(filtered),
            mentions=filtered[::-1][: max(limit, 0)],
            topics=cluster_mentions(recent),
        )

    def analytics(self) -> Analytics:
        snapshot = self._store.snapshot()
        by_sentiment = Counter(m.sentiment_label for m in snapshot)
        return Analytics(
            total=len(snapshot),
            by_sentiment=dict(by_sentiment),
            last_updated=self._clock(),
        )

    def init_payload(self, limit: int = config.MAX_RETURNED) -> dict[str, Any]:
        """Snapshot for a newly connected observer: newest mentions, keywords, totals."""
        snapshot = InitSnapshot(
            mentions=list(self._store.snapshot()[::-1][: max(limit, 0)]),
            keywords=self.keywords,
            analytics=self.analytics(),
        )
        return snapshot.model_dump(mode="json")

    # ── keywords / feed control ────────────────────────────────────────

    @property
    def keywords(self) -> list[str]:
        return list(self._keywords)

    def update_keywords(self, value: Any) -> list[str]:
        """Replace the keyword set wholesale; raises KeywordValidationError on bad input."""
        keywords = parse_keywords(value)
        self._keywords = keywords
        logger.info("Keywords updated: %s", ", ".join(keywords))
        self._channel.emit(KEYWORDS_UPDATED, list(keywords))
        return list(keywords)

    @property
    def feed_running(self) -> bool:
        return self._feed_running

    def set_feed_running(self, running: bool) -> bool:
        self._feed_running = bool(running)
        logger.info("Feed %s", "started" if self._feed_running else "stopped")
        self._channel.emit(FEED_STATE, self._feed_running)
        return self._feed_running


class FeedRunner:
    """Pulls from a source on a fixed interval and submits to the pipeline."""

    def __init__(
        self,
        pipeline: MentionPipeline,
        source: MentionSource,
        interval_ms: int = config.SIMULATE_INTERVAL_MS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._pipeline = pipeline
        self._source = source
        self._interval_s = interval_ms / 1000
        self._sleep = sleep

    def tick(self) -> Mention | None:
        """Ingest one mention, or return None when paused or the source is dry."""
        if not self._pipeline.feed_running:
            return None
        payload = self._source.next(self._pipeline.keywords)
        if payload is None:
            return None
        return self._pipeline.submit(payload)

    def run(self, max_ticks: int | None = None) -> int:
        """Tick until *max_ticks* is reached (forever when None); return mentions ingested."""
        ingested = 0
        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            try:
                if self.tick() is not None:
                    ingested += 1
            except (XSourceError, requests.RequestException):
                logger.exception("Mention source failed; retrying next tick")
            ticks += 1
            if max_ticks is None or ticks < max_ticks:
                self._sleep(self._interval_s)
        return ingested
