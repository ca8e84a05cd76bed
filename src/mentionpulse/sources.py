"""Mention sources: a simulated generator and an X Recent Search feed."""

from __future__ import annotations

import logging
import random
import time
from collections import deque
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any, Protocol

import requests

from mentionpulse.models import SOURCE_NAMES, MentionPayload, Platform
from mentionpulse.utils import iso_to_ms, now_ms

logger = logging.getLogger(__name__)


class MentionSource(Protocol):
    """Produces candidate mentions. *keywords* is a content hint only."""

    def next(self, keywords: Sequence[str]) -> MentionPayload | None: ...


# ── Simulated feed ─────────────────────────────────────────────────────────

SAMPLE_TEXTS: list[str] = [
    "Loving the new RapidQuest update — it's awesome and fast!",
    "RapidQuest rollout caused a major outage, customers are angry and frustrated",
    "Anyone else seeing issues after the product launch? app is slow",
    "Great pricing on the new plan, looks competitive.",
    "I hate how the onboarding works — terrible UX.",
    "Support fixed my issue quickly, nice response time!",
    "New campaign looks amazing — great creatives!",
    "There is a bug in the signup flow, keeps failing for some users",
    "Release notes didn't mention the breaking change, disappointed",
    "Amazing features shipped in this update, love it!",
]

# Probability that a generated mention is biased toward a tracked keyword
_KEYWORD_BIAS = 0.75


class SimulatedSource:
    """Random demo mentions drawn from a fixed pool of sample texts."""

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], int] = now_ms,
        texts: Sequence[str] = SAMPLE_TEXTS,
    ) -> None:
        self._rng = rng or random.Random()
        self._clock = clock
        self._texts = list(texts)
        self._platforms = list(Platform)

    def next(self, keywords: Sequence[str]) -> MentionPayload:
        platform = self._rng.choice(self._platforms)
        text = self._rng.choice(self._texts)

        if keywords and self._rng.random() < _KEYWORD_BIAS:
            kw = self._rng.choice(list(keywords))
            if kw.lower() not in text.lower():
                text = f"{kw} - {text}" if self._rng.random() < 0.5 else f"{text} #{kw}"

        return MentionPayload(
            source=SOURCE_NAMES[platform],
            platform=platform,
            text=text,
            timestamp=self._clock(),
        )


# ── X Recent Search feed ───────────────────────────────────────────────────

_RECENT_SEARCH_URL = "https://api.twitter.com/2/tweets/search/recent"
_TWEET_FIELDS = "created_at"
_QUERY_FILTERS = "-is:retweet lang:en"
_DEFAULT_RETRY_AFTER = 60

# Tweet ids remembered for de-duplication
_SEEN_LIMIT = 1000


class XSourceError(Exception):
    """Raised when the X API returns an unexpected response."""


def build_query(keywords: Sequence[str]) -> str:
    """OR-join *keywords* (quoted when multi-word) and append the standard filters."""
    clause = " OR ".join(f'"{kw}"' if " " in kw else kw for kw in keywords)
    return f"({clause}) {_QUERY_FILTERS}"


def retry_after_seconds(value: str | None) -> int:
    """Parse a ``Retry-After`` header given as seconds or as an HTTP date."""
    if not value:
        return _DEFAULT_RETRY_AFTER
    if value.strip().isdigit():
        return int(value)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.warning("Unparseable Retry-After %r; using %ds", value, _DEFAULT_RETRY_AFTER)
        return _DEFAULT_RETRY_AFTER
    return max(0, int((when - datetime.now(UTC)).total_seconds()))


class XSearchSource:
    """Pulls recent tweets matching the tracked keywords, one per ``next()``.

    Results are buffered; a new search runs only when the buffer is empty.
    Each search asks only for tweets newer than the newest one seen so far, and
    the most recent *seen_limit* ids are also skipped if X returns them again.
    """

    def __init__(
        self,
        bearer_token: str,
        max_results: int = 50,
        session: requests.Session | None = None,
        seen_limit: int = _SEEN_LIMIT,
    ) -> None:
        if not bearer_token:
            raise ValueError("X_BEARER_TOKEN is required but was empty.")
        self._max_results = min(max(max_results, 10), 100)
        self._session = session or requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {bearer_token}"})
        self._buffer: deque[MentionPayload] = deque()
        self._seen: set[str] = set()
        self._seen_order: deque[str] = deque()
        self._seen_limit = seen_limit
        self._since_id: int | None = None

    # ── public ──────────────────────────────────────────────────────────
    def next(self, keywords: Sequence[str]) -> MentionPayload | None:
        if not self._buffer and keywords:
            self._buffer.extend(self.search_recent(build_query(keywords)))
        return self._buffer.popleft() if self._buffer else None

    def search_recent(self, query: str) -> list[MentionPayload]:
        """Execute a single Recent Search query and return unseen payloads."""
        params: dict[str, Any] = {
            "query": query,
            "max_results": self._max_results,
            "tweet.fields": _TWEET_FIELDS,
        }
        if self._since_id is not None:
            params["since_id"] = str(self._since_id)
        data = self._get(params)
        tweets_raw: list[dict[str, Any]] = data.get("data", [])

        items: list[MentionPayload] = []
        for raw in tweets_raw:
            tweet_id = str(raw["id"])
            if tweet_id in self._seen:
                continue
            self._remember(tweet_id)
            created_at = raw.get("created_at")
            items.append(
                MentionPayload(
                    source=SOURCE_NAMES[Platform.TWITTER],
                    platform=Platform.TWITTER,
                    text=raw.get("text", ""),
                    timestamp=iso_to_ms(created_at) if created_at else None,
                )
            )

        logger.info("Fetched %d new tweets for query: %s", len(items), query)
        return items

    # ── private ─────────────────────────────────────────────────────────
    def _remember(self, tweet_id: str) -> None:
        self._seen.add(tweet_id)
        self._seen_order.append(tweet_id)
        while len(self._seen_order) > self._seen_limit:
            self._seen.discard(self._seen_order.popleft())
        if tweet_id.isdigit():
            self._since_id = max(self._since_id or 0, int(tweet_id))

    def _get(self, params: dict[str, Any]) -> dict[str, Any]:
        resp = self._session.get(_RECENT_SEARCH_URL, params=params, timeout=30)
        if resp.status_code == 429:
            retry_after = retry_after_seconds(resp.headers.get("Retry-After"))
            logger.warning("Rate-limited; sleeping %ds", retry_after)
            time.sleep(retry_after)
            resp = self._session.get(_RECENT_SEARCH_URL, params=params, timeout=30)
        if resp.status_code != 200:
            raise XSourceError(f"X API returned {resp.status_code}: {resp.text[:500]}")
        return resp.json()  # type: ignore[no-any-return]
