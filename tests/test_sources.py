"""Unit tests for mention sources."""

import random
from datetime import UTC, datetime, timedelta
from email.utils import format_datetime
from typing import Any

import pytest

from mentionpulse.models import SOURCE_NAMES, Platform
from mentionpulse.sources import (
    SAMPLE_TEXTS,
    SimulatedSource,
    XSearchSource,
    XSourceError,
    build_query,
    retry_after_seconds,
)


class TestSimulatedSource:
    def test_no_keywords_uses_sample_text(self) -> None:
        source = SimulatedSource(rng=random.Random(7), clock=lambda: 123)
        for _ in range(20):
            payload = source.next([])
            assert payload.text in SAMPLE_TEXTS
            assert payload.source == SOURCE_NAMES[payload.platform]
            assert payload.timestamp == 123

    def test_keyword_bias(self) -> None:
        source = SimulatedSource(rng=random.Random(7))
        texts = [source.next(["zebracorp"]).text for _ in range(50)]
        biased = [t for t in texts if "zebracorp" in t]
        assert biased
        for text in biased:
            assert text.startswith("zebracorp - ") or text.endswith(" #zebracorp")

    def test_keyword_already_present_left_alone(self) -> None:
        source = SimulatedSource(rng=random.Random(1), texts=["RapidQuest is down"])
        for _ in range(10):
            assert source.next(["rapidquest"]).text == "RapidQuest is down"

    def test_seeded_rng_is_reproducible(self) -> None:
        a = SimulatedSource(rng=random.Random(42), clock=lambda: 0)
        b = SimulatedSource(rng=random.Random(42), clock=lambda: 0)
        assert [a.next(["x"]) for _ in range(5)] == [b.next(["x"]) for _ in range(5)]


class _FakeResponse:
    def __init__(self, status_code: int, body: dict[str, Any] | None = None) -> None:
        self.status_code = status_code
        self._body = body or {}
        self.headers: dict[str, str] = {}
        self.text = str(self._body)

    def json(self) -> dict[str, Any]:
        return self._body


class _FakeSession:
    def __init__(self, responses: list[_FakeResponse]) -> None:
        self.headers: dict[str, str] = {}
        self.calls: list[dict[str, Any]] = []
        self._responses = responses

    def get(self, url: str, params: dict[str, Any], timeout: int) -> _FakeResponse:
        self.calls.append(params)
        return self._responses.pop(0)


def _tweets(*ids: str) -> dict[str, Any]:
    return {
        "data": [
            {"id": i, "text": f"tweet {i}", "created_at": "2024-01-01T00:00:00.000Z"}
            for i in ids
        ]
    }


class TestBuildQuery:
    def test_quotes_multi_word(self) -> None:
        assert build_query(["acme", "new plan"]) == '(acme OR "new plan") -is:retweet lang:en'


class TestXSearchSource:
    def test_requires_token(self) -> None:
        with pytest.raises(ValueError):
            XSearchSource(bearer_token="")

    def test_buffers_and_sets_auth(self) -> None:
        session = _FakeSession([_FakeResponse(200, _tweets("1", "2"))])
        source = XSearchSource("token", session=session)  # type: ignore[arg-type]
        assert session.headers["Authorization"] == "Bearer token"

        first = source.next(["acme"])
        second = source.next(["acme"])
        assert first is not None and second is not None
        assert (first.text, second.text) == ("tweet 1", "tweet 2")
        assert first.platform == Platform.TWITTER
        assert first.timestamp == 1_704_067_200_000
        assert len(session.calls) == 1

    def test_skips_seen_tweets(self) -> None:
        session = _FakeSession([
            _FakeResponse(200, _tweets("1")),
            _FakeResponse(200, _tweets("1", "2")),
        ])
        source = XSearchSource("token", session=session)  # type: ignore[arg-type]
        assert source.next(["acme"]).text == "tweet 1"  # type: ignore[union-attr]
        assert source.next(["acme"]).text == "tweet 2"  # type: ignore[union-attr]

    def test_empty_results(self) -> None:
        session = _FakeSession([_FakeResponse(200, {})])
        source = XSearchSource("token", session=session)  # type: ignore[arg-type]
        assert source.next(["acme"]) is None

    def test_no_keywords_no_request(self) -> None:
        session = _FakeSession([])
        source = XSearchSource("token", session=session)  # type: ignore[arg-type]
        assert source.next([]) is None
        assert session.calls == []

    def test_error_status_raises(self) -> None:
        session = _FakeSession([_FakeResponse(503)])
        source = XSearchSource("token", session=session)  # type: ignore[arg-type]
        with pytest.raises(XSourceError):
            source.next(["acme"])

    def test_max_results_clamped(self) -> None:
        session = _FakeSession([_FakeResponse(200, {})])
        source = XSearchSource("token", max_results=500, session=session)  # type: ignore[arg-type]
        source.next(["acme"])
        assert session.calls[0]["max_results"] == 100

    def test_since_id_tracks_newest_tweet(self) -> None:
        session = _FakeSession([
            _FakeResponse(200, _tweets("17", "42", "30")),
            _FakeResponse(200, {}),
        ])
        source = XSearchSource("token", session=session)  # type: ignore[arg-type]
        for _ in range(4):
            source.next(["acme"])
        assert "since_id" not in session.calls[0]
        assert session.calls[1]["since_id"] == "42"

    def test_seen_ids_stay_bounded(self) -> None:
        batches = (_tweets(*(str(n * 100 + i) for i in range(100))) for n in range(50))

        class _StreamSession(_FakeSession):
            def get(self, url: str, params: dict[str, Any], timeout: int) -> _FakeResponse:
                self.calls.append(params)
                return _FakeResponse(200, next(batches))

        session = _StreamSession([])
        source = XSearchSource("token", session=session, seen_limit=250)  # type: ignore[arg-type]
        for _ in range(5000):
            assert source.next(["acme"]) is not None
        assert len(session.calls) == 50
        assert len(source._seen) == len(source._seen_order) == 250
        assert "4999" in source._seen and "0" not in source._seen

    def test_rate_limit_with_http_date(self, monkeypatch: pytest.MonkeyPatch) -> None:
        slept: list[float] = []
        monkeypatch.setattr("mentionpulse.sources.time.sleep", slept.append)
        limited = _FakeResponse(429)
        limited.headers["Retry-After"] = "Wed, 21 Oct 2015 07:28:00 GMT"
        session = _FakeSession([limited, _FakeResponse(200, _tweets("1"))])
        source = XSearchSource("token", session=session)  # type: ignore[arg-type]
        assert source.next(["acme"]).text == "tweet 1"  # type: ignore[union-attr]
        assert slept == [0]
        assert len(session.calls) == 2


class TestRetryAfterSeconds:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("15", 15), (" 7 ", 7), (None, 60), ("", 60), ("soon", 60), ("-3", 60)],
    )
    def test_parses_or_falls_back(self, value: str | None, expected: int) -> None:
        assert retry_after_seconds(value) == expected

    def test_http_date_in_the_future(self) -> None:
        when = datetime.now(UTC) + timedelta(seconds=120)
        assert 110 <= retry_after_seconds(format_datetime(when, usegmt=True)) <= 120
