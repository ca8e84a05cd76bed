"""Bounded in-memory mention store with a parallel timestamp history."""

from __future__ import annotations

import logging
import threading

from mentionpulse.models import Mention

logger = logging.getLogger(__name__)


class MentionStore:
    """Append-only, oldest-first mention buffer trimmed FIFO to *capacity*.

    The timestamp history mirrors the mentions 1:1. Both are mutated under one
    lock so readers never see a half-trimmed pair.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._mentions: list[Mention] = []
        self._timestamps: list[int] = []
        self._lock = threading.Lock()

    # ── public ──────────────────────────────────────────────────────────

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, mention: Mention) -> tuple[int, ...]:
        """Add *mention*, trim both sequences, and return the post-trim history."""
        with self._lock:
            self._mentions.append(mention)
            self._timestamps.append(mention.timestamp)
            overflow = len(self._mentions) - self._capacity
            if overflow > 0:
                del self._mentions[:overflow]
                del self._timestamps[:overflow]
                logger.debug("Trimmed %d mention(s) over capacity %d", overflow, self._capacity)
            return tuple(self._timestamps)

    def snapshot(self) -> tuple[Mention, ...]:
        """Return an immutable copy of the stored mentions, oldest first."""
        with self._lock:
            return tuple(self._mentions)

    def timestamps(self) -> tuple[int, ...]:
        with self._lock:
            return tuple(self._timestamps)

    def __len__(self) -> int:
        with self._lock:
            return len(self._mentions)
