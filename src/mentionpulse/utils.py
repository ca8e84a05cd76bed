"""Small shared helpers."""

from __future__ import annotations

import time
from datetime import datetime


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def iso_to_ms(value: str) -> int:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) into epoch ms."""
    return int(datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp() * 1000)
